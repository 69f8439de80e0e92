"""Per-character style and entity annotation."""

from __future__ import annotations

from typing import ClassVar, Iterable, Optional

from typing_extensions import TypeAlias

InlineStyle: TypeAlias = "tuple[str, ...]"
"""An ordered collection of unique style identifiers like `("BOLD", "ITALIC")`.

Order is the order styles were applied in. It is significant only for serialization; two inline
styles holding the same identifiers in different order are the same style.
"""


def with_style(style: InlineStyle, name: str) -> InlineStyle:
    """`style` with `name` appended, unless it's already there."""
    return style if name in style else (*style, name)


def without_style(style: InlineStyle, name: str) -> InlineStyle:
    """`style` without `name`."""
    return tuple(s for s in style if s != name) if name in style else style


class CharacterMetadata:
    """Immutable style and entity annotation of a single character.

    Most characters in a document share a small number of distinct annotations, so instances are
    interned: use `CharacterMetadata.create()` rather than the constructor and equal metadata will
    usually be the identical object. Equality does not depend on interning though; two instances
    are equal when their style sets and entity keys match.
    """

    __slots__ = ("_style", "_entity", "_hash")

    _pool: ClassVar[dict[tuple[InlineStyle, Optional[str]], CharacterMetadata]] = {}

    EMPTY: ClassVar[CharacterMetadata]

    def __init__(self, style: Iterable[str] = (), entity: Optional[str] = None):
        self._style: InlineStyle = tuple(dict.fromkeys(style))
        self._entity = entity
        self._hash = hash((frozenset(self._style), entity))

    @classmethod
    def create(cls, style: Iterable[str] = (), entity: Optional[str] = None) -> CharacterMetadata:
        """The interned metadata having `style`, in that order, and `entity`.

        Metadata is interned per style order, so the order asked for is the order serialized no
        matter which order was created first.
        """
        style = tuple(dict.fromkeys(style))
        pool_key = (style, entity)
        if (existing := cls._pool.get(pool_key)) is not None:
            return existing
        metadata = cls(style, entity)
        cls._pool[pool_key] = metadata
        return metadata

    @classmethod
    def apply_style(cls, record: CharacterMetadata, style: str) -> CharacterMetadata:
        return cls.create(with_style(record.style, style), record.entity)

    @classmethod
    def remove_style(cls, record: CharacterMetadata, style: str) -> CharacterMetadata:
        return cls.create(without_style(record.style, style), record.entity)

    @classmethod
    def apply_entity(cls, record: CharacterMetadata, entity: Optional[str]) -> CharacterMetadata:
        return cls.create(record.style, entity)

    @property
    def style(self) -> InlineStyle:
        return self._style

    @property
    def entity(self) -> Optional[str]:
        return self._entity

    def has_style(self, style: str) -> bool:
        return style in self._style

    def is_empty(self) -> bool:
        """True when this metadata carries neither a style nor an entity."""
        return not self._style and self._entity is None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CharacterMetadata):
            return NotImplemented
        return frozenset(self._style) == frozenset(other._style) and self._entity == other._entity

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        return f"CharacterMetadata(style={self._style!r}, entity={self._entity!r})"


CharacterMetadata.EMPTY = CharacterMetadata.create()
