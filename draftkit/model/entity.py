"""Entities (links, images, files, tables) and the append-only map that stores them."""

from __future__ import annotations

import dataclasses as dc
import itertools
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from typing_extensions import Literal, TypeAlias

from draftkit.errors import UnknownEntityError

EntityType: TypeAlias = Literal["LINK", "IMAGE", "FILE", "TABLE"]
Mutability: TypeAlias = Literal["MUTABLE", "IMMUTABLE"]


@dc.dataclass(frozen=True)
class DraftEntity:
    """A structured annotation attached by reference to the characters it covers.

    `data` is read-only; an entity never changes after it is created.
    """

    type: str
    mutability: str
    data: Mapping[str, Any] = dc.field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        if not isinstance(self.data, MappingProxyType):
            object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "mutability": self.mutability, "data": dict(self.data)}


class EntityMap(Mapping[str, DraftEntity]):
    """Immutable mapping of entity-key to `DraftEntity`.

    Keys are the decimal strings "1", "2", ... in creation order. Creating an entity produces a new
    map with one more entry and returns the new key along with it, so callers never need to ask
    which entity was created last.

    Maps derived from one another by `create()` share an append-only store of `(position, entity)`
    by key; a map sees the first `_size` entries of it. Creating an entity from the newest map only
    appends to the store, so building a map one entity at a time stays linear. Creating one from an
    older map copies that map's own entries first.
    """

    __slots__ = ("_store", "_size")

    def __init__(self, entities: Optional[Mapping[str, DraftEntity]] = None):
        self._store: dict[str, tuple[int, DraftEntity]] = {
            key: (position, entity)
            for position, (key, entity) in enumerate((entities or {}).items())
        }
        self._size = len(self._store)

    def create(
        self, type: str, mutability: str, data: Optional[Mapping[str, Any]] = None
    ) -> tuple[EntityMap, str]:
        """Return `(new_map, key)` where `new_map` holds this map's entities plus the new one."""
        key = str(self._size + 1)
        entity = DraftEntity(type=type, mutability=mutability, data=data or {})

        store = self._store
        if len(store) != self._size:
            # -- a newer map already extends this one, branch off a copy of this map's entries --
            store = dict(itertools.islice(store.items(), self._size))
        store[key] = (self._size, entity)

        new_map = EntityMap.__new__(EntityMap)
        new_map._store = store
        new_map._size = self._size + 1
        return new_map, key

    def get(self, key: str, default: Any = None) -> Any:  # type: ignore[override]
        """The entity for `key`, raising `UnknownEntityError` when there is none.

        Unlike `Mapping.get()`, a missing key is an error unless `default` is provided.
        """
        entry = self._store.get(key)
        if entry is not None and entry[0] < self._size:
            return entry[1]
        if default is not None:
            return default
        raise UnknownEntityError(key)

    def __getitem__(self, key: str) -> DraftEntity:
        return self.get(key)

    def __iter__(self) -> Iterator[str]:
        return itertools.islice(self._store, self._size)

    def __len__(self) -> int:
        return self._size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityMap):
            return NotImplemented
        return dict(self.items()) == dict(other.items())

    def __hash__(self) -> int:
        return hash(tuple(self))

    def __repr__(self) -> str:
        return f"EntityMap({dict(self.items())!r})"
