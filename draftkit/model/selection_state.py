from __future__ import annotations

import dataclasses as dc
from typing import Any


@dc.dataclass(frozen=True)
class SelectionState:
    """A selection (or cursor, when collapsed) over the blocks of a content state.

    The anchor is where the selection started and the focus is where it ended, so the focus comes
    before the anchor when `is_backward` is True.
    """

    anchor_key: str
    anchor_offset: int = 0
    focus_key: str = ""
    focus_offset: int = 0
    is_backward: bool = False
    has_focus: bool = False

    def __post_init__(self):
        if not self.focus_key:
            object.__setattr__(self, "focus_key", self.anchor_key)

    @classmethod
    def create_empty(cls, key: str) -> SelectionState:
        """A collapsed selection at the start of block `key`."""
        return cls(anchor_key=key, focus_key=key)

    @property
    def is_collapsed(self) -> bool:
        return self.anchor_key == self.focus_key and self.anchor_offset == self.focus_offset

    @property
    def start_key(self) -> str:
        return self.focus_key if self.is_backward else self.anchor_key

    @property
    def start_offset(self) -> int:
        return self.focus_offset if self.is_backward else self.anchor_offset

    @property
    def end_key(self) -> str:
        return self.anchor_key if self.is_backward else self.focus_key

    @property
    def end_offset(self) -> int:
        return self.anchor_offset if self.is_backward else self.focus_offset

    def replace(self, **changes: Any) -> SelectionState:
        return dc.replace(self, **changes)
