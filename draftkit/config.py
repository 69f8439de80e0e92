"""
This module contains variables that can be tweaked by the system environment, for example whether
converted HTML is kept as a tree of nested blocks. Constants do NOT belong in this module. Constants
are values that should not be altered without making a code change (e.g. the set of font-weights
read as bold). Constants go into `./constants.py`.
"""

import os
from dataclasses import dataclass


@dataclass
class ENVConfig:
    """class for configuring environment parameters"""

    def _get_string(self, var: str, default_value: str = "") -> str:
        """attempt to get the value of var from the os environment; if not present return the
        default_value"""
        return os.environ.get(var, default_value)

    def _get_bool(self, var: str, default_value: bool) -> bool:
        if value := self._get_string(var):
            return value.lower() in ("true", "1", "t")
        return default_value

    @property
    def DRAFTKIT_TREE_DATA_SUPPORT(self) -> bool:
        """when True, converted HTML keeps nested blocks as a tree (parent/children/sibling keys)

        When False (the default), nested blocks are merged into one flat block per root.
        """
        return self._get_bool("DRAFTKIT_TREE_DATA_SUPPORT", False)

    @property
    def LOG_LEVEL(self) -> str:
        """name of the level the `draftkit` logger is set to by `get_logger()`"""
        return self._get_string("LOG_LEVEL", "WARNING")


env_config = ENVConfig()
