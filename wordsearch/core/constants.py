"""Shared constants and enumerations for the word-search generator."""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


DEFAULT_GRID_SIZE = 15
DEFAULT_WORDS_PER_PUZZLE = 15
MAX_PLACEMENT_ATTEMPTS = 100
MAX_ALLOCATION_ATTEMPTS = 10

ALPHABET = string.ascii_uppercase
EMPTY_CELL = ""


class Direction(Enum):
    """Unit vectors a word may run along.

    There is no LEFT or UP_LEFT: a word only reads backwards through the
    UP family.
    """

    RIGHT = (0, 1)
    DOWN = (1, 0)
    DOWN_RIGHT = (1, 1)
    UP = (-1, 0)
    UP_RIGHT = (-1, 1)

    @property
    def drow(self) -> int:
        return self.value[0]

    @property
    def dcol(self) -> int:
        return self.value[1]


DIRECTIONS: Tuple[Direction, ...] = tuple(Direction)


@dataclass(frozen=True)
class Bounds:
    """Square grid bounds helper."""

    size: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size
