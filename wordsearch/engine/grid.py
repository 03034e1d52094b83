"""Grid representation and placement helpers."""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple

from ..core.constants import ALPHABET, DEFAULT_GRID_SIZE, EMPTY_CELL, Bounds, Direction
from ..core.exceptions import ConfigError
from ..core.models import Position
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class LetterGrid:
    """Mutable square letter grid used while a single puzzle is built."""

    def __init__(self, size: int = DEFAULT_GRID_SIZE) -> None:
        if size < 1:
            raise ConfigError(f"Grid size must be positive, got {size}")
        self.size = size
        self.bounds = Bounds(size)
        self.cells: List[List[str]] = [[EMPTY_CELL] * size for _ in range(size)]

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    def cell(self, row: int, col: int) -> str:
        return self.cells[row][col]

    def empty_count(self) -> int:
        return sum(1 for row in self.cells for letter in row if letter == EMPTY_CELL)

    def is_full(self) -> bool:
        return self.empty_count() == 0

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------
    def path(self, length: int, row: int, col: int, direction: Direction) -> List[Position]:
        return [(row + i * direction.drow, col + i * direction.dcol) for i in range(length)]

    def can_place(self, word: str, row: int, col: int, direction: Direction) -> bool:
        """Return True if ``word`` fits from ``(row, col)`` along ``direction``.

        A filled cell may be shared only when it already holds the letter the
        word would write there.
        """

        if not word:
            return False
        for index, (r, c) in enumerate(self.path(len(word), row, col, direction)):
            if not self.bounds.contains(r, c):
                return False
            existing = self.cells[r][c]
            if existing != EMPTY_CELL and existing != word[index]:
                return False
        return True

    def try_place(
        self, word: str, row: int, col: int, direction: Direction
    ) -> Optional[List[Position]]:
        """Write ``word`` into the grid and return its positions, or None.

        Rejected placements leave the grid untouched.
        """

        if not self.can_place(word, row, col, direction):
            return None
        positions = self.path(len(word), row, col, direction)
        for letter, (r, c) in zip(word, positions):
            self.cells[r][c] = letter
        return positions

    # ------------------------------------------------------------------
    # Filling
    # ------------------------------------------------------------------
    def fill(self, rng: random.Random, alphabet: Sequence[str] = ALPHABET) -> int:
        """Fill every empty cell with a random letter; return how many were filled."""

        filled = 0
        for r in range(self.size):
            for c in range(self.size):
                if self.cells[r][c] == EMPTY_CELL:
                    self.cells[r][c] = rng.choice(alphabet)
                    filled += 1
        if filled:
            LOGGER.debug("Filled %s empty cells with noise letters", filled)
        return filled

    def freeze(self) -> Tuple[str, ...]:
        """Return an immutable row-major copy of the grid."""

        return tuple("".join(row) for row in self.cells)
