"""Puzzle construction: random trial placement followed by noise fill."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.constants import (ALPHABET, DEFAULT_GRID_SIZE, DIRECTIONS,
                              MAX_PLACEMENT_ATTEMPTS, Direction)
from ..core.exceptions import ConfigError
from ..core.models import PlacedWord, Puzzle
from ..data.normalization import normalize_word
from .grid import LetterGrid
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class BuilderConfig:
    grid_size: int = DEFAULT_GRID_SIZE
    max_placement_attempts: int = MAX_PLACEMENT_ATTEMPTS
    directions: Sequence[Direction] = DIRECTIONS
    alphabet: str = ALPHABET
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.grid_size < 1:
            raise ConfigError(f"grid_size must be positive, got {self.grid_size}")
        if self.max_placement_attempts < 1:
            raise ConfigError(
                f"max_placement_attempts must be positive, got {self.max_placement_attempts}"
            )
        if not self.directions:
            raise ConfigError("At least one placement direction is required")


class PuzzleBuilder:
    """Lays an ordered word list into a fresh grid.

    Earlier words claim cells first, so input order shapes the layout. A word
    that finds no spot within ``max_placement_attempts`` random trials is
    dropped from the puzzle rather than reported as an error.
    """

    def __init__(
        self,
        config: Optional[BuilderConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or BuilderConfig()
        self.rng = rng or random.Random(self.config.seed)

    def build(self, words: Sequence[str], topic: str = "") -> Puzzle:
        grid = LetterGrid(self.config.grid_size)
        placed: List[PlacedWord] = []
        dropped: List[str] = []

        for word in words:
            normalized = normalize_word(word)
            if not normalized:
                LOGGER.debug("Skipping '%s': nothing left after normalization", word)
                continue
            entry = self.place_word(grid, word, normalized)
            if entry is None:
                dropped.append(word)
                continue
            placed.append(entry)

        grid.fill(self.rng, self.config.alphabet)
        if dropped:
            LOGGER.info(
                "Puzzle '%s': placed %s words, dropped %s (%s)",
                topic, len(placed), len(dropped), ", ".join(dropped),
            )
        else:
            LOGGER.debug("Puzzle '%s': placed %s words", topic, len(placed))
        return Puzzle(
            grid=grid.freeze(),
            placed_words=tuple(placed),
            topic=topic,
            dropped_words=tuple(dropped),
        )

    def place_word(self, grid: LetterGrid, word: str, normalized: str) -> Optional[PlacedWord]:
        """Run the random trial loop for one word."""

        for attempt in range(1, self.config.max_placement_attempts + 1):
            direction = self.rng.choice(self.config.directions)
            row = self.rng.randrange(grid.size)
            col = self.rng.randrange(grid.size)
            positions = grid.try_place(normalized, row, col, direction)
            if positions is None:
                continue
            LOGGER.debug(
                "Placed %s at (%s,%s) %s on attempt %s",
                normalized, row, col, direction.name, attempt,
            )
            return PlacedWord(
                original_word=word,
                normalized_word=normalized,
                positions=tuple(positions),
                direction=direction,
            )
        LOGGER.debug(
            "Dropping %s after %s placement attempts",
            normalized, self.config.max_placement_attempts,
        )
        return None
