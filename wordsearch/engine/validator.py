"""Deterministic rule validation for generated puzzles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..core.constants import ALPHABET, DIRECTIONS, Bounds
from ..core.exceptions import ValidationError
from ..core.models import PlacedWord, Puzzle
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class PuzzleValidator:
    """Runs deterministic validation over a finished puzzle."""

    def validate(self, puzzle: Puzzle) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_shape(puzzle)
            self._check_letters_valid(puzzle)
            for placed in puzzle.placed_words:
                self._check_placed_word(puzzle, placed)
        except ValidationError as exc:
            messages.append(str(exc))
            LOGGER.error("Validation failed for '%s': %s", puzzle.topic, exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    def _check_shape(self, puzzle: Puzzle) -> None:
        for r, row in enumerate(puzzle.grid):
            if len(row) != puzzle.size:
                raise ValidationError(
                    f"Row {r} has {len(row)} cells, expected {puzzle.size}"
                )

    def _check_letters_valid(self, puzzle: Puzzle) -> None:
        for r, row in enumerate(puzzle.grid):
            for c, letter in enumerate(row):
                if letter not in ALPHABET:
                    raise ValidationError(f"Invalid letter '{letter}' at ({r},{c})")

    def _check_placed_word(self, puzzle: Puzzle, placed: PlacedWord) -> None:
        word = placed.normalized_word
        if len(placed.positions) != len(word):
            raise ValidationError(
                f"'{word}' has {len(placed.positions)} positions for {len(word)} letters"
            )
        if placed.direction not in DIRECTIONS:
            raise ValidationError(f"'{word}' uses unsupported direction {placed.direction}")

        bounds = Bounds(puzzle.size)
        start_row, start_col = placed.start
        for index, (row, col) in enumerate(placed.positions):
            if not bounds.contains(row, col):
                raise ValidationError(f"'{word}' leaves the grid at ({row},{col})")
            expected = (
                start_row + index * placed.direction.drow,
                start_col + index * placed.direction.dcol,
            )
            if (row, col) != expected:
                raise ValidationError(
                    f"'{word}' is not a straight unit-step line at index {index}"
                )
            if puzzle.letter(row, col) != word[index]:
                raise ValidationError(
                    f"Grid holds '{puzzle.letter(row, col)}' at ({row},{col}), "
                    f"'{word}' expects '{word[index]}'"
                )
