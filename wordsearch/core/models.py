"""Data models produced by the word-search generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .constants import Direction


Position = Tuple[int, int]


@dataclass(frozen=True)
class PlacedWord:
    """A word written into the grid along one direction."""

    original_word: str
    normalized_word: str
    positions: Tuple[Position, ...]
    direction: Direction

    @property
    def start(self) -> Position:
        return self.positions[0]

    @property
    def end(self) -> Position:
        return self.positions[-1]

    def to_jsonable(self) -> dict:
        return {
            "word": self.original_word,
            "grid_word": self.normalized_word,
            "direction": self.direction.name,
            "positions": [list(pos) for pos in self.positions],
        }


@dataclass(frozen=True)
class Puzzle:
    """A finished, fully-filled word-search grid.

    ``placed_words`` may be a strict subset of the input words: words that
    found no legal spot within the attempt budget are listed in
    ``dropped_words`` instead.
    """

    grid: Tuple[str, ...]
    placed_words: Tuple[PlacedWord, ...]
    topic: str = ""
    dropped_words: Tuple[str, ...] = ()

    @property
    def size(self) -> int:
        return len(self.grid)

    @property
    def dropped_count(self) -> int:
        return len(self.dropped_words)

    def letter(self, row: int, col: int) -> str:
        return self.grid[row][col]

    def to_jsonable(self) -> dict:
        return {
            "topic": self.topic,
            "grid": list(self.grid),
            "placed_words": [word.to_jsonable() for word in self.placed_words],
            "dropped_words": list(self.dropped_words),
        }


@dataclass(frozen=True)
class AllocationResult:
    """Words accepted for one topic."""

    topic: str
    words: Tuple[str, ...]
    attempts: int

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class AllocationFailure:
    """Allocation gave up on a topic after exhausting its attempt budget."""

    topic: str
    reason: str
    attempts: int

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class TopicFailure:
    index: int
    topic: str
    reason: str


@dataclass
class ProgressEvent:
    """Status notification for a UI or CLI listener.

    ``type`` is ``"progress"`` for per-topic start/completion updates and
    ``"end"`` or ``"error"`` for the terminal event of a batch.
    """

    type: str
    current: int = 0
    total: int = 0
    topic: str = ""
    status: str = ""
    data: Optional[Any] = None
    error: Optional[str] = None


@dataclass
class BatchResult:
    puzzles: List[Puzzle] = field(default_factory=list)
    failures: List[TopicFailure] = field(default_factory=list)
    used_words: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return bool(self.puzzles) and self.error is None

    @property
    def skipped(self) -> int:
        return len(self.failures)
