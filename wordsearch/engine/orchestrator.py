"""Batch orchestration: allocate unique words per topic, then build puzzles.

Two scheduling strategies share the same bookkeeping:
  * sequential: topic i is allocated and built before topic i+1 starts.
  * concurrent: every allocation is in flight at once against the same
    used-word set; results are re-ordered by topic index before building.

Under the concurrent strategy the used-word set is updated in completion
order, so whichever topic's reply lands first claims any shared words.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union

from ..core.constants import (DEFAULT_GRID_SIZE, DEFAULT_WORDS_PER_PUZZLE,
                              MAX_ALLOCATION_ATTEMPTS, MAX_PLACEMENT_ATTEMPTS)
from ..core.exceptions import WordSearchError
from ..core.models import (AllocationFailure, BatchResult, ProgressEvent, Puzzle,
                           TopicFailure)
from ..data.allocator import (STRICT_FILTER, Allocation, AllocationPolicy,
                              WordAllocator, WordFilter)
from ..data.sources import WordSource
from ..data.used_words import UsedWordSet
from .builder import BuilderConfig, PuzzleBuilder
from .validator import PuzzleValidator
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]


class Strategy(str, Enum):
    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"


@dataclass
class BatchConfig:
    words_per_puzzle: int = DEFAULT_WORDS_PER_PUZZLE
    strategy: Strategy = Strategy.SEQUENTIAL
    grid_size: int = DEFAULT_GRID_SIZE
    max_placement_attempts: int = MAX_PLACEMENT_ATTEMPTS
    max_allocation_attempts: int = MAX_ALLOCATION_ATTEMPTS
    per_attempt_timeout: Optional[float] = None
    min_words: Optional[int] = None
    strict_words: bool = False
    seed: Optional[int] = None

    def to_builder_config(self) -> BuilderConfig:
        return BuilderConfig(
            grid_size=self.grid_size,
            max_placement_attempts=self.max_placement_attempts,
            seed=self.seed,
        )

    def to_policy(self) -> AllocationPolicy:
        return AllocationPolicy(
            max_attempts=self.max_allocation_attempts,
            per_attempt_timeout=self.per_attempt_timeout,
            min_words=self.min_words,
        )

    def word_filter(self) -> Optional[WordFilter]:
        if not self.strict_words:
            return None
        return WordFilter(
            pattern=STRICT_FILTER.pattern,
            min_length=STRICT_FILTER.min_length,
            max_length=min(STRICT_FILTER.max_length, self.grid_size),
        )


Outcome = Union[Puzzle, TopicFailure]


class BatchOrchestrator:
    """Runs a whole batch of topics and aggregates per-topic failures."""

    def __init__(
        self,
        allocator: Optional[WordAllocator] = None,
        builder: Optional[PuzzleBuilder] = None,
        strategy: Strategy | str = Strategy.SEQUENTIAL,
        on_progress: Optional[ProgressCallback] = None,
        validator: Optional[PuzzleValidator] = None,
    ) -> None:
        self.allocator = allocator or WordAllocator()
        self.builder = builder or PuzzleBuilder()
        self.strategy = Strategy(strategy)
        self.on_progress = on_progress
        self.validator = validator or PuzzleValidator()

    @classmethod
    def from_config(
        cls, config: BatchConfig, on_progress: Optional[ProgressCallback] = None
    ) -> "BatchOrchestrator":
        return cls(
            allocator=WordAllocator(config.to_policy(), config.word_filter()),
            builder=PuzzleBuilder(config.to_builder_config()),
            strategy=config.strategy,
            on_progress=on_progress,
        )

    # ------------------------------------------------------------------
    # Public entrypoints
    # ------------------------------------------------------------------
    async def run(
        self, topics: Sequence[str], per_puzzle_count: int, source: WordSource
    ) -> BatchResult:
        topics = list(topics)
        used_words = UsedWordSet()
        LOGGER.info(
            "Starting %s batch: %s topics, %s words each",
            self.strategy.value, len(topics), per_puzzle_count,
        )

        if self.strategy == Strategy.CONCURRENT:
            outcomes = await self._run_concurrent(topics, per_puzzle_count, used_words, source)
        else:
            outcomes = await self._run_sequential(topics, per_puzzle_count, used_words, source)

        result = BatchResult(used_words=used_words.snapshot())
        for outcome in outcomes:
            if isinstance(outcome, Puzzle):
                result.puzzles.append(outcome)
            else:
                result.failures.append(outcome)

        if not result.puzzles:
            result.error = (
                f"No puzzles could be generated ({len(result.failures)} of "
                f"{len(topics)} topics failed)"
            )
            LOGGER.error(result.error)
            self._emit(ProgressEvent(type="error", total=len(topics), error=result.error))
            return result

        LOGGER.info(
            "Batch completed: %s puzzles, %s skipped",
            len(result.puzzles), len(result.failures),
        )
        self._emit(ProgressEvent(
            type="end",
            current=len(topics),
            total=len(topics),
            status=f"{len(result.puzzles)} puzzles, {len(result.failures)} skipped",
            data=result,
        ))
        return result

    def run_sync(
        self, topics: Sequence[str], per_puzzle_count: int, source: WordSource
    ) -> BatchResult:
        return asyncio.run(self.run(topics, per_puzzle_count, source))

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------
    async def _run_sequential(
        self,
        topics: List[str],
        count: int,
        used_words: UsedWordSet,
        source: WordSource,
    ) -> List[Outcome]:
        total = len(topics)
        outcomes: List[Outcome] = []
        for index, topic in enumerate(topics):
            self._emit_started(index + 1, total, topic)
            _, allocation = await self._allocate(index, topic, count, used_words, source)
            outcome = self._finish(index, allocation)
            self._emit_completed(index + 1, total, topic, outcome)
            outcomes.append(outcome)
        return outcomes

    async def _run_concurrent(
        self,
        topics: List[str],
        count: int,
        used_words: UsedWordSet,
        source: WordSource,
    ) -> List[Outcome]:
        total = len(topics)
        for index, topic in enumerate(topics):
            self._emit_started(index + 1, total, topic)

        pending = [
            asyncio.ensure_future(self._allocate(index, topic, count, used_words, source))
            for index, topic in enumerate(topics)
        ]
        completed: List[Tuple[int, Allocation]] = []
        for finished in asyncio.as_completed(pending):
            index, allocation = await finished
            completed.append((index, allocation))
            status = "ok" if allocation.ok else "failed"
            self._emit(ProgressEvent(
                type="progress",
                current=len(completed),
                total=total,
                topic=allocation.topic,
                status=f"Allocated {len(completed)}/{total}: {allocation.topic} ({status})",
            ))

        completed.sort(key=lambda item: item[0])
        outcomes: List[Outcome] = []
        for index, allocation in completed:
            outcome = self._finish(index, allocation)
            self._emit_completed(index + 1, total, allocation.topic, outcome)
            outcomes.append(outcome)
        return outcomes

    # ------------------------------------------------------------------
    # Per-topic helpers
    # ------------------------------------------------------------------
    async def _allocate(
        self,
        index: int,
        topic: str,
        count: int,
        used_words: UsedWordSet,
        source: WordSource,
    ) -> Tuple[int, Allocation]:
        try:
            allocation = await self.allocator.allocate(topic, count, used_words, source)
        except Exception as exc:
            LOGGER.exception("Allocation for '%s' raised unexpectedly", topic)
            allocation = AllocationFailure(topic=topic, reason=f"unexpected error: {exc}", attempts=0)
        return index, allocation

    def _finish(self, index: int, allocation: Allocation) -> Outcome:
        if isinstance(allocation, AllocationFailure):
            return TopicFailure(index=index, topic=allocation.topic, reason=allocation.reason)
        try:
            puzzle = self.builder.build(allocation.words, topic=allocation.topic)
        except WordSearchError as exc:
            LOGGER.warning("Building '%s' failed: %s", allocation.topic, exc)
            return TopicFailure(index=index, topic=allocation.topic, reason=str(exc))
        validation = self.validator.validate(puzzle)
        if not validation.ok:
            return TopicFailure(
                index=index, topic=allocation.topic, reason="; ".join(validation.messages)
            )
        return puzzle

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def _emit_started(self, current: int, total: int, topic: str) -> None:
        LOGGER.info("--- %s/%s: '%s' ---", current, total, topic)
        self._emit(ProgressEvent(
            type="progress",
            current=current,
            total=total,
            topic=topic,
            status=f"Processing {current}/{total}: {topic}",
        ))

    def _emit_completed(self, current: int, total: int, topic: str, outcome: Outcome) -> None:
        if isinstance(outcome, Puzzle):
            status = f"Done {current}/{total}: {topic} ({len(outcome.placed_words)} words placed)"
        else:
            status = f"Skipped {current}/{total}: {topic} ({outcome.reason})"
        self._emit(ProgressEvent(
            type="progress", current=current, total=total, topic=topic, status=status,
        ))

    def _emit(self, event: ProgressEvent) -> None:
        if self.on_progress is None:
            return
        try:
            self.on_progress(event)
        except Exception as exc:
            LOGGER.warning("Progress listener failed on %s event: %s", event.type, exc)
