"""Word-search puzzle book generator.

This package exposes the public API surface via:

- ``wordsearch.engine.builder.PuzzleBuilder``: lays words into a letter grid.
- ``wordsearch.data.allocator.WordAllocator``: acquires batch-unique words
  from a word source.
- ``wordsearch.engine.orchestrator.BatchOrchestrator``: runs a whole batch of
  topics sequentially or concurrently.
"""

from .engine.builder import BuilderConfig, PuzzleBuilder
from .data.allocator import AllocationPolicy, WordAllocator, WordFilter
from .data.used_words import UsedWordSet
from .engine.orchestrator import BatchConfig, BatchOrchestrator, Strategy

__all__ = [
    "AllocationPolicy",
    "BatchConfig",
    "BatchOrchestrator",
    "BuilderConfig",
    "PuzzleBuilder",
    "Strategy",
    "UsedWordSet",
    "WordAllocator",
    "WordFilter",
]

__version__ = "0.1.0"
