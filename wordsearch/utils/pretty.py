"""Pretty-print helpers for word-search puzzles."""

from __future__ import annotations

import sys
from collections import Counter
from typing import TYPE_CHECKING, Set, Tuple

if TYPE_CHECKING:
    from ..core.models import BatchResult, Puzzle


HIDDEN = "."


def _render(rows, width: int) -> str:
    header_cells = [f"{c:>2}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for r, row in enumerate(rows):
        row_render = " ".join(f"{symbol:>2}" for symbol in row)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def format_puzzle(puzzle: Puzzle) -> str:
    return _render(puzzle.grid, puzzle.size)


def format_solution(puzzle: Puzzle) -> str:
    """Show only the letters that belong to placed words."""

    solution_cells: Set[Tuple[int, int]] = set()
    for placed in puzzle.placed_words:
        solution_cells.update(placed.positions)
    rows = [
        [letter if (r, c) in solution_cells else HIDDEN for c, letter in enumerate(row)]
        for r, row in enumerate(puzzle.grid)
    ]
    return _render(rows, puzzle.size)


def pretty_print_puzzle(puzzle: Puzzle, *, solution: bool = False, stream=None) -> None:
    """Print a puzzle (or its solution) followed by its word list."""

    stream = stream or sys.stdout
    print(f"== {puzzle.topic} ==" if puzzle.topic else "==", file=stream)
    print(format_solution(puzzle) if solution else format_puzzle(puzzle), file=stream)
    words = ", ".join(placed.original_word for placed in puzzle.placed_words)
    print(f"Words: {words}", file=stream)
    if puzzle.dropped_words:
        print(f"Dropped: {', '.join(puzzle.dropped_words)}", file=stream)


def print_batch_stats(result: BatchResult, *, stream=None) -> None:
    """Print a summary of a finished batch."""

    stream = stream or sys.stdout
    puzzles = result.puzzles
    placed_total = sum(len(p.placed_words) for p in puzzles)
    dropped_total = sum(p.dropped_count for p in puzzles)
    directions = Counter(
        placed.direction.name for p in puzzles for placed in p.placed_words
    )
    lengths = [len(placed.normalized_word) for p in puzzles for placed in p.placed_words]

    print("--- Batch ---", file=stream)
    print(f"  Puzzles:       {len(puzzles)}", file=stream)
    print(f"  Skipped:       {len(result.failures)}", file=stream)
    print(f"  Used words:    {len(result.used_words)}", file=stream)
    print(f"  Placed words:  {placed_total}", file=stream)
    print(f"  Dropped words: {dropped_total}", file=stream)
    if lengths:
        print(
            f"  Length range:  {min(lengths)}-{max(lengths)} (avg {sum(lengths) / len(lengths):.1f})",
            file=stream,
        )
    if directions:
        dist = " ".join(f"{name}:{count}" for name, count in sorted(directions.items()))
        print(f"  Directions:    {dist}", file=stream)

    if result.failures:
        print(file=stream)
        print("--- Skipped topics ---", file=stream)
        for failure in result.failures:
            print(f"  #{failure.index + 1} {failure.topic}: {failure.reason}", file=stream)

    if result.error:
        print(file=stream)
        print(f"Error: {result.error}", file=stream)
