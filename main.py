"""CLI entrypoint for the word-search puzzle book generator."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from wordsearch.core.exceptions import LLMClientError, SubthemeError
from wordsearch.core.models import ProgressEvent
from wordsearch.data.sources import DummyWordSource, LLMWordSource, SubthemeGenerator
from wordsearch.engine.orchestrator import BatchConfig, BatchOrchestrator, Strategy
from wordsearch.engine.puzzle_store import PuzzleStore
from wordsearch.utils.logger import configure_logging, get_logger
from wordsearch.utils.pretty import pretty_print_puzzle, print_batch_stats

LOGGER = get_logger("wordsearch.cli")

TEST_MODE_COUNT = 5


def parse_topics_file(path: Path) -> List[str]:
    """Read topics from a file, one per line. Blank lines and # comments are skipped."""
    entries: List[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        entries.append(line)
    return entries


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a batch of word-search puzzles with batch-unique words",
    )
    parser.add_argument("--category", type=str, default="", help="Broad category to split into sub-themes")
    parser.add_argument("--topics", nargs="+", metavar="TOPIC", help="Explicit puzzle topics (skips sub-theme generation)")
    parser.add_argument("--topics-file", type=Path, metavar="FILE", help="File with one topic per line")
    parser.add_argument("--count", type=int, default=100, help="Number of puzzles / sub-themes to request")
    parser.add_argument("--test", action="store_true", help=f"Test mode: only {TEST_MODE_COUNT} puzzles")
    parser.add_argument("--words-per-puzzle", type=int, default=15, help="Words required per puzzle")
    parser.add_argument("--grid-size", type=int, default=15, help="Square grid size in cells")
    parser.add_argument(
        "--strategy",
        type=str,
        choices=[s.value for s in Strategy],
        default=Strategy.SEQUENTIAL.value,
        help="Run topics one after another or all allocations concurrently",
    )
    parser.add_argument(
        "--source",
        type=str,
        choices=["ollama", "gemini", "dummy"],
        default="ollama",
        help="Word source backend",
    )
    parser.add_argument("--model", type=str, help="Override the LLM model name")
    parser.add_argument("--strict", action="store_true", help="Only accept single alphabetic words of 3-15 letters")
    parser.add_argument("--min-words", type=int, help="Accept shorter word lists of at least this size after all attempts fail")
    parser.add_argument("--max-attempts", type=int, default=10, help="Word source attempts per topic")
    parser.add_argument("--timeout", type=float, help="Per-attempt word source timeout in seconds")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible layouts")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument("--pdf", type=Path, help="Optional path to PDF output")
    parser.add_argument("--cover", type=Path, help="Image drawn as a full-page cover before the puzzles (needs --pdf)")
    parser.add_argument("--store", action="store_true", help="Save the batch under local_db/collections/puzzles")
    parser.add_argument("--print", dest="print_puzzles", action="store_true", help="Print puzzles and solutions to stdout")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def build_client(args: argparse.Namespace):
    if args.source == "gemini":
        from wordsearch.io.gemini_client import GeminiClient

        return GeminiClient(model_name=args.model) if args.model else GeminiClient()
    from wordsearch.io.ollama_client import OllamaClient

    return OllamaClient(model_name=args.model) if args.model else OllamaClient()


def log_progress(event: ProgressEvent) -> None:
    if event.type == "progress":
        LOGGER.info("[%s/%s] %s", event.current, event.total, event.status)
    elif event.type == "error":
        LOGGER.error("Batch failed: %s", event.error)
    else:
        LOGGER.info("Batch finished: %s", event.status)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    count = TEST_MODE_COUNT if args.test else args.count
    if count < 1:
        parser.error("--count must be positive")
    if args.words_per_puzzle < 1:
        parser.error("--words-per-puzzle must be positive")
    if args.min_words is not None and args.min_words < 1:
        parser.error("--min-words must be positive")

    topics: List[str] = []
    if args.topics:
        topics.extend(args.topics)
    if args.topics_file:
        topics.extend(parse_topics_file(args.topics_file))
    if not topics and not args.category:
        parser.error("provide --category or --topics / --topics-file")
    if args.cover and not args.pdf:
        parser.error("--cover requires --pdf")
    if args.cover and not args.cover.is_file():
        parser.error(f"cover image not found: {args.cover}")

    config = BatchConfig(
        words_per_puzzle=args.words_per_puzzle,
        strategy=Strategy(args.strategy),
        grid_size=args.grid_size,
        max_allocation_attempts=args.max_attempts,
        per_attempt_timeout=args.timeout,
        min_words=args.min_words,
        strict_words=args.strict,
        seed=args.seed,
    )

    if args.source == "dummy":
        source = DummyWordSource(words_per_reply=args.words_per_puzzle, seed=args.seed)
        if not topics:
            topics = list(source.buckets)
    else:
        try:
            client = build_client(args)
        except LLMClientError as exc:
            LOGGER.error("%s", exc)
            return 2
        if not topics:
            try:
                topics = asyncio.run(SubthemeGenerator(client).generate(args.category, count))
            except SubthemeError as exc:
                LOGGER.error("%s", exc)
                return 1
        source = LLMWordSource(client, words_per_puzzle=args.words_per_puzzle, category=args.category)

    topics = topics[:count]
    orchestrator = BatchOrchestrator.from_config(config, on_progress=log_progress)
    result = orchestrator.run_sync(topics, args.words_per_puzzle, source)

    print_batch_stats(result, stream=sys.stderr)
    if args.print_puzzles:
        for puzzle in result.puzzles:
            pretty_print_puzzle(puzzle)
            pretty_print_puzzle(puzzle, solution=True)

    if args.store:
        PuzzleStore().save_batch(result, config, category=args.category)

    if not result.ok:
        return 1

    if args.pdf:
        from wordsearch.io.pdf import render_pdf

        render_pdf(result.puzzles, args.pdf, cover=args.cover)

    if args.output:
        document = PuzzleStore.to_document(result, config, category=args.category)
        args.output.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
