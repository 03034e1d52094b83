import io
import json
import re
import tempfile
import unittest
from pathlib import Path

from PIL import Image

import main
from wordsearch.core.models import BatchResult, TopicFailure
from wordsearch.engine.builder import BuilderConfig, PuzzleBuilder
from wordsearch.engine.orchestrator import BatchConfig
from wordsearch.engine.puzzle_store import PuzzleStore
from wordsearch.io.pdf import render_pdf
from wordsearch.utils.pretty import format_puzzle, format_solution, print_batch_stats


def _puzzle(topic="pets", size=8):
    builder = PuzzleBuilder(BuilderConfig(grid_size=size, seed=2))
    return builder.build(["cat", "dog", "parrot"], topic=topic)


class PrettyTests(unittest.TestCase):
    def test_format_puzzle_has_header_and_rows(self) -> None:
        lines = format_puzzle(_puzzle()).splitlines()
        self.assertEqual(len(lines), 2 + 8)
        self.assertTrue(lines[2].startswith(" 0 |"))

    def test_solution_hides_noise_letters(self) -> None:
        puzzle = _puzzle()
        rendered = format_solution(puzzle)
        letters = sum(len(p.positions) for p in puzzle.placed_words)
        hidden = rendered.count(" .")
        self.assertGreaterEqual(hidden, 64 - letters)

    def test_batch_stats_lists_failures(self) -> None:
        result = BatchResult(
            puzzles=[_puzzle()],
            failures=[TopicFailure(index=1, topic="fish", reason="only 2/3 unique words")],
            used_words=["cat", "dog", "parrot"],
        )
        stream = io.StringIO()
        print_batch_stats(result, stream=stream)
        text = stream.getvalue()
        self.assertIn("Puzzles:       1", text)
        self.assertIn("#2 fish: only 2/3 unique words", text)


class PuzzleStoreTests(unittest.TestCase):
    def test_save_and_load_batch(self) -> None:
        result = BatchResult(puzzles=[_puzzle()], used_words=["cat", "dog", "parrot"])
        with tempfile.TemporaryDirectory() as tmpdir:
            store = PuzzleStore(Path(tmpdir) / "puzzles")
            doc_id = store.save_batch(result, BatchConfig(seed=2), category="Animals")
            doc = store.load(doc_id)

        self.assertEqual(doc["id"], doc_id)
        self.assertEqual(doc["status"], "success")
        self.assertEqual(doc["category"], "Animals")
        self.assertEqual(doc["config"]["strategy"], "sequential")
        self.assertEqual(len(doc["puzzles"][0]["grid"]), 8)
        self.assertEqual(doc["stats"]["puzzles"], 1)
        first = doc["puzzles"][0]["placed_words"][0]
        self.assertEqual(first["word"], "cat")
        self.assertEqual(len(first["positions"]), 3)

    def test_failed_batch_document(self) -> None:
        result = BatchResult(
            failures=[TopicFailure(index=0, topic="x", reason="offline")],
            error="No puzzles could be generated",
        )
        doc = PuzzleStore.to_document(result)
        self.assertEqual(doc["status"], "failed")
        self.assertEqual(doc["failures"][0]["topic"], "x")
        self.assertIsNone(doc["config"])


def _page_count(path):
    return len(re.findall(rb"/Type /Page\b", path.read_bytes()))


class PdfTests(unittest.TestCase):
    def test_render_writes_pdf(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = render_pdf([_puzzle(size=15), _puzzle("birds", size=15)], Path(tmpdir) / "out" / "book.pdf")
            self.assertTrue(path.exists())
            self.assertTrue(path.read_bytes().startswith(b"%PDF"))

    def test_cover_adds_a_first_page(self) -> None:
        puzzles = [_puzzle(size=15), _puzzle("birds", size=15)]
        with tempfile.TemporaryDirectory() as tmpdir:
            cover = Path(tmpdir) / "cover.png"
            Image.new("RGB", (60, 80), "navy").save(cover)
            plain = render_pdf(puzzles, Path(tmpdir) / "plain.pdf")
            covered = render_pdf(puzzles, Path(tmpdir) / "covered.pdf", cover=cover)

            self.assertEqual(_page_count(plain), 4)
            self.assertEqual(_page_count(covered), 5)


class CliTests(unittest.TestCase):
    def test_dummy_batch_to_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            output = Path(tmpdir) / "batch.json"
            code = main.main([
                "--source", "dummy",
                "--topics", "animals", "space",
                "--words-per-puzzle", "6",
                "--seed", "4",
                "--output", str(output),
                "--log-level", "WARNING",
            ])
            self.assertEqual(code, 0)
            doc = json.loads(output.read_text(encoding="utf-8"))
        self.assertEqual([p["topic"] for p in doc["puzzles"]], ["animals", "space"])
        self.assertEqual(len(doc["used_words"]), 12)

    def test_requires_category_or_topics(self) -> None:
        with self.assertRaises(SystemExit):
            main.main(["--source", "dummy"])

    def test_rejects_zero_min_words(self) -> None:
        with self.assertRaises(SystemExit):
            main.main(["--source", "dummy", "--topics", "space", "--min-words", "0"])

    def test_cover_requires_pdf(self) -> None:
        with self.assertRaises(SystemExit):
            main.main(["--source", "dummy", "--topics", "space", "--cover", "cover.png"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
