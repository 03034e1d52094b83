import random
import unittest
from dataclasses import replace

from wordsearch.core.constants import ALPHABET, DIRECTIONS, EMPTY_CELL, Direction
from wordsearch.core.exceptions import ConfigError
from wordsearch.engine.builder import BuilderConfig, PuzzleBuilder
from wordsearch.engine.grid import LetterGrid
from wordsearch.engine.validator import PuzzleValidator


class ScriptedRandom:
    """Always picks the first choice and replays scripted row/col values."""

    def __init__(self, positions):
        self.positions = list(positions)
        self.randrange_calls = 0

    def choice(self, seq):
        return seq[0]

    def randrange(self, stop):
        self.randrange_calls += 1
        return self.positions.pop(0)


class DirectionTests(unittest.TestCase):
    def test_exactly_five_directions_without_left(self) -> None:
        vectors = {d.value for d in DIRECTIONS}
        self.assertEqual(len(DIRECTIONS), 5)
        self.assertEqual(vectors, {(0, 1), (1, 0), (1, 1), (-1, 0), (-1, 1)})
        self.assertNotIn((0, -1), vectors)
        self.assertNotIn((-1, -1), vectors)

    def test_first_direction_is_right(self) -> None:
        self.assertEqual(DIRECTIONS[0], Direction.RIGHT)


class GridPlacerTests(unittest.TestCase):
    def test_place_right_returns_positions_and_writes_letters(self) -> None:
        grid = LetterGrid(5)
        positions = grid.try_place("CAT", 1, 1, Direction.RIGHT)
        self.assertEqual(positions, [(1, 1), (1, 2), (1, 3)])
        self.assertEqual([grid.cell(1, c) for c in (1, 2, 3)], ["C", "A", "T"])

    def test_up_right_runs_towards_top(self) -> None:
        grid = LetterGrid(5)
        positions = grid.try_place("DOG", 4, 0, Direction.UP_RIGHT)
        self.assertEqual(positions, [(4, 0), (3, 1), (2, 2)])

    def test_out_of_bounds_is_rejected_without_writes(self) -> None:
        grid = LetterGrid(5)
        self.assertIsNone(grid.try_place("HORSE", 0, 1, Direction.RIGHT))
        self.assertIsNone(grid.try_place("CAT", 1, 0, Direction.UP))
        self.assertEqual(grid.empty_count(), 25)

    def test_crossing_on_matching_letter_is_allowed(self) -> None:
        grid = LetterGrid(5)
        grid.try_place("CAT", 0, 0, Direction.RIGHT)
        positions = grid.try_place("ANT", 0, 1, Direction.DOWN)
        self.assertEqual(positions, [(0, 1), (1, 1), (2, 1)])

    def test_mismatch_rejects_and_leaves_grid_untouched(self) -> None:
        grid = LetterGrid(5)
        grid.try_place("CAT", 0, 0, Direction.RIGHT)
        before = [row[:] for row in grid.cells]
        self.assertIsNone(grid.try_place("DOG", 1, 0, Direction.UP_RIGHT))
        self.assertIsNone(grid.try_place("BOX", 0, 2, Direction.DOWN))
        self.assertEqual(grid.cells, before)

    def test_word_longer_than_grid_never_fits(self) -> None:
        grid = LetterGrid(15)
        word = "A" * 20
        for direction in DIRECTIONS:
            for row in range(15):
                for col in range(15):
                    self.assertFalse(grid.can_place(word, row, col, direction))

    def test_fill_only_touches_empty_cells(self) -> None:
        grid = LetterGrid(4)
        grid.try_place("CAT", 0, 0, Direction.RIGHT)
        filled = grid.fill(random.Random(3))
        self.assertEqual(filled, 13)
        self.assertTrue(grid.is_full())
        self.assertEqual(grid.freeze()[0][:3], "CAT")

    def test_fill_on_full_grid_is_noop(self) -> None:
        grid = LetterGrid(4)
        grid.fill(random.Random(1))
        before = grid.freeze()
        self.assertEqual(grid.fill(random.Random(2)), 0)
        self.assertEqual(grid.freeze(), before)

    def test_invalid_size_rejected(self) -> None:
        with self.assertRaises(ConfigError):
            LetterGrid(0)


class PuzzleBuilderTests(unittest.TestCase):
    def test_collision_scenario_retries_elsewhere(self) -> None:
        rng = ScriptedRandom([0, 0, 0, 1, 5, 5])
        builder = PuzzleBuilder(BuilderConfig(grid_size=15), rng=rng)
        puzzle = builder.build(["cat", "dog"])

        cat, dog = puzzle.placed_words
        self.assertEqual(cat.positions, ((0, 0), (0, 1), (0, 2)))
        self.assertEqual(dog.positions, ((5, 5), (5, 6), (5, 7)))
        self.assertEqual(puzzle.grid[0][:3], "CAT")
        self.assertEqual(puzzle.grid[5][5:8], "DOG")
        self.assertEqual(rng.randrange_calls, 6)
        self.assertEqual(puzzle.dropped_words, ())

    def test_long_word_is_dropped_silently(self) -> None:
        long_word = "abcdefghijklmnopqrst"
        for seed in range(5):
            builder = PuzzleBuilder(BuilderConfig(grid_size=15, seed=seed))
            puzzle = builder.build(["lion", long_word, "bear"])
            placed = [p.original_word for p in puzzle.placed_words]
            self.assertNotIn(long_word, placed)
            self.assertEqual(puzzle.dropped_words, (long_word,))
            self.assertEqual(puzzle.dropped_count, 1)

    def test_every_cell_is_an_uppercase_letter(self) -> None:
        builder = PuzzleBuilder(BuilderConfig(seed=11))
        puzzle = builder.build(["giraffe", "zebra", "lion", "hippo", "rhino"])
        self.assertEqual(puzzle.size, 15)
        for row in puzzle.grid:
            self.assertEqual(len(row), 15)
            for letter in row:
                self.assertIn(letter, ALPHABET)
                self.assertNotEqual(letter, EMPTY_CELL)

    def test_placed_words_agree_with_grid(self) -> None:
        words = ["ocean", "coral", "shark", "whale", "squid", "kelp", "reef", "tide"]
        for seed in range(10):
            puzzle = PuzzleBuilder(BuilderConfig(seed=seed)).build(words)
            self.assertTrue(PuzzleValidator().validate(puzzle).ok)
            for placed in puzzle.placed_words:
                self.assertEqual(len(placed.positions), len(placed.normalized_word))
                dr, dc = placed.direction.value
                for index, (row, col) in enumerate(placed.positions):
                    self.assertTrue(0 <= row < 15 and 0 <= col < 15)
                    self.assertEqual(placed.positions[0][0] + index * dr, row)
                    self.assertEqual(placed.positions[0][1] + index * dc, col)
                    self.assertEqual(puzzle.grid[row][col], placed.normalized_word[index])

    def test_normalization_and_empty_words(self) -> None:
        puzzle = PuzzleBuilder(BuilderConfig(seed=4)).build(["  ice cream ", "   ", "Café"])
        self.assertEqual(
            [p.normalized_word for p in puzzle.placed_words], ["ICECREAM", "CAFE"]
        )
        self.assertEqual(puzzle.placed_words[0].original_word, "  ice cream ")
        self.assertEqual(puzzle.dropped_words, ())

    def test_same_seed_same_puzzle(self) -> None:
        words = ["maple", "birch", "cedar"]
        first = PuzzleBuilder(BuilderConfig(seed=99)).build(words, topic="trees")
        second = PuzzleBuilder(BuilderConfig(seed=99)).build(words, topic="trees")
        self.assertEqual(first, second)

    def test_zero_attempt_budget_rejected(self) -> None:
        with self.assertRaises(ConfigError):
            BuilderConfig(max_placement_attempts=0)


class ValidatorTests(unittest.TestCase):
    def test_detects_letter_mismatch(self) -> None:
        puzzle = PuzzleBuilder(BuilderConfig(grid_size=5, seed=1)).build(["abc"])
        placed = puzzle.placed_words[0]
        broken = replace(placed, normalized_word="ZZZ")
        result = PuzzleValidator().validate(replace(puzzle, placed_words=(broken,)))
        self.assertFalse(result.ok)
        self.assertIn("expects", result.messages[0])

    def test_detects_unfilled_cell(self) -> None:
        puzzle = PuzzleBuilder(BuilderConfig(grid_size=3, seed=1)).build(["ab"])
        holes = ("A.B",) + puzzle.grid[1:]
        result = PuzzleValidator().validate(replace(puzzle, grid=holes))
        self.assertFalse(result.ok)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
