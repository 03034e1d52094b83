"""PDF export: optional cover, then one puzzle page and one solution page per puzzle."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Optional, Sequence, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from ..core.models import Puzzle
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

CELL_SIZE = 25
MARGIN = 50
WORD_COLUMNS = 3
WORD_LINE_HEIGHT = 18
SOLUTION_LINE_COLOR = colors.HexColor("#808080")


class PdfRenderer:
    """Draws puzzles with reportlab's canvas API."""

    def __init__(
        self,
        pagesize: Tuple[float, float] = A4,
        cell_size: float = CELL_SIZE,
        margin: float = MARGIN,
    ) -> None:
        self.pagesize = pagesize
        self.cell_size = cell_size
        self.margin = margin

    def render(
        self,
        puzzles: Sequence[Puzzle],
        path: Path | str,
        cover: Optional[Path | str] = None,
    ) -> Path:
        """Write the book to ``path``; ``cover`` is an image drawn as a full first page."""

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        pdf = canvas.Canvas(str(path), pagesize=self.pagesize)
        pdf.setTitle("Word Search Puzzles")

        if cover is not None:
            self._draw_cover(pdf, Path(cover))
            pdf.showPage()

        for puzzle in puzzles:
            self._draw_page(pdf, puzzle, solution=False)
            pdf.showPage()
        for puzzle in puzzles:
            self._draw_page(pdf, puzzle, solution=True)
            pdf.showPage()

        pdf.save()
        LOGGER.info("PDF created: %s (%s puzzles)", path, len(puzzles))
        return path

    # ------------------------------------------------------------------
    # Page layout
    # ------------------------------------------------------------------
    def _draw_cover(self, pdf: canvas.Canvas, cover: Path) -> None:
        width, height = self.pagesize
        pdf.drawImage(str(cover), 0, 0, width=width, height=height)

    def _cell(self, puzzle: Puzzle) -> float:
        usable = self.pagesize[0] - 2 * self.margin
        return min(self.cell_size, usable / max(puzzle.size, 1))

    def _draw_page(self, pdf: canvas.Canvas, puzzle: Puzzle, solution: bool) -> None:
        width, height = self.pagesize
        top = height - self.margin
        if solution:
            pdf.setFont("Helvetica-Bold", 20)
            pdf.drawCentredString(width / 2, top - 20, "Solution")
            top -= 60
        else:
            top -= 40

        cell = self._cell(puzzle)
        grid_width = puzzle.size * cell
        start_x = self.margin + math.floor((width - 2 * self.margin - grid_width) / 2)

        pdf.setLineWidth(1.5)
        pdf.rect(start_x, top - grid_width, grid_width, grid_width, stroke=1, fill=0)

        pdf.setFont("Helvetica", 14)
        for r, row in enumerate(puzzle.grid):
            for c, letter in enumerate(row):
                x = start_x + c * cell + cell / 2
                y = top - r * cell - cell / 2 - 5
                pdf.drawCentredString(x, y, letter)

        if solution:
            self._draw_solution_lines(pdf, puzzle, start_x, top, cell)

        self._draw_word_list(pdf, puzzle, start_x, top - grid_width - 30, grid_width)

    @staticmethod
    def _draw_solution_lines(
        pdf: canvas.Canvas, puzzle: Puzzle, start_x: float, top: float, cell: float
    ) -> None:
        pdf.saveState()
        pdf.setStrokeColor(SOLUTION_LINE_COLOR, alpha=0.7)
        pdf.setLineWidth(8)
        pdf.setLineCap(1)
        for placed in puzzle.placed_words:
            if len(placed.positions) < 2:
                continue
            (r1, c1), (r2, c2) = placed.start, placed.end
            pdf.line(
                start_x + c1 * cell + cell / 2,
                top - r1 * cell - cell / 2,
                start_x + c2 * cell + cell / 2,
                top - r2 * cell - cell / 2,
            )
        pdf.restoreState()

    @staticmethod
    def _draw_word_list(
        pdf: canvas.Canvas, puzzle: Puzzle, start_x: float, list_top: float, grid_width: float
    ) -> None:
        words = [placed.original_word for placed in puzzle.placed_words]
        if not words:
            return
        column_width = grid_width / WORD_COLUMNS
        per_column = math.ceil(len(words) / WORD_COLUMNS)
        pdf.setFont("Helvetica", 12)
        for index, word in enumerate(words):
            column, row = divmod(index, per_column)
            x = start_x + column * column_width + (column_width - 10) / 2
            y = list_top - row * WORD_LINE_HEIGHT
            pdf.drawCentredString(x, y, word)


def render_pdf(
    puzzles: Sequence[Puzzle], path: Path | str, cover: Optional[Path | str] = None
) -> Path:
    return PdfRenderer().render(puzzles, path, cover=cover)
