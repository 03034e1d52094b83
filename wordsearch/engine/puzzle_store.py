"""Persistent puzzle batch document store.

Every batch run (success or failure) is saved as a JSON document under
``local_db/collections/puzzles/``.  The documents are renderer-ready and
contain every grid, the placed words with their positions, and stats.
"""

from __future__ import annotations

import json
import uuid
from collections import Counter
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from ..utils.logger import get_logger

if TYPE_CHECKING:
    from ..core.models import BatchResult
    from .orchestrator import BatchConfig


LOGGER = get_logger(__name__)

DEFAULT_STORE_DIR = Path("local_db/collections/puzzles")


class PuzzleStore:
    """Save batch results as structured JSON documents."""

    def __init__(self, store_dir: Path | str = DEFAULT_STORE_DIR) -> None:
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def save_batch(
        self,
        result: "BatchResult",
        config: Optional["BatchConfig"] = None,
        category: str = "",
    ) -> str:
        """Persist a batch result and return its document ID."""
        doc_id = self._new_id()
        doc = self.to_document(result, config, category)
        doc["id"] = doc_id

        path = self.path_for(doc_id)
        path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
        LOGGER.info("Puzzle batch saved: %s (%s)", doc_id, doc["status"])
        return doc_id

    def load(self, doc_id: str) -> dict:
        return json.loads(self.path_for(doc_id).read_text(encoding="utf-8"))

    def path_for(self, doc_id: str) -> Path:
        return self.store_dir / f"{doc_id}.json"

    @staticmethod
    def to_document(
        result: "BatchResult",
        config: Optional["BatchConfig"] = None,
        category: str = "",
    ) -> dict:
        """Build the JSON-ready document for ``result`` without writing it."""
        return {
            "created_at": datetime.now(timezone.utc).isoformat(),
            "status": "success" if result.ok else "failed",
            "error": result.error,
            "category": category,
            "config": PuzzleStore._serialize_config(config) if config is not None else None,
            "puzzles": [puzzle.to_jsonable() for puzzle in result.puzzles],
            "failures": [asdict(failure) for failure in result.failures],
            "used_words": list(result.used_words),
            "stats": PuzzleStore._compute_stats(result),
        }

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _compute_stats(result: "BatchResult") -> dict:
        placed = [w for p in result.puzzles for w in p.placed_words]
        lengths = [len(w.normalized_word) for w in placed]
        return {
            "puzzles": len(result.puzzles),
            "skipped": len(result.failures),
            "placed_words": len(placed),
            "dropped_words": sum(p.dropped_count for p in result.puzzles),
            "length_min": min(lengths) if lengths else 0,
            "length_max": max(lengths) if lengths else 0,
            "length_avg": round(sum(lengths) / len(lengths), 1) if lengths else 0.0,
            "directions": dict(sorted(Counter(w.direction.name for w in placed).items())),
        }

    @staticmethod
    def _serialize_config(config: "BatchConfig") -> dict:
        return {
            "words_per_puzzle": config.words_per_puzzle,
            "strategy": config.strategy.value,
            "grid_size": config.grid_size,
            "max_placement_attempts": config.max_placement_attempts,
            "max_allocation_attempts": config.max_allocation_attempts,
            "per_attempt_timeout": config.per_attempt_timeout,
            "min_words": config.min_words,
            "strict_words": config.strict_words,
            "seed": config.seed,
        }

    @staticmethod
    def _new_id() -> str:
        ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        short_uuid = uuid.uuid4().hex[:8]
        return f"{ts}_{short_uuid}"
