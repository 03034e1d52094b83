"""Cross-puzzle exclusion set shared by one batch."""

from __future__ import annotations

import threading
from typing import Dict, Iterable, Iterator, List

from .normalization import word_key


class UsedWordSet:
    """Append-only set of words committed to a batch.

    Words are keyed by their normalized grid form, so spelling variants that
    hide the same letters count as one word.

    ``add_all`` inserts a whole allocation under one lock, so concurrent
    readers never see half of a puzzle's words.
    """

    def __init__(self, words: Iterable[str] = ()) -> None:
        self._lock = threading.Lock()
        self._words: Dict[str, str] = {}
        self.add_all(words)

    def contains(self, word: str) -> bool:
        return word_key(word) in self._words

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.contains(word)

    def add_all(self, words: Iterable[str]) -> int:
        """Add ``words`` atomically and return how many were new."""

        pending = [(word_key(word), word.strip()) for word in words if word]
        added = 0
        with self._lock:
            for key, word in pending:
                if key and key not in self._words:
                    self._words[key] = word
                    added += 1
        return added

    def snapshot(self) -> List[str]:
        with self._lock:
            return list(self._words.values())

    def hint(self) -> str:
        """Comma-joined words in insertion order, for the source prompt."""

        return ", ".join(self.snapshot())

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"UsedWordSet({len(self)} words)"
