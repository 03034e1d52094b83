"""Cross-puzzle word allocation against a shared exclusion set."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence, Set, Union

from ..core.constants import MAX_ALLOCATION_ATTEMPTS
from ..core.exceptions import ConfigError
from ..core.models import AllocationFailure, AllocationResult
from .normalization import word_key
from .used_words import UsedWordSet
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from .sources import WordSource


LOGGER = get_logger(__name__)

Allocation = Union[AllocationResult, AllocationFailure]


@dataclass
class WordFilter:
    """Token constraints for the strict allocation variant."""

    pattern: Optional[str] = r"[A-Za-z]+"
    min_length: int = 3
    max_length: int = 15

    def accepts(self, token: str) -> bool:
        if any(char.isspace() for char in token):
            return False
        if self.pattern and not re.fullmatch(self.pattern, token):
            return False
        return self.min_length <= len(token) <= self.max_length


STRICT_FILTER = WordFilter()


@dataclass
class AllocationPolicy:
    """Retry budget for one topic.

    ``per_attempt_timeout`` of None waits on the source indefinitely.
    ``min_words`` lets a caller settle for the best shorter list once every
    attempt has failed to reach the exact count.
    """

    max_attempts: int = MAX_ALLOCATION_ATTEMPTS
    per_attempt_timeout: Optional[float] = None
    min_words: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigError(f"max_attempts must be positive, got {self.max_attempts}")
        if self.per_attempt_timeout is not None and self.per_attempt_timeout <= 0:
            raise ConfigError("per_attempt_timeout must be positive when set")
        if self.min_words is not None and self.min_words < 1:
            raise ConfigError(f"min_words must be positive when set, got {self.min_words}")


def parse_word_list(text: str) -> List[str]:
    """Extract comma-separated tokens from a free-form source reply.

    The first line holding a comma is used; without one the whole trimmed
    reply is treated as the list.
    """

    stripped = (text or "").strip()
    line = next((candidate for candidate in stripped.splitlines() if "," in candidate), stripped)
    return [token.strip() for token in line.split(",") if token.strip()]


class WordAllocator:
    """Queries a word source until a topic gets exactly the words it needs."""

    def __init__(
        self,
        policy: Optional[AllocationPolicy] = None,
        word_filter: Optional[WordFilter] = None,
    ) -> None:
        self.policy = policy or AllocationPolicy()
        self.word_filter = word_filter

    def select_words(
        self, reply: str, required_count: int, used_words: UsedWordSet
    ) -> List[str]:
        """Filter one reply down to at most ``required_count`` fresh words."""

        selected: List[str] = []
        seen: Set[str] = set()
        for token in parse_word_list(reply):
            if self.word_filter and not self.word_filter.accepts(token):
                continue
            key = word_key(token)
            if not key or key in seen or used_words.contains(token):
                continue
            seen.add(key)
            selected.append(token)
        return selected[:required_count]

    async def allocate(
        self,
        topic: str,
        required_count: int,
        used_words: UsedWordSet,
        source: "WordSource",
    ) -> Allocation:
        if required_count < 1:
            raise ConfigError(f"required_count must be positive, got {required_count}")

        last_error = "no attempts made"
        best: List[str] = []
        attempt = 0
        for attempt in range(1, self.policy.max_attempts + 1):
            LOGGER.debug("Allocating '%s': attempt %s/%s", topic, attempt, self.policy.max_attempts)
            try:
                reply = await self._ask(source, topic, used_words.hint())
            except asyncio.TimeoutError:
                last_error = f"word source timed out after {self.policy.per_attempt_timeout}s"
                LOGGER.warning("'%s' attempt %s: %s", topic, attempt, last_error)
                continue
            except Exception as exc:
                last_error = f"word source failed: {exc}"
                LOGGER.warning("'%s' attempt %s: %s", topic, attempt, last_error)
                continue

            words = self.select_words(reply, required_count, used_words)
            if len(words) == required_count:
                used_words.add_all(words)
                LOGGER.info("'%s': %s words accepted on attempt %s", topic, len(words), attempt)
                return AllocationResult(topic=topic, words=tuple(words), attempts=attempt)

            if len(words) > len(best):
                best = words
            last_error = f"only {len(words)}/{required_count} unique words"
            LOGGER.debug("'%s' attempt %s: %s", topic, attempt, last_error)

        fallback = self._settle_for_best(best, used_words)
        if fallback:
            used_words.add_all(fallback)
            LOGGER.info(
                "'%s': settling for %s/%s words after %s attempts",
                topic, len(fallback), required_count, attempt,
            )
            return AllocationResult(topic=topic, words=tuple(fallback), attempts=attempt)

        LOGGER.warning("'%s' skipped after %s attempts: %s", topic, attempt, last_error)
        return AllocationFailure(topic=topic, reason=last_error, attempts=attempt)

    async def _ask(self, source: "WordSource", topic: str, hint: str) -> str:
        pending = source.generate(topic, hint)
        if self.policy.per_attempt_timeout is None:
            return await pending
        return await asyncio.wait_for(pending, self.policy.per_attempt_timeout)

    def _settle_for_best(self, best: Sequence[str], used_words: UsedWordSet) -> List[str]:
        if self.policy.min_words is None:
            return []
        # Other topics may have claimed some of these since the reply arrived.
        fresh = [word for word in best if not used_words.contains(word)]
        return fresh if len(fresh) >= self.policy.min_words else []
