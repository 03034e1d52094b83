"""Word source interfaces and implementations."""

from __future__ import annotations

import asyncio
import random
from typing import Dict, List, Optional, Protocol, Set

from ..core.constants import DEFAULT_WORDS_PER_PUZZLE
from ..core.exceptions import SubthemeError, WordSourceError
from .allocator import parse_word_list
from .normalization import word_key
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class WordSource(Protocol):
    """Anything that can be asked for candidate words on a topic.

    Replies are unstructured text; the allocator does all parsing and
    filtering.
    """

    async def generate(self, topic: str, used_words_hint: str) -> str:
        ...


class TextClient(Protocol):
    """Blocking LLM client, e.g. :class:`OllamaClient` or :class:`GeminiClient`."""

    def generate_text(self, prompt: str, temperature: Optional[float] = None) -> str:
        ...


class LLMWordSource:
    """Asks an LLM for a comma-separated word list on a topic."""

    WORD_PROMPT = (
        "You are helping to build a word search puzzle book.\n"
        "Topic: '{topic}'.\n"
        "List exactly {count} different words strongly related to this topic.\n"
        "Rules: single words only (no spaces, no hyphens), letters only, "
        "between 3 and 15 letters, suitable for all ages.\n"
        "{exclusion_line}"
        "Reply with ONE line: the words separated by commas, nothing else."
    )

    EXCLUSION_LINE = "Do NOT use any of these words, they are already taken: {used}.\n"

    def __init__(
        self,
        client: TextClient,
        words_per_puzzle: int = DEFAULT_WORDS_PER_PUZZLE,
        category: str = "",
        temperature: float = 0.1,
    ) -> None:
        self.client = client
        self.words_per_puzzle = words_per_puzzle
        self.category = category
        self.temperature = temperature

    def render_prompt(self, topic: str, used_words_hint: str = "") -> str:
        full_topic = f"{self.category} - {topic}" if self.category else topic
        exclusion_line = (
            self.EXCLUSION_LINE.format(used=used_words_hint) if used_words_hint else ""
        )
        return self.WORD_PROMPT.format(
            topic=full_topic,
            count=self.words_per_puzzle,
            exclusion_line=exclusion_line,
        )

    async def generate(self, topic: str, used_words_hint: str) -> str:
        prompt = self.render_prompt(topic, used_words_hint)
        return await asyncio.to_thread(self.client.generate_text, prompt, self.temperature)


DEFAULT_WORD_BUCKETS: Dict[str, List[str]] = {
    "animals": [
        "TIGER", "ZEBRA", "OTTER", "BEAVER", "FALCON", "JAGUAR", "KOALA",
        "LEMUR", "MOOSE", "PANDA", "RABBIT", "WALRUS", "BADGER", "FERRET",
        "GIRAFFE", "HIPPO", "IGUANA", "LLAMA", "MONKEY", "PELICAN", "TOUCAN",
        "WOMBAT", "BISON", "CAMEL", "DONKEY", "GORILLA", "HAMSTER", "PUFFIN",
    ],
    "space": [
        "PLANET", "COMET", "GALAXY", "NEBULA", "ORBIT", "ROCKET", "SATURN",
        "JUPITER", "MARS", "VENUS", "METEOR", "QUASAR", "PULSAR", "ECLIPSE",
        "LUNAR", "SOLAR", "ASTEROID", "COSMOS", "GRAVITY", "TELESCOPE",
        "URANUS", "NEPTUNE", "MERCURY", "CRATER", "STAR", "ZENITH",
    ],
    "kitchen": [
        "SPOON", "FORK", "KNIFE", "LADLE", "WHISK", "OVEN", "KETTLE", "TOASTER",
        "BLENDER", "SKILLET", "PLATE", "BOWL", "GRATER", "PEELER", "TONGS",
        "APRON", "SPATULA", "COLANDER", "TEAPOT", "MUG", "SAUCEPAN", "SIEVE",
    ],
    "weather": [
        "RAIN", "SNOW", "STORM", "THUNDER", "CLOUD", "SUNNY", "BREEZE", "HAIL",
        "SLEET", "FOG", "MIST", "TORNADO", "MONSOON", "DROUGHT", "RAINBOW",
        "FROST", "BLIZZARD", "HUMID", "DRIZZLE", "GUST", "CYCLONE", "DEW",
    ],
}


class DummyWordSource:
    """Offline source that replies from predefined buckets.

    Unknown topics fall back to every bucket merged together. Each reply is a
    fresh shuffle, so retries can surface different words.
    """

    def __init__(
        self,
        buckets: Optional[Dict[str, List[str]]] = None,
        words_per_reply: int = DEFAULT_WORDS_PER_PUZZLE,
        seed: Optional[int] = None,
    ) -> None:
        raw = buckets or DEFAULT_WORD_BUCKETS
        self.buckets: Dict[str, List[str]] = {
            key.strip().lower(): [w.upper() for w in words if w]
            for key, words in raw.items()
        }
        self.words_per_reply = words_per_reply
        self.rng = random.Random(seed)

    def _pool(self, topic: str) -> List[str]:
        key = (topic or "").strip().lower()
        if key in self.buckets:
            return list(self.buckets[key])
        merged: List[str] = []
        for words in self.buckets.values():
            merged.extend(words)
        return merged

    async def generate(self, topic: str, used_words_hint: str) -> str:
        pool = self._pool(topic)
        if not pool:
            raise WordSourceError(f"No words available for topic '{topic}'")
        excluded: Set[str] = {word_key(w) for w in parse_word_list(used_words_hint)}
        fresh = [w for w in pool if word_key(w) not in excluded]
        self.rng.shuffle(fresh)
        reply = ", ".join(fresh[: self.words_per_reply])
        LOGGER.debug("Dummy source produced %s words for '%s'", len(fresh[: self.words_per_reply]), topic)
        return reply


class SubthemeGenerator:
    """Splits a broad category into distinct puzzle topics via an LLM."""

    SUBTHEME_PROMPT = (
        "You are planning a word search puzzle book about '{category}'.\n"
        "Suggest exactly {count} distinct sub-themes of this category, each one "
        "narrow enough to yield at least 20 related words.\n"
        "Reply with ONE line: the sub-themes separated by commas, nothing else."
    )

    def __init__(self, client: TextClient, temperature: float = 0.3) -> None:
        self.client = client
        self.temperature = temperature

    def render_prompt(self, category: str, count: int) -> str:
        return self.SUBTHEME_PROMPT.format(category=category, count=count)

    async def generate(self, category: str, count: int) -> List[str]:
        prompt = self.render_prompt(category, count)
        try:
            reply = await asyncio.to_thread(self.client.generate_text, prompt, self.temperature)
        except WordSourceError as exc:
            raise SubthemeError(f"Sub-theme generation failed for '{category}': {exc}") from exc

        subthemes: List[str] = []
        seen: Set[str] = set()
        for token in (part.strip() for part in (reply or "").strip().split(",")):
            key = word_key(token)
            if not key or key in seen:
                continue
            seen.add(key)
            subthemes.append(token)
        if not subthemes:
            raise SubthemeError(f"No sub-themes returned for '{category}'")
        LOGGER.info(
            "Generated %s sub-themes for '%s' (requested %s)",
            len(subthemes[:count]), category, count,
        )
        return subthemes[:count]
