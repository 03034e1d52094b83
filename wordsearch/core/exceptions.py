"""Custom exception hierarchy for word-search generation."""


class WordSearchError(Exception):
    """Base exception for generator failures."""


class ConfigError(WordSearchError):
    """Raised when a configuration value is out of range."""


class WordSourceError(WordSearchError):
    """Raised when a word source cannot produce a reply."""


class LLMClientError(WordSourceError):
    """Raised when an LLM endpoint responds with an error or empty payload."""


class SubthemeError(WordSearchError):
    """Raised when no usable sub-themes can be generated for a category."""


class ValidationError(WordSearchError):
    """Raised when a finished puzzle fails its integrity checks."""
