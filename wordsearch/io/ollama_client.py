"""Lightweight HTTP client for a local Ollama server."""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

import requests

from ..core.exceptions import LLMClientError
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


class OllamaClient:
    """Minimal client around Ollama's ``/api/generate`` endpoint."""

    DEFAULT_HOST = "http://127.0.0.1:11434"

    def __init__(
        self,
        model_name: str = "llama3.2",
        host: Optional[str] = None,
        temperature: float = 0.1,
        host_env: str = "OLLAMA_HOST",
        model_env: str = "OLLAMA_MODEL",
        timeout_seconds: float = 120.0,
    ) -> None:
        self.model_name = os.environ.get(model_env, model_name)
        self.host = (host or os.environ.get(host_env) or self.DEFAULT_HOST).rstrip("/")
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds

    def generate_text(self, prompt: str, temperature: Optional[float] = None) -> str:
        """Send the prompt without streaming and return the response text."""
        payload: Dict[str, Any] = {
            "model": self.model_name,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self.temperature if temperature is None else temperature,
            },
        }
        try:
            response = requests.post(
                f"{self.host}/api/generate",
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise LLMClientError(f"Ollama request failed: {exc}") from exc
        except ValueError as exc:
            raise LLMClientError(f"Ollama returned invalid JSON: {exc}") from exc

        text = data.get("response") if isinstance(data, dict) else None
        if not text:
            LOGGER.warning("Ollama response missing text: %s", data)
            raise LLMClientError("Ollama response missing text")
        return text
