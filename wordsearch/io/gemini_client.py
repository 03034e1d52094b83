"""Lightweight HTTP client for Gemini API interactions."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import requests

from ..core.exceptions import LLMClientError
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


class GeminiClient:
    """Minimal client around the public Gemini REST API."""

    API_BASE = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        model_name: str = "gemini-2.5-flash",
        api_key_env: str = "GEMINI_API_KEY",
        model_env: str = "GEMINI_MODEL",
        temperature: float = 0.1,
        timeout_seconds: float = 60.0,
    ) -> None:
        self.model_name = os.environ.get(model_env, model_name)
        self.api_key_env = api_key_env
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds
        self._api_key = os.environ.get(api_key_env)
        if not self._api_key:
            raise LLMClientError(
                f"Missing Gemini API key in environment variable {self.api_key_env}"
            )

    def generate_text(self, prompt: str, temperature: Optional[float] = None) -> str:
        """Send the prompt to Gemini and return the first candidate text."""
        url = f"{self.API_BASE}/models/{self.model_name}:generateContent"
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature if temperature is None else temperature,
            },
        }
        try:
            response = requests.post(
                url,
                params={"key": self._api_key},
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise LLMClientError(f"Gemini request failed: {exc}") from exc
        except ValueError as exc:
            raise LLMClientError(f"Gemini returned invalid JSON: {exc}") from exc

        text = self._extract_text(data)
        if not text:
            LOGGER.warning("Gemini response missing candidates: %s", data)
            raise LLMClientError("Gemini API response missing text candidates")
        return text

    @staticmethod
    def _extract_text(payload: Dict[str, Any]) -> Optional[str]:
        """Concatenate the text parts of the first candidate that has any."""
        candidates: List[Dict[str, Any]] = payload.get("candidates") or []
        for candidate in candidates:
            content = candidate.get("content") or {}
            parts: List[Dict[str, Any]] = content.get("parts") or []
            texts = [part.get("text") for part in parts if part.get("text")]
            if texts:
                return "".join(texts)
        return None
