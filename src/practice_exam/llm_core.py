"""LLM Core: Local LLM integration via Ollama for study help."""

import json
import logging
import urllib.error
import urllib.request
from typing import Optional

logger = logging.getLogger(__name__)

DISABLED_MESSAGE = "AI assistance is disabled."
ERROR_MESSAGE = "An error occurred while contacting the AI."
INVALID_RESPONSE_MESSAGE = "Could not get a valid response from the AI."


class LLMCore:
    """Turns a prompt into text using a local Ollama server.

    ``generate_text`` never raises: on any failure it returns a readable
    fallback message instead.
    """

    def __init__(self, model: str = "llama3.2", base_url: str = "http://localhost:11434",
                 enabled: bool = False, timeout: float = 30.0):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.enabled = enabled
        self.timeout = timeout
        self._available: Optional[bool] = None

    def is_available(self) -> bool:
        """Check if the Ollama server is reachable."""
        if not self.enabled:
            return False
        if self._available is not None:
            return self._available
        try:
            with urllib.request.urlopen(f"{self.base_url}/api/tags", timeout=2) as resp:
                self._available = resp.status == 200
        except (urllib.error.URLError, OSError) as e:
            logger.warning(f"LLM server not reachable at {self.base_url}: {e}")
            self._available = False
        return self._available

    def generate_text(self, prompt: str, system: str = "") -> str:
        """Generate a response, or a fallback message if the LLM cannot answer."""
        if not self.enabled:
            return DISABLED_MESSAGE
        if not self.is_available():
            return ERROR_MESSAGE

        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
        }
        if system:
            payload["system"] = system

        req = urllib.request.Request(
            f"{self.base_url}/api/generate",
            data=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                result = json.loads(resp.read().decode("utf-8"))
        except (urllib.error.URLError, OSError, ValueError) as e:
            logger.error(f"LLM generate error: {e}")
            self._available = None
            return ERROR_MESSAGE

        text = result.get("response") if isinstance(result, dict) else None
        if not isinstance(text, str) or not text.strip():
            logger.error(f"Unexpected LLM response structure: {result!r}")
            return INVALID_RESPONSE_MESSAGE
        return text.strip()
