"""
pipeline/inference.py — HTTP client for an Ollama-compatible generate endpoint.

One call per submission; retrying is the caller's business.
"""
import logging

import requests

from errors import InferenceError

logger = logging.getLogger(__name__)


class OllamaClient:

    def __init__(self, base_url: str, timeout: int = 120, session: requests.Session = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate(self, model: str, prompt: str) -> str:
        url = f"{self.base_url}/api/generate"
        try:
            resp = self.session.post(
                url,
                json={"model": model, "prompt": prompt, "stream": False},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            body = resp.json()
        except requests.RequestException as e:
            raise InferenceError(f"Inference request to {url} failed: {e}") from e
        except ValueError as e:
            raise InferenceError(f"Inference response was not JSON: {e}") from e

        text = body.get("response") if isinstance(body, dict) else None
        if not isinstance(text, str):
            raise InferenceError("Inference response has no 'response' text")

        logger.info("Inference completed [model=%s, chars=%d]", model, len(text))
        return text
