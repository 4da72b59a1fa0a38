"""tests/test_inference.py — Ollama HTTP client"""
import pytest
import requests

from errors import InferenceError
from pipeline.inference import OllamaClient


class _Response:
    def __init__(self, status=200, body=None, invalid_json=False):
        self.status_code = status
        self._body = body
        self._invalid = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self._invalid:
            raise ValueError("not json")
        return self._body


class _Session:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append((url, json, timeout))
        if self.error:
            raise self.error
        return self.response


def test_generate_returns_response_text():
    session = _Session(_Response(body={"response": "a trend appears", "done": True}))
    client = OllamaClient("http://ollama:11434/", timeout=7, session=session)

    assert client.generate("llama2", "hello") == "a trend appears"
    url, body, timeout = session.calls[0]
    assert url == "http://ollama:11434/api/generate"
    assert body == {"model": "llama2", "prompt": "hello", "stream": False}
    assert timeout == 7


@pytest.mark.parametrize("session", [
    _Session(error=requests.ConnectionError("refused")),
    _Session(_Response(status=500, body={})),
    _Session(_Response(invalid_json=True)),
    _Session(_Response(body={"error": "model not found"})),
    _Session(_Response(body=["unexpected"])),
])
def test_generate_failures_raise_inference_error(session):
    with pytest.raises(InferenceError):
        OllamaClient("http://ollama", session=session).generate("llama2", "p")
