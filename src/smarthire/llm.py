"""Structured generation client for the hosted language model."""

from __future__ import annotations

import http.client
import json
import os
from typing import Any, Protocol, runtime_checkable
from urllib import error, parse, request

import structlog

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


class StructuredGenerationError(RuntimeError):
    """Base class for failures of the structured generation capability."""


class MissingCredentialError(StructuredGenerationError):
    """No API key was configured."""


class LLMRequestError(StructuredGenerationError):
    """The request could not be completed (network, HTTP status, timeout)."""


class MalformedResponseError(StructuredGenerationError):
    """The model answered with something other than the requested JSON object."""


@runtime_checkable
class StructuredGenerator(Protocol):
    """Submit a prompt plus an output schema, receive a JSON object."""

    def generate(self, prompt: str, schema: dict[str, Any]) -> dict[str, Any]:
        """Return the decoded JSON object or raise StructuredGenerationError."""


def api_key_from_env(environ: dict[str, str] | None = None) -> str | None:
    env = os.environ if environ is None else environ
    for name in API_KEY_ENV_VARS:
        value = env.get(name)
        if value:
            return value
    return None


class GeminiClient:
    """Plain HTTP client for the Gemini ``generateContent`` endpoint."""

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
    ):
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    @property
    def model(self) -> str:
        return self._model

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key)

    def generate(self, prompt: str, schema: dict[str, Any]) -> dict[str, Any]:
        if not self._api_key:
            raise MissingCredentialError("API key not found")

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": schema,
            },
        }
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key,
        }
        url = f"{self._base_url}/models/{parse.quote(self._model)}:generateContent"
        req = request.Request(url, data=data, headers=headers, method="POST")

        try:
            with request.urlopen(req, timeout=self._timeout) as resp:
                body = resp.read().decode("utf-8")
        except error.HTTPError as exc:
            self._logger.warning("llm.request_failed", model=self._model, status=exc.code)
            raise LLMRequestError(f"LLM request failed with HTTP {exc.code}") from exc
        except UnicodeDecodeError as exc:
            raise MalformedResponseError("Response body is not UTF-8") from exc
        except (OSError, http.client.HTTPException) as exc:
            self._logger.warning("llm.request_failed", model=self._model, error=str(exc))
            raise LLMRequestError(f"LLM request failed: {exc}") from exc

        return parse_generation_response(body)


def parse_generation_response(body: str) -> dict[str, Any]:
    """Pull the JSON object out of a ``generateContent`` response body."""
    try:
        envelope = json.loads(body)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError("Response body is not JSON") from exc

    try:
        parts = envelope["candidates"][0]["content"]["parts"]
        text = "".join(part.get("text", "") for part in parts)
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise MalformedResponseError("Response has no candidate text") from exc

    return decode_json_object(text)


def decode_json_object(text: str) -> dict[str, Any]:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.startswith("json"):
            cleaned = cleaned[4:]
    try:
        value = json.loads(cleaned or "{}")
    except json.JSONDecodeError as exc:
        raise MalformedResponseError("Model output is not valid JSON") from exc
    if not isinstance(value, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(value).__name__}")
    return value


__all__ = [
    "DEFAULT_MODEL",
    "GeminiClient",
    "LLMRequestError",
    "MalformedResponseError",
    "MissingCredentialError",
    "StructuredGenerationError",
    "StructuredGenerator",
    "api_key_from_env",
    "decode_json_object",
    "parse_generation_response",
]
