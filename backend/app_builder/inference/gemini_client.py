import logging

import requests

from app_builder.config import BACKEND_CLOUD
from app_builder.errors import ModelGatewayError
from app_builder.inference.base import ModelGateway, ResponseFormat

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiGateway(ModelGateway):
    """Cloud generative-content endpoint (Gemini generateContent)."""

    backend = BACKEND_CLOUD

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        temperature: float = 0.2,
        timeout: float = 300,
        response_format: ResponseFormat = ResponseFormat.STRICT_JSON,
        api_base: str = GEMINI_API_BASE,
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.response_format = response_format
        self.endpoint = f"{api_base.rstrip('/')}/{model}:generateContent"

    def generate(self, prompt: str) -> str:
        generation_config = {"temperature": self.temperature}
        if self.response_format == ResponseFormat.STRICT_JSON:
            generation_config["responseMimeType"] = "application/json"

        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }

        try:
            response = requests.post(
                self.endpoint,
                headers={"x-goog-api-key": self.api_key},
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            # str(e) can carry request details; keep only the error type.
            logger.warning("Gemini request error: %s", type(e).__name__)
            raise ModelGatewayError(
                f"{type(e).__name__} while calling {self.model}", self.backend
            ) from e

        if response.status_code < 200 or response.status_code >= 300:
            msg = self._redact(response.text[:400])
            logger.warning("Gemini HTTP %s: %s", response.status_code, msg)
            raise ModelGatewayError(f"HTTP {response.status_code}: {msg}", self.backend)

        try:
            payload = response.json()
            text = payload["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ModelGatewayError(
                f"Malformed Gemini response: {e!r}", self.backend
            ) from e

        if not isinstance(text, str):
            raise ModelGatewayError("Candidate content is not text", self.backend)

        return text

    def _redact(self, text: str) -> str:
        if self.api_key:
            text = text.replace(self.api_key, "***")
        return text
