import logging
import re
from typing import Optional

import requests

from app_builder.config import BACKEND_LOCAL
from app_builder.errors import ModelGatewayError
from app_builder.inference.base import ModelGateway, ResponseFormat

logger = logging.getLogger(__name__)


def strip_code_fences(content: str) -> str:
    content = re.sub(r"^```(?:json)?\s*", "", content.strip())
    content = re.sub(r"\s*```$", "", content.strip())
    return content


class ChatCompletionsGateway(ModelGateway):
    """Locally hosted, OpenAI-compatible chat-completions endpoint."""

    backend = BACKEND_LOCAL

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: Optional[str] = None,
        temperature: float = 0.2,
        timeout: float = 300,
        response_format: ResponseFormat = ResponseFormat.RAW_WITH_COMMENTARY,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.temperature = temperature
        self.timeout = timeout
        self.response_format = response_format

    def generate(self, prompt: str) -> str:
        url = f"{self.base_url}/chat/completions"
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = requests.post(
                url,
                json={
                    "model": self.model,
                    "messages": [{"role": "user", "content": prompt}],
                    "temperature": self.temperature,
                },
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Chat completions request to %s failed: %r", url, e)
            raise ModelGatewayError(str(e), self.backend) from e

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ModelGatewayError(
                f"Malformed chat completions response: {e!r}", self.backend
            ) from e

        if not isinstance(content, str):
            raise ModelGatewayError("Completion content is not text", self.backend)

        return strip_code_fences(content)
