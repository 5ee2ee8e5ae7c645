from abc import ABC, abstractmethod
from enum import Enum


class ResponseFormat(str, Enum):
    # Model may wrap the JSON in commentary; extractor slices braces.
    RAW_WITH_COMMENTARY = "raw-with-commentary"
    # Backend is configured to emit JSON only; extractor parses as-is.
    STRICT_JSON = "strict-json"


class ModelGateway(ABC):
    backend: str
    response_format: ResponseFormat

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Send one prompt and return the raw text of the first completion"""
        pass
