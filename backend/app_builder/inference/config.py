from app_builder.config import BACKEND_CLOUD, BACKEND_LOCAL, Settings
from app_builder.errors import ConfigurationError
from app_builder.inference.base import ModelGateway
from app_builder.inference.chat_completions_client import ChatCompletionsGateway
from app_builder.inference.gemini_client import GeminiGateway


def get_model_gateway(settings: Settings) -> ModelGateway:
    if settings.llm_backend == BACKEND_LOCAL:
        return ChatCompletionsGateway(
            base_url=settings.llm_base_url,
            model=settings.llm_model,
            api_key=settings.llm_api_key,
            temperature=settings.llm_temperature,
            timeout=settings.llm_timeout,
        )

    if settings.llm_backend == BACKEND_CLOUD:
        if not settings.llm_api_key:
            raise ConfigurationError("LLM_API_KEY is required for the cloud backend.")
        return GeminiGateway(
            api_key=settings.llm_api_key,
            model=settings.gemini_model,
            temperature=settings.llm_temperature,
            timeout=settings.llm_timeout,
        )

    raise ConfigurationError(f"Unknown LLM backend: {settings.llm_backend!r}")
