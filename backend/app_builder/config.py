import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from app_builder.errors import ConfigurationError


BACKEND_LOCAL = "local"
BACKEND_CLOUD = "cloud"
BACKENDS = (BACKEND_LOCAL, BACKEND_CLOUD)


@dataclass(frozen=True)
class Settings:
    database_url: str
    llm_backend: str = BACKEND_LOCAL
    llm_api_key: Optional[str] = None
    llm_base_url: str = "http://host.docker.internal:11434/v1"
    llm_model: str = "mistral:7b-instruct"
    gemini_model: str = "gemini-1.5-flash"
    llm_temperature: float = 0.2
    llm_timeout: float = 300.0
    port: int = 5000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def _get(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _get_number(env: Mapping[str, str], name: str, default, cast):
    raw = _get(env, name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Read the process configuration once.

    Loads `.env` from the working directory when reading from the real
    environment. A missing DATABASE_URL is fatal.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    database_url = _get(env, "DATABASE_URL")
    if not database_url:
        raise ConfigurationError("DATABASE_URL is missing.")

    backend = (_get(env, "LLM_BACKEND") or BACKEND_LOCAL).lower()
    if backend not in BACKENDS:
        raise ConfigurationError(
            f"LLM_BACKEND must be one of {', '.join(BACKENDS)}, got {backend!r}"
        )

    api_key = _get(env, "LLM_API_KEY")
    if backend == BACKEND_CLOUD and not api_key:
        raise ConfigurationError("LLM_API_KEY is required for the cloud backend.")

    defaults = Settings(database_url=database_url)
    origins = _get(env, "CORS_ORIGINS")

    return Settings(
        database_url=database_url,
        llm_backend=backend,
        llm_api_key=api_key,
        llm_base_url=_get(env, "LLM_BASE_URL") or defaults.llm_base_url,
        llm_model=_get(env, "LLM_MODEL") or defaults.llm_model,
        gemini_model=_get(env, "GEMINI_MODEL") or defaults.gemini_model,
        llm_temperature=_get_number(env, "LLM_TEMPERATURE", defaults.llm_temperature, float),
        llm_timeout=_get_number(env, "LLM_TIMEOUT", defaults.llm_timeout, float),
        port=_get_number(env, "PORT", defaults.port, int),
        cors_origins=(
            [o.strip() for o in origins.split(",") if o.strip()]
            if origins
            else defaults.cors_origins
        ),
        log_level=(_get(env, "LOG_LEVEL") or defaults.log_level).upper(),
    )
