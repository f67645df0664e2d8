from dataclasses import dataclass

from app.core.config import settings


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str | None
    base_url: str | None
    timeout_s: float
    max_retries: int
    temperature: float


def load_ai_config() -> AIConfig:
    return AIConfig(
        provider=settings.ai_provider,
        model=settings.ai_model,
        api_key=(settings.ai_api_key or "").strip() or None,
        base_url=(settings.ai_base_url or "").strip() or None,
        timeout_s=settings.ai_timeout_s,
        max_retries=settings.ai_max_retries,
        temperature=settings.ai_temperature,
    )
