from app.ai.config import load_ai_config
from app.ai.types import AIClient, AIConfigurationError

from app.ai.providers.openai_provider import OpenAIProvider


def get_ai_client() -> AIClient:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        if not cfg.api_key:
            raise AIConfigurationError("OPENAI_API_KEY is missing")
        return OpenAIProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            temperature=cfg.temperature,
        )

    raise AIConfigurationError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
