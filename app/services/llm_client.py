from openai import OpenAI

from app.core.config import SummarizerConfig


def get_client(config: SummarizerConfig) -> OpenAI:
    if not config.api_key or not config.base_url:
        raise RuntimeError("Missing AZURE_OPENAI_API_KEY or AZURE_OPENAI_BASE_URL in .env")
    # One outbound call per submission: the SDK's own retries are disabled.
    return OpenAI(
        api_key=config.api_key,
        base_url=config.base_url,
        timeout=config.timeout_seconds,
        max_retries=0,
    )


def get_deployment(config: SummarizerConfig) -> str:
    if not config.deployment:
        raise RuntimeError("AZURE_OPENAI_DEPLOYMENT is not set")
    return config.deployment
