"""Select and instantiate a provider from a user-facing provider name."""

from __future__ import annotations

from typing import Dict, Optional

from .base import CallModel
from .exceptions import LLMProviderNotFoundError

# Accepted spellings -> canonical provider id
PROVIDER_ALIASES: Dict[str, str] = {
    "openai": "openai",
    "gpt": "openai",
    "anthropic": "anthropic",
    "claude": "anthropic",
    "gemini": "gemini",
    "google": "gemini",
}

API_KEY_FORMATS: Dict[str, str] = {
    "openai": "Format: sk-... (starts with sk-)",
    "anthropic": "Format: sk-ant-... (starts with sk-ant-)",
    "gemini": "Format: AIza... (starts with AIza)",
}
DEFAULT_KEY_HINT = "Your API key will be used only for this session"


def canonical_provider(provider: Optional[str]) -> str:
    """Return the canonical provider id for ``provider``."""

    key = (provider or "").strip().lower()
    try:
        return PROVIDER_ALIASES[key]
    except KeyError as exc:
        raise LLMProviderNotFoundError(
            message=f"Unknown LLM provider: {provider!r}",
            provider=str(provider),
            error_type="unknown_provider",
        ) from exc


def describe_api_key_format(provider: Optional[str]) -> str:
    """Return a short hint describing what ``provider`` keys look like."""

    key = PROVIDER_ALIASES.get((provider or "").strip().lower(), "")
    return API_KEY_FORMATS.get(key, DEFAULT_KEY_HINT)


def create_llm_client(
    provider: str,
    api_key: Optional[str] = None,
    model_name: Optional[str] = None,
) -> CallModel:
    """Instantiate the client for ``provider``.

    Provider modules are imported lazily so that only the SDK of the selected
    provider is loaded.
    """

    canonical = canonical_provider(provider)
    if canonical == "openai":
        from .providers.openai import OpenAIModel

        return OpenAIModel(api_key=api_key, model_name=model_name)
    if canonical == "anthropic":
        from .providers.claude import ClaudeModel

        return ClaudeModel(api_key=api_key, model_name=model_name)

    from .providers.gemini import GeminiModel

    return GeminiModel(api_key=api_key, model_name=model_name)
