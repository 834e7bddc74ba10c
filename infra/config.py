"""
Infrastructure configuration system.

Environment-based provider selection with sensible defaults.
Configuration is re-read from the environment on every get_config() call, so
a changed AI_MODEL or API key takes effect on the next invocation.
"""

import os
from typing import Optional, Literal, Tuple
from dataclasses import dataclass

from inference import (
    AIGateway,
    ConfigurationError,
    DEEPSEEK_MODELS,
    DeepSeekModelBackend,
    ModelBackend,
    OPENROUTER_FREE_MODELS,
    OpenRouterModelBackend,
    StubModelBackend,
    build_candidates,
)


ProviderType = Literal["openrouter", "deepseek", "stub"]

STUB_MODELS: Tuple[str, ...] = ("stub-model",)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


@dataclass
class InfraConfig:
    """Infrastructure configuration from environment."""

    # Provider
    ai_provider: ProviderType
    ai_model: Optional[str]            # explicit override, tried first
    openrouter_api_key: Optional[str]
    deepseek_api_key: Optional[str]

    # Request tuning
    temperature: float
    timeout_s: float

    # OpenRouter attribution
    app_url: str
    app_title: str

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """
        Load configuration from environment variables.

        Defaults:
        - Provider: openrouter (free model fallback list)
        - Temperature: 0.2
        - Per-attempt timeout: 30 s
        """
        provider = os.getenv("AI_PROVIDER", "openrouter").strip().lower() or "openrouter"
        if provider not in ("openrouter", "deepseek", "stub"):
            raise ConfigurationError(f"Unknown AI_PROVIDER: {provider!r}")

        return cls(
            ai_provider=provider,  # type: ignore
            ai_model=os.getenv("AI_MODEL") or None,
            openrouter_api_key=os.getenv("OPENROUTER_API_KEY") or None,
            deepseek_api_key=os.getenv("DEEPSEEK_API_KEY") or os.getenv("OPENAI_API_KEY") or None,
            temperature=_float_env("AI_TEMPERATURE", 0.2),
            timeout_s=_float_env("AI_TIMEOUT_S", 30.0),
            app_url=os.getenv("AI_APP_URL", "https://questoesai.app"),
            app_title=os.getenv("AI_APP_TITLE", "Questões AÍ"),
        )

    def api_key(self) -> Optional[str]:
        """Credential for the selected provider (None if missing)."""
        if self.ai_provider == "openrouter":
            return self.openrouter_api_key
        elif self.ai_provider == "deepseek":
            return self.deepseek_api_key
        else:
            return "stub"

    def fallback_models(self) -> Tuple[str, ...]:
        if self.ai_provider == "openrouter":
            return OPENROUTER_FREE_MODELS
        elif self.ai_provider == "deepseek":
            return DEEPSEEK_MODELS
        else:
            return STUB_MODELS

    def create_llm_backend(self) -> ModelBackend:
        """Create LLM backend instance based on configuration."""
        if self.ai_provider == "openrouter":
            return OpenRouterModelBackend(app_url=self.app_url, app_title=self.app_title)
        elif self.ai_provider == "deepseek":
            return DeepSeekModelBackend()
        else:
            return StubModelBackend()

    def create_gateway(self, backend: Optional[ModelBackend] = None) -> AIGateway:
        """Create a gateway wired to this configuration."""
        return AIGateway(
            backend=backend or self.create_llm_backend(),
            candidates=build_candidates(self.ai_provider, self.fallback_models(), self.ai_model),
            credential_resolver=self.api_key,
            temperature=self.temperature,
            timeout_s=self.timeout_s,
        )

    def describe(self) -> dict:
        """Non-sensitive summary (never includes credentials)."""
        return {
            "ai_provider": self.ai_provider,
            "ai_model": self.ai_model,
            "credential_configured": bool(self.api_key()),
            "candidates": [c.model for c in build_candidates(self.ai_provider, self.fallback_models(), self.ai_model)],
            "temperature": self.temperature,
            "timeout_s": self.timeout_s,
        }


def get_config() -> InfraConfig:
    """Get infrastructure configuration (fresh read of the environment)."""
    return InfraConfig.from_env()


def get_gateway() -> AIGateway:
    """Gateway for the current environment. Built per call; holds no shared state."""
    return get_config().create_gateway()
