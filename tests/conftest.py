"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

AI_ENV_VARS = (
    "AI_PROVIDER",
    "AI_MODEL",
    "AI_TEMPERATURE",
    "AI_TIMEOUT_S",
    "OPENROUTER_API_KEY",
    "DEEPSEEK_API_KEY",
    "OPENAI_API_KEY",
)


@pytest.fixture(autouse=True)
def clean_ai_env(monkeypatch):
    """Tests start without any AI provider configuration from the shell or .env."""
    for name in AI_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
