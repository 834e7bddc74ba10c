"""
Configuration management for the Questões AI backend.

Loads environment variables from .env file and provides typed access to
application-level configuration. AI provider settings live in infra/config.py
and are re-read on every request.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class Config:
    """Configuration class for the Questões AI backend."""

    APP_NAME = os.getenv("APP_NAME", "Questões AI API")
    APP_VERSION = "1.0.0"

    # HTTP server
    APP_PORT = int(os.getenv("APP_PORT", "8000"))
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Upload limits
    MAX_PDF_BYTES = int(os.getenv("MAX_PDF_BYTES", str(20 * 1024 * 1024)))

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def validate(cls) -> bool:
        """Validate that the selected AI provider has a credential."""
        provider = os.getenv("AI_PROVIDER", "openrouter").lower()
        required = {
            "openrouter": ["OPENROUTER_API_KEY"],
            "deepseek": ["DEEPSEEK_API_KEY", "OPENAI_API_KEY"],
        }.get(provider, [])

        if required and not any(os.getenv(key) for key in required):
            print(f"⚠️  Missing required environment variable: {' or '.join(required)}")
            print(f"   Please set it in .env file")
            return False

        return True


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  App: {Config.APP_NAME} {Config.APP_VERSION}")
    print(f"  Port: {Config.APP_PORT}")
    print(f"  AI Provider: {os.getenv('AI_PROVIDER', 'openrouter')}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")
