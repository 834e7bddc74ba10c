"""
Model boundary layer for LLM inference.

This package turns "prompt + expected JSON shape" into a validated object,
keeping callers agnostic of which provider or model answered.

Supported backends:
- StubModelBackend: Deterministic fake model (default for CI/tests)
- OpenRouterModelBackend: OpenRouter chat completions (free model fallback list)
- DeepSeekModelBackend: DeepSeek chat completions

Example usage:
    from inference import AIGateway, StubModelBackend, build_candidates, obj, string

    gateway = AIGateway(
        backend=StubModelBackend(),
        candidates=build_candidates("stub", ["stub-model"]),
        credential_resolver=lambda: "stub",
    )
    result = gateway.invoke("Summarize photosynthesis", obj({"summary": string()}))
"""

from .types import (
    AttemptOutcome,
    CompletionRequest,
    CompletionResult,
    ModelCandidate,
    ModelRequest,
    ModelResponse,
    ModelStatus,
)
from .base import ModelBackend
from .errors import (
    AllCandidatesExhausted,
    ConfigurationError,
    FatalProviderError,
    InvocationError,
    MalformedResponse,
    ModelUnavailable,
    QuotaExhausted,
    SchemaValidationError,
)
from .schema import Schema, ObjectSchema, array, boolean, enum, integer, number, obj, string
from .parsing import JSONExtractionError, extract_json, strip_code_fences
from .chat_completions import ChatCompletionsBackend
from .openrouter import OpenRouterModelBackend, OPENROUTER_FREE_MODELS
from .deepseek import DeepSeekModelBackend, DEEPSEEK_MODELS
from .stub import StubModelBackend
from .gateway import AIGateway, build_candidates, compose_system_instruction

__all__ = [
    "AttemptOutcome",
    "CompletionRequest",
    "CompletionResult",
    "ModelCandidate",
    "ModelRequest",
    "ModelResponse",
    "ModelStatus",
    "ModelBackend",
    "AllCandidatesExhausted",
    "ConfigurationError",
    "FatalProviderError",
    "InvocationError",
    "MalformedResponse",
    "ModelUnavailable",
    "QuotaExhausted",
    "SchemaValidationError",
    "Schema",
    "ObjectSchema",
    "array",
    "boolean",
    "enum",
    "integer",
    "number",
    "obj",
    "string",
    "JSONExtractionError",
    "extract_json",
    "strip_code_fences",
    "ChatCompletionsBackend",
    "OpenRouterModelBackend",
    "OPENROUTER_FREE_MODELS",
    "DeepSeekModelBackend",
    "DEEPSEEK_MODELS",
    "StubModelBackend",
    "AIGateway",
    "build_candidates",
    "compose_system_instruction",
]
