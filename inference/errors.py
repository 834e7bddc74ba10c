"""
Invocation error taxonomy.

Fatal (propagate immediately, no other candidate is tried):
- ConfigurationError: no credential for the selected provider
- FatalProviderError: provider-wide failure
  - QuotaExhausted: provider account is out of balance/credits

Transient (per candidate, recorded and logged inside the fallback loop):
- ModelUnavailable: model unknown, deprecated or offline
- MalformedResponse: empty content, unparseable JSON or schema mismatch

Terminal:
- AllCandidatesExhausted: every candidate failed; wraps the last transient error
"""

from typing import Optional


class InvocationError(Exception):
    """Base class for every error the gateway surfaces."""

    kind: str = "invocation_error"

    def __init__(self, message: str, last_error: Optional[BaseException] = None, model: Optional[str] = None):
        self.last_error = last_error
        self.model = model
        super().__init__(message)


class ConfigurationError(InvocationError):
    """Provider credential is missing. Never retried across candidates."""

    kind = "auth_missing"


class FatalProviderError(InvocationError):
    """Provider failure no other candidate can recover from. Aborts the fallback loop."""

    kind = "fatal_provider_error"


class QuotaExhausted(FatalProviderError):
    """Provider reported exhausted balance or quota."""

    kind = "quota_exhausted"


class ModelUnavailable(InvocationError):
    """A single candidate could not serve the request."""

    kind = "model_unavailable"


class MalformedResponse(InvocationError):
    """A single candidate answered, but not with a conforming JSON object."""

    kind = "malformed_response"


class AllCandidatesExhausted(InvocationError):
    """Every candidate model failed."""

    kind = "all_candidates_exhausted"

    def __init__(self, message: str, last_error: Optional[BaseException] = None, attempts: int = 0):
        self.attempts = attempts
        super().__init__(message, last_error=last_error)


class SchemaValidationError(ValueError):
    """Parsed JSON does not match the declared output schema."""
    pass
