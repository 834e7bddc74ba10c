"""
AI Invocation Gateway.

One entry point, invoke(), used by every study flow:

    gateway = AIGateway(backend, candidates, credential_resolver)
    result = gateway.invoke(user_prompt, schema, system_instruction)
    result.data  # dict conforming to schema

Fallback loop:
  - credential missing            → ConfigurationError (no request made)
  - quota exhausted (402)         → QuotaExhausted (loop aborted)
  - model unavailable / HTTP error→ skip to next candidate
  - empty / unparseable / invalid → skip to next candidate
  - first conforming object       → returned immediately
  - list exhausted                → AllCandidatesExhausted(last_error)

Candidates are tried strictly one after another. No backoff, no racing.
"""

import logging
import uuid
from typing import Callable, Iterable, List, Optional, Sequence

from .base import ModelBackend
from .errors import (
    AllCandidatesExhausted,
    ConfigurationError,
    FatalProviderError,
    MalformedResponse,
    ModelUnavailable,
    QuotaExhausted,
    SchemaValidationError,
)
from .parsing import JSONExtractionError, extract_json
from .schema import ObjectSchema
from .types import AttemptOutcome, CompletionRequest, CompletionResult, ModelCandidate, ModelRequest, ModelResponse

logger = logging.getLogger(__name__)

CredentialResolver = Callable[[], Optional[str]]

DEFAULT_SYSTEM_INSTRUCTION = "You are a helpful assistant."

JSON_DIRECTIVE = (
    "Respond EXCLUSIVELY with one valid JSON object that follows this JSON schema: {schema}\n"
    "Do not write explanations, prose or Markdown code blocks (```json). "
    "The first character of your answer must be {{ and the last must be }}."
)


def build_candidates(
    provider: str,
    fallback_models: Iterable[str],
    override: Optional[str] = None,
) -> List[ModelCandidate]:
    """Override first, then fallbacks; duplicates and blanks removed, order kept."""
    seen = set()
    candidates = []
    for model in [override, *fallback_models]:
        model = (model or "").strip()
        if not model or model in seen:
            continue
        seen.add(model)
        candidates.append(ModelCandidate(model=model, provider=provider))
    return candidates


def compose_system_instruction(system_instruction: Optional[str], schema: ObjectSchema) -> str:
    base = (system_instruction or "").strip() or DEFAULT_SYSTEM_INSTRUCTION
    return f"{base}\n\n{JSON_DIRECTIVE.format(schema=schema.to_prompt())}"


class AIGateway:
    """
    Schema-validated chat completion with ordered model fallback.

    The gateway holds no state between invocations: the backend, candidate list
    and credential resolver are injected, and every invoke() starts from scratch.
    """

    def __init__(
        self,
        backend: ModelBackend,
        candidates: Sequence[ModelCandidate],
        credential_resolver: CredentialResolver,
        temperature: float = 0.2,
        timeout_s: Optional[float] = 30.0,
    ):
        """
        Args:
            backend:             Transport for a single chat-completion request
            candidates:          Ordered models to try
            credential_resolver: Returns the provider credential, or None
            temperature:         Sampling temperature (low: structure over style)
            timeout_s:           Per-attempt timeout
        """
        self.backend = backend
        self.candidates = list(candidates)
        self.credential_resolver = credential_resolver
        self.temperature = temperature
        self.timeout_s = timeout_s

    def invoke(
        self,
        user_prompt: str,
        output_schema: ObjectSchema,
        system_instruction: Optional[str] = None,
    ) -> CompletionResult:
        """
        Run the fallback loop for one request.

        Raises:
            ValueError: empty prompt or non-object schema
            ConfigurationError: no credential
            QuotaExhausted: provider balance/quota exhausted
            AllCandidatesExhausted: no candidate produced a conforming object
        """
        request = CompletionRequest(
            user_prompt=user_prompt,
            output_schema=output_schema,
            system_instruction=system_instruction,
        )

        api_key = self.credential_resolver()
        if not api_key:
            raise ConfigurationError(
                f"No API key configured for provider '{self.backend.provider}'"
            )

        if not self.candidates:
            raise AllCandidatesExhausted("No candidate models configured", attempts=0)

        trace_id = str(uuid.uuid4())
        messages = [
            {"role": "system", "content": compose_system_instruction(request.system_instruction, request.output_schema)},
            {"role": "user", "content": request.user_prompt},
        ]
        schema_description = request.output_schema.describe()

        skipped = []
        last_error: Optional[Exception] = None

        for attempt, candidate in enumerate(self.candidates, start=1):
            response = self.backend.generate(
                ModelRequest(
                    model=candidate.model,
                    messages=messages,
                    json_mode=True,
                    temperature=self.temperature,
                    timeout_s=self.timeout_s,
                    trace_id=trace_id,
                    response_schema=schema_description,
                ),
                api_key,
            )
            outcome = self._evaluate(candidate, response, request.output_schema)

            if outcome.status == "success":
                logger.info(
                    f"Model {candidate.model} answered on attempt {attempt}",
                    extra={"model": candidate.model, "provider": candidate.provider, "trace_id": trace_id},
                )
                return CompletionResult(
                    data=outcome.data or {},
                    model=candidate.model,
                    attempts=attempt,
                    skipped=skipped,
                )

            if outcome.status == "fatal":
                logger.error(
                    f"Model {candidate.model} failed fatally: {outcome.error}",
                    extra={"model": candidate.model, "provider": candidate.provider, "trace_id": trace_id},
                )
                raise outcome.error  # type: ignore[misc]

            last_error = outcome.error
            skipped.append({"model": candidate.model, "reason": str(outcome.error)})
            logger.warning(
                f"Model {candidate.model} skipped: {outcome.error}",
                extra={
                    "model": candidate.model,
                    "provider": candidate.provider,
                    "error_type": response.error_type,
                    "trace_id": trace_id,
                },
            )

        raise AllCandidatesExhausted(
            f"All {len(self.candidates)} AI models failed. Last error: {last_error}",
            last_error=last_error,
            attempts=len(self.candidates),
        )

    def _evaluate(self, candidate: ModelCandidate, response: ModelResponse, schema: ObjectSchema) -> AttemptOutcome:
        """Turn one backend response into success, skip or fatal."""
        meta = response.metadata or {}

        if response.status == "fatal_error":
            detail = meta.get("error") or f"HTTP {meta.get('status_code')}"
            if response.error_type == "quota_exhausted":
                error = QuotaExhausted(f"Provider quota exhausted: {detail}", model=candidate.model)
            else:
                error = FatalProviderError(f"{response.error_type}: {detail}", model=candidate.model)
            return AttemptOutcome(status="fatal", error=error)

        if response.status == "recoverable_error":
            reason = response.error_type or "error"
            if meta.get("status_code"):
                reason = f"{reason} (HTTP {meta['status_code']})"
            if meta.get("error"):
                reason = f"{reason}: {meta['error']}"
            return AttemptOutcome(
                status="skip",
                error=ModelUnavailable(reason, model=candidate.model),
            )

        if response.output is not None and not isinstance(response.output, str):
            return AttemptOutcome(
                status="skip",
                error=MalformedResponse(
                    f"Content is {type(response.output).__name__}, not text", model=candidate.model
                ),
            )

        if not (response.output or "").strip():
            return AttemptOutcome(
                status="skip",
                error=MalformedResponse("Empty content", model=candidate.model),
            )

        try:
            parsed = extract_json(response.output or "")
        except JSONExtractionError as e:
            return AttemptOutcome(
                status="skip",
                error=MalformedResponse(f"Unparseable JSON: {e}", last_error=e, model=candidate.model),
            )

        try:
            data = schema.validate(parsed)
        except SchemaValidationError as e:
            return AttemptOutcome(
                status="skip",
                error=MalformedResponse(f"Schema mismatch: {e}", last_error=e, model=candidate.model),
            )

        return AttemptOutcome(status="success", data=data)
