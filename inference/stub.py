import json
from typing import Any, Dict, List, Optional, Sequence, Union

from .base import ModelBackend
from .chat_completions import classify_http_failure
from .types import ModelRequest, ModelResponse

Scripted = Union[ModelResponse, Sequence[ModelResponse]]


def placeholder_for(description: Dict[str, Any]) -> Any:
    """Smallest value conforming to a Schema.describe() dict."""
    kind = description.get("type")
    if "enum" in description:
        return description["enum"][0]
    if kind == "string":
        return "stub"
    if kind in ("number", "integer"):
        return 0
    if kind == "boolean":
        return False
    if kind == "array":
        count = max(description.get("minItems") or 1, 1)
        if description.get("maxItems") is not None:
            count = min(count, description["maxItems"])
        return [placeholder_for(description["items"]) for _ in range(count)]
    if kind == "object":
        return {
            name: placeholder_for(node)
            for name, node in description.get("properties", {}).items()
        }
    return None


class StubModelBackend(ModelBackend):
    """
    Deterministic fake model for testing, CI and local development.

    Behaviour, in priority order:
    - by_model: responses scripted per model id (a list is consumed in order,
      the last entry repeats)
    - responses: responses consumed in call order regardless of model
    - otherwise: a placeholder object conforming to request.response_schema

    Every request is recorded in .calls.
    """

    provider = "stub"

    def __init__(
        self,
        by_model: Optional[Dict[str, Scripted]] = None,
        responses: Optional[Sequence[ModelResponse]] = None,
    ):
        super().__init__()
        self._by_model: Dict[str, List[ModelResponse]] = {
            model: [scripted] if isinstance(scripted, ModelResponse) else list(scripted)
            for model, scripted in (by_model or {}).items()
        }
        self._responses = list(responses or [])
        self.calls: List[ModelRequest] = []

    def generate(self, request: ModelRequest, api_key: str) -> ModelResponse:
        self.calls.append(request)
        meta = {"backend": "stub", "model": request.model, "trace_id": request.trace_id}

        queue = self._by_model.get(request.model)
        if queue:
            scripted = queue.pop(0) if len(queue) > 1 else queue[0]
            return _with_metadata(scripted, meta)

        if self._responses:
            return _with_metadata(self._responses.pop(0), meta)

        if request.response_schema:
            return ModelResponse(
                status="success",
                output=json.dumps(placeholder_for(request.response_schema)),
                metadata=meta,
            )

        return ModelResponse(status="recoverable_error", error_type="invalid_output", metadata=meta)


def _with_metadata(response: ModelResponse, meta: Dict[str, Any]) -> ModelResponse:
    return ModelResponse(
        status=response.status,
        output=response.output,
        error_type=response.error_type,
        metadata={**meta, **(response.metadata or {})},
    )


def success(output: Union[str, Dict[str, Any]]) -> ModelResponse:
    """Scripted success; dicts are serialised to JSON text."""
    text = output if isinstance(output, str) else json.dumps(output)
    return ModelResponse(status="success", output=text)


def http_failure(status_code: int, message: str = "") -> ModelResponse:
    """Scripted provider failure, classified the same way real HTTP errors are."""
    return classify_http_failure(status_code, message)
