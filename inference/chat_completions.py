import logging
from typing import Any, Dict, Iterable, Optional

import requests

from .base import ModelBackend
from .types import ModelRequest, ModelResponse

logger = logging.getLogger(__name__)

# Error-body fragments that mean the account, not the model, is the problem.
_QUOTA_MARKERS = (
    "insufficient balance",
    "insufficient credits",
    "insufficient_quota",
    "quota exceeded",
    "out of credits",
)
# Error-body fragments that mean this particular model cannot serve requests.
_MODEL_MARKERS = (
    "not a valid model",
    "model not found",
    "no endpoints found",
    "does not exist",
    "model is not available",
    "deprecated",
)


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or resp.reason or "").strip()
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict):
            return str(err.get("message") or err.get("code") or "")
        if err:
            return str(err)
    return (resp.reason or "").strip()


def _content_text(content: Any) -> Optional[str]:
    """
    Message content as text.

    Some providers send a list of typed parts instead of a string; the text
    parts are joined. Returns None for anything else.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for part in content:
            if isinstance(part, str):
                texts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                texts.append(part["text"])
            else:
                return None
        return "".join(texts)
    return None


def classify_http_failure(status_code: int, message: str) -> ModelResponse:
    """
    Map a non-2xx provider answer to an attempt outcome.

    402 or a quota message → fatal (no other model will fare better)
    404, or a model-specific 400 → recoverable model_unavailable
    anything else → recoverable http_error
    """
    lowered = (message or "").lower()
    meta = {"status_code": status_code, "error": message}

    if status_code == 402 or any(m in lowered for m in _QUOTA_MARKERS):
        return ModelResponse(status="fatal_error", error_type="quota_exhausted", metadata=meta)

    if status_code == 404 or (status_code == 400 and any(m in lowered for m in _MODEL_MARKERS)):
        return ModelResponse(status="recoverable_error", error_type="model_unavailable", metadata=meta)

    return ModelResponse(status="recoverable_error", error_type="http_error", metadata=meta)


class ChatCompletionsBackend(ModelBackend):
    """
    Backend for any OpenAI-compatible /chat/completions endpoint.

    Flow:
      1. Build payload: model, messages, temperature, optional response_format
      2. POST with Bearer credential plus provider headers
      3. Map transport/HTTP failures to recoverable or fatal outcomes
      4. Return choices[0].message.content as output on success
    """

    provider = "openai-compatible"

    def __init__(
        self,
        url: str,
        extra_headers: Optional[Dict[str, str]] = None,
        json_mode_unsupported: Optional[Iterable[str]] = None,
    ):
        """
        Args:
            url:                   Full chat-completions URL
            extra_headers:         Provider-required headers (e.g. attribution)
            json_mode_unsupported: Models that reject response_format
        """
        super().__init__(json_mode_unsupported)
        self.url = url
        self.extra_headers = dict(extra_headers or {})

    def build_payload(self, request: ModelRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": request.messages,
            "temperature": request.temperature,
        }
        if request.json_mode and self.supports_json_mode(request.model):
            payload["response_format"] = {"type": "json_object"}
        return payload

    def build_headers(self, api_key: str) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        headers.update(self.extra_headers)
        return headers

    def generate(self, request: ModelRequest, api_key: str) -> ModelResponse:
        base_metadata = {
            "backend": self.provider,
            "model": request.model,
            "trace_id": request.trace_id,
        }

        try:
            resp = requests.post(
                self.url,
                json=self.build_payload(request),
                headers=self.build_headers(api_key),
                timeout=request.timeout_s,
            )
        except requests.Timeout:
            return ModelResponse(
                status="recoverable_error",
                error_type="timeout",
                metadata=base_metadata,
            )
        except requests.RequestException as e:
            return ModelResponse(
                status="recoverable_error",
                error_type="network_error",
                metadata={**base_metadata, "error": str(e)},
            )

        if not resp.ok:
            outcome = classify_http_failure(resp.status_code, _error_message(resp))
            outcome.metadata = {**base_metadata, **(outcome.metadata or {})}
            return outcome

        try:
            data = resp.json()
        except ValueError:
            return ModelResponse(
                status="recoverable_error",
                error_type="invalid_body",
                metadata={**base_metadata, "status_code": resp.status_code},
            )

        # Some gateways answer 200 with an error object instead of choices.
        if isinstance(data, dict) and data.get("error") and not data.get("choices"):
            err = data["error"]
            message = str(err.get("message", "")) if isinstance(err, dict) else str(err)
            code = err.get("code") if isinstance(err, dict) else None
            outcome = classify_http_failure(code if isinstance(code, int) else resp.status_code, message)
            outcome.metadata = {**base_metadata, **(outcome.metadata or {})}
            return outcome

        content = None
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            logger.debug(f"No message content in response from {request.model}")

        output = _content_text(content)
        if output is None:
            return ModelResponse(
                status="recoverable_error",
                error_type="invalid_body",
                metadata={
                    **base_metadata,
                    "status_code": resp.status_code,
                    "error": f"message content is {type(content).__name__}, not text",
                },
            )

        return ModelResponse(
            status="success",
            output=output,
            metadata={**base_metadata, "status_code": resp.status_code},
        )
