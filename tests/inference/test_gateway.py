"""
tests/inference/test_gateway.py

Unit tests for the AI Invocation Gateway fallback loop.

Verifies:
✔ Working first candidate → one HTTP call
✔ 404 then valid → second result, exactly one skipped candidate logged
✔ 402 first → QuotaExhausted after one HTTP call
✔ All unparseable → AllCandidatesExhausted after N calls
✔ Fenced content parses like unfenced content
✔ Missing required field triggers fallback, not a crash
✔ Non-text content and NaN literals trigger fallback, not a crash
✔ No credential → ConfigurationError, zero HTTP calls
✔ Composed system instruction carries the schema and JSON directive
✔ Candidate list: override first, deduplicated
"""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
import requests

from inference import (
    AIGateway,
    AllCandidatesExhausted,
    ChatCompletionsBackend,
    ConfigurationError,
    MalformedResponse,
    ModelResponse,
    ModelUnavailable,
    QuotaExhausted,
    StubModelBackend,
    build_candidates,
    compose_system_instruction,
    obj,
    string,
    array,
)
from inference.stub import http_failure, success


# ─────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────

SCHEMA = obj({
    "summary": string("Short summary"),
    "keywords": array(string(), optional=True),
})

MODELS = ["model-a", "model-b", "model-c"]


def make_http_response(status_code: int = 200, body=None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.reason = "OK" if resp.ok else "Error"
    resp.json.return_value = body
    resp.text = json.dumps(body)
    return resp


def chat_body(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_gateway(backend=None, api_key="sk-test", models=MODELS) -> AIGateway:
    return AIGateway(
        backend=backend or ChatCompletionsBackend(url="https://llm.example.com/v1/chat/completions"),
        candidates=build_candidates("test", models),
        credential_resolver=lambda: api_key,
    )


# ─────────────────────────────────────────────────────
# HTTP-level properties
# ─────────────────────────────────────────────────────


class TestGatewayOverHTTP:
    def test_first_candidate_success_makes_one_call(self):
        with patch("inference.chat_completions.requests.post") as mock_post:
            mock_post.return_value = make_http_response(200, chat_body('{"summary": "ok"}'))
            result = make_gateway().invoke("Summarize this", SCHEMA)

        assert result.data == {"summary": "ok"}
        assert result.model == "model-a"
        assert result.attempts == 1
        assert mock_post.call_count == 1

    def test_404_then_valid_returns_second_and_logs_one_skip(self, caplog):
        caplog.set_level(logging.WARNING, logger="inference.gateway")
        with patch("inference.chat_completions.requests.post") as mock_post:
            mock_post.side_effect = [
                make_http_response(404, {"error": {"message": "No endpoints found for model-a"}}),
                make_http_response(200, chat_body('{"summary": "from b"}')),
            ]
            result = make_gateway().invoke("Summarize this", SCHEMA)

        assert result.data == {"summary": "from b"}
        assert result.model == "model-b"
        assert mock_post.call_count == 2
        skipped = [r for r in caplog.records if "skipped" in r.getMessage()]
        assert len(skipped) == 1
        assert "model-a" in skipped[0].getMessage()
        assert len(result.skipped) == 1

    def test_402_aborts_immediately(self):
        with patch("inference.chat_completions.requests.post") as mock_post:
            mock_post.return_value = make_http_response(402, {"error": {"message": "Insufficient credits"}})
            with pytest.raises(QuotaExhausted) as exc_info:
                make_gateway().invoke("Summarize this", SCHEMA)

        assert mock_post.call_count == 1
        assert exc_info.value.model == "model-a"

    def test_quota_message_on_other_status_is_fatal(self):
        with patch("inference.chat_completions.requests.post") as mock_post:
            mock_post.return_value = make_http_response(429, {"error": {"message": "Insufficient Balance"}})
            with pytest.raises(QuotaExhausted):
                make_gateway().invoke("Summarize this", SCHEMA)

        assert mock_post.call_count == 1

    def test_all_unparseable_exhausts_after_n_calls(self):
        with patch("inference.chat_completions.requests.post") as mock_post:
            mock_post.return_value = make_http_response(200, chat_body("Sure! Here is your answer."))
            with pytest.raises(AllCandidatesExhausted) as exc_info:
                make_gateway().invoke("Summarize this", SCHEMA)

        assert mock_post.call_count == len(MODELS)
        assert exc_info.value.attempts == len(MODELS)
        assert isinstance(exc_info.value.last_error, MalformedResponse)

    def test_no_credential_makes_no_call(self):
        with patch("inference.chat_completions.requests.post") as mock_post:
            with pytest.raises(ConfigurationError):
                make_gateway(api_key=None).invoke("Summarize this", SCHEMA)

        mock_post.assert_not_called()

    def test_timeout_falls_through_to_next_candidate(self):
        with patch("inference.chat_completions.requests.post") as mock_post:
            mock_post.side_effect = [
                requests.Timeout("read timed out"),
                make_http_response(200, chat_body('{"summary": "late but fine"}')),
            ]
            result = make_gateway().invoke("Summarize this", SCHEMA)

        assert result.model == "model-b"
        assert result.attempts == 2

    def test_server_error_falls_through(self):
        with patch("inference.chat_completions.requests.post") as mock_post:
            mock_post.side_effect = [
                make_http_response(500, {"error": {"message": "upstream exploded"}}),
                make_http_response(503, None),
                make_http_response(200, chat_body('{"summary": "third time"}')),
            ]
            result = make_gateway().invoke("Summarize this", SCHEMA)

        assert result.model == "model-c"
        assert mock_post.call_count == 3

    def test_request_carries_timeout_and_temperature(self):
        gateway = make_gateway()
        gateway.timeout_s = 12.5
        gateway.temperature = 0.1
        with patch("inference.chat_completions.requests.post") as mock_post:
            mock_post.return_value = make_http_response(200, chat_body('{"summary": "ok"}'))
            gateway.invoke("Summarize this", SCHEMA)

        kwargs = mock_post.call_args.kwargs
        assert kwargs["timeout"] == 12.5
        assert kwargs["json"]["temperature"] == 0.1
        assert kwargs["json"]["response_format"] == {"type": "json_object"}
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"


# ─────────────────────────────────────────────────────
# Response handling (stub backend)
# ─────────────────────────────────────────────────────


class TestGatewayResponseHandling:
    def test_fenced_and_unfenced_are_equivalent(self):
        fenced = make_gateway(StubModelBackend(responses=[success('```json\n{"summary": "x"}\n```')]))
        plain = make_gateway(StubModelBackend(responses=[success('{"summary": "x"}')]))

        assert fenced.invoke("p", SCHEMA).data == plain.invoke("p", SCHEMA).data

    def test_missing_required_field_triggers_fallback(self):
        backend = StubModelBackend(by_model={
            "model-a": success({"keywords": ["no", "summary"]}),
            "model-b": success({"summary": "complete"}),
        })
        result = make_gateway(backend).invoke("p", SCHEMA)

        assert result.model == "model-b"
        assert result.data == {"summary": "complete"}
        assert "Schema mismatch" in result.skipped[0]["reason"]

    def test_missing_field_everywhere_is_treated_like_bad_json(self):
        backend = StubModelBackend(responses=[success({"wrong": 1})] * len(MODELS))
        with pytest.raises(AllCandidatesExhausted) as exc_info:
            make_gateway(backend).invoke("p", SCHEMA)

        assert len(backend.calls) == len(MODELS)
        assert isinstance(exc_info.value.last_error, MalformedResponse)

    def test_empty_content_skips(self):
        backend = StubModelBackend(responses=[success("   "), success({"summary": "second"})])
        result = make_gateway(backend).invoke("p", SCHEMA)

        assert result.model == "model-b"
        assert "Empty content" in result.skipped[0]["reason"]

    def test_prose_around_object_is_recovered(self):
        backend = StubModelBackend(responses=[success('Here you go: {"summary": "wrapped"} Hope it helps!')])
        result = make_gateway(backend).invoke("p", SCHEMA)

        assert result.data == {"summary": "wrapped"}
        assert result.attempts == 1

    def test_model_unavailable_is_last_error_when_all_404(self):
        backend = StubModelBackend(responses=[http_failure(404, "not found")] * len(MODELS))
        with pytest.raises(AllCandidatesExhausted) as exc_info:
            make_gateway(backend).invoke("p", SCHEMA)

        assert isinstance(exc_info.value.last_error, ModelUnavailable)
        assert exc_info.value.last_error.model == "model-c"

    def test_quota_after_skip_stops_the_loop(self):
        backend = StubModelBackend(responses=[http_failure(404), http_failure(402, "Insufficient Balance")])
        with pytest.raises(QuotaExhausted):
            make_gateway(backend).invoke("p", SCHEMA)

        assert [c.model for c in backend.calls] == ["model-a", "model-b"]

    def test_extra_keys_are_dropped(self):
        backend = StubModelBackend(responses=[success({"summary": "s", "chatter": "ignored"})])
        result = make_gateway(backend).invoke("p", SCHEMA)

        assert result.data == {"summary": "s"}

    def test_invocations_do_not_share_state(self):
        backend = StubModelBackend(by_model={
            "model-a": [http_failure(404), success({"summary": "second call"})],
            "model-b": success({"summary": "first call"}),
        })
        gateway = make_gateway(backend)

        first = gateway.invoke("p", SCHEMA)
        second = gateway.invoke("p", SCHEMA)

        assert first.model == "model-b" and first.skipped
        assert second.model == "model-a" and second.skipped == []

    def test_object_content_falls_through_to_next_candidate(self):
        with patch("inference.chat_completions.requests.post") as mock_post:
            mock_post.side_effect = [
                make_http_response(200, {"choices": [{"message": {"content": {"summary": "x"}}}]}),
                make_http_response(200, chat_body('{"summary": "from b"}')),
            ]
            result = make_gateway().invoke("Summarize this", SCHEMA)

        assert result.model == "model-b"
        assert result.data == {"summary": "from b"}

    def test_non_text_output_skips(self):
        backend = StubModelBackend(responses=[
            ModelResponse(status="success", output=[{"type": "text", "text": "{}"}]),
            success({"summary": "second"}),
        ])
        result = make_gateway(backend).invoke("p", SCHEMA)

        assert result.model == "model-b"
        assert "not text" in result.skipped[0]["reason"]

    def test_nan_literal_falls_through(self):
        backend = StubModelBackend(responses=[
            success('{"summary": "s", "score": NaN}'),
            success({"summary": "finite"}),
        ])
        result = make_gateway(backend).invoke("p", SCHEMA)

        assert result.model == "model-b"
        assert "Unparseable JSON" in result.skipped[0]["reason"]


# ─────────────────────────────────────────────────────
# Request validation and composition
# ─────────────────────────────────────────────────────


class TestGatewayRequest:
    def test_empty_prompt_rejected_before_io(self):
        backend = StubModelBackend()
        with pytest.raises(ValueError):
            make_gateway(backend).invoke("   ", SCHEMA)
        assert backend.calls == []

    def test_non_object_schema_rejected(self):
        with pytest.raises(ValueError):
            make_gateway(StubModelBackend()).invoke("p", string())

    def test_no_candidates_is_exhausted(self):
        gateway = make_gateway(StubModelBackend(), models=[])
        with pytest.raises(AllCandidatesExhausted):
            gateway.invoke("p", SCHEMA)

    def test_messages_are_system_then_user(self):
        backend = StubModelBackend(responses=[success({"summary": "s"})])
        make_gateway(backend).invoke("the user prompt", SCHEMA, system_instruction="You are a tutor.")

        messages = backend.calls[0].messages
        assert [m["role"] for m in messages] == ["system", "user"]
        assert messages[0]["content"].startswith("You are a tutor.")
        assert messages[1]["content"] == "the user prompt"

    def test_system_instruction_embeds_schema(self):
        text = compose_system_instruction(None, SCHEMA)

        assert text.startswith("You are a helpful assistant.")
        assert '"summary"' in text
        assert "```json" in text

    def test_stub_without_script_fabricates_conforming_object(self):
        result = make_gateway(StubModelBackend()).invoke("p", SCHEMA)

        assert result.data["summary"] == "stub"
        assert result.attempts == 1


class TestBuildCandidates:
    def test_override_first(self):
        candidates = build_candidates("openrouter", ["a", "b"], override="x")
        assert [c.model for c in candidates] == ["x", "a", "b"]
        assert all(c.provider == "openrouter" for c in candidates)

    def test_deduplicates_keeping_first(self):
        candidates = build_candidates("openrouter", ["a", "b", "a"], override="b")
        assert [c.model for c in candidates] == ["b", "a"]

    def test_blank_override_ignored(self):
        candidates = build_candidates("deepseek", ["deepseek-chat"], override="  ")
        assert [c.model for c in candidates] == ["deepseek-chat"]
