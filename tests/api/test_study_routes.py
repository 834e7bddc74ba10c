"""
tests/api/test_study_routes.py

HTTP tests for the study endpoints.

Verifies:
✔ Stub provider serves every endpoint end-to-end
✔ Request validation → 422
✔ Missing credential → 503, no outbound request
✔ Quota exhausted → 503
✔ All models failed → 502 with a generic message
✔ Essay score clamped in the response; NaN scores never reach the client
"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from inference import AIGateway, StubModelBackend, build_candidates
from inference.stub import http_failure, success
from main import app

client = TestClient(app)


def scripted_gateway(*responses) -> AIGateway:
    return AIGateway(
        backend=StubModelBackend(responses=list(responses)),
        candidates=build_candidates("stub", ["model-a", "model-b"]),
        credential_resolver=lambda: "key",
    )


class TestStubProvider:
    def test_questions_from_pdf(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "stub")
        response = client.post("/questions/from-pdf", json={
            "pdf_text": "Texto de estudo",
            "question_type": "C",
            "number_of_questions": 3,
            "difficulty": "medium",
        })

        assert response.status_code == 200
        question = response.json()["questions"][0]
        assert set(question) >= {"text", "correct_answer", "justification", "source_page"}

    def test_questions_from_topic_defaults(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "stub")
        response = client.post("/questions/from-topic", json={"topic": "Direito Administrativo"})

        assert response.status_code == 200
        assert response.json()["questions"][0] == {"question": "stub", "answer": "stub"}

    def test_parse_questions(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "stub")
        response = client.post("/questions/parse", json={"raw_text": "1) Pergunta?"})

        assert response.status_code == 200
        assert response.json()["questions"][0]["type"] == "A"

    def test_adjust_difficulty(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "stub")
        response = client.post("/questions/adjust-difficulty", json={
            "question": "Q?",
            "current_difficulty": "easy",
            "desired_difficulty": "hard",
        })

        assert response.status_code == 200
        assert response.json() == {"adjusted_question": "stub"}

    def test_essay_topics_three(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "stub")
        response = client.post("/essays/topics", json={"content": "Conteúdo"})

        assert response.status_code == 200
        assert len(response.json()["topics"]) == 3

    def test_summarize(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "stub")
        response = client.post("/study/summarize", json={"study_material": "Material"})

        assert response.status_code == 200
        assert response.json() == {"summary": "stub"}


class TestValidation:
    def test_missing_field(self):
        response = client.post("/questions/from-pdf", json={"pdf_text": "x"})
        assert response.status_code == 422

    def test_topic_count_above_ten(self):
        response = client.post("/questions/from-topic", json={"topic": "x", "number_of_questions": 11})
        assert response.status_code == 422

    def test_blank_topic_rejected_by_flow(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "stub")
        response = client.post("/questions/from-topic", json={"topic": "   "})

        assert response.status_code == 422
        assert "topic" in response.json()["detail"]

    def test_max_score_positive(self):
        response = client.post("/essays/grade", json={"topic": "t", "essay": "e", "max_score": 0})
        assert response.status_code == 422


class TestErrorMapping:
    def test_missing_credential_is_503_without_request(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "openrouter")
        with patch("inference.chat_completions.requests.post") as mock_post:
            response = client.post("/study/summarize", json={"study_material": "Material"})

        assert response.status_code == 503
        assert response.json()["detail"] == "The AI service is not configured."
        mock_post.assert_not_called()

    def test_unknown_provider_is_503(self, monkeypatch):
        monkeypatch.setenv("AI_PROVIDER", "nope")
        response = client.post("/study/summarize", json={"study_material": "Material"})

        assert response.status_code == 503

    def test_quota_exhausted_is_503(self):
        with patch("study.flows.get_gateway", return_value=scripted_gateway(http_failure(402, "Insufficient credits"))):
            response = client.post("/essays/topics", json={"content": "Conteúdo"})

        assert response.status_code == 503
        assert "Insufficient" not in response.json()["detail"]

    def test_all_models_failed_is_502(self):
        gateway = scripted_gateway(success("not json"), http_failure(404))
        with patch("study.flows.get_gateway", return_value=gateway):
            response = client.post("/study/summarize", json={"study_material": "Material"})

        assert response.status_code == 502
        assert response.json()["detail"] == "The AI service could not complete the request. Please try again."

    def test_fallback_is_invisible_to_client(self):
        gateway = scripted_gateway(http_failure(404), success({"summary": "from second model"}))
        with patch("study.flows.get_gateway", return_value=gateway):
            response = client.post("/study/summarize", json={"study_material": "Material"})

        assert response.status_code == 200
        assert response.json() == {"summary": "from second model"}


class TestEssayGrade:
    def test_score_clamped(self):
        grade = {
            "final_score": 42,
            "feedback": "f",
            "strengths": ["s"],
            "weaknesses": ["w"],
            "detailed_analysis": "d",
        }
        with patch("study.flows.get_gateway", return_value=scripted_gateway(success(grade))):
            response = client.post("/essays/grade", json={"topic": "t", "essay": "e", "max_score": 10})

        assert response.status_code == 200
        assert response.json()["final_score"] == 10

    def test_nan_score_falls_back_to_next_model(self):
        nan_grade = '{"final_score": NaN, "feedback": "f", "strengths": [], "weaknesses": [], "detailed_analysis": "d"}'
        grade = {
            "final_score": 6.5,
            "feedback": "f",
            "strengths": ["s"],
            "weaknesses": ["w"],
            "detailed_analysis": "d",
        }
        with patch("study.flows.get_gateway", return_value=scripted_gateway(success(nan_grade), success(grade))):
            response = client.post("/essays/grade", json={"topic": "t", "essay": "e", "max_score": 10})

        assert response.status_code == 200
        assert response.json()["final_score"] == 6.5

    def test_nan_score_everywhere_is_502(self):
        nan_grade = '{"final_score": NaN, "feedback": "f", "strengths": [], "weaknesses": [], "detailed_analysis": "d"}'
        with patch("study.flows.get_gateway", return_value=scripted_gateway(success(nan_grade), success(nan_grade))):
            response = client.post("/essays/grade", json={"topic": "t", "essay": "e", "max_score": 10})

        assert response.status_code == 502
