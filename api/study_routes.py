"""
Study Endpoints

FastAPI router exposing the study flows to the UI.
No prompt logic here; routes only call a flow and translate its errors.

Routes are plain (sync) functions: the gateway blocks on HTTP, so FastAPI runs
each request in its worker thread pool.
"""

import logging
from typing import Any, Callable, Dict

from fastapi import APIRouter, HTTPException, status

from inference import (
    AllCandidatesExhausted,
    ConfigurationError,
    FatalProviderError,
    InvocationError,
)
from study import flows

from .schemas import (
    AdjustDifficultyRequest,
    AdjustDifficultyResponse,
    EssayGradeRequest,
    EssayGradeResponse,
    EssayTopicsRequest,
    EssayTopicsResponse,
    ParseQuestionsRequest,
    ParseQuestionsResponse,
    PdfQuestionsRequest,
    PdfQuestionsResponse,
    SummarizeRequest,
    SummarizeResponse,
    TopicQuestionsRequest,
    TopicQuestionsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Study"])

GENERIC_AI_FAILURE = "The AI service could not complete the request. Please try again."


def run_flow(name: str, flow: Callable[..., Dict[str, Any]], **kwargs: Any) -> Dict[str, Any]:
    """
    Call a flow and translate gateway errors into HTTP errors.

    User-facing details stay generic; the cause is logged.
    """
    try:
        return flow(**kwargs)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except ConfigurationError as e:
        logger.error(f"{name}: AI provider not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="The AI service is not configured.",
        )
    except FatalProviderError as e:
        logger.error(f"{name}: provider refused the request: {e}", extra={"model": e.model})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="The AI service is temporarily unavailable.",
        )
    except AllCandidatesExhausted as e:
        logger.error(
            f"{name}: all models failed after {e.attempts} attempts: {e.last_error}",
            extra={"attempts": e.attempts},
        )
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=GENERIC_AI_FAILURE)
    except InvocationError as e:
        logger.error(f"{name}: invocation failed: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=GENERIC_AI_FAILURE)


@router.post("/questions/from-pdf", response_model=PdfQuestionsResponse)
def questions_from_pdf(body: PdfQuestionsRequest):
    """Generate original exam questions from extracted PDF text."""
    return run_flow(
        "questions_from_pdf",
        flows.generate_questions_from_pdf,
        pdf_text=body.pdf_text,
        question_type=body.question_type,
        number_of_questions=body.number_of_questions,
        difficulty=body.difficulty,
    )


@router.post("/questions/from-topic", response_model=TopicQuestionsResponse)
def questions_from_topic(body: TopicQuestionsRequest):
    return run_flow(
        "questions_from_topic",
        flows.generate_questions_from_topic,
        topic=body.topic,
        difficulty=body.difficulty,
        number_of_questions=body.number_of_questions,
    )


@router.post("/questions/parse", response_model=ParseQuestionsResponse)
def parse_questions(body: ParseQuestionsRequest):
    """Structure questions pasted as raw text."""
    return run_flow("parse_questions", flows.parse_manual_questions, raw_text=body.raw_text)


@router.post("/questions/adjust-difficulty", response_model=AdjustDifficultyResponse)
def adjust_difficulty(body: AdjustDifficultyRequest):
    return run_flow(
        "adjust_difficulty",
        flows.adjust_question_difficulty,
        question=body.question,
        current_difficulty=body.current_difficulty,
        desired_difficulty=body.desired_difficulty,
    )


@router.post("/essays/topics", response_model=EssayTopicsResponse)
def essay_topics(body: EssayTopicsRequest):
    return run_flow("essay_topics", flows.suggest_essay_topics, content=body.content)


@router.post("/essays/grade", response_model=EssayGradeResponse)
def essay_grade(body: EssayGradeRequest):
    """Grade an essay; final_score never exceeds max_score."""
    return run_flow(
        "essay_grade",
        flows.grade_essay,
        topic=body.topic,
        essay=body.essay,
        max_score=body.max_score,
    )


@router.post("/study/summarize", response_model=SummarizeResponse)
def summarize(body: SummarizeRequest):
    return run_flow("summarize", flows.summarize_study_material, study_material=body.study_material)
