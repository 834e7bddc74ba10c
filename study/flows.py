"""
Study flows.

Each flow supplies a prompt and an output schema to the AI gateway and
returns the validated object as a plain dict. Flows hold no state; pass a
gateway explicitly (tests) or let get_gateway() build one from the
environment (API).
"""

import logging
from typing import Any, Dict, Optional

from inference import AIGateway
from infra import get_gateway

from . import prompts, schemas

logger = logging.getLogger(__name__)

MAX_TOPIC_QUESTIONS = 10


def _require(value: str, name: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{name} must not be empty")
    return value


def generate_questions_from_pdf(
    pdf_text: str,
    question_type: str,
    number_of_questions: int,
    difficulty: str,
    gateway: Optional[AIGateway] = None,
) -> Dict[str, Any]:
    """
    Generate exam questions grounded in extracted PDF text.

    question_type "A" produces true/false items (answer C or E);
    "C" produces multiple choice with five options.
    """
    pdf_text = _require(pdf_text, "pdf_text")
    if question_type not in schemas.QUESTION_TYPES:
        raise ValueError(f"question_type must be one of {schemas.QUESTION_TYPES}")
    if number_of_questions < 1:
        raise ValueError("number_of_questions must be at least 1")

    result = (gateway or get_gateway()).invoke(
        prompts.pdf_questions_prompt(pdf_text, question_type, number_of_questions, difficulty),
        schemas.PDF_QUESTIONS,
        system_instruction=prompts.EXAMINER_SYSTEM,
    )
    logger.info(
        f"Generated {len(result.data['questions'])} questions from PDF text",
        extra={"model": result.model, "attempts": result.attempts},
    )
    return result.data


def generate_questions_from_topic(
    topic: str,
    difficulty: str = "medium",
    number_of_questions: int = 5,
    gateway: Optional[AIGateway] = None,
) -> Dict[str, Any]:
    topic = _require(topic, "topic")
    if difficulty not in schemas.TOPIC_DIFFICULTIES:
        raise ValueError(f"difficulty must be one of {schemas.TOPIC_DIFFICULTIES}")
    if not 1 <= number_of_questions <= MAX_TOPIC_QUESTIONS:
        raise ValueError(f"number_of_questions must be between 1 and {MAX_TOPIC_QUESTIONS}")

    result = (gateway or get_gateway()).invoke(
        prompts.topic_questions_prompt(topic, difficulty, number_of_questions),
        schemas.TOPIC_QUESTIONS,
        system_instruction=prompts.TOPIC_SYSTEM,
    )
    return result.data


def parse_manual_questions(raw_text: str, gateway: Optional[AIGateway] = None) -> Dict[str, Any]:
    """Identify and structure questions pasted by the user as raw text."""
    raw_text = _require(raw_text, "raw_text")
    result = (gateway or get_gateway()).invoke(
        prompts.manual_questions_prompt(raw_text),
        schemas.MANUAL_QUESTIONS,
        system_instruction=prompts.PARSER_SYSTEM,
    )
    return result.data


def adjust_question_difficulty(
    question: str,
    current_difficulty: str,
    desired_difficulty: str,
    gateway: Optional[AIGateway] = None,
) -> Dict[str, Any]:
    question = _require(question, "question")
    result = (gateway or get_gateway()).invoke(
        prompts.adjust_difficulty_prompt(question, current_difficulty, desired_difficulty),
        schemas.ADJUSTED_QUESTION,
        system_instruction=prompts.DIFFICULTY_SYSTEM,
    )
    return result.data


def suggest_essay_topics(content: str, gateway: Optional[AIGateway] = None) -> Dict[str, Any]:
    """Three likely essay topics for the given study content."""
    content = _require(content, "content")
    result = (gateway or get_gateway()).invoke(
        prompts.essay_topics_prompt(content, schemas.ESSAY_TOPIC_COUNT),
        schemas.ESSAY_TOPICS,
        system_instruction=prompts.ESSAY_TOPICS_SYSTEM,
    )
    return result.data


def grade_essay(
    topic: str,
    essay: str,
    max_score: float,
    gateway: Optional[AIGateway] = None,
) -> Dict[str, Any]:
    """
    Grade an essay against the four Cebraspe criteria.

    The returned final_score is clamped to [0, max_score].
    """
    topic = _require(topic, "topic")
    essay = _require(essay, "essay")
    if max_score <= 0:
        raise ValueError("max_score must be positive")

    result = (gateway or get_gateway()).invoke(
        prompts.essay_grade_prompt(topic, essay, max_score),
        schemas.ESSAY_GRADE,
        system_instruction=prompts.ESSAY_GRADER_SYSTEM,
    )
    data = result.data
    score = data["final_score"]
    if not 0 <= score <= max_score:
        logger.warning(
            f"Model {result.model} returned score {score} outside 0..{max_score}; clamping",
            extra={"model": result.model},
        )
        data["final_score"] = min(max(score, 0), max_score)
    return data


def summarize_study_material(study_material: str, gateway: Optional[AIGateway] = None) -> Dict[str, Any]:
    study_material = _require(study_material, "study_material")
    result = (gateway or get_gateway()).invoke(
        prompts.summary_prompt(study_material),
        schemas.SUMMARY,
        system_instruction=prompts.SUMMARY_SYSTEM,
    )
    return result.data
