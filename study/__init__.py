"""
Study flows built on the AI gateway.

Every flow is a thin wrapper: a prompt, an output schema and one
gateway.invoke() call.
"""

from .flows import (
    adjust_question_difficulty,
    generate_questions_from_pdf,
    generate_questions_from_topic,
    grade_essay,
    parse_manual_questions,
    suggest_essay_topics,
    summarize_study_material,
)

__all__ = [
    "adjust_question_difficulty",
    "generate_questions_from_pdf",
    "generate_questions_from_topic",
    "grade_essay",
    "parse_manual_questions",
    "suggest_essay_topics",
    "summarize_study_material",
]
