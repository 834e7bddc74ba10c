"""
API Schemas

PURE DATA MODELS - NO LOGIC
Request bodies accepted from the UI and the response shapes returned to it.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


# ============================================================================
# REQUESTS
# ============================================================================

class PdfQuestionsRequest(BaseModel):
    """Generate questions from extracted PDF text."""

    pdf_text: str = Field(..., min_length=1, description="Cleaned text of the study PDF")
    question_type: Literal["A", "C"] = Field(..., description="A: true/false, C: multiple choice")
    number_of_questions: int = Field(..., ge=1, le=50)
    difficulty: str = Field(..., min_length=1, description="Free-form difficulty label")


class TopicQuestionsRequest(BaseModel):
    """Generate questions about a topic."""

    topic: str = Field(..., min_length=1)
    difficulty: Literal["easy", "medium", "hard"] = "medium"
    number_of_questions: int = Field(default=5, ge=1, le=10)


class ParseQuestionsRequest(BaseModel):
    raw_text: str = Field(..., min_length=1, description="Text pasted by the user")


class AdjustDifficultyRequest(BaseModel):
    question: str = Field(..., min_length=1)
    current_difficulty: str = Field(..., min_length=1)
    desired_difficulty: str = Field(..., min_length=1)


class EssayTopicsRequest(BaseModel):
    content: str = Field(..., min_length=1)


class EssayGradeRequest(BaseModel):
    topic: str = Field(..., min_length=1)
    essay: str = Field(..., min_length=1)
    max_score: float = Field(..., gt=0)


class SummarizeRequest(BaseModel):
    study_material: str = Field(..., min_length=1)


# ============================================================================
# RESPONSES
# ============================================================================

class PdfQuestion(BaseModel):
    text: str
    options: Optional[List[str]] = None
    correct_answer: str
    justification: str
    source_page: int


class PdfQuestionsResponse(BaseModel):
    questions: List[PdfQuestion]


class TopicQuestion(BaseModel):
    question: str
    answer: str


class TopicQuestionsResponse(BaseModel):
    questions: List[TopicQuestion]


class ParsedQuestion(BaseModel):
    text: str
    options: Optional[List[str]] = None
    correct_answer: str
    justification: str
    type: Literal["A", "C"]


class ParseQuestionsResponse(BaseModel):
    questions: List[ParsedQuestion]


class AdjustDifficultyResponse(BaseModel):
    adjusted_question: str


class EssayTopicsResponse(BaseModel):
    topics: List[str]


class EssayGradeResponse(BaseModel):
    final_score: float
    feedback: str
    strengths: List[str]
    weaknesses: List[str]
    detailed_analysis: str


class SummarizeResponse(BaseModel):
    summary: str


class PdfExtractResponse(BaseModel):
    text: str
    characters: int
    page_count: int
