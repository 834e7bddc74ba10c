"""
Prompt text for the study flows.

System instructions describe the role; user prompts carry the material.
The JSON-only directive and the schema are appended by the gateway.
"""

EXAMINER_SYSTEM = (
    "You are an expert examiner for high-level public service exams (Cebraspe, FGV, FCC). "
    "Your mission is to create COMPLETELY ORIGINAL questions based ENTIRELY on the text provided. "
    "Cover the whole document and give detailed teaching justifications citing the approximate page. "
    "Write in the same language as the source text."
)

TOPIC_SYSTEM = "You are an expert in creating contest questions."

PARSER_SYSTEM = (
    "You are an assistant specialised in processing educational texts. "
    "Identify every question present in the raw text you receive."
)

DIFFICULTY_SYSTEM = (
    "You are an expert in creating questions for competitive exams. "
    "Your task is to adjust the difficulty level of a given question."
)

ESSAY_TOPICS_SYSTEM = (
    "You design essay prompts for high-level written exams (Cebraspe style). "
    "Topics must be challenging and demand deep knowledge of the text."
)

ESSAY_GRADER_SYSTEM = (
    "You are an essay grader specialised in public exam boards, specifically Cebraspe."
)

SUMMARY_SYSTEM = "You are an expert in concise, well-structured educational summaries."

FORMAT_TRUE_FALSE = "Cebraspe style (true/false). The answer must be 'C' (certo) or 'E' (errado)."
FORMAT_MULTIPLE_CHOICE = "Multiple choice (A to E). Provide exactly 5 clear options."


def pdf_questions_prompt(pdf_text: str, question_type: str, number_of_questions: int, difficulty: str) -> str:
    fmt = FORMAT_TRUE_FALSE if question_type == "A" else FORMAT_MULTIPLE_CHOICE
    return (
        f"Generate {number_of_questions} questions of {difficulty} difficulty based on the text below.\n"
        f"FORMAT: {fmt}\n\n"
        f"TEXT:\n{pdf_text}"
    )


def topic_questions_prompt(topic: str, difficulty: str, number_of_questions: int) -> str:
    return f"Generate {number_of_questions} questions about {topic} with {difficulty} difficulty."


def manual_questions_prompt(raw_text: str) -> str:
    return (
        "For each question identified:\n"
        "1. Decide whether it is true/false (type A) or multiple choice (type C).\n"
        "2. Extract the statement and the options, if any.\n"
        "3. Identify the correct answer and write a justification based on the context.\n\n"
        f"RAW TEXT:\n{raw_text}"
    )


def adjust_difficulty_prompt(question: str, current_difficulty: str, desired_difficulty: str) -> str:
    return (
        f"Here is the original question:\n{question}\n\n"
        f"The current difficulty level is: {current_difficulty}.\n"
        f"The desired difficulty level is: {desired_difficulty}.\n\n"
        "Modify the question to match the desired difficulty level."
    )


def essay_topics_prompt(content: str, count: int) -> str:
    return (
        f"Based on the following study content, suggest EXACTLY {count} likely topics "
        "for a high-level written exam.\n\n"
        f"CONTENT:\n{content}"
    )


def essay_grade_prompt(topic: str, essay: str, max_score: float) -> str:
    return (
        f'Grade the essay below on the topic "{topic}".\n'
        f"The maximum score allowed is {max_score:g}.\n\n"
        "EVALUATION CRITERIA:\n"
        "1. Presentation and legibility.\n"
        "2. Text structure.\n"
        "3. Development of the topic (technical knowledge).\n"
        "4. Command of the standard language (grammar).\n\n"
        f"ESSAY:\n{essay}"
    )


def summary_prompt(study_material: str) -> str:
    return (
        "Extract the key concepts and provide a structured summary of the following material:\n\n"
        f"{study_material}"
    )
