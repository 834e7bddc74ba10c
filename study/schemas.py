"""
Output schemas for the study flows.

Each schema is serialised into the system instruction and used to validate the
model's answer, so descriptions are written for the model to read.
"""

from inference import array, enum, integer, number, obj, string

QUESTION_TYPES = ("A", "C")   # A: true/false (Certo/Errado), C: multiple choice (A–E)
TOPIC_DIFFICULTIES = ("easy", "medium", "hard")
ESSAY_TOPIC_COUNT = 3


PDF_QUESTIONS = obj({
    "questions": array(obj({
        "text": string("Question statement"),
        "options": array(string(), "Answer options A to E (multiple choice only)", optional=True),
        "correct_answer": string("'C' or 'E' for true/false, or the letter of the correct option"),
        "justification": string("Detailed teaching justification citing the source text"),
        "source_page": integer("Approximate page of the source text"),
    })),
})

TOPIC_QUESTIONS = obj({
    "questions": array(obj({
        "question": string("The generated question"),
        "answer": string("The answer to the generated question"),
    })),
})

MANUAL_QUESTIONS = obj({
    "questions": array(obj({
        "text": string("Question statement"),
        "options": array(string(), "Options A to E if multiple choice", optional=True),
        "correct_answer": string("Correct answer (C/E or the option letter)"),
        "justification": string("Teaching justification for the answer"),
        "type": enum(*QUESTION_TYPES, description="A (true/false) or C (multiple choice)"),
    })),
})

ADJUSTED_QUESTION = obj({
    "adjusted_question": string("The question rewritten at the desired difficulty"),
})

ESSAY_TOPICS = obj({
    "topics": array(
        string(),
        "Exactly three likely essay topics based on the content",
        min_items=ESSAY_TOPIC_COUNT,
        max_items=ESSAY_TOPIC_COUNT,
    ),
})

ESSAY_GRADE = obj({
    "final_score": number("Final score awarded"),
    "feedback": string("Detailed feedback on grammar, content and structure"),
    "strengths": array(string(), "Strong points of the essay"),
    "weaknesses": array(string(), "Points to improve"),
    "detailed_analysis": string("Criterion-by-criterion analysis"),
})

SUMMARY = obj({
    "summary": string("Structured summary of the key concepts"),
})
