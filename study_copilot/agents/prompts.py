"""
System and task prompts for the single-shot study agents.

Kept in one module so wording changes never touch agent logic.
"""

QUIZ_RESPONSE_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "id": {"type": "number"},
            "question": {"type": "string"},
            "options": {"type": "array", "items": {"type": "string"}},
            "correctAnswer": {"type": "number"},
            "explanation": {"type": "string"},
        },
        "required": ["id", "question", "options", "correctAnswer", "explanation"],
    },
}

TRANSCRIPTION_INSTRUCTION = "Transcribe this audio accurately."

EMPTY_REPLY_FALLBACK = "I couldn't generate a response."


def get_quiz_prompt(notes: str, question_count: int = 5) -> str:
    """Task prompt for QuizAgent - notes are already truncated by the caller."""
    return f"""
Based on the following study notes, generate {question_count} multiple-choice questions (MCQs).
The questions should test conceptual understanding and critical thinking.
Each question has exactly 4 options; correctAnswer is the 0-based index of the right option.

STUDY CONTENT:
{notes}
"""


def get_deep_dive_system_prompt(notes: str) -> str:
    """System prompt for DeepDiveAgent - a tutor grounded in the study notes."""
    return f"""
You are an expert tutor in the "Deep Dive" workspace.
Your goal is to clarify doubts, correct misconceptions, and explain concepts deeply based on the provided study notes.

CONTEXT (The Lesson):
{notes}

GUIDELINES:
- Be encouraging and precise.
- If the user has a misconception, gently correct it with an example.
- Use analogies where possible.
- Keep answers concise unless asked for elaboration.
- **FORMATTING**: Always use standard LaTeX ($$ ... $$) for formulas. Use Blockquotes (> ) for text definitions.
"""
