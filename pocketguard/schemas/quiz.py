from pydantic import Field
from typing import List, Optional

from pocketguard.config import settings
from pocketguard.schemas.base import APIModel


class QuizStartRequest(APIModel):
    difficulty: Optional[str] = Field(None, pattern="^(easy|medium|hard)$")
    count: int = Field(settings.DEFAULT_QUIZ_COUNT, ge=1, le=50)


class QuizQuestionPublic(APIModel):
    """A question as served to the client: no answer, no explanation."""
    id: int
    question: str
    options: List[str]
    difficulty: str


class QuizStartResponse(APIModel):
    questions: List[QuizQuestionPublic]
    total_questions: int


class QuizCompleteRequest(APIModel):
    answers: List[int]


class QuizReviewItem(APIModel):
    question_id: int
    selected: Optional[int] = None
    correct_answer: int
    correct: bool
    explanation: str


class QuizResult(APIModel):
    correct_answers: int
    total_questions: int
    passed: bool
    score: int
    upi_unblocked: bool
    review: List[QuizReviewItem] = []
