from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, JSON, ForeignKey
from pocketguard.core.clock import system_now
from pocketguard.core.database import Base


class QuizQuestion(Base):
    __tablename__ = "quiz_questions"

    id = Column(Integer, primary_key=True, index=True)
    question = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)
    correct_answer = Column(Integer, nullable=False)
    explanation = Column(Text, nullable=False)
    difficulty = Column(String, index=True, nullable=False)


class QuizAttempt(Base):
    __tablename__ = "quiz_attempts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    # Ordered as served; answers are graded positionally
    question_ids = Column(JSON, nullable=False)
    correct_answers = Column(Integer, default=0, nullable=False)
    total_questions = Column(Integer, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=system_now)
