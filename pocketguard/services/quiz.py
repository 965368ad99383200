import logging
import random
from typing import Optional

from sqlalchemy import select, delete, and_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from pocketguard.config import settings
from pocketguard.core.errors import NotFoundError
from pocketguard.models.quiz import QuizQuestion, QuizAttempt
from pocketguard.models.user import User
from pocketguard.schemas.quiz import QuizStartResponse, QuizQuestionPublic, QuizResult, QuizReviewItem
from pocketguard.services import rules

logger = logging.getLogger(__name__)


class QuizService:
    @staticmethod
    async def get_active_attempt(db: AsyncSession, user_id: int) -> Optional[QuizAttempt]:
        query = (
            select(QuizAttempt)
            .where(and_(QuizAttempt.user_id == user_id, QuizAttempt.completed.is_(False)))
            .order_by(desc(QuizAttempt.id))
            .limit(1)
        )
        res = await db.execute(query)
        return res.scalar_one_or_none()

    @staticmethod
    async def start_quiz(
            db: AsyncSession,
            user: User,
            difficulty: Optional[str],
            count: int,
            rng: Optional[random.Random] = None,
    ) -> QuizStartResponse:
        query = select(QuizQuestion).order_by(QuizQuestion.id)
        if difficulty:
            query = query.where(QuizQuestion.difficulty == difficulty)
        res = await db.execute(query)
        pool = list(res.scalars().all())

        if not pool:
            raise NotFoundError("No quiz questions available for this difficulty")

        questions = rules.pick_questions(pool, count, rng)

        # A restart silently discards the unfinished attempt
        await db.execute(
            delete(QuizAttempt).where(and_(QuizAttempt.user_id == user.id, QuizAttempt.completed.is_(False)))
        )
        db.add(QuizAttempt(
            user_id=user.id,
            question_ids=[q.id for q in questions],
            correct_answers=0,
            total_questions=len(questions),
            completed=False
        ))
        await db.commit()

        logger.info("User %s started a quiz with %s questions (difficulty=%s)",
                    user.id, len(questions), difficulty or "any")
        return QuizStartResponse(
            questions=[QuizQuestionPublic.model_validate(q) for q in questions],
            total_questions=len(questions)
        )

    @staticmethod
    async def complete_quiz(db: AsyncSession, user: User, answers: list[int]) -> QuizResult:
        attempt = await QuizService.get_active_attempt(db, user.id)
        if not attempt:
            raise NotFoundError("No active quiz attempt found")

        res = await db.execute(select(QuizQuestion).where(QuizQuestion.id.in_(attempt.question_ids)))
        by_id = {q.id: q for q in res.scalars().all()}
        questions = [by_id[qid] for qid in attempt.question_ids if qid in by_id]

        marks = rules.grade_answers([q.correct_answer for q in questions], answers)
        correct = sum(marks)
        total = attempt.total_questions
        passed = rules.has_passed(correct, total, settings.QUIZ_PASS_RATIO)

        attempt.correct_answers = correct
        attempt.completed = True
        if passed:
            user.upi_currently_blocked = False
        await db.commit()

        logger.info("User %s completed a quiz: %s/%s (%s)", user.id, correct, total, "pass" if passed else "fail")
        return QuizResult(
            correct_answers=correct,
            total_questions=total,
            passed=passed,
            score=rules.score_percent(correct, total),
            upi_unblocked=passed,
            review=[
                QuizReviewItem(
                    question_id=q.id,
                    selected=answers[i] if i < len(answers) else None,
                    correct_answer=q.correct_answer,
                    correct=marks[i],
                    explanation=q.explanation
                )
                for i, q in enumerate(questions)
            ]
        )
