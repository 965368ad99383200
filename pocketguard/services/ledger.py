from datetime import datetime
from typing import Optional

from sqlalchemy import select, desc, and_
from sqlalchemy.ext.asyncio import AsyncSession

from pocketguard.models.budget import Category
from pocketguard.models.expense import Expense
from pocketguard.schemas.budget import CategoryResponse
from pocketguard.schemas.expense import ExpenseResponse, ExpenseWithCategory
from pocketguard.services import rules


class ExpenseLedger:
    """Append-only expense store: create and read, no update or delete."""

    @staticmethod
    def append(
            db: AsyncSession,
            user_id: int,
            category_id: int,
            amount: float,
            date: datetime,
            note: Optional[str],
            is_upi: bool,
            caused_overflow: bool = False,
    ) -> Expense:
        expense = Expense(
            user_id=user_id,
            category_id=category_id,
            amount=amount,
            date=date,
            note=note,
            is_upi=is_upi,
            caused_overflow=caused_overflow,
            overflow_category_id=category_id if caused_overflow else None
        )
        db.add(expense)
        return expense

    @staticmethod
    def _with_category(rows) -> list[ExpenseWithCategory]:
        return [
            ExpenseWithCategory(
                **ExpenseResponse.model_validate(e).model_dump(),
                category=CategoryResponse.model_validate(c)
            )
            for e, c in rows
        ]

    @staticmethod
    async def get_expenses(db: AsyncSession, user_id: int) -> list[ExpenseWithCategory]:
        query = (
            select(Expense, Category)
            .join(Category, Category.id == Expense.category_id)
            .where(Expense.user_id == user_id)
            .order_by(desc(Expense.date), desc(Expense.id))
        )
        res = await db.execute(query)
        return ExpenseLedger._with_category(res.all())

    @staticmethod
    async def get_expenses_by_category(db: AsyncSession, user_id: int, category_id: int) -> list[Expense]:
        query = (
            select(Expense)
            .where(and_(Expense.user_id == user_id, Expense.category_id == category_id))
            .order_by(desc(Expense.date), desc(Expense.id))
        )
        res = await db.execute(query)
        return list(res.scalars().all())

    @staticmethod
    async def get_expenses_by_month(db: AsyncSession, user_id: int, month: int, year: int) -> list[ExpenseWithCategory]:
        start, end = rules.month_bounds(month, year)
        query = (
            select(Expense, Category)
            .join(Category, Category.id == Expense.category_id)
            .where(
                and_(
                    Expense.user_id == user_id,
                    Expense.date >= start,
                    Expense.date < end
                )
            )
            .order_by(desc(Expense.date), desc(Expense.id))
        )
        res = await db.execute(query)
        return ExpenseLedger._with_category(res.all())
