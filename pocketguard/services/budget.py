import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, func, and_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from pocketguard.core.clock import system_now
from pocketguard.core.errors import ValidationFailed
from pocketguard.models.bank import BankAccount
from pocketguard.models.budget import Budget, BudgetCategory, Category
from pocketguard.models.expense import Expense
from pocketguard.models.user import User
from pocketguard.schemas.budget import (
    BudgetCreate, BudgetWithCategories, BudgetCategoryStatus, CategoryResponse,
)
from pocketguard.services import rules

logger = logging.getLogger(__name__)


class BudgetService:
    @staticmethod
    def get_system_time() -> datetime:
        return system_now()

    @staticmethod
    async def find_budget(db: AsyncSession, user_id: int, month: int, year: int) -> Optional[Budget]:
        # Uniqueness per period is a convention only; newest wins
        query = (
            select(Budget)
            .where(and_(Budget.user_id == user_id, Budget.month == month, Budget.year == year))
            .order_by(desc(Budget.id))
            .limit(1)
        )
        res = await db.execute(query)
        return res.scalar_one_or_none()

    @staticmethod
    async def category_spending(db: AsyncSession, user_id: int, month: int, year: int) -> dict[int, float]:
        start, end = rules.month_bounds(month, year)
        query = select(
            Expense.category_id,
            func.sum(Expense.amount).label('spent')
        ).where(
            and_(
                Expense.user_id == user_id,
                Expense.date >= start,
                Expense.date < end
            )
        ).group_by(Expense.category_id)
        res = await db.execute(query)
        return {r.category_id: float(r.spent or 0.0) for r in res.all()}

    @staticmethod
    async def get_allocation(db: AsyncSession, budget_id: int, category_id: int) -> Optional[BudgetCategory]:
        query = select(BudgetCategory).where(
            and_(BudgetCategory.budget_id == budget_id, BudgetCategory.category_id == category_id)
        )
        res = await db.execute(query)
        return res.scalars().first()

    @staticmethod
    async def get_budget(db: AsyncSession, user_id: int, month: int, year: int) -> Optional[BudgetWithCategories]:
        budget = await BudgetService.find_budget(db, user_id, month, year)
        if not budget:
            return None

        alloc_query = (
            select(BudgetCategory, Category)
            .join(Category, Category.id == BudgetCategory.category_id)
            .where(BudgetCategory.budget_id == budget.id)
            .order_by(BudgetCategory.id)
        )
        alloc_res = await db.execute(alloc_query)
        allocations = alloc_res.all()

        spending = await BudgetService.category_spending(db, user_id, month, year)

        items = []
        statuses = []
        for bc, category in allocations:
            status = rules.category_status(spending.get(bc.category_id, 0.0), bc.amount)
            statuses.append(status)
            items.append(BudgetCategoryStatus(
                id=bc.id,
                budget_id=bc.budget_id,
                category_id=bc.category_id,
                amount=bc.amount,
                category=CategoryResponse.model_validate(category),
                spent=status.spent,
                over_budget=status.over_budget,
                overflow=status.overflow
            ))

        days_left = rules.days_left_in_period(month, year, BudgetService.get_system_time())
        summary = rules.summarize_period(budget.total_amount, statuses, days_left)

        user = await db.get(User, user_id)
        bank_res = await db.execute(select(BankAccount).where(BankAccount.user_id == user_id))
        bank = bank_res.scalar_one_or_none()

        return BudgetWithCategories(
            id=budget.id,
            user_id=budget.user_id,
            total_amount=budget.total_amount,
            month=budget.month,
            year=budget.year,
            created_at=budget.created_at,
            categories=items,
            spent=summary.spent,
            remaining=summary.remaining,
            days_left=summary.days_left,
            daily_budget=summary.daily_budget,
            bank_balance=bank.balance if bank else None,
            has_overflow=summary.has_overflow,
            upi_blocked=bool(user and user.upi_currently_blocked)
        )

    @staticmethod
    async def get_current_budget(db: AsyncSession, user_id: int) -> Optional[BudgetWithCategories]:
        now = BudgetService.get_system_time()
        return await BudgetService.get_budget(db, user_id, now.month, now.year)

    @staticmethod
    async def create_budget(db: AsyncSession, user_id: int, data: BudgetCreate) -> BudgetWithCategories:
        requested = {c.category_id for c in data.categories}
        if requested:
            owned_res = await db.execute(
                select(Category.id).where(and_(Category.user_id == user_id, Category.id.in_(requested)))
            )
            unknown = requested - set(owned_res.scalars().all())
            if unknown:
                raise ValidationFailed(f"Unknown category id(s): {', '.join(str(i) for i in sorted(unknown))}")

        budget = Budget(
            user_id=user_id,
            total_amount=data.total_amount,
            month=data.month,
            year=data.year
        )
        db.add(budget)
        await db.flush()

        db.add_all([
            BudgetCategory(budget_id=budget.id, category_id=c.category_id, amount=c.amount)
            for c in data.categories
        ])
        # Budget and allocations land together or not at all
        await db.commit()

        logger.info("Budget %s created for user %s (%02d/%d, %d categories)",
                    budget.id, user_id, data.month, data.year, len(data.categories))
        return await BudgetService.get_budget(db, user_id, data.month, data.year)
