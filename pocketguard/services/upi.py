import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from pocketguard.core.errors import UPIBlockedError, BudgetExceededError, ValidationFailed
from pocketguard.models.expense import Expense
from pocketguard.models.user import User
from pocketguard.schemas.expense import ExpenseCreate, UPITransactionRequest, UPITransactionResponse, ExpenseResponse
from pocketguard.services import rules
from pocketguard.services.bank import BankService
from pocketguard.services.budget import BudgetService
from pocketguard.services.ledger import ExpenseLedger
from pocketguard.services.users import UserService

logger = logging.getLogger(__name__)

GATE_FLAGS = ["upi_currently_blocked", "upi_block_enabled", "upi_spending_limits"]


class UPIGate:
    # Check-then-write for one user must not interleave.
    # Entries live only while some request holds or waits on them.
    _locks: dict[int, asyncio.Lock] = {}
    _users: dict[int, int] = {}

    @classmethod
    @asynccontextmanager
    async def user_lock(cls, user_id: int) -> AsyncIterator[None]:
        lock = cls._locks.setdefault(user_id, asyncio.Lock())
        cls._users[user_id] = cls._users.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            cls._users[user_id] -= 1
            if not cls._users[user_id]:
                del cls._users[user_id]
                del cls._locks[user_id]

    @staticmethod
    async def evaluate(
            db: AsyncSession,
            user: User,
            category_id: int,
            amount: float,
            when: datetime,
            is_upi: bool,
            honor_spending_limits: bool = False,
    ) -> rules.GateDecision:
        """
        Must run under ``user_lock``. The user row was loaded before the lock
        was taken, so the gate flags are re-read here.
        """
        await db.refresh(user, GATE_FLAGS)

        if is_upi and user.upi_currently_blocked:
            logger.info("Rejected UPI payment of %.2f for user %s: UPI is blocked", amount, user.id)
            raise UPIBlockedError()

        budget = await BudgetService.find_budget(db, user.id, when.month, when.year)
        allocation = None
        if budget:
            bc = await BudgetService.get_allocation(db, budget.id, category_id)
            allocation = bc.amount if bc else None

        if allocation is None:
            return rules.GateDecision(allowed=True)

        spending = await BudgetService.category_spending(db, user.id, when.month, when.year)
        decision = rules.evaluate_expense(
            category_spent=spending.get(category_id, 0.0),
            amount=amount,
            allocation=allocation,
            is_upi=is_upi,
            upi_limits_enabled=user.upi_spending_limits if honor_spending_limits else True,
            upi_block_enabled=user.upi_block_enabled
        )

        if not decision.allowed:
            logger.info("Rejected UPI payment of %.2f for user %s: category %s would reach %.2f of %.2f",
                        amount, user.id, category_id, decision.projected_spent, allocation)
            if decision.block_upi:
                user.upi_currently_blocked = True
                await db.commit()
                logger.warning("UPI blocked for user %s after exceeding category %s", user.id, category_id)
            raise BudgetExceededError(upi_blocked=decision.block_upi)

        return decision

    @staticmethod
    async def _check_category(db: AsyncSession, user: User, category_id: int):
        if not await UserService.get_category(db, user.id, category_id):
            raise ValidationFailed(f"Unknown category id: {category_id}")

    @staticmethod
    async def submit_expense(db: AsyncSession, user: User, data: ExpenseCreate) -> Expense:
        await UPIGate._check_category(db, user, data.category_id)
        when = data.date or BudgetService.get_system_time()

        async with UPIGate.user_lock(user.id):
            decision = await UPIGate.evaluate(db, user, data.category_id, data.amount, when, data.is_upi)
            expense = ExpenseLedger.append(
                db,
                user_id=user.id,
                category_id=data.category_id,
                amount=data.amount,
                date=when,
                note=data.note,
                is_upi=data.is_upi,
                caused_overflow=decision.overflow
            )
            await db.commit()

        if decision.overflow:
            logger.info("Expense %s overflowed category %s for user %s", expense.id, data.category_id, user.id)
        return expense

    @staticmethod
    async def simulate_transaction(db: AsyncSession, user: User, data: UPITransactionRequest) -> UPITransactionResponse:
        await UPIGate._check_category(db, user, data.category_id)
        when = BudgetService.get_system_time()

        async with UPIGate.user_lock(user.id):
            decision = await UPIGate.evaluate(
                db, user, data.category_id, data.amount, when, is_upi=True, honor_spending_limits=True
            )

            account = await BankService.find_account(db, user.id)
            if account is not None:
                BankService.ensure_funds(account, data.amount)

            expense = ExpenseLedger.append(
                db,
                user_id=user.id,
                category_id=data.category_id,
                amount=data.amount,
                date=when,
                note=data.note or "UPI Transaction",
                is_upi=True,
                caused_overflow=decision.overflow
            )
            if account is not None:
                BankService.debit(user, account, data.amount)
            await db.commit()

        logger.info("UPI transaction UPI%s for %.2f completed for user %s", expense.id, data.amount, user.id)
        return UPITransactionResponse(
            status="SUCCESS",
            transaction_id=f"UPI{expense.id}",
            expense=ExpenseResponse.model_validate(expense),
            bank_balance=account.balance if account is not None else None
        )

    @staticmethod
    async def set_blocked(db: AsyncSession, user: User, blocked: bool) -> User:
        user.upi_currently_blocked = blocked
        await db.commit()
        await db.refresh(user)
        logger.info("UPI %s for user %s", "blocked" if blocked else "unblocked", user.id)
        return user
