import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pocketguard.config import settings
from pocketguard.core.errors import NotFoundError, InsufficientFundsError
from pocketguard.models.bank import BankAccount
from pocketguard.models.user import User
from pocketguard.services.budget import BudgetService

logger = logging.getLogger(__name__)


class BankService:
    @staticmethod
    async def find_account(db: AsyncSession, user_id: int) -> Optional[BankAccount]:
        res = await db.execute(select(BankAccount).where(BankAccount.user_id == user_id))
        return res.scalar_one_or_none()

    @staticmethod
    async def get_account(db: AsyncSession, user_id: int) -> BankAccount:
        account = await BankService.find_account(db, user_id)
        if not account:
            raise NotFoundError("Bank account not connected")
        return account

    @staticmethod
    def _mirror(user: User, account: Optional[BankAccount]):
        user.bank_account_connected = account is not None
        user.bank_balance = account.balance if account else 0.0
        user.last_balance_update = account.last_updated if account else None

    @staticmethod
    async def connect(db: AsyncSession, user: User, account_id: str) -> BankAccount:
        now = BudgetService.get_system_time()
        account = await BankService.find_account(db, user.id)
        if account is None:
            account = BankAccount(user_id=user.id)
            db.add(account)

        account.account_id = account_id
        account.balance = settings.DEFAULT_BANK_BALANCE
        account.last_updated = now
        account.connected = True
        BankService._mirror(user, account)

        await db.commit()
        logger.info("User %s connected bank account %s", user.id, account_id)
        return account

    @staticmethod
    async def disconnect(db: AsyncSession, user: User):
        account = await BankService.find_account(db, user.id)
        if account is not None:
            await db.delete(account)
        BankService._mirror(user, None)
        await db.commit()
        logger.info("User %s disconnected their bank account", user.id)

    @staticmethod
    async def set_balance(db: AsyncSession, user: User, balance: float) -> BankAccount:
        account = await BankService.get_account(db, user.id)
        account.balance = balance
        account.last_updated = BudgetService.get_system_time()
        BankService._mirror(user, account)
        await db.commit()
        return account

    @staticmethod
    async def refresh(db: AsyncSession, user: User) -> BankAccount:
        account = await BankService.get_account(db, user.id)
        account.last_updated = BudgetService.get_system_time()
        BankService._mirror(user, account)
        await db.commit()
        return account

    @staticmethod
    def ensure_funds(account: BankAccount, amount: float):
        if account.balance - amount < 0:
            raise InsufficientFundsError(account.balance, amount)

    @staticmethod
    def debit(user: User, account: BankAccount, amount: float):
        """Debit without committing; the caller owns the transaction."""
        BankService.ensure_funds(account, amount)
        account.balance -= amount
        account.last_updated = BudgetService.get_system_time()
        BankService._mirror(user, account)
