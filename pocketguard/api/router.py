import random
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from pocketguard.api.deps import get_current_user, get_rng
from pocketguard.core.database import get_db
from pocketguard.models.user import User
from pocketguard.schemas.bank import BankAccountInfo, BankBalanceUpdate, BankConnectRequest
from pocketguard.schemas.budget import BudgetCreate, BudgetWithCategories, CategoryCreate, CategoryResponse
from pocketguard.schemas.expense import (
    ExpenseCreate, ExpenseResponse, ExpenseWithCategory, UPITransactionRequest, UPITransactionResponse,
)
from pocketguard.schemas.quiz import QuizCompleteRequest, QuizResult, QuizStartRequest, QuizStartResponse
from pocketguard.schemas.user import LoginRequest, ProfileUpdate, RegisterRequest, UserResponse
from pocketguard.services.bank import BankService
from pocketguard.services.budget import BudgetService
from pocketguard.services.ledger import ExpenseLedger
from pocketguard.services.quiz import QuizService
from pocketguard.services.upi import UPIGate
from pocketguard.services.users import UserService

api_router = APIRouter()


# --- Auth ---

@api_router.post("/register", response_model=UserResponse, status_code=201, tags=["Auth"])
async def register(data: RegisterRequest, request: Request, db: AsyncSession = Depends(get_db)):
    user = await UserService.register(db, data)
    request.session["user_id"] = user.id
    return user


@api_router.post("/login", response_model=UserResponse, tags=["Auth"])
async def login(data: LoginRequest, request: Request, db: AsyncSession = Depends(get_db)):
    user = await UserService.authenticate(db, data.username, data.password)
    request.session["user_id"] = user.id
    return user


@api_router.post("/logout", tags=["Auth"])
async def logout(request: Request):
    request.session.clear()
    return {"message": "Logged out"}


@api_router.get("/user", response_model=UserResponse, tags=["Auth"])
async def get_user(user: User = Depends(get_current_user)):
    return user


@api_router.put("/user/profile", response_model=UserResponse, tags=["Auth"])
async def update_profile(data: ProfileUpdate, user: User = Depends(get_current_user),
                         db: AsyncSession = Depends(get_db)):
    return await UserService.update_profile(db, user, data)


# --- Budgets ---

@api_router.get("/budgets/current", response_model=BudgetWithCategories, tags=["Budgets"])
async def get_current_budget(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    budget = await BudgetService.get_current_budget(db, user.id)
    if not budget:
        raise HTTPException(status_code=404, detail="No budget found for current month")
    return budget


@api_router.get("/budgets/month/{month}/year/{year}", response_model=BudgetWithCategories, tags=["Budgets"])
async def get_budget_for_period(
        month: int = Path(..., ge=1, le=12),
        year: int = Path(..., ge=2000, le=2100),
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    budget = await BudgetService.get_budget(db, user.id, month, year)
    if not budget:
        raise HTTPException(status_code=404, detail=f"No budget found for {month:02d}/{year}")
    return budget


@api_router.post("/budgets", response_model=BudgetWithCategories, status_code=201, tags=["Budgets"])
async def create_budget(data: BudgetCreate, user: User = Depends(get_current_user),
                        db: AsyncSession = Depends(get_db)):
    return await BudgetService.create_budget(db, user.id, data)


# --- Categories ---

@api_router.get("/categories", response_model=List[CategoryResponse], tags=["Categories"])
async def get_categories(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await UserService.get_categories(db, user.id)


@api_router.post("/categories", response_model=CategoryResponse, status_code=201, tags=["Categories"])
async def create_category(data: CategoryCreate, user: User = Depends(get_current_user),
                          db: AsyncSession = Depends(get_db)):
    return await UserService.create_category(db, user.id, data)


@api_router.get("/categories/{category_id}/expenses", response_model=List[ExpenseResponse], tags=["Categories"])
async def get_category_expenses(category_id: int, user: User = Depends(get_current_user),
                                db: AsyncSession = Depends(get_db)):
    if not await UserService.get_category(db, user.id, category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    return await ExpenseLedger.get_expenses_by_category(db, user.id, category_id)


# --- Expenses ---

@api_router.get("/expenses", response_model=List[ExpenseWithCategory], tags=["Expenses"])
async def get_expenses(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await ExpenseLedger.get_expenses(db, user.id)


@api_router.get("/expenses/month/{month}/year/{year}", response_model=List[ExpenseWithCategory], tags=["Expenses"])
async def get_expenses_by_month(
        month: int = Path(..., ge=1, le=12),
        year: int = Path(..., ge=2000, le=2100),
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    return await ExpenseLedger.get_expenses_by_month(db, user.id, month, year)


@api_router.post("/expenses", response_model=ExpenseResponse, status_code=201, tags=["Expenses"])
async def create_expense(data: ExpenseCreate, user: User = Depends(get_current_user),
                         db: AsyncSession = Depends(get_db)):
    return await UPIGate.submit_expense(db, user, data)


# --- UPI ---

@api_router.post("/upi/transaction", response_model=UPITransactionResponse, status_code=201, tags=["UPI"])
async def upi_transaction(data: UPITransactionRequest, user: User = Depends(get_current_user),
                          db: AsyncSession = Depends(get_db)):
    return await UPIGate.simulate_transaction(db, user, data)


@api_router.post("/upi/block", response_model=UserResponse, tags=["UPI"])
async def block_upi(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await UPIGate.set_blocked(db, user, True)


@api_router.post("/upi/unblock", response_model=UserResponse, tags=["UPI"])
async def unblock_upi(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await UPIGate.set_blocked(db, user, False)


# --- Quiz ---

@api_router.post("/quiz/start", response_model=QuizStartResponse, tags=["Quiz"])
async def start_quiz(
        data: QuizStartRequest,
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        rng: random.Random = Depends(get_rng)
):
    return await QuizService.start_quiz(db, user, data.difficulty, data.count, rng)


@api_router.post("/quiz/complete", response_model=QuizResult, tags=["Quiz"])
async def complete_quiz(data: QuizCompleteRequest, user: User = Depends(get_current_user),
                        db: AsyncSession = Depends(get_db)):
    return await QuizService.complete_quiz(db, user, data.answers)


# --- Bank ---

@api_router.post("/bank/connect", response_model=BankAccountInfo, tags=["Bank"])
async def connect_bank(data: BankConnectRequest, user: User = Depends(get_current_user),
                       db: AsyncSession = Depends(get_db)):
    return await BankService.connect(db, user, data.account_id)


@api_router.post("/bank/disconnect", tags=["Bank"])
async def disconnect_bank(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    await BankService.disconnect(db, user)
    return {"message": "Bank account disconnected"}


@api_router.get("/bank/info", response_model=BankAccountInfo, tags=["Bank"])
async def get_bank_info(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await BankService.get_account(db, user.id)


@api_router.put("/bank/balance", response_model=BankAccountInfo, tags=["Bank"])
async def update_bank_balance(data: BankBalanceUpdate, user: User = Depends(get_current_user),
                              db: AsyncSession = Depends(get_db)):
    return await BankService.set_balance(db, user, data.balance)


@api_router.post("/bank/refresh", response_model=BankAccountInfo, tags=["Bank"])
async def refresh_bank(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await BankService.refresh(db, user)
