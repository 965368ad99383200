from pydantic import AfterValidator, Field
from typing import Annotated, Optional
from datetime import datetime

from pocketguard.schemas.base import APIModel
from pocketguard.schemas.budget import CategoryResponse


def _naive_local(v: Optional[datetime]) -> Optional[datetime]:
    # Stored dates are naive local time, like the default "now"
    if v is not None and v.tzinfo is not None:
        return v.astimezone().replace(tzinfo=None)
    return v


class ExpenseCreate(APIModel):
    amount: float = Field(..., gt=0)
    category_id: int
    date: Annotated[Optional[datetime], AfterValidator(_naive_local)] = None
    note: Optional[str] = Field(None, max_length=255)
    is_upi: bool = Field(False, alias="isUPI")


class ExpenseResponse(APIModel):
    id: int
    user_id: int
    category_id: int
    amount: float
    date: datetime
    note: Optional[str] = None
    is_upi: bool = Field(..., alias="isUPI")
    caused_overflow: bool
    overflow_category_id: Optional[int] = None
    created_at: Optional[datetime] = None


class ExpenseWithCategory(ExpenseResponse):
    category: CategoryResponse


class UPITransactionRequest(APIModel):
    amount: float = Field(..., gt=0)
    category_id: int
    note: Optional[str] = Field(None, max_length=255)


class UPITransactionResponse(APIModel):
    status: str
    transaction_id: str
    expense: ExpenseResponse
    bank_balance: Optional[float] = None
