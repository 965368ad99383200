from pydantic import Field, model_validator
from typing import List, Optional
from datetime import datetime

from pocketguard.schemas.base import APIModel


class CategoryCreate(APIModel):
    name: str = Field(..., min_length=1, max_length=40)
    icon: str = "ellipsis-h"
    icon_color: str = Field("#6B7280", pattern="^#[0-9A-Fa-f]{6}$")


class CategoryResponse(APIModel):
    id: int
    name: str
    icon: str
    icon_color: str
    user_id: int


class BudgetCategoryIn(APIModel):
    category_id: int
    amount: float = Field(..., ge=0)


class BudgetCreate(APIModel):
    total_amount: float = Field(..., gt=0)
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)
    categories: List[BudgetCategoryIn] = []

    @model_validator(mode="after")
    def unique_categories(self):
        ids = [c.category_id for c in self.categories]
        if len(ids) != len(set(ids)):
            raise ValueError("Each category may only be allocated once per budget")
        return self


class BudgetCategoryStatus(APIModel):
    id: int
    budget_id: int
    category_id: int
    amount: float
    category: CategoryResponse
    spent: float
    over_budget: bool
    # Negative while under budget
    overflow: float


class BudgetWithCategories(APIModel):
    id: int
    user_id: int
    total_amount: float
    month: int
    year: int
    created_at: Optional[datetime] = None
    categories: List[BudgetCategoryStatus]
    spent: float
    remaining: float
    days_left: int
    daily_budget: float
    bank_balance: Optional[float] = None
    has_overflow: bool
    upi_blocked: bool
