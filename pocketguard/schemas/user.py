from pydantic import Field
from typing import Optional
from datetime import datetime

from pocketguard.schemas.base import APIModel


class RegisterRequest(APIModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    upi_id: Optional[str] = None


class LoginRequest(APIModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(APIModel):
    id: int
    username: str
    name: str
    email: Optional[str] = None
    upi_id: Optional[str] = None
    push_notifications: bool
    upi_spending_limits: bool
    dark_mode: bool
    upi_block_enabled: bool
    upi_currently_blocked: bool
    bank_account_connected: bool
    bank_balance: float
    last_balance_update: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ProfileUpdate(APIModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    upi_id: Optional[str] = None
    push_notifications: Optional[bool] = None
    upi_spending_limits: Optional[bool] = None
    dark_mode: Optional[bool] = None
    upi_block_enabled: Optional[bool] = None
