"""Domain errors raised by the service layer.

Each error knows its HTTP status and any extra fields clients branch on, so
the API layer renders them with a single exception handler.
"""
from typing import Any, Optional


class AppError(Exception):
    status_code: int = 400

    def __init__(self, message: str, status_code: Optional[int] = None, **extra: Any):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra

    def to_payload(self) -> dict:
        return {"message": self.message, **self.extra}


class ValidationFailed(AppError):
    status_code = 400


class AuthError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class UPIBlockedError(AppError):
    status_code = 403

    def __init__(self, message: str = "UPI payments are currently blocked. Complete the financial quiz to unblock."):
        super().__init__(message, status="BLOCKED", upiBlocked=True)


class BudgetExceededError(AppError):
    status_code = 400

    def __init__(self, message: str = "UPI transaction rejected. You've exceeded your budget for this category.",
                 upi_blocked: bool = False):
        super().__init__(message, status="BLOCKED", budgetExceeded=True, upiBlocked=upi_blocked)


class InsufficientFundsError(AppError):
    status_code = 400

    def __init__(self, balance: float, amount: float):
        super().__init__(
            f"Insufficient bank balance ({balance:.2f} available, {amount:.2f} requested)",
            status="INSUFFICIENT_FUNDS",
        )
