from pydantic import Field
from datetime import datetime

from pocketguard.schemas.base import APIModel


class BankConnectRequest(APIModel):
    account_id: str = Field(..., min_length=4, max_length=34)


class BankBalanceUpdate(APIModel):
    balance: float = Field(..., ge=0)


class BankAccountInfo(APIModel):
    account_id: str
    balance: float
    last_updated: datetime
    connected: bool
