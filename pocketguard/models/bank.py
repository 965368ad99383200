from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean, ForeignKey
from pocketguard.core.database import Base


class BankAccount(Base):
    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, index=True, nullable=False)

    account_id = Column(String, nullable=False)
    balance = Column(Float, nullable=False, default=0.0)
    last_updated = Column(DateTime, nullable=False)
    connected = Column(Boolean, default=True, nullable=False)
