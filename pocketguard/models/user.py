from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean
from pocketguard.core.clock import system_now
from pocketguard.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    upi_id = Column(String, nullable=True)

    push_notifications = Column(Boolean, default=True, nullable=False)
    upi_spending_limits = Column(Boolean, default=True, nullable=False)
    dark_mode = Column(Boolean, default=False, nullable=False)

    # Mirror of the simulated bank account
    bank_account_connected = Column(Boolean, default=False, nullable=False)
    bank_balance = Column(Float, default=0.0, nullable=False)
    last_balance_update = Column(DateTime, nullable=True)

    upi_block_enabled = Column(Boolean, default=True, nullable=False)
    upi_currently_blocked = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=system_now)
