from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean, ForeignKey
from pocketguard.core.clock import system_now
from pocketguard.core.database import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), index=True, nullable=False)

    amount = Column(Float, nullable=False)
    date = Column(DateTime, index=True, nullable=False)
    note = Column(String, nullable=True)
    is_upi = Column(Boolean, default=False, nullable=False)

    caused_overflow = Column(Boolean, default=False, nullable=False)
    overflow_category_id = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=system_now)
