# app/models/debt_transaction.py

from enum import Enum
from sqlmodel import SQLModel, Field
from typing import Optional
import datetime as dt

class DebtTransactionType(str, Enum):
    payment = "payment"
    increase = "increase"

class DebtTransaction(SQLModel, table=True):
    __tablename__ = "debt_transactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    debt_id: int = Field(foreign_key="debts.id", index=True)
    amount: float
    type: DebtTransactionType
    description: Optional[str] = None
    date: dt.date = Field(default_factory=dt.date.today)
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)
    updated_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)
