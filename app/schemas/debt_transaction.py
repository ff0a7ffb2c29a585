# app/schemas/debt_transaction.py

from pydantic import BaseModel, ConfigDict
import datetime as dt
from typing import Optional

from app.models.debt_transaction import DebtTransactionType

class DebtTransactionCreate(BaseModel):
    amount: float
    type: DebtTransactionType
    description: Optional[str] = None
    date: Optional[dt.date] = None

class DebtTransactionRead(BaseModel):
    id: int
    debt_id: int
    user_id: int
    amount: float
    type: DebtTransactionType
    description: Optional[str] = None
    date: dt.date
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)
