# app/schemas/debt.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date, datetime

class DebtCreate(BaseModel):
    name: str = Field(min_length=1)
    amount: float = Field(gt=0)
    interest_rate: Optional[float] = Field(default=None, ge=0, le=100)
    due_date: Optional[date] = None
    description: Optional[str] = None

class DebtRead(DebtCreate):
    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime
    paid_amount: float = 0.0
    increased_amount: float = 0.0
    remaining_amount: float = 0.0
    transactions_count: int = 0

    model_config = ConfigDict(from_attributes=True)

class DebtBalance(BaseModel):
    debt_id: int
    amount: float
    paid_amount: float
    increased_amount: float
    remaining_amount: float

class DebtStats(BaseModel):
    total_debts: int
    total_amount: float
    avg_interest_rate: float
    total_remaining: float
