# app/models/debt.py

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime

class Debt(SQLModel, table=True):
    __tablename__ = "debts"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    name: str  # Ej: "Car Loan", "Vay ngân hàng"
    amount: float  # Monto principal
    interest_rate: Optional[float] = None  # En porcentaje anual
    due_date: Optional[date] = None
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
