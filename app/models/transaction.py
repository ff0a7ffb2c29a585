from sqlmodel import SQLModel, Field
from typing import Optional
import datetime as dt

from app.models.enums import TransactionType

class Transaction(SQLModel, table=True):
    __tablename__ = "transactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    amount: float
    type: TransactionType
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id")
    description: Optional[str] = None
    date: dt.date = Field(default_factory=dt.date.today)
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)
    updated_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)

    # Enlace con la deuda: solo las filas espejo de debt_transactions lo tienen
    debt_id: Optional[int] = Field(default=None, foreign_key="debts.id", ondelete="SET NULL")
    debt_transaction_id: Optional[int] = Field(
        default=None, foreign_key="debt_transactions.id", ondelete="SET NULL", index=True
    )
    source_type: Optional[str] = Field(default=None, nullable=True)
