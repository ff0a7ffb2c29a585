from sqlmodel import SQLModel, Field
from typing import Optional
from enum import Enum

class CategoryType(str, Enum):
    income = "income"
    expense = "expense"

class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    # NULL = categoría compartida del sistema
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    name: str
    type: CategoryType = Field(default=CategoryType.expense)
    icon: Optional[str] = None
    color: Optional[str] = None
    is_active: bool = Field(default=True)
