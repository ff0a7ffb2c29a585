from app.models.user import User
from app.models.category import Category, CategoryType
from app.models.debt import Debt
from app.models.debt_transaction import DebtTransaction, DebtTransactionType
from app.models.enums import TransactionType
from app.models.transaction import Transaction

__all__ = [
    "User",
    "Category",
    "CategoryType",
    "Debt",
    "DebtTransaction",
    "DebtTransactionType",
    "TransactionType",
    "Transaction",
]
