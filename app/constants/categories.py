from app.models.category import CategoryType
from app.models.debt_transaction import DebtTransactionType
from app.models.enums import TransactionType

# Categorías espejo de los movimientos de deuda, resueltas por (nombre, tipo)
DEBT_PAYMENT_CATEGORY = "Debt Payment"
DEBT_INCREASE_CATEGORY = "Loan/Debt Increase"

# Se usa cuando la categoría espejo no existe
FALLBACK_CATEGORY_ID = 1

MIRROR_TRANSACTION_TYPE = {
    DebtTransactionType.payment: TransactionType.expense,
    DebtTransactionType.increase: TransactionType.income,
}

MIRROR_CATEGORY = {
    DebtTransactionType.payment: (DEBT_PAYMENT_CATEGORY, CategoryType.expense),
    DebtTransactionType.increase: (DEBT_INCREASE_CATEGORY, CategoryType.income),
}

MIRROR_SOURCE_TYPE = {
    DebtTransactionType.payment: "debt_payment",
    DebtTransactionType.increase: "debt_increase",
}

MIRROR_DESCRIPTION_PREFIX = {
    DebtTransactionType.payment: "Trả nợ",
    DebtTransactionType.increase: "Tăng nợ",
}
