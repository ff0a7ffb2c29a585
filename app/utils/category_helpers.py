from sqlmodel import Session, select

from app.constants.categories import (
    DEBT_INCREASE_CATEGORY,
    DEBT_PAYMENT_CATEGORY,
    FALLBACK_CATEGORY_ID,
    MIRROR_CATEGORY,
)
from app.logger_config import logger
from app.models.category import Category, CategoryType
from app.models.debt_transaction import DebtTransactionType


def resolve_mirror_category_id(session: Session, user_id: int, kind: DebtTransactionType) -> int:
    """
    Busca la categoría espejo por (nombre, tipo). Prefiere la del usuario sobre
    la compartida (user_id NULL). Si no existe, usa FALLBACK_CATEGORY_ID.
    """
    name, type_ = MIRROR_CATEGORY[kind]
    categories = session.exec(
        select(Category).where(
            Category.name == name,
            Category.type == type_,
            (Category.user_id == user_id) | (Category.user_id == None),  # noqa: E711
        )
    ).all()

    owned = [c for c in categories if c.user_id == user_id]
    category = (owned or categories or [None])[0]
    if category is None:
        logger.warning(
            f"Category '{name}' ({type_.value}) not found for user {user_id}; "
            f"falling back to category id {FALLBACK_CATEGORY_ID}"
        )
        return FALLBACK_CATEGORY_ID
    return category.id


def get_or_create_category(session: Session, user_id: int, name: str, type_: CategoryType) -> Category:
    cat = session.exec(
        select(Category).where(
            Category.user_id == user_id,
            Category.name == name,
            Category.type == type_,
        )
    ).first()
    if cat:
        return cat

    cat = Category(user_id=user_id, name=name, type=type_, is_active=True)
    session.add(cat)
    session.commit()
    session.refresh(cat)
    return cat


def create_base_categories(user_id: int, session: Session) -> None:
    """
    Crea las categorías espejo de deudas para un usuario.
    Idempotente (seguro si se llama varias veces).
    """
    get_or_create_category(session, user_id, DEBT_PAYMENT_CATEGORY, CategoryType.expense)
    get_or_create_category(session, user_id, DEBT_INCREASE_CATEGORY, CategoryType.income)
