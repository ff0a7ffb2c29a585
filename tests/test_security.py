from sqlmodel import select

from app.core.config import DEFAULT_USER_ID
from app.core.security import ensure_default_user, get_current_user
from app.models.category import Category


def test_single_user_mode_uses_default_owner():
    assert get_current_user() == DEFAULT_USER_ID


def test_default_user_is_created_once_with_mirror_categories(session):
    user = ensure_default_user(session)

    assert user.id == DEFAULT_USER_ID
    categories = session.exec(select(Category).where(Category.user_id == user.id)).all()
    assert {(c.name, c.type.value) for c in categories} == {
        ("Debt Payment", "expense"),
        ("Loan/Debt Increase", "income"),
    }

    assert ensure_default_user(session).id == user.id
    assert len(session.exec(select(Category)).all()) == 2
