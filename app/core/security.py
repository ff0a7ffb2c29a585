from sqlmodel import Session, select

from app.core.config import DEFAULT_USER_EMAIL, DEFAULT_USER_ID
from app.models.user import User
from app.utils.category_helpers import create_base_categories


def get_current_user() -> int:
    """
    Single-user mode: every request belongs to DEFAULT_USER_ID.
    Swap this dependency (or override it) to plug in real authentication.
    """
    return DEFAULT_USER_ID


def ensure_default_user(session: Session) -> User:
    user = session.exec(select(User).where(User.id == DEFAULT_USER_ID)).first()
    if user:
        return user

    user = User(id=DEFAULT_USER_ID, email=DEFAULT_USER_EMAIL)
    session.add(user)
    session.commit()
    session.refresh(user)

    create_base_categories(user.id, session)
    return user
