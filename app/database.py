from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Session, create_engine

from app.core.config import DATABASE_URL, SQL_ECHO
from app.core.errors import StorageError
from app.logger_config import logger

engine = create_engine(DATABASE_URL, echo=SQL_ECHO, pool_pre_ping=True)


def create_db_and_tables():
    import app.models  # noqa: F401  registra todas las tablas en el metadata
    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session


@contextmanager
def atomic(session: Session):
    """
    Bloque atómico: commit al salir, rollback ante cualquier error.
    Los errores de SQLAlchemy se propagan como StorageError.
    """
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error(f"Atomic block rolled back: {exc}")
        raise StorageError("Database error, no changes were applied") from exc
    except Exception:
        session.rollback()
        raise
