from sqlmodel import SQLModel

import app.models  # noqa: F401
from app.database import engine
from app.logger_config import logger


def reset_db(bind=engine):
    """Borra y vuelve a crear todas las tablas del libro de deudas."""
    SQLModel.metadata.drop_all(bind)
    SQLModel.metadata.create_all(bind)
    logger.info(f"Database reset: {len(SQLModel.metadata.tables)} tables recreated")


if __name__ == "__main__":
    reset_db()
