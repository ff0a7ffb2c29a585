"""
Backfill para datos anteriores a transactions.debt_transaction_id:
crea las categorías espejo de deudas y enlaza cada movimiento de deuda con su
fila espejo (buscada por usuario, monto, tipo, fecha y descripción).
"""

from sqlmodel import Session, select

from app.constants.categories import MIRROR_SOURCE_TYPE, MIRROR_TRANSACTION_TYPE
from app.database import engine
from app.logger_config import logger
from app.models.debt import Debt
from app.models.debt_transaction import DebtTransaction
from app.models.transaction import Transaction
from app.models.user import User
from app.services.debt_ledger import mirror_description
from app.utils.category_helpers import create_base_categories


def link_legacy_mirrors(session: Session, user_id: int) -> int:
    linked = 0
    rows = session.exec(
        select(DebtTransaction, Debt.name)
        .join(Debt, Debt.id == DebtTransaction.debt_id)
        .where(DebtTransaction.user_id == user_id)
        .order_by(DebtTransaction.id)
    ).all()

    for debt_tx, debt_name in rows:
        already_linked = session.exec(
            select(Transaction.id).where(Transaction.debt_transaction_id == debt_tx.id)
        ).first()
        if already_linked is not None:
            continue

        mirror = session.exec(
            select(Transaction)
            .where(
                Transaction.user_id == user_id,
                Transaction.debt_transaction_id == None,  # noqa: E711
                Transaction.source_type == None,  # noqa: E711
                Transaction.amount == debt_tx.amount,
                Transaction.type == MIRROR_TRANSACTION_TYPE[debt_tx.type],
                Transaction.date == debt_tx.date,
                Transaction.description == mirror_description(debt_tx.type, debt_tx.description, debt_name),
            )
            .order_by(Transaction.id)
        ).first()
        if mirror is None:
            logger.warning(f"No mirror row found for debt transaction {debt_tx.id}")
            continue

        mirror.debt_transaction_id = debt_tx.id
        mirror.debt_id = debt_tx.debt_id
        mirror.source_type = MIRROR_SOURCE_TYPE[debt_tx.type]
        session.add(mirror)
        # flush para que la siguiente búsqueda no vuelva a tomar esta fila
        session.flush()
        linked += 1

    session.commit()
    return linked


def backfill_categories():
    with Session(engine) as session:
        users = session.exec(select(User)).all()
        for user in users:
            create_base_categories(user.id, session)
            linked = link_legacy_mirrors(session, user.id)
            logger.info(f"User {user.email}: linked {linked} mirror rows")
    logger.info("Backfill completed")


if __name__ == "__main__":
    backfill_categories()
