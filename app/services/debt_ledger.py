# app/services/debt_ledger.py
"""
Libro de movimientos de deuda.

Cada DebtTransaction tiene exactamente una fila espejo en `transactions`
(gasto para pagos, ingreso para aumentos). Toda escritura pasa por aquí y se
hace dentro de un bloque atómico para que ambas tablas cambien juntas.
"""

import datetime as dt
from typing import Dict, List, Optional, Tuple, Union

from sqlalchemy import func
from sqlmodel import Session, select

from app.constants.categories import (
    MIRROR_DESCRIPTION_PREFIX,
    MIRROR_SOURCE_TYPE,
    MIRROR_TRANSACTION_TYPE,
)
from app.core.errors import NotFoundError, ValidationError
from app.database import atomic
from app.logger_config import logger
from app.models.debt import Debt
from app.models.debt_transaction import DebtTransaction, DebtTransactionType
from app.models.transaction import Transaction
from app.utils.category_helpers import resolve_mirror_category_id

DateLike = Union[dt.date, dt.datetime, str, None]


def _validate(amount: float, kind) -> DebtTransactionType:
    if amount is None or not amount > 0:
        raise ValidationError("Amount must be greater than 0")
    try:
        return DebtTransactionType(kind)
    except ValueError:
        raise ValidationError(f"Invalid debt transaction type: {kind!r}")


def _normalize_date(value: DateLike) -> Optional[dt.date]:
    """Acepta date, datetime o 'YYYY-MM-DD' / ISO 8601."""
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            raise ValidationError(f"Invalid date: {value!r}")
    raise ValidationError(f"Unsupported type for date: {type(value)!r}")


def mirror_description(kind: DebtTransactionType, description: Optional[str], debt_name: str) -> str:
    return description or f"{MIRROR_DESCRIPTION_PREFIX[DebtTransactionType(kind)]}: {debt_name}"


def get_owned_debt(session: Session, user_id: int, debt_id: int) -> Debt:
    debt = session.exec(
        select(Debt).where(Debt.id == debt_id, Debt.user_id == user_id)
    ).first()
    if not debt:
        raise NotFoundError("Debt not found")
    return debt


def _get_owned_transaction(
    session: Session, user_id: int, debt_id: int, transaction_id: int
) -> Tuple[DebtTransaction, str]:
    # FOR UPDATE serializa ediciones concurrentes de la misma fila (no-op en SQLite)
    row = session.exec(
        select(DebtTransaction, Debt.name)
        .join(Debt, Debt.id == DebtTransaction.debt_id)
        .where(
            DebtTransaction.id == transaction_id,
            DebtTransaction.debt_id == debt_id,
            DebtTransaction.user_id == user_id,
            Debt.user_id == user_id,
        )
        .with_for_update(of=DebtTransaction)
    ).first()
    if not row:
        raise NotFoundError("Debt transaction not found")
    return row[0], row[1]


def _apply_mirror(mirror: Transaction, debt_tx: DebtTransaction, debt_name: str, category_id: int) -> Transaction:
    mirror.amount = debt_tx.amount
    mirror.type = MIRROR_TRANSACTION_TYPE[debt_tx.type]
    mirror.category_id = category_id
    mirror.description = mirror_description(debt_tx.type, debt_tx.description, debt_name)
    mirror.date = debt_tx.date
    mirror.source_type = MIRROR_SOURCE_TYPE[debt_tx.type]
    mirror.updated_at = dt.datetime.utcnow()
    return mirror


def _find_linked_mirror(session: Session, user_id: int, debt_tx_id: int) -> Optional[Transaction]:
    return session.exec(
        select(Transaction)
        .where(
            Transaction.user_id == user_id,
            Transaction.debt_transaction_id == debt_tx_id,
        )
        .order_by(Transaction.id)
    ).first()


def _delete_reconstructed_mirror(
    session: Session,
    user_id: int,
    amount: float,
    kind: DebtTransactionType,
    tx_date: dt.date,
    description: Optional[str],
    debt_name: str,
) -> Optional[Transaction]:
    """
    Filas espejo sin enlace (datos anteriores a debt_transaction_id): se
    reconstruye la fila que add_transaction habría escrito y se borra a lo sumo
    una coincidencia.
    """
    expected_type = MIRROR_TRANSACTION_TYPE[DebtTransactionType(kind)]
    expected_description = mirror_description(kind, description, debt_name)
    candidates = session.exec(
        select(Transaction)
        .where(
            Transaction.user_id == user_id,
            Transaction.debt_transaction_id == None,  # noqa: E711
            Transaction.source_type == None,  # noqa: E711
            Transaction.amount == amount,
            Transaction.type == expected_type,
            Transaction.date == tx_date,
            Transaction.description == expected_description,
        )
        .order_by(Transaction.id)
        .limit(2)
    ).all()

    if not candidates:
        logger.warning(
            f"Reconciliation mismatch: no mirror row for {expected_type.value} "
            f"{amount} on {tx_date} ('{expected_description}'), user {user_id}"
        )
        return None
    if len(candidates) > 1:
        logger.warning(
            f"Reconciliation mismatch: several mirror rows match {expected_type.value} "
            f"{amount} on {tx_date} ('{expected_description}'); removing transaction {candidates[0].id}"
        )

    session.delete(candidates[0])
    return candidates[0]


def add_transaction(
    session: Session,
    user_id: int,
    debt_id: int,
    amount: float,
    kind,
    description: Optional[str] = None,
    date: DateLike = None,
) -> DebtTransaction:
    kind = _validate(amount, kind)
    tx_date = _normalize_date(date) or dt.date.today()

    with atomic(session):
        debt = get_owned_debt(session, user_id, debt_id)
        category_id = resolve_mirror_category_id(session, user_id, kind)

        debt_tx = DebtTransaction(
            user_id=user_id,
            debt_id=debt.id,
            amount=amount,
            type=kind,
            description=description or None,
            date=tx_date,
        )
        session.add(debt_tx)
        session.flush()

        mirror = Transaction(user_id=user_id, debt_id=debt.id, debt_transaction_id=debt_tx.id)
        session.add(_apply_mirror(mirror, debt_tx, debt.name, category_id))

    session.refresh(debt_tx)
    logger.info(f"Debt {debt_id}: added {kind.value} {amount} (transaction {debt_tx.id})")
    return debt_tx


def update_transaction(
    session: Session,
    user_id: int,
    debt_id: int,
    transaction_id: int,
    amount: float,
    kind,
    description: Optional[str] = None,
    date: DateLike = None,
) -> DebtTransaction:
    kind = _validate(amount, kind)
    new_date = _normalize_date(date)

    with atomic(session):
        debt_tx, debt_name = _get_owned_transaction(session, user_id, debt_id, transaction_id)
        previous = (debt_tx.amount, debt_tx.type, debt_tx.date, debt_tx.description)

        debt_tx.amount = amount
        debt_tx.type = kind
        debt_tx.description = description or None
        debt_tx.date = new_date or debt_tx.date
        debt_tx.updated_at = dt.datetime.utcnow()
        session.add(debt_tx)

        category_id = resolve_mirror_category_id(session, user_id, kind)
        mirror = _find_linked_mirror(session, user_id, debt_tx.id)
        if mirror is None:
            _delete_reconstructed_mirror(session, user_id, *previous, debt_name)
            mirror = Transaction(user_id=user_id, debt_id=debt_id, debt_transaction_id=debt_tx.id)
        session.add(_apply_mirror(mirror, debt_tx, debt_name, category_id))

    session.refresh(debt_tx)
    logger.info(f"Debt {debt_id}: updated transaction {transaction_id}")
    return debt_tx


def delete_transaction(session: Session, user_id: int, debt_id: int, transaction_id: int) -> None:
    with atomic(session):
        debt_tx, debt_name = _get_owned_transaction(session, user_id, debt_id, transaction_id)

        mirror = _find_linked_mirror(session, user_id, debt_tx.id)
        if mirror is not None:
            session.delete(mirror)
        else:
            _delete_reconstructed_mirror(
                session, user_id, debt_tx.amount, debt_tx.type, debt_tx.date, debt_tx.description, debt_name
            )
        # la fila espejo referencia a debt_tx: se borra primero
        session.flush()
        session.delete(debt_tx)

    logger.info(f"Debt {debt_id}: deleted transaction {transaction_id}")


def list_transactions(session: Session, user_id: int, debt_id: int) -> List[DebtTransaction]:
    get_owned_debt(session, user_id, debt_id)
    return session.exec(
        select(DebtTransaction)
        .where(DebtTransaction.debt_id == debt_id, DebtTransaction.user_id == user_id)
        .order_by(DebtTransaction.date.desc(), DebtTransaction.id.desc())
    ).all()


def totals_by_debt(
    session: Session, user_id: int, debt_id: Optional[int] = None
) -> Dict[int, Tuple[float, float, int]]:
    """{debt_id: (pagado, aumentado, número de movimientos)} en una sola consulta."""
    query = select(
        DebtTransaction.debt_id,
        DebtTransaction.type,
        func.coalesce(func.sum(DebtTransaction.amount), 0),
        func.count(DebtTransaction.id),
    ).where(DebtTransaction.user_id == user_id)
    if debt_id is not None:
        query = query.where(DebtTransaction.debt_id == debt_id)

    totals: Dict[int, Tuple[float, float, int]] = {}
    rows = session.exec(query.group_by(DebtTransaction.debt_id, DebtTransaction.type)).all()
    for row_debt_id, kind, total, n in rows:
        paid, increased, count = totals.get(row_debt_id, (0.0, 0.0, 0))
        if DebtTransactionType(kind) == DebtTransactionType.payment:
            paid += float(total)
        else:
            increased += float(total)
        totals[row_debt_id] = (paid, increased, count + n)
    return totals


def summarize_debt(debt: Debt, totals: Dict[int, Tuple[float, float, int]]) -> dict:
    paid, increased, count = totals.get(debt.id, (0.0, 0.0, 0))
    return {
        "debt_id": debt.id,
        "amount": debt.amount,
        "paid_amount": paid,
        "increased_amount": increased,
        "remaining_amount": debt.amount - paid + increased,
        "transactions_count": count,
    }


def get_balance(session: Session, user_id: int, debt_id: int) -> dict:
    debt = get_owned_debt(session, user_id, debt_id)
    return summarize_debt(debt, totals_by_debt(session, user_id, debt.id))


def get_remaining_amount(session: Session, user_id: int, debt_id: int) -> float:
    return get_balance(session, user_id, debt_id)["remaining_amount"]


def total_remaining(session: Session, user_id: int) -> float:
    principal = session.exec(
        select(func.coalesce(func.sum(Debt.amount), 0)).where(Debt.user_id == user_id)
    ).one()
    totals = totals_by_debt(session, user_id).values()
    return float(principal) - sum(t[0] for t in totals) + sum(t[1] for t in totals)


def _resync_mirror_descriptions(session: Session, user_id: int, debt: Debt) -> int:
    # solo las filas cuya descripción se sintetizó a partir del nombre de la deuda
    rows = session.exec(
        select(Transaction, DebtTransaction)
        .join(DebtTransaction, DebtTransaction.id == Transaction.debt_transaction_id)
        .where(
            Transaction.user_id == user_id,
            DebtTransaction.debt_id == debt.id,
            DebtTransaction.description == None,  # noqa: E711
        )
    ).all()
    for mirror, debt_tx in rows:
        mirror.description = mirror_description(debt_tx.type, None, debt.name)
        mirror.updated_at = dt.datetime.utcnow()
        session.add(mirror)
    return len(rows)


def update_debt(session: Session, user_id: int, debt_id: int, data: dict) -> Debt:
    with atomic(session):
        debt = get_owned_debt(session, user_id, debt_id)
        renamed = data.get("name", debt.name) != debt.name

        for field, value in data.items():
            setattr(debt, field, value)
        debt.updated_at = dt.datetime.utcnow()
        session.add(debt)

        if renamed:
            resynced = _resync_mirror_descriptions(session, user_id, debt)
            logger.info(f"Debt {debt_id} renamed; {resynced} mirror descriptions updated")

    session.refresh(debt)
    return debt


def delete_debt(session: Session, user_id: int, debt_id: int) -> None:
    """
    Borra la deuda y sus movimientos. Las filas espejo quedan como historial
    normal del libro mayor, sin enlace a la deuda.
    """
    with atomic(session):
        debt = get_owned_debt(session, user_id, debt_id)
        debt_txs = session.exec(
            select(DebtTransaction).where(
                DebtTransaction.debt_id == debt.id, DebtTransaction.user_id == user_id
            )
        ).all()
        mirrors = session.exec(
            select(Transaction).where(
                Transaction.user_id == user_id,
                (Transaction.debt_id == debt.id)
                | Transaction.debt_transaction_id.in_([t.id for t in debt_txs]),
            )
        ).all()

        for mirror in mirrors:
            mirror.debt_id = None
            mirror.debt_transaction_id = None
            session.add(mirror)
        session.flush()

        for debt_tx in debt_txs:
            session.delete(debt_tx)
        session.flush()
        session.delete(debt)

    logger.info(f"Debt {debt_id} deleted with {len(debt_txs)} transactions")
