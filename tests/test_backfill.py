import datetime as dt

from sqlmodel import select

from app.models.debt_transaction import DebtTransaction, DebtTransactionType
from app.models.enums import TransactionType
from app.models.transaction import Transaction
from app.scripts.backfill_categories import link_legacy_mirrors
from app.services import debt_ledger

from conftest import OWNER_ID


def test_links_unlinked_mirror_rows(session, car_loan):
    legacy_date = dt.date(2025, 11, 20)
    legacy_tx = DebtTransaction(
        user_id=OWNER_ID, debt_id=car_loan.id, amount=900_000,
        type=DebtTransactionType.payment, date=legacy_date,
    )
    session.add(legacy_tx)
    session.add(Transaction(
        user_id=OWNER_ID, amount=900_000, type=TransactionType.expense, category_id=1,
        description="Trả nợ: Car Loan", date=legacy_date,
    ))
    session.commit()
    session.refresh(legacy_tx)
    linked_tx = debt_ledger.add_transaction(session, OWNER_ID, car_loan.id, 100_000, "payment")

    assert link_legacy_mirrors(session, OWNER_ID) == 1

    mirrors = {
        m.debt_transaction_id: m
        for m in session.exec(select(Transaction).where(Transaction.user_id == OWNER_ID)).all()
    }
    assert set(mirrors) == {legacy_tx.id, linked_tx.id}
    assert mirrors[legacy_tx.id].source_type == "debt_payment"
    assert mirrors[legacy_tx.id].debt_id == car_loan.id


def test_unmatched_rows_are_left_alone(session, car_loan):
    session.add(DebtTransaction(
        user_id=OWNER_ID, debt_id=car_loan.id, amount=50_000,
        type=DebtTransactionType.increase, date=dt.date(2025, 11, 1),
    ))
    session.commit()

    assert link_legacy_mirrors(session, OWNER_ID) == 0


def test_orphaned_mirror_rows_are_not_linked(session, car_loan):
    session.add(Transaction(
        user_id=OWNER_ID, amount=900_000, type=TransactionType.expense, category_id=1,
        description="Trả nợ: Car Loan", date=dt.date(2025, 11, 20), source_type="debt_payment",
    ))
    session.add(DebtTransaction(
        user_id=OWNER_ID, debt_id=car_loan.id, amount=900_000,
        type=DebtTransactionType.payment, date=dt.date(2025, 11, 20),
    ))
    session.commit()

    assert link_legacy_mirrors(session, OWNER_ID) == 0
