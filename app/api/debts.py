from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlmodel import Session, select
from typing import List

from app.core.security import get_current_user
from app.database import atomic, get_session
from app.models.debt import Debt
from app.schemas.debt import DebtBalance, DebtCreate, DebtRead, DebtStats
from app.schemas.debt_transaction import DebtTransactionCreate, DebtTransactionRead
from app.services import debt_ledger

router = APIRouter(prefix="/debts", tags=["debts"])


def _to_read(debt: Debt, totals) -> DebtRead:
    balance = debt_ledger.summarize_debt(debt, totals)
    debt_dict = debt.model_dump()
    debt_dict.update(
        paid_amount=balance["paid_amount"],
        increased_amount=balance["increased_amount"],
        remaining_amount=balance["remaining_amount"],
        transactions_count=balance["transactions_count"],
    )
    return DebtRead(**debt_dict)


@router.get("", response_model=List[DebtRead])
@router.get("/", response_model=List[DebtRead])
def get_debts(
    user_id: int = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    debts = session.exec(
        select(Debt)
        .where(Debt.user_id == user_id)
        .order_by(Debt.due_date.asc().nulls_last(), Debt.created_at.desc())
    ).all()
    totals = debt_ledger.totals_by_debt(session, user_id)
    return [_to_read(debt, totals) for debt in debts]


@router.get("/stats/summary", response_model=DebtStats)
def get_debt_stats(
    user_id: int = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    total_debts, total_amount, avg_interest_rate = session.exec(
        select(
            func.count(Debt.id),
            func.coalesce(func.sum(Debt.amount), 0),
            func.coalesce(func.avg(Debt.interest_rate), 0),
        ).where(Debt.user_id == user_id)
    ).one()
    return DebtStats(
        total_debts=total_debts,
        total_amount=float(total_amount),
        avg_interest_rate=float(avg_interest_rate),
        total_remaining=debt_ledger.total_remaining(session, user_id),
    )


@router.get("/{debt_id}", response_model=DebtRead)
def get_debt(
    debt_id: int,
    user_id: int = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    debt = debt_ledger.get_owned_debt(session, user_id, debt_id)
    return _to_read(debt, debt_ledger.totals_by_debt(session, user_id, debt.id))


@router.post("", response_model=DebtRead, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=DebtRead, status_code=status.HTTP_201_CREATED)
def create_debt(
    debt_data: DebtCreate,
    user_id: int = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    with atomic(session):
        new_debt = Debt(**debt_data.model_dump(), user_id=user_id)
        session.add(new_debt)
    session.refresh(new_debt)
    return _to_read(new_debt, {})


@router.put("/{debt_id}", response_model=DebtRead)
def update_debt(
    debt_id: int,
    debt_data: DebtCreate,
    user_id: int = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    debt = debt_ledger.update_debt(session, user_id, debt_id, debt_data.model_dump())
    return _to_read(debt, debt_ledger.totals_by_debt(session, user_id, debt.id))


@router.delete("/{debt_id}")
def delete_debt(
    debt_id: int,
    user_id: int = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    debt_ledger.delete_debt(session, user_id, debt_id)
    return {"message": "Debt deleted successfully"}


@router.get("/{debt_id}/balance", response_model=DebtBalance)
def get_debt_balance(
    debt_id: int,
    user_id: int = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return debt_ledger.get_balance(session, user_id, debt_id)


@router.get("/{debt_id}/transactions", response_model=List[DebtTransactionRead])
def get_debt_transactions(
    debt_id: int,
    user_id: int = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return debt_ledger.list_transactions(session, user_id, debt_id)


@router.post(
    "/{debt_id}/transactions",
    response_model=DebtTransactionRead,
    status_code=status.HTTP_201_CREATED,
)
def add_debt_transaction(
    debt_id: int,
    data: DebtTransactionCreate,
    user_id: int = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return debt_ledger.add_transaction(
        session, user_id, debt_id,
        amount=data.amount, kind=data.type, description=data.description, date=data.date,
    )


@router.put("/{debt_id}/transactions/{transaction_id}", response_model=DebtTransactionRead)
def update_debt_transaction(
    debt_id: int,
    transaction_id: int,
    data: DebtTransactionCreate,
    user_id: int = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return debt_ledger.update_transaction(
        session, user_id, debt_id, transaction_id,
        amount=data.amount, kind=data.type, description=data.description, date=data.date,
    )


@router.delete("/{debt_id}/transactions/{transaction_id}")
def delete_debt_transaction(
    debt_id: int,
    transaction_id: int,
    user_id: int = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    debt_ledger.delete_transaction(session, user_id, debt_id, transaction_id)
    return {"message": "Debt transaction deleted successfully"}
