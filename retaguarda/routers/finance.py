# retaguarda/routers/finance.py
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends

from retaguarda.crud import finance
from retaguarda.models import TransactionStatus, TransactionType, User
from retaguarda.schemas.finance import (
    TransactionCreate, TransactionRead, TransactionUpdate, LiquidateRequest, CompetenceRequest
)
from retaguarda.schemas.reports import LedgerSummaryRead
from retaguarda.security import get_current_user, require_manager
from retaguarda.store import TransactionStore, get_store
from retaguarda.utils.reporting import summarize_ledger

router = APIRouter()


@router.get("/transactions", response_model=List[TransactionRead])
def list_transactions(
    start: Optional[date] = None,
    end: Optional[date] = None,
    type: Optional[TransactionType] = None,
    status: Optional[TransactionStatus] = None,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return finance.list_transactions(store, start, end, type, status)


@router.post("/transactions", response_model=TransactionRead)
def create_transaction(
    tx_in: TransactionCreate,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return finance.create_transaction(store, tx_in.model_dump())


@router.get("/transactions/{tx_id}", response_model=TransactionRead)
def get_transaction(
    tx_id: int,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return store.get_or_raise(finance.TRANSACTIONS, tx_id)


@router.put("/transactions/{tx_id}", response_model=TransactionRead)
def update_transaction(
    tx_id: int,
    tx_in: TransactionUpdate,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return finance.update_transaction(store, tx_id, tx_in.model_dump(exclude_unset=True))


@router.delete("/transactions/{tx_id}")
def delete_transaction(
    tx_id: int,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    finance.delete_transaction(store, tx_id)
    return {"ok": True}


@router.post("/transactions/{tx_id}/liquidate", response_model=TransactionRead)
def liquidate_transaction(
    tx_id: int,
    body: Optional[LiquidateRequest] = None,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    """Baixa a pendência; atualiza o saldo real."""
    return finance.liquidate_transaction(store, tx_id, body.paid_on if body else None)


@router.get("/summary", response_model=LedgerSummaryRead)
def get_summary(
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    """Cards do financeiro: entradas, saídas, saldo, contas a pagar e taxas."""
    summary = summarize_ledger(store.select(finance.TRANSACTIONS))
    return LedgerSummaryRead.model_validate(summary)


@router.post("/payroll", response_model=TransactionRead)
def provision_payroll(
    competence: CompetenceRequest,
    store: TransactionStore = Depends(get_store),
    manager: User = Depends(require_manager)
):
    return finance.provision_payroll(store, competence.year, competence.month)
