# retaguarda/routers/cash.py
from typing import List, Optional
from fastapi import APIRouter, Depends

from retaguarda.crud import shifts
from retaguarda.models import User
from retaguarda.schemas.cash import (
    ShiftOpen, ShiftSessionRead, ShiftStatusRead, MovementCreate, CountEntry,
    ShiftClose, ClosingReport, CashBreakdownRead, CashAuditRead
)
from retaguarda.schemas.finance import TransactionRead
from retaguarda.security import get_current_user
from retaguarda.store import TransactionStore, get_store

router = APIRouter()


@router.get("/status", response_model=ShiftStatusRead)
def get_shift_status(
    terminal_id: Optional[int] = None,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    """Etapa atual do turno do terminal (OPEN quando não há turno ativo)."""
    terminal = shifts.resolve_terminal(store, current_user, terminal_id)
    return ShiftStatusRead.model_validate(shifts.get_status(store, terminal))


@router.post("/open", response_model=ShiftSessionRead)
def open_shift(
    shift_in: ShiftOpen,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    terminal = shifts.resolve_terminal(store, current_user, shift_in.terminal_id)
    return shifts.open_shift(store, terminal, current_user, shift_in.opening_balance)


@router.get("/transactions", response_model=List[TransactionRead])
def get_session_transactions(
    terminal_id: Optional[int] = None,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    """Lançamentos do dia do terminal; consultado a cada poll_interval_seconds."""
    terminal = shifts.resolve_terminal(store, current_user, terminal_id)
    return shifts.list_session_transactions(store, terminal_id=terminal.id)


@router.post("/movements", response_model=TransactionRead)
def add_movement(
    movement: MovementCreate,
    terminal_id: Optional[int] = None,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    terminal = shifts.resolve_terminal(store, current_user, terminal_id)
    return shifts.add_movement(
        store, terminal, movement.kind, movement.amount, movement.description, movement.evidence_url
    )


@router.post("/closing", response_model=ShiftSessionRead)
def begin_closing(
    terminal_id: Optional[int] = None,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    terminal = shifts.resolve_terminal(store, current_user, terminal_id)
    return shifts.begin_closing(store, terminal)


@router.post("/count", response_model=ShiftSessionRead)
def enter_count(
    count: CountEntry,
    terminal_id: Optional[int] = None,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    terminal = shifts.resolve_terminal(store, current_user, terminal_id)
    return shifts.enter_count(store, terminal, count.counted_cash)


@router.post("/count/confirm", response_model=ShiftSessionRead)
def confirm_count(
    terminal_id: Optional[int] = None,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    terminal = shifts.resolve_terminal(store, current_user, terminal_id)
    return shifts.confirm_count(store, terminal)


@router.post("/resume", response_model=ShiftSessionRead)
def resume_shift(
    terminal_id: Optional[int] = None,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    """Volta para o turno ativo (descarta a contagem)."""
    terminal = shifts.resolve_terminal(store, current_user, terminal_id)
    return shifts.resume_shift(store, terminal)


@router.get("/report", response_model=ClosingReport)
def get_closing_report(
    terminal_id: Optional[int] = None,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    terminal = shifts.resolve_terminal(store, current_user, terminal_id)
    session, breakdown = shifts.closing_report(store, terminal)
    return ClosingReport(
        session=ShiftSessionRead.model_validate(session),
        breakdown=CashBreakdownRead.model_validate(breakdown),
    )


@router.post("/close", response_model=CashAuditRead)
def close_shift(
    close_data: ShiftClose,
    terminal_id: Optional[int] = None,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    """Encerra o turno e envia para auditoria."""
    terminal = shifts.resolve_terminal(store, current_user, terminal_id)
    return shifts.commit_close(store, terminal, current_user, close_data.closing_reserve)


@router.get("/history", response_model=List[CashAuditRead])
def get_history(
    terminal_id: Optional[int] = None,
    limit: int = 30,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return shifts.history(store, terminal_id, limit)
