# retaguarda/crud/shifts.py
"""
Ciclo de vida do turno de caixa:

    OPEN -> ACTIVE -> CLOSING (contagem -> confirmação -> relatório) -> fechado -> OPEN

O turno fica gravado no banco (shift_sessions), não no dispositivo, e é
único por (terminal, dia). O fechamento grava auditoria, encerra o turno e
guarda a reserva do próximo turno numa única transação.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from retaguarda.config import get_settings
from retaguarda.crud.finance import TRANSACTIONS, validate_amount
from retaguarda.exceptions import (
    IntegrityConflictError, InvalidShiftTransitionError, ShiftAlreadyClosedError,
    ShiftAlreadyOpenError, ValidationError
)
from retaguarda.models import (
    AuditStatus, ShiftStep, TransactionCategory, TransactionPurpose, TransactionStatus, TransactionType
)
from retaguarda.store import TransactionStore
from retaguarda.utils.classification import describe_movement, to_decimal
from retaguarda.utils.dates import today, utcnow
from retaguarda.utils.logger import get_logger
from retaguarda.utils.reconciliation import CashBreakdown, reconcile

logger = get_logger("retaguarda.shifts")

SESSIONS = "shift_sessions"
AUDITS = "cash_audits"
LIVE_STEPS = (ShiftStep.ACTIVE, ShiftStep.CLOSING)

MOVEMENT_KINDS = {
    "SUPPLY": (TransactionType.INCOME, TransactionPurpose.TILL_SUPPLY),
    "WITHDRAWAL": (TransactionType.EXPENSE, TransactionPurpose.TILL_WITHDRAWAL),
}


@dataclass
class ShiftStatus:
    step: ShiftStep
    terminal_id: int
    closed_today: bool
    suggested_opening_balance: Decimal
    poll_interval_seconds: int
    session: Optional[object] = None


def resolve_terminal(store: TransactionStore, user, terminal_id: Optional[int] = None):
    terminal_id = terminal_id or user.terminal_id
    if not terminal_id:
        raise ValidationError("Operador sem terminal vinculado.", field="terminal_id")
    return store.get_or_raise("terminals", terminal_id)


def live_session(store: TransactionStore, terminal_id: int):
    return store.first(SESSIONS, {"terminal_id": terminal_id, "step__in": LIVE_STEPS}, order="-opened_at")


def audit_for_day(store: TransactionStore, terminal_id: int, day: date):
    return store.first(AUDITS, {"terminal_id": terminal_id, "date": day})


def get_status(store: TransactionStore, terminal, day: Optional[date] = None) -> ShiftStatus:
    day = day or today()
    session = live_session(store, terminal.id)
    return ShiftStatus(
        step=session.step if session else ShiftStep.OPEN,
        terminal_id=terminal.id,
        closed_today=audit_for_day(store, terminal.id, day) is not None,
        suggested_opening_balance=to_decimal(terminal.next_opening_balance),
        poll_interval_seconds=get_settings().poll_interval_seconds,
        session=session,
    )


def open_shift(store: TransactionStore, terminal, operator, opening_balance=None, day: Optional[date] = None):
    day = day or today()

    # 1. Um turno por terminal por dia
    if audit_for_day(store, terminal.id, day):
        raise ShiftAlreadyClosedError(terminal.id, day)
    if live_session(store, terminal.id):
        raise ShiftAlreadyOpenError(terminal.id)

    # 2. Fundo de troco: o informado ou a reserva do último fechamento
    balance = to_decimal(terminal.next_opening_balance if opening_balance is None else opening_balance)
    if balance < 0:
        raise ValidationError("Saldo inicial não pode ser negativo.", field="opening_balance")

    # 3. A restrição única (terminal, dia) barra aberturas concorrentes
    try:
        session = store.insert(SESSIONS, [{
            "terminal_id": terminal.id,
            "operator_id": operator.id,
            "business_date": day,
            "step": ShiftStep.ACTIVE,
            "opening_balance": balance,
            "count_confirmed": False,
        }])[0]
    except IntegrityConflictError:
        if audit_for_day(store, terminal.id, day):
            raise ShiftAlreadyClosedError(terminal.id, day)
        raise ShiftAlreadyOpenError(terminal.id)

    logger.info("Turno %s aberto no terminal %s por %s (fundo R$ %s)",
                session.id, terminal.id, operator.username, balance)
    return session


def _require_session(store: TransactionStore, terminal, action: str, steps=LIVE_STEPS):
    session = live_session(store, terminal.id)
    if session is None:
        raise InvalidShiftTransitionError(ShiftStep.OPEN.value, action)
    if session.step not in steps:
        raise InvalidShiftTransitionError(session.step.value, action)
    return session


def list_session_transactions(store: TransactionStore, day: Optional[date] = None,
                              terminal_id: Optional[int] = None):
    """
    Lançamentos do dia, mais recentes primeiro (feed consultado periodicamente
    pelo terminal). Com `terminal_id`, ficam os movimentos desse terminal e os
    lançamentos sem terminal (vendas PDV são compartilhadas).
    """
    rows = store.select(TRANSACTIONS, {"due_date": day or today()}, order=["-created_at", "-id"])
    if terminal_id is None:
        return rows
    return [tx for tx in rows if tx.terminal_id in (None, terminal_id)]


def add_movement(store: TransactionStore, terminal, kind: str, amount,
                 description: Optional[str] = None, evidence_url: Optional[str] = None):
    """Reforço (entrada) ou sangria (saída) durante o turno ativo."""
    if kind not in MOVEMENT_KINDS:
        raise ValidationError(f"Tipo de movimento inválido: {kind}", field="kind")
    value = validate_amount(amount)
    session = _require_session(store, terminal, "movement", steps=(ShiftStep.ACTIVE,))

    tx_type, purpose = MOVEMENT_KINDS[kind]
    tx = store.insert(TRANSACTIONS, [{
        "type": tx_type,
        "category": TransactionCategory.OTHER,
        "purpose": purpose,
        "description": describe_movement(kind, description),
        "amount": value,
        "due_date": session.business_date,
        "status": TransactionStatus.PAID,
        "attachment_url": evidence_url,
        "terminal_id": terminal.id,
    }])[0]
    logger.info("Movimento %s de R$ %s no terminal %s", kind, value, terminal.id)
    return tx


def begin_closing(store: TransactionStore, terminal):
    session = _require_session(store, terminal, "begin_closing", steps=(ShiftStep.ACTIVE,))
    store.update(SESSIONS, {"step": ShiftStep.CLOSING, "counted_cash": None, "count_confirmed": False},
                 {"id": session.id})
    return store.refresh(session)


def enter_count(store: TransactionStore, terminal, counted_cash):
    counted = to_decimal(counted_cash)
    if counted < 0:
        raise ValidationError("Valor contado não pode ser negativo.", field="counted_cash")
    session = _require_session(store, terminal, "count", steps=(ShiftStep.CLOSING,))
    if session.count_confirmed:
        raise InvalidShiftTransitionError("COUNT_CONFIRMED", "count")
    store.update(SESSIONS, {"counted_cash": counted}, {"id": session.id})
    return store.refresh(session)


def confirm_count(store: TransactionStore, terminal):
    """Trava a contagem. Para recontar é preciso voltar ao turno ativo."""
    session = _require_session(store, terminal, "confirm_count", steps=(ShiftStep.CLOSING,))
    if session.count_confirmed:
        raise InvalidShiftTransitionError("COUNT_CONFIRMED", "confirm_count")
    if session.counted_cash is None:
        raise ValidationError("Informe a contagem física antes de confirmar.", field="counted_cash")
    store.update(SESSIONS, {"count_confirmed": True}, {"id": session.id})
    logger.info("Contagem confirmada no turno %s: R$ %s", session.id, session.counted_cash)
    return store.refresh(session)


def resume_shift(store: TransactionStore, terminal):
    """CLOSING -> ACTIVE; descarta a contagem."""
    session = _require_session(store, terminal, "resume", steps=(ShiftStep.CLOSING,))
    store.update(SESSIONS, {"step": ShiftStep.ACTIVE, "counted_cash": None, "count_confirmed": False},
                 {"id": session.id})
    return store.refresh(session)


def breakdown_for(store: TransactionStore, session) -> CashBreakdown:
    return reconcile(
        session.opening_balance,
        list_session_transactions(store, session.business_date, session.terminal_id),
        session.counted_cash,
        tolerance=get_settings().balance_tolerance,
    )


def _require_confirmed(store: TransactionStore, terminal, action: str):
    session = _require_session(store, terminal, action, steps=(ShiftStep.CLOSING,))
    if not session.count_confirmed:
        raise InvalidShiftTransitionError("COUNT_ENTRY", action)
    return session


def closing_report(store: TransactionStore, terminal):
    session = _require_confirmed(store, terminal, "report")
    return session, breakdown_for(store, session)


def commit_close(store: TransactionStore, terminal, operator, closing_reserve):
    """
    Encerra o turno: grava a auditoria PENDING, fecha o turno e guarda a
    reserva como fundo do próximo turno, tudo num único commit. Repetir a
    chamada depois de um fechamento concluído devolve a auditoria do último
    turno encerrado, mesmo que o relógio já tenha virado o dia.
    """
    session = live_session(store, terminal.id)
    if session is None:
        closed = store.first(SESSIONS, {
            "terminal_id": terminal.id,
            "step": ShiftStep.CLOSED,
            "audit_id__ne": None,
        }, order=["-business_date", "-id"])
        if closed is not None:
            return store.get(AUDITS, closed.audit_id)
        raise InvalidShiftTransitionError(ShiftStep.OPEN.value, "close")

    session = _require_confirmed(store, terminal, "close")
    reserve = to_decimal(closing_reserve)
    if reserve < 0:
        raise ValidationError("Reserva não pode ser negativa.", field="closing_reserve")

    breakdown = breakdown_for(store, session)
    diff = breakdown.difference

    audit = store.insert(AUDITS, [{
        "terminal_id": terminal.id,
        "date": session.business_date,
        "status": AuditStatus.PENDING,
        "difference_value": diff,
        "opening_balance": breakdown.opening_balance,
        "counted_cash": breakdown.counted_cash,
        "expected_cash": breakdown.expected_cash,
        "cash_sales": breakdown.cash_sales,
        "pix_sales": breakdown.pix_sales,
        "credit_sales": breakdown.credit_sales,
        "debit_sales": breakdown.debit_sales,
        "uncategorized_sales": breakdown.uncategorized_sales,
        "system_calculated_total": breakdown.system_calculated_total,
        "supplies": breakdown.supplies,
        "expenses": breakdown.expenses,
        "sales_count": breakdown.sales_count,
        "closing_reserve": reserve,
        "audited_by": operator.display_name or "Operador",
        "notes": f"Fechamento Terminal. Físico: R$ {breakdown.counted_cash:.2f}. Diferença: R$ {diff:.2f}",
    }], commit=False)[0]
    store.update(SESSIONS, {
        "step": ShiftStep.CLOSED,
        "closing_reserve": reserve,
        "audit_id": audit.id,
        "closed_at": utcnow(),
    }, {"id": session.id}, commit=False)
    store.update("terminals", {"next_opening_balance": reserve}, {"id": terminal.id}, commit=False)
    store.commit()

    logger.info("Turno %s encerrado; auditoria %s com diferença R$ %s", session.id, audit.id, diff)
    return store.refresh(audit)


def history(store: TransactionStore, terminal_id: Optional[int] = None, limit: int = 30):
    filters = {"terminal_id": terminal_id} if terminal_id else None
    return store.select(AUDITS, filters, order=["-date", "-id"], limit=limit)
