# retaguarda/models/cash.py
import enum
from sqlalchemy import (
    Column, Integer, String, Boolean, Date, DateTime, Numeric, ForeignKey, Enum, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from retaguarda.database import Base


class ShiftStep(str, enum.Enum):
    OPEN = "OPEN"         # Sem turno ativo (nunca persistido)
    ACTIVE = "ACTIVE"
    CLOSING = "CLOSING"
    CLOSED = "CLOSED"


class AuditStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    CONTESTED = "CONTESTED"


class ShiftSession(Base):
    """
    Turno de caixa de um terminal em um dia. A restrição única
    (terminal, dia) funciona como reserva: duas aberturas simultâneas
    não podem ambas gravar.
    """
    __tablename__ = "shift_sessions"
    __table_args__ = (UniqueConstraint("terminal_id", "business_date", name="uq_shift_terminal_day"),)

    id = Column(Integer, primary_key=True, index=True)
    terminal_id = Column(Integer, ForeignKey("terminals.id"), nullable=False)
    operator_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    business_date = Column(Date, nullable=False)

    step = Column(Enum(ShiftStep), default=ShiftStep.ACTIVE, nullable=False)

    opening_balance = Column(Numeric(10, 2), nullable=False)  # Fundo de troco
    counted_cash = Column(Numeric(10, 2), nullable=True)      # Contagem física
    count_confirmed = Column(Boolean, default=False, nullable=False)
    closing_reserve = Column(Numeric(10, 2), nullable=True)   # Fica para o próximo turno

    audit_id = Column(Integer, ForeignKey("cash_audits.id"), nullable=True)

    opened_at = Column(DateTime(timezone=True), server_default=func.now())
    closed_at = Column(DateTime(timezone=True), nullable=True)

    terminal = relationship("Terminal")
    operator = relationship("User")
    audit = relationship("CashAudit")


class CashAudit(Base):
    """Fechamento de um turno aguardando revisão do gerente."""
    __tablename__ = "cash_audits"
    __table_args__ = (UniqueConstraint("terminal_id", "date", name="uq_audit_terminal_day"),)

    id = Column(Integer, primary_key=True, index=True)
    terminal_id = Column(Integer, ForeignKey("terminals.id"), nullable=False)
    date = Column(Date, index=True, nullable=False)

    status = Column(Enum(AuditStatus), default=AuditStatus.PENDING, nullable=False)
    difference_value = Column(Numeric(10, 2), nullable=False)  # Contado - esperado

    # Foto do fechamento
    opening_balance = Column(Numeric(10, 2), default=0)
    counted_cash = Column(Numeric(10, 2), default=0)
    expected_cash = Column(Numeric(10, 2), default=0)
    closing_reserve = Column(Numeric(10, 2), default=0)

    # Resumo por forma de pagamento no momento do fechamento
    cash_sales = Column(Numeric(10, 2), default=0)
    pix_sales = Column(Numeric(10, 2), default=0)
    credit_sales = Column(Numeric(10, 2), default=0)
    debit_sales = Column(Numeric(10, 2), default=0)
    uncategorized_sales = Column(Numeric(10, 2), default=0)
    system_calculated_total = Column(Numeric(10, 2), default=0)
    supplies = Column(Numeric(10, 2), default=0)
    expenses = Column(Numeric(10, 2), default=0)
    sales_count = Column(Integer, default=0)

    audited_by = Column(String, nullable=False)
    notes = Column(Text, nullable=True)
    deposit_proof_url = Column(String, nullable=True)

    reviewed_by = Column(String, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    terminal = relationship("Terminal")
