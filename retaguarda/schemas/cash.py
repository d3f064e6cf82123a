# schemas/cash.py
from pydantic import BaseModel, Field
from typing import Optional, Literal
from decimal import Decimal
from datetime import date, date as DateType, datetime

from retaguarda.models.cash import ShiftStep, AuditStatus

class ShiftOpen(BaseModel):
    # Sem valor, usa a reserva deixada no último fechamento do terminal
    opening_balance: Optional[Decimal] = Field(default=None, ge=0)
    terminal_id: Optional[int] = None

class MovementCreate(BaseModel):
    kind: Literal["SUPPLY", "WITHDRAWAL"]
    amount: Decimal = Field(gt=0)
    description: Optional[str] = None
    evidence_url: Optional[str] = None

class CountEntry(BaseModel):
    counted_cash: Decimal = Field(ge=0)  # O que o operador contou fisicamente

class ShiftClose(BaseModel):
    closing_reserve: Decimal = Field(default=Decimal("0"), ge=0)

class ShiftSessionRead(BaseModel):
    id: int
    terminal_id: int
    operator_id: int
    business_date: date
    step: ShiftStep
    opening_balance: Decimal
    counted_cash: Optional[Decimal] = None
    count_confirmed: bool
    closing_reserve: Optional[Decimal] = None
    audit_id: Optional[int] = None
    opened_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ShiftStatusRead(BaseModel):
    step: ShiftStep
    terminal_id: int
    closed_today: bool
    suggested_opening_balance: Decimal
    poll_interval_seconds: int
    session: Optional[ShiftSessionRead] = None

    class Config:
        from_attributes = True

class CashBreakdownRead(BaseModel):
    opening_balance: Decimal
    cash_sales: Decimal
    pix_sales: Decimal
    credit_sales: Decimal
    debit_sales: Decimal
    uncategorized_sales: Decimal
    system_calculated_total: Decimal
    supplies: Decimal
    expenses: Decimal
    expected_cash: Decimal
    counted_cash: Decimal
    difference: Decimal
    is_balanced: bool
    sales_count: int
    average_ticket: Decimal

    class Config:
        from_attributes = True

class ClosingReport(BaseModel):
    session: ShiftSessionRead
    breakdown: CashBreakdownRead

# --- Auditoria ---

class CashAuditRead(BaseModel):
    id: int
    terminal_id: int
    date: DateType
    status: AuditStatus
    difference_value: Decimal
    opening_balance: Optional[Decimal] = None
    counted_cash: Optional[Decimal] = None
    expected_cash: Optional[Decimal] = None
    closing_reserve: Optional[Decimal] = None
    cash_sales: Optional[Decimal] = None
    pix_sales: Optional[Decimal] = None
    credit_sales: Optional[Decimal] = None
    debit_sales: Optional[Decimal] = None
    uncategorized_sales: Optional[Decimal] = None
    system_calculated_total: Optional[Decimal] = None
    supplies: Optional[Decimal] = None
    expenses: Optional[Decimal] = None
    sales_count: Optional[int] = None
    audited_by: str
    notes: Optional[str] = None
    deposit_proof_url: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AuditApprove(BaseModel):
    deposit_proof_url: Optional[str] = None

class AuditContest(BaseModel):
    justification: str
