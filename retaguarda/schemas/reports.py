from pydantic import BaseModel
from typing import List, Optional
from datetime import date
from decimal import Decimal

from retaguarda.models.finance import TenderType


class IncomeStatementRead(BaseModel):
    year: int
    month: int
    gross_revenue: Decimal
    taxes: Decimal
    net_revenue: Decimal
    cmv: Decimal
    gross_profit: Decimal
    labor: Decimal
    utility: Decimal
    service: Decimal
    other: Decimal
    ebitda: Decimal

    class Config:
        from_attributes = True


class ProjectionDayRead(BaseModel):
    day: date
    inflow: Decimal
    outflow: Decimal
    balance: Decimal

    class Config:
        from_attributes = True


class CashProjectionRead(BaseModel):
    start_date: date
    starting_balance: Decimal
    ending_balance: Decimal
    min_balance: Decimal
    min_balance_date: date
    status: str  # HEALTHY | SHORTFALL_RISK
    days: List[ProjectionDayRead]

    class Config:
        from_attributes = True


class LedgerSummaryRead(BaseModel):
    paid_incomes: Decimal
    paid_expenses: Decimal
    balance: Decimal
    pending_payables: Decimal
    pending_receivables: Decimal
    total_fees: Decimal

    class Config:
        from_attributes = True


class SettlementItemRead(BaseModel):
    transaction_id: Optional[int]
    sale_date: date
    tender: TenderType
    method_name: Optional[str]
    gross: Decimal
    fee: Decimal
    net: Decimal
    settlement_date: date

    class Config:
        from_attributes = True
