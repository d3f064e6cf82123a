# retaguarda/routers/reports.py
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from retaguarda.config import get_settings
from retaguarda.crud.finance import TRANSACTIONS
from retaguarda.crud.payment_methods import list_methods
from retaguarda.schemas.reports import CashProjectionRead, IncomeStatementRead, SettlementItemRead
from retaguarda.security import get_current_user
from retaguarda.store import TransactionStore, get_store
from retaguarda.utils.dates import month_bounds, today
from retaguarda.utils.reporting import build_income_statement, project_cash_flow, settlement_schedule

router = APIRouter()


@router.get("/dre", response_model=IncomeStatementRead)
def get_income_statement(
    year: Optional[int] = None,
    month: Optional[int] = Query(default=None, ge=1, le=12),
    store: TransactionStore = Depends(get_store),
    current_user=Depends(get_current_user)
):
    """DRE gerencial do mês (padrão: mês corrente)."""
    ref = today()
    year, month = year or ref.year, month or ref.month
    first_day, last_day = month_bounds(year, month)
    rows = store.select(TRANSACTIONS, {"due_date__gte": first_day, "due_date__lte": last_day})
    return IncomeStatementRead.model_validate(build_income_statement(rows, year, month))


@router.get("/projection", response_model=CashProjectionRead)
def get_cash_projection(
    days: Optional[int] = Query(default=None, ge=1, le=365),
    store: TransactionStore = Depends(get_store),
    current_user=Depends(get_current_user)
):
    """Saldo previsto dia a dia para os próximos N dias (padrão 30)."""
    projection = project_cash_flow(
        store.select(TRANSACTIONS), today(), days or get_settings().projection_days
    )
    return CashProjectionRead.model_validate(projection)


@router.get("/settlements", response_model=List[SettlementItemRead])
def get_settlements(
    start: Optional[date] = None,
    end: Optional[date] = None,
    store: TransactionStore = Depends(get_store),
    current_user=Depends(get_current_user)
):
    """Repasses de cartão previstos (D+N) com taxa da adquirente."""
    filters = {}
    if start:
        filters["due_date__gte"] = start
    if end:
        filters["due_date__lte"] = end
    items = settlement_schedule(store.select(TRANSACTIONS, filters), list_methods(store))
    return [SettlementItemRead.model_validate(item) for item in items]
