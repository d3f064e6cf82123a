# retaguarda/utils/reporting.py
"""DRE do mês, projeção de caixa, resumo do financeiro e agenda de repasses."""
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from retaguarda.models.finance import (
    TenderType, TransactionCategory, TransactionPurpose, TransactionStatus, TransactionType
)
from retaguarda.utils.classification import classify, to_decimal

ZERO = Decimal("0")
CENT = Decimal("0.01")

HEALTHY = "HEALTHY"
SHORTFALL_RISK = "SHORTFALL_RISK"

OTHER_EXPENSE_CATEGORIES = (
    TransactionCategory.OTHER,
    TransactionCategory.MAINTENANCE,
    TransactionCategory.LEGAL,
    TransactionCategory.LOAN,
)


def _sum(transactions, **criteria) -> Decimal:
    total = ZERO
    for tx in transactions:
        if all(_matches(getattr(tx, attr), expected) for attr, expected in criteria.items()):
            total += to_decimal(tx.amount)
    return total


def _matches(value, expected) -> bool:
    if isinstance(expected, tuple):
        return value in expected
    return value == expected


# --- DRE ---

@dataclass(frozen=True)
class IncomeStatement:
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


def build_income_statement(transactions, year: int, month: int) -> IncomeStatement:
    """
    Visão gerencial (competência): considera pagos e pendentes do mês.
    Cada linha desconta do subtotal anterior até o EBITDA.
    """
    month_txs = [
        tx for tx in transactions
        if tx.due_date.year == year and tx.due_date.month == month
    ]
    expenses = [tx for tx in month_txs if tx.type == TransactionType.EXPENSE]

    gross_revenue = _sum(month_txs, type=TransactionType.INCOME)
    taxes = _sum(expenses, category=TransactionCategory.FEES)
    net_revenue = gross_revenue - taxes
    cmv = _sum(expenses, category=TransactionCategory.INVENTORY)
    gross_profit = net_revenue - cmv
    labor = _sum(expenses, category=TransactionCategory.LABOR)
    utility = _sum(expenses, category=TransactionCategory.UTILITY)
    service = _sum(expenses, category=TransactionCategory.SERVICE)
    other = _sum(expenses, category=OTHER_EXPENSE_CATEGORIES)
    ebitda = gross_profit - labor - utility - service - other

    return IncomeStatement(
        year=year, month=month,
        gross_revenue=gross_revenue, taxes=taxes, net_revenue=net_revenue,
        cmv=cmv, gross_profit=gross_profit,
        labor=labor, utility=utility, service=service, other=other,
        ebitda=ebitda,
    )


# --- Projeção de caixa ---

@dataclass(frozen=True)
class ProjectionDay:
    day: date
    inflow: Decimal
    outflow: Decimal
    balance: Decimal


@dataclass(frozen=True)
class CashProjection:
    start_date: date
    starting_balance: Decimal
    ending_balance: Decimal
    min_balance: Decimal
    min_balance_date: date
    status: str
    days: List[ProjectionDay] = field(default_factory=list)

    @property
    def total_inflow(self) -> Decimal:
        return sum((d.inflow for d in self.days), ZERO)

    @property
    def total_outflow(self) -> Decimal:
        return sum((d.outflow for d in self.days), ZERO)


def current_balance(transactions) -> Decimal:
    """Saldo realizado: tudo que foi liquidado, desde sempre."""
    incomes = _sum(transactions, type=TransactionType.INCOME, status=TransactionStatus.PAID)
    expenses = _sum(transactions, type=TransactionType.EXPENSE, status=TransactionStatus.PAID)
    return incomes - expenses


def project_cash_flow(transactions, start: date, days: int = 30) -> CashProjection:
    """
    Simulação dia a dia: cada pendência é liquidada exatamente no vencimento.
    Janela = `start` até `start + days - 1`. Pendências vencidas antes de
    `start` ficam de fora.
    """
    starting = current_balance(transactions)
    pending_in: Dict[date, Decimal] = {}
    pending_out: Dict[date, Decimal] = {}
    for tx in transactions:
        if tx.status != TransactionStatus.PENDING:
            continue
        bucket = pending_in if tx.type == TransactionType.INCOME else pending_out
        bucket[tx.due_date] = bucket.get(tx.due_date, ZERO) + to_decimal(tx.amount)

    balance = starting
    min_balance: Optional[Decimal] = None
    min_date = start
    series = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        inflow = pending_in.get(day, ZERO)
        outflow = pending_out.get(day, ZERO)
        balance = balance + inflow - outflow
        series.append(ProjectionDay(day=day, inflow=inflow, outflow=outflow, balance=balance))
        if min_balance is None or balance < min_balance:
            min_balance, min_date = balance, day

    if min_balance is None:
        min_balance = starting

    return CashProjection(
        start_date=start,
        starting_balance=starting,
        ending_balance=balance,
        min_balance=min_balance,
        min_balance_date=min_date,
        status=HEALTHY if min_balance >= ZERO else SHORTFALL_RISK,
        days=series,
    )


# --- Resumo do financeiro ---

@dataclass(frozen=True)
class LedgerSummary:
    paid_incomes: Decimal
    paid_expenses: Decimal
    balance: Decimal
    pending_payables: Decimal
    pending_receivables: Decimal
    total_fees: Decimal


def summarize_ledger(transactions) -> LedgerSummary:
    paid_incomes = _sum(transactions, type=TransactionType.INCOME, status=TransactionStatus.PAID)
    paid_expenses = _sum(transactions, type=TransactionType.EXPENSE, status=TransactionStatus.PAID)
    return LedgerSummary(
        paid_incomes=paid_incomes,
        paid_expenses=paid_expenses,
        balance=paid_incomes - paid_expenses,
        pending_payables=_sum(transactions, type=TransactionType.EXPENSE, status=TransactionStatus.PENDING),
        pending_receivables=_sum(transactions, type=TransactionType.INCOME, status=TransactionStatus.PENDING),
        total_fees=_sum(transactions, category=TransactionCategory.FEES),
    )


# --- Conciliação de cartões (D+N) ---

CARD_TENDERS = (TenderType.CREDIT, TenderType.DEBIT)


@dataclass(frozen=True)
class SettlementItem:
    transaction_id: Optional[int]
    sale_date: date
    tender: TenderType
    method_name: Optional[str]
    gross: Decimal
    fee: Decimal
    net: Decimal
    settlement_date: date


def match_payment_method(tx, tender: TenderType, methods):
    """Adquirente citado na descrição; senão, o que leva a palavra da bandeira no nome."""
    description = (tx.description or "").lower()
    for method in methods:
        if method.name and method.name.lower() in description:
            return method
    for method in methods:
        if tender.value.lower() in (method.name or "").lower():
            return method
    return None


def settlement_schedule(transactions, methods) -> List[SettlementItem]:
    """Para cada venda em cartão: taxa, valor líquido e data prevista de repasse."""
    items = []
    for tx in transactions:
        purpose, tender = classify(tx)
        if purpose != TransactionPurpose.SALE or tender not in CARD_TENDERS:
            continue
        gross = to_decimal(tx.amount)
        method = match_payment_method(tx, tender, methods)
        if method is None:
            fee, days, name = ZERO, 0, None
        else:
            rate = to_decimal(method.fee_percentage) / Decimal("100")
            fee = (gross * rate).quantize(CENT, rounding=ROUND_HALF_UP)
            days, name = method.settlement_days or 0, method.name
        items.append(SettlementItem(
            transaction_id=tx.id,
            sale_date=tx.due_date,
            tender=tender,
            method_name=name,
            gross=gross,
            fee=fee,
            net=gross - fee,
            settlement_date=tx.due_date + timedelta(days=days),
        ))
    return sorted(items, key=lambda item: item.settlement_date)
