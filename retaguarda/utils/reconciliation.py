# retaguarda/utils/reconciliation.py
"""
Conferência de caixa: a partir do fundo inicial, dos lançamentos do dia e do
dinheiro contado, monta o resumo por forma de pagamento e a diferença.
Funções puras, sem acesso ao banco.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable

from retaguarda.models.finance import TenderType, TransactionPurpose
from retaguarda.utils.classification import classify, to_decimal

ZERO = Decimal("0")
DEFAULT_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class CashBreakdown:
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

    @property
    def categorized_sales(self) -> Decimal:
        return self.cash_sales + self.pix_sales + self.credit_sales + self.debit_sales


def uncategorized_residual(system_total: Decimal, tender_totals: Iterable[Decimal]) -> Decimal:
    """Vendas sem forma de pagamento reconhecida. Nunca negativo: excesso é travado em zero."""
    return max(ZERO, system_total - sum(tender_totals, ZERO))


def expected_cash(opening_balance, cash_sales, supplies, expenses) -> Decimal:
    return to_decimal(opening_balance) + cash_sales + supplies - expenses


def reconcile(opening_balance, transactions, counted_cash,
              tolerance: Decimal = DEFAULT_TOLERANCE) -> CashBreakdown:
    """
    Monta o fechamento do turno.

    Esperado = fundo + vendas em dinheiro + reforços - sangrias.
    Diferença = contado - esperado; o caixa "bate" quando |diferença| < tolerância.
    """
    tenders: Dict[TenderType, Decimal] = {tender: ZERO for tender in TenderType}
    system_total = supplies = expenses = ZERO
    sales_count = 0

    for tx in transactions:
        purpose, tender = classify(tx)
        amount = to_decimal(tx.amount)
        if purpose == TransactionPurpose.SALE:
            system_total += amount
            sales_count += 1
            if tender is not None:
                tenders[tender] += amount
        elif purpose == TransactionPurpose.TILL_SUPPLY:
            supplies += amount
        elif purpose == TransactionPurpose.TILL_WITHDRAWAL:
            expenses += amount

    opening = to_decimal(opening_balance)
    counted = to_decimal(counted_cash)
    expected = expected_cash(opening, tenders[TenderType.CASH], supplies, expenses)
    difference = counted - expected

    return CashBreakdown(
        opening_balance=opening,
        cash_sales=tenders[TenderType.CASH],
        pix_sales=tenders[TenderType.PIX],
        credit_sales=tenders[TenderType.CREDIT],
        debit_sales=tenders[TenderType.DEBIT],
        uncategorized_sales=uncategorized_residual(system_total, tenders.values()),
        system_calculated_total=system_total,
        supplies=supplies,
        expenses=expenses,
        expected_cash=expected,
        counted_cash=counted,
        difference=difference,
        is_balanced=abs(difference) < tolerance,
        sales_count=sales_count,
        average_ticket=(system_total / sales_count) if sales_count else ZERO,
    )


def from_snapshot(snapshot, tolerance: Decimal = DEFAULT_TOLERANCE) -> CashBreakdown:
    """Remonta o resumo a partir dos valores gravados no fechamento, sem reler lançamentos."""
    system_total = to_decimal(snapshot.system_calculated_total)
    sales_count = snapshot.sales_count or 0
    difference = to_decimal(snapshot.difference_value)
    return CashBreakdown(
        opening_balance=to_decimal(snapshot.opening_balance),
        cash_sales=to_decimal(snapshot.cash_sales),
        pix_sales=to_decimal(snapshot.pix_sales),
        credit_sales=to_decimal(snapshot.credit_sales),
        debit_sales=to_decimal(snapshot.debit_sales),
        uncategorized_sales=to_decimal(snapshot.uncategorized_sales),
        system_calculated_total=system_total,
        supplies=to_decimal(snapshot.supplies),
        expenses=to_decimal(snapshot.expenses),
        expected_cash=to_decimal(snapshot.expected_cash),
        counted_cash=to_decimal(snapshot.counted_cash),
        difference=difference,
        is_balanced=abs(difference) < tolerance,
        sales_count=sales_count,
        average_ticket=(system_total / sales_count) if sales_count else ZERO,
    )
