# retaguarda/utils/classification.py
"""Papel de cada lançamento no caixa: venda PDV, reforço, sangria ou outro."""
from decimal import Decimal
from typing import Optional, Tuple

from retaguarda.models.finance import TenderType, TransactionPurpose, TransactionType

SALE_TAGS = ("PDV",)
SUPPLY_TAGS = ("Reforço",)
WITHDRAWAL_TAGS = ("CAIXA:", "SANGUIA")

# A ordem define a prioridade quando a descrição cita mais de uma forma
TENDER_TAGS = (
    (TenderType.CASH, ("CASH", "Dinheiro")),
    (TenderType.PIX, ("PIX",)),
    (TenderType.CREDIT, ("CREDIT", "Crédito")),
    (TenderType.DEBIT, ("DEBIT", "Débito")),
)

SUPPLY_LABEL = "CAIXA: Reforço de Caixa"


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def has_tag(description: Optional[str], tags) -> bool:
    text = (description or "").lower()
    return any(tag.lower() in text for tag in tags)


def tender_from_description(description: Optional[str]) -> Optional[TenderType]:
    for tender, tags in TENDER_TAGS:
        if has_tag(description, tags):
            return tender
    return None


def purpose_from_description(tx_type, description: Optional[str]) -> TransactionPurpose:
    if tx_type == TransactionType.INCOME:
        if has_tag(description, SALE_TAGS):
            return TransactionPurpose.SALE
        if has_tag(description, SUPPLY_TAGS):
            return TransactionPurpose.TILL_SUPPLY
    elif tx_type == TransactionType.EXPENSE and has_tag(description, WITHDRAWAL_TAGS):
        return TransactionPurpose.TILL_WITHDRAWAL
    return TransactionPurpose.OTHER


def classify(tx) -> Tuple[TransactionPurpose, Optional[TenderType]]:
    """
    Retorna (purpose, tender). Colunas explícitas têm prioridade; sem elas,
    usa as tags da descrição. Só vendas têm forma de pagamento.
    """
    purpose = tx.purpose or purpose_from_description(tx.type, tx.description)
    if purpose != TransactionPurpose.SALE:
        return TransactionPurpose(purpose), None
    tender = tx.tender or tender_from_description(tx.description)
    return TransactionPurpose.SALE, TenderType(tender) if tender else None


def describe_movement(kind: str, text: Optional[str] = None) -> str:
    """Rótulo padrão de reforço/sangria lançado pelo terminal."""
    if kind == "SUPPLY":
        return SUPPLY_LABEL
    return f"CAIXA: SANGUIA: {text or 'Despesa Rápida'}"
