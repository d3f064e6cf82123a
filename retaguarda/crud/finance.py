# retaguarda/crud/finance.py
from datetime import date
from decimal import Decimal
from typing import Optional

from retaguarda.exceptions import DuplicateEntryError, ImmutableTransactionError, ValidationError
from retaguarda.models import (
    TransactionCategory, TransactionPurpose, TransactionStatus, TransactionType
)
from retaguarda.store import TransactionStore
from retaguarda.utils.classification import to_decimal
from retaguarda.utils.dates import competence_label, month_bounds, today
from retaguarda.utils.logger import get_logger

logger = get_logger("retaguarda.finance")

TRANSACTIONS = "financial_transactions"


def validate_amount(amount, field: str = "amount") -> Decimal:
    value = to_decimal(amount)
    if value <= 0:
        raise ValidationError("Valor inválido: informe um valor maior que zero.", field=field)
    return value


REQUIRED_FIELDS = ("type", "category", "description", "amount", "due_date")


def reject_nulls(data: dict, fields):
    """Campos obrigatórios não podem vir nulos numa atualização parcial."""
    for field in fields:
        if field in data and data[field] is None:
            raise ValidationError(f"Campo {field} não pode ser nulo.", field=field)
    return data


def create_transaction(store: TransactionStore, data: dict):
    """Novo lançamento manual (conta a pagar, receita avulsa...)."""
    if not (data.get("description") or "").strip():
        raise ValidationError("Descrição obrigatória.", field="description")
    record = dict(data)
    record["amount"] = validate_amount(record.get("amount"))
    record.setdefault("due_date", today())
    record.setdefault("status", TransactionStatus.PENDING)
    record.setdefault("category", TransactionCategory.OTHER)
    tx = store.insert(TRANSACTIONS, [record])[0]
    logger.info("Lançamento %s criado: %s %s (%s)", tx.id, tx.type.value, tx.amount, tx.status.value)
    return tx


def list_transactions(store: TransactionStore, start: Optional[date] = None, end: Optional[date] = None,
                      tx_type: Optional[TransactionType] = None, status: Optional[TransactionStatus] = None):
    filters = {}
    if start:
        filters["due_date__gte"] = start
    if end:
        filters["due_date__lte"] = end
    if tx_type:
        filters["type"] = tx_type
    if status:
        filters["status"] = status
    return store.select(TRANSACTIONS, filters, order=["-due_date", "-id"])


def _get_pending(store: TransactionStore, tx_id: int):
    tx = store.get_or_raise(TRANSACTIONS, tx_id)
    if tx.status == TransactionStatus.PAID:
        raise ImmutableTransactionError(tx_id)
    return tx


def update_transaction(store: TransactionStore, tx_id: int, patch: dict):
    """Só pendências podem ser editadas; liquidação tem operação própria."""
    if "status" in patch:
        raise ValidationError("Use a liquidação para alterar o status.", field="status")
    _get_pending(store, tx_id)
    reject_nulls(patch, REQUIRED_FIELDS)
    if "amount" in patch:
        patch["amount"] = validate_amount(patch["amount"])
    if "description" in patch and not (patch["description"] or "").strip():
        raise ValidationError("Descrição obrigatória.", field="description")
    store.update(TRANSACTIONS, patch, {"id": tx_id})
    return store.get(TRANSACTIONS, tx_id)


def delete_transaction(store: TransactionStore, tx_id: int):
    _get_pending(store, tx_id)
    store.delete(TRANSACTIONS, {"id": tx_id})
    logger.info("Lançamento %s excluído", tx_id)


def liquidate_transaction(store: TransactionStore, tx_id: int, on: Optional[date] = None):
    """PENDING -> PAID. A data passa a ser a da liquidação (saldo real do caixa)."""
    _get_pending(store, tx_id)
    paid_on = on or today()
    store.update(TRANSACTIONS, {"status": TransactionStatus.PAID, "due_date": paid_on}, {"id": tx_id})
    logger.info("Lançamento %s liquidado em %s", tx_id, paid_on)
    return store.get(TRANSACTIONS, tx_id)


def provision_payroll(store: TransactionStore, year: int, month: int):
    """
    Soma os salários da equipe ativa e provisiona a folha no dia 01 da
    competência. Uma folha por mês.
    """
    first_day, last_day = month_bounds(year, month)
    existing = store.first(TRANSACTIONS, {
        "purpose": TransactionPurpose.PAYROLL,
        "due_date__gte": first_day,
        "due_date__lte": last_day,
    })
    if existing:
        raise DuplicateEntryError(f"Folha de {month:02d}/{year} já foi lançada.")

    employees = store.select("users", {"is_active": True})
    total = sum((to_decimal(e.salary) for e in employees), Decimal("0"))
    if total <= 0:
        raise ValidationError("Nenhum salário cadastrado na equipe.", field="salary")

    tx = store.insert(TRANSACTIONS, [{
        "type": TransactionType.EXPENSE,
        "category": TransactionCategory.LABOR,
        "purpose": TransactionPurpose.PAYROLL,
        "description": f"FOLHA DE PAGAMENTO: Competência {competence_label(year, month)}",
        "amount": total,
        "due_date": first_day,
        "status": TransactionStatus.PENDING,
    }])[0]
    logger.info("Folha %02d/%d provisionada: R$ %s", month, year, total)
    return tx
