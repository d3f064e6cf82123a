# retaguarda/crud/bills.py
from retaguarda.crud.finance import TRANSACTIONS, reject_nulls, validate_amount
from retaguarda.exceptions import ValidationError
from retaguarda.models import TransactionPurpose, TransactionStatus, TransactionType
from retaguarda.store import TransactionStore
from retaguarda.utils.dates import clamp_day, month_bounds
from retaguarda.utils.logger import get_logger

logger = get_logger("retaguarda.bills")

BILLS = "recurring_bills"


def _validate(data: dict):
    reject_nulls(data, ("title", "amount", "day_of_month", "category", "active"))
    if "title" in data and not (data["title"] or "").strip():
        raise ValidationError("Título obrigatório.", field="title")
    if "amount" in data:
        data["amount"] = validate_amount(data["amount"])
    if "day_of_month" in data and not 1 <= int(data["day_of_month"]) <= 31:
        raise ValidationError("Dia de vencimento deve estar entre 1 e 31.", field="day_of_month")
    return data


def list_bills(store: TransactionStore, only_active: bool = False):
    filters = {"active": True} if only_active else None
    return store.select(BILLS, filters, order=["day_of_month", "title"])


def create_bill(store: TransactionStore, data: dict):
    if "title" not in data:
        raise ValidationError("Título obrigatório.", field="title")
    return store.insert(BILLS, [_validate(dict(data))])[0]


def update_bill(store: TransactionStore, bill_id: int, patch: dict):
    store.get_or_raise(BILLS, bill_id)
    store.update(BILLS, _validate(dict(patch)), {"id": bill_id})
    return store.get(BILLS, bill_id)


def delete_bill(store: TransactionStore, bill_id: int):
    store.get_or_raise(BILLS, bill_id)
    store.delete(BILLS, {"id": bill_id})


def generate_month_bills(store: TransactionStore, year: int, month: int):
    """
    Gera as contas fixas do mês: uma despesa pendente por modelo ativo,
    vencendo no dia configurado (limitado ao último dia do mês). Modelos já
    gerados no mês são ignorados, então rodar de novo não duplica.
    """
    first_day, last_day = month_bounds(year, month)
    already = {
        tx.recurring_bill_id
        for tx in store.select(TRANSACTIONS, {
            "recurring_bill_id__ne": None,
            "due_date__gte": first_day,
            "due_date__lte": last_day,
        })
    }

    records = [
        {
            "type": TransactionType.EXPENSE,
            "category": bill.category,
            "purpose": TransactionPurpose.RECURRING_BILL,
            "description": bill.title,
            "amount": bill.amount,
            "due_date": clamp_day(year, month, bill.day_of_month),
            "status": TransactionStatus.PENDING,
            "recurring_bill_id": bill.id,
        }
        for bill in list_bills(store, only_active=True)
        if bill.id not in already
    ]
    if not records:
        return []
    created = store.insert(TRANSACTIONS, records)
    logger.info("%d contas fixas geradas para %02d/%d", len(created), month, year)
    return created
