from retaguarda.crud.finance import reject_nulls
from retaguarda.exceptions import ValidationError
from retaguarda.store import TransactionStore
from retaguarda.utils.classification import to_decimal

METHODS = "payment_methods"


def _validate(data: dict):
    reject_nulls(data, ("name", "fee_percentage", "settlement_days"))
    if "name" in data and not (data["name"] or "").strip():
        raise ValidationError("Nome obrigatório.", field="name")
    if "fee_percentage" in data and not 0 <= to_decimal(data["fee_percentage"]) <= 100:
        raise ValidationError("Taxa deve estar entre 0 e 100%.", field="fee_percentage")
    if "settlement_days" in data and int(data["settlement_days"]) < 0:
        raise ValidationError("Prazo de repasse não pode ser negativo.", field="settlement_days")
    return data


def list_methods(store: TransactionStore):
    return store.select(METHODS, order="name")


def create_method(store: TransactionStore, data: dict):
    if "name" not in data:
        raise ValidationError("Nome obrigatório.", field="name")
    return store.insert(METHODS, [_validate(dict(data))])[0]


def update_method(store: TransactionStore, method_id: int, patch: dict):
    store.get_or_raise(METHODS, method_id)
    store.update(METHODS, _validate(dict(patch)), {"id": method_id})
    return store.get(METHODS, method_id)


def delete_method(store: TransactionStore, method_id: int):
    store.get_or_raise(METHODS, method_id)
    store.delete(METHODS, {"id": method_id})
