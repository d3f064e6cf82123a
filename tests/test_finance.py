from datetime import date
from decimal import Decimal

import pytest

from retaguarda.crud import bills, finance, payment_methods
from retaguarda.exceptions import (
    DuplicateEntryError, ImmutableTransactionError, NotFoundError, ValidationError
)
from retaguarda.models import (
    TransactionCategory, TransactionPurpose, TransactionStatus, TransactionType
)


def _payable(store, **overrides):
    data = {
        "type": TransactionType.EXPENSE,
        "description": "Fornecedor de bebidas",
        "amount": "350.00",
        "due_date": date(2026, 10, 25),
        "category": TransactionCategory.INVENTORY,
    }
    data.update(overrides)
    return finance.create_transaction(store, data)


# --- Lançamentos ---

def test_create_defaults_to_pending(store):
    tx = _payable(store)
    assert tx.status == TransactionStatus.PENDING
    assert tx.amount == Decimal("350.00")


@pytest.mark.parametrize("amount", ["0", "-10"])
def test_create_rejects_non_positive_amount(store, amount):
    with pytest.raises(ValidationError):
        _payable(store, amount=amount)


def test_create_requires_description(store):
    with pytest.raises(ValidationError):
        _payable(store, description="  ")


def test_liquidate_sets_payment_date(store):
    tx = _payable(store)
    paid = finance.liquidate_transaction(store, tx.id, on=date(2026, 10, 20))
    assert paid.status == TransactionStatus.PAID
    assert paid.due_date == date(2026, 10, 20)


def test_paid_transaction_is_immutable(store):
    tx = _payable(store)
    finance.liquidate_transaction(store, tx.id, on=date(2026, 10, 20))

    with pytest.raises(ImmutableTransactionError):
        finance.liquidate_transaction(store, tx.id)
    with pytest.raises(ImmutableTransactionError):
        finance.update_transaction(store, tx.id, {"amount": "1.00"})
    with pytest.raises(ImmutableTransactionError):
        finance.delete_transaction(store, tx.id)


def test_update_pending(store):
    tx = _payable(store)
    updated = finance.update_transaction(store, tx.id, {"amount": "400", "supplier": "Distribuidora"})
    assert updated.amount == Decimal("400.00")
    assert updated.supplier == "Distribuidora"

    with pytest.raises(ValidationError):
        finance.update_transaction(store, tx.id, {"status": TransactionStatus.PAID})
    with pytest.raises(ValidationError):
        finance.update_transaction(store, tx.id, {"amount": "0"})


def test_delete_pending(store):
    tx = _payable(store)
    finance.delete_transaction(store, tx.id)
    with pytest.raises(NotFoundError):
        finance.delete_transaction(store, tx.id)


def test_list_filters(store):
    _payable(store, due_date=date(2026, 10, 1))
    _payable(store, due_date=date(2026, 10, 31), description="Luz")
    _payable(store, type=TransactionType.INCOME, description="iFood", due_date=date(2026, 10, 15))

    rows = finance.list_transactions(store, date(2026, 10, 10), date(2026, 10, 31))
    assert [tx.description for tx in rows] == ["Luz", "iFood"]

    expenses = finance.list_transactions(store, tx_type=TransactionType.EXPENSE)
    assert len(expenses) == 2


# --- Folha ---

def test_payroll_sums_active_salaries(store, operator, manager):
    tx = finance.provision_payroll(store, 2026, 10)

    assert tx.amount == Decimal("5000.00")
    assert tx.due_date == date(2026, 10, 1)
    assert tx.category == TransactionCategory.LABOR
    assert tx.purpose == TransactionPurpose.PAYROLL
    assert tx.status == TransactionStatus.PENDING
    assert tx.description == "FOLHA DE PAGAMENTO: Competência OUTUBRO DE 2026"


def test_payroll_once_per_month(store, operator):
    finance.provision_payroll(store, 2026, 10)
    with pytest.raises(DuplicateEntryError):
        finance.provision_payroll(store, 2026, 10)
    finance.provision_payroll(store, 2026, 11)


def test_payroll_skips_inactive_staff(store, operator, manager):
    manager.is_active = False
    store.commit()
    assert finance.provision_payroll(store, 2026, 10).amount == Decimal("2000.00")


def test_payroll_without_salaries(store):
    with pytest.raises(ValidationError):
        finance.provision_payroll(store, 2026, 10)


# --- Contas fixas ---

def test_generate_month_bills(store):
    rent = bills.create_bill(store, {"title": "Aluguel", "amount": "2000", "day_of_month": 5})
    created = bills.generate_month_bills(store, 2026, 10)

    assert len(created) == 1
    tx = created[0]
    assert tx.description == "Aluguel"
    assert tx.type == TransactionType.EXPENSE
    assert tx.status == TransactionStatus.PENDING
    assert tx.amount == Decimal("2000.00")
    assert tx.due_date == date(2026, 10, 5)
    assert tx.recurring_bill_id == rent.id


def test_generate_is_idempotent(store):
    bills.create_bill(store, {"title": "Aluguel", "amount": "2000", "day_of_month": 5})
    bills.generate_month_bills(store, 2026, 10)
    assert bills.generate_month_bills(store, 2026, 10) == []
    assert len(store.select(finance.TRANSACTIONS)) == 1

    # Mês seguinte gera de novo
    assert len(bills.generate_month_bills(store, 2026, 11)) == 1


def test_generate_clamps_day_and_skips_inactive(store):
    bills.create_bill(store, {"title": "Condomínio", "amount": "300", "day_of_month": 31})
    bills.create_bill(store, {"title": "Antigo", "amount": "50", "day_of_month": 10, "active": False})

    (tx,) = bills.generate_month_bills(store, 2026, 2)
    assert tx.description == "Condomínio"
    assert tx.due_date == date(2026, 2, 28)


def test_bill_validation(store):
    with pytest.raises(ValidationError):
        bills.create_bill(store, {"title": "Luz", "amount": "100", "day_of_month": 32})
    with pytest.raises(ValidationError):
        bills.create_bill(store, {"title": "Luz", "amount": "0", "day_of_month": 10})
    with pytest.raises(ValidationError):
        bills.create_bill(store, {"amount": "10", "day_of_month": 10})


def test_update_and_delete_bill(store):
    bill = bills.create_bill(store, {"title": "Internet", "amount": "99.90", "day_of_month": 10})
    assert bills.update_bill(store, bill.id, {"amount": "149.90"}).amount == Decimal("149.90")
    bills.delete_bill(store, bill.id)
    assert bills.list_bills(store) == []


# --- Adquirentes ---

def test_payment_methods(store):
    payment_methods.create_method(store, {"name": "Débito", "fee_percentage": "1.37", "settlement_days": 1})
    credit = payment_methods.create_method(store, {"name": "Crédito", "fee_percentage": "3.19", "settlement_days": 30})

    assert [m.name for m in payment_methods.list_methods(store)] == ["Crédito", "Débito"]
    assert payment_methods.update_method(store, credit.id, {"settlement_days": 2}).settlement_days == 2


@pytest.mark.parametrize("patch", [{"fee_percentage": "101"}, {"fee_percentage": "-1"}, {"settlement_days": -1}])
def test_payment_method_validation(store, patch):
    data = {"name": "PIX", **patch}
    with pytest.raises(ValidationError):
        payment_methods.create_method(store, data)


# --- Atualização parcial com nulos ---

@pytest.mark.parametrize("field", ["type", "category", "description", "amount", "due_date"])
def test_update_rejects_null_required_field(store, field):
    tx = _payable(store)
    with pytest.raises(ValidationError) as excinfo:
        finance.update_transaction(store, tx.id, {field: None})
    assert excinfo.value.field == field
    assert store.get(finance.TRANSACTIONS, tx.id).amount == Decimal("350.00")


def test_update_keeps_optional_nulls(store):
    tx = _payable(store, supplier="Distribuidora")
    assert finance.update_transaction(store, tx.id, {"supplier": None}).supplier is None


@pytest.mark.parametrize("field", ["title", "amount", "day_of_month", "category", "active"])
def test_bill_update_rejects_null(store, field):
    bill = bills.create_bill(store, {"title": "Internet", "amount": "99.90", "day_of_month": 10})
    with pytest.raises(ValidationError):
        bills.update_bill(store, bill.id, {field: None})


@pytest.mark.parametrize("field", ["name", "fee_percentage", "settlement_days"])
def test_payment_method_update_rejects_null(store, field):
    method = payment_methods.create_method(store, {"name": "PIX", "fee_percentage": "0", "settlement_days": 0})
    with pytest.raises(ValidationError):
        payment_methods.update_method(store, method.id, {field: None})
