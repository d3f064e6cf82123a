from datetime import date
from decimal import Decimal

import pytest

from retaguarda.crud import audits, shifts
from retaguarda.exceptions import AuditTransitionError, NotFoundError, ValidationError
from retaguarda.models import AuditStatus, TransactionStatus, TransactionType

DAY = date(2026, 10, 19)


@pytest.fixture
def short_audit(store, terminal, operator):
    """Fechamento com R$ 15,00 a menos na gaveta."""
    shifts.open_shift(store, terminal, operator, day=DAY)
    shifts.begin_closing(store, terminal)
    shifts.enter_count(store, terminal, "85")
    shifts.confirm_count(store, terminal)
    return shifts.commit_close(store, terminal, operator, "50")


def test_approve(store, short_audit):
    audit = audits.approve_audit(store, short_audit.id, "Bruno Gerente", "https://x/deposito.pdf")
    assert audit.status == AuditStatus.APPROVED
    assert audit.reviewed_by == "Bruno Gerente"
    assert audit.reviewed_at is not None
    assert audit.deposit_proof_url == "https://x/deposito.pdf"


def test_contest_keeps_original_notes(store, short_audit):
    original = short_audit.notes
    audit = audits.contest_audit(store, short_audit.id, "Bruno Gerente", "  faltou dinheiro  ")

    assert audit.status == AuditStatus.CONTESTED
    assert audit.notes == f"{original}\n[CONTESTADO por Bruno Gerente] faltou dinheiro"
    assert audit.difference_value == Decimal("-15.00")


def test_contest_requires_justification(store, short_audit):
    with pytest.raises(ValidationError):
        audits.contest_audit(store, short_audit.id, "Bruno Gerente", "   ")
    assert audits.get_audit(store, short_audit.id).status == AuditStatus.PENDING


@pytest.mark.parametrize("first", ["approve", "contest"])
def test_reviewed_audit_is_final(store, short_audit, first):
    if first == "approve":
        audits.approve_audit(store, short_audit.id, "Bruno Gerente")
    else:
        audits.contest_audit(store, short_audit.id, "Bruno Gerente", "diferença")

    with pytest.raises(AuditTransitionError):
        audits.approve_audit(store, short_audit.id, "Outro")
    with pytest.raises(AuditTransitionError):
        audits.contest_audit(store, short_audit.id, "Outro", "de novo")


def test_unknown_audit(store):
    with pytest.raises(NotFoundError):
        audits.approve_audit(store, 404, "Bruno Gerente")


def test_list_by_status(store, short_audit):
    assert [a.id for a in audits.list_audits(store, AuditStatus.PENDING)] == [short_audit.id]
    assert audits.list_audits(store, AuditStatus.APPROVED) == []


def test_breakdown_rebuilt_from_snapshot(store, short_audit):
    # Venda lançada no mesmo dia depois do fechamento
    store.insert(shifts.TRANSACTIONS, [{
        "type": TransactionType.INCOME,
        "description": "PDV [COUNTER]: Balcão - Canal: DINHEIRO",
        "amount": Decimal("40.00"),
        "due_date": DAY,
        "status": TransactionStatus.PAID,
    }])

    breakdown = audits.audit_breakdown(short_audit)
    assert breakdown.expected_cash == short_audit.expected_cash == Decimal("100.00")
    assert breakdown.difference == short_audit.difference_value == Decimal("-15.00")
    assert breakdown.counted_cash == Decimal("85.00")
    assert breakdown.cash_sales == Decimal("0")
    assert breakdown.sales_count == 0
    assert breakdown.is_balanced is False
