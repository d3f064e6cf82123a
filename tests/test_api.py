"""Fluxo completo pela API: turno, fechamento, auditoria e relatórios."""
from datetime import timedelta
from decimal import Decimal

from retaguarda.crud import audits
from retaguarda.models import CashAudit, Terminal
from retaguarda.security import get_password_hash
from retaguarda.utils.dates import today

HTTP_200_OK = 200


def _sale(client, amount, channel="DINHEIRO"):
    response = client.post("/api/finance/transactions", json={
        "type": "INCOME",
        "description": f"PDV [COUNTER]: Balcão | Op: Ana | Moto: N/A - Canal: {channel}",
        "amount": amount,
        "due_date": today().isoformat(),
        "status": "PAID",
    })
    assert response.status_code == HTTP_200_OK, response.text
    return response.json()


def _close_day(client, counted, reserve):
    assert client.post("/api/cash/open", json={}).status_code == HTTP_200_OK
    _sale(client, "50.00")
    _sale(client, "30.00", "PIX")
    movement = client.post("/api/cash/movements", json={"kind": "WITHDRAWAL", "amount": "20", "description": "Gelo"})
    assert movement.status_code == HTTP_200_OK

    client.post("/api/cash/closing")
    client.post("/api/cash/count", json={"counted_cash": counted})
    client.post("/api/cash/count/confirm")
    return client.post("/api/cash/close", json={"closing_reserve": reserve})


def test_health(client):
    response = client.get("/health")
    assert response.status_code == HTTP_200_OK
    assert response.json() == {"status": "ok"}


def test_status_before_opening(client):
    body = client.get("/api/cash/status").json()
    assert body["step"] == "OPEN"
    assert body["closed_today"] is False
    assert Decimal(body["suggested_opening_balance"]) == Decimal("100")
    assert body["poll_interval_seconds"] == 10


def test_full_shift(client):
    assert client.post("/api/cash/open", json={}).json()["step"] == "ACTIVE"
    _sale(client, "50.00")
    _sale(client, "30.00", "PIX")
    client.post("/api/cash/movements", json={"kind": "WITHDRAWAL", "amount": "20", "description": "Sangria"})

    feed = client.get("/api/cash/transactions").json()
    assert len(feed) == 3
    assert feed[0]["description"] == "CAIXA: SANGUIA: Sangria"

    assert client.post("/api/cash/closing").json()["step"] == "CLOSING"
    assert client.post("/api/cash/count", json={"counted_cash": "130"}).status_code == HTTP_200_OK
    assert client.post("/api/cash/count/confirm").json()["count_confirmed"] is True

    report = client.get("/api/cash/report").json()
    assert Decimal(report["breakdown"]["expected_cash"]) == Decimal("130")
    assert report["breakdown"]["is_balanced"] is True

    audit = client.post("/api/cash/close", json={"closing_reserve": "80"}).json()
    assert audit["status"] == "PENDING"
    assert Decimal(audit["difference_value"]) == Decimal("0")

    status = client.get("/api/cash/status").json()
    assert status["step"] == "OPEN"
    assert status["closed_today"] is True
    assert Decimal(status["suggested_opening_balance"]) == Decimal("80")

    history = client.get("/api/cash/history").json()
    assert [a["id"] for a in history] == [audit["id"]]


def test_second_shift_same_day_is_rejected(client):
    assert _close_day(client, "130", "100").status_code == HTTP_200_OK
    response = client.post("/api/cash/open", json={})
    assert response.status_code == 409
    assert response.json()["code"] == "SHIFT_ALREADY_CLOSED"
    assert response.json()["detail"] == "O caixa de hoje já foi encerrado."


def test_invalid_movement_amount(client):
    client.post("/api/cash/open", json={})
    response = client.post("/api/cash/movements", json={"kind": "SUPPLY", "amount": "0"})
    assert response.status_code == 422


def test_movement_without_shift(client):
    response = client.post("/api/cash/movements", json={"kind": "SUPPLY", "amount": "10"})
    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_SHIFT_TRANSITION"


def test_report_requires_confirmed_count(client):
    client.post("/api/cash/open", json={})
    client.post("/api/cash/closing")
    response = client.get("/api/cash/report")
    assert response.status_code == 409


def test_operator_cannot_review(client):
    audit = _close_day(client, "115", "0").json()
    response = client.post(f"/api/audits/{audit['id']}/approve", json={})
    assert response.status_code == 403


def test_manager_contests_then_review_is_final(client, manager, login_as):
    audit = _close_day(client, "115", "0").json()
    assert Decimal(audit["difference_value"]) == Decimal("-15")
    login_as(manager)

    blank = client.post(f"/api/audits/{audit['id']}/contest", json={"justification": "  "})
    assert blank.status_code == 422
    assert blank.json()["code"] == "VALIDATION_ERROR"

    contested = client.post(f"/api/audits/{audit['id']}/contest", json={"justification": "faltou troco"}).json()
    assert contested["status"] == "CONTESTED"
    assert contested["reviewed_by"] == "Bruno Gerente"
    assert contested["notes"].endswith("[CONTESTADO por Bruno Gerente] faltou troco")

    again = client.post(f"/api/audits/{audit['id']}/approve", json={})
    assert again.status_code == 409
    assert again.json()["code"] == "AUDIT_TRANSITION"

    pending = client.get("/api/audits/", params={"status": "PENDING"}).json()
    assert pending == []


def test_audit_pdf(client):
    audit = _close_day(client, "130", "50").json()
    response = client.get(f"/api/audits/{audit['id']}/pdf")
    assert response.status_code == HTTP_200_OK
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_unknown_audit(client):
    response = client.get("/api/audits/999")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_transaction_lifecycle(client):
    created = client.post("/api/finance/transactions", json={
        "type": "EXPENSE", "description": "Fornecedor", "amount": "300",
        "due_date": (today() + timedelta(days=3)).isoformat(), "category": "INVENTORY",
    }).json()
    assert created["status"] == "PENDING"

    paid = client.post(f"/api/finance/transactions/{created['id']}/liquidate").json()
    assert paid["status"] == "PAID"
    assert paid["due_date"] == today().isoformat()

    locked = client.put(f"/api/finance/transactions/{created['id']}", json={"amount": "1"})
    assert locked.status_code == 409
    assert locked.json()["code"] == "IMMUTABLE_TRANSACTION"

    summary = client.get("/api/finance/summary").json()
    assert Decimal(summary["paid_expenses"]) == Decimal("300")
    assert Decimal(summary["balance"]) == Decimal("-300")


def test_payroll_is_manager_only(client, manager, login_as):
    body = {"year": 2026, "month": 10}
    assert client.post("/api/finance/payroll", json=body).status_code == 403

    login_as(manager)
    response = client.post("/api/finance/payroll", json=body)
    assert response.status_code == HTTP_200_OK
    assert Decimal(response.json()["amount"]) == Decimal("5000")

    duplicate = client.post("/api/finance/payroll", json=body)
    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "DUPLICATE_ENTRY"


def test_recurring_bills_generation(client):
    client.post("/api/recurring-bills/", json={"title": "Aluguel", "amount": "2000", "day_of_month": 5})
    first = client.post("/api/recurring-bills/generate", json={"year": 2026, "month": 10}).json()
    second = client.post("/api/recurring-bills/generate", json={"year": 2026, "month": 10}).json()

    assert [tx["due_date"] for tx in first] == ["2026-10-05"]
    assert second == []


def test_reports(client):
    _sale(client, "120.00", "CRÉDITO")
    client.post("/api/payment-methods/", json={"name": "Crédito", "fee_percentage": "3.19", "settlement_days": 30})
    client.post("/api/finance/transactions", json={
        "type": "EXPENSE", "description": "Fornecedor", "amount": "500",
        "due_date": (today() + timedelta(days=5)).isoformat(),
    })

    dre = client.get("/api/reports/dre").json()
    assert Decimal(dre["gross_revenue"]) == Decimal("120")

    projection = client.get("/api/reports/projection").json()
    assert len(projection["days"]) == 30
    assert projection["status"] == "SHORTFALL_RISK"
    assert Decimal(projection["min_balance"]) == Decimal("-380")

    (settlement,) = client.get("/api/reports/settlements").json()
    assert Decimal(settlement["fee"]) == Decimal("3.83")
    assert settlement["settlement_date"] == (today() + timedelta(days=30)).isoformat()


def test_login(client, db, operator):
    operator.password_hash = get_password_hash("0000")
    db.commit()

    ok = client.post("/api/auth/login", data={"username": "caixa", "password": "0000"})
    assert ok.status_code == HTTP_200_OK
    assert ok.json()["token_type"] == "bearer"

    wrong = client.post("/api/auth/login", data={"username": "caixa", "password": "9999"})
    assert wrong.status_code == 401


def test_partial_update_with_null_is_422(client):
    bill = client.post("/api/recurring-bills/", json={"title": "Aluguel", "amount": "2000", "day_of_month": 5}).json()
    response = client.put(f"/api/recurring-bills/{bill['id']}", json={"day_of_month": None})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"

    method = client.post("/api/payment-methods/", json={"name": "Débito", "fee_percentage": "1.37"}).json()
    response = client.put(f"/api/payment-methods/{method['id']}", json={"settlement_days": None})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"

    tx = client.post("/api/finance/transactions", json={
        "type": "EXPENSE", "description": "Fornecedor", "amount": "300", "due_date": today().isoformat(),
    }).json()
    response = client.put(f"/api/finance/transactions/{tx['id']}", json={"category": None})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_feed_is_scoped_to_terminal(client, db, operator):
    other = Terminal(name="Caixa 02", next_opening_balance=Decimal("0"))
    db.add(other)
    db.commit()

    client.post("/api/cash/open", json={})
    _sale(client, "50.00")
    client.post("/api/cash/open", json={"terminal_id": other.id})
    client.post("/api/cash/movements", params={"terminal_id": other.id},
                json={"kind": "WITHDRAWAL", "amount": "10", "description": "Gelo"})

    mine = client.get("/api/cash/transactions").json()
    assert [tx["description"] for tx in mine] == [
        "PDV [COUNTER]: Balcão | Op: Ana | Moto: N/A - Canal: DINHEIRO"
    ]
    theirs = client.get("/api/cash/transactions", params={"terminal_id": other.id}).json()
    assert len(theirs) == 2


def test_audit_pdf_ignores_later_sales(client, db):
    audit = _close_day(client, "130", "50").json()
    assert audit["sales_count"] == 2
    assert Decimal(audit["cash_sales"]) == Decimal("50")

    _sale(client, "999.00")
    response = client.get(f"/api/audits/{audit['id']}/pdf")
    assert response.status_code == HTTP_200_OK

    stored = audits.audit_breakdown(db.get(CashAudit, audit["id"]))
    assert stored.cash_sales == Decimal("50.00")
    assert stored.system_calculated_total == Decimal("80.00")
