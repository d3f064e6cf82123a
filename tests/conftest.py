import os

# Banco em memória antes de qualquer import do pacote (engine é criado no import)
os.environ.setdefault("RETAGUARDA_DATABASE_URL", "sqlite://")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from retaguarda.database import Base, get_db
from retaguarda.main import app
from retaguarda.models import (
    FinancialTransaction, Role, TransactionCategory, TransactionStatus, TransactionType, Terminal, User
)
from retaguarda.security import get_current_user
from retaguarda.store import TransactionStore

DAY = date(2026, 10, 19)


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def store(db):
    return TransactionStore(db)


@pytest.fixture
def terminal(db):
    terminal = Terminal(name="Caixa Teste", next_opening_balance=Decimal("100.00"))
    db.add(terminal)
    db.commit()
    db.refresh(terminal)
    return terminal


def _add_user(db, **fields):
    user = User(password_hash="x", **fields)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def operator(db, terminal):
    return _add_user(
        db, username="caixa", full_name="Ana Caixa", role=Role.OPERATOR,
        salary=Decimal("2000.00"), terminal_id=terminal.id,
    )


@pytest.fixture
def manager(db, terminal):
    return _add_user(
        db, username="gerente", full_name="Bruno Gerente", role=Role.SUPERVISOR,
        salary=Decimal("3000.00"), terminal_id=terminal.id,
    )


@pytest.fixture
def make_tx():
    """Lançamento em memória (não persistido) para as funções puras."""
    def _make(tx_type=TransactionType.INCOME, description="PDV [COUNTER]: Balcão - Canal: DINHEIRO",
              amount="10.00", due_date=DAY, status=TransactionStatus.PAID,
              category=TransactionCategory.OTHER, **extra):
        return FinancialTransaction(
            type=tx_type, description=description, amount=Decimal(amount),
            due_date=due_date, status=status, category=category, **extra,
        )
    return _make


@pytest.fixture
def client(db, operator):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_current_user] = lambda: operator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def login_as():
    """Troca o usuário autenticado nas requisições seguintes."""
    def _login(user):
        app.dependency_overrides[get_current_user] = lambda: user
    return _login
