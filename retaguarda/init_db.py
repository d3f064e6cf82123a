from decimal import Decimal

from retaguarda.config import get_settings
from retaguarda.database import SessionLocal, engine, Base
from retaguarda.models import (
    User, Role, Terminal, PaymentMethod, RecurringBill, TransactionCategory
)
from retaguarda.security import get_password_hash


def init_db():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    settings = get_settings()

    print("--- INICIANDO SEED ---")

    # 1. Terminal padrão
    terminal = db.query(Terminal).filter(Terminal.name == settings.default_terminal_name).first()
    if not terminal:
        terminal = Terminal(name=settings.default_terminal_name, next_opening_balance=Decimal("100.00"))
        db.add(terminal)
        db.commit()
        db.refresh(terminal)
        print("Terminal criado.")
    else:
        print("Terminal já existe.")

    # 2. Usuários (PIN = senha)
    users_data = [
        ("admin", "Administrador", "admin123", Role.ADMIN, Decimal("0")),
        ("gerente", "Gerente da Loja", "1234", Role.SUPERVISOR, Decimal("4500.00")),
        ("caixa", "Operador de Caixa", "0000", Role.OPERATOR, Decimal("2200.00")),
    ]
    for username, full_name, pin, role, salary in users_data:
        if db.query(User).filter(User.username == username).first():
            continue
        db.add(User(
            username=username,
            full_name=full_name,
            password_hash=get_password_hash(pin),
            role=role,
            salary=salary,
            terminal_id=terminal.id,
        ))
    db.commit()
    print("Usuários assegurados.")

    # 3. Adquirentes
    methods_data = [
        ("PIX", Decimal("0.00"), 0),
        ("Crédito", Decimal("3.19"), 30),
        ("Débito", Decimal("1.37"), 1),
    ]
    for name, fee, days in methods_data:
        if not db.query(PaymentMethod).filter(PaymentMethod.name == name).first():
            db.add(PaymentMethod(name=name, fee_percentage=fee, settlement_days=days))

    # 4. Contas fixas
    bills_data = [
        ("Aluguel", Decimal("2000.00"), 5, TransactionCategory.UTILITY),
        ("Internet", Decimal("149.90"), 10, TransactionCategory.UTILITY),
        ("Contabilidade", Decimal("650.00"), 15, TransactionCategory.SERVICE),
    ]
    for title, amount, day, category in bills_data:
        if not db.query(RecurringBill).filter(RecurringBill.title == title).first():
            db.add(RecurringBill(title=title, amount=amount, day_of_month=day, category=category))

    db.commit()
    print("--- SEED FINALIZADO ---")
    db.close()


if __name__ == "__main__":
    init_db()
