# retaguarda/models/finance.py
import enum
from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Numeric, Enum, ForeignKey, CheckConstraint
from sqlalchemy.sql import func
from retaguarda.database import Base


class TransactionType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class TransactionCategory(str, enum.Enum):
    FEES = "FEES"               # Impostos e taxas
    UTILITY = "UTILITY"         # Água, luz, gás
    INVENTORY = "INVENTORY"     # Mercadoria (CMV)
    LABOR = "LABOR"             # Folha
    SERVICE = "SERVICE"
    OTHER = "OTHER"
    MAINTENANCE = "MAINTENANCE"
    LEGAL = "LEGAL"
    LOAN = "LOAN"


class TransactionStatus(str, enum.Enum):
    PAID = "PAID"
    PENDING = "PENDING"


class TransactionPurpose(str, enum.Enum):
    SALE = "SALE"                       # Venda PDV
    TILL_SUPPLY = "TILL_SUPPLY"         # Reforço de caixa
    TILL_WITHDRAWAL = "TILL_WITHDRAWAL" # Sangria
    PAYROLL = "PAYROLL"
    RECURRING_BILL = "RECURRING_BILL"
    OTHER = "OTHER"


class TenderType(str, enum.Enum):
    CASH = "CASH"
    PIX = "PIX"
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class FinancialTransaction(Base):
    """
    Movimento de dinheiro. A descrição é apenas rótulo de exibição;
    `purpose` e `tender` classificam o papel do lançamento no caixa.
    Linhas antigas sem `purpose` são classificadas pelas tags da descrição.
    """
    __tablename__ = "financial_transactions"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),)

    id = Column(Integer, primary_key=True, index=True)

    type = Column(Enum(TransactionType), nullable=False)
    category = Column(Enum(TransactionCategory), default=TransactionCategory.OTHER, nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    due_date = Column(Date, index=True, nullable=False)
    status = Column(Enum(TransactionStatus), default=TransactionStatus.PENDING, nullable=False)

    purpose = Column(Enum(TransactionPurpose), nullable=True)
    tender = Column(Enum(TenderType), nullable=True)

    supplier = Column(String, nullable=True)
    attachment_url = Column(String, nullable=True)

    terminal_id = Column(Integer, ForeignKey("terminals.id"), nullable=True)
    recurring_bill_id = Column(Integer, ForeignKey("recurring_bills.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class PaymentMethod(Base):
    """Adquirente / forma de pagamento: taxa e prazo de repasse (D+N)."""
    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    fee_percentage = Column(Numeric(5, 2), default=0, nullable=False)
    settlement_days = Column(Integer, default=0, nullable=False)


class RecurringBill(Base):
    """Modelo de conta fixa mensal (aluguel, internet...)."""
    __tablename__ = "recurring_bills"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    day_of_month = Column(Integer, nullable=False)
    category = Column(Enum(TransactionCategory), default=TransactionCategory.UTILITY, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
