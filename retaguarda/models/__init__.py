# retaguarda/models/__init__.py

# 1. Base declarativa
from retaguarda.database import Base

# 2. Terminais e usuários
from .organization import Terminal
from .users import User, Role, MANAGER_ROLES

# 3. Financeiro
from .finance import (
    FinancialTransaction,
    TransactionType,
    TransactionCategory,
    TransactionStatus,
    TransactionPurpose,
    TenderType,
    PaymentMethod,
    RecurringBill,
)

# 4. Caixa e auditoria
from .cash import ShiftSession, ShiftStep, CashAudit, AuditStatus
