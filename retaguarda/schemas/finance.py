# schemas/finance.py
from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal
from datetime import date

from retaguarda.models.finance import (
    TransactionType, TransactionCategory, TransactionStatus, TransactionPurpose, TenderType
)

# --- Lançamentos ---

class TransactionBase(BaseModel):
    type: TransactionType
    category: TransactionCategory = TransactionCategory.OTHER
    description: str = Field(min_length=1)
    amount: Decimal = Field(gt=0)
    due_date: date
    supplier: Optional[str] = None
    attachment_url: Optional[str] = None

class TransactionCreate(TransactionBase):
    status: TransactionStatus = TransactionStatus.PENDING
    purpose: Optional[TransactionPurpose] = None
    tender: Optional[TenderType] = None

class TransactionUpdate(BaseModel):
    category: Optional[TransactionCategory] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = None
    due_date: Optional[date] = None
    supplier: Optional[str] = None
    attachment_url: Optional[str] = None

class TransactionRead(TransactionBase):
    id: int
    status: TransactionStatus
    purpose: Optional[TransactionPurpose] = None
    tender: Optional[TenderType] = None
    terminal_id: Optional[int] = None
    recurring_bill_id: Optional[int] = None

    class Config:
        from_attributes = True

class LiquidateRequest(BaseModel):
    paid_on: Optional[date] = None

class CompetenceRequest(BaseModel):
    year: int = Field(ge=2000, le=2100)
    month: int = Field(ge=1, le=12)

# --- Formas de pagamento ---

class PaymentMethodCreate(BaseModel):
    name: str = Field(min_length=1)
    fee_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    settlement_days: int = Field(default=0, ge=0)

class PaymentMethodUpdate(BaseModel):
    name: Optional[str] = None
    fee_percentage: Optional[Decimal] = None
    settlement_days: Optional[int] = None

class PaymentMethodRead(PaymentMethodCreate):
    id: int

    class Config:
        from_attributes = True

# --- Contas fixas ---

class RecurringBillCreate(BaseModel):
    title: str = Field(min_length=1)
    amount: Decimal = Field(gt=0)
    day_of_month: int = Field(ge=1, le=31)
    category: TransactionCategory = TransactionCategory.UTILITY
    active: bool = True

class RecurringBillUpdate(BaseModel):
    title: Optional[str] = None
    amount: Optional[Decimal] = None
    day_of_month: Optional[int] = None
    category: Optional[TransactionCategory] = None
    active: Optional[bool] = None

class RecurringBillRead(RecurringBillCreate):
    id: int

    class Config:
        from_attributes = True
