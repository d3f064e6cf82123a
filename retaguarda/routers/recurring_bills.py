from typing import List
from fastapi import APIRouter, Depends

from retaguarda.crud import bills
from retaguarda.schemas.finance import (
    RecurringBillCreate, RecurringBillRead, RecurringBillUpdate, CompetenceRequest, TransactionRead
)
from retaguarda.security import get_current_user
from retaguarda.store import TransactionStore, get_store

router = APIRouter()


@router.get("/", response_model=List[RecurringBillRead])
def get_bills(store: TransactionStore = Depends(get_store), current_user=Depends(get_current_user)):
    return bills.list_bills(store)


@router.post("/", response_model=RecurringBillRead)
def create_bill(bill: RecurringBillCreate, store: TransactionStore = Depends(get_store),
                current_user=Depends(get_current_user)):
    return bills.create_bill(store, bill.model_dump())


@router.put("/{bill_id}", response_model=RecurringBillRead)
def update_bill(bill_id: int, bill: RecurringBillUpdate, store: TransactionStore = Depends(get_store),
                current_user=Depends(get_current_user)):
    return bills.update_bill(store, bill_id, bill.model_dump(exclude_unset=True))


@router.delete("/{bill_id}")
def delete_bill(bill_id: int, store: TransactionStore = Depends(get_store),
                current_user=Depends(get_current_user)):
    bills.delete_bill(store, bill_id)
    return {"ok": True}


@router.post("/generate", response_model=List[TransactionRead])
def generate_month_bills(competence: CompetenceRequest, store: TransactionStore = Depends(get_store),
                         current_user=Depends(get_current_user)):
    """Lança as contas fixas do mês (não duplica as já geradas)."""
    return bills.generate_month_bills(store, competence.year, competence.month)
