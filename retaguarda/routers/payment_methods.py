from typing import List
from fastapi import APIRouter, Depends

from retaguarda.crud import payment_methods
from retaguarda.schemas.finance import PaymentMethodCreate, PaymentMethodRead, PaymentMethodUpdate
from retaguarda.security import get_current_user
from retaguarda.store import TransactionStore, get_store

router = APIRouter()


@router.get("/", response_model=List[PaymentMethodRead])
def get_methods(store: TransactionStore = Depends(get_store), current_user=Depends(get_current_user)):
    return payment_methods.list_methods(store)


@router.post("/", response_model=PaymentMethodRead)
def create_method(method: PaymentMethodCreate, store: TransactionStore = Depends(get_store),
                  current_user=Depends(get_current_user)):
    return payment_methods.create_method(store, method.model_dump())


@router.put("/{method_id}", response_model=PaymentMethodRead)
def update_method(method_id: int, method: PaymentMethodUpdate, store: TransactionStore = Depends(get_store),
                  current_user=Depends(get_current_user)):
    return payment_methods.update_method(store, method_id, method.model_dump(exclude_unset=True))


@router.delete("/{method_id}")
def delete_method(method_id: int, store: TransactionStore = Depends(get_store),
                  current_user=Depends(get_current_user)):
    payment_methods.delete_method(store, method_id)
    return {"ok": True}
