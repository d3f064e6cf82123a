# retaguarda/store.py
"""
Colaborador de persistência genérico: insert/select/update/delete sobre
coleções nomeadas. Toda a lógica de caixa e financeiro lê e grava por aqui.

Filtros são dicionários campo -> valor. O campo aceita um sufixo de operador:
`__ne`, `__gt`, `__gte`, `__lt`, `__lte`, `__in`, `__ilike`.
Ordenação por nome de campo; prefixo `-` para ordem decrescente.
"""
from typing import Any, Dict, Iterable, List, Optional, Union

from fastapi import Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from retaguarda.database import get_db
from retaguarda.exceptions import IntegrityConflictError, NotFoundError, StoreError
from retaguarda.models import (
    CashAudit, FinancialTransaction, PaymentMethod, RecurringBill, ShiftSession, Terminal, User
)
from retaguarda.utils.logger import get_logger

logger = get_logger("retaguarda.store")

COLLECTIONS = {
    "financial_transactions": FinancialTransaction,
    "cash_audits": CashAudit,
    "payment_methods": PaymentMethod,
    "recurring_bills": RecurringBill,
    "shift_sessions": ShiftSession,
    "terminals": Terminal,
    "users": User,
}

_OPERATORS = {
    "eq": lambda col, v: col.is_(None) if v is None else col == v,
    "ne": lambda col, v: col.isnot(None) if v is None else col != v,
    "gt": lambda col, v: col > v,
    "gte": lambda col, v: col >= v,
    "lt": lambda col, v: col < v,
    "lte": lambda col, v: col <= v,
    "in": lambda col, v: col.in_(list(v)),
    "ilike": lambda col, v: col.ilike(v),
}

Filter = Optional[Dict[str, Any]]
Order = Optional[Union[str, Iterable[str]]]


class TransactionStore:
    """Acesso às coleções do banco através de uma sessão SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db

    # --- Helpers internos ---

    def _model(self, collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Coleção desconhecida: {collection}")

    def _conditions(self, model, filters: Filter):
        conditions = []
        for key, value in (filters or {}).items():
            field, _, op = key.partition("__")
            column = getattr(model, field, None)
            if column is None or (op or "eq") not in _OPERATORS:
                raise ValueError(f"Filtro inválido para {model.__tablename__}: {key}")
            conditions.append(_OPERATORS[op or "eq"](column, value))
        return conditions

    def _ordering(self, model, order: Order):
        if not order:
            return []
        fields = [order] if isinstance(order, str) else list(order)
        clauses = []
        for field in fields:
            column = getattr(model, field.lstrip("-"))
            clauses.append(column.desc() if field.startswith("-") else column.asc())
        return clauses

    def _fail(self, operation: str, collection: str, exc: SQLAlchemyError):
        self.db.rollback()
        if isinstance(exc, IntegrityError):
            logger.warning("Violação de integridade em %s (%s): %s", collection, operation, exc.orig)
            raise IntegrityConflictError(collection) from exc
        logger.error("Falha no banco em %s (%s): %s", collection, operation, exc)
        raise StoreError(operation, collection, exc) from exc

    # --- Operações públicas ---

    def insert(self, collection: str, records: List[Dict[str, Any]], commit: bool = True) -> list:
        model = self._model(collection)
        objects = [model(**record) for record in records]
        try:
            self.db.add_all(objects)
            self.db.flush()  # Para obter os IDs mesmo sem commit
            if commit:
                self.db.commit()
                for obj in objects:
                    self.db.refresh(obj)
        except SQLAlchemyError as exc:
            self._fail("insert", collection, exc)
        return objects

    def select(self, collection: str, filters: Filter = None, order: Order = None,
               limit: Optional[int] = None) -> list:
        model = self._model(collection)
        try:
            query = self.db.query(model).filter(*self._conditions(model, filters))
            query = query.order_by(*self._ordering(model, order))
            if limit:
                query = query.limit(limit)
            return query.all()
        except SQLAlchemyError as exc:
            self._fail("select", collection, exc)

    def first(self, collection: str, filters: Filter = None, order: Order = None):
        rows = self.select(collection, filters, order, limit=1)
        return rows[0] if rows else None

    def get(self, collection: str, record_id: int):
        try:
            return self.db.get(self._model(collection), record_id)
        except SQLAlchemyError as exc:
            self._fail("get", collection, exc)

    def get_or_raise(self, collection: str, record_id: int):
        obj = self.get(collection, record_id)
        if obj is None:
            raise NotFoundError(collection, record_id)
        return obj

    def update(self, collection: str, patch: Dict[str, Any], filters: Filter, commit: bool = True) -> int:
        """Aplica o patch campo a campo (último a gravar vence). Retorna quantos registros mudaram."""
        rows = self.select(collection, filters)
        try:
            for row in rows:
                for key, value in patch.items():
                    setattr(row, key, value)
            self.db.flush()
            if commit:
                self.db.commit()
        except SQLAlchemyError as exc:
            self._fail("update", collection, exc)
        return len(rows)

    def delete(self, collection: str, filters: Filter, commit: bool = True) -> int:
        rows = self.select(collection, filters)
        try:
            for row in rows:
                self.db.delete(row)
            self.db.flush()
            if commit:
                self.db.commit()
        except SQLAlchemyError as exc:
            self._fail("delete", collection, exc)
        return len(rows)

    def commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self._fail("commit", "session", exc)

    def refresh(self, obj):
        self.db.refresh(obj)
        return obj


# Dependência para os endpoints
def get_store(db: Session = Depends(get_db)) -> TransactionStore:
    return TransactionStore(db)
