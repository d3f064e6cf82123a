# retaguarda/crud/audits.py
"""Revisão gerencial dos fechamentos: PENDING -> APPROVED | CONTESTED (ambos finais)."""
from typing import Optional

from retaguarda.config import get_settings
from retaguarda.exceptions import AuditTransitionError, ValidationError
from retaguarda.models import AuditStatus
from retaguarda.store import TransactionStore
from retaguarda.utils.dates import utcnow
from retaguarda.utils.logger import get_logger
from retaguarda.utils.reconciliation import from_snapshot

logger = get_logger("retaguarda.audits")

AUDITS = "cash_audits"

# Únicas transições permitidas; estados finais não têm saída
AUDIT_TRANSITIONS = {
    AuditStatus.PENDING: frozenset({AuditStatus.APPROVED, AuditStatus.CONTESTED}),
    AuditStatus.APPROVED: frozenset(),
    AuditStatus.CONTESTED: frozenset(),
}


def list_audits(store: TransactionStore, status: Optional[AuditStatus] = None, limit: int = 100):
    filters = {"status": status} if status else None
    return store.select(AUDITS, filters, order=["-date", "-id"], limit=limit)


def get_audit(store: TransactionStore, audit_id: int):
    return store.get_or_raise(AUDITS, audit_id)


def audit_breakdown(audit):
    """Conferência do dia tal como foi gravada no fechamento."""
    return from_snapshot(audit, tolerance=get_settings().balance_tolerance)


def _transition(store: TransactionStore, audit_id: int, target: AuditStatus, patch: dict):
    audit = get_audit(store, audit_id)
    if target not in AUDIT_TRANSITIONS[audit.status]:
        raise AuditTransitionError(audit_id, audit.status.value)
    patch.update({"status": target, "reviewed_at": utcnow()})
    store.update(AUDITS, patch, {"id": audit_id})
    return store.refresh(audit)


def approve_audit(store: TransactionStore, audit_id: int, reviewer: str,
                  deposit_proof_url: Optional[str] = None):
    patch = {"reviewed_by": reviewer}
    if deposit_proof_url:
        patch["deposit_proof_url"] = deposit_proof_url
    audit = _transition(store, audit_id, AuditStatus.APPROVED, patch)
    logger.info("Auditoria %s aprovada por %s", audit_id, reviewer)
    return audit


def contest_audit(store: TransactionStore, audit_id: int, reviewer: str, justification: str):
    """Contestação exige justificativa; as notas originais são mantidas e a ressalva é anexada."""
    reason = (justification or "").strip()
    if not reason:
        raise ValidationError("Informe a justificativa da contestação.", field="justification")

    audit = get_audit(store, audit_id)
    annotation = f"[CONTESTADO por {reviewer}] {reason}"
    notes = f"{audit.notes}\n{annotation}" if audit.notes else annotation

    audit = _transition(store, audit_id, AuditStatus.CONTESTED, {"reviewed_by": reviewer, "notes": notes})
    logger.info("Auditoria %s contestada por %s", audit_id, reviewer)
    return audit
