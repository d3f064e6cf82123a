# retaguarda/routers/audits.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Response

from retaguarda.crud import audits
from retaguarda.models import AuditStatus, User
from retaguarda.schemas.cash import CashAuditRead, AuditApprove, AuditContest
from retaguarda.security import get_current_user, require_manager
from retaguarda.store import TransactionStore, get_store
from retaguarda.utils.pdf_generator import generate_closing_pdf

router = APIRouter()


@router.get("/", response_model=List[CashAuditRead])
def list_audits(
    status: Optional[AuditStatus] = None,
    limit: int = 100,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return audits.list_audits(store, status, limit)


@router.get("/{audit_id}", response_model=CashAuditRead)
def get_audit(
    audit_id: int,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return audits.get_audit(store, audit_id)


@router.post("/{audit_id}/approve", response_model=CashAuditRead)
def approve_audit(
    audit_id: int,
    body: AuditApprove,
    store: TransactionStore = Depends(get_store),
    manager: User = Depends(require_manager)
):
    return audits.approve_audit(store, audit_id, manager.display_name, body.deposit_proof_url)


@router.post("/{audit_id}/contest", response_model=CashAuditRead)
def contest_audit(
    audit_id: int,
    body: AuditContest,
    store: TransactionStore = Depends(get_store),
    manager: User = Depends(require_manager)
):
    return audits.contest_audit(store, audit_id, manager.display_name, body.justification)


@router.get("/{audit_id}/pdf")
def get_audit_pdf(
    audit_id: int,
    store: TransactionStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    audit = audits.get_audit(store, audit_id)
    pdf_content = generate_closing_pdf(audit, audits.audit_breakdown(audit))
    return Response(
        content=pdf_content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=Fechamento_{audit.date}_{audit.id}.pdf"}
    )
