from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from retaguarda import __version__
from retaguarda.database import engine
from retaguarda.exceptions import RetaguardaError
from retaguarda.models import Base
from retaguarda.routers import (
    auth, cash, audits, finance, payment_methods, recurring_bills, reports
)
from retaguarda.utils.logger import get_logger

logger = get_logger("retaguarda")

# 1. CRIAÇÃO AUTOMÁTICA DAS TABELAS
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Retaguarda - Caixa & Financeiro",
    description="Fechamento de caixa, auditoria e relatórios financeiros para varejo e restaurantes",
    version=__version__
)

# 2. CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 3. ROUTERS
app.include_router(auth.router, prefix="/api/auth", tags=["🔑 Autenticação"])
app.include_router(cash.router, prefix="/api/cash", tags=["💰 Caixa (Turnos)"])
app.include_router(audits.router, prefix="/api/audits", tags=["🔍 Auditoria de Caixa"])
app.include_router(finance.router, prefix="/api/finance", tags=["🏦 Financeiro"])
app.include_router(payment_methods.router, prefix="/api/payment-methods", tags=["💳 Adquirentes"])
app.include_router(recurring_bills.router, prefix="/api/recurring-bills", tags=["📅 Contas Fixas"])
app.include_router(reports.router, prefix="/api/reports", tags=["📊 DRE & Projeções"])


@app.get("/health")
def health():
    return {"status": "ok"}


# 4. TRATAMENTO DE ERROS
@app.exception_handler(RetaguardaError)
async def retaguarda_exception_handler(request: Request, exc: RetaguardaError):
    if exc.status_code >= 500:
        logger.error("%s %s falhou: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s recusado (%s): %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})


@app.exception_handler(404)
async def not_found_exception_handler(request: Request, exc):
    return JSONResponse(status_code=404, content={"detail": "Recurso não encontrado"})
