"""
Exceções tipadas do domínio de caixa e financeiro.

Toda exceção carrega um `code` legível por máquina e o `status_code` HTTP
usado pelo handler registrado em `retaguarda.main`.

    RetaguardaError
    |
    +-- ValidationError            (422) valor inválido, campo obrigatório, justificativa vazia
    +-- NotFoundError              (404)
    +-- ConflictError              (409)
    |   +-- ShiftAlreadyOpenError
    |   +-- ShiftAlreadyClosedError
    |   +-- InvalidShiftTransitionError
    |   +-- AuditTransitionError
    |   +-- ImmutableTransactionError
    |   +-- DuplicateEntryError
    |   +-- IntegrityConflictError     chave única / check do banco
    +-- StoreError                 (503) falha do banco, sessão já revertida
"""


class RetaguardaError(Exception):
    """Base de todos os erros de domínio."""

    code: str = "RETAGUARDA_ERROR"
    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(RetaguardaError):
    code: str = "VALIDATION_ERROR"
    status_code: int = 422

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class NotFoundError(RetaguardaError):
    code: str = "NOT_FOUND"
    status_code: int = 404

    def __init__(self, collection: str, record_id):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"Registro {record_id} não encontrado em {collection}")


class ConflictError(RetaguardaError):
    code: str = "CONFLICT"
    status_code: int = 409


class ShiftAlreadyOpenError(ConflictError):
    code: str = "SHIFT_ALREADY_OPEN"

    def __init__(self, terminal_id: int):
        self.terminal_id = terminal_id
        super().__init__("Já existe um turno aberto neste terminal.")


class ShiftAlreadyClosedError(ConflictError):
    code: str = "SHIFT_ALREADY_CLOSED"

    def __init__(self, terminal_id: int, day):
        self.terminal_id = terminal_id
        self.day = day
        super().__init__("O caixa de hoje já foi encerrado.")


class InvalidShiftTransitionError(ConflictError):
    """Ação pedida não é válida na etapa atual do turno."""

    code: str = "INVALID_SHIFT_TRANSITION"

    def __init__(self, current_step: str, action: str):
        self.current_step = current_step
        self.action = action
        super().__init__(f"Ação '{action}' não permitida na etapa {current_step}.")


class AuditTransitionError(ConflictError):
    code: str = "AUDIT_TRANSITION"

    def __init__(self, audit_id: int, status: str):
        self.audit_id = audit_id
        self.status = status
        super().__init__(f"Auditoria {audit_id} já está finalizada ({status}).")


class ImmutableTransactionError(ConflictError):
    code: str = "IMMUTABLE_TRANSACTION"

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Lançamento {transaction_id} já liquidado não pode ser alterado.")


class DuplicateEntryError(ConflictError):
    code: str = "DUPLICATE_ENTRY"


class IntegrityConflictError(ConflictError):
    """Gravação barrada por restrição do banco (chave única, check)."""

    code: str = "INTEGRITY_CONFLICT"

    def __init__(self, collection: str):
        self.collection = collection
        super().__init__(f"Registro viola restrição de integridade em {collection}")


class StoreError(RetaguardaError):
    code: str = "STORE_ERROR"
    status_code: int = 503

    def __init__(self, operation: str, collection: str, cause: Exception | None = None):
        self.operation = operation
        self.collection = collection
        self.cause = cause
        super().__init__(f"Falha ao executar {operation} em {collection}")
