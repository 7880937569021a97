"""Domain Errors - Failure taxonomy shared by repositories and workflows.

Every error carries a Portuguese message ready to be shown to the
employee using the console, plus a stable ``code`` used by the HTTP
layer.
"""


class PetShopError(Exception):
    """Base class for every handled failure in the application."""

    code = "erro"
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(PetShopError):
    """Campo obrigatório ausente ou valor malformado."""

    code = "dados_invalidos"
    status_code = 422


class NotFoundError(PetShopError):
    """Registro alvo da operação não existe."""

    code = "nao_encontrado"
    status_code = 404


class ReferenceNotFoundError(PetShopError):
    """Entidade referenciada (cliente, pet, serviço...) não existe."""

    code = "referencia_nao_encontrada"
    status_code = 422


class DependentRecordsError(PetShopError):
    """Exclusão bloqueada porque outros registros dependem deste."""

    code = "possui_dependentes"
    status_code = 409


class ResourceConflictError(PetShopError):
    """Recurso disputado (estoque, horário) não comporta a operação."""

    code = "conflito"
    status_code = 409


class InsufficientStockError(ResourceConflictError):
    code = "estoque_insuficiente"

    def __init__(self, produto_nome: str, disponivel: int, solicitado: int) -> None:
        super().__init__(
            f"Estoque insuficiente para {produto_nome}: "
            f"{disponivel} disponível(is), {solicitado} solicitado(s)."
        )
        self.disponivel = disponivel
        self.solicitado = solicitado


class SlotUnavailableError(ResourceConflictError):
    code = "horario_indisponivel"

    def __init__(
        self, message: str = "O horário selecionado não está mais disponível"
    ) -> None:
        super().__init__(message)


class DuplicateEmailError(PetShopError):
    code = "email_ja_cadastrado"
    status_code = 409


class AuthenticationError(PetShopError):
    code = "nao_autenticado"
    status_code = 401


class PermissionDeniedError(PetShopError):
    code = "acesso_negado"
    status_code = 403


class StoreError(PetShopError):
    """Falha de comunicação com o banco (Supabase fora do ar, query inválida)."""

    code = "falha_banco"
    status_code = 502

    def __init__(self, operation: str, cause: Exception) -> None:
        super().__init__(f"Erro ao {operation}")
        self.operation = operation
        self.cause = cause
