"""Authentication & Roles - Employee login and the access hierarchy.

Perfis formam uma hierarquia fechada: admin > gerente > atendente. Toda
checagem de acesso passa por ``permits``.
"""

from petshop.contracts.funcionario import Funcionario, FuncionarioCreate, Perfil
from petshop.core.errors import (
    AuthenticationError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)
from petshop.core.repository import EmployeeRepository
from petshop.services.supabase import SupabaseService, Table
from petshop.utils.logger import get_logger
from petshop.utils.security import (
    hash_password,
    is_bcrypt_hash,
    verify_legacy_password,
    verify_password,
)

logger = get_logger(__name__)

Role = Perfil

ROLE_RANK: dict[Role, int] = {
    Role.ATENDENTE: 1,
    Role.GERENTE: 2,
    Role.ADMIN: 3,
}


def permits(role: Role | str | None, required: Role) -> bool:
    """Verifica se o perfil alcança o nível exigido.

    Example:
        >>> permits(Role.ADMIN, Role.GERENTE)
        True
        >>> permits("funcionario", Role.GERENTE)
        False
    """
    return ROLE_RANK[Role.parse(role)] >= ROLE_RANK[required]


class AuthService:
    """Login, troca de senha e cadastro do primeiro administrador."""

    def __init__(self, store: SupabaseService, employees: EmployeeRepository) -> None:
        self.store = store
        self.employees = employees

    def _check_password(self, senha: str, stored: str | None) -> bool:
        if not stored:
            return False
        if is_bcrypt_hash(stored):
            return verify_password(senha, stored)
        return verify_legacy_password(senha, stored)

    async def login(self, email: str, senha: str) -> Funcionario | None:
        """Autentica um funcionário ativo.

        Senhas gravadas em texto puro por versões antigas são aceitas uma
        última vez e regravadas como hash bcrypt.

        Returns:
            Funcionário autenticado, ou None se email/senha não conferem.
        """
        rows = await self.store.fetch_all(
            Table.FUNCIONARIOS, filters={"email_login": email.strip(), "ativo": True}
        )
        row = rows[0] if rows else None

        if row is None or not self._check_password(senha, row.get("senha_hash")):
            logger.warning("login_failed", email=email)
            return None

        if not is_bcrypt_hash(row["senha_hash"]):
            try:
                senha_hash = hash_password(senha)
            except InvalidInputError:
                # Fica em texto puro até o funcionário trocar a senha
                logger.warning("legacy_password_too_long", funcionario_id=row["id"])
            else:
                await self.store.update(
                    Table.FUNCIONARIOS, row["id"], {"senha_hash": senha_hash}
                )
                logger.info("legacy_password_upgraded", funcionario_id=row["id"])

        user = Funcionario.model_validate(row)
        logger.info("login_succeeded", funcionario_id=user.id, perfil=user.perfil.value)
        return user

    async def change_password(
        self, employee_id: str, nova_senha: str, senha_atual: str | None = None
    ) -> None:
        """Troca a senha do funcionário.

        Args:
            employee_id: Funcionário alvo.
            nova_senha: Nova senha em texto puro.
            senha_atual: Se informada, precisa conferir com a gravada.

        Raises:
            NotFoundError: Funcionário inexistente.
            AuthenticationError: Senha atual incorreta.
        """
        row = await self.store.get(Table.FUNCIONARIOS, employee_id)
        if row is None:
            raise NotFoundError("Funcionário não encontrado.")

        if senha_atual is not None and not self._check_password(
            senha_atual, row.get("senha_hash")
        ):
            raise AuthenticationError("Senha atual incorreta.")

        await self.store.update(
            Table.FUNCIONARIOS, employee_id, {"senha_hash": hash_password(nova_senha)}
        )
        logger.info("password_changed", funcionario_id=employee_id)

    async def needs_setup(self) -> bool:
        return await self.store.count(Table.FUNCIONARIOS) == 0

    async def setup_first_admin(self, nome: str, email: str, senha: str) -> Funcionario:
        """Cadastra o primeiro administrador do sistema.

        Raises:
            PermissionDeniedError: Já existe algum funcionário cadastrado.
        """
        if not await self.needs_setup():
            raise PermissionDeniedError("O sistema já possui funcionários cadastrados.")

        admin = await self.employees.create(
            FuncionarioCreate(
                nome=nome,
                cargo="Administrador",
                email=email,
                email_login=email,
                senha=senha,
                perfil=Role.ADMIN,
                ativo=True,
            )
        )
        logger.info("first_admin_created", funcionario_id=admin.id)
        return admin
