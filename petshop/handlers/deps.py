"""Request Dependencies - Container access, current user and role gates."""

from collections.abc import Awaitable, Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from petshop.contracts.funcionario import Funcionario
from petshop.core.auth import Role, permits
from petshop.core.dependencies import AppDependencies
from petshop.core.errors import AuthenticationError, PermissionDeniedError
from petshop.utils.logger import bind_request_context

bearer_scheme = HTTPBearer(auto_error=False)


def get_deps(request: Request) -> AppDependencies:
    """Contêiner montado no startup da aplicação."""
    return request.app.state.deps


async def get_session_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Faça login para continuar.")
    return credentials.credentials


async def get_current_user(
    request: Request,
    token: str = Depends(get_session_token),
    deps: AppDependencies = Depends(get_deps),
) -> Funcionario:
    """Funcionário da sessão, relido do banco (perfil e status atuais).

    Raises:
        AuthenticationError: Sessão expirada ou funcionário desativado.
    """
    session_user = await deps.sessions.get(token)
    if session_user is None:
        raise AuthenticationError("Sessão inválida ou expirada.")

    user = await deps.employees.get(session_user.id, fresh=True)
    if user is None or not user.ativo:
        await deps.sessions.delete(token)
        raise AuthenticationError("Usuário inativo ou removido.")

    bind_request_context(funcionario_id=user.id, path=request.url.path)
    return user


def require_role(required: Role) -> Callable[..., Awaitable[Funcionario]]:
    """Cria a dependência que exige perfil mínimo.

    Example:
        @router.post("", dependencies=[Depends(require_role(Role.GERENTE))])
    """

    async def _dependency(user: Funcionario = Depends(get_current_user)) -> Funcionario:
        if not permits(user.perfil, required):
            raise PermissionDeniedError("Você não tem permissão para esta operação.")
        return user

    return _dependency
