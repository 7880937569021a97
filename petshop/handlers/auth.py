"""Auth Handler - Login, logout, first-time setup and password change."""

from fastapi import APIRouter, Depends

from petshop.contracts.auth import LoginRequest, PasswordChange, SessionResponse, SetupRequest
from petshop.contracts.funcionario import Funcionario
from petshop.core.dependencies import AppDependencies
from petshop.core.errors import AuthenticationError
from petshop.handlers.deps import get_current_user, get_deps, get_session_token
from petshop.utils.logger import get_logger

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)


@router.post("/login", response_model=SessionResponse)
async def login(
    payload: LoginRequest, deps: AppDependencies = Depends(get_deps)
) -> SessionResponse:
    """Autentica e abre uma sessão.

    Returns:
        Token de sessão e dados do funcionário.
    """
    user = await deps.auth.login(payload.email, payload.senha)
    if user is None:
        raise AuthenticationError("Email ou senha inválidos.")

    token = await deps.sessions.create(user)
    return SessionResponse(token=token, usuario=user)


@router.post("/logout", status_code=204)
async def logout(
    token: str = Depends(get_session_token), deps: AppDependencies = Depends(get_deps)
) -> None:
    await deps.sessions.delete(token)


@router.get("/me", response_model=Funcionario)
async def me(user: Funcionario = Depends(get_current_user)) -> Funcionario:
    return user


@router.get("/setup")
async def setup_status(deps: AppDependencies = Depends(get_deps)) -> dict:
    """Indica se o sistema ainda precisa do primeiro administrador."""
    return {"needs_setup": await deps.auth.needs_setup()}


@router.post("/setup", response_model=SessionResponse, status_code=201)
async def setup(
    payload: SetupRequest, deps: AppDependencies = Depends(get_deps)
) -> SessionResponse:
    """Cadastra o primeiro administrador e já abre a sessão dele."""
    admin = await deps.auth.setup_first_admin(payload.nome, payload.email, payload.senha)
    token = await deps.sessions.create(admin)
    return SessionResponse(token=token, usuario=admin)


@router.post("/password", status_code=204)
async def change_password(
    payload: PasswordChange,
    user: Funcionario = Depends(get_current_user),
    deps: AppDependencies = Depends(get_deps),
) -> None:
    await deps.auth.change_password(user.id, payload.nova_senha, payload.senha_atual)
