"""Reminder Handler - Pending email queue and manual processing."""

from fastapi import APIRouter, Depends

from petshop.contracts.lembrete import LembreteEmail, ReminderRunResult
from petshop.core.auth import Role
from petshop.core.dependencies import AppDependencies
from petshop.handlers.deps import get_current_user, get_deps, require_role

router = APIRouter(
    prefix="/lembretes", tags=["lembretes"], dependencies=[Depends(get_current_user)]
)
manager_only = [Depends(require_role(Role.GERENTE))]


@router.get("", response_model=list[LembreteEmail])
async def list_pendentes(deps: AppDependencies = Depends(get_deps)) -> list[LembreteEmail]:
    """Lembretes ainda não enviados."""
    return await deps.reminders.fetch_pending()


@router.post("/processar", response_model=ReminderRunResult, dependencies=manager_only)
async def processar(deps: AppDependencies = Depends(get_deps)) -> ReminderRunResult:
    """Envia confirmações e os lembretes de amanhã."""
    return await deps.reminders.process_pending()


@router.post("/{lembrete_id}/enviar", response_model=LembreteEmail, dependencies=manager_only)
async def enviar(lembrete_id: str, deps: AppDependencies = Depends(get_deps)) -> LembreteEmail:
    """Envia um lembrete agora, independente da data do agendamento."""
    return await deps.reminders.send_one(lembrete_id)


@router.post(
    "/{lembrete_id}/marcar-enviado", response_model=LembreteEmail, dependencies=manager_only
)
async def marcar_enviado(
    lembrete_id: str, deps: AppDependencies = Depends(get_deps)
) -> LembreteEmail:
    """Tira o lembrete da fila sem enviar email."""
    return await deps.reminders.mark_sent(lembrete_id)
