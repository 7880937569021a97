"""Scheduling Handlers - Availability slots and online appointments."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from petshop.contracts.agendamento import (
    Agendamento,
    AgendamentoCreate,
    AgendamentoUpdate,
    HorarioCreate,
    HorarioDisponivel,
    LoteHorarios,
    StatusUpdate,
)
from petshop.contracts.funcionario import Funcionario
from petshop.core.auth import Role, permits
from petshop.core.availability import generate_time_slots
from petshop.core.dependencies import AppDependencies
from petshop.core.errors import PermissionDeniedError
from petshop.handlers.deps import get_current_user, get_deps
from petshop.utils.logger import get_logger

logger = get_logger(__name__)

horarios_router = APIRouter(
    prefix="/horarios", tags=["horarios"], dependencies=[Depends(get_current_user)]
)
agendamentos_router = APIRouter(
    prefix="/agendamentos", tags=["agendamentos"], dependencies=[Depends(get_current_user)]
)


def _target_employee(user: Funcionario, funcionario_id: str | None) -> str:
    """Atendentes só mexem na própria agenda; gerentes em qualquer uma."""
    target = funcionario_id or user.id
    if target != user.id and not permits(user.perfil, Role.GERENTE):
        logger.warning(
            "slot_publish_denied", funcionario_id=user.id, target_funcionario_id=target
        )
        raise PermissionDeniedError("Você só pode gerenciar os seus próprios horários.")
    return target


# Horários

@horarios_router.get("", response_model=list[HorarioDisponivel])
async def list_horarios(
    data: date,
    funcionario_id: str | None = None,
    editando: str | None = Query(None, description="ID do agendamento em edição"),
    deps: AppDependencies = Depends(get_deps),
) -> list[HorarioDisponivel]:
    """Horários livres do dia (e o horário atual do agendamento em edição)."""
    editing = await deps.appointments.get(editando) if editando else None
    return await deps.slots.list_candidates(data, funcionario_id, editing)


@horarios_router.get("/preview")
async def preview_horarios(
    hora_inicio: str = "09:00",
    hora_fim: str = "18:00",
    intervalo: int = 30,
) -> dict:
    """Mostra os horários que um lote geraria, sem gravar nada."""
    return {"horarios": generate_time_slots(hora_inicio, hora_fim, intervalo)}


@horarios_router.post("/lote", response_model=list[HorarioDisponivel], status_code=201)
async def publish_lote(
    payload: LoteHorarios,
    user: Funcionario = Depends(get_current_user),
    deps: AppDependencies = Depends(get_deps),
) -> list[HorarioDisponivel]:
    funcionario_id = _target_employee(user, payload.funcionario_id)
    return await deps.slots.publish_range(
        funcionario_id, payload.data, payload.hora_inicio, payload.hora_fim, payload.intervalo
    )


@horarios_router.post("", response_model=HorarioDisponivel, status_code=201)
async def add_horario(
    payload: HorarioCreate,
    user: Funcionario = Depends(get_current_user),
    deps: AppDependencies = Depends(get_deps),
) -> HorarioDisponivel:
    _target_employee(user, payload.funcionario_id)
    return await deps.slots.add_slot(payload)


@horarios_router.delete("/{horario_id}", status_code=204)
async def delete_horario(
    horario_id: str,
    user: Funcionario = Depends(get_current_user),
    deps: AppDependencies = Depends(get_deps),
) -> None:
    slot = await deps.slots.get_slot(horario_id)
    _target_employee(user, slot.funcionario_id)
    await deps.slots.delete_slot(horario_id)


# Agendamentos

@agendamentos_router.get("", response_model=list[Agendamento])
async def list_agendamentos(deps: AppDependencies = Depends(get_deps)) -> list[Agendamento]:
    return await deps.appointments.list()


@agendamentos_router.get("/dia/{dia}", response_model=list[Agendamento])
async def list_agendamentos_do_dia(
    dia: date, deps: AppDependencies = Depends(get_deps)
) -> list[Agendamento]:
    return await deps.appointments.list_for_day(dia)


@agendamentos_router.get("/{agendamento_id}", response_model=Agendamento)
async def get_agendamento(
    agendamento_id: str, deps: AppDependencies = Depends(get_deps)
) -> Agendamento:
    return await deps.appointments.get(agendamento_id)


@agendamentos_router.post("", response_model=Agendamento, status_code=201)
async def create_agendamento(
    payload: AgendamentoCreate, deps: AppDependencies = Depends(get_deps)
) -> Agendamento:
    """Agenda no horário escolhido; 409 se outro agendamento levou o horário."""
    return await deps.appointments.create(payload)


@agendamentos_router.patch("/{agendamento_id}", response_model=Agendamento)
async def update_agendamento(
    agendamento_id: str,
    payload: AgendamentoUpdate,
    deps: AppDependencies = Depends(get_deps),
) -> Agendamento:
    return await deps.appointments.update(agendamento_id, payload)


@agendamentos_router.patch("/{agendamento_id}/status", response_model=Agendamento)
async def update_status(
    agendamento_id: str,
    payload: StatusUpdate,
    deps: AppDependencies = Depends(get_deps),
) -> Agendamento:
    return await deps.appointments.set_status(agendamento_id, payload.status)


@agendamentos_router.delete("/{agendamento_id}", status_code=204)
async def cancel_agendamento(
    agendamento_id: str, deps: AppDependencies = Depends(get_deps)
) -> None:
    await deps.appointments.cancel(agendamento_id)
