"""Slot Allocator - Published availability and atomic slot reservation.

A slot is reserved by a conditional write (``disponivel`` must still be
true), so two bookings racing for the same slot cannot both succeed: the
loser sees no matching row and gets ``SlotUnavailableError``.
"""

from datetime import date

from petshop.contracts.agendamento import Agendamento, HorarioCreate, HorarioDisponivel
from petshop.core.availability import generate_time_slots
from petshop.core.errors import NotFoundError, ReferenceNotFoundError, SlotUnavailableError
from petshop.core.repository import EmployeeRepository
from petshop.services.supabase import Row, SupabaseService, Table
from petshop.utils.logger import get_logger

logger = get_logger(__name__)

# ID do horário sintético que representa o horário atual de um agendamento em edição
CURRENT_SLOT_ID = "atual"


class SlotAllocator:
    """Publica, lista, reserva e libera horários disponíveis."""

    def __init__(self, store: SupabaseService, employees: EmployeeRepository) -> None:
        self.store = store
        self.employees = employees

    async def _to_slot(self, row: Row) -> HorarioDisponivel:
        funcionario = await self.employees.get(row["funcionario_id"])
        return HorarioDisponivel.model_validate(
            {**row, "funcionario_nome": funcionario.nome if funcionario else None}
        )

    async def list_candidates(
        self,
        day: date,
        employee_id: str | None = None,
        editing: Agendamento | None = None,
    ) -> list[HorarioDisponivel]:
        """Horários livres do dia, ordenados pela hora.

        Args:
            day: Data desejada.
            employee_id: Restringe a um funcionário.
            editing: Agendamento em edição. Se for do mesmo dia e seu horário
                não estiver na lista, entra um horário sintético com id
                ``CURRENT_SLOT_ID`` para que o valor atual continue selecionável.

        Returns:
            Lista de horários.
        """
        filters: dict[str, object] = {"data": day.isoformat(), "disponivel": True}
        if employee_id:
            filters["funcionario_id"] = employee_id

        rows = await self.store.fetch_all(
            Table.HORARIOS_DISPONIVEIS, order_by="hora", filters=filters
        )
        slots = [await self._to_slot(row) for row in rows]

        if editing is not None and editing.data == day:
            already_listed = any(
                s.hora == editing.hora and s.funcionario_id == editing.funcionario_id
                for s in slots
            )
            if not already_listed and (
                employee_id is None or employee_id == editing.funcionario_id
            ):
                slots.append(
                    HorarioDisponivel(
                        id=CURRENT_SLOT_ID,
                        data=editing.data,
                        hora=editing.hora,
                        funcionario_id=editing.funcionario_id,
                        funcionario_nome=editing.funcionario_nome,
                        disponivel=True,
                    )
                )

        slots.sort(key=lambda s: (s.hora, s.funcionario_nome or ""))
        return slots

    async def publish(
        self, employee_id: str, day: date, times: list[str]
    ) -> list[HorarioDisponivel]:
        """Cria horários disponíveis em lote para um funcionário."""
        if await self.employees.get(employee_id) is None:
            raise ReferenceNotFoundError("Funcionário não encontrado.")
        if not times:
            return []

        rows = await self.store.insert_many(
            Table.HORARIOS_DISPONIVEIS,
            [
                {
                    "data": day.isoformat(),
                    "hora": hora,
                    "funcionario_id": employee_id,
                    "disponivel": True,
                }
                for hora in times
            ],
        )
        logger.info(
            "slots_published",
            funcionario_id=employee_id,
            data=day.isoformat(),
            count=len(rows),
        )
        return [await self._to_slot(row) for row in rows]

    async def publish_range(
        self, employee_id: str, day: date, start: str, end: str, interval: int
    ) -> list[HorarioDisponivel]:
        """Gera os horários da janela e publica todos."""
        return await self.publish(employee_id, day, generate_time_slots(start, end, interval))

    async def add_slot(self, data: HorarioCreate) -> HorarioDisponivel:
        if await self.employees.get(data.funcionario_id) is None:
            raise ReferenceNotFoundError("Funcionário não encontrado.")

        row = await self.store.insert(Table.HORARIOS_DISPONIVEIS, data.model_dump(mode="json"))
        logger.info("slot_added", horario_id=row["id"], data=row["data"], hora=row["hora"])
        return await self._to_slot(row)

    async def get_slot(self, slot_id: str) -> HorarioDisponivel:
        row = await self.store.get(Table.HORARIOS_DISPONIVEIS, slot_id)
        if row is None:
            raise NotFoundError("Horário não encontrado.")
        return await self._to_slot(row)

    async def delete_slot(self, slot_id: str) -> None:
        if not await self.store.delete(Table.HORARIOS_DISPONIVEIS, slot_id):
            raise NotFoundError("Horário não encontrado.")
        logger.info("slot_deleted", horario_id=slot_id)

    @staticmethod
    def resolve(slot_id: str, candidates: list[HorarioDisponivel]) -> HorarioDisponivel:
        """Acha o horário escolhido entre os candidatos.

        Raises:
            SlotUnavailableError: Se o horário não estiver mais na lista.
        """
        for slot in candidates:
            if slot.id == slot_id:
                return slot
        raise SlotUnavailableError()

    async def reserve(self, slot: HorarioDisponivel) -> HorarioDisponivel:
        """Marca o horário como ocupado, apenas se ainda estiver livre."""
        row = await self.store.update(
            Table.HORARIOS_DISPONIVEIS,
            slot.id,
            {"disponivel": False},
            conditions={"disponivel": True},
        )
        if row is None:
            logger.warning("slot_reserve_conflict", horario_id=slot.id)
            raise SlotUnavailableError()

        logger.info(
            "slot_reserved",
            horario_id=slot.id,
            data=slot.data.isoformat(),
            hora=slot.hora,
            funcionario_id=slot.funcionario_id,
        )
        return await self._to_slot(row)

    async def release(self, day: date, hora: str, employee_id: str) -> bool:
        """Devolve à agenda o horário ocupado (data, hora, funcionário).

        Returns:
            True se algum horário foi liberado. Sem horário correspondente
            (ex.: já excluído) nada acontece.
        """
        rows = await self.store.fetch_all(
            Table.HORARIOS_DISPONIVEIS,
            filters={
                "data": day.isoformat(),
                "funcionario_id": employee_id,
                "disponivel": False,
            },
        )
        match = next((r for r in rows if _same_time(r["hora"], hora)), None)
        if match is None:
            logger.info(
                "slot_release_skipped",
                data=day.isoformat(),
                hora=hora,
                funcionario_id=employee_id,
            )
            return False

        await self.store.update(
            Table.HORARIOS_DISPONIVEIS, match["id"], {"disponivel": True}
        )
        logger.info("slot_released", horario_id=match["id"], data=day.isoformat(), hora=hora)
        return True


def _same_time(stored: str, hora: str) -> bool:
    # A coluna time devolve HH:MM:SS
    return stored[:5] == hora[:5]
