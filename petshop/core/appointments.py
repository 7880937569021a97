"""Appointment Workflow - Booking, rescheduling and cancelling against slots.

Booking is a small saga: reserve the slot (conditional write), insert the
appointment, and release the slot again if the insert fails. Rescheduling
reserves the new slot before releasing the old one.
"""

from collections import defaultdict
from datetime import date

from petshop.contracts.agendamento import Agendamento, AgendamentoCreate, AgendamentoUpdate
from petshop.contracts.atendimento import Status
from petshop.contracts.lembrete import StatusLembrete, TipoLembrete
from petshop.core.errors import (
    InvalidInputError,
    NotFoundError,
    ReferenceNotFoundError,
    StoreError,
)
from petshop.core.repository import (
    ClientRepository,
    EmployeeRepository,
    PetRepository,
    ServiceRepository,
)
from petshop.core.slots import CURRENT_SLOT_ID, SlotAllocator
from petshop.core.status import check_transition
from petshop.services.supabase import Row, SupabaseService, Table
from petshop.utils.logger import get_logger

logger = get_logger(__name__)


class AppointmentDayIndex:
    """Agendamentos agrupados por dia, ordenados pela hora.

    Dias sem agendamentos não ficam no índice.
    """

    def __init__(self) -> None:
        self._buckets: dict[date, list[Agendamento]] = defaultdict(list)

    def clear(self) -> None:
        self._buckets.clear()

    def add(self, appointment: Agendamento) -> None:
        bucket = self._buckets[appointment.data]
        bucket.append(appointment)
        bucket.sort(key=lambda a: a.hora)

    def remove(self, appointment_id: str, day: date) -> None:
        bucket = self._buckets.get(day)
        if bucket is None:
            return
        bucket[:] = [a for a in bucket if a.id != appointment_id]
        if not bucket:
            del self._buckets[day]

    def move(self, old_day: date, appointment: Agendamento) -> None:
        """Tira o agendamento do dia antigo e coloca no dia atual dele."""
        self.remove(appointment.id, old_day)
        self.add(appointment)

    def for_day(self, day: date) -> list[Agendamento]:
        return list(self._buckets.get(day, []))

    def days(self) -> list[date]:
        return sorted(self._buckets)


class AppointmentWorkflow:
    """Criação, edição e cancelamento de agendamentos."""

    def __init__(
        self,
        store: SupabaseService,
        clients: ClientRepository,
        pets: PetRepository,
        employees: EmployeeRepository,
        services: ServiceRepository,
        slots: SlotAllocator,
        enforce_status_transitions: bool = False,
    ) -> None:
        self.store = store
        self.clients = clients
        self.pets = pets
        self.employees = employees
        self.services = services
        self.slots = slots
        self.enforce_status_transitions = enforce_status_transitions
        self.day_index = AppointmentDayIndex()
        self._indexed = False

    async def _to_appointment(self, row: Row) -> Agendamento:
        cliente = await self.clients.get(row["cliente_id"])
        pet = await self.pets.get(row["pet_id"])
        servico = await self.services.get(row["servico_id"])
        funcionario = await self.employees.get(row["funcionario_id"])
        return Agendamento.model_validate(
            {
                **row,
                "cliente_nome": cliente.nome if cliente else None,
                "pet_nome": pet.nome if pet else None,
                "servico_nome": servico.nome if servico else None,
                "valor_servico": servico.preco if servico else None,
                "funcionario_nome": funcionario.nome if funcionario else None,
            }
        )

    async def get(self, appointment_id: str) -> Agendamento:
        row = await self.store.get(Table.AGENDAMENTOS, appointment_id)
        if row is None:
            raise NotFoundError("Agendamento não encontrado.")
        return await self._to_appointment(row)

    async def list_by_client(self, cliente_id: str) -> list[Agendamento]:
        """Agendamentos do cliente, datas mais recentes primeiro."""
        rows = await self.store.fetch_all(
            Table.AGENDAMENTOS, filters={"cliente_id": cliente_id}
        )
        appointments = [await self._to_appointment(row) for row in rows]
        appointments.sort(key=lambda a: a.hora)
        appointments.sort(key=lambda a: a.data, reverse=True)
        return appointments

    async def list_for_day(self, day: date) -> list[Agendamento]:
        if not self._indexed:
            await self.list()
        return self.day_index.for_day(day)

    async def list(self) -> list[Agendamento]:
        """Todos os agendamentos por data e hora; reconstrói o índice por dia."""
        rows = await self.store.fetch_all(Table.AGENDAMENTOS, order_by="data")
        appointments = [await self._to_appointment(row) for row in rows]
        appointments.sort(key=lambda a: (a.data, a.hora))

        self.day_index.clear()
        for appointment in appointments:
            self.day_index.add(appointment)
        self._indexed = True
        return appointments

    async def _check_references(
        self,
        cliente_id: str | None = None,
        pet_id: str | None = None,
        servico_id: str | None = None,
    ) -> None:
        if cliente_id and await self.clients.get(cliente_id) is None:
            raise ReferenceNotFoundError("Cliente não encontrado.")
        if pet_id and await self.pets.get(pet_id) is None:
            raise ReferenceNotFoundError("Pet não encontrado.")
        if servico_id and await self.services.get(servico_id) is None:
            raise ReferenceNotFoundError("Serviço não encontrado.")

    async def _enqueue_reminders(self, appointment_id: str) -> None:
        try:
            await self.store.insert_many(
                Table.LEMBRETES_EMAIL,
                [
                    {
                        "agendamento_id": appointment_id,
                        "tipo": tipo.value,
                        "status": StatusLembrete.PENDENTE.value,
                    }
                    for tipo in (TipoLembrete.CONFIRMACAO, TipoLembrete.LEMBRETE)
                ],
            )
        except StoreError as e:
            # O agendamento já está gravado; o lembrete pode ser recriado depois
            logger.error(
                "reminder_enqueue_failed", agendamento_id=appointment_id, error=str(e)
            )

    async def create(self, data: AgendamentoCreate) -> Agendamento:
        """Agenda no horário escolhido.

        Raises:
            InvalidInputError: Data ou horário não informados.
            ReferenceNotFoundError: Cliente, pet ou serviço inexistente.
            SlotUnavailableError: O horário não está mais livre.
        """
        if data.data is None or not data.horario_id:
            raise InvalidInputError("Preencha todos os campos obrigatórios.")

        await self._check_references(data.cliente_id, data.pet_id, data.servico_id)

        candidates = await self.slots.list_candidates(data.data)
        slot = self.slots.resolve(data.horario_id, candidates)
        await self.slots.reserve(slot)

        fields = {
            "cliente_id": data.cliente_id,
            "pet_id": data.pet_id,
            "servico_id": data.servico_id,
            "funcionario_id": slot.funcionario_id,
            "data": slot.data.isoformat(),
            "hora": slot.hora,
            "status": Status.AGENDADO.value,
            "observacoes": data.observacoes,
        }
        try:
            row = await self.store.insert(Table.AGENDAMENTOS, fields)
        except Exception:
            await self.slots.release(slot.data, slot.hora, slot.funcionario_id)
            logger.warning("appointment_insert_failed_slot_released", horario_id=slot.id)
            raise

        await self._enqueue_reminders(row["id"])

        appointment = await self._to_appointment(row)
        if self._indexed:
            self.day_index.add(appointment)

        logger.info(
            "appointment_created",
            agendamento_id=appointment.id,
            data=appointment.data.isoformat(),
            hora=appointment.hora,
            funcionario_id=appointment.funcionario_id,
        )
        return appointment

    async def update(self, appointment_id: str, data: AgendamentoUpdate) -> Agendamento:
        """Atualização parcial, com troca de horário opcional.

        ``horario_id`` ausente ou igual a ``CURRENT_SLOT_ID`` mantém data, hora
        e funcionário. Um novo horário é reservado antes de o antigo ser liberado.
        """
        current = await self.get(appointment_id)
        fields = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        slot_id = fields.pop("horario_id", None)
        new_day = data.data or current.data
        fields.pop("data", None)

        await self._check_references(
            fields.get("cliente_id"), fields.get("pet_id"), fields.get("servico_id")
        )
        if "status" in fields:
            check_transition(
                current.status, Status(fields["status"]), self.enforce_status_transitions
            )

        new_slot = None
        if slot_id and slot_id != CURRENT_SLOT_ID:
            candidates = await self.slots.list_candidates(new_day, editing=current)
            new_slot = self.slots.resolve(slot_id, candidates)
            await self.slots.reserve(new_slot)
            fields.update(
                data=new_slot.data.isoformat(),
                hora=new_slot.hora,
                funcionario_id=new_slot.funcionario_id,
            )
        elif new_day != current.data:
            raise InvalidInputError("Escolha um horário disponível para a nova data.")

        if not fields:
            return current

        try:
            row = await self.store.update(Table.AGENDAMENTOS, appointment_id, fields)
        except Exception:
            if new_slot is not None:
                await self.slots.release(new_slot.data, new_slot.hora, new_slot.funcionario_id)
            raise
        if row is None:
            raise NotFoundError("Agendamento não encontrado.")

        if new_slot is not None:
            await self.slots.release(current.data, current.hora, current.funcionario_id)

        updated = await self._to_appointment(row)
        if self._indexed:
            self.day_index.move(current.data, updated)

        logger.info(
            "appointment_updated",
            agendamento_id=appointment_id,
            fields=sorted(fields),
            moved=new_slot is not None,
        )
        return updated

    async def set_status(self, appointment_id: str, status: Status) -> Agendamento:
        return await self.update(appointment_id, AgendamentoUpdate(status=status))

    async def cancel(self, appointment_id: str) -> None:
        """Exclui o agendamento e devolve o horário à agenda."""
        current = await self.get(appointment_id)

        await self.store.delete_where(Table.LEMBRETES_EMAIL, {"agendamento_id": appointment_id})
        await self.store.delete(Table.AGENDAMENTOS, appointment_id)
        await self.slots.release(current.data, current.hora, current.funcionario_id)

        self.day_index.remove(appointment_id, current.data)
        logger.info(
            "appointment_cancelled",
            agendamento_id=appointment_id,
            data=current.data.isoformat(),
            hora=current.hora,
        )
