"""Reminder Dispatcher - Sends pending confirmation and reminder emails.

A pass over the queue:
1. Loads reminders still ``pendente`` with no ``enviado_em``
2. Confirmations are sent right away
3. Reminders are sent only on the day before the appointment; without an
   appointment they stay pending
4. Sent reminders leave the queue; broken ones are marked ``erro``

Running the pass twice never sends the same reminder twice.
"""

from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from petshop.contracts.lembrete import (
    AgendamentoDetalhado,
    EmailMessage,
    LembreteEmail,
    ReminderFailure,
    ReminderRunResult,
    StatusLembrete,
    TipoLembrete,
)
from petshop.core.appointments import AppointmentWorkflow
from petshop.core.errors import InvalidInputError, NotFoundError, PetShopError
from petshop.core.repository import (
    ClientRepository,
    EmployeeRepository,
    PetRepository,
    ServiceRepository,
)
from petshop.core.templates import format_template, get_subject
from petshop.services.email import EmailTransport
from petshop.services.observability import get_tracer
from petshop.services.supabase import Row, SupabaseService, Table
from petshop.utils.logger import get_logger

logger = get_logger(__name__)
tracer = get_tracer(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReminderDispatcher:
    """Processa a fila de lembretes de email."""

    def __init__(
        self,
        store: SupabaseService,
        appointments: AppointmentWorkflow,
        clients: ClientRepository,
        pets: PetRepository,
        employees: EmployeeRepository,
        services: ServiceRepository,
        transport: EmailTransport,
        signature: str = "Equipe Pet Shop",
        timezone_name: str = "America/Sao_Paulo",
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Inicializa o dispatcher.

        Args:
            store: Banco de dados.
            appointments: Fonte dos agendamentos (com nomes projetados).
            clients: Repositório de clientes.
            pets: Repositório de pets.
            employees: Repositório de funcionários.
            services: Repositório de serviços.
            transport: Transporte de email.
            signature: Assinatura no fim dos emails.
            timezone_name: Fuso usado para decidir o que é "amanhã".
            clock: Relógio injetável (UTC).
        """
        self.store = store
        self.appointments = appointments
        self.clients = clients
        self.pets = pets
        self.employees = employees
        self.services = services
        self.transport = transport
        self.signature = signature
        self.tz = ZoneInfo(timezone_name)
        self.clock = clock

    def today(self) -> date:
        return self.clock().astimezone(self.tz).date()

    async def _details(self, agendamento_id: str) -> AgendamentoDetalhado | None:
        try:
            agendamento = await self.appointments.get(agendamento_id)
        except NotFoundError:
            return None

        return AgendamentoDetalhado(
            agendamento=agendamento,
            cliente=await self.clients.get(agendamento.cliente_id),
            pet=await self.pets.get(agendamento.pet_id),
            funcionario=await self.employees.get(agendamento.funcionario_id),
            servico=await self.services.get(agendamento.servico_id),
        )

    async def _hydrate(self, row: Row) -> LembreteEmail:
        reminder = LembreteEmail.model_validate(row)
        reminder.detalhes = await self._details(reminder.agendamento_id)
        return reminder

    async def get_reminder(self, reminder_id: str) -> LembreteEmail:
        """Lembrete com o agendamento completo.

        Raises:
            NotFoundError: Lembrete inexistente.
        """
        row = await self.store.get(Table.LEMBRETES_EMAIL, reminder_id)
        if row is None:
            raise NotFoundError("Lembrete não encontrado.")
        return await self._hydrate(row)

    async def fetch_pending(self) -> list[LembreteEmail]:
        """Lembretes pendentes e nunca enviados, com o agendamento completo."""
        rows = await self.store.fetch_all(
            Table.LEMBRETES_EMAIL,
            filters={"status": StatusLembrete.PENDENTE.value, "enviado_em": None},
        )
        return [await self._hydrate(row) for row in rows]

    @staticmethod
    def should_send(reminder: LembreteEmail, today: date) -> bool:
        """Confirmações saem sempre; lembretes só na véspera do agendamento."""
        if reminder.tipo == TipoLembrete.CONFIRMACAO:
            return True
        if reminder.detalhes is None:
            return False
        return reminder.detalhes.agendamento.data == today + timedelta(days=1)

    def render(self, reminder: LembreteEmail) -> EmailMessage:
        """Monta assunto e corpo do email.

        Raises:
            InvalidInputError: Agendamento ou cliente ausente.
        """
        detalhes = reminder.detalhes
        if detalhes is None or detalhes.cliente is None:
            raise InvalidInputError("Dados de agendamento incompletos")

        agendamento = detalhes.agendamento
        body = format_template(
            reminder.tipo.value,
            cliente=detalhes.cliente.nome,
            pet=detalhes.pet.nome if detalhes.pet else "",
            servico=detalhes.servico.nome if detalhes.servico else "",
            data=agendamento.data.strftime("%d/%m/%Y"),
            hora=agendamento.hora,
            assinatura=self.signature,
        )
        return EmailMessage(
            to=detalhes.cliente.email,
            subject=get_subject(reminder.tipo.value),
            body=body,
        )

    async def send(self, reminder: LembreteEmail) -> LembreteEmail:
        """Envia o email e marca o lembrete como enviado.

        Raises:
            InvalidInputError: Dados do agendamento incompletos.
            PetShopError: Falha do transporte ou do banco.
        """
        message = self.render(reminder)
        if not await self.transport.send(message):
            raise PetShopError(f"Falha ao enviar email para {message.to}")

        sent_at = self.clock()
        row = await self.store.update(
            Table.LEMBRETES_EMAIL,
            reminder.id,
            {"status": StatusLembrete.ENVIADO.value, "enviado_em": sent_at.isoformat()},
        )

        logger.info(
            "reminder_sent",
            lembrete_id=reminder.id,
            tipo=reminder.tipo.value,
            agendamento_id=reminder.agendamento_id,
            to=message.to,
        )
        if row is None:
            return reminder.model_copy(
                update={"status": StatusLembrete.ENVIADO, "enviado_em": sent_at}
            )
        return LembreteEmail.model_validate({**row, "detalhes": reminder.detalhes})

    async def _mark_failed(self, reminder: LembreteEmail, error: Exception) -> None:
        logger.error(
            "reminder_failed",
            lembrete_id=reminder.id,
            tipo=reminder.tipo.value,
            error=str(error),
        )
        try:
            await self.store.update(
                Table.LEMBRETES_EMAIL, reminder.id, {"status": StatusLembrete.ERRO.value}
            )
        except PetShopError as e:
            logger.error("reminder_mark_failed_error", lembrete_id=reminder.id, error=str(e))

    async def send_one(self, reminder_id: str) -> LembreteEmail:
        """Envia um lembrete específico agora, sem olhar a data do agendamento.

        Raises:
            NotFoundError: Lembrete inexistente.
            InvalidInputError: Lembrete já enviado ou sem dados de agendamento.
        """
        reminder = await self.get_reminder(reminder_id)
        if reminder.status == StatusLembrete.ENVIADO:
            raise InvalidInputError("Este lembrete já foi enviado.")
        return await self.send(reminder)

    async def mark_sent(self, reminder_id: str) -> LembreteEmail:
        """Marca o lembrete como enviado sem disparar email.

        Raises:
            NotFoundError: Lembrete inexistente.
        """
        row = await self.store.update(
            Table.LEMBRETES_EMAIL,
            reminder_id,
            {"status": StatusLembrete.ENVIADO.value, "enviado_em": self.clock().isoformat()},
        )
        if row is None:
            raise NotFoundError("Lembrete não encontrado.")

        logger.info("reminder_marked_sent", lembrete_id=reminder_id)
        return LembreteEmail.model_validate(row)

    async def process_pending(self) -> ReminderRunResult:
        """Uma passada pela fila. Falha em um lembrete não interrompe os demais."""
        with tracer.start_as_current_span("reminders.process_pending") as span:
            today = self.today()
            pending = await self.fetch_pending()
            result = ReminderRunResult()

            for reminder in pending:
                if not self.should_send(reminder, today):
                    result.skipped += 1
                    continue
                try:
                    await self.send(reminder)
                    result.sent += 1
                except Exception as e:
                    await self._mark_failed(reminder, e)
                    result.failed.append(
                        ReminderFailure(
                            lembrete_id=reminder.id, error=getattr(e, "message", str(e))
                        )
                    )

            span.set_attribute("reminders.pending", len(pending))
            span.set_attribute("reminders.sent", result.sent)
            span.set_attribute("reminders.failed", len(result.failed))

            logger.info(
                "reminders_processed",
                pending=len(pending),
                sent=result.sent,
                skipped=result.skipped,
                failed=len(result.failed),
            )
            return result
