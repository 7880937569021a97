"""Dependências do Aplicativo.

Este módulo monta os repositórios e serviços de domínio sobre um único
``SupabaseService``. Os handlers recebem o contêiner por injeção, o que
permite trocar o banco e o Redis por dublês nos testes.
"""

from dataclasses import dataclass

from petshop.config.settings import Settings
from petshop.core.appointments import AppointmentWorkflow
from petshop.core.auth import AuthService
from petshop.core.ledger import VisitLedger
from petshop.core.reminders import ReminderDispatcher
from petshop.core.repository import (
    ClientRepository,
    EmployeeRepository,
    PetRepository,
    ProductRepository,
    ServiceRepository,
)
from petshop.core.slots import SlotAllocator
from petshop.services.email import EmailTransport, LoggingEmailTransport
from petshop.services.sessions import SessionManager
from petshop.services.supabase import SupabaseService


@dataclass
class AppDependencies:
    """Dependências compartilhadas pelos handlers.

    Attributes:
        store: Serviço do Supabase para banco de dados.
        settings: Configurações carregadas.
        sessions: Sessões de login (Redis).
        clients/pets/employees/services/products: Repositórios com cache.
        slots: Alocador de horários.
        appointments: Fluxo de agendamentos.
        ledger: Itens e totais dos atendimentos.
        reminders: Fila de lembretes por email.
        auth: Login e senhas.
    """

    store: SupabaseService
    settings: Settings
    sessions: SessionManager
    clients: ClientRepository
    pets: PetRepository
    employees: EmployeeRepository
    services: ServiceRepository
    products: ProductRepository
    slots: SlotAllocator
    appointments: AppointmentWorkflow
    ledger: VisitLedger
    reminders: ReminderDispatcher
    auth: AuthService


def build_dependencies(
    store: SupabaseService,
    settings: Settings,
    sessions: SessionManager | None = None,
    transport: EmailTransport | None = None,
) -> AppDependencies:
    """Monta o grafo de dependências.

    Args:
        store: Banco de dados.
        settings: Configurações.
        sessions: Gerenciador de sessões; criado a partir das settings se omitido.
        transport: Transporte de email; simulado (log) se omitido.

    Returns:
        AppDependencies pronto para uso.
    """
    enforce = settings.enforce_status_transitions

    clients = ClientRepository(store)
    pets = PetRepository(store, clients)
    employees = EmployeeRepository(store)
    services = ServiceRepository(store)
    products = ProductRepository(store)

    slots = SlotAllocator(store, employees)
    appointments = AppointmentWorkflow(
        store, clients, pets, employees, services, slots, enforce_status_transitions=enforce
    )
    ledger = VisitLedger(
        store, clients, pets, employees, services, products, enforce_status_transitions=enforce
    )
    reminders = ReminderDispatcher(
        store,
        appointments,
        clients,
        pets,
        employees,
        services,
        transport or LoggingEmailTransport(),
        signature=settings.business_name,
        timezone_name=settings.reminder_timezone,
    )

    return AppDependencies(
        store=store,
        settings=settings,
        sessions=sessions
        or SessionManager(settings.redis_url, ttl_seconds=settings.session_ttl_seconds),
        clients=clients,
        pets=pets,
        employees=employees,
        services=services,
        products=products,
        slots=slots,
        appointments=appointments,
        ledger=ledger,
        reminders=reminders,
        auth=AuthService(store, employees),
    )
