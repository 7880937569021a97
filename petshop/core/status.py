"""Status Transitions - Optional lifecycle rules for visits and appointments."""

from petshop.contracts.atendimento import Status
from petshop.core.errors import InvalidInputError

# Valid status transitions (used only when enforcement is enabled)
VALID_TRANSITIONS: dict[Status, list[Status]] = {
    Status.AGENDADO: [Status.EM_ANDAMENTO, Status.CANCELADO],
    Status.EM_ANDAMENTO: [
        Status.CONCLUIDO,
        Status.CANCELADO,
        Status.AGENDADO,  # Allow going back
    ],
    Status.CONCLUIDO: [],  # Terminal state
    Status.CANCELADO: [],  # Terminal state
}

STATUS_LABELS: dict[Status, str] = {
    Status.AGENDADO: "Agendado",
    Status.EM_ANDAMENTO: "Em Andamento",
    Status.CONCLUIDO: "Concluído",
    Status.CANCELADO: "Cancelado",
}


def can_transition(current: Status, next_status: Status) -> bool:
    """Valida se a transição é permitida pela tabela.

    Manter o mesmo status é sempre permitido.
    """
    if current == next_status:
        return True
    return next_status in VALID_TRANSITIONS.get(current, [])


def check_transition(current: Status, next_status: Status, enforce: bool) -> None:
    """Levanta erro para transição ilegal quando a regra está ativa.

    Args:
        current: Status gravado.
        next_status: Status pedido.
        enforce: Se False, qualquer status pode virar qualquer outro.

    Raises:
        InvalidInputError: Se ``enforce`` e a transição não for permitida.
    """
    if enforce and not can_transition(current, next_status):
        raise InvalidInputError(
            f"Transição inválida: {STATUS_LABELS[current]} -> {STATUS_LABELS[next_status]}"
        )
