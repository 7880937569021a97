"""Availability Generator - Discrete booking slots for a working window."""

from petshop.core.errors import InvalidInputError


def parse_hhmm(value: str) -> int:
    """Converte ``HH:MM`` em minutos desde a meia-noite.

    Raises:
        InvalidInputError: Se o texto não for um horário válido.
    """
    parts = value.strip().split(":") if isinstance(value, str) else []
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise InvalidInputError(f"Horário inválido: {value!r} (use HH:MM)")

    hours, minutes = int(parts[0]), int(parts[1])
    if hours > 23 or minutes > 59:
        raise InvalidInputError(f"Horário inválido: {value!r} (use HH:MM)")
    return hours * 60 + minutes


def format_hhmm(total_minutes: int) -> str:
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def generate_time_slots(start: str, end: str, interval_minutes: int) -> list[str]:
    """Gera os horários de ``start`` (inclusive) até ``end`` (exclusive).

    Janela vazia ou invertida e intervalo não positivo resultam em lista vazia.

    Args:
        start: Início no formato HH:MM.
        end: Fim no formato HH:MM.
        interval_minutes: Passo entre horários, em minutos.

    Returns:
        Horários ordenados no formato HH:MM.

    Example:
        >>> generate_time_slots("09:00", "10:00", 30)
        ['09:00', '09:30']
    """
    start_minutes = parse_hhmm(start)
    end_minutes = parse_hhmm(end)

    if interval_minutes <= 0 or start_minutes >= end_minutes:
        return []

    return [
        format_hhmm(minute)
        for minute in range(start_minutes, end_minutes, interval_minutes)
    ]
