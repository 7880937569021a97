"""Email Templates - Subjects and bodies for appointment reminders.

Templates are keyed by reminder kind (``confirmacao`` / ``lembrete``) and
filled with the appointment data:
- {cliente}, {pet}, {servico}
- {data} (dd/mm/yyyy) and {hora} (HH:MM)
- {assinatura}: business signature from settings
"""

from typing import Any

# Email subjects by reminder kind
SUBJECTS: dict[str, str] = {
    "confirmacao": "Confirmação de Agendamento",
    "lembrete": "Lembrete de Consulta",
}

# Email bodies by reminder kind
TEMPLATES: dict[str, str] = {
    "confirmacao": (
        "Olá {cliente},\n\n"
        "Seu agendamento para {servico} com o pet {pet} foi confirmado "
        "para o dia {data} às {hora}.\n\n"
        "Caso precise cancelar ou reagendar, entre em contato conosco.\n\n"
        "Atenciosamente,\n"
        "{assinatura}"
    ),
    "lembrete": (
        "Olá {cliente},\n\n"
        "Lembramos que você tem um agendamento amanhã ({data}) às {hora} "
        "para {servico} com o pet {pet}.\n\n"
        "Estamos aguardando você!\n\n"
        "Atenciosamente,\n"
        "{assinatura}"
    ),
}


def get_template(template_key: str) -> str:
    """Get a body template by reminder kind.

    Raises:
        KeyError: Unknown reminder kind.
    """
    return TEMPLATES[template_key]


def get_subject(template_key: str) -> str:
    return SUBJECTS[template_key]


def format_template(template_key: str, **context: Any) -> str:
    """Format a template with context data.

    Args:
        template_key: Reminder kind.
        **context: Data to fill placeholders. Missing values render empty.

    Returns:
        Formatted email body.
    """
    template = get_template(template_key)
    return template.format_map(_EmptyDefault(context))


class _EmptyDefault(dict):
    def __missing__(self, key: str) -> str:
        return ""
