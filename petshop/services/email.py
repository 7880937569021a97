"""Email Transport - Simulated delivery of reminder emails.

No message leaves the process: the transport writes the rendered email to
the structured log and reports success. Any object with an async
``send(message) -> bool`` can replace it.
"""

from typing import Protocol

from petshop.contracts.lembrete import EmailMessage
from petshop.utils.logger import get_logger

logger = get_logger(__name__)


class EmailTransport(Protocol):
    async def send(self, message: EmailMessage) -> bool: ...


class LoggingEmailTransport:
    """Transporte de email simulado (apenas registra no log)."""

    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []

    async def send(self, message: EmailMessage) -> bool:
        """Registra o email como enviado.

        Args:
            message: Email renderizado.

        Returns:
            Sempre True.
        """
        self.sent.append(message)
        logger.info(
            "email_simulated",
            to=message.to,
            subject=message.subject,
            body=message.body,
        )
        return True
