"""Reminder Job - One pass over the pending email queue.

Meant to be scheduled (cron) once or twice a day:
    python -m petshop.scripts.process_reminders
"""

import asyncio
import sys

from dotenv import load_dotenv

from petshop.config.settings import get_settings
from petshop.core.dependencies import build_dependencies
from petshop.services.observability import setup_tracing
from petshop.services.supabase import get_supabase_service
from petshop.utils.logger import get_logger, setup_logging

load_dotenv()

logger = get_logger(__name__)


async def run() -> int:
    """Processa a fila e devolve o código de saída (1 se algum lembrete falhou)."""
    settings = get_settings()
    setup_logging(settings.log_level)
    setup_tracing(service_name="petshop-reminders")

    deps = build_dependencies(get_supabase_service(), settings)
    result = await deps.reminders.process_pending()

    print(f"[OK] {result.sent} sent, {result.skipped} skipped, {len(result.failed)} failed.")
    for failure in result.failed:
        print(f"   - [{failure.lembrete_id}] {failure.error}")

    return 1 if result.failed else 0


def main() -> None:
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
