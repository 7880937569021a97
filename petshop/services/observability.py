"""Observability - Tracing OpenTelemetry da API e da fila de lembretes."""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from petshop import __version__
from petshop.config.settings import get_settings
from petshop.utils.logger import get_logger

logger = get_logger(__name__)


def setup_tracing(service_name: str = "petshop-admin") -> None:
    """Instala o TracerProvider global exportando via OTLP/HTTP.

    Não faz nada com ``enable_tracing`` desligado. Falha na configuração
    só gera log; a aplicação sobe sem tracing.

    Args:
        service_name: Nome do serviço nos spans.
    """
    settings = get_settings()
    if not settings.enable_tracing:
        logger.info("tracing_disabled")
        return

    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": service_name,
                "service.version": __version__,
                "deployment.environment": settings.app_env,
            }
        )
    )

    try:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otlp_endpoint))
        )
        trace.set_tracer_provider(provider)
    except Exception as e:
        logger.warning("tracing_setup_failed", error=str(e))
        return

    logger.info(
        "tracing_configured",
        service_name=service_name,
        otlp_endpoint=settings.otlp_endpoint,
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Gera um span por requisição HTTP quando o tracing está ligado."""
    if not get_settings().enable_tracing:
        return

    try:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("fastapi_instrumented")
    except Exception as e:
        logger.warning("fastapi_instrumentation_failed", error=str(e))


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)


def get_current_trace_id() -> str | None:
    """Trace ID do span corrente (hex), para correlacionar logs de erro."""
    context = trace.get_current_span().get_span_context()
    if context.is_valid:
        return format(context.trace_id, "032x")
    return None
