"""Métricas Prometheus do motor de sync (registry padrão do processo)."""
import structlog
from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    push_to_gateway,
)

from infrastructure.config.settings import settings

log = structlog.get_logger(__name__)

# ───────────────────── API Pipedrive
pipedrive_api_call_total = Counter(
    "pipedrive_api_call_total",
    "Total de chamadas à API Pipedrive",
    ["endpoint", "method", "status_code"],
)
api_errors_counter = Counter(
    "pipedrive_api_errors_total",
    "Erros em chamadas à API Pipedrive",
    ["endpoint", "error_type", "status_code"],
)
api_request_duration_hist = Histogram(
    "pipedrive_api_request_duration_seconds",
    "Duração das requisições à API Pipedrive",
    ["endpoint", "method", "status_code"],
)
pipedrive_api_breaker_open_total = Counter(
    "pipedrive_api_breaker_open_total",
    "Vezes que o circuit breaker abriu",
)
pipedrive_api_malformed_response_total = Counter(
    "pipedrive_api_malformed_response_total",
    "Respostas sem o formato success/data esperado",
    ["endpoint"],
)

# ───────────────────── Fetch / projeção / escrita
records_fetched_counter = Counter(
    "sync_records_fetched_total",
    "Registros recebidos da API",
    ["entity"],
)
pages_fetched_counter = Counter(
    "sync_pages_fetched_total",
    "Páginas recebidas da API",
    ["entity"],
)
rows_written_counter = Counter(
    "sync_rows_written_total",
    "Linhas escritas no destino",
    ["sink"],
)
projection_duration_hist = Histogram(
    "sync_projection_duration_seconds",
    "Tempo gasto projetando registros em linhas",
    ["entity"],
)

# ───────────────────── Flow
etl_counter = Counter(
    "sync_runs_total",
    "Execuções de sync iniciadas",
    ["flow_type"],
)
etl_failure_counter = Counter(
    "sync_failures_total",
    "Execuções de sync com falha",
    ["flow_type", "error_type"],
)
etl_duration_hist = Histogram(
    "sync_duration_seconds",
    "Duração total de uma execução",
    ["flow_type"],
)
etl_last_successful_run_timestamp = Gauge(
    "sync_last_successful_run_timestamp",
    "Timestamp da última execução bem-sucedida",
    ["flow_type"],
)


def push_metrics_to_gateway(job_name: str, grouping_key: dict | None = None) -> None:
    """Empurra o registry p/ o Pushgateway, se configurado. Nunca propaga erro."""
    address = settings.PUSHGATEWAY_ADDRESS
    if not address:
        return
    try:
        push_to_gateway(address, job=job_name, registry=REGISTRY, grouping_key=grouping_key or {})
        log.debug("Metrics pushed", gateway=address, job=job_name)
    except Exception as exc:  # noqa: BLE001
        log.warning("Failed to push metrics to gateway", gateway=address, error=str(exc))
