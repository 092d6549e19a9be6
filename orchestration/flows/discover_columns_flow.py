"""Prefect 2 – Descoberta das colunas disponíveis de uma entidade"""
from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from prefect import flow, get_run_logger

from core.schemas.entity_kind import EntityKind
from core.services.filter_service import FilterService
from infrastructure.observability import configure_logging, metrics
from infrastructure.status import RunLoggerStatusReporter
from orchestration.common import build_sync_service, finish_flow_metrics


@flow(name="Discover Pipedrive Columns")
def discover_pipedrive_columns_flow(
    entity_kind: str,
    filter_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Amostra 1 registro + catálogo e devolve as colunas selecionáveis, junto
    com os filtros salvos daquele tipo de entidade.
    """
    configure_logging()
    log   = get_run_logger()
    label = "ColumnDiscovery"
    start = time.time()

    metrics.etl_counter.labels(flow_type=label).inc()
    kind = EntityKind.parse(entity_kind)

    try:
        service = build_sync_service(reporter=RunLoggerStatusReporter(log))
        columns: List[Dict[str, Any]] = [
            c.model_dump() for c in service.discover(kind, filter_id=filter_id)
        ]
        if not columns:
            log.warning("No %s found with the specified filter.", kind.value)

        filters = [
            {"id": f.id, "name": f.name, "type": f.type_formatted}
            for f in FilterService(service.client).filters_for(kind)
        ]
        log.info("✔ %s: %d colunas, %d filtros", kind.label, len(columns), len(filters))

        metrics.etl_last_successful_run_timestamp.labels(flow_type=label).set_to_current_time()
        return {"entity_kind": kind.value, "columns": columns, "filters": filters}

    except Exception as exc:
        metrics.etl_failure_counter.labels(flow_type=label, error_type=type(exc).__name__).inc()
        log.exception("Column discovery failed")
        raise

    finally:
        finish_flow_metrics(label, start, log)
