"""Prefect 2 – Sync de uma entidade Pipedrive ➜ tabela (Excel / Postgres)"""
from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from prefect import flow, get_run_logger

from core.exceptions import PipeSyncError
from infrastructure.config import load_sync_config
from infrastructure.observability import configure_logging, metrics
from infrastructure.status import RunLoggerStatusReporter
from orchestration.common import build_sync_service, finish_flow_metrics, run_with_retries


@flow(name="Sync Pipedrive Entity")
def sync_pipedrive_entity_flow(
    config_path: Optional[str] = None,
    entity_kind: Optional[str] = None,
    filter_id: Optional[str] = None,
    columns: Optional[List[Dict[str, str]]] = None,
    table_name: Optional[str] = None,
    sink: Optional[str] = None,
) -> Dict[str, Any]:
    configure_logging()
    log   = get_run_logger()
    label = "EntitySync"
    start = time.time()

    metrics.etl_counter.labels(flow_type=label).inc()

    try:
        config = load_sync_config(
            config_path,
            overrides={
                "entity_kind": entity_kind,
                "filter_id": filter_id,
                "columns": columns,
                "table_name": table_name,
            },
        )
        log.info("sync → %s (filter=%s, columns=%d, destination=%s)",
                 config.entity_kind.value, config.filter_id or "-",
                 len(config.columns), config.destination)

        service = build_sync_service(reporter=RunLoggerStatusReporter(log), sink_kind=sink)
        result = run_with_retries(lambda: service.run(config))

        if result.notice:
            log.warning(result.notice)
        log.info("✔ %s finished – %s linhas", config.entity_kind.label, result.rows_written)

        metrics.etl_last_successful_run_timestamp.labels(flow_type=label).set_to_current_time()
        return result.model_dump(mode="json")

    except PipeSyncError as exc:
        metrics.etl_failure_counter.labels(flow_type=label, error_type=type(exc).__name__).inc()
        log.exception("Entity sync failed: %s", exc)
        raise
    except Exception as exc:
        metrics.etl_failure_counter.labels(flow_type=label, error_type=type(exc).__name__).inc()
        log.exception("Entity sync failed unexpectedly")
        raise

    finally:
        finish_flow_metrics(label, start, log)
