# -*- coding: utf-8 -*-
"""
Funções utilitárias compartilhadas pelos fluxos de sync.

• montagem do SyncService (cliente + destino + reporter)
• métricas de fim de fluxo / push p/ Pushgateway
"""
from __future__ import annotations

import time

from prefect.runtime import flow_run

from core.ports.status_reporter_port import StatusReporterPort
from core.services.sync_service import SyncService
from infrastructure.clients import PipedriveAPIClient
from infrastructure.observability import metrics
from infrastructure.sinks import build_sink


def build_sync_service(reporter: StatusReporterPort | None = None, sink_kind: str | None = None) -> SyncService:
    """Serviço pronto p/ uso, com cliente e destino vindos das settings."""
    client = PipedriveAPIClient()
    return SyncService(client=client, sink=build_sink(sink_kind), reporter=reporter)


def finish_flow_metrics(flow_name: str, start_ts: float, logger) -> None:
    duration = time.time() - start_ts
    metrics.etl_duration_hist.labels(flow_type=flow_name).observe(duration)
    logger.debug("Flow %s took %.2fs", flow_name, duration)

    run_id = getattr(flow_run, "id", "unknown") or "unknown"
    metrics.push_metrics_to_gateway(
        job_name="pipedrive_sync",
        grouping_key={"flow_name": flow_name, "instance": str(run_id)},
    )
