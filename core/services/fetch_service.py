from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog

from core.exceptions import MalformedResponse, NetworkFailure
from core.ports.pipedrive_client_port import PipedriveClientPort
from core.ports.status_reporter_port import StatusReporterPort
from core.schemas.entity_kind import EntityKind
from infrastructure.observability.metrics import (
    pages_fetched_counter,
    records_fetched_counter,
)

log = structlog.get_logger(__name__)

PAGE_SIZE = 100          # máximo por página aceito pela API v1
PROGRESS_EVERY = 500     # notifica a cada N registros acumulados


class PaginatedFetcher:
    """
    Busca todos os registros de um tipo de entidade, página a página.

    • offset `start` avança PAGE_SIZE após cada página bem-sucedida
    • para em página vazia, em `more_items_in_collection` falso ou no `limit`
    • erro de rede → NetworkFailure com o parcial acumulado (sem retry)
    """

    def __init__(
        self,
        client: PipedriveClientPort,
        reporter: Optional[StatusReporterPort] = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.client = client
        self.reporter = reporter
        self.page_size = page_size
        self.log = log.bind(service="PaginatedFetcher")

    def fetch_all(
        self,
        entity_kind: EntityKind | str,
        filter_id: Optional[str | int] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        kind = EntityKind.parse(entity_kind)
        filter_id = None if filter_id in (None, "") else str(filter_id)
        run_log = self.log.bind(entity=kind.value, filter_id=filter_id, limit=limit)

        records: List[Dict[str, Any]] = []
        start = 0
        pages = 0
        next_progress = PROGRESS_EVERY

        run_log.info("Starting paginated fetch")
        while True:
            params: Dict[str, Any] = {"start": start, "limit": self.page_size}
            if filter_id:
                params["filter_id"] = filter_id

            try:
                body = self.client.fetch_page(kind.list_endpoint, params=params)
            except MalformedResponse as exc:
                run_log.warning("Malformed page – treating as empty", start=start, error=str(exc))
                break
            except NetworkFailure as exc:
                run_log.error("Page request failed – aborting fetch", start=start, fetched=len(records), error=str(exc))
                raise NetworkFailure(
                    f"Failed to retrieve {kind.value}: {exc.message}",
                    partial_records=records,
                    status_code=exc.status_code,
                    entity_kind=kind.value,
                    filter_id=filter_id,
                    phase="fetch",
                ) from exc

            page = body.get("data")
            if not isinstance(page, list):
                if page is not None:
                    run_log.warning("Page 'data' is not a list – treating as empty", start=start, data_type=type(page).__name__)
                break
            if not page:
                break

            pages += 1
            records.extend(page)
            pages_fetched_counter.labels(entity=kind.value).inc()
            records_fetched_counter.labels(entity=kind.value).inc(len(page))

            if limit > 0 and len(records) >= limit:
                del records[limit:]
                break

            while len(records) >= next_progress:
                self._notify(f"Retrieved {next_progress} {kind.value} so far...", kind, len(records))
                next_progress += PROGRESS_EVERY

            if not has_more_items(body):
                break
            start += self.page_size

        run_log.info("Finished paginated fetch", records=len(records), pages=pages)
        return records

    def _notify(self, message: str, kind: EntityKind, count: int) -> None:
        if self.reporter is None:
            return
        try:
            self.reporter.notify(message, entity=kind.value, fetched=count)
        except Exception as exc:  # noqa: BLE001
            # progresso nunca interfere no fluxo principal
            self.log.warning("Status reporter failed", error=str(exc))


def has_more_items(body: Dict[str, Any]) -> bool:
    additional = body.get("additional_data")
    if not isinstance(additional, dict):
        return False
    pagination = additional.get("pagination")
    if not isinstance(pagination, dict):
        return False
    return bool(pagination.get("more_items_in_collection"))
