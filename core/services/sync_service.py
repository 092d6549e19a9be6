from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

import structlog
from pydantic import BaseModel

from core.exceptions import ConfigurationError, NetworkFailure
from core.ports.pipedrive_client_port import PipedriveClientPort
from core.ports.status_reporter_port import StatusReporterPort
from core.ports.table_sink_port import TableSinkPort
from core.schemas.column_schema import DiscoveredColumn
from core.schemas.entity_kind import EntityKind
from core.schemas.sync_config import SyncConfig
from core.services.fetch_service import PaginatedFetcher
from core.services.field_catalog_service import FieldCatalogService
from core.services.option_mapping import OptionLabelMapper
from core.services.schema_discovery import SchemaDiscoverer
from core.services.table_projector import TableProjector

log = structlog.get_logger(__name__)


class SyncResult(BaseModel):
    entity_kind:     EntityKind
    filter_id:       Optional[str] = None
    destination:     str
    records_fetched: int = 0
    rows_written:    int = 0
    empty:           bool = False
    notice:          Optional[str] = None
    started_at:      datetime
    finished_at:     Optional[datetime] = None


class SyncService:
    """
    Uma execução completa: catálogo → mapping → fetch → projeção → destino.

    O destino só é tocado depois que fetch e projeção terminam; uma falha de
    rede aborta antes disso e o conteúdo anterior do destino fica intacto.
    """

    def __init__(
        self,
        client: PipedriveClientPort,
        sink: TableSinkPort,
        reporter: Optional[StatusReporterPort] = None,
        fetcher: Optional[PaginatedFetcher] = None,
        catalog_service: Optional[FieldCatalogService] = None,
        projector: Optional[TableProjector] = None,
        discoverer: Optional[SchemaDiscoverer] = None,
    ):
        self.client = client
        self.sink = sink
        self.reporter = reporter
        self.fetcher = fetcher or PaginatedFetcher(client, reporter=reporter)
        self.catalog_service = catalog_service or FieldCatalogService(client)
        self.projector = projector or TableProjector()
        self.discoverer = discoverer or SchemaDiscoverer()
        self.log = log.bind(service="SyncService")

    def run(self, config: SyncConfig) -> SyncResult:
        kind = config.entity_kind
        run_log = self.log.bind(entity=kind.value, filter_id=config.filter_id, destination=config.destination)

        if not config.columns:
            raise ConfigurationError(
                "No columns selected. Choose at least one column before syncing.",
                entity_kind=kind.value,
                filter_id=config.filter_id,
                phase="config",
            )

        result = SyncResult(
            entity_kind=kind,
            filter_id=config.filter_id,
            destination=config.destination,
            started_at=datetime.now(timezone.utc),
        )
        run_log.info("Starting sync run", columns=len(config.columns))

        # 1. catálogo + mapping (sempre do zero)
        catalog = self.catalog_service.fetch_catalog(kind)
        lead_labels = self.catalog_service.fetch_lead_labels() if kind is EntityKind.LEADS else []
        option_mapping = OptionLabelMapper.build(catalog.standard, catalog.custom, lead_labels)

        # 2. registros
        try:
            records = self.fetcher.fetch_all(kind, filter_id=config.filter_id)
        except NetworkFailure as exc:
            run_log.error("Sync aborted; destination left untouched", fetched=len(exc.partial_records), error=str(exc))
            raise

        # 3. projeção
        table = self.projector.project(records, config.columns, option_mapping, entity=kind.value)

        # 4. escrita
        synced_at = datetime.now()
        self.sink.write(config.destination, table.header_row, table.data_rows, synced_at)

        result.records_fetched = len(records)
        result.rows_written = len(table.data_rows)
        result.finished_at = datetime.now(timezone.utc)
        if not records:
            result.empty = True
            result.notice = f"No {kind.value} found with the specified filter."
            run_log.warning(result.notice)
        self._notify(result.notice or f"Synced {result.rows_written} {kind.value} to {config.destination}.", kind)

        run_log.info("Sync run finished", records=result.records_fetched, rows=result.rows_written)
        return result

    def discover(self, entity_kind: EntityKind | str, filter_id: Optional[str] = None) -> List[DiscoveredColumn]:
        """Colunas disponíveis a partir de 1 registro de amostra + catálogo."""
        kind = EntityKind.parse(entity_kind)
        sample = self.fetcher.fetch_all(kind, filter_id=filter_id, limit=1)
        if not sample:
            self.log.info("No sample record; nothing to discover", entity=kind.value, filter_id=filter_id)
            return []
        catalog = self.catalog_service.fetch_catalog(kind)
        return self.discoverer.discover(sample[0], catalog.all)

    def _notify(self, message: str, kind: EntityKind) -> None:
        if self.reporter is None:
            return
        try:
            self.reporter.notify(message, entity=kind.value)
        except Exception as exc:  # noqa: BLE001
            self.log.warning("Status reporter failed", error=str(exc))
