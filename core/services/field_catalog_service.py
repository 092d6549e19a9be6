from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

import structlog

from core.exceptions import MalformedResponse, NetworkFailure
from core.ports.pipedrive_client_port import PipedriveClientPort
from core.schemas.entity_kind import EntityKind
from core.schemas.field_schema import FieldDescriptor, LeadLabel
from core.services.fetch_service import has_more_items
from core.utils.schema_utils import validate_many

log = structlog.get_logger(__name__)

CATALOG_PAGE_SIZE = 500
LEAD_LABELS_ENDPOINT = "/leadLabels"


@dataclass
class FieldCatalog:
    standard: List[FieldDescriptor] = field(default_factory=list)
    custom: List[FieldDescriptor] = field(default_factory=list)

    @property
    def all(self) -> List[FieldDescriptor]:
        return [*self.standard, *self.custom]

    def name_map(self) -> Dict[str, str]:
        return {f.key: f.name for f in self.all if f.name}


class FieldCatalogService:
    """Catálogo de campos (padrão + custom) de um tipo de entidade. Sem cache."""

    def __init__(self, client: PipedriveClientPort):
        self.client = client
        self.log = log.bind(service="FieldCatalogService")

    def fetch_catalog(self, entity_kind: EntityKind | str) -> FieldCatalog:
        kind = EntityKind.parse(entity_kind)
        endpoint = kind.fields_endpoint
        run_log = self.log.bind(entity=kind.value, endpoint=endpoint)

        raw_fields: List[Dict[str, Any]] = []
        start = 0
        while True:
            try:
                body = self.client.fetch_page(endpoint, params={"start": start, "limit": CATALOG_PAGE_SIZE})
            except MalformedResponse as exc:
                run_log.warning("Malformed field catalog response – using what was received", error=str(exc))
                break
            except NetworkFailure as exc:
                raise NetworkFailure(
                    f"Failed to retrieve field catalog for {kind.value}: {exc.message}",
                    status_code=exc.status_code,
                    entity_kind=kind.value,
                    phase="catalog",
                ) from exc

            page = body.get("data")
            if not isinstance(page, list) or not page:
                break
            raw_fields.extend(page)
            if not has_more_items(body):
                break
            start += CATALOG_PAGE_SIZE

        catalog = FieldCatalog()
        for descriptor in validate_many(FieldDescriptor, raw_fields, entity=kind.value):
            (catalog.custom if descriptor.is_custom else catalog.standard).append(descriptor)

        run_log.info("Field catalog fetched", standard=len(catalog.standard), custom=len(catalog.custom))
        return catalog

    def fetch_lead_labels(self) -> List[LeadLabel]:
        """Etiquetas de leads (uma chamada, sem paginação)."""
        try:
            body = self.client.fetch_page(LEAD_LABELS_ENDPOINT, params={})
        except MalformedResponse as exc:
            self.log.warning("Malformed lead labels response – label_ids stay as ids", error=str(exc))
            return []
        except NetworkFailure as exc:
            raise NetworkFailure(
                f"Failed to retrieve lead labels: {exc.message}",
                status_code=exc.status_code,
                entity_kind=EntityKind.LEADS.value,
                phase="catalog",
            ) from exc

        data = body.get("data")
        labels = validate_many(LeadLabel, data if isinstance(data, list) else [], entity=EntityKind.LEADS.value)
        self.log.info("Lead labels fetched", labels=len(labels))
        return labels

    @staticmethod
    def name_map(catalog: FieldCatalog) -> Dict[str, str]:
        return catalog.name_map()
