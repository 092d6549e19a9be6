from __future__ import annotations

from typing import List, Optional

import structlog

from core.exceptions import MalformedResponse, NetworkFailure
from core.ports.pipedrive_client_port import PipedriveClientPort
from core.schemas.entity_kind import EntityKind
from core.schemas.filter_schema import Filter
from core.utils.schema_utils import validate_many

log = structlog.get_logger(__name__)

FILTERS_ENDPOINT = "/filters"

_NORMALIZED = {
    "deals": EntityKind.DEALS,
    "person": EntityKind.PERSONS,
    "people": EntityKind.PERSONS,
    "persons": EntityKind.PERSONS,
    "org": EntityKind.ORGANIZATIONS,
    "organization": EntityKind.ORGANIZATIONS,
    "organizations": EntityKind.ORGANIZATIONS,
    "product": EntityKind.PRODUCTS,
    "products": EntityKind.PRODUCTS,
    "activity": EntityKind.ACTIVITIES,
    "activities": EntityKind.ACTIVITIES,
    "lead": EntityKind.LEADS,
    "leads": EntityKind.LEADS,
}


def normalize_filter_type(filter_type: Optional[str]) -> str:
    """Tipo do filtro na API → valor de EntityKind (ou o próprio tipo em minúsculas)."""
    if not filter_type:
        return ""
    lowered = filter_type.lower()
    kind = _NORMALIZED.get(lowered)
    if kind is None:
        log.debug("Unknown filter type", filter_type=filter_type)
        return lowered
    return kind.value


def format_filter_type(filter_type: Optional[str]) -> str:
    """Rótulo legível: `person` → `Contacts`, `org` → `Organizations`."""
    if not filter_type:
        return ""
    kind = _NORMALIZED.get(filter_type.lower())
    if kind is not None:
        return kind.label
    return filter_type[:1].upper() + filter_type[1:]


class FilterService:
    """Filtros salvos no Pipedrive, opcionalmente restritos a um tipo de entidade."""

    def __init__(self, client: PipedriveClientPort):
        self.client = client
        self.log = log.bind(service="FilterService")

    def list_filters(self) -> List[Filter]:
        try:
            body = self.client.fetch_page(FILTERS_ENDPOINT, params={})
        except MalformedResponse as exc:
            self.log.warning("Malformed filters response – no filters", error=str(exc))
            return []
        except NetworkFailure as exc:
            raise NetworkFailure(
                f"Failed to retrieve filters: {exc.message}",
                status_code=exc.status_code,
                phase="filters",
            ) from exc

        data = body.get("data")
        if not isinstance(data, list):
            return []

        filters = validate_many(Filter, data, endpoint=FILTERS_ENDPOINT)
        for item in filters:
            item.type_formatted = format_filter_type(item.type)
            item.normalized_type = normalize_filter_type(item.type)

        self.log.info("Filters fetched", count=len(filters))
        return filters

    def filters_for(self, entity_kind: EntityKind | str) -> List[Filter]:
        kind = EntityKind.parse(entity_kind)
        matched = [f for f in self.list_filters() if f.normalized_type == kind.value]
        self.log.debug("Filters matched entity kind", entity=kind.value, count=len(matched))
        return matched
