from __future__ import annotations

from enum import Enum


class EntityKind(str, Enum):
    """Tipos de entidade suportados (valor = segmento da rota de listagem)."""

    DEALS = "deals"
    PERSONS = "persons"
    ORGANIZATIONS = "organizations"
    ACTIVITIES = "activities"
    LEADS = "leads"
    PRODUCTS = "products"

    @property
    def list_endpoint(self) -> str:
        return f"/{self.value}"

    @property
    def fields_endpoint(self) -> str:
        return _FIELDS_ENDPOINTS[self]

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, raw: "str | EntityKind") -> "EntityKind":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unsupported entity kind {raw!r}; expected one of "
                f"{', '.join(k.value for k in cls)}"
            ) from None


# leads não têm catálogo próprio: herdam os campos de deals
_FIELDS_ENDPOINTS = {
    EntityKind.DEALS: "/dealFields",
    EntityKind.PERSONS: "/personFields",
    EntityKind.ORGANIZATIONS: "/organizationFields",
    EntityKind.ACTIVITIES: "/activityFields",
    EntityKind.LEADS: "/dealFields",
    EntityKind.PRODUCTS: "/productFields",
}

_LABELS = {
    EntityKind.DEALS: "Deals",
    EntityKind.PERSONS: "Contacts",
    EntityKind.ORGANIZATIONS: "Organizations",
    EntityKind.ACTIVITIES: "Activities",
    EntityKind.LEADS: "Leads",
    EntityKind.PRODUCTS: "Products",
}
