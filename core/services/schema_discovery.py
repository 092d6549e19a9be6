from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

import structlog

from core.schemas.column_schema import DiscoveredColumn
from core.schemas.field_schema import FieldDescriptor
from core.utils.column_utils import format_column_name

log = structlog.get_logger(__name__)

MAX_DISCOVERY_DEPTH = 8
RESERVED_PREFIX = "_"
CUSTOM_FIELDS_CONTAINER = "custom_fields"
# objeto aninhado com um destes campos é tratado como referência a pessoa/org
REFERENCE_MARKERS = ("email", "phone", "address")
# metadados da API que não servem como coluna
METADATA_KEYS = frozenset({"first_char", "visible_to", "visible_from", "in_visible_list", "im"})
# chave custom da API v2 sem nome no catálogo (hash de 40 hex)
HASH_KEY_RE = re.compile(r"[a-f0-9]{20,}", re.IGNORECASE)

ADDRESS_COMPONENTS = (
    ("street_number", "Street Number"),
    ("route", "Street"),
    ("subpremise", "Apartment/Suite"),
    ("sublocality", "District/Borough"),
    ("locality", "City"),
    ("admin_area_level_1", "State/Province"),
    ("admin_area_level_2", "County"),
    ("country", "Country"),
    ("postal_code", "ZIP/Postal Code"),
)


@dataclass
class _Discovery:
    """Estado de uma única chamada a `discover`."""
    names: Dict[str, str]
    columns: List[DiscoveredColumn] = field(default_factory=list)
    seen: Set[str] = field(default_factory=set)

    def add(self, key: str, name: str, is_nested: bool = True, parent_key: Optional[str] = None) -> None:
        # primeira ocorrência vence (ex.: coluna de topo x "Multiple Options")
        if key in self.seen:
            return
        self.seen.add(key)
        self.columns.append(
            DiscoveredColumn(key=key, name=name, is_nested=is_nested, parent_key=parent_key)
        )


class SchemaDiscoverer:
    """
    Enumera as colunas endereçáveis de um registro de amostra.

    Só alimenta a seleção de colunas; a escrita usa exclusivamente ColumnSpec.
    Arrays inspecionam apenas o elemento 0 e a recursão para em `max_depth`.
    Sem estado entre chamadas.
    """

    def __init__(self, max_depth: int = MAX_DISCOVERY_DEPTH):
        self.max_depth = max_depth
        self.log = log.bind(service="SchemaDiscoverer")

    def discover(
        self,
        sample_record: Optional[Mapping[str, Any]],
        field_descriptors: Iterable[FieldDescriptor | Mapping[str, Any]] = (),
    ) -> List[DiscoveredColumn]:
        if not sample_record:
            return []

        acc = _Discovery(names=_name_map(field_descriptors))
        for key, value in sample_record.items():
            if _skipped(key):
                continue
            display = acc.names.get(key) or format_column_name(key)
            acc.add(key, display, is_nested=False)
            if key == CUSTOM_FIELDS_CONTAINER and isinstance(value, dict):
                self._walk_custom_fields(acc, value, depth=1)
            elif isinstance(value, (dict, list)):
                self._walk(acc, value, key, display, depth=1)

        self.log.debug("Schema discovered", columns=len(acc.columns))
        return acc.columns

    # ───────────────────── walking
    def _walk(self, acc: _Discovery, obj: Any, parent_path: str, parent_name: str, depth: int) -> None:
        if depth > self.max_depth:
            self.log.debug("Max discovery depth reached", path=parent_path)
            return
        if isinstance(obj, list):
            self._walk_list(acc, obj, parent_path, parent_name, depth)
        elif isinstance(obj, dict):
            self._walk_dict(acc, obj, parent_path, parent_name, depth)

    def _walk_list(self, acc: _Discovery, items: List[Any], parent_path: str, parent_name: str, depth: int) -> None:
        if not items or not isinstance(items[0], dict):
            return
        first = items[0]

        if "label" in first and "id" in first:
            parent_key = parent_path.rsplit(".", 1)[0] if "." in parent_path else None
            acc.add(parent_path, f"{parent_name} (Multiple Options)", parent_key=parent_key)
            return

        if "value" in first and "primary" in first:
            name = f"Primary {parent_name or 'Item'}"
            if first.get("label"):
                name = f"{name} ({first['label']})"
            acc.add(f"{parent_path}.0.value", name, parent_key=parent_path)
            return

        self._walk(acc, first, f"{parent_path}.0", f"{parent_name} (First Item)", depth + 1)

    def _walk_dict(self, acc: _Discovery, obj: Dict[str, Any], parent_path: str, parent_name: str, depth: int) -> None:
        is_reference = any(marker in obj for marker in REFERENCE_MARKERS)

        for key, value in obj.items():
            if _skipped(key):
                continue
            path = f"{parent_path}.{key}"

            if key == "name" and is_reference:
                acc.add(path, f"{parent_name or parent_path} Name", parent_key=parent_path)
                continue

            name = f"{parent_name} {format_column_name(key)}" if parent_name else format_column_name(key)
            if isinstance(value, (dict, list)):
                self._walk(acc, value, path, name, depth + 1)
            else:
                acc.add(path, name, parent_key=parent_path)

    # ───────────────────── custom fields (v2)
    def _walk_custom_fields(self, acc: _Discovery, fields: Dict[str, Any], depth: int) -> None:
        """Campos custom nomeados pelo catálogo e pelo formato do valor."""
        for key, value in fields.items():
            if _skipped(key):
                continue
            path = f"{CUSTOM_FIELDS_CONTAINER}.{key}"
            display = acc.names.get(key) or _unnamed_custom_field(key, value)

            if not isinstance(value, dict):
                acc.add(path, display, parent_key=CUSTOM_FIELDS_CONTAINER)
                if isinstance(value, list):
                    self._walk(acc, value, path, display, depth + 1)
                continue

            shape = _custom_shape(value)
            if shape == "currency":
                acc.add(path, f"{display} (Currency)", parent_key=CUSTOM_FIELDS_CONTAINER)
            elif shape == "range":
                acc.add(path, f"{display} (Range)", parent_key=CUSTOM_FIELDS_CONTAINER)
            elif shape == "address":
                acc.add(path, f"{display} (Address)", parent_key=CUSTOM_FIELDS_CONTAINER)
                acc.add(f"{path}.formatted_address", f"{display} (Formatted Address)", parent_key=path)
                for component, label in ADDRESS_COMPONENTS:
                    if component in value:
                        acc.add(f"{path}.{component}", f"{display} ({label})", parent_key=path)
            else:
                acc.add(path, display, parent_key=CUSTOM_FIELDS_CONTAINER)
                self._walk(acc, value, path, display, depth + 1)


def _skipped(key: str) -> bool:
    return key.startswith(RESERVED_PREFIX) or key in METADATA_KEYS


def _custom_shape(value: Mapping[str, Any]) -> Optional[str]:
    if "value" not in value:
        return None
    if "currency" in value:
        return "currency"
    if "until" in value:
        return "range"
    if "formatted_address" in value:
        return "address"
    return None


def _unnamed_custom_field(key: str, value: Any) -> str:
    if not HASH_KEY_RE.fullmatch(key):
        return format_column_name(key)
    shape = _custom_shape(value) if isinstance(value, dict) else None
    return {
        "currency": "Currency Field",
        "address": "Address Field",
        "range": "Date Range Field",
    }.get(shape, "Custom Field")


def _name_map(descriptors: Iterable[FieldDescriptor | Mapping[str, Any]]) -> Dict[str, str]:
    names: Dict[str, str] = {}
    for d in descriptors or ():
        if isinstance(d, FieldDescriptor):
            key, name = d.key, d.name
        else:
            key, name = d.get("key"), d.get("name")
        if key and name:
            names[key] = name
    return names
