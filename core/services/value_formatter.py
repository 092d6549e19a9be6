"""
Conversão de um valor bruto (já resolvido) para o texto exibido na tabela.

Regras, na ordem:
    1. ABSENT / None                       → ""
    2. "3,7,12" (códigos de opção)         → labels via OptionMapping
       (API v2: número / lista de números em custom_fields.* também)
    2b. regras por caminho / formato:
        address.<componente>               → o componente ("Apt/Suite: x" p/ subpremise)
        email / phone (lista de contatos)  → valor do primário, senão o primeiro
        custom_fields.* com "value"        → "v - until" / formatted_address / value
        custom_fields.* lista de escalares → itens unidos por ", "
        label_ids (leads)                  → nomes das etiquetas
        prices (produtos)                  → "price" ou "price (cost: c)", unidos por "; "
        participants (atividades)          → person_id unidos por ","
    3. [{"label": ...}, ...]               → labels unidos por ", "
    4. {"label": ...}                      → label
    5. {"name": ...}                       → name
    6. {"value": ..., "currency": ...}     → "<value> <currency>"
    7. outro dict / list                   → JSON compacto
    8. bool                                → "Yes" / "No"
    9. resto                               → texto simples

A regra 2 é heurística: um texto legítimo feito só de dígitos e vírgulas, num
campo que tenha opções, é convertido do mesmo jeito.
"""
from __future__ import annotations

import json
import math
import re
from typing import Any, List, Mapping, Optional

from core.services.option_mapping import LEAD_LABELS_KEY
from core.utils.value_kind import ValueKind, kind_of

OPTION_CODES_RE = re.compile(r"[0-9]+(,[0-9]+)*")
CUSTOM_FIELDS_PREFIX = "custom_fields."
ADDRESS_PREFIX = "address."
CONTACT_FIELDS = ("email", "phone")
LIST_SEPARATOR = ", "
PRICE_SEPARATOR = "; "
PARTICIPANT_SEPARATOR = ","


class ValueFormatter:

    @classmethod
    def format(
        cls,
        value: Any,
        path: str,
        option_mapping: Optional[Mapping[str, Mapping[str, str]]] = None,
    ) -> str:
        option_mapping = option_mapping or {}
        kind = kind_of(value)

        if kind in (ValueKind.ABSENT, ValueKind.NULL):
            return ""

        # fullmatch: "1,2\n" não é lista de códigos
        if kind is ValueKind.STRING and OPTION_CODES_RE.fullmatch(value):
            labels = _field_labels(path, option_mapping)
            if labels is not None:
                return LIST_SEPARATOR.join(labels.get(code, code) for code in value.split(","))

        # custom_fields da API v2 trazem os códigos como número ou lista de números
        if path.startswith(CUSTOM_FIELDS_PREFIX):
            codes = _numeric_codes(value, kind)
            if codes is not None:
                labels = _field_labels(path, option_mapping)
                if labels is not None:
                    return LIST_SEPARATOR.join(labels.get(code, code) for code in codes)

        text = _by_path(value, kind, path, option_mapping)
        if text is not None:
            return text

        if kind is ValueKind.ARRAY and value and isinstance(value[0], dict) and "label" in value[0]:
            return LIST_SEPARATOR.join(_plain(item.get("label")) if isinstance(item, dict) else _plain(item) for item in value)

        if kind is ValueKind.OBJECT:
            if "label" in value:
                return _plain(value["label"])
            if "name" in value:
                return _plain(value["name"])
            if "currency" in value and "value" in value:
                return f"{_plain(value['value'])} {_plain(value['currency'])}"

        if kind in (ValueKind.OBJECT, ValueKind.ARRAY):
            return _json(value)

        if kind is ValueKind.BOOL:
            return "Yes" if value else "No"

        return _plain(value)


def field_key_for(path: str) -> str:
    """`custom_fields.abc.x` → `abc`; `stage_id` → `stage_id`."""
    segments = path.split(".")
    if path.startswith(CUSTOM_FIELDS_PREFIX) and len(segments) > 1:
        return segments[1]
    return segments[0]


def _field_labels(path: str, option_mapping: Mapping[str, Mapping[str, str]]) -> Optional[Mapping[str, str]]:
    return option_mapping.get(field_key_for(path))


def _numeric_codes(value: Any, kind: ValueKind) -> Optional[List[str]]:
    if kind is ValueKind.NUMBER:
        return [_plain(value)]
    if kind is ValueKind.ARRAY and value and all(kind_of(v) is ValueKind.NUMBER for v in value):
        return [_plain(v) for v in value]
    return None


# ───────────────────── regras por caminho
def _by_path(
    value: Any,
    kind: ValueKind,
    path: str,
    option_mapping: Mapping[str, Mapping[str, str]],
) -> Optional[str]:
    """Formatos que dependem do campo; None = segue para as regras genéricas."""
    if path.startswith(ADDRESS_PREFIX):
        return _address_component(value, kind, path.split(".")[1])

    if path in CONTACT_FIELDS and kind is ValueKind.ARRAY:
        return _primary_contact(value)

    if path.startswith(CUSTOM_FIELDS_PREFIX):
        if kind is ValueKind.OBJECT and "value" in value:
            return _custom_field_object(value)
        if kind is ValueKind.ARRAY and all(kind_of(v) in (ValueKind.STRING, ValueKind.NUMBER) for v in value):
            labels = _field_labels(path, option_mapping) or {}
            return LIST_SEPARATOR.join(labels.get(_plain(v), _plain(v)) for v in value)
        return None

    if kind is not ValueKind.ARRAY:
        return None

    if path == LEAD_LABELS_KEY:
        labels = option_mapping.get(LEAD_LABELS_KEY) or {}
        return LIST_SEPARATOR.join(labels.get(_plain(v), _plain(v)) for v in value)

    if path == "prices":
        return PRICE_SEPARATOR.join(_price(p) for p in value)

    if path == "participants":
        # só os ids; nomes de pessoas não fazem parte do registro
        return PARTICIPANT_SEPARATOR.join(
            _plain(p["person_id"]) for p in value if isinstance(p, dict) and p.get("person_id")
        )

    return None


def _address_component(value: Any, kind: ValueKind, component: str) -> Optional[str]:
    if kind is ValueKind.OBJECT:
        part = value.get(component)
        if kind_of(part) in (ValueKind.STRING, ValueKind.NUMBER):
            return _plain(part)
        return None
    if kind in (ValueKind.STRING, ValueKind.NUMBER):
        if component == "subpremise" and value != "":
            return f"Apt/Suite: {_plain(value)}"
        return _plain(value)
    return None


def _primary_contact(items: List[Any]) -> str:
    entries = [item for item in items if isinstance(item, dict)]
    for item in entries:
        if item.get("primary") and item.get("value"):
            return _plain(item["value"])
    if entries and entries[0].get("value"):
        return _plain(entries[0]["value"])
    return ""


def _custom_field_object(value: Mapping[str, Any]) -> str:
    if "currency" in value:
        return f"{_plain(value['value'])} {_plain(value['currency'])}"
    if "until" in value:
        return f"{_plain(value['value'])} - {_plain(value['until'])}"
    if "formatted_address" in value:
        return _plain(value["formatted_address"])
    return _plain(value["value"])


def _price(entry: Any) -> str:
    if isinstance(entry, dict) and entry.get("price") is not None and entry.get("currency"):
        cost = entry.get("cost")
        if cost and cost != entry["price"]:
            return f"{_plain(entry['price'])} (cost: {_plain(cost)})"
        return _plain(entry["price"])
    return _json(entry)


def _json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def _plain(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)
