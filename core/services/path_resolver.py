from __future__ import annotations

from typing import Any, Mapping

from core.utils.value_kind import ABSENT, ValueKind, kind_of

SEPARATOR = "."
ADDRESS_PREFIX = "address."
# listas de contato da API v1 que aceitam `email.work`, `phone.mobile`, ...
CONTACT_FIELDS = ("email", "phone")
PRIMARY_LABEL = "primary"


class FieldPathResolver:
    """
    Resolve `a.b.0.c` num registro. Nunca levanta; caminho inválido → ABSENT.

    Dois atalhos antes da caminhada genérica:
      • `address.<componente>` aceita a chave achatada literal (`"address.locality"`)
      • `email.<label>` / `phone.<label>` escolhe o contato por label
        (`primary` = o marcado como primário)
    """

    @staticmethod
    def resolve(record: Mapping[str, Any] | None, path: str) -> Any:
        if record is None or not path:
            return ABSENT
        if SEPARATOR not in path:
            return record.get(path, ABSENT) if isinstance(record, Mapping) else ABSENT
        if isinstance(record, Mapping):
            if path.startswith(ADDRESS_PREFIX) and path in record:
                return record[path]
            head, _, rest = path.partition(SEPARATOR)
            if head in CONTACT_FIELDS and SEPARATOR not in rest and not _is_index(rest):
                return _contact_by_label(record.get(head, ABSENT), rest)

        current: Any = record
        for segment in path.split(SEPARATOR):
            kind = kind_of(current)
            if kind is ValueKind.ARRAY and _is_index(segment):
                index = int(segment)
                if index >= len(current):
                    return ABSENT
                current = current[index]
            elif kind is ValueKind.OBJECT:
                if segment not in current:
                    return ABSENT
                current = current[segment]
            else:
                # null, escalar ou índice não numérico num array
                return ABSENT
        return current


def _contact_by_label(items: Any, label: str) -> Any:
    if kind_of(items) is not ValueKind.ARRAY:
        # objeto (ex.: {"work": ...}) segue a regra de chave comum
        if kind_of(items) is ValueKind.OBJECT:
            return items.get(label, ABSENT)
        return ABSENT

    wanted = label.lower()
    entries = [item for item in items if isinstance(item, dict)]
    for item in entries:
        if str(item.get("label") or "").lower() == wanted and item.get("value"):
            return item["value"]
    if wanted == PRIMARY_LABEL:
        for item in entries:
            if item.get("primary") and item.get("value"):
                return item["value"]
    return ABSENT


def _is_index(segment: str) -> bool:
    # só inteiros não negativos; "-1" não indexa a partir do fim
    return segment.isdigit() and segment.isascii()
