from typing import Iterable, List
import unicodedata
import re
import structlog
import numpy as np

log = structlog.get_logger(__name__)

# Regex pré-compilado para performance
_normalize_regex_1 = re.compile(r'[^\w_]+')
_normalize_regex_2 = re.compile(r'_+')

MAX_IDENTIFIER_LEN = 63  # limite do Postgres


def format_column_name(key: str) -> str:
    """`org_id` → `Org Id` (underscore vira espaço, cada palavra capitalizada)."""
    if not isinstance(key, str):
        return ""
    return " ".join(word[:1].upper() + word[1:] for word in key.split("_") if word)


def normalize_column_name(name: str) -> str:
    if not isinstance(name, str):
        return ""
    name = name.lower()
    name = unicodedata.normalize('NFKD', name).encode('ASCII', 'ignore').decode('ASCII')
    name = _normalize_regex_1.sub('_', name)
    name = _normalize_regex_2.sub('_', name).strip('_')
    if name and name[0].isdigit():
        name = '_' + name
    return (name or "_invalid_normalized_name")[:MAX_IDENTIFIER_LEN]

# Versão vetorizada para uso com listas/arrays de cabeçalhos
normalize_column_name_vec = np.vectorize(normalize_column_name, otypes=[object])


def unique_column_names(headers: Iterable[str]) -> List[str]:
    """Normaliza cabeçalhos e resolve colisões com sufixo `_2`, `_3`, ..."""
    headers = list(headers)
    if not headers:
        return []
    normalized = normalize_column_name_vec(np.array(headers, dtype=object)).tolist()
    seen: dict[str, int] = {}
    result: List[str] = []
    for name in normalized:
        if name not in seen:
            seen[name] = 1
            result.append(name)
            continue
        seen[name] += 1
        candidate = f"{name}_{seen[name]}"
        while candidate in seen:
            seen[name] += 1
            candidate = f"{name}_{seen[name]}"
        seen[candidate] = 1
        log.debug("Duplicate column name renamed", original=name, renamed=candidate)
        result.append(candidate)
    return result
