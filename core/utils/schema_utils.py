from typing import Any, Iterable, List, Type, TypeVar
from pydantic import BaseModel, ValidationError
import re
import structlog

log = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

def to_snake(s: str) -> str:
    """Converte camelCase ou PascalCase para snake_case."""
    return re.sub(r'(?<!^)(?=[A-Z])', '_', s).lower()

def blank_to_none(v: Any) -> Any:
    """A API manda "" em datas não preenchidas."""
    if isinstance(v, str) and not v.strip():
        return None
    return v

class PDBaseModel(BaseModel):
    """
    BaseModel padrão para payloads Pipedrive:
    - Converte aliases de camelCase para snake_case.
    - Permite campos extras (o catálogo varia por conta / custom fields).
    """

    model_config = {
        "alias_generator": to_snake,
        "populate_by_name": True,
        "extra": "allow",
    }

def validate_many(model: Type[M], items: Iterable[Any], **log_ctx: Any) -> List[M]:
    """Valida item a item; inválidos são logados e descartados."""
    valid: List[M] = []
    for raw in items or ():
        try:
            valid.append(model.model_validate(raw))
        except ValidationError as exc:
            log.warning(
                "Skipping invalid payload",
                model=model.__name__,
                key=raw.get("key") if isinstance(raw, dict) else None,
                errors=exc.error_count(),
                **log_ctx,
            )
    return valid
