from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from core.schemas.column_schema import ColumnSpec
from core.schemas.entity_kind import EntityKind


class SyncConfig(BaseModel):
    """
    Configuração imutável de uma execução.
    Construída uma vez no início do run e passada adiante por referência.
    """
    entity_kind: EntityKind
    filter_id:   Optional[str] = None
    columns:     Tuple[ColumnSpec, ...] = Field(default_factory=tuple)
    table_name:  Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("entity_kind", mode="before")
    @classmethod
    def _parse_kind(cls, v):
        return EntityKind.parse(v)

    @field_validator("filter_id", mode="before")
    @classmethod
    def _filter_to_str(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @property
    def destination(self) -> str:
        return self.table_name or self.entity_kind.label
