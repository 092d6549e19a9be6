from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ColumnSpec(BaseModel):
    """Uma coluna escolhida pelo usuário: caminho no registro + cabeçalho."""
    path:         str
    display_name: str = Field(alias="displayName")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("path")
    @classmethod
    def path_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("column path must not be empty")
        return v.strip()


class DiscoveredColumn(BaseModel):
    """Coluna candidata produzida pela descoberta de schema (só p/ seleção)."""
    key:        str
    name:       str
    is_nested:  bool = False
    parent_key: Optional[str] = None

    model_config = {"frozen": True}
