from datetime import datetime
from typing import Any, List, Optional

from pydantic import field_validator

from core.utils.schema_utils import PDBaseModel, blank_to_none

class FieldOption(PDBaseModel):
    id:     Optional[Any]   = None
    label:  Optional[str]   = None
    color:  Optional[str]   = None
    alt_id: Optional[str]   = None

    @property
    def code(self) -> Optional[str]:
        """Código da opção como texto (é assim que aparece nos registros v1)."""
        return None if self.id is None else str(self.id)

class FieldDescriptor(PDBaseModel):
    """Definição de um campo (padrão ou custom) de um tipo de entidade."""
    id:                         Optional[int]       = None
    key:                        str
    name:                       Optional[str]       = None
    order_nr:                   Optional[int]       = None
    field_type:                 Optional[str]       = None
    add_time:                   Optional[datetime]  = None
    update_time:                Optional[datetime]  = None
    active_flag:                Optional[bool]      = True
    edit_flag:                  Optional[bool]      = False
    bulk_edit_allowed:          Optional[bool]      = False
    mandatory_flag:             Optional[Any]       = None
    options:                    Optional[List[FieldOption]] = None

    @field_validator("add_time", "update_time", mode="before")
    @classmethod
    def blank_time_to_none(cls, v):
        return blank_to_none(v)

    @property
    def is_custom(self) -> bool:
        return bool(self.edit_flag)

    @property
    def has_options(self) -> bool:
        return bool(self.options)

class LeadLabel(PDBaseModel):
    """Etiqueta de lead; `label_ids` dos leads guarda estes ids (UUID)."""
    id:    str
    name:  Optional[str] = None
    color: Optional[str] = None
