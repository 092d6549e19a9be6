from datetime import datetime
from typing import Optional

from pydantic import field_validator

from core.utils.schema_utils import PDBaseModel, blank_to_none

class Filter(PDBaseModel):
    """Filtro salvo no Pipedrive (GET /filters)."""
    id:                 int
    name:               Optional[str]       = None
    type:               Optional[str]       = None
    active_flag:        Optional[bool]      = False
    temporary_flag:     Optional[bool]      = None
    user_id:            Optional[int]       = None
    visible_to:         Optional[int]       = None
    custom_view_id:     Optional[int]       = None
    add_time:           Optional[datetime]  = None
    update_time:        Optional[datetime]  = None

    # preenchidos pelo FilterService
    type_formatted:     Optional[str]       = None
    normalized_type:    Optional[str]       = None

    @field_validator("add_time", "update_time", mode="before")
    @classmethod
    def blank_time_to_none(cls, v):
        return blank_to_none(v)
