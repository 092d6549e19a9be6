from .sync_entity_flow import sync_pipedrive_entity_flow
from .discover_columns_flow import discover_pipedrive_columns_flow

__all__ = [
    "sync_pipedrive_entity_flow",
    "discover_pipedrive_columns_flow",
]
