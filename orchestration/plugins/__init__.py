from .sync_entity import sync_pipedrive_entity_flow
from .discover_columns import discover_pipedrive_columns_flow

print(f"Módulos de plugin em orchestration.plugins importados; deployments devem ter sido registrados.")
