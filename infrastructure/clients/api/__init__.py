from .base_client import BasePipedriveAPIClient
from .route_registry import RouteInfo, RouteRegistry, route_registry
from . import routes
