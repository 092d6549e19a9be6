from dataclasses import dataclass
from typing import Callable, Dict

from core.exceptions import ConfigurationError


@dataclass(frozen=True)
class RouteInfo:
    endpoint: str
    version: str            # só 'v1' (start/limit) por enquanto
    paginated: bool
    fetch_fn: Callable


class RouteRegistry:
    """endpoint (`/deals`, `/dealFields`, ...) → função que faz a requisição."""

    def __init__(self):
        self.routes: Dict[str, RouteInfo] = {}

    def register(self, endpoint: str, version: str = "v1", paginated: bool = True):
        def decorator(fetch_fn: Callable):
            self.routes[endpoint] = RouteInfo(endpoint, version, paginated, fetch_fn)
            return fetch_fn
        return decorator

    def __contains__(self, endpoint: str) -> bool:
        return endpoint in self.routes

    def get_route_info(self, endpoint: str) -> RouteInfo:
        if endpoint not in self.routes:
            raise ConfigurationError(f"Endpoint {endpoint} is not registered in the route registry.")
        return self.routes[endpoint]

    def all_routes(self) -> Dict[str, RouteInfo]:
        return dict(self.routes)

# Instância global
route_registry = RouteRegistry()
