from infrastructure.clients.api.route_registry import route_registry

@route_registry.register(endpoint="/filters", paginated=False)
def fetch_filters(client, params=None):
    """Busca todos os filtros salvos (sem paginação)."""
    return client.get_json(client.url("/filters"), params=params)
