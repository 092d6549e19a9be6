from infrastructure.clients.api.route_registry import route_registry

# Todas as listagens v1 aceitam filter_id + start/limit.

@route_registry.register(endpoint="/deals")
def fetch_deals(client, params=None):
    """Busca negócios (deals), opcionalmente restritos a um filtro salvo."""
    return client.get_json(client.url("/deals"), params=params)

@route_registry.register(endpoint="/persons")
def fetch_persons(client, params=None):
    """Busca contatos (persons)."""
    return client.get_json(client.url("/persons"), params=params)

@route_registry.register(endpoint="/organizations")
def fetch_organizations(client, params=None):
    return client.get_json(client.url("/organizations"), params=params)

@route_registry.register(endpoint="/activities")
def fetch_activities(client, params=None):
    return client.get_json(client.url("/activities"), params=params)

@route_registry.register(endpoint="/leads")
def fetch_leads(client, params=None):
    return client.get_json(client.url("/leads"), params=params)

@route_registry.register(endpoint="/products")
def fetch_products(client, params=None):
    return client.get_json(client.url("/products"), params=params)
