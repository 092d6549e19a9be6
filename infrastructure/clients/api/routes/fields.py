from infrastructure.clients.api.route_registry import route_registry

@route_registry.register(endpoint="/dealFields")
def fetch_deal_fields(client, params=None):
    """Catálogo de campos de deals (também usado por leads)."""
    return client.get_json(client.url("/dealFields"), params=params)

@route_registry.register(endpoint="/personFields")
def fetch_person_fields(client, params=None):
    return client.get_json(client.url("/personFields"), params=params)

@route_registry.register(endpoint="/organizationFields")
def fetch_organization_fields(client, params=None):
    return client.get_json(client.url("/organizationFields"), params=params)

@route_registry.register(endpoint="/activityFields")
def fetch_activity_fields(client, params=None):
    return client.get_json(client.url("/activityFields"), params=params)

@route_registry.register(endpoint="/productFields")
def fetch_product_fields(client, params=None):
    return client.get_json(client.url("/productFields"), params=params)

@route_registry.register(endpoint="/leadLabels", paginated=False)
def fetch_lead_labels(client, params=None):
    """Etiquetas de leads (resolvem `label_ids`)."""
    return client.get_json(client.url("/leadLabels"), params=params)
