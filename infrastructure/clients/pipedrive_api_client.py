import structlog
from typing import Any, Dict, List, Optional

import requests

from core.exceptions import MalformedResponse
from infrastructure.config.settings import settings
from infrastructure.observability import metrics
from infrastructure.clients.api.base_client import BasePipedriveAPIClient
from infrastructure.clients.api.route_registry import route_registry

log = structlog.get_logger(__name__)

class PipedriveAPIClient:
    """
    Fachada sobre as rotas registradas. Uma chamada = uma requisição; a
    paginação é responsabilidade dos serviços (PaginatedFetcher).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.PIPEDRIVE_API_KEY
        self.access_token = access_token if access_token is not None else settings.PIPEDRIVE_ACCESS_TOKEN
        self._last_pagination: dict[str, Any] | None = None

        self.http_client = BasePipedriveAPIClient(
            base_url=base_url or settings.pipedrive_base_url,
            api_key=self.api_key,
            access_token=self.access_token,
            session=session,
            timeout=settings.PIPEDRIVE_TIMEOUT,
        )
        self.http_client.log = log.bind(client_type="BasePipedriveAPIClient_Instance")
        self.routes = route_registry

        log.info("PipedriveAPIClient initialized", base_url=self.http_client.base_url)

    # ───────────────────── helper interno
    def _store_pagination(self, body: dict[str, Any]) -> None:
        """Guarda a última paginação observada."""
        additional = body.get("additional_data")
        if isinstance(additional, dict) and isinstance(additional.get("pagination"), dict):
            self._last_pagination = additional["pagination"]

    # ───────────────────── getter público
    def get_last_pagination(self) -> dict[str, Any] | None:
        """
        Retorna o dicionário de paginação da última chamada feita por
        fetch_page(). Pode ser None se nenhuma resposta trouxe paginação.
        """
        return self._last_pagination

    def fetch_page(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Busca UMA página do endpoint e valida o envelope `success`.
        Levanta MalformedResponse se o envelope não for o esperado.
        """
        route_info = self.routes.get_route_info(endpoint)
        body = route_info.fetch_fn(self.http_client, params=dict(params or {}))

        if body.get("success") is not True:
            metrics.pipedrive_api_malformed_response_total.labels(endpoint=endpoint).inc()
            raise MalformedResponse(
                f"Pipedrive API returned success={body.get('success')!r} for {endpoint}: "
                f"{body.get('error') or 'no error message'}"
            )

        self._store_pagination(body)
        return body

    def call(self, endpoint: str, **params: Any) -> List[Dict[str, Any]] | Dict[str, Any]:
        """Chamada única (sem paginação); devolve o campo `data`."""
        return self.fetch_page(endpoint, params=params).get("data")

    def available_routes(self) -> List[str]:
        return list(self.routes.all_routes().keys())
