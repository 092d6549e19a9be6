import time
import requests
import structlog
from pybreaker import CircuitBreaker, CircuitBreakerError, CircuitBreakerListener
from typing import Any, Dict, Optional

from core.exceptions import AuthenticationRequired, MalformedResponse, NetworkFailure
from infrastructure.observability import metrics
from infrastructure.observability.metrics import (
    api_request_duration_hist,
    api_errors_counter,
    pipedrive_api_call_total,
)

log = structlog.get_logger(__name__)

class BreakerMetricsListener(CircuitBreakerListener):
    def state_changed(self, cb, old_state, new_state):
        if new_state.name == "open":
            log.warning(f"Circuit breaker '{cb.name}' opened.")
            metrics.pipedrive_api_breaker_open_total.inc()
        elif new_state.name == "closed" and old_state.name == "open":
            log.info(f"Circuit breaker '{cb.name}' closed.")

class _ServerError(Exception):
    """5xx/429 dentro do breaker (conta como falha); traduzido p/ NetworkFailure fora dele."""

    def __init__(self, response: requests.Response):
        super().__init__(f"HTTP {response.status_code}")
        self.response = response

class BasePipedriveAPIClient:
    """
    Camada HTTP fina: autenticação, breaker, métricas e tradução de erros.

    Não faz retry: um erro de transporte vira NetworkFailure imediatamente.
    """
    DEFAULT_TIMEOUT = 45

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        access_token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        if not api_key and not access_token:
            raise AuthenticationRequired(
                "Not authenticated with Pipedrive. Configure PIPEDRIVE_API_KEY or PIPEDRIVE_ACCESS_TOKEN.",
                phase="connect",
            )
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if access_token:
            self.session.headers.update({"Authorization": f"Bearer {access_token}"})
        self.log = log.bind(client="BasePipedriveAPIClient")
        self.api_breaker = CircuitBreaker(fail_max=3, reset_timeout=60, name="PipedriveAPIBreaker")
        self.api_breaker.add_listener(BreakerMetricsListener())

    def url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _normalize_endpoint(self, url: str) -> str:
        path = url[len(self.base_url):] if url.startswith(self.base_url) else url
        path = path.split("?")[0].strip("/")
        return "/" + path

    def _send(self, url: str, params: Dict[str, Any]) -> requests.Response:
        response = self.session.get(url, params=params, timeout=self.timeout)
        if response.status_code >= 500 or response.status_code == 429:
            raise _ServerError(response)
        return response

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        params = dict(params or {})
        if self.api_key and "api_token" not in params:
            params["api_token"] = self.api_key

        start_time = time.monotonic()
        status_code = None
        normalized_endpoint = self._normalize_endpoint(url)
        request_log = self.log.bind(endpoint=normalized_endpoint, method="GET")

        try:
            request_log.debug("Making API GET request", params={k: v for k, v in params.items() if k != "api_token"})
            response = self.api_breaker.call(self._send, url, params)
            status_code = response.status_code
        except _ServerError as e:
            status_code = e.response.status_code
            if status_code == 429:
                request_log.warning("Rate limit hit (429)", retry_after=e.response.headers.get("Retry-After"))
            self._record_error(normalized_endpoint, "server_error", status_code)
            raise NetworkFailure(
                f"Pipedrive API request failed with status {status_code}",
                status_code=status_code,
            ) from e
        except CircuitBreakerError as e:
            self._record_error(normalized_endpoint, "circuit_open", None)
            raise NetworkFailure("Pipedrive API circuit breaker is open") from e
        except requests.exceptions.RequestException as e:
            if isinstance(e, requests.exceptions.Timeout):
                error_type = "timeout"
            elif isinstance(e, requests.exceptions.ConnectionError):
                error_type = "connection_error"
            else:
                error_type = "request_exception"
            self._record_error(normalized_endpoint, error_type, None)
            request_log.error("API GET failed", error=str(e), duration_sec=f"{time.monotonic() - start_time:.3f}s")
            raise NetworkFailure(f"Pipedrive API request failed: {e}") from e

        duration = time.monotonic() - start_time
        pipedrive_api_call_total.labels(endpoint=normalized_endpoint, method="GET", status_code=str(status_code)).inc()
        api_request_duration_hist.labels(endpoint=normalized_endpoint, method="GET", status_code=str(status_code)).observe(duration)

        if status_code == 401:
            self._record_error(normalized_endpoint, "unauthorized", status_code)
            raise AuthenticationRequired("Authentication failed. Please reconnect to Pipedrive.")
        if status_code >= 400:
            self._record_error(normalized_endpoint, "client_error", status_code)
            raise NetworkFailure(
                f"Pipedrive API request failed with status {status_code}: {_error_message(response)}",
                status_code=status_code,
            )

        request_log.debug("API GET successful", status_code=status_code, duration_sec=f"{duration:.3f}s")
        return response

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = self.get(url, params=params)
        try:
            body = response.json()
        except ValueError:
            text = response.text or ""
            # HTML no lugar de JSON = sessão/token inválido
            if "<!DOCTYPE html>" in text:
                raise AuthenticationRequired("Authentication error. Please reconnect to Pipedrive.") from None
            raise MalformedResponse(f"Invalid response from Pipedrive API: {text[:100]}...") from None
        if not isinstance(body, dict):
            raise MalformedResponse(f"Unexpected JSON payload type {type(body).__name__}")
        return body

    def _record_error(self, endpoint: str, error_type: str, status_code: Optional[int]) -> None:
        api_errors_counter.labels(endpoint=endpoint, error_type=error_type, status_code=str(status_code or "N/A")).inc()


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return (response.text or "")[:100]
    if isinstance(body, dict):
        return str(body.get("error") or body.get("error_info") or "")
    return ""
