from typing import Any, Dict, Optional, Protocol


class PipedriveClientPort(Protocol):
    """O que os serviços precisam do cliente HTTP: uma página por chamada."""

    def fetch_page(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Executa UMA requisição GET e devolve o corpo JSON.
        Levanta AuthenticationRequired, NetworkFailure ou MalformedResponse.
        """
        ...
