"""Erros do motor de sincronização (com contexto entidade / filtro / fase)."""
from __future__ import annotations

from typing import Any, Dict, List, Optional


class PipeSyncError(Exception):
    """Base de todos os erros; carrega contexto suficiente p/ uma mensagem acionável."""

    def __init__(
        self,
        message: str,
        *,
        entity_kind: Optional[str] = None,
        filter_id: Optional[str] = None,
        phase: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.entity_kind = entity_kind
        self.filter_id = filter_id
        self.phase = phase

    def context(self) -> Dict[str, Any]:
        return {
            "entity_kind": self.entity_kind,
            "filter_id": self.filter_id,
            "phase": self.phase,
        }

    def __str__(self) -> str:
        parts = [f"{k}={v}" for k, v in self.context().items() if v is not None]
        return f"{self.message} ({', '.join(parts)})" if parts else self.message


class AuthenticationRequired(PipeSyncError):
    """No valid credential. Fatal: the caller must run the re-auth flow."""


class NetworkFailure(PipeSyncError):
    """Transport/HTTP error. Aborts the run; records fetched so far are kept."""

    def __init__(
        self,
        message: str,
        *,
        partial_records: Optional[List[Dict[str, Any]]] = None,
        status_code: Optional[int] = None,
        **ctx: Any,
    ) -> None:
        super().__init__(message, **ctx)
        self.partial_records = partial_records or []
        self.status_code = status_code


class MalformedResponse(PipeSyncError):
    """Response without the expected success/data shape."""


class ConfigurationError(PipeSyncError):
    """Run configuration missing or invalid."""
