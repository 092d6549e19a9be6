from typing import Protocol


class StatusReporterPort(Protocol):
    """Notificações de progresso (toasts/logs). Fire-and-forget."""

    def notify(self, message: str, **context) -> None:
        ...
