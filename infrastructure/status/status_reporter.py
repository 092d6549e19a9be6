from __future__ import annotations

import logging
from typing import Any

import structlog

log = structlog.get_logger(__name__)


class StructlogStatusReporter:
    """Notificações de progresso como eventos structlog."""

    def __init__(self, **context: Any):
        self.log = log.bind(component="status", **context)

    def notify(self, message: str, **context: Any) -> None:
        self.log.info(message, **context)


class RunLoggerStatusReporter:
    """Encaminha as notificações p/ o logger da execução Prefect (aparece na UI)."""

    def __init__(self, run_logger: logging.Logger | logging.LoggerAdapter):
        self.run_logger = run_logger

    def notify(self, message: str, **context: Any) -> None:
        if context:
            details = " ".join(f"{k}={v}" for k, v in sorted(context.items()))
            self.run_logger.info("%s (%s)", message, details)
        else:
            self.run_logger.info(message)
