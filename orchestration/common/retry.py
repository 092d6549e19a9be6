"""Retry opcional de uma execução inteira (o motor em si nunca repete)."""
from __future__ import annotations

from typing import Callable, TypeVar

import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from core.exceptions import NetworkFailure
from infrastructure.config.settings import settings

log = structlog.get_logger(__name__)

T = TypeVar("T")


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    log.warning(
        "Sync run failed with a network error – retrying",
        attempt=state.attempt_number,
        error=str(exc),
    )


def run_with_retries(
    fn: Callable[[], T],
    retries: int | None = None,
    wait_min: float = 4,
    wait_max: float = 60,
) -> T:
    """
    Executa `fn` e, em NetworkFailure, repete até `retries` vezes
    (SYNC_FETCH_RETRIES; 0 = sem retry). Outros erros propagam na hora.
    """
    retries = settings.SYNC_FETCH_RETRIES if retries is None else retries
    if retries <= 0:
        return fn()

    retrying = Retrying(
        stop=stop_after_attempt(retries + 1),
        wait=wait_exponential(multiplier=1, min=wait_min, max=wait_max),
        retry=retry_if_exception_type(NetworkFailure),
        before_sleep=_log_retry,
        reraise=True,
    )
    return retrying(fn)
