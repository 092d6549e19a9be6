import pytest

from core.exceptions import AuthenticationRequired, NetworkFailure
from orchestration.common.retry import run_with_retries


class Flaky:
    def __init__(self, failures, exc=NetworkFailure):
        self.failures = failures
        self.exc = exc
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc("connection reset")
        return "ok"


def test_no_retries_by_default():
    fn = Flaky(1)

    with pytest.raises(NetworkFailure):
        run_with_retries(fn, retries=0)
    assert fn.calls == 1


def test_retries_network_failures():
    fn = Flaky(2)

    assert run_with_retries(fn, retries=2, wait_min=0, wait_max=0) == "ok"
    assert fn.calls == 3


def test_gives_up_after_configured_attempts():
    fn = Flaky(5)

    with pytest.raises(NetworkFailure):
        run_with_retries(fn, retries=1, wait_min=0, wait_max=0)
    assert fn.calls == 2


def test_authentication_errors_are_never_retried():
    fn = Flaky(1, exc=AuthenticationRequired)

    with pytest.raises(AuthenticationRequired):
        run_with_retries(fn, retries=3, wait_min=0, wait_max=0)
    assert fn.calls == 1
