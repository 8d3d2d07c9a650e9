"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from smstransport.driver import GammuJsonDriver, MockDeviceSession, MockSessionConfig


class SendRecorder:
    """Callable that records ``(err, result)`` pairs from send callbacks."""

    def __init__(self) -> None:
        self.calls: list[tuple[BaseException | None, object]] = []

    def __call__(self, err: BaseException | None, result: object = None) -> None:
        self.calls.append((err, result))


@pytest.fixture
def session() -> MockDeviceSession:
    """Simulated modem session, drained manually with ``poll()``."""
    return MockDeviceSession(MockSessionConfig(seed=1234))


@pytest.fixture
def driver(session: MockDeviceSession) -> GammuJsonDriver:
    """Initialized driver bound to the ``session`` fixture."""
    driver = GammuJsonDriver(session_factory=lambda options: session)
    driver.initialize({"debug": False})
    return driver


@pytest.fixture
def send_recorder() -> SendRecorder:
    return SendRecorder()


@pytest.fixture
def sample_sender() -> str:
    """Sample phone number for inbound messages."""
    return "+15551234"
