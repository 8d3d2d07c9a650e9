"""Driver for modems reached through a gammu-json device session.

The session itself (polling the modem, splitting long messages, deleting
messages from the SIM) is provided by a session factory. Pass one that
talks to real hardware in production; without one, the driver runs against
the simulated session, configured from the driver options.
"""

from __future__ import annotations

from typing import ClassVar

from smstransport.driver.base import Driver
from smstransport.driver.config import DriverOptions, GammuJsonOptions, MockSessionConfig
from smstransport.driver.mock import MockDeviceSession
from smstransport.driver.session import DeviceSession, SessionFactory


def simulated_session(options: GammuJsonOptions) -> MockDeviceSession:
    """Session factory backed by :class:`MockDeviceSession`."""
    return MockDeviceSession(
        MockSessionConfig(
            segment_length=options.segment_length,
            concatenated_segment_length=options.concatenated_segment_length,
            poll_interval=options.poll_interval,
        )
    )


class GammuJsonDriver(Driver):
    """SMS driver for gammu-json device sessions.

    Examples:
        ```python
        driver = GammuJsonDriver(session_factory=my_modem_session)
        driver.initialize({"device": "/dev/ttyUSB1", "debug": True})
        ```
    """

    name: ClassVar[str] = "gammu-json"
    options_cls: ClassVar[type[DriverOptions]] = GammuJsonOptions

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        super().__init__()
        self._session_factory = session_factory if session_factory is not None else simulated_session

    def create_session(self, options: DriverOptions) -> DeviceSession:
        return self._session_factory(options)
