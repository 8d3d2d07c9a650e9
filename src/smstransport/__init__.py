"""smstransport: pluggable SMS transport

Send and receive short text messages through a modem, with message-format
concerns (adaptors) kept apart from device concerns (drivers).

Key Features:
- Driver lifecycle with explicit state checks
- success/partial/failure classification of fragmented sends
- Receive acknowledgement handshake: messages leave the device only after
  the caller confirms they were stored
- Simulated modem session for tests and demos

Quick Start:
    >>> from smstransport import create
    >>> transport = create({"debug": False})
    >>> transport.register_receive_handler(lambda message, done: done())
    >>> transport.start()
    >>> transport.send({"to": "+15551234", "content": "hello"}, print)
"""

from __future__ import annotations

from .adaptor import Adaptor, PassthroughAdaptor
from .driver import (
    DeviceSession,
    Driver,
    DriverOptions,
    DriverState,
    GammuJsonDriver,
    GammuJsonOptions,
    MockDeviceSession,
    MockSessionConfig,
)
from .exceptions import (
    AdaptorLoadError,
    DeviceError,
    DriverDestroyedError,
    DriverLoadError,
    DriverStateError,
    InvalidArgumentError,
    SendError,
    SmsTransportError,
)
from .messages import InboundMessage, OutboundMessage, SendResult, SendStatus, classify_fragments
from .registry import load_adaptor, load_driver, register_adaptor, register_driver
from .transport import Transport, create

__version__ = "0.1.0"

__all__ = [
    # Composition
    "Transport",
    "create",
    "load_driver",
    "load_adaptor",
    "register_driver",
    "register_adaptor",
    # Drivers
    "Driver",
    "DriverState",
    "DriverOptions",
    "GammuJsonDriver",
    "GammuJsonOptions",
    "DeviceSession",
    "MockDeviceSession",
    "MockSessionConfig",
    # Adaptors
    "Adaptor",
    "PassthroughAdaptor",
    # Messages
    "OutboundMessage",
    "InboundMessage",
    "SendResult",
    "SendStatus",
    "classify_fragments",
    # Exceptions
    "SmsTransportError",
    "InvalidArgumentError",
    "DriverStateError",
    "DriverDestroyedError",
    "DriverLoadError",
    "AdaptorLoadError",
    "DeviceError",
    "SendError",
    # Version
    "__version__",
]
