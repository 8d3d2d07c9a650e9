"""Exception hierarchy for smstransport.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from SmsTransportError for easy catching of any
smstransport-specific error.
"""

from __future__ import annotations

INVALID_ARGUMENTS_MESSAGE = "Invalid argument(s) supplied to the `send` method"


class SmsTransportError(Exception):
    """Base exception for all smstransport errors."""

    pass


class InvalidArgumentError(SmsTransportError, ValueError):
    """Raised (or passed to a send callback) when arguments are malformed.

    Synchronous faults from a device session's send primitive are normalized
    into this error with a fixed message; the original cause is not kept.

    Examples:
        - Outbound message missing ``to`` or ``content``
        - Recipient address rejected by the device session
        - Unknown option passed to ``initialize``
    """

    def __init__(self, message: str = INVALID_ARGUMENTS_MESSAGE) -> None:
        super().__init__(message)


class DriverStateError(SmsTransportError, RuntimeError):
    """Raised when a driver operation is invalid in its current state.

    Examples:
        - ``start()`` on a driver that is already started
        - ``register_receive_handler()`` while started
        - ``start()`` before ``initialize()``
    """

    pass


class DriverDestroyedError(DriverStateError):
    """Raised when a driver is used after ``destroy()``."""

    pass


class DriverLoadError(SmsTransportError):
    """Raised when no driver is registered under the requested name."""

    pass


class AdaptorLoadError(SmsTransportError):
    """Raised when no adaptor is registered under the requested name."""

    pass


class DeviceError(SmsTransportError):
    """Out-of-band fault reported by a device session.

    Examples:
        - Modem disconnected
        - SIM storage unreadable
    """

    pass


class SendError(SmsTransportError):
    """Asynchronous send fault reported by a device session's completion."""

    pass
