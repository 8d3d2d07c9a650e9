"""Abstract base for SMS drivers.

A driver owns exactly one device session and exposes a small, callback-based
contract to the transport that composes it with an adaptor:

- ``initialize(options)`` binds configuration and creates the session
- ``register_receive_handler`` / ``register_error_handler`` attach callers
- ``start`` / ``stop`` toggle polling on the session
- ``send(message, callback)`` transmits one message
- ``destroy`` releases the session for good

Lifecycle:

    uninitialized -> initialized -> started <-> stopped -> destroyed

``destroy`` is reachable from every state and is terminal.

Receive handlers are handed ``(message, done)``. The driver forwards the
value passed to ``done`` unchanged to the session's acknowledgement, so a
message is only removed from the device once the caller has stored it.
Register handlers *before* calling ``start``: inbound messages that arrive
while no receive handler is registered are left on the device and are not
buffered here.
"""

from __future__ import annotations

import enum
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Callable, ClassVar, Union

from pydantic import ValidationError

from smstransport.driver.config import DriverOptions, coerce_options
from smstransport.driver.session import AckCallback, DeviceSession
from smstransport.exceptions import (
    DriverDestroyedError,
    DriverStateError,
    InvalidArgumentError,
)
from smstransport.messages import InboundMessage, OutboundMessage, SendResult

LOGGER = logging.getLogger(__name__)

ErrorOrNone = Union[BaseException, None]
SendCallback = Callable[[ErrorOrNone, Union[SendResult, None]], None]
DoneCallback = Callable[..., None]
ReceiveHandler = Callable[[InboundMessage, DoneCallback], None]
ErrorHandler = Callable[[BaseException], None]


class DriverState(str, enum.Enum):
    """Lifecycle state of a driver."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    STARTED = "started"
    STOPPED = "stopped"
    DESTROYED = "destroyed"


_REGISTRABLE = (DriverState.INITIALIZED, DriverState.STOPPED)
_STARTABLE = (DriverState.INITIALIZED, DriverState.STOPPED)
_SENDABLE = (DriverState.INITIALIZED, DriverState.STARTED, DriverState.STOPPED)


class Driver(ABC):
    """Abstract SMS driver.

    Subclasses implement :meth:`create_session` and may narrow
    :attr:`options_cls`. Everything else (state machine, handler dispatch,
    send validation, ack forwarding, debug trace) lives here.

    Examples:
        ```python
        from smstransport.driver import GammuJsonDriver

        driver = GammuJsonDriver().initialize({"debug": True})

        def on_message(message, done):
            store(message)
            done()

        driver.register_receive_handler(on_message)
        driver.register_error_handler(lambda err: print(err))
        driver.start()

        driver.send({"to": "+15551234", "content": "hello"}, lambda err, result: ...)
        ```
    """

    name: ClassVar[str] = "abstract"
    options_cls: ClassVar[type[DriverOptions]] = DriverOptions

    def __init__(self) -> None:
        self.options: DriverOptions | None = None
        self._state = DriverState.UNINITIALIZED
        self._session: DeviceSession | None = None
        self._receive_handler: ReceiveHandler | None = None
        self._error_handler: ErrorHandler | None = None
        self._logger = LOGGER

    @property
    def state(self) -> DriverState:
        return self._state

    @abstractmethod
    def create_session(self, options: DriverOptions) -> DeviceSession:
        """Create the device session this driver will own."""

    # -- lifecycle -----------------------------------------------------------

    def initialize(
        self,
        options: DriverOptions | Mapping[str, Any] | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> Driver:
        """Bind configuration and create the device session.

        Args:
            options: Options model, plain mapping, or None for defaults
            logger: Sink for the debug trace and warnings (defaults to this
                module's logger)

        Returns:
            The driver, for chaining

        Raises:
            InvalidArgumentError: If ``options`` does not validate
            DriverStateError: If the driver was already initialized
        """
        self._require(DriverState.UNINITIALIZED, operation="initialize")
        self.options = coerce_options(self.options_cls, options)
        if logger is not None:
            self._logger = logger

        session = self.create_session(self.options)
        session.on("receive", self._dispatch_receive)
        session.on("error", self._dispatch_error)
        self._session = session
        self._state = DriverState.INITIALIZED
        return self

    def start(self) -> Driver:
        """Start polling the device session.

        Handlers must already be registered; anything that arrives before
        then is not delivered.
        """
        self._require(*_STARTABLE, operation="start")
        if self._receive_handler is None:
            self._logger.warning(
                "%s driver: starting without a receive handler; inbound messages "
                "will stay on the device",
                self.name,
            )
        if self._error_handler is None:
            self._logger.warning(
                "%s driver: starting without an error handler; device errors will be dropped",
                self.name,
            )
        self._active_session().start()
        self._state = DriverState.STARTED
        return self

    def stop(self) -> Driver:
        """Stop polling. The session stays open and can be started again."""
        self._require(DriverState.STARTED, operation="stop")
        self._active_session().stop()
        self._state = DriverState.STOPPED
        return self

    def destroy(self) -> Driver:
        """Release the device session. No further operation is valid.

        Sends the session has not finished are completed by the session
        while it is destroyed, normally with a :class:`SendError`.
        """
        if self._state is DriverState.DESTROYED:
            raise DriverDestroyedError(f"{self.name} driver has already been destroyed")

        session, self._session = self._session, None
        self._receive_handler = None
        self._error_handler = None
        self._state = DriverState.DESTROYED
        if session is not None:
            session.destroy()
        return self

    # -- handlers ------------------------------------------------------------

    def register_receive_handler(self, handler: ReceiveHandler) -> Driver:
        """Invoke ``handler(message, done)`` for every inbound message.

        ``done(err=None)`` must be called once the message has been written
        to persistent storage, or with a non-null error if it could not be
        accepted. Until then the device keeps the message. Replaces any
        previously registered receive handler.
        """
        self._require(*_REGISTRABLE, operation="register_receive_handler")
        self._receive_handler = handler
        self._trace("registered receive handler")
        return self

    def register_error_handler(self, handler: ErrorHandler) -> Driver:
        """Invoke ``handler(err)`` for faults not tied to a ``send`` call.

        Replaces any previously registered error handler.
        """
        self._require(*_REGISTRABLE, operation="register_error_handler")
        self._error_handler = handler
        self._trace("registered error handler")
        return self

    # -- send ----------------------------------------------------------------

    def send(self, message: OutboundMessage | Mapping[str, Any], callback: SendCallback) -> Driver:
        """Send a message.

        ``message`` must provide ``to`` (phone number or MSISDN) and
        ``content`` (message body). Once the device session has finished,
        ``callback(err, result)`` is invoked: ``err`` is None unless a
        lower-level fault occurred, and ``result`` is the session's
        :class:`SendResult` (``success``, ``partial`` or ``failure``).

        Malformed messages, and any exception the session raises while
        accepting the send, are reported as :class:`InvalidArgumentError`
        with a fixed message. Faults reported later by the session are
        passed through unmodified.
        """
        if self._state not in _SENDABLE:
            callback(self._state_error("send"), None)
            return self

        self._trace("queueing %r", message)
        try:
            outbound = OutboundMessage.model_validate(message)
        except ValidationError:
            callback(InvalidArgumentError(), None)
            return self

        completed = False

        def on_complete(err: ErrorOrNone, result: SendResult | None) -> None:
            nonlocal completed
            completed = True
            self._trace("sent %r", outbound)
            self._trace("status is %r", result)
            callback(err, result)

        try:
            self._active_session().send(outbound.to, outbound.content, on_complete)
        except Exception:
            if completed:
                raise
            callback(InvalidArgumentError(), None)
        return self

    # -- session events ------------------------------------------------------

    def _dispatch_receive(self, message: InboundMessage, ack: AckCallback) -> None:
        self._trace("received %r", message)
        handler = self._receive_handler
        if handler is None:
            self._logger.warning(
                "%s driver: no receive handler registered; message from %s left on device",
                self.name,
                message.from_,
            )
            return

        acknowledged = False
        # done() may be called from any thread
        lock = threading.Lock()

        def done(err: ErrorOrNone = None) -> None:
            nonlocal acknowledged
            with lock:
                first, acknowledged = not acknowledged, True
            if not first:
                self._logger.warning(
                    "%s driver: done() called more than once for message from %s; ignoring",
                    self.name,
                    message.from_,
                )
                return
            self._trace("receive handler invoked; error status is %r", err)
            ack(err)

        handler(message, done)

    def _dispatch_error(self, err: BaseException) -> None:
        handler = self._error_handler
        if handler is None:
            self._logger.warning("%s driver: dropping device error: %s", self.name, err)
            return
        handler(err)

    # -- helpers -------------------------------------------------------------

    def _trace(self, msg: str, *args: Any) -> None:
        if self.options is not None and self.options.debug:
            self._logger.debug("%s driver: " + msg, self.name, *args)

    def _active_session(self) -> DeviceSession:
        if self._session is None:
            raise self._state_error("use the device session")
        return self._session

    def _require(self, *states: DriverState, operation: str) -> None:
        if self._state not in states:
            raise self._state_error(operation)

    def _state_error(self, operation: str) -> DriverStateError:
        if self._state is DriverState.DESTROYED:
            return DriverDestroyedError(
                f"Cannot {operation}: {self.name} driver has been destroyed"
            )
        return DriverStateError(
            f"Cannot {operation}: {self.name} driver is {self._state.value}"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(state={self._state.value})"
