"""Transport: a driver and an adaptor composed by name.

The transport is what applications hold on to. It translates outbound
messages through the adaptor before handing them to the driver, and wraps
the caller's handlers so inbound messages are translated on the way back.
Handlers are attached to the driver when the transport starts, so they are
always in place before the driver begins polling.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable

from smstransport.adaptor import Adaptor
from smstransport.driver.base import Driver, DoneCallback, ErrorHandler, SendCallback
from smstransport.driver.session import SessionFactory
from smstransport.exceptions import DriverStateError
from smstransport.messages import InboundMessage
from smstransport.registry import load_adaptor, load_driver

LOGGER = logging.getLogger(__name__)

DEFAULT_DRIVER = "gammu-json"
DEFAULT_ADAPTOR = "passthrough"

TransportReceiveHandler = Callable[[Any, DoneCallback], None]


class Transport:
    """A driver paired with an adaptor.

    Attributes:
        driver: Loaded driver, or None until ``load_driver`` is called
        adaptor: Loaded adaptor, or None until ``load_adaptor`` is called
    """

    def __init__(self) -> None:
        self.driver: Driver | None = None
        self.adaptor: Adaptor | None = None
        self._receive_handler: TransportReceiveHandler | None = None
        self._error_handler: ErrorHandler | None = None

    def load_driver(self, name: str, options: Mapping[str, Any] | None = None, **kwargs: Any) -> Transport:
        self.driver = load_driver(name, options, **kwargs)
        return self

    def load_adaptor(self, name: str, options: Mapping[str, Any] | None = None) -> Transport:
        self.adaptor = load_adaptor(name, options)
        return self

    def register_receive_handler(self, handler: TransportReceiveHandler) -> Transport:
        """Receive adapted messages as ``handler(message, done)``."""
        self._receive_handler = handler
        return self

    def register_error_handler(self, handler: ErrorHandler) -> Transport:
        self._error_handler = handler
        return self

    def start(self) -> Transport:
        """Attach handlers to the driver, then start it."""
        driver, adaptor = self._components()
        receive_handler = self._receive_handler
        if receive_handler is not None:

            def on_receive(message: InboundMessage, done: DoneCallback) -> None:
                receive_handler(adaptor.from_driver(message), done)

            driver.register_receive_handler(on_receive)

        if self._error_handler is not None:
            driver.register_error_handler(self._error_handler)

        driver.start()
        return self

    def send(self, message: Any, callback: SendCallback) -> Transport:
        driver, adaptor = self._components()
        driver.send(adaptor.to_driver(message), callback)
        return self

    def stop(self) -> Transport:
        driver, _ = self._components()
        driver.stop()
        return self

    def destroy(self) -> Transport:
        driver, _ = self._components()
        driver.destroy()
        return self

    def _components(self) -> tuple[Driver, Adaptor]:
        if self.driver is None or self.adaptor is None:
            raise DriverStateError("Transport needs both a driver and an adaptor loaded")
        return self.driver, self.adaptor


def create(
    driver_options: Mapping[str, Any] | None = None,
    adaptor_options: Mapping[str, Any] | None = None,
    *,
    session_factory: SessionFactory | None = None,
) -> Transport:
    """Build a transport from configuration.

    The ``name`` key of each options mapping selects the implementation;
    it defaults to ``gammu-json`` for the driver and ``passthrough`` for the
    adaptor.

    Examples:
        ```python
        transport = create({"name": "gammu-json", "debug": True})
        transport.register_receive_handler(store_message)
        transport.start()
        ```
    """
    driver_options = dict(driver_options or {})
    adaptor_options = dict(adaptor_options or {})
    driver_name = driver_options.get("name") or DEFAULT_DRIVER
    adaptor_name = adaptor_options.get("name") or DEFAULT_ADAPTOR

    kwargs: dict[str, Any] = {}
    if session_factory is not None:
        kwargs["session_factory"] = session_factory

    LOGGER.debug("Creating transport: driver=%s adaptor=%s", driver_name, adaptor_name)
    transport = Transport()
    transport.load_driver(driver_name, driver_options, **kwargs)
    transport.load_adaptor(adaptor_name, adaptor_options)
    return transport
