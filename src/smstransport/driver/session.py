"""Interface a driver requires from its device session.

The device session performs the actual modem I/O. It is an external
collaborator: drivers only ever talk to it through this protocol.
"""

from __future__ import annotations

from typing import Any, Callable, Literal, Protocol, Union

from smstransport.messages import InboundMessage, SendResult

# completion(err, result)
SendCompletion = Callable[[Union[BaseException, None], Union[SendResult, None]], None]
# ack(err)
AckCallback = Callable[[Union[BaseException, None]], None]
ReceiveListener = Callable[[InboundMessage, AckCallback], None]
ErrorListener = Callable[[BaseException], None]

EventName = Literal["receive", "error"]


class DeviceSession(Protocol):
    """A single session with a modem.

    ``send`` may raise synchronously when its arguments are unusable; every
    other fault is reported through the completion callback or the
    ``error`` event.
    """

    def send(self, to: str, content: str, completion: SendCompletion) -> None: ...

    def on(self, event: EventName, listener: Any) -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def destroy(self) -> None: ...


SessionFactory = Callable[[Any], DeviceSession]
