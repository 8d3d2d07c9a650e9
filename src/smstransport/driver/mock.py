"""Simulated modem session for testing without hardware.

MockDeviceSession implements the DeviceSession protocol in memory. It
simulates:

- Fragmentation of long messages into SMS segments
- Per-fragment delivery failures (partial sends)
- Inbound messages held on a simulated SIM until acknowledged
- Out-of-band device errors

Design:
- Single event queue: sends, arrivals and errors are dispatched in the order
  they were queued, one at a time, never concurrently
- ``poll()`` drains the queue on the caller's thread; with
  ``threaded=True`` a background thread drains it while started
"""

from __future__ import annotations

import itertools
import logging
import random
import re
from datetime import datetime
from queue import Empty, Queue
from threading import Event, Thread, current_thread
from typing import Any, Callable

from smstransport.driver.config import MockSessionConfig
from smstransport.driver.session import (
    AckCallback,
    ErrorListener,
    EventName,
    ReceiveListener,
    SendCompletion,
)
from smstransport.exceptions import DeviceError, SendError
from smstransport.messages import InboundMessage, SendResult, SendStatus

LOGGER = logging.getLogger(__name__)

_EVENTS = ("receive", "error")


class MockDeviceSession:
    """In-memory modem session.

    Attributes:
        config: Simulation parameters
        sent: ``(to, fragments, outcomes)`` for every send that was processed
        acks: ``(message_id, err)`` for every acknowledgement received, in
            order, with ``err`` exactly as passed by the caller
        stored_messages: Inbound messages still on the simulated SIM, keyed
            by message id

    Examples:
        ```python
        session = MockDeviceSession(MockSessionConfig(failed_fragments=frozenset({1})))
        session.on("receive", lambda message, ack: ack(None))
        session.start()

        session.send("+15551234", "x" * 200, lambda err, result: print(result.result))
        session.inject_receive("+15559876", "hi")
        session.poll()  # prints "partial", then the message is acked and deleted
        ```
    """

    def __init__(self, config: MockSessionConfig | None = None) -> None:
        self.config = config if config is not None else MockSessionConfig()
        self.sent: list[tuple[str, list[str], list[bool]]] = []
        self.acks: list[tuple[int, BaseException | None]] = []
        self.stored_messages: dict[int, InboundMessage] = {}

        self._listeners: dict[str, list[Callable[..., None]]] = {name: [] for name in _EVENTS}
        # (completion, task); completion is set only for queued sends
        self._tasks: Queue[tuple[SendCompletion | None, Callable[[], None]]] = Queue()
        self._ids = itertools.count(1)
        self._random = random.Random(self.config.seed)
        self._recipient_re = re.compile(self.config.recipient_pattern)
        self._pending_error: BaseException | None = None
        self._running = False
        self._destroyed = False
        self._wake = Event()
        self._thread: Thread | None = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    # -- DeviceSession -------------------------------------------------------

    def on(self, event: EventName, listener: ReceiveListener | ErrorListener) -> None:
        """Subscribe ``listener`` to ``receive`` or ``error`` events."""
        self._check_alive()
        if event not in self._listeners:
            raise ValueError(f"Unknown event {event!r}; expected one of {_EVENTS}")
        self._listeners[event].append(listener)

    def send(self, to: str, content: str, completion: SendCompletion) -> None:
        """Queue a message for transmission.

        Raises:
            ValueError: If the recipient or content is unusable
            RuntimeError: If the session has been destroyed
        """
        self._check_alive()
        if not isinstance(to, str) or not self._recipient_re.fullmatch(to):
            raise ValueError(f"Invalid recipient {to!r}")
        if not isinstance(content, str):
            raise ValueError(f"Content must be text, got {type(content).__name__}")

        self._tasks.put((completion, lambda: self._transmit(to, content, completion)))

    def start(self) -> None:
        self._check_alive()
        if self._running:
            LOGGER.debug("Mock session already started")
            return

        self._running = True
        if self.config.threaded:
            self._wake.clear()
            self._thread = Thread(target=self._poll_loop, daemon=True, name="MockSession-Poll")
            self._thread.start()
        LOGGER.debug("Mock session started (threaded=%s)", self.config.threaded)

    def stop(self) -> None:
        self._check_alive()
        if not self._running:
            LOGGER.debug("Mock session already stopped")
            return

        self._running = False
        self._wake.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not current_thread():
            thread.join(timeout=1.0)
        LOGGER.debug("Mock session stopped")

    def destroy(self) -> None:
        """Stop and release everything. The session cannot be used again.

        Sends still queued complete with :class:`SendError` and a
        ``failure`` result; queued arrivals and errors are discarded.
        """
        self._check_alive()
        if self._running:
            self.stop()
        self._destroyed = True
        for listeners in self._listeners.values():
            listeners.clear()

        abandoned = 0
        while True:
            try:
                completion, _ = self._tasks.get_nowait()
            except Empty:
                break
            if completion is not None:
                abandoned += 1
                self._complete(
                    completion,
                    SendError("session destroyed"),
                    SendResult(result=SendStatus.FAILURE, fragments_total=0),
                )
        LOGGER.debug("Mock session destroyed (%d pending send(s) failed)", abandoned)

    # -- simulation controls -------------------------------------------------

    def inject_receive(
        self,
        sender: str,
        content: str,
        timestamp: datetime | None = None,
    ) -> int:
        """Simulate an inbound message arriving on the SIM.

        Returns:
            Id of the stored message
        """
        self._check_alive()
        fields: dict[str, Any] = {"from": sender, "content": content}
        if timestamp is not None:
            fields["timestamp"] = timestamp
        message = InboundMessage(**fields)

        message_id = next(self._ids)
        self.stored_messages[message_id] = message
        self._tasks.put((None, lambda: self._deliver(message_id)))
        return message_id

    def inject_error(self, error: BaseException | str) -> None:
        """Simulate an out-of-band device fault."""
        self._check_alive()
        err = DeviceError(error) if isinstance(error, str) else error
        self._tasks.put((None, lambda: self._emit_error(err)))

    def fail_next_send(self, error: BaseException) -> None:
        """Make the next processed send complete with ``error``."""
        self._pending_error = error

    def redeliver_stored(self) -> int:
        """Queue another delivery of every message still on the SIM."""
        self._check_alive()
        for message_id in list(self.stored_messages):
            self._tasks.put((None, lambda message_id=message_id: self._deliver(message_id)))
        return len(self.stored_messages)

    def poll(self) -> int:
        """Dispatch queued events in order.

        Does nothing unless the session is started.

        Returns:
            Number of events dispatched
        """
        dispatched = 0
        while self._running:
            try:
                _, task = self._tasks.get_nowait()
            except Empty:
                break
            task()
            dispatched += 1
        return dispatched

    def fragment(self, content: str) -> list[str]:
        """Split ``content`` into the segments the modem would transmit."""
        if len(content) <= self.config.segment_length:
            return [content]
        size = self.config.concatenated_segment_length
        return [content[i : i + size] for i in range(0, len(content), size)]

    # -- internals -----------------------------------------------------------

    def _transmit(self, to: str, content: str, completion: SendCompletion) -> None:
        fragments = self.fragment(content)
        error, self._pending_error = self._pending_error, None
        if error is not None:
            outcomes = [False] * len(fragments)
        else:
            outcomes = [self._fragment_delivered(i) for i in range(len(fragments))]

        self.sent.append((to, fragments, outcomes))
        LOGGER.debug(
            "Mock session sent %d fragment(s) to %s: %s", len(fragments), to, outcomes
        )
        self._complete(completion, error, SendResult.from_fragments(outcomes))

    def _complete(
        self,
        completion: SendCompletion,
        error: BaseException | None,
        result: SendResult,
    ) -> None:
        try:
            completion(error, result)
        except Exception:
            LOGGER.exception("Mock session send completion failed")

    def _fragment_delivered(self, index: int) -> bool:
        if index in self.config.failed_fragments:
            return False
        return self._random.random() >= self.config.fragment_failure_probability

    def _deliver(self, message_id: int) -> None:
        message = self.stored_messages.get(message_id)
        if message is None:
            return

        for listener in list(self._listeners["receive"]):
            try:
                listener(message, self._make_ack(message_id))
            except Exception:
                LOGGER.exception("Mock session receive listener failed; message %d kept", message_id)

    def _make_ack(self, message_id: int) -> AckCallback:
        def ack(err: BaseException | None = None) -> None:
            self.acks.append((message_id, err))
            if err:
                LOGGER.debug("Mock session keeping message %d: %s", message_id, err)
                return
            self.stored_messages.pop(message_id, None)
            LOGGER.debug("Mock session deleted message %d", message_id)

        return ack

    def _emit_error(self, err: BaseException) -> None:
        for listener in list(self._listeners["error"]):
            try:
                listener(err)
            except Exception:
                LOGGER.exception("Mock session error listener failed")

    def _poll_loop(self) -> None:
        LOGGER.debug("Mock session poll thread started")
        while self._running:
            self.poll()
            self._wake.wait(self.config.poll_interval)
        LOGGER.debug("Mock session poll thread stopped")

    def _check_alive(self) -> None:
        if self._destroyed:
            raise RuntimeError("Mock session has been destroyed")
