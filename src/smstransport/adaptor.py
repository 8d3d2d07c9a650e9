"""Adaptors translate between an application's message format and drivers.

Concrete format mappings live with the applications that need them. This
module only defines the interface the transport expects, plus a
pass-through adaptor for callers that already speak the driver's shape.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

from smstransport.messages import InboundMessage


class Adaptor(ABC):
    """Interface between the transport and an application message format."""

    name: ClassVar[str] = "abstract"

    def __init__(self) -> None:
        self.options: dict[str, Any] = {}

    def initialize(self, options: Mapping[str, Any] | None = None) -> Adaptor:
        self.options = dict(options or {})
        return self

    @abstractmethod
    def to_driver(self, message: Any) -> Mapping[str, Any]:
        """Convert an application message to ``{"to": ..., "content": ...}``."""

    @abstractmethod
    def from_driver(self, message: InboundMessage) -> Any:
        """Convert an inbound driver message to the application format."""


class PassthroughAdaptor(Adaptor):
    """Adaptor that hands messages through unchanged."""

    name: ClassVar[str] = "passthrough"

    def to_driver(self, message: Any) -> Any:
        return message

    def from_driver(self, message: InboundMessage) -> InboundMessage:
        return message
