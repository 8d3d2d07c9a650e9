"""Message shapes exchanged between drivers and their callers.

Outbound messages are validated here before a driver hands them to a device
session; inbound messages are built by device sessions. Send results carry
the success/partial/failure classification of a (possibly fragmented) send.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class SendStatus(str, enum.Enum):
    """Classification of an outbound send."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"


class OutboundMessage(BaseModel):
    """A message to transmit.

    Attributes:
        to: Phone number or MSISDN of the recipient
        content: Message body as text
    """

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    to: str = Field(min_length=1)
    content: str = Field(min_length=1)


class InboundMessage(BaseModel):
    """A message that arrived on the device.

    ``from`` is a Python keyword, so the field is ``from_`` with ``from`` as
    its alias; both spellings are accepted on construction.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    from_: str = Field(alias="from", min_length=1)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    content: str


class SendResult(BaseModel):
    """Outcome of a send as reported by the device session."""

    model_config = ConfigDict(frozen=True)

    result: SendStatus
    fragments_total: int = Field(default=1, ge=0)
    fragments_sent: int = Field(default=0, ge=0)

    @classmethod
    def from_fragments(cls, outcomes: Sequence[bool]) -> SendResult:
        """Build a result from per-fragment delivery outcomes."""
        return cls(
            result=classify_fragments(outcomes),
            fragments_total=len(outcomes),
            fragments_sent=sum(1 for ok in outcomes if ok),
        )


def classify_fragments(outcomes: Sequence[bool]) -> SendStatus:
    """Classify a send from the delivery outcome of each fragment.

    Args:
        outcomes: One boolean per fragment, True if it reached the network

    Returns:
        SUCCESS if every fragment was delivered, PARTIAL if some but not all
        were, FAILURE if none were (or there were no fragments at all)

    Examples:
        >>> classify_fragments([True])
        <SendStatus.SUCCESS: 'success'>
        >>> classify_fragments([True, False, True])
        <SendStatus.PARTIAL: 'partial'>
        >>> classify_fragments([False, False])
        <SendStatus.FAILURE: 'failure'>
    """
    sent = sum(1 for ok in outcomes if ok)
    if sent == 0:
        return SendStatus.FAILURE
    if sent == len(outcomes):
        return SendStatus.SUCCESS
    return SendStatus.PARTIAL
