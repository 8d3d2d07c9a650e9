"""Tests for message models and send classification."""

from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from smstransport.messages import (
    InboundMessage,
    OutboundMessage,
    SendResult,
    SendStatus,
    classify_fragments,
)


class TestClassifyFragments:
    """Tests for success/partial/failure classification."""

    def test_single_fragment_success(self) -> None:
        assert classify_fragments([True]) is SendStatus.SUCCESS

    def test_single_fragment_failure(self) -> None:
        assert classify_fragments([False]) is SendStatus.FAILURE

    def test_all_fragments_success(self) -> None:
        assert classify_fragments([True, True, True]) is SendStatus.SUCCESS

    def test_some_fragments_partial(self) -> None:
        assert classify_fragments([True, False, True]) is SendStatus.PARTIAL
        assert classify_fragments([False, True]) is SendStatus.PARTIAL

    def test_no_fragments_delivered_failure(self) -> None:
        assert classify_fragments([False, False, False]) is SendStatus.FAILURE

    def test_empty_is_failure(self) -> None:
        """Test nothing transmitted counts as failure."""
        assert classify_fragments([]) is SendStatus.FAILURE

    def test_status_values_are_wire_strings(self) -> None:
        assert [s.value for s in SendStatus] == ["success", "partial", "failure"]


class TestSendResult:
    """Tests for SendResult."""

    def test_from_fragments_counts(self) -> None:
        result = SendResult.from_fragments([True, False, True])

        assert result.result is SendStatus.PARTIAL
        assert result.fragments_total == 3
        assert result.fragments_sent == 2

    def test_result_accepts_string(self) -> None:
        """Test the classification can be given as its string value."""
        assert SendResult(result="success").result is SendStatus.SUCCESS

    def test_result_rejects_unknown_status(self) -> None:
        with pytest.raises(ValidationError):
            SendResult(result="delivered")


class TestOutboundMessage:
    """Tests for OutboundMessage validation."""

    def test_valid_message(self) -> None:
        message = OutboundMessage(to="+15551234", content="hello")

        assert message.to == "+15551234"
        assert message.content == "hello"

    def test_from_mapping(self) -> None:
        message = OutboundMessage.model_validate({"to": "+15551234", "content": "hello"})
        assert message.content == "hello"

    @pytest.mark.parametrize(
        "fields",
        [
            {},
            {"to": "+15551234"},
            {"content": "hello"},
            {"to": "", "content": "hello"},
            {"to": "+15551234", "content": ""},
            {"to": 15551234, "content": "hello"},
            {"to": "+15551234", "content": b"hello"},
            {"to": "+15551234", "content": "hello", "extra": 1},
        ],
    )
    def test_invalid_message(self, fields: dict) -> None:
        with pytest.raises(ValidationError):
            OutboundMessage.model_validate(fields)

    def test_unicode_content(self) -> None:
        """Test non-ASCII text is kept as-is."""
        message = OutboundMessage(to="+15551234", content="Habari za asubuhi ☀")
        assert message.content.endswith("☀")

    def test_frozen(self) -> None:
        message = OutboundMessage(to="+15551234", content="hello")
        with pytest.raises(ValidationError):
            message.to = "+15550000"


class TestInboundMessage:
    """Tests for InboundMessage."""

    def test_from_alias(self) -> None:
        """Test the wire name ``from`` populates ``from_``."""
        message = InboundMessage.model_validate(
            {"from": "+15551234", "timestamp": "2024-05-01T12:00:00Z", "content": "hi"}
        )

        assert message.from_ == "+15551234"
        assert message.timestamp.year == 2024
        assert message.content == "hi"

    def test_populate_by_field_name(self) -> None:
        message = InboundMessage(from_="+15551234", content="hi")
        assert message.from_ == "+15551234"

    def test_timestamp_defaults_to_now(self) -> None:
        message = InboundMessage(from_="+15551234", content="hi")
        assert isinstance(message.timestamp, datetime)
        assert message.timestamp.tzinfo is not None

    def test_dump_by_alias(self) -> None:
        message = InboundMessage(from_="+15551234", content="hi")
        assert message.model_dump(by_alias=True)["from"] == "+15551234"

    def test_sender_required(self) -> None:
        with pytest.raises(ValidationError):
            InboundMessage(content="hi")
