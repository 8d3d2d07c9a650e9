"""Configuration for SMS drivers.

Driver options are validated once, when the driver is initialized. Unknown
keys are rejected so a typo in a configuration file surfaces immediately
instead of being silently ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from smstransport.exceptions import InvalidArgumentError


class DriverOptions(BaseModel):
    """Options understood by every driver.

    Attributes:
        name: Registry name of the driver these options are for (optional,
            used by the transport factory)
        debug: Emit a diagnostic trace of each send/receive phase. Has no
            other behavioral effect.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str | None = None
    debug: bool = False


class GammuJsonOptions(DriverOptions):
    """Options for the gammu-json driver.

    Attributes:
        device: Modem device path handed to the device session
        poll_interval: Seconds between inbox polls while started
        segment_length: Characters that fit in a single SMS
        concatenated_segment_length: Characters per fragment once a message
            has to be split (the rest of each segment holds the UDH header)

    Examples:
        ```python
        options = GammuJsonOptions(device="/dev/ttyUSB0", debug=True)
        ```
    """

    device: str = "/dev/ttyUSB0"
    poll_interval: float = Field(default=5.0, gt=0)
    segment_length: int = Field(default=160, gt=0)
    concatenated_segment_length: int = Field(default=153, gt=0)

    @model_validator(mode="after")
    def _check_segment_lengths(self) -> GammuJsonOptions:
        if self.concatenated_segment_length > self.segment_length:
            raise ValueError(
                "concatenated_segment_length must be <= segment_length, "
                f"got {self.concatenated_segment_length} > {self.segment_length}"
            )
        return self


def coerce_options(
    options_cls: type[DriverOptions],
    options: DriverOptions | Mapping[str, Any] | None,
) -> DriverOptions:
    """Turn ``None``, a mapping, or an options model into ``options_cls``.

    Raises:
        InvalidArgumentError: If a field is unknown, has the wrong type, or
            conflicts with another field
    """
    if isinstance(options, options_cls):
        return options
    if options is None:
        data: Mapping[str, Any] = {}
    elif isinstance(options, DriverOptions):
        data = options.model_dump(exclude_unset=True)
    else:
        data = options
    try:
        return options_cls.model_validate(dict(data))
    except ValidationError as exc:
        raise InvalidArgumentError(
            f"Invalid {options_cls.__name__}: {exc.error_count()} error(s): {exc}"
        ) from exc


@dataclass
class MockSessionConfig:
    """Configuration for the simulated modem session.

    Attributes:
        segment_length: Characters that fit in a single SMS (default 160)
        concatenated_segment_length: Characters per fragment when a message
            must be split (default 153)
        fragment_failure_probability: Probability that any one fragment fails
            to reach the network (default 0.0)
        failed_fragments: Zero-based fragment indices that always fail,
            regardless of probability. Useful for deterministic tests of
            partial sends.
        recipient_pattern: Regular expression a recipient must fully match;
            anything else is rejected synchronously by ``send``
        threaded: Drain the event queue from a background thread while
            started. When False, call ``poll()`` to dispatch events.
        poll_interval: Seconds the background thread sleeps between drains
        seed: Seed for the failure RNG, for reproducible runs

    Examples:
        ```python
        from smstransport.driver import MockDeviceSession, MockSessionConfig

        # Second fragment of every message is lost
        config = MockSessionConfig(failed_fragments=frozenset({1}))
        session = MockDeviceSession(config)
        ```
    """

    segment_length: int = 160
    concatenated_segment_length: int = 153
    fragment_failure_probability: float = 0.0
    failed_fragments: frozenset[int] = field(default_factory=frozenset)
    recipient_pattern: str = r"\+?[0-9]{3,20}"
    threaded: bool = False
    poll_interval: float = 0.01
    seed: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.segment_length <= 0:
            raise ValueError(f"segment_length must be > 0, got {self.segment_length}")

        if not 0 < self.concatenated_segment_length <= self.segment_length:
            raise ValueError(
                "concatenated_segment_length must be 1-segment_length, "
                f"got {self.concatenated_segment_length}"
            )

        if not 0.0 <= self.fragment_failure_probability <= 1.0:
            raise ValueError(
                "fragment_failure_probability must be 0.0-1.0, "
                f"got {self.fragment_failure_probability}"
            )

        if any(index < 0 for index in self.failed_fragments):
            raise ValueError(f"failed_fragments must be >= 0, got {sorted(self.failed_fragments)}")

        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {self.poll_interval}")

        self.failed_fragments = frozenset(self.failed_fragments)
