"""Exception types raised by the repeater core."""

from __future__ import annotations


class RepeaterKitError(Exception):
    """Base exception for all repeaterkit errors."""


class InvalidWindowSizeError(RepeaterKitError):
    """Decoder received a window shorter than its configured size."""

    def __init__(self, got: int, expected: int) -> None:
        super().__init__(f"audio window has {got} samples, need at least {expected}")
        self.got = got
        self.expected = expected


class ChannelBusyTimeoutError(RepeaterKitError):
    """The transmit gate could not be acquired before the timeout elapsed."""

    def __init__(self, timeout_ms: float) -> None:
        super().__init__(f"channel still busy after {timeout_ms:.0f} ms")
        self.timeout_ms = timeout_ms


class SynthesisIoError(RepeaterKitError):
    """Rendered audio could not be materialised or handed to the player."""


class ConfigOutOfRange(RepeaterKitError):
    """A soft-limited setting was corrected instead of rejected.

    Never raised by the core: :func:`~repeaterkit.models.config.clamp_setting`
    builds one per correction and logs it as a warning.
    """

    def __init__(self, name: str, value: object, replacement: float, reason: str) -> None:
        super().__init__(f"Config {name}={value!r} {reason}, using {replacement}")
        self.name = name
        self.value = value
        self.replacement = replacement
