"""Typed events emitted by repeater components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime


def _utcnow() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(UTC)


@dataclass(frozen=True)
class DTMFSequenceEvent:
    """A complete DTMF command sequence (e.g. ``"*9"``) was collected."""

    sequence: str
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ChannelActiveEvent:
    """Incoming carrier or voice pushed the channel above the threshold."""

    level: float
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ChannelInactiveEvent:
    """The channel has been quiet for the sustain time."""

    duration_ms: float
    """How long the channel was active."""

    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class BalizaStartedEvent:
    next_fire_at: datetime
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class BalizaStoppedEvent:
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class BalizaTransmittedEvent:
    """The beacon sequence was played on air."""

    fired_at: datetime
    transmission_count: int
    duration_ms: int
    manual: bool = False
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class BalizaErrorEvent:
    """A firing failed with an unexpected error."""

    error: str
    timestamp: datetime = field(default_factory=_utcnow)


RepeaterEvent = (
    DTMFSequenceEvent
    | ChannelActiveEvent
    | ChannelInactiveEvent
    | BalizaStartedEvent
    | BalizaStoppedEvent
    | BalizaTransmittedEvent
    | BalizaErrorEvent
)
