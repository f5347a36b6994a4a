"""Status snapshots for the known feature modules.

``ModuleStatus`` is a closed union; consumers dispatch with ``match``::

    for status in repeater.status():
        match status:
            case BalizaStatus(running=True, next_fire_at=when):
                ...
            case RogerBeepStatus(enabled=False):
                ...
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from repeaterkit.models.enums import DetectorState, FeatureModule, RogerBeepStyle, SchedulerState


@dataclass(frozen=True)
class RogerBeepStatus:
    enabled: bool
    style: RogerBeepStyle
    volume: float
    duration_ms: int
    delay_ms: int


@dataclass(frozen=True)
class BalizaStatus:
    enabled: bool
    running: bool
    state: SchedulerState
    interval_minutes: int
    next_fire_at: datetime | None
    last_fire_at: datetime | None
    transmission_count: int


@dataclass(frozen=True)
class ChannelStatus:
    active: bool
    level: float
    threshold: float
    transmitting: bool


@dataclass(frozen=True)
class DecoderStatus:
    state: DetectorState
    candidate: str | None
    consecutive_count: int


ModuleStatus = RogerBeepStatus | BalizaStatus | ChannelStatus | DecoderStatus


def module_activity(status: ModuleStatus) -> tuple[FeatureModule, bool]:
    """Map a status snapshot to its module and whether it is currently active."""
    match status:
        case RogerBeepStatus(enabled=enabled):
            return FeatureModule.ROGER_BEEP, enabled
        case BalizaStatus(running=running):
            return FeatureModule.BALIZA, running
        case ChannelStatus(active=active, transmitting=transmitting):
            return FeatureModule.CHANNEL, active or transmitting
        case DecoderStatus(state=state):
            return FeatureModule.DTMF, state is not DetectorState.IDLE
    raise TypeError(f"unknown module status: {status!r}")
