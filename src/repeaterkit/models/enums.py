"""All string enums for repeaterkit."""

from __future__ import annotations

from enum import StrEnum, unique


@unique
class RogerBeepStyle(StrEnum):
    CLASSIC = "classic"
    MOTOROLA = "motorola"
    KENWOOD = "kenwood"
    CUSTOM = "custom"


@unique
class DetectorState(StrEnum):
    IDLE = "idle"
    CANDIDATE = "candidate"
    COOLDOWN = "cooldown"


@unique
class SchedulerState(StrEnum):
    IDLE = "idle"
    ARMED = "armed"
    FIRING = "firing"


@unique
class FeatureModule(StrEnum):
    ROGER_BEEP = "roger_beep"
    BALIZA = "baliza"
    CHANNEL = "channel"
    DTMF = "dtmf"
