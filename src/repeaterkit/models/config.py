"""Configuration models for the repeater core.

Every component receives its configuration object at construction time.
Hard limits (values that make no sense at all, such as a zero sample rate)
are enforced by pydantic and raise ``ValidationError``.  Soft limits
(volume, beep duration, frequencies) never reject input: out-of-range values
are clamped to the nearest bound, unusable values fall back to the field
default, and each correction is logged once as a warning.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from repeaterkit.errors import ConfigOutOfRange
from repeaterkit.models.enums import RogerBeepStyle

logger = logging.getLogger("repeaterkit.config")

MIN_VOLUME = 0.1
MAX_VOLUME = 1.0
MIN_BEEP_DURATION_MS = 50
MAX_BEEP_DURATION_MS = 1000
MAX_BEEP_DELAY_MS = 500
MIN_TONE_FREQUENCY_HZ = 100.0
MAX_TONE_FREQUENCY_HZ = 4000.0
MIN_CHANNEL_THRESHOLD = 0.001
MAX_CHANNEL_THRESHOLD = 0.1


def clamp_setting(
    name: str,
    value: Any,
    *,
    low: float,
    high: float,
    default: float,
) -> float:
    """Clamp *value* into ``[low, high]``, logging when it had to be corrected.

    Non-numeric and NaN values are replaced by *default*.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("%s", ConfigOutOfRange(name, value, default, "is not a number"))
        return default
    if math.isnan(number):
        logger.warning("%s", ConfigOutOfRange(name, value, default, "is NaN"))
        return default
    if number < low or number > high:
        clamped = min(max(number, low), high)
        logger.warning(
            "%s", ConfigOutOfRange(name, value, clamped, f"out of range [{low}, {high}], clamped")
        )
        return clamped
    return number


class DTMFConfig(BaseModel):
    """Tuning for the FFT DTMF decoder.

    ``purity_ratio`` and ``required_count`` are hand-tuned defaults rather
    than hard invariants.
    """

    sample_rate: int = Field(default=48000, gt=0, le=192_000)
    window_size: int = Field(default=1024, ge=64)
    threshold: float = Field(default=0.05, gt=0.0)
    required_count: int = Field(default=3, ge=1)
    min_signal_level: float = Field(default=0.02, ge=0.0)
    purity_ratio: float = Field(default=0.3, ge=0.0, le=1.0)
    cooldown_ms: float = Field(default=800.0, ge=0.0)
    cleanup_interval_ms: float = Field(default=3000.0, gt=0.0)
    sequence_timeout_ms: float = Field(default=2000.0, gt=0.0)


class RogerBeepConfig(BaseModel):
    """Roger-beep settings. Soft limits are clamped, never rejected."""

    enabled: bool = True
    style: RogerBeepStyle = RogerBeepStyle.KENWOOD
    volume: float = 0.7
    duration_ms: int = 250
    delay_ms: int = 100

    @field_validator("volume", mode="before")
    @classmethod
    def _clamp_volume(cls, value: Any) -> float:
        return clamp_setting("roger_beep.volume", value, low=MIN_VOLUME, high=MAX_VOLUME, default=0.7)

    @field_validator("duration_ms", mode="before")
    @classmethod
    def _clamp_duration(cls, value: Any) -> int:
        return int(
            clamp_setting(
                "roger_beep.duration_ms",
                value,
                low=MIN_BEEP_DURATION_MS,
                high=MAX_BEEP_DURATION_MS,
                default=250,
            )
        )

    @field_validator("delay_ms", mode="before")
    @classmethod
    def _clamp_delay(cls, value: Any) -> int:
        return int(
            clamp_setting("roger_beep.delay_ms", value, low=0, high=MAX_BEEP_DELAY_MS, default=100)
        )

    @field_validator("style", mode="before")
    @classmethod
    def _coerce_style(cls, value: Any) -> RogerBeepStyle:
        try:
            return RogerBeepStyle(value)
        except ValueError:
            logger.warning("Unknown roger beep style %r, using kenwood", value)
            return RogerBeepStyle.KENWOOD


class BalizaConfig(BaseModel):
    """Hourly beacon settings.

    ``interval_minutes`` is informational: firing is always aligned to the
    top of the hour.
    """

    enabled: bool = True
    interval_minutes: int = Field(default=60, ge=1)
    volume: float = 0.7
    pip_frequency_hz: float = 1000.0
    retry_delay_s: float = Field(default=30.0, gt=0.0)
    acquire_timeout_ms: float = Field(default=5000.0, gt=0.0)

    @field_validator("volume", mode="before")
    @classmethod
    def _clamp_volume(cls, value: Any) -> float:
        return clamp_setting("baliza.volume", value, low=MIN_VOLUME, high=MAX_VOLUME, default=0.7)

    @field_validator("pip_frequency_hz", mode="before")
    @classmethod
    def _clamp_frequency(cls, value: Any, info: ValidationInfo) -> float:
        return clamp_setting(
            f"baliza.{info.field_name}",
            value,
            low=MIN_TONE_FREQUENCY_HZ,
            high=MAX_TONE_FREQUENCY_HZ,
            default=1000.0,
        )


class ArbiterConfig(BaseModel):
    """Transmit gate polling and timeout defaults."""

    poll_interval_ms: float = Field(default=500.0, gt=0.0)
    default_timeout_ms: float = Field(default=30000.0, gt=0.0)


class ChannelConfig(BaseModel):
    """Channel occupancy (carrier / voice) detection."""

    threshold: float = 0.02
    sustain_time_ms: float = Field(default=1000.0, ge=0.0)

    @field_validator("threshold", mode="before")
    @classmethod
    def _clamp_threshold(cls, value: Any) -> float:
        return clamp_setting(
            "channel.threshold",
            value,
            low=MIN_CHANNEL_THRESHOLD,
            high=MAX_CHANNEL_THRESHOLD,
            default=0.02,
        )


class RepeaterConfig(BaseModel):
    """Top-level configuration handed to :class:`~repeaterkit.core.repeater.Repeater`."""

    sample_rate: int = Field(default=48000, gt=0, le=192_000)
    dtmf: DTMFConfig = Field(default_factory=DTMFConfig)
    roger_beep: RogerBeepConfig = Field(default_factory=RogerBeepConfig)
    baliza: BalizaConfig = Field(default_factory=BalizaConfig)
    arbiter: ArbiterConfig = Field(default_factory=ArbiterConfig)
    channel: ChannelConfig = Field(default_factory=ChannelConfig)
