"""Transmitting feature modules."""

from repeaterkit.features.baliza import BalizaScheduler, ScheduleState, next_top_of_hour
from repeaterkit.features.roger_beep import RogerBeep

__all__ = ["BalizaScheduler", "RogerBeep", "ScheduleState", "next_top_of_hour"]
