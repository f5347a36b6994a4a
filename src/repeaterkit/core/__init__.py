"""Channel arbitration, occupancy detection and timers."""

from repeaterkit.core.arbiter import ChannelOccupancy, TransmitArbiter
from repeaterkit.core.channel import ChannelActivityDetector
from repeaterkit.core.listeners import EventListener, ListenerSet
from repeaterkit.core.timer import SingleShotTimer

__all__ = [
    "ChannelActivityDetector",
    "ChannelOccupancy",
    "EventListener",
    "ListenerSet",
    "SingleShotTimer",
    "TransmitArbiter",
]
