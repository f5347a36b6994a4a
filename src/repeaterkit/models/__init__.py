"""Configuration, event and status models."""

from repeaterkit.models.config import (
    ArbiterConfig,
    BalizaConfig,
    ChannelConfig,
    DTMFConfig,
    RepeaterConfig,
    RogerBeepConfig,
)
from repeaterkit.models.enums import DetectorState, FeatureModule, RogerBeepStyle, SchedulerState
from repeaterkit.models.events import (
    BalizaErrorEvent,
    BalizaStartedEvent,
    BalizaStoppedEvent,
    BalizaTransmittedEvent,
    ChannelActiveEvent,
    ChannelInactiveEvent,
    DTMFSequenceEvent,
    RepeaterEvent,
)
from repeaterkit.models.status import (
    BalizaStatus,
    ChannelStatus,
    DecoderStatus,
    ModuleStatus,
    RogerBeepStatus,
    module_activity,
)

__all__ = [
    "ArbiterConfig",
    "BalizaConfig",
    "BalizaErrorEvent",
    "BalizaStartedEvent",
    "BalizaStatus",
    "BalizaStoppedEvent",
    "BalizaTransmittedEvent",
    "ChannelActiveEvent",
    "ChannelConfig",
    "ChannelInactiveEvent",
    "ChannelStatus",
    "DTMFConfig",
    "DTMFSequenceEvent",
    "DecoderStatus",
    "DetectorState",
    "FeatureModule",
    "ModuleStatus",
    "RepeaterConfig",
    "RepeaterEvent",
    "RogerBeepConfig",
    "RogerBeepStatus",
    "RogerBeepStyle",
    "SchedulerState",
    "module_activity",
]
