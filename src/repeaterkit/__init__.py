"""repeaterkit - real-time audio core for an amateur-radio repeater."""

from repeaterkit._version import __version__
from repeaterkit.audio.frame import AudioFrame
from repeaterkit.audio.sequencer import ToneSequencer
from repeaterkit.audio.sinks import AudioSink, MockAudioSink, TempWavAudioSink
from repeaterkit.audio.synth import (
    ToneSpec,
    concat,
    render_silence,
    render_sweep,
    render_tone,
    write_wav,
    write_wav_file,
)
from repeaterkit.core.arbiter import TransmitArbiter
from repeaterkit.core.channel import ChannelActivityDetector
from repeaterkit.core.repeater import Repeater
from repeaterkit.core.timer import SingleShotTimer
from repeaterkit.dtmf import (
    DTMFDetector,
    DTMFEvent,
    DTMFSequenceCollector,
    FFTDTMFDecoder,
    MockDTMFDetector,
)
from repeaterkit.errors import (
    ChannelBusyTimeoutError,
    ConfigOutOfRange,
    InvalidWindowSizeError,
    RepeaterKitError,
    SynthesisIoError,
)
from repeaterkit.features import BalizaScheduler, RogerBeep
from repeaterkit.models import (
    ArbiterConfig,
    BalizaConfig,
    BalizaStatus,
    ChannelConfig,
    ChannelStatus,
    DecoderStatus,
    DTMFConfig,
    ModuleStatus,
    RepeaterConfig,
    RepeaterEvent,
    RogerBeepConfig,
    RogerBeepStatus,
    RogerBeepStyle,
    SchedulerState,
)

__all__ = [
    "ArbiterConfig",
    "AudioFrame",
    "AudioSink",
    "BalizaConfig",
    "BalizaScheduler",
    "BalizaStatus",
    "ChannelActivityDetector",
    "ChannelBusyTimeoutError",
    "ChannelConfig",
    "ChannelStatus",
    "ConfigOutOfRange",
    "DTMFConfig",
    "DTMFDetector",
    "DTMFEvent",
    "DTMFSequenceCollector",
    "DecoderStatus",
    "FFTDTMFDecoder",
    "InvalidWindowSizeError",
    "MockAudioSink",
    "MockDTMFDetector",
    "ModuleStatus",
    "Repeater",
    "RepeaterConfig",
    "RepeaterEvent",
    "RepeaterKitError",
    "RogerBeep",
    "RogerBeepConfig",
    "RogerBeepStatus",
    "RogerBeepStyle",
    "SchedulerState",
    "SingleShotTimer",
    "SynthesisIoError",
    "TempWavAudioSink",
    "ToneSequencer",
    "ToneSpec",
    "TransmitArbiter",
    "__version__",
    "concat",
    "render_silence",
    "render_sweep",
    "render_tone",
    "write_wav",
    "write_wav_file",
]
