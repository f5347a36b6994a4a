"""Audio rendering, frames and playback sinks."""

from repeaterkit.audio.frame import AudioFrame
from repeaterkit.audio.sequencer import (
    BBC_PIP_FREQUENCY_HZ,
    KENWOOD_FREQUENCIES,
    ToneSequencer,
)
from repeaterkit.audio.synth import (
    ToneSpec,
    concat,
    duration_ms_of,
    render_silence,
    render_sweep,
    render_tone,
    sample_count,
    write_wav,
    write_wav_file,
)

__all__ = [
    "BBC_PIP_FREQUENCY_HZ",
    "KENWOOD_FREQUENCIES",
    "AudioFrame",
    "ToneSequencer",
    "ToneSpec",
    "concat",
    "duration_ms_of",
    "render_silence",
    "render_sweep",
    "render_tone",
    "sample_count",
    "write_wav",
    "write_wav_file",
]
