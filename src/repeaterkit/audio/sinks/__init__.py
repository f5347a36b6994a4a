"""Playback sinks for transmit audio."""

from repeaterkit.audio.sinks.base import AudioSink
from repeaterkit.audio.sinks.mock import MockAudioSink, PlayedBuffer
from repeaterkit.audio.sinks.wavfile import TempWavAudioSink

__all__ = ["AudioSink", "MockAudioSink", "PlayedBuffer", "TempWavAudioSink"]
