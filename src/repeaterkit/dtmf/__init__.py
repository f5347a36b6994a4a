"""DTMF tone detection."""

from repeaterkit.dtmf.base import (
    DTMF_HIGH_FREQUENCIES,
    DTMF_LOW_FREQUENCIES,
    DTMF_MATRIX,
    DTMFDetector,
    DTMFEvent,
    digit_frequencies,
)
from repeaterkit.dtmf.fft import DetectionState, FFTDTMFDecoder
from repeaterkit.dtmf.mock import MockDTMFDetector
from repeaterkit.dtmf.sequence import DTMFSequenceCollector

__all__ = [
    "DTMF_HIGH_FREQUENCIES",
    "DTMF_LOW_FREQUENCIES",
    "DTMF_MATRIX",
    "DTMFDetector",
    "DTMFEvent",
    "DTMFSequenceCollector",
    "DetectionState",
    "FFTDTMFDecoder",
    "MockDTMFDetector",
    "digit_frequencies",
]
