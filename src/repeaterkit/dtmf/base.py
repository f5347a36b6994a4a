"""DTMF tone detector ABC and the standard keypad layout."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from repeaterkit.audio.frame import AudioFrame

DTMF_LOW_FREQUENCIES: tuple[float, ...] = (697.0, 770.0, 852.0, 941.0)
DTMF_HIGH_FREQUENCIES: tuple[float, ...] = (1209.0, 1336.0, 1477.0, 1633.0)

# Row = low-group index, column = high-group index.
DTMF_MATRIX: tuple[tuple[str, ...], ...] = (
    ("1", "2", "3", "A"),
    ("4", "5", "6", "B"),
    ("7", "8", "9", "C"),
    ("*", "0", "#", "D"),
)


def digit_frequencies(digit: str) -> tuple[float, float]:
    """Return the (low, high) tone pair for a keypad symbol."""
    for row, symbols in enumerate(DTMF_MATRIX):
        if digit in symbols:
            return DTMF_LOW_FREQUENCIES[row], DTMF_HIGH_FREQUENCIES[symbols.index(digit)]
    raise ValueError(f"not a DTMF symbol: {digit!r}")


@dataclass
class DTMFEvent:
    """A confirmed DTMF keypress."""

    digit: str
    """The DTMF digit ('0'-'9', '*', '#', 'A'-'D')."""

    duration_ms: float
    """Audio analysed before the digit was confirmed, in milliseconds."""

    confidence: float = 1.0
    """Dual-tone balance of the confirming window (0.0 to 1.0)."""


class DTMFDetector(ABC):
    """Abstract base class for DTMF tone detectors."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Detector name (e.g. 'fft')."""
        ...

    @abstractmethod
    def process(self, frame: AudioFrame) -> DTMFEvent | None:
        """Analyse an audio frame for DTMF tones.

        Args:
            frame: The audio frame to analyse.

        Returns:
            A DTMFEvent if a keypress was confirmed, else None.
        """
        ...

    def reset(self) -> None:  # noqa: B027
        """Reset internal state."""

    def close(self) -> None:  # noqa: B027
        """Release resources."""
