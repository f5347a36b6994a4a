"""Mock DTMF detector for testing."""

from __future__ import annotations

from typing import TYPE_CHECKING

from repeaterkit.dtmf.base import DTMFDetector, DTMFEvent

if TYPE_CHECKING:
    from repeaterkit.audio.frame import AudioFrame


class MockDTMFDetector(DTMFDetector):
    """Returns a scripted event (or None) for each processed frame."""

    def __init__(self, script: list[DTMFEvent | None] | None = None) -> None:
        self._script = list(script or [])
        self._position = 0
        self.frames: list[AudioFrame] = []
        self.reset_count = 0
        self.closed = False

    @classmethod
    def from_digits(cls, digits: str, *, gap: int = 0) -> MockDTMFDetector:
        """Script one confirmed event per digit, separated by *gap* empty frames."""
        script: list[DTMFEvent | None] = []
        for digit in digits:
            script.append(DTMFEvent(digit=digit, duration_ms=60.0))
            script.extend([None] * gap)
        return cls(script)

    @property
    def name(self) -> str:
        return "MockDTMFDetector"

    def process(self, frame: AudioFrame) -> DTMFEvent | None:
        self.frames.append(frame)
        if self._position >= len(self._script):
            return None
        event = self._script[self._position]
        self._position += 1
        return event

    def reset(self) -> None:
        self._position = 0
        self.reset_count += 1

    def close(self) -> None:
        self.closed = True
