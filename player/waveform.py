"""
Waveform progress model.

Builds the scrubber geometry the display layer draws: an oscillating line
over the played part of the track and a flat line over the rest. The wave
moves with a phase value that only advances while audio is playing.
"""

import asyncio
import logging
import math
from dataclasses import dataclass, asdict
from typing import Callable, List, Optional, Tuple

from shared.constants import (
    DEFAULT_WAVE_HEIGHT,
    DEFAULT_WAVE_WIDTH,
    WAVE_AMPLITUDE,
    WAVE_MIN_SAMPLES,
    WAVE_PHASE_STEP,
    WAVE_SAMPLE_SPACING,
    WAVE_TICK_INTERVAL,
    WAVE_WAVELENGTH,
)

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi


@dataclass(frozen=True)
class WaveformPath:
    """SVG path data for the two halves of the scrubber."""
    elapsed: str
    remaining: str
    split_x: float
    ratio: float

    def to_dict(self) -> dict:
        return asdict(self)


def progress_ratio(progress: float, duration: float) -> float:
    """progress / duration, with unknown (0) duration treated as 1 second."""
    return min(max(progress / max(duration, 1), 0.0), 1.0)


def _path(points: List[Tuple[float, float]]) -> str:
    head, *rest = points
    parts = [f"M {head[0]:.2f} {head[1]:.2f}"]
    parts.extend(f"L {x:.2f} {y:.2f}" for x, y in rest)
    return " ".join(parts)


class WaveformModel:
    """Scrubber geometry for a fixed display size."""

    def __init__(self, width: float = DEFAULT_WAVE_WIDTH, height: float = DEFAULT_WAVE_HEIGHT,
                 wavelength: float = WAVE_WAVELENGTH, amplitude: float = WAVE_AMPLITUDE):
        if width <= 0 or height <= 0:
            raise ValueError("Waveform dimensions must be positive")
        self.width = float(width)
        self.height = float(height)
        self.wavelength = wavelength
        self.amplitude = amplitude

    def sample_count(self, elapsed_width: float) -> int:
        """More samples for wider spans so the curve looks equally smooth at any progress."""
        return max(WAVE_MIN_SAMPLES, math.ceil(elapsed_width / WAVE_SAMPLE_SPACING))

    def wave_y(self, x: float, phase: float) -> float:
        return self.height / 2 + self.amplitude * math.sin(TWO_PI * x / self.wavelength + phase)

    def build(self, progress: float, duration: float, phase: float = 0.0) -> WaveformPath:
        ratio = progress_ratio(progress, duration)
        split_x = self.width * ratio
        mid = self.height / 2

        samples = self.sample_count(split_x)
        points = [
            (split_x * i / samples, self.wave_y(split_x * i / samples, phase))
            for i in range(samples + 1)
        ]
        remaining = _path([(split_x, mid), (self.width, mid)])
        return WaveformPath(elapsed=_path(points), remaining=remaining,
                            split_x=split_x, ratio=ratio)


class PhaseAnimator:
    """
    Advances the wave phase on a fixed tick while playback is running.

    The ticking task only exists while playing; :meth:`stop` cancels it, so
    a paused or finished player has no timer work scheduled.
    """

    def __init__(self, interval: float = WAVE_TICK_INTERVAL, step: float = WAVE_PHASE_STEP,
                 on_tick: Optional[Callable[[float], None]] = None):
        self.interval = interval
        self.step = step
        self.phase = 0.0
        self._on_tick = on_tick
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sync(self, is_playing: bool) -> None:
        if is_playing:
            self.start()
        else:
            self.stop()

    def start(self) -> None:
        """Start ticking; must be called from the event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    close = stop

    def advance(self) -> float:
        self.phase = (self.phase + self.step) % TWO_PI
        if self._on_tick is not None:
            self._on_tick(self.phase)
        return self.phase

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.advance()
