"""
Audio file utilities.

Duration probing for manifests (mutagen) and generation of the synthetic
demo songs used by the fallback catalog.
"""

import array
import logging
import math
import sys
import wave
from dataclasses import dataclass
from pathlib import Path
from typing import List

from mutagen import File as MutagenFile, MutagenError

from shared.constants import SUPPORTED_AUDIO_FORMATS

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
BIT_DEPTH = 16
CHANNELS = 2
SINE_AMPLITUDE = 32760
FADE_SECONDS = 1.5


@dataclass
class DemoSong:
    name: str
    seconds: int
    frequency: float
    fade: bool


DEMO_SONGS: List[DemoSong] = [
    DemoSong('aurora-echoes', 32, 432, True),
    DemoSong('sunset-drive', 28, 520, False),
    DemoSong('opalescent-sky', 36, 396, True),
    DemoSong('midnight-canvas', 30, 480, False),
    DemoSong('luminous-trails', 26, 444, True),
]


class AudioProcessor:
    """Handler for audio file operations."""

    @staticmethod
    def is_supported_format(file_path: str) -> bool:
        """Check if the file extension is a playable audio format."""
        return Path(file_path).suffix.lower() in SUPPORTED_AUDIO_FORMATS

    @staticmethod
    def read_duration(file_path: str) -> float:
        """
        Read the duration of an audio file with mutagen.

        Returns:
            Duration in seconds, 0 if the file cannot be parsed
        """
        try:
            audio = MutagenFile(file_path)
        except (MutagenError, OSError) as e:
            logger.debug(f"Could not read {file_path}: {e}")
            return 0
        if audio is None or not hasattr(audio.info, 'length'):
            return 0
        return round(float(audio.info.length), 2)

    @staticmethod
    def envelope(t: float, seconds: float, fade: bool) -> float:
        """Linear fade in/out over FADE_SECONDS at both ends."""
        if not fade:
            return 1.0
        return min(min(1.0, t / FADE_SECONDS), min(1.0, (seconds - t) / FADE_SECONDS))

    @staticmethod
    def write_sine_wave(path: Path, seconds: int, frequency: float, fade: bool = False) -> Path:
        """Write a 16-bit stereo PCM WAV containing a pure sine tone."""
        sample_count = int(seconds * SAMPLE_RATE)
        samples = array.array('h', bytes(sample_count * CHANNELS * 2))
        step = 2 * math.pi * frequency / SAMPLE_RATE

        for i in range(sample_count):
            t = i / SAMPLE_RATE
            value = int(math.sin(step * i) * SINE_AMPLITUDE * AudioProcessor.envelope(t, seconds, fade))
            for c in range(CHANNELS):
                samples[i * CHANNELS + c] = value

        if sys.byteorder == 'big':
            samples.byteswap()

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with wave.open(str(path), 'wb') as wav:
            wav.setnchannels(CHANNELS)
            wav.setsampwidth(BIT_DEPTH // 8)
            wav.setframerate(SAMPLE_RATE)
            wav.writeframes(samples.tobytes())
        return path

    @staticmethod
    def generate_demo_songs(target_dir: Path, songs: List[DemoSong] = DEMO_SONGS) -> List[Path]:
        """Generate the demo songs the fallback catalog points at."""
        written = []
        for song in songs:
            path = Path(target_dir) / f"{song.name}.wav"
            AudioProcessor.write_sine_wave(path, song.seconds, song.frequency, song.fade)
            logger.info(f"Generated {path}")
            written.append(path)
        return written
