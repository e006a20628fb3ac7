"""
Audible alert for PingTrack.
Plays a sound file, or a synthesized tone burst, on the default output device.
"""

import logging
import threading
from pathlib import Path
from typing import Optional

import numpy as np
import soundfile as sf

from ..core.config import AlertConfig


def generate_tone(frequency: int, duration: float, sample_rate: int,
                  volume: float = 0.5) -> np.ndarray:
    """Generate a sine tone burst as float32 samples with a 10ms fade in/out."""
    samples = int(sample_rate * duration)
    t = np.linspace(0, duration, samples, False)
    tone = np.sin(2 * np.pi * frequency * t) * volume

    # Fade to avoid clicks
    fade_samples = min(int(0.01 * sample_rate), samples // 2)
    if fade_samples > 0:
        tone[:fade_samples] *= np.linspace(0, 1, fade_samples)
        tone[-fade_samples:] *= np.linspace(1, 0, fade_samples)

    return tone.astype(np.float32)


class SoundNotifier:
    """Fire-and-forget alert sound.

    ``notify()`` returns immediately; playback runs on a daemon thread and
    an alert raised while one is still playing is dropped. Playback errors
    are logged, never raised.
    """

    def __init__(self, config: AlertConfig):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self._playing = threading.Lock()
        self._audio, self._sample_rate = self._load_sound()

    def _load_sound(self):
        if self.config.sound_file:
            path = Path(self.config.sound_file).expanduser()
            try:
                data, sample_rate = sf.read(path, dtype='float32', always_2d=True)
                # Mix down to mono
                audio = data.mean(axis=1).astype(np.float32) * self.config.volume
                self.logger.info(f"Loaded alert sound: {path}")
                return audio, sample_rate
            except (OSError, RuntimeError) as e:
                self.logger.warning(f"Failed to load alert sound {path}, using tone: {e}")

        tone = generate_tone(
            self.config.tone_frequency,
            self.config.tone_duration,
            self.config.sample_rate,
            self.config.volume
        )
        return tone, self.config.sample_rate

    @property
    def duration(self) -> float:
        return len(self._audio) / float(self._sample_rate)

    def notify(self) -> None:
        if not self.config.enabled:
            return

        if not self._playing.acquire(blocking=False):
            self.logger.debug("Alert already playing, skipping")
            return

        thread = threading.Thread(target=self._play, name="pingtrack-alert", daemon=True)
        try:
            thread.start()
        except RuntimeError as e:
            self._playing.release()
            self.logger.warning(f"Failed to start alert playback: {e}")

    def _play(self) -> None:
        audio = None
        stream = None
        try:
            import pyaudio

            audio = pyaudio.PyAudio()
            stream = audio.open(
                format=pyaudio.paFloat32,
                channels=1,
                rate=int(self._sample_rate),
                output=True
            )
            stream.write(self._audio.tobytes())
        except Exception as e:
            self.logger.warning(f"Failed to play alert sound: {e}")
        finally:
            try:
                self._release_device(audio, stream)
            finally:
                self._playing.release()

    def _release_device(self, audio, stream) -> None:
        if stream is not None:
            for cleanup in (stream.stop_stream, stream.close):
                try:
                    cleanup()
                except Exception as e:
                    self.logger.debug(f"Error closing alert stream: {e}")
        if audio is not None:
            try:
                audio.terminate()
            except Exception as e:
                self.logger.debug(f"Error releasing audio device: {e}")


class NullNotifier:
    """Notifier used when alerts are disabled."""

    def notify(self) -> None:
        pass


def create_notifier(config: AlertConfig):
    if not config.enabled:
        return NullNotifier()
    return SoundNotifier(config)
