"""Completion chime synthesis and playback using numpy + QSoundEffect.

The chime is generated programmatically as a WAV file (sine waves shaped
by an ADSR envelope) and cached on disk, so later launches only load it.
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..storage.db import APP_SUPPORT_DIR

logger = logging.getLogger(__name__)

SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"
COMPLETE_SOUND = "timer_complete"
SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(
    length: int,
    attack: int = 200,
    decay: int = 400,
    sustain_level: float = 0.7,
    release: int = 800,
) -> np.ndarray:
    """ADSR envelope (all durations in samples)."""
    env = np.ones(length, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    d_end = min(a + decay, length)
    if decay > 0 and d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    s_end = max(length - release, d_end)
    if s_end > d_end:
        env[d_end:s_end] = sustain_level
    if release > 0 and s_end < length:
        env[s_end:] = np.linspace(sustain_level, 0.0, length - s_end)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 array (-1..1) to 16-bit mono PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


def generate_complete_chime() -> bytes:
    """Countdown finished: bright arpeggio C5→E5→G5→C6 with a held top note."""
    notes = [523.25, 659.25, 783.99, 1046.50]
    gap = 0.02
    parts: list[np.ndarray] = []
    for i, freq in enumerate(notes):
        if i == len(notes) - 1:
            tone = _sine(freq, 0.35) * 0.5 + _sine(freq * 2, 0.35) * 0.08
            env = _make_envelope(len(tone), attack=80, decay=300, sustain_level=0.5, release=600)
            parts.append(tone * env)
        else:
            tone = _sine(freq, 0.10) * 0.5
            env = _make_envelope(len(tone), attack=60, decay=150, sustain_level=0.3, release=200)
            parts.append(tone * env)
            parts.append(np.zeros(int(SAMPLE_RATE * gap)))
    return _to_wav_bytes(np.concatenate(parts))


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Caches the chime WAV and plays it.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_volume(70)
        mgr.play()
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effect: QSoundEffect | None = None

        self._ensure_wav_file()
        self._load_effect()

    @property
    def wav_path(self) -> Path:
        return self._sounds_dir / f"{COMPLETE_SOUND}.wav"

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def loaded(self) -> bool:
        return self._effect is not None

    def set_volume(self, level: int) -> None:
        self._volume = max(0, min(level, 100)) / 100.0
        if self._effect is not None:
            self._effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self) -> bool:
        """Play the chime.  Returns False when disabled or not loaded."""
        if not self._enabled or self._effect is None:
            return False
        self._effect.play()
        return True

    def _ensure_wav_file(self) -> None:
        try:
            self._sounds_dir.mkdir(parents=True, exist_ok=True)
            if not self.wav_path.exists():
                self.wav_path.write_bytes(generate_complete_chime())
        except OSError as exc:
            logger.warning("Could not write %s: %s", self.wav_path, exc)

    def _load_effect(self) -> None:
        if not self.wav_path.exists():
            return
        effect = QSoundEffect(self)
        effect.setSource(QUrl.fromLocalFile(str(self.wav_path)))
        effect.setVolume(self._volume)
        self._effect = effect
