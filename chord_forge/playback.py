"""Strummed chord rendering for auditioning voicings.

A small polyphonic synth: one oscillator per note with an ADSR
envelope, notes started a few milliseconds apart like a pick stroke,
an optional waveshaping distortion and a peak limiter. Buffers are mono
float32 numpy arrays and can be written to WAV with soundfile.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

import numpy as np
import soundfile as sf
from numpy.typing import NDArray

from chord_forge.pitch_class import note_to_frequency

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

Waveform = Literal["triangle", "sawtooth"]


def db_to_gain(db: float) -> float:
    """Convert decibels to a linear gain factor."""
    return float(10.0 ** (db / 20.0))


@dataclass(frozen=True)
class SynthSettings:
    """Synth voice and output settings.

    Attributes
    ----------
    sample_rate : int
        Output sample rate in Hz.
    volume_db : float
        Master level before channel trim.
    clean_volume_db, distorted_volume_db : float
        Channel trim; the distorted channel is quieter to offset the gain.
    clean_waveform, distorted_waveform : Waveform
        Oscillator shape for each channel.
    attack, decay, release : float
        Envelope times in seconds.
    sustain : float
        Envelope sustain level (0 to 1).
    note_length : float
        Seconds each note is held before release (a half note at 120 bpm).
    strum_delay : float
        Seconds between successive note onsets.
    distortion : float
        Waveshaper drive amount (0 to 1).
    limiter_db : float
        Output peak ceiling in dBFS.
    """

    sample_rate: int = 44100
    volume_db: float = -5.0
    clean_volume_db: float = -2.0
    distorted_volume_db: float = -8.0
    clean_waveform: Waveform = "triangle"
    distorted_waveform: Waveform = "sawtooth"
    attack: float = 0.05
    decay: float = 2.0
    sustain: float = 0.3
    release: float = 2.0
    note_length: float = 1.0
    strum_delay: float = 0.03
    distortion: float = 0.8
    limiter_db: float = -1.0

    def __post_init__(self) -> None:
        """Validate settings."""
        if self.sample_rate <= 0:
            msg = f"sample_rate must be positive, got {self.sample_rate}"
            raise ValueError(msg)
        if not 0.0 <= self.sustain <= 1.0:
            msg = f"sustain must be between 0 and 1, got {self.sustain}"
            raise ValueError(msg)
        if not 0.0 <= self.distortion <= 1.0:
            msg = f"distortion must be between 0 and 1, got {self.distortion}"
            raise ValueError(msg)


def oscillator(waveform: Waveform, frequency: float, t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Band-unlimited oscillator sampled at times ``t`` (seconds)."""
    phase = t * frequency
    saw = 2.0 * (phase - np.floor(phase + 0.5))
    if waveform == "sawtooth":
        return saw
    return 2.0 * np.abs(saw) - 1.0


def envelope(settings: SynthSettings, num_samples: int) -> NDArray[np.float64]:
    """ADSR envelope for one note: attack, decay to sustain, hold, release."""
    sr = settings.sample_rate
    t = np.arange(num_samples) / sr
    gate = settings.note_length

    attack = np.clip(t / settings.attack, 0.0, 1.0) if settings.attack > 0 else np.ones_like(t)
    decay_pos = np.clip((t - settings.attack) / settings.decay, 0.0, 1.0) if settings.decay > 0 else 1.0
    held = attack * (1.0 - (1.0 - settings.sustain) * decay_pos)

    # Release starts from whatever level the note reached at the gate
    gate_index = min(int(gate * sr), num_samples - 1)
    level_at_gate = held[gate_index] if num_samples else 0.0
    released = level_at_gate * np.clip(1.0 - (t - gate) / settings.release, 0.0, 1.0)
    return np.where(t < gate, held, released)


class PlaybackEngine:
    """Render chord notes to audio buffers.

    Parameters
    ----------
    settings : SynthSettings | None
        Voice settings; defaults to ``SynthSettings()``.
    seed : int | None
        Seed for velocity humanization, for reproducible renders.

    Examples
    --------
    >>> engine = PlaybackEngine(seed=0)
    >>> buffer = engine.render(["E2", "B2", "E3"])
    >>> buffer.dtype
    dtype('float32')
    """

    def __init__(self, settings: SynthSettings | None = None, seed: int | None = None) -> None:
        self.settings = settings or SynthSettings()
        self.distorted = False
        self._rng = np.random.default_rng(seed)

    def set_distortion(self, distorted: bool) -> None:
        """Switch between the clean and distorted channel."""
        self.distorted = distorted
        logger.debug("Playback channel: %s", "distorted" if distorted else "clean")

    @property
    def waveform(self) -> Waveform:
        """Oscillator shape of the active channel."""
        s = self.settings
        return s.distorted_waveform if self.distorted else s.clean_waveform

    @property
    def gain(self) -> float:
        """Linear output gain of the active channel."""
        s = self.settings
        return db_to_gain(s.volume_db + (s.distorted_volume_db if self.distorted else s.clean_volume_db))

    def render(self, notes: Sequence[str]) -> NDArray[np.float32]:
        """Strum notes in order and return a mono buffer.

        Parameters
        ----------
        notes : Sequence[str]
            Notes in scientific pitch notation, played in the given order.
            Unparseable notes are skipped.

        Returns
        -------
        NDArray[np.float32]
            Mono samples in [-1, 1]; empty if there is nothing to play.
        """
        s = self.settings
        frequencies: list[float] = []
        for note in notes:
            try:
                frequencies.append(note_to_frequency(note))
            except ValueError:
                logger.debug("Skipping unplayable note %r", note)
        if not frequencies:
            return np.zeros(0, dtype=np.float32)

        voice_samples = int((s.note_length + s.release) * s.sample_rate)
        offset_samples = int(s.strum_delay * s.sample_rate)
        total = voice_samples + offset_samples * (len(frequencies) - 1)
        mix = np.zeros(total, dtype=np.float64)

        t = np.arange(voice_samples) / s.sample_rate
        env = envelope(s, voice_samples)
        # One velocity per stroke, slightly randomized
        velocity = 0.8 + self._rng.random() * 0.2
        for i, frequency in enumerate(frequencies):
            start = i * offset_samples
            mix[start : start + voice_samples] += velocity * env * oscillator(self.waveform, frequency, t)

        mix /= len(frequencies)
        if self.distorted:
            drive = 1.0 + 20.0 * s.distortion
            mix = np.tanh(drive * mix) / np.tanh(drive)
        mix *= self.gain

        ceiling = db_to_gain(s.limiter_db)
        peak = float(np.max(np.abs(mix)))
        if peak > ceiling:
            mix *= ceiling / peak
        return mix.astype(np.float32)

    def write_wav(self, path: str | Path, notes: Sequence[str]) -> Path:
        """Render notes and write them to a WAV file.

        Returns
        -------
        Path
            The written file.
        """
        path = Path(path)
        buffer = self.render(notes)
        path.parent.mkdir(parents=True, exist_ok=True)
        sf.write(path, buffer, self.settings.sample_rate)
        logger.info("Wrote %d samples to %s", len(buffer), path)
        return path
