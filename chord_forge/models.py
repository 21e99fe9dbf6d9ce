"""Chord data models for chord-forge.

This module provides the immutable chord voicing record that the
transposition engine consumes and produces, plus the tuning and vibe
selectors used to key the chord library.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TuningMode(Enum):
    """Guitar tuning the tab is fretted for."""

    STANDARD = "STANDARD"
    DROP = "DROP"


class VibeMode(Enum):
    """Chord library category."""

    DARK = "DARK"
    MELODIC = "MELODIC"
    ENERGETIC = "ENERGETIC"


@dataclass(frozen=True)
class Chord:
    """A transposable guitar chord voicing.

    Parameters
    ----------
    id : str
        Stable identity, unrelated to pitch.
    name : str
        Display name of the chord shape (e.g. 'The "Ghost" Chord').
    subtext : str
        Quality label. Either generic ("m(add9)") or root-prefixed ("E(VI)").
    notes : tuple[str, ...]
        Pitches in scientific pitch notation, lowest first.
    base_root : str
        Pitch class the voicing is authored against; transposition anchor.
    fretboard : str | None
        Space separated tab for standard tuning, lowest string first
        (e.g. "0 2 2 x x x").
    description : str
        Free-form display text.
    related_chords : tuple[Chord, ...]
        Harmonically related voicings, each with its own base root.

    Examples
    --------
    >>> chord = Chord(id="root5", name="Root Five", subtext="5",
    ...               notes=("E2", "B2", "E3"), base_root="E", fretboard="0 2 2 x x x")
    >>> chord.notes[0]
    'E2'
    """

    id: str
    name: str
    subtext: str
    notes: tuple[str, ...]
    base_root: str
    fretboard: str | None = None
    description: str = ""
    related_chords: tuple[Chord, ...] = ()

    def __str__(self) -> str:
        """Return name and subtext as the default string representation."""
        return f"{self.name} ({self.subtext})"
