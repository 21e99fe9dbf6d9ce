"""Pitch class and note operations for transposition.

This module provides the chromatic pitch class ordering and scientific
pitch notation helpers (e.g. "F#3") used to shift chord voicings between
keys. Malformed input never raises here: unknown symbols degrade to a
no-op so that callers rendering a whole chord library keep going.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Fixed chromatic order, sharps only. Index is the pitch class (C=0).
NOTES: tuple[str, ...] = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

NOTE_TO_PC: dict[str, int] = {name: index for index, name in enumerate(NOTES)}

SEMITONES_PER_OCTAVE = 12

# Reference pitch for frequency conversion
A4_FREQUENCY = 440.0
A4_MIDI = 69

# Pitch class with optional sharp, then a signed integer octave
NOTE_RE = re.compile(r"^([A-G]#?)(-?\d+)$")


@dataclass(frozen=True)
class Note:
    """A pitch in scientific pitch notation.

    Parameters
    ----------
    pitch_class : str
        One of the twelve symbols in ``NOTES`` (e.g. "F#").
    octave : int
        Octave number; C4 is middle C.

    Examples
    --------
    >>> note = Note.parse("F#3")
    >>> note.pitch_class, note.octave
    ('F#', 3)
    >>> str(note.transpose(7))
    'C#4'
    """

    pitch_class: str
    octave: int

    @classmethod
    def parse(cls, text: str) -> Note | None:
        """Parse "<PitchClass><Octave>" text, or return None if it doesn't match.

        Spellings outside ``NOTES`` such as "E#3" or "B#2" don't parse.
        """
        match = NOTE_RE.match(text)
        if not match:
            return None
        name, octave = match.groups()
        if name not in NOTE_TO_PC:
            return None
        return cls(pitch_class=name, octave=int(octave))

    @property
    def index(self) -> int:
        """Pitch class index in the chromatic order (C=0)."""
        return NOTE_TO_PC[self.pitch_class]

    def transpose(self, semitones: int) -> Note:
        """Shift by a signed number of semitones, carrying the octave.

        Floor division keeps the octave correct for negative distances
        and distances larger than an octave.
        """
        shifted = self.index + semitones
        octave_shift = shifted // SEMITONES_PER_OCTAVE
        return Note(
            pitch_class=NOTES[shifted % SEMITONES_PER_OCTAVE],
            octave=self.octave + octave_shift,
        )

    def __str__(self) -> str:
        return f"{self.pitch_class}{self.octave}"


def semitone_distance(from_pc: str, to_pc: str) -> int:
    """Compute the signed semitone distance between two pitch classes.

    Parameters
    ----------
    from_pc : str
        Pitch class transposed from (e.g. a chord's base root).
    to_pc : str
        Pitch class transposed to.

    Returns
    -------
    int
        ``index(to_pc) - index(from_pc)``, in the range [-11, 11].
        Returns 0 when either symbol is not a recognised pitch class,
        so an unknown root leaves the chord untouched.

    Examples
    --------
    >>> semitone_distance("E", "G")
    3
    >>> semitone_distance("G", "E")
    -3
    >>> semitone_distance("E", "H")
    0
    """
    if from_pc not in NOTE_TO_PC or to_pc not in NOTE_TO_PC:
        logger.debug("Unrecognised pitch class in %r -> %r, treating as no-op", from_pc, to_pc)
        return 0
    return NOTE_TO_PC[to_pc] - NOTE_TO_PC[from_pc]


def transpose_note(note: str, semitones: int) -> str:
    """Transpose a note in scientific pitch notation.

    Parameters
    ----------
    note : str
        Note text such as "C#2".
    semitones : int
        Signed semitone count.

    Returns
    -------
    str
        The transposed note, or ``note`` unchanged if it does not parse.

    Examples
    --------
    >>> transpose_note("B2", 1)
    'C3'
    >>> transpose_note("C3", -1)
    'B2'
    >>> transpose_note("E2", -25)
    'D#0'
    >>> transpose_note("H2", 3)
    'H2'
    """
    parsed = Note.parse(note)
    if parsed is None:
        logger.debug("Cannot parse note %r, leaving unchanged", note)
        return note
    return str(parsed.transpose(semitones))


def note_to_midi(note: str) -> int:
    """Convert a note to its MIDI number (C4 = 60).

    Raises
    ------
    ValueError
        If the note text is not recognised.

    Examples
    --------
    >>> note_to_midi("C4")
    60
    >>> note_to_midi("E2")
    40
    """
    parsed = Note.parse(note)
    if parsed is None:
        msg = f"Unknown note: {note}"
        raise ValueError(msg)
    return (parsed.octave + 1) * SEMITONES_PER_OCTAVE + parsed.index


def note_to_frequency(note: str) -> float:
    """Convert a note to its equal-tempered frequency in Hz (A4 = 440).

    Examples
    --------
    >>> note_to_frequency("A4")
    440.0
    >>> round(note_to_frequency("E2"), 2)
    82.41
    """
    return A4_FREQUENCY * 2.0 ** ((note_to_midi(note) - A4_MIDI) / SEMITONES_PER_OCTAVE)
