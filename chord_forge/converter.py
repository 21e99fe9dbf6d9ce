"""Chord symbol identification for voicings.

This module names a voicing's pitch set with pychord (e.g. the notes
E2 B2 E3 G3 become "Em"), so transposed chords can be labelled with a
conventional lead-sheet symbol alongside their display name.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pychord import find_chords_from_notes

from chord_forge.pitch_class import NOTE_TO_PC, Note

if TYPE_CHECKING:
    from collections.abc import Iterable

    from chord_forge.models import Chord

logger = logging.getLogger(__name__)


def pitch_classes(notes: Iterable[str]) -> list[str]:
    """Unique pitch classes of a voicing, ordered upwards from the bass.

    Notes are sorted by pitch; the first occurrence of each pitch class
    is kept and the result is ordered by interval above the lowest note.
    Unparseable notes are ignored.

    Parameters
    ----------
    notes : Iterable[str]
        Notes in scientific pitch notation.

    Returns
    -------
    list[str]
        Pitch class names, bass first.

    Examples
    --------
    >>> pitch_classes(["E2", "B2", "E3", "G3", "B3", "E4"])
    ['E', 'G', 'B']
    >>> pitch_classes(["G2", "F#3", "D4", "G4"])
    ['G', 'D', 'F#']
    """
    parsed = sorted(
        (note for note in (Note.parse(text) for text in notes) if note is not None),
        key=lambda note: (note.octave, note.index),
    )
    if not parsed:
        return []

    bass = parsed[0].index
    unique = {note.pitch_class for note in parsed}
    return sorted(unique, key=lambda name: (NOTE_TO_PC[name] - bass) % 12)


def identify_chord(notes: Iterable[str]) -> str | None:
    """Name a voicing with a chord symbol.

    Parameters
    ----------
    notes : Iterable[str]
        Notes in scientific pitch notation.

    Returns
    -------
    str | None
        The first root-position symbol pychord finds (e.g. "E5", "Em"),
        or None if the pitch set has no known quality.

    Examples
    --------
    >>> identify_chord(["E2", "B2", "E3"])
    'E5'
    >>> identify_chord(["A2", "E3", "A3", "C4", "E4"])
    'Am'
    """
    classes = pitch_classes(notes)
    if not classes:
        return None
    try:
        candidates = find_chords_from_notes(classes)
    except ValueError as e:
        logger.debug("pychord rejected %s: %s", classes, e)
        return None
    if not candidates:
        return None
    return str(candidates[0])


def chord_symbol(chord: Chord) -> str | None:
    """Name a Chord record's notes. See ``identify_chord``."""
    return identify_chord(chord.notes)
