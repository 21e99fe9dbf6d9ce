"""Chord voicing transposition for six-string guitar.

This library re-renders pre-defined chord voicings in any key and in
standard or drop tuning: notes are shifted in scientific pitch notation,
tabs are re-fretted and kept within a playable hand span, and results
can be named with a chord symbol or rendered to audio.

Examples
--------
>>> from chord_forge import Chord, TuningMode, transpose_chord

>>> chord = Chord(id="root5", name="Root Five", subtext="5",
...               notes=("E2", "B2", "E3"), base_root="E", fretboard="0 2 2 x x x")
>>> moved = transpose_chord(chord, "G", TuningMode.STANDARD)
>>> moved.notes
('G2', 'D3', 'G3')
>>> moved.fretboard
'3 5 5 x x x'

>>> # Drop tuning frets the lowest string two higher
>>> transpose_chord(chord, "E", TuningMode.DROP).fretboard
'2 2 2 x x x'

>>> # Lower-level helpers
>>> from chord_forge import semitone_distance, transpose_note
>>> semitone_distance("E", "G")
3
>>> transpose_note("B2", 1)
'C3'
"""

from chord_forge.converter import chord_symbol, identify_chord
from chord_forge.library import ChordLibrary, chord_from_dict, chord_to_dict, default_library
from chord_forge.models import Chord, TuningMode, VibeMode
from chord_forge.pitch_class import NOTES, Note, semitone_distance, transpose_note
from chord_forge.tab import PlayabilityPolicy, normalize_playability, transpose_tab
from chord_forge.transpose import transpose_chord

__all__ = [
    "NOTES",
    "Chord",
    "ChordLibrary",
    "Note",
    "PlayabilityPolicy",
    "TuningMode",
    "VibeMode",
    "chord_from_dict",
    "chord_symbol",
    "chord_to_dict",
    "default_library",
    "identify_chord",
    "normalize_playability",
    "semitone_distance",
    "transpose_chord",
    "transpose_note",
    "transpose_tab",
]
