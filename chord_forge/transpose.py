"""Chord transposition.

This module re-renders a chord voicing in another key and tuning: notes
are shifted by the distance from the chord's base root, labels are
rewritten for the new root, and the tab is re-fretted and kept playable.
"""

from __future__ import annotations

import re
from dataclasses import replace

from chord_forge.models import Chord, TuningMode
from chord_forge.pitch_class import semitone_distance, transpose_note
from chord_forge.tab import DEFAULT_POLICY, PlayabilityPolicy, transpose_tab

# Leading root letter with optional sharp, as used in chord labels
ROOT_PREFIX_RE = re.compile(r"^[A-G]#?")

# A root at the start of a display name: followed by the end, a non-letter,
# or a minor "m" that doesn't start a longer word ("Em Drone", not "Dmitri")
NAME_ROOT_RE = re.compile(r"^[A-G]#?(?=$|[^A-Za-z]|m(?![A-Za-z]))")


def rewrite_subtext(subtext: str, target_root: str) -> str:
    """Rewrite a quality label for a new root.

    Generic labels are prefixed with the root; root-prefixed labels have
    their leading root replaced.

    Examples
    --------
    >>> rewrite_subtext("m(add9)", "A")
    'Am(add9)'
    >>> rewrite_subtext("E(VI)", "C")
    'C(VI)'
    >>> rewrite_subtext("C#m", "D")
    'Dm'
    """
    if not ROOT_PREFIX_RE.match(subtext):
        return f"{target_root}{subtext}"
    return ROOT_PREFIX_RE.sub(target_root, subtext, count=1)


def rewrite_name(name: str, target_root: str) -> str:
    """Replace a standalone root at the start of a display name.

    Examples
    --------
    >>> rewrite_name("E Minor Drone", "G")
    'G Minor Drone'
    >>> rewrite_name("Bleed Stack", "G")
    'Bleed Stack'
    """
    return NAME_ROOT_RE.sub(target_root, name, count=1)


def transpose_chord(
    chord: Chord,
    target_root: str,
    tuning_mode: TuningMode,
    *,
    rewrite_name_root: bool = False,
    include_related: bool = False,
    policy: PlayabilityPolicy = DEFAULT_POLICY,
) -> Chord:
    """Transpose a chord voicing to a new root and tuning.

    Parameters
    ----------
    chord : Chord
        The voicing to transpose. It is not modified.
    target_root : str
        Pitch class to move the chord to. Unrecognised roots give a
        distance of 0, so only the tuning is applied.
    tuning_mode : TuningMode
        Tuning to fret the tab for.
    rewrite_name_root : bool
        Also replace a leading root letter in ``name``. Off by default;
        the display name is the shape's identity.
    include_related : bool
        Transpose ``related_chords`` recursively with the same settings.
        When False, the result carries no related chords.
    policy : PlayabilityPolicy
        Span and position bounds for the tab.

    Returns
    -------
    Chord
        A new chord with the same ``id`` and ``base_root``.

    Examples
    --------
    >>> chord = Chord(id="root5", name="Root Five", subtext="5",
    ...               notes=("E2", "B2", "E3"), base_root="E", fretboard="0 2 2 x x x")
    >>> moved = transpose_chord(chord, "G", TuningMode.STANDARD)
    >>> moved.notes, moved.fretboard, moved.subtext
    (('G2', 'D3', 'G3'), '3 5 5 x x x', 'G5')
    """
    distance = semitone_distance(chord.base_root, target_root)

    if distance == 0:
        notes = chord.notes
    else:
        notes = tuple(transpose_note(note, distance) for note in chord.notes)

    related: tuple[Chord, ...] = ()
    if include_related:
        related = tuple(
            transpose_chord(
                child,
                target_root,
                tuning_mode,
                rewrite_name_root=rewrite_name_root,
                include_related=True,
                policy=policy,
            )
            for child in chord.related_chords
        )

    return replace(
        chord,
        name=rewrite_name(chord.name, target_root) if rewrite_name_root else chord.name,
        subtext=rewrite_subtext(chord.subtext, target_root),
        notes=notes,
        # Always re-fretted: the tuning alone can change the fingering
        fretboard=transpose_tab(chord.fretboard, distance, tuning_mode, policy=policy),
        related_chords=related,
    )
