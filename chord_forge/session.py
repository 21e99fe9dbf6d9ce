"""Chord board session: what a user is browsing and auditioning.

The board holds the selected root, tuning and vibe, shows base chords
from the library in batches transposed to that selection, and can lock
a chord to reveal its related voicings. It is the caller of the
transposition engine, so it owns the fallback for broken library data:
a chord that fails to transpose is shown untransposed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chord_forge.models import Chord, TuningMode, VibeMode
from chord_forge.transpose import transpose_chord

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

    from chord_forge.library import ChordLibrary
    from chord_forge.playback import PlaybackEngine

logger = logging.getLogger(__name__)

CHORDS_PER_BATCH = 6
RELATED_CHORDS_COUNT = 6
DEFAULT_ROOT = "E"


class ChordBoard:
    """Browsing state over a chord library.

    Parameters
    ----------
    library : ChordLibrary
        Source of base chords.
    root : str
        Selected root pitch class.
    tuning : TuningMode
        Selected tuning.
    vibe : VibeMode
        Selected library category.
    batch_size : int
        Chords shown initially and added per ``load_more``.
    related_count : int
        Maximum related chords revealed by a lock.
    engine : PlaybackEngine | None
        Renderer used by ``play``.

    Examples
    --------
    >>> from chord_forge.library import ChordLibrary
    >>> board = ChordBoard(ChordLibrary(), vibe=VibeMode.ENERGETIC)
    >>> board.select_root("G")
    >>> board.displayed()[0].fretboard
    '3 5 5 x x x'
    """

    def __init__(
        self,
        library: ChordLibrary,
        *,
        root: str = DEFAULT_ROOT,
        tuning: TuningMode = TuningMode.STANDARD,
        vibe: VibeMode = VibeMode.MELODIC,
        batch_size: int = CHORDS_PER_BATCH,
        related_count: int = RELATED_CHORDS_COUNT,
        engine: PlaybackEngine | None = None,
    ) -> None:
        if batch_size <= 0:
            msg = f"batch_size must be positive, got {batch_size}"
            raise ValueError(msg)
        self.library = library
        self.root = root
        self.tuning = tuning
        self.vibe = vibe
        self.batch_size = batch_size
        self.related_count = related_count
        self.engine = engine

        self.chords_to_load = batch_size
        self.locked_chord_id: str | None = None
        self.related: tuple[Chord, ...] = ()
        self.active_chord_id: str | None = None

    @property
    def base_chords(self) -> tuple[Chord, ...]:
        """Untransposed chords for the current tuning and vibe."""
        return self.library.get_chords(self.tuning, self.vibe)

    @property
    def total(self) -> int:
        """Number of chords available in the current category."""
        return len(self.base_chords)

    @property
    def remaining(self) -> int:
        """Chords not yet shown."""
        return max(0, self.total - self.chords_to_load)

    def _transpose(self, chord: Chord) -> Chord:
        """Transpose for the current selection, falling back to the input."""
        try:
            return transpose_chord(chord, self.root, self.tuning)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not transpose chord %r, showing it untransposed: %s", chord.id, exc)
            return chord

    def displayed(self) -> tuple[Chord, ...]:
        """The shown chords, transposed to the current root and tuning."""
        return tuple(self._transpose(chord) for chord in self.base_chords[: self.chords_to_load])

    def load_more(self) -> tuple[Chord, ...]:
        """Show the next batch and return just the newly shown chords."""
        start = self.chords_to_load
        batch = self.base_chords[start : start + self.batch_size]
        if not batch:
            return ()
        self.chords_to_load += self.batch_size
        return tuple(self._transpose(chord) for chord in batch)

    def reset_lock(self) -> None:
        """Clear the locked chord and its related voicings."""
        self.locked_chord_id = None
        self.related = ()

    def select_root(self, root: str) -> None:
        """Change the root; a locked chord's related voicings follow it."""
        self.root = root
        if self.locked_chord_id is not None:
            self.related = self._related_for(self.locked_chord_id)

    def set_tuning(self, tuning: TuningMode) -> None:
        """Change tuning; resets the lock and batching."""
        if tuning is self.tuning:
            return
        self.tuning = tuning
        self.reset_lock()
        self.chords_to_load = self.batch_size

    def set_vibe(self, vibe: VibeMode) -> None:
        """Change category; resets the lock and batching."""
        if vibe is self.vibe:
            return
        self.vibe = vibe
        self.reset_lock()
        self.chords_to_load = self.batch_size

    def _related_for(self, chord_id: str) -> tuple[Chord, ...]:
        parent = self.library.find(self.tuning, self.vibe, chord_id)
        if parent is None:
            msg = f"No chord {chord_id!r} in {self.tuning.value}/{self.vibe.value}"
            raise KeyError(msg)
        return tuple(self._transpose(child) for child in parent.related_chords[: self.related_count])

    def toggle_lock(self, chord_id: str) -> tuple[Chord, ...]:
        """Lock a chord to reveal its related voicings, or unlock it.

        Returns
        -------
        tuple[Chord, ...]
            The related chords now revealed; empty after unlocking or
            when the chord has none.

        Raises
        ------
        KeyError
            If the chord is not in the current category.
        """
        if self.locked_chord_id == chord_id:
            self.reset_lock()
            return ()
        self.related = self._related_for(chord_id)
        self.locked_chord_id = chord_id
        return self.related

    def play(self, chord_id: str) -> NDArray[np.float32]:
        """Render a shown (or revealed related) chord through the engine.

        Raises
        ------
        KeyError
            If the chord is not currently shown.
        RuntimeError
            If the board has no playback engine.
        """
        if self.engine is None:
            msg = "ChordBoard has no playback engine"
            raise RuntimeError(msg)
        chord = next((c for c in self.base_chords[: self.chords_to_load] if c.id == chord_id), None)
        if chord is not None:
            chord = self._transpose(chord)
        else:
            # Related chords are already transposed
            chord = next((c for c in self.related if c.id == chord_id), None)
        if chord is None:
            msg = f"Chord {chord_id!r} is not shown"
            raise KeyError(msg)
        self.active_chord_id = chord_id
        return self.engine.render(chord.notes)
