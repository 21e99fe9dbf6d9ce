"""Chord library loading and caching.

The library is a JSON catalogue of chord voicings keyed by tuning and
vibe. Records are authored in the key of their ``baseRoot`` with tabs
for standard tuning. Lists are parsed on first use and cached per
(tuning, vibe) key until explicitly invalidated.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from chord_forge.models import Chord, TuningMode, VibeMode

logger = logging.getLogger(__name__)

DEFAULT_LIBRARY_PATH = Path(__file__).parent / "data" / "chord_library.json"

REQUIRED_KEYS = ("id", "name", "subtext", "notes", "baseRoot")

LibraryKey = tuple[TuningMode, VibeMode]


def chord_from_dict(data: dict[str, Any]) -> Chord:
    """Build a Chord from a catalogue record.

    Parameters
    ----------
    data : dict[str, Any]
        Record with camelCase keys as stored in the catalogue
        (``baseRoot``, ``relatedChords``).

    Returns
    -------
    Chord
        The parsed chord, related chords included.

    Raises
    ------
    ValueError
        If a required key is missing.

    Examples
    --------
    >>> chord = chord_from_dict({"id": "c", "name": "Root Five", "subtext": "5",
    ...                          "notes": ["E2", "B2"], "baseRoot": "E"})
    >>> chord.base_root, chord.fretboard
    ('E', None)
    """
    for key in REQUIRED_KEYS:
        if key not in data:
            msg = f"Chord record {data.get('id', '?')!r} is missing {key!r}"
            raise ValueError(msg)

    return Chord(
        id=data["id"],
        name=data["name"],
        subtext=data["subtext"],
        notes=tuple(data["notes"]),
        base_root=data["baseRoot"],
        fretboard=data.get("fretboard"),
        description=data.get("description", ""),
        related_chords=tuple(chord_from_dict(child) for child in data.get("relatedChords", ())),
    )


def chord_to_dict(chord: Chord) -> dict[str, Any]:
    """Serialize a Chord to a catalogue record (inverse of ``chord_from_dict``)."""
    data: dict[str, Any] = {
        "id": chord.id,
        "name": chord.name,
        "subtext": chord.subtext,
        "notes": list(chord.notes),
        "description": chord.description,
        "fretboard": chord.fretboard,
        "baseRoot": chord.base_root,
    }
    if chord.related_chords:
        data["relatedChords"] = [chord_to_dict(child) for child in chord.related_chords]
    return data


class ChordLibrary:
    """Catalogue of chord voicings with a per-key cache.

    Parameters
    ----------
    path : str | Path | None
        Catalogue JSON file. Defaults to the bundled library.

    Examples
    --------
    >>> library = ChordLibrary()
    >>> chords = library.get_chords(TuningMode.STANDARD, VibeMode.DARK)
    >>> chords[0].id
    'ghost'
    >>> library.get_chords(TuningMode.STANDARD, VibeMode.DARK) is chords
    True
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_LIBRARY_PATH
        self._raw: dict[str, Any] | None = None
        self._cache: dict[LibraryKey, tuple[Chord, ...]] = {}

    def _load(self) -> dict[str, Any]:
        """Read and sanity-check the catalogue file."""
        if self._raw is not None:
            return self._raw
        try:
            with open(self.path) as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            msg = f"Cannot read chord library {self.path}: {e}"
            raise ValueError(msg) from e
        if not isinstance(raw, dict):
            msg = f"Chord library {self.path} must be a JSON object keyed by tuning"
            raise ValueError(msg)
        logger.debug("Loaded chord library from %s", self.path)
        self._raw = raw
        return raw

    def categories(self) -> list[LibraryKey]:
        """List the (tuning, vibe) keys present in the catalogue."""
        raw = self._load()
        keys: list[LibraryKey] = []
        for tuning in TuningMode:
            for vibe in VibeMode:
                if vibe.value in raw.get(tuning.value, {}):
                    keys.append((tuning, vibe))
        return keys

    def get_chords(self, tuning: TuningMode, vibe: VibeMode) -> tuple[Chord, ...]:
        """Return the chords for a tuning and vibe, parsing them on first use.

        Missing categories give an empty tuple.
        """
        key = (tuning, vibe)
        if key in self._cache:
            return self._cache[key]

        records = self._load().get(tuning.value, {}).get(vibe.value)
        if records is None:
            logger.info("No chords for %s/%s in %s", tuning.value, vibe.value, self.path)
            records = []

        chords = tuple(chord_from_dict(record) for record in records)
        self._cache[key] = chords
        return chords

    def find(self, tuning: TuningMode, vibe: VibeMode, chord_id: str) -> Chord | None:
        """Look up a base chord by id within a category."""
        for chord in self.get_chords(tuning, vibe):
            if chord.id == chord_id:
                return chord
        return None

    def invalidate(self, tuning: TuningMode | None = None, vibe: VibeMode | None = None) -> None:
        """Drop cached entries.

        With no arguments everything is dropped, including the parsed
        file, so the next access rereads it. Otherwise only keys matching
        the given tuning and/or vibe are dropped.
        """
        if tuning is None and vibe is None:
            self._cache.clear()
            self._raw = None
            return
        for key in list(self._cache):
            if (tuning is None or key[0] is tuning) and (vibe is None or key[1] is vibe):
                del self._cache[key]


_default_library: ChordLibrary | None = None


def default_library() -> ChordLibrary:
    """Shared library instance backed by the bundled catalogue."""
    global _default_library
    if _default_library is None:
        _default_library = ChordLibrary()
    return _default_library
