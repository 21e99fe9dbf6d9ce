"""Tests for the chord library and its cache."""

import json

import pytest

from chord_forge.library import (
    DEFAULT_LIBRARY_PATH,
    ChordLibrary,
    chord_from_dict,
    chord_to_dict,
    default_library,
)
from chord_forge.models import Chord, TuningMode, VibeMode


def _record(chord_id, root="E"):
    return {
        "id": chord_id,
        "name": f"Chord {chord_id}",
        "subtext": "5",
        "notes": ["E2", "B2"],
        "fretboard": "0 2 x x x x",
        "baseRoot": root,
    }


@pytest.fixture
def catalogue_path(tmp_path):
    """A small catalogue with one populated category."""
    path = tmp_path / "library.json"
    path.write_text(json.dumps({"STANDARD": {"DARK": [_record("a"), _record("b", "F")]}}))
    return path


class TestChordFromDict:
    """Record parsing."""

    def test_parse(self):
        """camelCase keys map to Chord fields."""
        chord = chord_from_dict(_record("a"))
        assert chord.id == "a"
        assert chord.base_root == "E"
        assert chord.notes == ("E2", "B2")
        assert chord.fretboard == "0 2 x x x x"
        assert chord.description == ""
        assert chord.related_chords == ()

    def test_related(self):
        """Related chords parse recursively."""
        data = _record("parent")
        data["relatedChords"] = [_record("child", "A")]
        chord = chord_from_dict(data)
        assert [c.id for c in chord.related_chords] == ["child"]
        assert chord.related_chords[0].base_root == "A"

    def test_missing_key(self):
        """A missing required key raises ValueError naming it."""
        data = _record("a")
        del data["baseRoot"]
        with pytest.raises(ValueError, match="missing 'baseRoot'"):
            chord_from_dict(data)

    def test_roundtrip(self):
        """Serializing and parsing gives an equal chord."""
        chord = Chord(
            id="x",
            name="X",
            subtext="m",
            notes=("A2", "E3"),
            base_root="A",
            fretboard="x 0 2 x x x",
            description="desc",
            related_chords=(chord_from_dict(_record("y")),),
        )
        assert chord_from_dict(chord_to_dict(chord)) == chord


class TestChordLibrary:
    """Loading, caching and invalidation."""

    def test_bundled_catalogue(self):
        """The bundled library covers every tuning and vibe."""
        library = ChordLibrary()
        assert library.path == DEFAULT_LIBRARY_PATH
        assert len(library.categories()) == len(TuningMode) * len(VibeMode)
        for tuning, vibe in library.categories():
            assert library.get_chords(tuning, vibe)

    def test_bundled_ids_unique(self):
        """Chord ids are unique within a category."""
        library = ChordLibrary()
        for tuning, vibe in library.categories():
            ids = [chord.id for chord in library.get_chords(tuning, vibe)]
            assert len(ids) == len(set(ids))

    def test_get_chords(self, catalogue_path):
        """Chords come back in catalogue order."""
        library = ChordLibrary(catalogue_path)
        chords = library.get_chords(TuningMode.STANDARD, VibeMode.DARK)
        assert [chord.id for chord in chords] == ["a", "b"]

    def test_cached(self, catalogue_path):
        """Repeated lookups return the cached tuple."""
        library = ChordLibrary(catalogue_path)
        first = library.get_chords(TuningMode.STANDARD, VibeMode.DARK)
        assert library.get_chords(TuningMode.STANDARD, VibeMode.DARK) is first

    def test_missing_category(self, catalogue_path):
        """Absent categories are empty."""
        library = ChordLibrary(catalogue_path)
        assert library.get_chords(TuningMode.DROP, VibeMode.MELODIC) == ()
        assert library.categories() == [(TuningMode.STANDARD, VibeMode.DARK)]

    def test_find(self, catalogue_path):
        """Lookup by id within a category."""
        library = ChordLibrary(catalogue_path)
        assert library.find(TuningMode.STANDARD, VibeMode.DARK, "b").base_root == "F"
        assert library.find(TuningMode.STANDARD, VibeMode.DARK, "zzz") is None

    def test_invalidate_key(self, catalogue_path):
        """Invalidating a key rebuilds only that entry."""
        library = ChordLibrary(catalogue_path)
        dark = library.get_chords(TuningMode.STANDARD, VibeMode.DARK)
        drop = library.get_chords(TuningMode.DROP, VibeMode.DARK)
        library.invalidate(tuning=TuningMode.STANDARD, vibe=VibeMode.DARK)
        rebuilt = library.get_chords(TuningMode.STANDARD, VibeMode.DARK)
        assert rebuilt is not dark
        assert rebuilt == dark
        assert library.get_chords(TuningMode.DROP, VibeMode.DARK) is drop

    def test_invalidate_by_tuning(self, catalogue_path):
        """Invalidating a tuning drops all of its vibes."""
        library = ChordLibrary(catalogue_path)
        dark = library.get_chords(TuningMode.STANDARD, VibeMode.DARK)
        drop = library.get_chords(TuningMode.DROP, VibeMode.DARK)
        library.invalidate(tuning=TuningMode.STANDARD)
        assert library.get_chords(TuningMode.STANDARD, VibeMode.DARK) is not dark
        assert library.get_chords(TuningMode.DROP, VibeMode.DARK) is drop

    def test_invalidate_all_rereads(self, catalogue_path):
        """Full invalidation picks up file changes."""
        library = ChordLibrary(catalogue_path)
        assert len(library.get_chords(TuningMode.STANDARD, VibeMode.DARK)) == 2
        catalogue_path.write_text(json.dumps({"STANDARD": {"DARK": [_record("c")]}}))
        assert len(library.get_chords(TuningMode.STANDARD, VibeMode.DARK)) == 2
        library.invalidate()
        assert [c.id for c in library.get_chords(TuningMode.STANDARD, VibeMode.DARK)] == ["c"]

    def test_unreadable(self, tmp_path):
        """Missing or invalid files raise ValueError."""
        with pytest.raises(ValueError, match="Cannot read chord library"):
            ChordLibrary(tmp_path / "missing.json").get_chords(TuningMode.STANDARD, VibeMode.DARK)

        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        with pytest.raises(ValueError, match="Cannot read chord library"):
            ChordLibrary(bad).get_chords(TuningMode.STANDARD, VibeMode.DARK)

    def test_not_an_object(self, tmp_path):
        """A top-level list is rejected."""
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(ValueError, match="must be a JSON object"):
            ChordLibrary(path).categories()

    def test_default_library_shared(self):
        """default_library returns one instance."""
        assert default_library() is default_library()
