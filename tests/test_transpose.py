"""Tests for chord transposition."""

import pytest

from chord_forge.library import ChordLibrary
from chord_forge.models import Chord, TuningMode, VibeMode
from chord_forge.pitch_class import NOTES, note_to_midi, semitone_distance
from chord_forge.tab import parse_tab
from chord_forge.transpose import rewrite_name, rewrite_subtext, transpose_chord


@pytest.fixture
def root_five():
    return Chord(
        id="root-five",
        name="Root Five",
        subtext="5",
        notes=("E2", "B2", "E3"),
        base_root="E",
        fretboard="0 2 2 x x x",
    )


@pytest.fixture
def ghost():
    return ChordLibrary().find(TuningMode.STANDARD, VibeMode.DARK, "ghost")


class TestTransposeChord:
    def test_up_to_g(self, root_five):
        result = transpose_chord(root_five, "G", TuningMode.STANDARD)
        assert result.notes == ("G2", "D3", "G3")
        assert result.fretboard == "3 5 5 x x x"

    def test_identity(self, ghost):
        result = transpose_chord(ghost, ghost.base_root, TuningMode.STANDARD)
        assert result.notes == ghost.notes
        assert result.fretboard == ghost.fretboard

    def test_identity_stable_fields(self, root_five):
        result = transpose_chord(root_five, "A", TuningMode.DROP)
        assert result.id == root_five.id
        assert result.base_root == "E"
        assert result.description == root_five.description

    def test_input_not_modified(self, root_five):
        before = root_five
        result = transpose_chord(root_five, "C", TuningMode.DROP)
        assert root_five == before
        assert result is not root_five

    def test_drop_only_changes_tab(self, root_five):
        standard = transpose_chord(root_five, "E", TuningMode.STANDARD)
        drop = transpose_chord(root_five, "E", TuningMode.DROP)
        assert drop.notes == standard.notes
        assert parse_tab(drop.fretboard)[0] == parse_tab(standard.fretboard)[0] + 2
        assert parse_tab(drop.fretboard)[1:] == parse_tab(standard.fretboard)[1:]

    @pytest.mark.parametrize("root", NOTES)
    def test_notes_shift_by_distance(self, ghost, root):
        distance = semitone_distance(ghost.base_root, root)
        result = transpose_chord(ghost, root, TuningMode.STANDARD)
        for before, after in zip(ghost.notes, result.notes):
            assert note_to_midi(after) - note_to_midi(before) == distance

    def test_unknown_root_is_noop(self, root_five):
        result = transpose_chord(root_five, "H", TuningMode.STANDARD)
        assert result.notes == root_five.notes
        assert result.fretboard == root_five.fretboard

    def test_malformed_note_kept(self):
        chord = Chord(id="c", name="Odd", subtext="5", notes=("E2", "??"), base_root="E")
        result = transpose_chord(chord, "G", TuningMode.STANDARD)
        assert result.notes == ("G2", "??")
        assert result.fretboard is None

    @pytest.mark.parametrize("tuning", list(TuningMode))
    def test_unlisted_sharp_kept(self, tuning):
        chord = Chord(
            id="c", name="Odd", subtext="5", notes=("E2", "B#2", "E#3"), base_root="E", fretboard="0 2 2 x x x"
        )
        result = transpose_chord(chord, "G", tuning)
        assert result.notes == ("G2", "B#2", "E#3")

    def test_down(self, root_five):
        result = transpose_chord(root_five, "C", TuningMode.STANDARD)
        assert result.notes == ("C2", "G2", "C3")
        assert result.fretboard == "8 10 10 x x x"


class TestLabels:
    def test_generic_subtext(self):
        assert rewrite_subtext("m(add9)", "A") == "Am(add9)"

    def test_root_prefixed_subtext(self):
        assert rewrite_subtext("E(VI)", "C") == "C(VI)"

    def test_sharp_root_replaced(self):
        assert rewrite_subtext("F#m7", "A#") == "A#m7"

    def test_subtext_in_chord(self, root_five):
        assert transpose_chord(root_five, "A", TuningMode.STANDARD).subtext == "A5"

    def test_name_kept_by_default(self):
        chord = Chord(id="d", name="E Minor Drone", subtext="m", notes=("E2",), base_root="E")
        assert transpose_chord(chord, "G", TuningMode.STANDARD).name == "E Minor Drone"

    def test_name_rewrite_flag(self):
        chord = Chord(id="d", name="E Minor Drone", subtext="m", notes=("E2",), base_root="E")
        result = transpose_chord(chord, "G", TuningMode.STANDARD, rewrite_name_root=True)
        assert result.name == "G Minor Drone"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("E Minor Drone", "G Minor Drone"),
            ("Em Drone", "Gm Drone"),
            ("C#(add9) Bloom", "G(add9) Bloom"),
            ("Bleed Stack", "Bleed Stack"),
            ("Dmitri's Chord", "Dmitri's Chord"),
            ("The \"Ghost\" Chord", "The \"Ghost\" Chord"),
        ],
    )
    def test_rewrite_name(self, name, expected):
        assert rewrite_name(name, "G") == expected


class TestRelatedChords:
    def test_dropped_by_default(self, ghost):
        assert ghost.related_chords
        assert transpose_chord(ghost, "G", TuningMode.STANDARD).related_chords == ()

    def test_recursive(self, ghost):
        result = transpose_chord(ghost, "G", TuningMode.STANDARD, include_related=True)
        related = {chord.id: chord for chord in result.related_chords}
        assert related["ghost-m7"].fretboard == "3 5 3 3 3 3"
        assert related["ghost-m7"].notes == ("G2", "D3", "F3", "A#3", "D4", "G4")
        assert related["ghost-m7"].subtext == "Gm7"
