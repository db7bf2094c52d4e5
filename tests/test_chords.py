"""Unit tests for chord generation and chord verification."""

import random

import pytest

from notedrill.chords import (
    CHORD_INTERVALS,
    Chord,
    ChordGenerator,
    chord_types_for,
    compare_chord_notes,
)
from notedrill.errors import InvalidDifficulty, MalformedNoteToken
from notedrill.pitch import Note

TRIALS = 500


@pytest.mark.parametrize("chord_type", sorted(CHORD_INTERVALS))
@pytest.mark.parametrize("root", range(12))
def test_chord_notes_follow_interval_table(root: int, chord_type: str) -> None:
    chord = Chord.build(root, chord_type)
    assert list(chord.notes) == [(root + iv) % 12 for iv in CHORD_INTERVALS[chord_type]]


def test_chord_derives_notes_without_build() -> None:
    assert Chord(9, "minor").notes == (9, 0, 4)
    assert Chord(0, "dominant7") == Chord.build(0, "dominant7")


def test_chord_notes_keep_interval_order_not_pitch_order() -> None:
    chord = Chord.build(9, "minor")  # A minor
    assert chord.note_names == ["A", "C", "E"]


@pytest.mark.parametrize(
    "root,chord_type,expected",
    [
        (0, "major", "C"),
        (9, "minor", "Am"),
        (11, "dim", "B°"),
        (7, "dominant7", "G7"),
        (2, "minor7", "Dm7"),
        (5, "major7", "Fmaj7"),
        (1, "major", "C#"),
    ],
)
def test_chord_name(root: int, chord_type: str, expected: str) -> None:
    assert Chord.build(root, chord_type).name == expected


def test_voiced_chord_stacks_upwards_from_root() -> None:
    assert Chord.build(9, "minor").voiced() == [Note("A", 4), Note("C", 5), Note("E", 5)]
    assert Chord.build(0, "major7").voiced(3) == [Note("C", 3), Note("E", 3), Note("G", 3), Note("B", 3)]


def test_low_difficulty_only_major_and_minor() -> None:
    generator = ChordGenerator(random.Random(3))
    seen = {generator.generate(2).chord_type for _ in range(TRIALS)}
    assert seen == {"major", "minor"}


def test_top_difficulty_reaches_every_quality() -> None:
    generator = ChordGenerator(random.Random(3))
    seen = {generator.generate(9).chord_type for _ in range(TRIALS)}
    assert seen == set(CHORD_INTERVALS)


@pytest.mark.parametrize(
    "difficulty,expected",
    [
        (1, {"major", "minor"}),
        (3, {"major", "minor"}),
        (4, {"major", "minor", "dim"}),
        (6, {"major", "minor", "dim"}),
        (7, {"major", "minor", "dim", "dominant7"}),
        (8, {"major", "minor", "dim", "dominant7"}),
        (10, set(CHORD_INTERVALS)),
    ],
)
def test_tier_gating(difficulty: int, expected: set) -> None:
    assert set(chord_types_for(difficulty)) == expected


def test_generated_roots_cover_all_pitch_classes() -> None:
    generator = ChordGenerator(random.Random(11))
    assert {generator.generate(5).root for _ in range(TRIALS)} == set(range(12))


def test_generate_rejects_invalid_difficulty() -> None:
    with pytest.raises(InvalidDifficulty):
        ChordGenerator(random.Random()).generate(12)


# ── compare_chord_notes ──────────────────────────────────────────────────────

def test_compare_exact_match() -> None:
    assert compare_chord_notes({"C4", "E4", "G4"}, Chord.build(0, "major"))


def test_compare_ignores_order_and_octave() -> None:
    assert compare_chord_notes(["G3", "C5", "E4"], Chord.build(0, "major"))


def test_compare_rejects_extra_note() -> None:
    assert not compare_chord_notes({"C4", "E4", "G4", "B4"}, Chord.build(0, "major"))


def test_compare_rejects_missing_note() -> None:
    assert not compare_chord_notes({"C4", "E4"}, Chord.build(0, "major"))


def test_compare_rejects_wrong_note_of_right_size() -> None:
    assert not compare_chord_notes({"C4", "D#4", "G4"}, Chord.build(0, "major"))


def test_compare_rejects_doubled_pitch_class_in_place_of_chord_tone() -> None:
    assert not compare_chord_notes({"C4", "C5", "E4"}, Chord.build(0, "major"))


def test_compare_is_case_insensitive() -> None:
    chord = Chord.build(1, "major")  # C#, F, G#
    assert compare_chord_notes({"c#4", "f4", "g#4"}, chord)
    assert compare_chord_notes({"C#4", "F4", "G#4"}, chord)


def test_compare_raises_on_malformed_token() -> None:
    with pytest.raises(MalformedNoteToken):
        compare_chord_notes({"C4", "E4", "Q4"}, Chord.build(0, "major"))
