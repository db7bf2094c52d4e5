"""Unit tests for the pitch model."""

import pytest

from notedrill.errors import MalformedNoteToken
from notedrill.pitch import (
    Note,
    index_of,
    midi_to_note,
    normalize,
    notes_equal,
    parse_note,
    parse_pitch_class,
    pitch_class_to_midi,
    sort_notes,
)


def test_normalize_uppercases_and_keeps_sharp() -> None:
    assert normalize("c#") == "C#"
    assert normalize("g") == "G"


def test_index_of_covers_all_twelve_classes() -> None:
    names = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
    assert [index_of(name) for name in names] == list(range(12))


def test_index_of_rejects_flats() -> None:
    with pytest.raises(MalformedNoteToken):
        index_of("Bb")


def test_parse_note_is_case_insensitive() -> None:
    assert parse_note("c#4") == parse_note("C#4") == Note("C#", 4)


def test_parse_note_strips_whitespace() -> None:
    assert parse_note(" G3 ") == Note("G", 3)


@pytest.mark.parametrize("token", ["H4", "C", "C10", "Cb4", "4C", "", "C##4"])
def test_parse_note_rejects_malformed_tokens(token: str) -> None:
    with pytest.raises(MalformedNoteToken) as excinfo:
        parse_note(token)
    assert excinfo.value.token == token


def test_malformed_token_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        parse_note("X9")


def test_note_equality_requires_matching_octave() -> None:
    assert Note("C", 4) != Note("C", 5)
    assert not notes_equal(Note("C", 4), Note("C", 5))
    assert notes_equal(Note("c", 4), Note("C", 4))


def test_note_normalizes_letter_on_construction() -> None:
    assert Note("f#", 5).letter == "F#"


def test_note_properties() -> None:
    note = Note("F#", 4)
    assert note.token == "F#4"
    assert note.vexflow_key == "f#/4"
    assert note.pitch_class == 6
    assert note.is_sharp
    assert not Note("F", 4).is_sharp


def test_middle_c_is_midi_60() -> None:
    assert pitch_class_to_midi(0, 4) == 60
    assert Note("C", 4).midi == 60


def test_midi_to_note_inverts_pitch_class_to_midi() -> None:
    assert midi_to_note(61) == Note("C#", 4)
    assert midi_to_note(48) == Note("C", 3)
    assert midi_to_note(79) == Note("G", 5)


def test_parse_pitch_class_ignores_octave() -> None:
    assert parse_pitch_class("c#4") == parse_pitch_class("C#") == parse_pitch_class("C#5") == 1


def test_sort_notes_orders_by_octave_then_chromatic_index() -> None:
    notes = [Note("C", 5), Note("B", 4), Note("C#", 4), Note("C", 4), Note("D", 4)]
    assert sort_notes(notes) == [Note("C", 4), Note("C#", 4), Note("D", 4), Note("B", 4), Note("C", 5)]
