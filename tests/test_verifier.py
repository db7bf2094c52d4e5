"""Unit tests for the answer verifiers."""

import pytest

from notedrill.chords import Chord
from notedrill.errors import MalformedNoteToken
from notedrill.pitch import parse_note
from notedrill.scales import Scale, build_scale_notes
from notedrill.verifier import (
    ChordVerifier,
    NoteVerifier,
    ScaleVerifier,
    compare_notes,
    compare_scale_prefix,
    is_scale_complete,
)


def _notes(*tokens: str) -> list:
    return [parse_note(token) for token in tokens]


def _c_major() -> Scale:
    return Scale(root=0, scale_type="major", direction="up", notes=tuple(build_scale_notes(0, "major")))


# ── Note mode ────────────────────────────────────────────────────────────────

def test_note_mode_exact_match_is_correct() -> None:
    verifier = NoteVerifier(_notes("E4"))
    verdict = verifier.check({"E4"})
    assert verdict is not None
    assert verdict.correct
    assert verdict.complete


def test_note_mode_wrong_octave_is_incorrect() -> None:
    verdict = NoteVerifier(_notes("E4")).check({"E5"})
    assert verdict is not None
    assert verdict.outcome == "incorrect"
    assert not verdict.complete


def test_note_mode_accepts_lowercase_tokens() -> None:
    verdict = NoteVerifier(_notes("F#4")).check({"f#4"})
    assert verdict is not None and verdict.correct


def test_note_mode_waits_for_matching_key_count() -> None:
    verifier = NoteVerifier(_notes("C4", "G4"))
    assert verifier.check({"C4"}) is None
    assert verifier.check({"C4", "G4", "B4"}) is None


def test_note_mode_multi_note_needs_exact_set() -> None:
    verifier = NoteVerifier(_notes("C4", "G4"))
    correct = verifier.check({"G4", "C4"})
    wrong = verifier.check({"C4", "G5"})
    assert correct is not None and correct.correct
    assert wrong is not None and not wrong.correct


def test_note_mode_without_target_is_neutral() -> None:
    assert NoteVerifier(None).check({"C4"}) is None
    assert NoteVerifier([]).check({"C4"}) is None


def test_compare_notes_case_duplicates_do_not_count_twice() -> None:
    assert not compare_notes({"c4", "C4"}, _notes("C4", "E4"))


# ── Chord mode ───────────────────────────────────────────────────────────────

def test_chord_mode_fires_only_at_full_size() -> None:
    verifier = ChordVerifier(Chord.build(0, "major"))
    assert verifier.check({"C4", "E4"}) is None
    verdict = verifier.check({"C4", "E4", "G4"})
    assert verdict is not None and verdict.correct and verdict.complete


def test_chord_mode_fires_for_directly_constructed_chord() -> None:
    verdict = ChordVerifier(Chord(0, "major")).check({"C4", "E4", "G4"})
    assert verdict is not None and verdict.correct


def test_chord_mode_ignores_octave() -> None:
    verdict = ChordVerifier(Chord.build(9, "minor")).check({"A3", "C4", "E5"})
    assert verdict is not None and verdict.correct


def test_chord_mode_wrong_quality_is_incorrect() -> None:
    verdict = ChordVerifier(Chord.build(0, "major")).check({"C4", "D#4", "G4"})
    assert verdict is not None and not verdict.correct


def test_chord_mode_without_target_is_neutral() -> None:
    assert ChordVerifier(None).check({"C4", "E4", "G4"}) is None


# ── Scale mode ───────────────────────────────────────────────────────────────

def test_compare_scale_prefix() -> None:
    scale = _c_major()
    assert compare_scale_prefix(_notes("C4", "D4", "E4"), scale)
    assert not compare_scale_prefix(_notes("C4", "E4"), scale)
    assert not compare_scale_prefix(_notes("C4", "D5"), scale)
    assert compare_scale_prefix([], scale)


def test_is_scale_complete_requires_full_length() -> None:
    scale = _c_major()
    assert not is_scale_complete(_notes("C4", "D4"), scale)
    assert is_scale_complete(list(scale.notes), scale)


def test_scale_prefix_grows_then_resets_on_mismatch() -> None:
    verifier = ScaleVerifier(_c_major())
    for token in ["C4", "D4", "E4"]:
        verdict = verifier.check({token})
        assert verdict is not None and verdict.correct and not verdict.complete
    assert verifier.state == "partial(3)"

    verdict = verifier.check({"F4"})
    assert verdict is not None and verdict.correct
    assert [n.token for n in verdict.played] == ["C4", "D4", "E4", "F4"]

    verdict = verifier.check({"A4"})
    assert verdict is not None
    assert verdict.outcome == "incorrect"
    assert verdict.played == ()
    assert verifier.played == []
    assert verifier.state == "empty"


def test_scale_restart_after_mismatch_begins_from_first_note() -> None:
    verifier = ScaleVerifier(_c_major())
    verifier.check({"C4"})
    verifier.check({"E4"})  # wrong
    verdict = verifier.check({"D4"})
    assert verdict is not None and not verdict.correct
    verdict = verifier.check({"C4"})
    assert verdict is not None and verdict.correct


def test_scale_completes_exactly_once_at_full_length() -> None:
    scale = _c_major()
    verifier = ScaleVerifier(scale)
    completions = []
    for index, note in enumerate(scale.notes, start=1):
        verdict = verifier.check({note.token})
        assert verdict is not None and verdict.correct
        if verdict.complete:
            completions.append(index)
    assert completions == [8]
    assert verifier.state == "empty"


def test_scale_wrong_octave_is_a_mismatch() -> None:
    verdict = ScaleVerifier(_c_major()).check({"C5"})
    assert verdict is not None and not verdict.correct


def test_scale_verifier_needs_exactly_one_key() -> None:
    verifier = ScaleVerifier(_c_major())
    assert verifier.check({"C4", "D4"}) is None
    assert verifier.check(set()) is None
    assert ScaleVerifier(None).check({"C4"}) is None


def test_malformed_token_leaves_scale_progress_untouched() -> None:
    verifier = ScaleVerifier(_c_major())
    verifier.check({"C4"})
    with pytest.raises(MalformedNoteToken):
        verifier.check({"Z4"})
    assert verifier.state == "partial(1)"


def test_both_direction_scale_walks_up_and_back() -> None:
    notes = build_scale_notes(0, "major", "both")
    scale = Scale(root=0, scale_type="major", direction="both", notes=tuple(notes))
    verifier = ScaleVerifier(scale)
    verdicts = [verifier.check({note.token}) for note in notes]
    assert all(v is not None and v.correct for v in verdicts)
    assert [v.complete for v in verdicts if v is not None].count(True) == 1
    assert len(notes) == 15
