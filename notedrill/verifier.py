"""AnswerVerifier: strategies that check held keys against the active target."""

from abc import ABC, abstractmethod
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from typing import Literal

from notedrill.chords import Chord, compare_chord_notes
from notedrill.pitch import Note, notes_equal, parse_note
from notedrill.scales import Scale

Outcome = Literal["correct", "incorrect"]


@dataclass(frozen=True)
class Verdict:
    """
    Result of checking one input snapshot.

    Attributes:
        outcome:  "correct" or "incorrect".
        complete: True when the exercise is finished and the caller should
                  move on to a new one.
        played:   Scale mode only: the accepted prefix including this note.
                  Empty after a mismatch.
    """

    outcome: Outcome
    complete: bool = False
    played: tuple[Note, ...] = ()

    @property
    def correct(self) -> bool:
        return self.outcome == "correct"


CORRECT = Verdict("correct", complete=True)
INCORRECT = Verdict("incorrect")


# ── Pure comparisons ────────────────────────────────────────────────────────

def compare_notes(played: Collection[str], target: Sequence[Note]) -> bool:
    """
    Exact-set match of played tokens against target notes, letter and octave.

    A single-note target is the one-element case of the same rule.

    Raises:
        MalformedNoteToken: If a played token cannot be parsed.
    """
    played_notes = {parse_note(token) for token in played}
    return len(played_notes) == len(target) and played_notes == set(target)


def compare_scale_prefix(played: Sequence[Note], scale: Scale) -> bool:
    """True if *played* agrees position-by-position with the start of the scale."""
    if len(played) > len(scale.notes):
        return False
    return all(notes_equal(p, t) for p, t in zip(played, scale.notes))


def is_scale_complete(played: Sequence[Note], scale: Scale) -> bool:
    return len(played) == len(scale.notes) and compare_scale_prefix(played, scale)


# ── Abstract base ────────────────────────────────────────────────────────────

class AnswerVerifier(ABC):
    """
    Abstract Strategy for one drill mode.

    ``check()`` returns ``None`` when the snapshot should not be judged yet
    (wrong number of keys held, or no active target).
    """

    @abstractmethod
    def check(self, held: Collection[str]) -> Verdict | None:
        """
        Judge a snapshot of input tokens.

        Args:
            held: For note and chord mode, every key currently held down.
                  For scale mode, only the key that was just pressed.

        Raises:
            MalformedNoteToken: If a token cannot be parsed. Verifier state
                                is left untouched.
        """

    def reset(self) -> None:
        """Forget any per-exercise progress."""


# ── Concrete strategies ──────────────────────────────────────────────────────

class NoteVerifier(AnswerVerifier):
    """Fires once the number of held keys matches the number of target notes."""

    def __init__(self, target: Sequence[Note] | None) -> None:
        self.target = list(target) if target else []

    def check(self, held: Collection[str]) -> Verdict | None:
        if not self.target or len(held) != len(self.target):
            return None
        return CORRECT if compare_notes(held, self.target) else INCORRECT


class ChordVerifier(AnswerVerifier):
    """Compares pitch classes only; octave and order are ignored."""

    def __init__(self, target: Chord | None) -> None:
        self.target = target

    def check(self, held: Collection[str]) -> Verdict | None:
        if self.target is None or len(held) != len(self.target.notes):
            return None
        return CORRECT if compare_chord_notes(held, self.target) else INCORRECT


class ScaleVerifier(AnswerVerifier):
    """
    Ordered-prefix matcher for scale mode.

    States
    ------
    ``empty`` -> ``partial(k)`` -> ``complete``. Each press appends one note
    to the played prefix. A mismatch at any position reports "incorrect" and
    drops back to ``empty``; the learner restarts from the first note.
    Reaching the full length reports "correct" with ``complete=True`` and
    also resets to ``empty``.
    """

    def __init__(self, target: Scale | None) -> None:
        self.target = target
        self.played: list[Note] = []

    @property
    def state(self) -> str:
        """"empty" or "partial(k)"; a completed scale has already reset."""
        return f"partial({len(self.played)})" if self.played else "empty"

    def reset(self) -> None:
        self.played = []

    def check(self, held: Collection[str]) -> Verdict | None:
        if self.target is None or len(held) != 1:
            return None

        note = parse_note(next(iter(held)))
        candidate = [*self.played, note]

        if not compare_scale_prefix(candidate, self.target):
            self.reset()
            return INCORRECT

        if is_scale_complete(candidate, self.target):
            self.reset()
            return Verdict("correct", complete=True, played=tuple(candidate))

        self.played = candidate
        return Verdict("correct", played=tuple(candidate))
