"""Exercise value objects handed to the renderer and the verifier."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Final

from notedrill.chords import Chord
from notedrill.pitch import Note
from notedrill.scales import Scale
from notedrill.verifier import AnswerVerifier, ChordVerifier, NoteVerifier, ScaleVerifier

MODES: Final[tuple[str, ...]] = ("note", "chord", "scale")


class Exercise(ABC):
    """Common surface of the three exercise kinds."""

    mode: str
    clef: str

    @property
    @abstractmethod
    def display_notes(self) -> list[Note]:
        """Notes to draw on the staff, in drawing order."""

    @property
    @abstractmethod
    def label(self) -> str:
        """Heading shown above the staff."""

    @property
    def answer(self) -> list[str]:
        """Note names revealed in cheat mode."""
        return [note.token for note in self.display_notes]

    @abstractmethod
    def verifier(self) -> AnswerVerifier:
        """Fresh verifier bound to this exercise."""


@dataclass(frozen=True)
class NoteExercise(Exercise):
    """A single note or a stacked cluster read off one staff."""

    notes: tuple[Note, ...]
    clef: str = "treble"
    mode = "note"

    @property
    def display_notes(self) -> list[Note]:
        return list(self.notes)

    @property
    def label(self) -> str:
        return "Note" if len(self.notes) == 1 else f"{len(self.notes)}-note chord"

    def verifier(self) -> AnswerVerifier:
        return NoteVerifier(self.notes)


@dataclass(frozen=True)
class ChordExercise(Exercise):
    """A named chord, drawn in root position on the treble staff."""

    chord: Chord
    clef: str = "treble"
    mode = "chord"

    @property
    def display_notes(self) -> list[Note]:
        return self.chord.voiced()

    @property
    def label(self) -> str:
        return self.chord.name

    @property
    def answer(self) -> list[str]:
        return self.chord.note_names

    def verifier(self) -> AnswerVerifier:
        return ChordVerifier(self.chord)


@dataclass(frozen=True)
class ScaleExercise(Exercise):
    """A scale played one note at a time, in order."""

    scale: Scale
    clef: str = "treble"
    mode = "scale"

    @property
    def display_notes(self) -> list[Note]:
        return list(self.scale.notes)

    @property
    def label(self) -> str:
        return f"{self.scale.name} ({self.scale.direction_label})"

    def verifier(self) -> AnswerVerifier:
        return ScaleVerifier(self.scale)
