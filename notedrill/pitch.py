"""Pitch model: pitch classes, octave-qualified notes and token parsing."""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Final

from notedrill.errors import MalformedNoteToken

# ── Pitch-class tables ──────────────────────────────────────────────────────

#: Chromatic pitch class names (index 0 = C). Sharps only, no flat spellings.
NOTE_NAMES: Final[list[str]] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

#: The seven natural letters in staff order.
NATURAL_NAMES: Final[list[str]] = ["C", "D", "E", "F", "G", "A", "B"]

# ── MIDI constants ──────────────────────────────────────────────────────────
SEMITONES_PER_OCTAVE = 12
MIDDLE_C_MIDI = 60  # C4 in Scientific Pitch Notation

_NOTE_TOKEN = re.compile(r"^([A-G]#?)(\d)$")
_PITCH_CLASS_TOKEN = re.compile(r"^([A-G]#?)\d?$")


def normalize(letter: str) -> str:
    """Return the canonical spelling of a letter token: ``"c#"`` -> ``"C#"``."""
    return letter.strip().upper()


def index_of(letter: str) -> int:
    """
    Return the chromatic index (0-11) of a letter token.

    Raises:
        MalformedNoteToken: If the letter is not one of the twelve sharp names.
    """
    canonical = normalize(letter)
    if canonical not in NOTE_NAMES:
        raise MalformedNoteToken(letter)
    return NOTE_NAMES.index(canonical)


def pitch_class_to_midi(pitch_class: int, octave: int) -> int:
    """
    Convert a pitch class (0-11) and an octave number to an absolute MIDI note.

    MIDI octave numbering: C-1 = 0, C0 = 12, C1 = 24, ... C4 (Middle C) = 60.

    Args:
        pitch_class: 0=C, 1=C#, 2=D, ..., 11=B.
        octave:      Scientific octave number (e.g. 4 for Middle C octave).

    Returns:
        MIDI note number.
    """
    return (octave + 1) * SEMITONES_PER_OCTAVE + pitch_class


@dataclass(frozen=True)
class Note:
    """
    A pitch class pinned to an octave, e.g. ``Note("F#", 4)``.

    Two notes are equal only when both the letter and the octave match,
    so C4 and C5 are different notes.

    Attributes:
        letter: Canonical sharp spelling ("C", "C#", ..., "B").
        octave: Scientific octave number.
    """

    letter: str
    octave: int

    def __post_init__(self) -> None:
        canonical = normalize(self.letter)
        if canonical not in NOTE_NAMES:
            raise MalformedNoteToken(f"{self.letter}{self.octave}")
        object.__setattr__(self, "letter", canonical)

    @property
    def pitch_class(self) -> int:
        return NOTE_NAMES.index(self.letter)

    @property
    def midi(self) -> int:
        return pitch_class_to_midi(self.pitch_class, self.octave)

    @property
    def is_sharp(self) -> bool:
        return self.letter.endswith("#")

    @property
    def token(self) -> str:
        """Input-style token, e.g. ``"C#4"``."""
        return f"{self.letter}{self.octave}"

    @property
    def vexflow_key(self) -> str:
        """Key string in the form VexFlow expects, e.g. ``"c#/4"``."""
        return f"{self.letter.lower()}/{self.octave}"

    def __str__(self) -> str:
        return self.token


def midi_to_note(midi: int) -> Note:
    """Inverse of :func:`pitch_class_to_midi`: MIDI 61 -> ``Note("C#", 4)``."""
    octave, pitch_class = divmod(midi, SEMITONES_PER_OCTAVE)
    return Note(NOTE_NAMES[pitch_class], octave - 1)


def parse_note(token: str) -> Note:
    """
    Parse an input token such as ``"C4"``, ``"f#5"`` or ``" G3 "``.

    Matching is case-insensitive; the octave must be a single digit.

    Raises:
        MalformedNoteToken: If the token is not ``[A-G](#)?`` followed by a digit.
    """
    match = _NOTE_TOKEN.match(normalize(token))
    if not match:
        raise MalformedNoteToken(token)
    return Note(match.group(1), int(match.group(2)))


def parse_pitch_class(token: str) -> int:
    """
    Return the pitch class of a token, ignoring any octave digit.

    ``"c#4"``, ``"C#"`` and ``"C#5"`` all map to 1.

    Raises:
        MalformedNoteToken: If the token has no recognisable letter.
    """
    match = _PITCH_CLASS_TOKEN.match(normalize(token))
    if not match:
        raise MalformedNoteToken(token)
    return NOTE_NAMES.index(match.group(1))


def notes_equal(a: Note, b: Note) -> bool:
    """True when both the normalised letter and the octave match."""
    return normalize(a.letter) == normalize(b.letter) and a.octave == b.octave


def sort_notes(notes: Iterable[Note]) -> list[Note]:
    """Order notes by octave, then by chromatic index within the octave."""
    return sorted(notes, key=lambda note: (note.octave, note.pitch_class))
