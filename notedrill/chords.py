"""ChordGenerator: random root + quality chords gated by difficulty."""

import random
from collections.abc import Collection
from dataclasses import dataclass, field
from typing import Final

from notedrill.difficulty import validate_difficulty
from notedrill.pitch import (
    NOTE_NAMES,
    SEMITONES_PER_OCTAVE,
    Note,
    midi_to_note,
    parse_pitch_class,
    pitch_class_to_midi,
)

# ── Interval tables ─────────────────────────────────────────────────────────

CHORD_INTERVALS: Final[dict[str, list[int]]] = {
    "major": [0, 4, 7],          # root, major-3rd, perfect-5th
    "minor": [0, 3, 7],          # root, minor-3rd, perfect-5th
    "dim": [0, 3, 6],            # root, minor-3rd, diminished-5th
    "dominant7": [0, 4, 7, 10],  # major triad + minor-7th
    "minor7": [0, 3, 7, 10],     # minor triad + minor-7th
    "major7": [0, 4, 7, 11],     # major triad + major-7th
}

CHORD_SUFFIXES: Final[dict[str, str]] = {
    "major": "",
    "minor": "m",
    "dim": "°",
    "dominant7": "7",
    "minor7": "m7",
    "major7": "maj7",
}

#: (highest difficulty, qualities available up to it), checked in order.
CHORD_TIERS: Final[list[tuple[int, list[str]]]] = [
    (3, ["major", "minor"]),
    (6, ["major", "minor", "dim"]),
    (8, ["major", "minor", "dim", "dominant7"]),
    (10, ["major", "minor", "dim", "dominant7", "minor7", "major7"]),
]


def chord_types_for(difficulty: int) -> list[str]:
    """Return the chord qualities a difficulty may draw from."""
    validate_difficulty(difficulty)
    for ceiling, chord_types in CHORD_TIERS:
        if difficulty <= ceiling:
            return chord_types
    return CHORD_TIERS[-1][1]


def chord_pitch_classes(root: int, chord_type: str) -> list[int]:
    """Apply the quality's intervals to *root*, in interval (not pitch) order."""
    return [(root + interval) % SEMITONES_PER_OCTAVE for interval in CHORD_INTERVALS[chord_type]]


@dataclass(frozen=True)
class Chord:
    """
    A chord to identify on the keyboard.

    Attributes:
        root:       Pitch class of the chord root (0=C, 1=C#, ..., 11=B).
        chord_type: One of the keys of :data:`CHORD_INTERVALS`.
        notes:      Pitch classes derived from root and type, in interval order.
    """

    root: int
    chord_type: str
    notes: tuple[int, ...] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "notes", tuple(chord_pitch_classes(self.root, self.chord_type)))

    @classmethod
    def build(cls, root: int, chord_type: str) -> "Chord":
        return cls(root=root, chord_type=chord_type)

    @property
    def name(self) -> str:
        """Human-readable chord name, e.g. 'Am', 'B°' or 'Fmaj7'."""
        return f"{NOTE_NAMES[self.root]}{CHORD_SUFFIXES[self.chord_type]}"

    @property
    def note_names(self) -> list[str]:
        return [NOTE_NAMES[pc] for pc in self.notes]

    def voiced(self, octave: int = 4) -> list[Note]:
        """
        Root-position voicing starting from the root in *octave*.

        Upper chord tones stack above the root, so A minor in octave 4 is
        A4, C5, E5 rather than wrapping back down to C4.
        """
        root_midi = pitch_class_to_midi(self.root, octave)
        return [midi_to_note(root_midi + iv) for iv in CHORD_INTERVALS[self.chord_type]]


class ChordGenerator:
    """Draws a uniformly random root and a quality from the difficulty tier."""

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng

    def generate(self, difficulty: int) -> Chord:
        """
        Generate a chord for the given difficulty.

        Raises:
            InvalidDifficulty: If difficulty is outside 1-10.
        """
        chord_types = chord_types_for(difficulty)
        root = self.rng.randrange(SEMITONES_PER_OCTAVE)
        chord_type = self.rng.choice(chord_types)
        return Chord.build(root, chord_type)


def compare_chord_notes(played: Collection[str], chord: Chord) -> bool:
    """
    Check a held set of tokens against a chord, ignoring octave and order.

    The held set must have exactly as many notes as the chord, and every
    chord tone must be among the played pitch classes.

    Raises:
        MalformedNoteToken: If a played token cannot be parsed.
    """
    if len(played) != len(chord.notes):
        return False
    played_classes = {parse_pitch_class(token) for token in played}
    return all(pc in played_classes for pc in chord.notes)
