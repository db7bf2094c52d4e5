"""ScaleGenerator: ordered scale exercises with ascending/descending variants."""

import random
from dataclasses import dataclass
from typing import Final, Literal

from notedrill.difficulty import validate_difficulty
from notedrill.pitch import NOTE_NAMES, SEMITONES_PER_OCTAVE, Note

Direction = Literal["up", "down", "both"]

#: Semitone offsets from the root, each ending on the octave (12).
SCALE_PATTERNS: Final[dict[str, list[int]]] = {
    "major": [0, 2, 4, 5, 7, 9, 11, 12],           # W W H W W W H
    "natural_minor": [0, 2, 3, 5, 7, 8, 10, 12],   # W H W W H W W
    "harmonic_minor": [0, 2, 3, 5, 7, 8, 11, 12],  # W H W W H A2 H
    "melodic_minor": [0, 2, 3, 5, 7, 9, 11, 12],   # W H W W W W H
    "pentatonic_major": [0, 2, 4, 7, 9, 12],       # major without 4th and 7th
    "pentatonic_minor": [0, 3, 5, 7, 10, 12],      # minor without 2nd and 6th
    "chromatic": list(range(13)),
}

SCALE_NAMES: Final[dict[str, str]] = {
    "major": "Major",
    "natural_minor": "Natural Minor",
    "harmonic_minor": "Harmonic Minor",
    "melodic_minor": "Melodic Minor",
    "pentatonic_major": "Major Pentatonic",
    "pentatonic_minor": "Minor Pentatonic",
    "chromatic": "Chromatic",
}

DIRECTION_LABELS: Final[dict[str, str]] = {
    "up": "Ascending",
    "down": "Descending",
    "both": "Ascending & Descending",
}

#: Octave the ascending leg starts in.
SCALE_START_OCTAVE = 4


def scale_types_for(difficulty: int) -> list[str]:
    """Return the scale types a difficulty may draw from."""
    validate_difficulty(difficulty)
    if difficulty <= 3:
        return ["major", "pentatonic_major"]
    if difficulty <= 5:
        return ["major", "natural_minor", "pentatonic_major", "pentatonic_minor"]
    if difficulty <= 7:
        return ["major", "natural_minor", "harmonic_minor", "pentatonic_major", "pentatonic_minor"]
    return ["major", "natural_minor", "harmonic_minor", "melodic_minor", "chromatic"]


def build_scale_notes(
    root: int,
    scale_type: str,
    direction: Direction = "up",
    octave: int = SCALE_START_OCTAVE,
) -> list[Note]:
    """
    Spell a scale as octave-qualified notes.

    The octave number rolls over each time ``root + interval`` crosses a
    multiple of 12, so a G major scale runs G4 ... F#5, G5.

    Args:
        root:       Pitch class of the tonic.
        scale_type: Key of :data:`SCALE_PATTERNS`.
        direction:  "up", "down", or "both" (up then back down, sharing
                    the top note once).
        octave:     Octave of the starting tonic.
    """
    ascending = [
        Note(NOTE_NAMES[(root + interval) % SEMITONES_PER_OCTAVE],
             octave + (root + interval) // SEMITONES_PER_OCTAVE)
        for interval in SCALE_PATTERNS[scale_type]
    ]
    if direction == "down":
        return ascending[::-1]
    if direction == "both":
        return ascending + ascending[:-1][::-1]
    return ascending


@dataclass(frozen=True)
class Scale:
    """
    A scale to play note by note.

    Attributes:
        root:       Pitch class of the tonic.
        scale_type: Key of :data:`SCALE_PATTERNS`.
        direction:  "up", "down" or "both".
        notes:      The full sequence the learner must play, in order.
    """

    root: int
    scale_type: str
    direction: str
    notes: tuple[Note, ...]

    @property
    def name(self) -> str:
        """e.g. ``"D Harmonic Minor"``."""
        return f"{NOTE_NAMES[self.root]} {SCALE_NAMES[self.scale_type]}"

    @property
    def direction_label(self) -> str:
        return DIRECTION_LABELS[self.direction]


class ScaleGenerator:
    """
    Draws a random tonic and a scale type from the difficulty tier.

    Direction rules
    ---------------
    Difficulty 1-5 always ascends. Difficulty 6-7 ascends or descends with
    a coin flip. Difficulty 8-10 always goes up and back down.
    """

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng

    def _pick_direction(self, difficulty: int) -> Direction:
        if difficulty <= 5:
            return "up"
        if difficulty <= 7:
            return self.rng.choice(("up", "down"))
        return "both"

    def generate(self, difficulty: int) -> Scale:
        """
        Generate a scale for the given difficulty.

        Raises:
            InvalidDifficulty: If difficulty is outside 1-10.
        """
        scale_types = scale_types_for(difficulty)
        root = self.rng.randrange(SEMITONES_PER_OCTAVE)
        direction = self._pick_direction(difficulty)
        scale_type = self.rng.choice(scale_types)
        return Scale(
            root=root,
            scale_type=scale_type,
            direction=direction,
            notes=tuple(build_scale_notes(root, scale_type, direction)),
        )
