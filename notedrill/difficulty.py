"""Difficulty curve shared by the exercise generators."""

from dataclasses import dataclass
from typing import Final

from notedrill.errors import InvalidDifficulty

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 10


@dataclass(frozen=True)
class DifficultyLevel:
    """
    One row of the difficulty table.

    Attributes:
        level:          1 (beginner) to 10 (advanced).
        note_count:     How many simultaneous notes a note exercise shows.
        includes_sharps: Whether sharps may appear at this level.
        octave_range:   Octaves the level is meant to cover.
        description:    Short label shown next to the difficulty selector.
    """

    level: int
    note_count: int
    includes_sharps: bool
    octave_range: tuple[int, ...]
    description: str


DIFFICULTY_LEVELS: Final[tuple[DifficultyLevel, ...]] = (
    DifficultyLevel(1, 1, False, (4,), "Single notes in middle octave"),
    DifficultyLevel(2, 1, False, (4, 5), "Single notes in two octaves"),
    DifficultyLevel(3, 1, True, (4,), "Single notes with sharps"),
    DifficultyLevel(4, 1, True, (4, 5), "Single notes with sharps in two octaves"),
    DifficultyLevel(5, 2, False, (4,), "Two-note chords"),
    DifficultyLevel(6, 2, True, (4,), "Two-note chords with sharps"),
    DifficultyLevel(7, 3, False, (4,), "Three-note chords"),
    DifficultyLevel(8, 3, True, (4,), "Three-note chords with sharps"),
    DifficultyLevel(9, 3, True, (4, 5), "Complex chords"),
    DifficultyLevel(10, 4, True, (4, 5), "Advanced chords"),
)


def validate_difficulty(difficulty: int) -> int:
    """
    Return *difficulty* unchanged if it is an integer in 1-10.

    Raises:
        InvalidDifficulty: For anything else, including ``bool`` values.
    """
    if (
        not isinstance(difficulty, int)
        or isinstance(difficulty, bool)
        or not MIN_DIFFICULTY <= difficulty <= MAX_DIFFICULTY
    ):
        raise InvalidDifficulty(difficulty)
    return difficulty


def get_level(difficulty: int) -> DifficultyLevel:
    """Look up the table row for a 1-based difficulty."""
    return DIFFICULTY_LEVELS[validate_difficulty(difficulty) - 1]
