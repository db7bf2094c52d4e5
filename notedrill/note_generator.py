"""NoteGenerator: draws single notes and note clusters for the note drill."""

import logging
import random
from typing import Final, Literal

from notedrill.difficulty import get_level
from notedrill.pitch import NOTE_NAMES, Note, parse_note, sort_notes

logger = logging.getLogger(__name__)

Clef = Literal["treble", "bass", "both"]
StaffClef = Literal["treble", "bass"]

CLEFS: Final[tuple[str, ...]] = ("treble", "bass", "both")

# ── Pitch pools ─────────────────────────────────────────────────────────────

#: Natural notes from middle C up to the top line of the treble staff.
TREBLE_POOL: Final[tuple[Note, ...]] = tuple(
    parse_note(token)
    for token in ["C4", "D4", "E4", "F4", "G4", "A4", "B4", "C5", "D5", "E5", "F5"]
)

#: Natural notes covering the bass staff.
BASS_POOL: Final[tuple[Note, ...]] = tuple(
    parse_note(token)
    for token in ["C2", "D2", "E2", "F2", "G2", "A2", "B2", "C3", "D3", "E3", "F3", "G3"]
)

#: Above this difficulty, clef "both" switches to one random note on a random staff.
BOTH_CLEF_SPLIT_DIFFICULTY = 4


def pool_for(clef: StaffClef) -> tuple[Note, ...]:
    """Return the pitch pool drawn from for a concrete staff."""
    return BASS_POOL if clef == "bass" else TREBLE_POOL


def resolve_staff(rng: random.Random, difficulty: int, clef: Clef) -> StaffClef:
    """
    Pick the staff an exercise is drawn on.

    Clef "both" flips a coin above difficulty 4 and falls back to treble
    at or below it.
    """
    if clef == "both":
        if difficulty > BOTH_CLEF_SPLIT_DIFFICULTY:
            return rng.choice(("treble", "bass"))
        return "treble"
    return clef


class NoteGenerator:
    """
    Produces note-reading exercises at a given difficulty.

    Algorithm overview
    ------------------
    1. **Pool selection** – treble or bass naturals, depending on the clef.
       Clef "both" uses the treble pool at difficulty 4 and below.

    2. **Split-staff shortcut** – for clef "both" above difficulty 4, pick a
       staff with a coin flip and return one note from it.

    3. **Rejection sampling** – draw ``note_count`` notes independently and
       uniformly, redrawing any note already chosen. Both pools hold more
       than four notes, so the loop always terminates.

    4. **Ordering** – sort by octave, then chromatic index, so clusters
       stack bottom-up on the staff.
    """

    def __init__(self, rng: random.Random, allow_sharps: bool = False) -> None:
        """
        Args:
            rng:          Source of randomness; seed it for reproducible drills.
            allow_sharps: Raise natural draws by a semitone on levels whose
                          table row includes sharps.
        """
        self.rng = rng
        self.allow_sharps = allow_sharps

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _maybe_sharpen(self, note: Note) -> Note:
        # E and B have no sharp spelling in a sharps-only model.
        if note.letter in ("E", "B") or self.rng.random() < 0.5:
            return note
        return Note(NOTE_NAMES[note.pitch_class + 1], note.octave)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate_with_clef(self, difficulty: int, clef: Clef = "treble") -> tuple[list[Note], StaffClef]:
        """
        Generate an exercise and report the staff it should be drawn on.

        Raises:
            InvalidDifficulty: If difficulty is outside 1-10.
        """
        level = get_level(difficulty)
        staff = resolve_staff(self.rng, difficulty, clef)
        pool = pool_for(staff)

        if clef == "both" and difficulty > BOTH_CLEF_SPLIT_DIFFICULTY:
            note = self.rng.choice(pool)
            logger.debug("Split-staff note drawn on %s staff: %s", staff, note)
            return [note], staff

        sharpen = self.allow_sharps and level.includes_sharps
        notes: list[Note] = []
        while len(notes) < level.note_count:
            note = self.rng.choice(pool)
            if sharpen:
                note = self._maybe_sharpen(note)
            if note in notes:
                continue  # redraw duplicates
            notes.append(note)

        return sort_notes(notes), staff

    def generate(self, difficulty: int, clef: Clef = "treble") -> list[Note]:
        """
        Generate ``note_count`` distinct notes for the difficulty level.

        Args:
            difficulty: 1-10.
            clef:       "treble", "bass" or "both".

        Returns:
            Notes sorted by octave, then chromatic index.
        """
        notes, _staff = self.generate_with_clef(difficulty, clef)
        return notes
