"""TrainingSession: owns the active exercise and routes input events to it."""

import logging
import random
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Literal

from notedrill.chords import ChordGenerator
from notedrill.difficulty import validate_difficulty
from notedrill.errors import MalformedNoteToken, NotedrillError
from notedrill.exercises import MODES, ChordExercise, Exercise, NoteExercise, ScaleExercise
from notedrill.note_generator import CLEFS, NoteGenerator, resolve_staff
from notedrill.pitch import Note, parse_note
from notedrill.scales import ScaleGenerator
from notedrill.verifier import AnswerVerifier, Outcome, ScaleVerifier, Verdict

logger = logging.getLogger(__name__)

EventKind = Literal["press", "release"]


@dataclass
class SessionSettings:
    """
    User-facing controls.

    Attributes:
        difficulty:    1-10.
        mode:          "note", "chord" or "scale".
        clef:          "treble", "bass" or "both".
        cheat:         Show the answer next to the staff. No effect on scoring.
        advance_delay: Seconds between a finished exercise and the next one.
        allow_sharps:  Let the note drill sharpen natural draws on sharp levels.
    """

    difficulty: int = 1
    mode: str = "note"
    clef: str = "treble"
    cheat: bool = False
    advance_delay: float = 0.5
    allow_sharps: bool = False

    def validate(self) -> None:
        validate_difficulty(self.difficulty)
        if self.mode not in MODES:
            raise NotedrillError(f"Unknown mode {self.mode!r}; use one of {', '.join(MODES)}.")
        if self.clef not in CLEFS:
            raise NotedrillError(f"Unknown clef {self.clef!r}; use one of {', '.join(CLEFS)}.")


@dataclass(frozen=True)
class InputEvent:
    """A key going down or up, as a raw token such as ``"C#4"``."""

    kind: EventKind
    token: str


class TrainingSession:
    """
    Drives one practice session.

    Input events are queued by :meth:`press` / :meth:`release` and consumed
    in arrival order by :meth:`process_events`. Correct answers do not swap
    the exercise immediately; they schedule an advance that :meth:`tick`
    applies once ``advance_delay`` has elapsed. Any regeneration in between
    (a settings change, for instance) bumps the exercise generation so the
    stale advance is dropped.
    """

    def __init__(
        self,
        settings: SessionSettings | None = None,
        rng: random.Random | None = None,
        on_feedback: Callable[[Verdict], None] | None = None,
        on_exercise: Callable[[Exercise], None] | None = None,
    ) -> None:
        """
        Args:
            settings:    Initial controls; defaults to note mode, difficulty 1, treble.
            rng:         Shared random source for all generators.
            on_feedback: Called with every verdict.
            on_exercise: Called whenever a new exercise becomes active.
        """
        self.settings = settings if settings is not None else SessionSettings()
        self.settings.validate()
        self.rng = rng if rng is not None else random.Random()
        self.on_feedback = on_feedback
        self.on_exercise = on_exercise

        self.note_generator = NoteGenerator(self.rng, allow_sharps=self.settings.allow_sharps)
        self.chord_generator = ChordGenerator(self.rng)
        self.scale_generator = ScaleGenerator(self.rng)

        self.events: deque[InputEvent] = deque()
        self.held: set[str] = set()
        self.streak = 0
        self.best_streak = 0
        self.feedback: Outcome | None = None

        self.exercise: Exercise | None = None
        self._verifier: AnswerVerifier | None = None
        self._generation = 0
        self._pending_advance: tuple[int, float] | None = None

        self.new_exercise()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_exercise(self) -> Exercise:
        s = self.settings
        if s.mode == "chord":
            return ChordExercise(self.chord_generator.generate(s.difficulty))
        if s.mode == "scale":
            scale = self.scale_generator.generate(s.difficulty)
            return ScaleExercise(scale, clef=resolve_staff(self.rng, s.difficulty, s.clef))
        notes, staff = self.note_generator.generate_with_clef(s.difficulty, s.clef)
        return NoteExercise(tuple(notes), clef=staff)

    def _record(self, verdict: Verdict, now: float) -> None:
        self.feedback = verdict.outcome
        if self.settings.mode == "note":
            if verdict.correct:
                self.streak += 1
                self.best_streak = max(self.best_streak, self.streak)
            else:
                self.streak = 0

        if verdict.correct and verdict.complete:
            due = now + self.settings.advance_delay
            self._pending_advance = (self._generation, due)
            logger.debug("Exercise %d solved; advancing at %.3f", self._generation, due)

        if self.on_feedback is not None:
            self.on_feedback(verdict)

    def _handle_press(self, token: str, now: float) -> Verdict | None:
        try:
            note = parse_note(token)
        except MalformedNoteToken as exc:
            logger.warning("Ignoring input: %s", exc)
            return None

        if note.token in self.held:
            return None  # key repeat
        self.held.add(note.token)

        if self._verifier is None:
            return None

        snapshot = {note.token} if self.settings.mode == "scale" else set(self.held)
        verdict = self._verifier.check(snapshot)
        if verdict is not None:
            self._record(verdict, now)
        return verdict

    def _handle_release(self, token: str) -> None:
        try:
            note = parse_note(token)
        except MalformedNoteToken as exc:
            logger.warning("Ignoring input: %s", exc)
            return
        self.held.discard(note.token)
        if not self.held:
            self.feedback = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def played(self) -> tuple[Note, ...]:
        """Scale-mode prefix accepted so far; empty in other modes."""
        if isinstance(self._verifier, ScaleVerifier):
            return tuple(self._verifier.played)
        return ()

    @property
    def advance_pending(self) -> bool:
        return self._pending_advance is not None

    def new_exercise(self) -> Exercise:
        """Replace the active exercise, discarding progress and any pending advance."""
        self._generation += 1
        self._pending_advance = None
        self.feedback = None
        self.exercise = self._build_exercise()
        self._verifier = self.exercise.verifier()
        logger.debug("New %s exercise: %s %s", self.exercise.mode, self.exercise.label,
                    " ".join(self.exercise.answer))
        if self.on_exercise is not None:
            self.on_exercise(self.exercise)
        return self.exercise

    def press(self, token: str) -> None:
        self.events.append(InputEvent("press", token))

    def release(self, token: str) -> None:
        self.events.append(InputEvent("release", token))

    def feed(self, events: Iterable[InputEvent]) -> None:
        self.events.extend(events)

    def process_events(self, now: float = 0.0) -> list[Verdict]:
        """
        Drain the event queue in order.

        Args:
            now: Current time in seconds, used to schedule advances.

        Returns:
            Every verdict produced while draining, oldest first.
        """
        verdicts: list[Verdict] = []
        while self.events:
            event = self.events.popleft()
            if event.kind == "press":
                verdict = self._handle_press(event.token, now)
                if verdict is not None:
                    verdicts.append(verdict)
            else:
                self._handle_release(event.token)
        return verdicts

    def tick(self, now: float) -> bool:
        """
        Apply a scheduled advance if it is due.

        Returns:
            True if a new exercise was generated.
        """
        if self._pending_advance is None:
            return False
        generation, due = self._pending_advance
        if generation != self._generation:
            self._pending_advance = None
            return False
        if now < due:
            return False
        self.new_exercise()
        return True

    # ── Controls ──────────────────────────────────────────────────────────

    def set_difficulty(self, difficulty: int) -> None:
        self.settings.difficulty = validate_difficulty(difficulty)
        if self.settings.mode == "note":
            self.streak = 0
        self.new_exercise()

    def set_mode(self, mode: str) -> None:
        if mode not in MODES:
            raise NotedrillError(f"Unknown mode {mode!r}; use one of {', '.join(MODES)}.")
        self.settings.mode = mode
        self.streak = 0
        if mode == "chord":
            self.settings.clef = "treble"
        self.new_exercise()

    def set_clef(self, clef: str) -> None:
        if clef not in CLEFS:
            raise NotedrillError(f"Unknown clef {clef!r}; use one of {', '.join(CLEFS)}.")
        self.settings.clef = clef
        self.streak = 0
        self.new_exercise()

    def set_cheat(self, enabled: bool) -> None:
        self.settings.cheat = enabled
