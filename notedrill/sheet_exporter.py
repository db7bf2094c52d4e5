"""SheetExporter: turns an exercise into text or Markdown staff output."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from notedrill.exercises import Exercise
from notedrill.pitch import Note
from notedrill.sheet_models import StaffDocument, StaffNote
from notedrill.sheet_renderers import SheetRenderer, TextRenderer, VexflowMarkdownRenderer

SUPPORTED_FORMATS: Final[set[str]] = {"text", "md-vexflow"}


class SheetExporter:
    """
    Convert an exercise into staff output via a pluggable renderer.

    Supported formats:
    - ``text``: a character staff for the terminal.
    - ``md-vexflow``: markdown file with embedded VexFlow JavaScript renderer.

    Layout rules
    ------------
    Note and chord exercises are a single whole-note stack. Scale exercises
    are one quarter note per degree; degrees already played are marked
    "correct" so the renderer can colour them.
    """

    def __init__(self, output_format: str = "text", cheat: bool = False) -> None:
        normalized = output_format.strip().lower()
        if normalized not in SUPPORTED_FORMATS:
            supported = ", ".join(sorted(SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
        self.output_format = normalized
        self.cheat = cheat
        self.renderer = self._build_renderer(normalized)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_renderer(self, output_format: str) -> SheetRenderer:
        if output_format == "text":
            return TextRenderer()
        return VexflowMarkdownRenderer()

    def _staff_note(self, notes: Sequence[Note], duration: str, status: str | None = None) -> StaffNote:
        return StaffNote(
            keys=[note.vexflow_key for note in notes],
            duration=duration,
            accidentals=["#" if note.is_sharp else None for note in notes],
            annotation=" ".join(note.token for note in notes) if self.cheat else None,
            status=status,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def to_document(self, exercise: Exercise, played: Sequence[Note] = ()) -> StaffDocument:
        """
        Build the neutral staff document for an exercise.

        Args:
            exercise: The active exercise.
            played:   Scale-mode prefix already accepted by the verifier.
        """
        notes = exercise.display_notes
        if exercise.mode == "scale":
            staff_notes = [
                self._staff_note([note], "q", "correct" if index < len(played) else None)
                for index, note in enumerate(notes)
            ]
        else:
            staff_notes = [self._staff_note(notes, "w")]

        return StaffDocument(
            title=exercise.label,
            subtitle=" ".join(exercise.answer) if self.cheat else "",
            clef=exercise.clef,
            notes=staff_notes,
        )

    def render(self, exercise: Exercise, played: Sequence[Note] = ()) -> str:
        return self.renderer.render(self.to_document(exercise, played))

    def export(self, exercise: Exercise, output_path: str, played: Sequence[Note] = ()) -> None:
        """
        Render the exercise and write it to disk.

        Raises:
            OSError: If the output file cannot be written.
        """
        content = self.render(exercise, played)
        with open(output_path, "w", encoding="utf-8") as fh:
            fh.write(content)
