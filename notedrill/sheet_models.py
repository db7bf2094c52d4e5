"""Data models handed to the staff renderers."""

from dataclasses import dataclass

from notedrill.pitch import Note


@dataclass(frozen=True)
class StaffNote:
    """
    A single VexFlow note or chord token.

    Attributes:
        keys:        VexFlow keys, e.g. ``["c/4", "e/4"]``.
        duration:    VexFlow duration code ("w", "q", ...).
        accidentals: One entry per key: "#" or None.
        annotation:  Note names printed under the glyph (cheat mode only).
        status:      "correct" once a scale note has been played, else None.
    """

    keys: list[str]
    duration: str
    accidentals: list[str | None]
    annotation: str | None = None
    status: str | None = None

    def notes(self) -> list[Note]:
        """Turn the VexFlow keys back into notes: ``"c#/4"`` -> C#4."""
        result = []
        for key in self.keys:
            letter, octave = key.split("/", maxsplit=1)
            result.append(Note(letter, int(octave)))
        return result


@dataclass(frozen=True)
class StaffDocument:
    """Neutral single-staff representation consumed by the renderers."""

    title: str
    subtitle: str
    clef: str
    notes: list[StaffNote]
