"""Renderer implementations for exercise output formats."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import asdict
from typing import Final

from notedrill.pitch import NATURAL_NAMES, Note
from notedrill.sheet_models import StaffDocument


def _escape_html(text: str) -> str:
    """Escape the three characters that are unsafe in HTML text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


class SheetRenderer(ABC):
    """Abstract staff renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(self, document: StaffDocument) -> str:
        """Render a staff document into a file content string."""


class TextRenderer(SheetRenderer):
    """
    Draw the staff with plain characters for terminal practice.

    Rows are diatonic steps: even offsets from the bottom line are lines,
    odd offsets are spaces. Ledger lines are drawn only in the columns of
    notes that sit above or below the five staff lines. A natural and its
    sharp share a step, so they are drawn side by side in one cell (``o#o``).
    """

    #: Bottom staff line for each clef.
    _BOTTOM_LINE: Final[dict[str, Note]] = {
        "treble": Note("E", 4),
        "bass": Note("G", 2),
    }
    _TOP_POSITION = 8  # top line, four steps of two above the bottom line
    _CELL_WIDTH = 4

    @property
    def default_extension(self) -> str:
        return ".txt"

    def _position(self, note: Note, clef: str) -> int:
        bottom = self._BOTTOM_LINE.get(clef, self._BOTTOM_LINE["treble"])
        return self._diatonic_step(note) - self._diatonic_step(bottom)

    @staticmethod
    def _diatonic_step(note: Note) -> int:
        return note.octave * 7 + NATURAL_NAMES.index(note.letter[0])

    def _cell(self, row: int, column: dict[int, list[Note]], status: str | None) -> str:
        is_line = row % 2 == 0
        if 0 <= row <= self._TOP_POSITION:
            ruled = is_line
        else:
            positions = column.keys()
            ruled = is_line and bool(positions) and (
                (row > self._TOP_POSITION and max(positions) >= row)
                or (row < 0 and min(positions) <= row)
            )
        fill = "-" if ruled else " "

        notes = column.get(row)
        if not notes:
            return fill * self._CELL_WIDTH
        head = "*" if status == "correct" else "o"
        glyph = "".join(f"#{head}" if note.is_sharp else head for note in notes)
        return glyph.rjust(self._CELL_WIDTH - 1, fill) + fill

    def render(self, document: StaffDocument) -> str:
        columns: list[dict[int, list[Note]]] = []
        for entry in document.notes:
            column: dict[int, list[Note]] = {}
            for note in sorted(entry.notes(), key=lambda n: n.midi):
                column.setdefault(self._position(note, document.clef), []).append(note)
            columns.append(column)
        positions = [pos for column in columns for pos in column]
        top = max([self._TOP_POSITION, *positions])
        bottom = min([0, *positions])

        lines = [document.title, f"({document.clef} clef)"]
        if document.subtitle:
            lines.append(document.subtitle)
        lines.append("")

        for row in range(top, bottom - 1, -1):
            cells = [
                self._cell(row, column, entry.status)
                for column, entry in zip(columns, document.notes)
            ]
            edge = "|" if 0 <= row <= self._TOP_POSITION else " "
            lines.append(f"{edge}{''.join(cells)}{edge}".rstrip())

        annotations = [entry.annotation or "" for entry in document.notes]
        if any(annotations):
            lines.append(" " + "".join(a.center(self._CELL_WIDTH) for a in annotations).rstrip())

        return "\n".join(lines) + "\n"


class VexflowMarkdownRenderer(SheetRenderer):
    """Render a staff document into Markdown with an embedded VexFlow script."""

    @property
    def default_extension(self) -> str:
        return ".md"

    def render(self, document: StaffDocument) -> str:
        title_safe = _escape_html(document.title)
        subtitle = f"\n{_escape_html(document.subtitle)}\n" if document.subtitle else ""
        payload = json.dumps(asdict(document), separators=(",", ":"), ensure_ascii=False)
        payload = payload.replace("</", "<\\/")

        return f"""# {title_safe}
{subtitle}
This Markdown uses embedded JavaScript + VexFlow. Open it in a Markdown viewer that allows script execution.

<style>
  #notedrill-staff {{
    border: 1px solid #d8d8d8;
    border-radius: 8px;
    background: #ffffff;
    padding: 0.5rem;
    overflow-x: auto;
  }}
</style>

<div id="notedrill-staff"></div>
<script id="notedrill-staff-data" type="application/json">{payload}</script>
<script type="module">
  import {{
    Accidental,
    Annotation,
    Formatter,
    Renderer,
    Stave,
    StaveNote,
    Voice
  }} from "https://cdn.jsdelivr.net/npm/vexflow@4.2.3/build/esm/entry/vexflow.js";

  const host = document.getElementById("notedrill-staff");
  const payloadNode = document.getElementById("notedrill-staff-data");

  if (!host || !payloadNode) {{
    throw new Error("Missing VexFlow staff container.");
  }}

  const payload = JSON.parse(payloadNode.textContent || "{{}}");
  const clef = payload.clef || "treble";
  const entries = Array.isArray(payload.notes) && payload.notes.length > 0
    ? payload.notes
    : [{{ keys: ["b/4"], duration: "wr", accidentals: [null] }}];

  const colors = {{ correct: "#22c55e", incorrect: "#ef4444" }};

  const staveNotes = entries.map((entry) => {{
    const staveNote = new StaveNote({{
      clef,
      keys: Array.isArray(entry.keys) && entry.keys.length > 0 ? entry.keys : ["c/4"],
      duration: entry.duration || "q",
    }});

    if (Array.isArray(entry.accidentals)) {{
      entry.accidentals.forEach((symbol, noteIndex) => {{
        if (symbol) {{
          staveNote.addModifier(new Accidental(symbol), noteIndex);
        }}
      }});
    }}

    if (entry.annotation) {{
      staveNote.addModifier(
        new Annotation(entry.annotation).setVerticalJustification(Annotation.VerticalJustify.BOTTOM),
        0,
      );
    }}

    if (entry.status && colors[entry.status]) {{
      staveNote.setStyle({{ fillStyle: colors[entry.status], strokeStyle: colors[entry.status] }});
    }}

    return staveNote;
  }});

  const width = Math.max(300, 80 + staveNotes.length * 50);
  const renderer = new Renderer(host, Renderer.Backends.SVG);
  renderer.resize(width + 40, 200);
  const context = renderer.getContext();

  const stave = new Stave(20, 40, width);
  stave.addClef(clef);
  stave.setContext(context).draw();

  const voice = new Voice({{ num_beats: staveNotes.length, beat_value: 4 }});
  voice.setMode(Voice.Mode.SOFT);
  voice.addTickables(staveNotes);

  new Formatter().joinVoices([voice]).format([voice], width - 80);
  voice.draw(context, stave);
</script>
"""
