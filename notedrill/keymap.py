"""Input adapters: computer-keyboard letters and MIDI messages to note tokens."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, Final

from notedrill.pitch import midi_to_note
from notedrill.session import InputEvent

logger = logging.getLogger(__name__)

#: Home-row piano layout covering the middle octave, C4 to B4.
KEYBOARD_MAP: Final[dict[str, str]] = {
    "a": "C4",
    "w": "C#4",
    "s": "D4",
    "e": "D#4",
    "d": "E4",
    "f": "F4",
    "t": "F#4",
    "g": "G4",
    "y": "G#4",
    "h": "A4",
    "u": "A#4",
    "j": "B4",
}

# Three octaves around middle C: C3 (48) to G5 (79).
MIDI_LOW = 48
MIDI_HIGH = 79


def key_to_token(key: str) -> str | None:
    """Map a computer key to a note token, or ``None`` for unmapped keys."""
    return KEYBOARD_MAP.get(key.lower())


def midi_note_to_token(note: int) -> str | None:
    """Map a MIDI note number to a token, or ``None`` outside C3-G5."""
    if not MIDI_LOW <= note <= MIDI_HIGH:
        return None
    return midi_to_note(note).token


def is_note_on_msg(msg: Any) -> bool:
    """True for note_on with velocity > 0."""
    return bool(msg.type == "note_on" and msg.velocity > 0)


def is_note_off_msg(msg: Any) -> bool:
    """True for note_off, or note_on with velocity 0."""
    return bool((msg.type == "note_on" and msg.velocity == 0) or msg.type == "note_off")


def midi_message_to_event(msg: Any) -> InputEvent | None:
    """
    Translate a mido message into an :class:`InputEvent`.

    Args:
        msg: Anything with mido's ``type``, ``note`` and ``velocity`` attributes.

    Returns:
        A press or release event, or ``None`` for non-note messages and
        notes outside the supported range.
    """
    if is_note_on_msg(msg):
        kind = "press"
    elif is_note_off_msg(msg):
        kind = "release"
    else:
        return None

    token = midi_note_to_token(msg.note)
    if token is None:
        logger.debug("Ignoring out-of-range MIDI note %d", msg.note)
        return None
    return InputEvent(kind, token)


def iter_midi_events(port_name: str | None = None) -> Iterator[InputEvent]:
    """
    Yield input events from a MIDI input port until the iterator is closed.

    Requires the optional ``midi`` extra (mido with the python-rtmidi backend).

    Args:
        port_name: Input port to open; ``None`` opens the backend's default.
    """
    import mido

    with mido.open_input(port_name) as port:
        logger.info("Listening on MIDI input %r", port.name)
        for msg in port:
            event = midi_message_to_event(msg)
            if event is not None:
                yield event
