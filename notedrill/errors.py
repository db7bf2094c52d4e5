"""Exception types raised by the notedrill core."""


class NotedrillError(Exception):
    """Base class for all notedrill errors."""


class MalformedNoteToken(NotedrillError, ValueError):
    """An input token does not look like ``C4`` or ``F#5``."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Malformed note token {token!r}; expected a letter A-G, "
                         "an optional '#' and a single octave digit.")
        self.token = token


class InvalidDifficulty(NotedrillError, ValueError):
    """A difficulty outside the supported 1-10 range was requested."""

    def __init__(self, difficulty: object) -> None:
        super().__init__(f"Difficulty must be an integer from 1 to 10, got {difficulty!r}.")
        self.difficulty = difficulty
