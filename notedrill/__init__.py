"""notedrill: sight-reading drills for notes, chords and scales."""

__version__ = "0.1.0"
