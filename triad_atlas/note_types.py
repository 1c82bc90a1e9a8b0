"""Type definitions for the Triad Atlas project."""

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from .validation import PITCH_CLASSES


@dataclass(frozen=True)
class Note:
    """A pitch class, optionally pinned to an octave."""

    name: str  # Canonical sharp spelling (e.g., 'C#')
    octave: Optional[int] = None  # e.g. 4
    frequency: Optional[float] = None  # Hz, derived when the octave is known

    @property
    def pitch_class(self) -> int:
        return PITCH_CLASSES[self.name]

    def __str__(self):
        return self.name if self.octave is None else f"{self.name}{self.octave}"


@dataclass(frozen=True)
class Interval:
    """A named semitone distance between two notes (0 to 12)."""

    semitones: int
    name: str  # e.g. 'perfect fifth'
    abbreviation: str  # e.g. 'P5'
    quality: str  # perfect, major, minor or augmented

    def __str__(self):
        return self.abbreviation


@dataclass(frozen=True)
class Triad:
    """Three distinct pitch classes stacked from a root."""

    root: Note
    third: Note
    fifth: Note
    quality: str
    symbol: str  # e.g. 'C', 'Am', 'B°', 'E+'

    @property
    def notes(self) -> Tuple[Note, Note, Note]:
        return (self.root, self.third, self.fifth)

    @property
    def pitch_classes(self) -> FrozenSet[int]:
        return frozenset(note.pitch_class for note in self.notes)

    def role_of(self, pitch_class: int) -> Optional[str]:
        """Return 'root', 'third' or 'fifth' for a chord tone, None otherwise."""
        for role, note in zip(("root", "third", "fifth"), self.notes):
            if note.pitch_class == pitch_class:
                return role
        return None

    def __str__(self):
        return self.symbol


@dataclass(frozen=True)
class FretboardPosition:
    """Represents a position on the guitar fretboard."""

    string: int  # String number (1-6, where 1 is the high E string)
    fret: int  # Fret number (0 for open string)
    note: Note  # Pitch sounding at this position
    role: Optional[str] = None  # Chord tone role when mapped against a triad

    @property
    def is_open(self) -> bool:
        return self.fret == 0

    def __str__(self):
        return f"S{self.string}F{self.fret}"


@dataclass(frozen=True)
class ChordVoicing:
    """One playable realization of a triad, at most one position per string."""

    triad: Triad
    positions: Tuple[FretboardPosition, ...]  # Ordered by string number
    fingering: Tuple[int, ...]  # Finger per position (0 = open, 1-4 = index..pinky)
    difficulty: str  # beginner, intermediate or advanced
    neck_position: int  # Lowest fretted (non-open) fret, 0 when all open
    shape: str  # e.g. '1:0-2:1-3:0'
    score: int = 0  # Raw difficulty score the level was derived from

    @property
    def strings(self) -> Tuple[int, ...]:
        return tuple(p.string for p in self.positions)

    @property
    def highest_fret(self) -> int:
        return max(p.fret for p in self.positions)

    @property
    def uses_open_strings(self) -> bool:
        return any(p.is_open for p in self.positions)

    @property
    def fret_span(self) -> int:
        fretted = [p.fret for p in self.positions if not p.is_open]
        return max(fretted) - min(fretted) if fretted else 0

    def __str__(self):
        return f"{self.triad.symbol} [{self.shape}]"
