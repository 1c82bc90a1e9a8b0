"""Utility functions for working with note names, pitch classes and frequencies."""

import re
from typing import Any, Optional

import numpy as np

from .logger import get_logger
from .note_types import Note
from .validation import (
    A4_FREQUENCY,
    A4_SEMITONE_VALUE,
    FLAT_TO_SHARP,
    PITCH_CLASSES,
    SEMITONES_IN_OCTAVE,
    SHARP_NOTES,
    SHARP_TO_FLAT,
    is_valid_note_name,
    is_valid_octave,
    log_validation_error,
)

# Get logger for this module
logger = get_logger(__name__)

# Compile regex to split a note string into its spelling and octave
# This pattern matches:
# - Note letter (A-G, upper case only)
# - Optional accidental (# or b)
# - Optional single-digit octave (0-9)
NOTE_PATTERN = re.compile(r"^([A-G][#b]?)([0-9]?)$")

__all__ = [
    "NOTE_PATTERN",
    "is_valid_note_name",
    "normalize_note_name",
    "note_frequency",
    "make_note",
    "note_from_name",
    "to_note",
    "add_semitones",
    "frequency_to_note_name",
    "convert_note_notation",
]


def normalize_note_name(name: Any) -> Optional[str]:
    """Map a note spelling to its canonical sharp spelling.

    Flats become their sharp enharmonic ('Db' -> 'C#'); sharps and naturals
    pass through unchanged, so normalizing twice gives the same result.

    Returns:
        The canonical spelling, or None (after logging) for an invalid name
    """
    if not is_valid_note_name(name):
        log_validation_error("normalize_note_name", "note name", name)
        return None
    return FLAT_TO_SHARP.get(name, name)


def note_frequency(name: str, octave: int) -> float:
    """Equal-tempered frequency of a note, with A4 = 440 Hz.

    Args:
        name: Canonical note name (e.g., 'A', 'C#')
        octave: Octave in scientific pitch notation (C4 is middle C)

    Returns:
        Frequency in Hz
    """
    semitone_offset = PITCH_CLASSES[name] + octave * SEMITONES_IN_OCTAVE - A4_SEMITONE_VALUE
    return float(A4_FREQUENCY * np.power(2.0, semitone_offset / SEMITONES_IN_OCTAVE))


def make_note(pitch_class: int, octave: Optional[int] = None) -> Note:
    """Build a Note from a pitch class, deriving its frequency when the octave is known."""
    name = SHARP_NOTES[pitch_class % SEMITONES_IN_OCTAVE]
    if octave is None:
        return Note(name)
    return Note(name, octave, note_frequency(name, octave))


def note_from_name(name: Any, octave: Optional[int] = None) -> Optional[Note]:
    """Create a Note from a spelling such as 'Db', 'A' or 'F#3'.

    Args:
        name: Note spelling, optionally with a trailing octave digit
        octave: Explicit octave; takes precedence over an embedded one

    Returns:
        The Note, or None (after logging) when the name or octave is invalid
    """
    if not isinstance(name, str):
        log_validation_error("note_from_name", "note name", name)
        return None

    match = NOTE_PATTERN.match(name)
    if not match or not is_valid_note_name(match.group(1)):
        log_validation_error("note_from_name", "note name", name)
        return None

    spelling, embedded_octave = match.groups()
    if octave is None and embedded_octave:
        octave = int(embedded_octave)

    if octave is not None and not is_valid_octave(octave):
        log_validation_error("note_from_name", "octave", octave)
        return None

    return make_note(PITCH_CLASSES[FLAT_TO_SHARP.get(spelling, spelling)], octave)


def to_note(value: Any, operation: str) -> Optional[Note]:
    """Accept a Note or a note string at a public boundary."""
    if isinstance(value, Note):
        return value
    if isinstance(value, str):
        return note_from_name(value)
    log_validation_error(operation, "note", value)
    return None


def add_semitones(note: Note, semitones: int) -> Note:
    """Transpose a note, wrapping the pitch class and carrying the octave.

    Examples:
        >>> add_semitones(note_from_name('B3'), 1)  # C4
        >>> add_semitones(note_from_name('C4'), -1)  # B3
    """
    total = note.pitch_class + semitones
    octave = None
    if note.octave is not None:
        octave = note.octave + total // SEMITONES_IN_OCTAVE
    return make_note(total % SEMITONES_IN_OCTAVE, octave)


def frequency_to_note_name(freq: float, use_flats: bool = False) -> str:
    """Convert frequency to note name using Scientific Pitch Notation (SPN).

    Args:
        freq: Frequency in Hz
        use_flats: If True, use flat notes (e.g., 'Bb') instead of sharps (e.g., 'A#')

    Returns:
        Note name with octave in SPN (e.g., 'A4', 'C#4', 'Bb3'), or '---' for
        a non-positive frequency

    Note:
        - Middle C is C4 (261.63 Hz)
        - Octave numbers change between B and C (e.g., B3 -> C4)
    """
    if freq <= 0:
        return "---"

    # Calculate half steps from A4 (A4 is 69 in MIDI)
    half_steps = int(round(12 * np.log2(freq / A4_FREQUENCY)))
    midi_number = 69 + half_steps

    octave = (midi_number // 12) - 1
    note_name = SHARP_NOTES[midi_number % 12]
    if use_flats:
        note_name = SHARP_TO_FLAT.get(note_name, note_name)

    return f"{note_name}{octave}"


def convert_note_notation(note_name: str, to_flats: bool = False) -> str:
    """Convert a note name between sharp and flat notation.

    Args:
        note_name: The note name to convert (e.g., 'F#2' or 'Gb2')
        to_flats: If True, convert to flats (e.g., 'Gb2'), otherwise to sharps (e.g., 'F#2')

    Returns:
        str: The converted note name, or original if no conversion needed or invalid

    Examples:
        >>> convert_note_notation('F#2', to_flats=True)  # Returns 'Gb2'
        >>> convert_note_notation('Gb2', to_flats=False)  # Returns 'F#2'
    """
    if not note_name or not isinstance(note_name, str):
        return note_name or ""

    match = NOTE_PATTERN.match(note_name)
    if not match:
        return note_name

    spelling, octave_part = match.groups()
    if to_flats and spelling in SHARP_TO_FLAT:
        return f"{SHARP_TO_FLAT[spelling]}{octave_part}"
    if not to_flats and spelling in FLAT_TO_SHARP:
        return f"{FLAT_TO_SHARP[spelling]}{octave_part}"

    # No conversion needed or possible
    return note_name
