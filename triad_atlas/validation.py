"""Music constants and the validation surface shared by every public operation."""

from typing import Any, Dict, List, Tuple

from .logger import get_logger

logger = get_logger(__name__)

# Musical constants
A4_FREQUENCY: float = 440.0
SEMITONES_IN_OCTAVE: int = 12
A4_SEMITONE_VALUE: int = 9 + 4 * SEMITONES_IN_OCTAVE  # A in the 4th octave
GUITAR_STRINGS: int = 6
MIN_FRET: int = 0
MAX_FRET: int = 24
MIN_OCTAVE: int = 0
MAX_OCTAVE: int = 9

# Canonical spellings, indexed by pitch class
SHARP_NOTES: List[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]

PITCH_CLASSES: Dict[str, int] = {name: index for index, name in enumerate(SHARP_NOTES)}

# Mapping between sharp and flat note names
SHARP_TO_FLAT: Dict[str, str] = {
    "C#": "Db",
    "D#": "Eb",
    "F#": "Gb",
    "G#": "Ab",
    "A#": "Bb",
}

FLAT_TO_SHARP: Dict[str, str] = {v: k for k, v in SHARP_TO_FLAT.items()}

TRIAD_QUALITIES: Tuple[str, ...] = ("major", "minor", "diminished", "augmented")

DIFFICULTY_LEVELS: Tuple[str, ...] = ("beginner", "intermediate", "advanced")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_valid_note_name(name: Any) -> bool:
    """Check for one of the 17 accepted spellings (naturals, sharps, flats)."""
    return isinstance(name, str) and (name in PITCH_CLASSES or name in FLAT_TO_SHARP)


def is_valid_triad_quality(quality: Any) -> bool:
    return isinstance(quality, str) and quality in TRIAD_QUALITIES


def is_valid_difficulty_level(difficulty: Any) -> bool:
    return isinstance(difficulty, str) and difficulty in DIFFICULTY_LEVELS


def is_valid_fret_number(fret: Any) -> bool:
    return _is_int(fret) and MIN_FRET <= fret <= MAX_FRET


def is_valid_string_number(string: Any) -> bool:
    return _is_int(string) and 1 <= string <= GUITAR_STRINGS


def is_valid_octave(octave: Any) -> bool:
    return _is_int(octave) and MIN_OCTAVE <= octave <= MAX_OCTAVE


def is_valid_neck_position(position: Any) -> bool:
    return _is_int(position) and 0 <= position <= MAX_FRET


def log_validation_error(operation: str, param: str, value: Any) -> None:
    """Report malformed input to a public operation.

    Callers return an empty result after logging; nothing is raised.
    """
    logger.error(f"Validation failed in '{operation}': invalid {param}: {value!r}")
