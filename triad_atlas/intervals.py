"""Interval calculation utilities for music theory."""

from typing import Any, Dict, List, Optional, Tuple, Union

from .logger import get_logger
from .note_types import Interval, Note
from .note_utils import to_note
from .validation import SEMITONES_IN_OCTAVE, log_validation_error

logger = get_logger(__name__)

# (name, abbreviation, quality) by semitone distance
_INTERVAL_TABLE: List[Tuple[str, str, str]] = [
    ("root", "P1", "perfect"),
    ("minor second", "m2", "minor"),
    ("major second", "M2", "major"),
    ("minor third", "m3", "minor"),
    ("major third", "M3", "major"),
    ("perfect fourth", "P4", "perfect"),
    ("tritone", "TT", "augmented"),  # or diminished fifth
    ("perfect fifth", "P5", "perfect"),
    ("minor sixth", "m6", "minor"),
    ("major sixth", "M6", "major"),
    ("minor seventh", "m7", "minor"),
    ("major seventh", "M7", "major"),
    ("octave", "P8", "perfect"),
]

INTERVALS: Tuple[Interval, ...] = tuple(
    Interval(semitones, name, abbreviation, quality)
    for semitones, (name, abbreviation, quality) in enumerate(_INTERVAL_TABLE)
)

_BY_ABBREVIATION: Dict[str, Interval] = {i.abbreviation: i for i in INTERVALS}

# Consonant intervals (generally pleasing to the ear)
CONSONANT_SEMITONES = frozenset({0, 3, 4, 5, 7, 8, 9, 12})

IntervalLike = Union[Interval, str, int]


def interval_from_semitones(semitones: Any) -> Optional[Interval]:
    if isinstance(semitones, bool) or not isinstance(semitones, int) or not 0 <= semitones <= 12:
        log_validation_error("interval_from_semitones", "semitones", semitones)
        return None
    return INTERVALS[semitones]


def interval_from_abbreviation(abbreviation: Any) -> Optional[Interval]:
    interval = _BY_ABBREVIATION.get(abbreviation) if isinstance(abbreviation, str) else None
    if interval is None:
        log_validation_error("interval_from_abbreviation", "interval", abbreviation)
    return interval


def _resolve(interval: IntervalLike, operation: str) -> Optional[Interval]:
    if isinstance(interval, Interval):
        return interval
    if isinstance(interval, str):
        return interval_from_abbreviation(interval)
    if isinstance(interval, int) and not isinstance(interval, bool) and 0 <= interval <= 12:
        return INTERVALS[interval]
    log_validation_error(operation, "interval", interval)
    return None


def calculate_interval(start: Union[Note, str], end: Union[Note, str]) -> Optional[Interval]:
    """Ascending interval from one note to another.

    The distance is taken between pitch classes, so it always lies in 0-11,
    except that a same-pitch-class note in a higher octave is an octave.

    Args:
        start: Lower note (Note or name such as 'C' or 'C4')
        end: Upper note

    Returns:
        The Interval, or None (after logging) when either note is invalid
    """
    start_note = to_note(start, "calculate_interval")
    end_note = to_note(end, "calculate_interval")
    if start_note is None or end_note is None:
        return None

    semitones = (end_note.pitch_class - start_note.pitch_class) % SEMITONES_IN_OCTAVE
    if (
        semitones == 0
        and start_note.octave is not None
        and end_note.octave is not None
        and end_note.octave > start_note.octave
    ):
        semitones = SEMITONES_IN_OCTAVE

    return INTERVALS[semitones]


def invert_interval(interval: IntervalLike) -> Optional[Interval]:
    """Invert an interval (turn it upside down).

    Example: major third (4 semitones) inverts to minor sixth (8 semitones).
    The root and the octave invert into each other, so inverting twice
    always gives back the original interval.
    """
    resolved = _resolve(interval, "invert_interval")
    if resolved is None:
        return None
    return INTERVALS[SEMITONES_IN_OCTAVE - resolved.semitones]


def is_consonant(interval: IntervalLike) -> bool:
    resolved = _resolve(interval, "is_consonant")
    return resolved is not None and resolved.semitones in CONSONANT_SEMITONES


def get_all_intervals() -> List[Interval]:
    return list(INTERVALS)
