"""Triad Atlas: triad theory and guitar voicing lookup."""

from .fretboard import (
    STANDARD_TUNING,
    DifficultyPolicy,
    FretboardMapper,
    VoicingConstraints,
    find_note_on_fretboard,
    map_triad_to_fretboard,
)
from .intervals import (
    calculate_interval,
    get_all_intervals,
    invert_interval,
    is_consonant,
)
from .note_types import ChordVoicing, FretboardPosition, Interval, Note, Triad
from .note_utils import normalize_note_name, note_from_name
from .triads import (
    generate_triad,
    get_all_triad_qualities,
    get_all_triads,
    get_chord_tones,
    get_triad_pattern,
    identify_triad,
)

__version__ = "1.0.0"

__all__ = [
    "STANDARD_TUNING",
    "ChordVoicing",
    "DifficultyPolicy",
    "FretboardMapper",
    "FretboardPosition",
    "Interval",
    "Note",
    "Triad",
    "VoicingConstraints",
    "calculate_interval",
    "find_note_on_fretboard",
    "generate_triad",
    "get_all_intervals",
    "get_all_triad_qualities",
    "get_all_triads",
    "get_chord_tones",
    "get_triad_pattern",
    "identify_triad",
    "invert_interval",
    "is_consonant",
    "map_triad_to_fretboard",
    "normalize_note_name",
    "note_from_name",
]
