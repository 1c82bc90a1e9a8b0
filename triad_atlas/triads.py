"""Triad generation and identification."""

from typing import Any, Dict, List, Optional, Sequence, Union

from .logger import get_logger
from .note_matcher import NoteMatcher
from .note_types import Note, Triad
from .note_utils import add_semitones, make_note, to_note
from .validation import SHARP_NOTES, TRIAD_QUALITIES, is_valid_triad_quality, log_validation_error

logger = get_logger(__name__)

# Triad patterns defined by semitone intervals from root
TRIAD_PATTERNS: Dict[str, List[int]] = {
    "major": [0, 4, 7],  # Root, Major 3rd, Perfect 5th
    "minor": [0, 3, 7],  # Root, Minor 3rd, Perfect 5th
    "diminished": [0, 3, 6],  # Root, Minor 3rd, Diminished 5th
    "augmented": [0, 4, 8],  # Root, Major 3rd, Augmented 5th
}

# Chord symbol suffix for each triad quality
TRIAD_SYMBOLS: Dict[str, str] = {
    "major": "",
    "minor": "m",
    "diminished": "°",
    "augmented": "+",
}


def get_all_triad_qualities() -> List[str]:
    """The four qualities, in the order identification tries them."""
    return list(TRIAD_QUALITIES)


def get_triad_pattern(quality: str) -> List[int]:
    if not is_valid_triad_quality(quality):
        log_validation_error("get_triad_pattern", "quality", quality)
        return []
    return list(TRIAD_PATTERNS[quality])


def generate_triad(root: Union[Note, str], quality: str) -> Optional[Triad]:
    """Stack a third and a fifth on a root.

    Args:
        root: Root note, as a Note or a name such as 'C', 'Db' or 'A3'
        quality: One of 'major', 'minor', 'diminished', 'augmented'

    Returns:
        The Triad, or None (after logging) for an invalid root or quality
    """
    root_note = to_note(root, "generate_triad")
    if root_note is None:
        return None
    if not is_valid_triad_quality(quality):
        log_validation_error("generate_triad", "quality", quality)
        return None

    _, third_offset, fifth_offset = TRIAD_PATTERNS[quality]
    return Triad(
        root=root_note,
        third=add_semitones(root_note, third_offset),
        fifth=add_semitones(root_note, fifth_offset),
        quality=quality,
        symbol=f"{root_note.name}{TRIAD_SYMBOLS[quality]}",
    )


def get_all_triads(quality: str) -> List[Triad]:
    """One triad of the given quality on each of the 12 roots, C first."""
    if not is_valid_triad_quality(quality):
        log_validation_error("get_all_triads", "quality", quality)
        return []
    return [generate_triad(make_note(pitch_class), quality) for pitch_class in range(len(SHARP_NOTES))]


def get_chord_tones(triad: Triad) -> List[Note]:
    return [triad.root, triad.third, triad.fifth]


def identify_triad(notes: Sequence[Any]) -> Optional[Triad]:
    """Name the triad formed by three notes, in any order or octave.

    Every note is tried as the root, lowest pitch class first, against every
    quality in get_all_triad_qualities() order; the first reading whose pitch
    classes equal the input's wins. Only augmented triads admit several
    readings, so {C, E, G#} is always C+ and never E+ or G#+.

    Returns:
        The matching Triad (rooted on the input note, keeping its octave),
        or None when the notes do not form a triad
    """
    if isinstance(notes, (str, bytes)) or len(notes) != 3:
        log_validation_error("identify_triad", "notes", notes)
        return None

    candidates = [to_note(n, "identify_triad") for n in notes]
    if any(c is None for c in candidates):
        return None

    target = NoteMatcher.pitch_class_set(candidates)

    for potential_root in sorted(candidates, key=lambda n: n.pitch_class):
        for quality in get_all_triad_qualities():
            generated = generate_triad(potential_root, quality)
            if NoteMatcher.pitch_class_set(generated.notes) == target:
                logger.debug(f"Identified {generated.symbol} from {[str(n) for n in candidates]}")
                return generated

    logger.debug(f"No triad found for {[str(n) for n in candidates]}")
    return None
