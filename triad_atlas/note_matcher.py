from typing import FrozenSet, Iterable, Optional, Union

from .logger import get_logger
from .note_types import Note
from .note_utils import NOTE_PATTERN
from .validation import FLAT_TO_SHARP, PITCH_CLASSES, is_valid_note_name

# Get logger for this module
logger = get_logger(__name__)


class NoteMatcher:
    """
    Encapsulates logic for comparing notes by pitch class,
    including normalization and enharmonic equivalence.
    """

    @staticmethod
    def normalize_to_sharp(note: str) -> str:
        if len(note) > 1 and note[1] == "b":
            return FLAT_TO_SHARP.get(note[:2], note[:2]) + note[2:]
        return note

    @classmethod
    def pitch_class(cls, note: Union[Note, str]) -> Optional[int]:
        """Pitch class of a Note or note string ('Bb', 'A#3'), None if unparseable."""
        if isinstance(note, Note):
            return note.pitch_class

        note = str(note).strip() if note is not None else ""
        match = NOTE_PATTERN.match(note)
        if not match or not is_valid_note_name(match.group(1)):
            logger.debug(f"Invalid note format: '{note}'")
            return None
        return PITCH_CLASSES[cls.normalize_to_sharp(match.group(1))]

    @classmethod
    def pitch_class_set(cls, notes: Iterable[Union[Note, str]]) -> Optional[FrozenSet[int]]:
        """Collapse notes to their pitch classes; None if any note is unparseable."""
        classes = set()
        for note in notes:
            pitch_class = cls.pitch_class(note)
            if pitch_class is None:
                return None
            classes.add(pitch_class)
        return frozenset(classes)

    @classmethod
    def match(cls, target: Union[Note, str], played: Union[Note, str]) -> bool:
        """
        Check if the played note matches the target note, ignoring octave.

        Args:
            target: The target note (e.g., 'A', 'A#', 'Bb')
            played: The played note (e.g., 'A4', 'A#3', 'Bb2')
        Returns:
            bool: True if the notes share a pitch class, False otherwise
        """
        target_class = cls.pitch_class(target)
        played_class = cls.pitch_class(played)

        if target_class is None or played_class is None:
            logger.debug(f"No match, unparseable input - Target: '{target}', Played: '{played}'")
            return False

        matched = target_class == played_class
        logger.debug(f"Matching '{target}' against '{played}': {matched}")
        return matched
