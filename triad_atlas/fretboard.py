"""Fretboard mapping utilities for translating triads to guitar positions."""

import itertools
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Optional, Sequence, Tuple, Union

from .intervals import calculate_interval, is_consonant
from .logger import get_logger
from .note_types import ChordVoicing, FretboardPosition, Note, Triad
from .note_utils import add_semitones, to_note
from .validation import (
    DIFFICULTY_LEVELS,
    GUITAR_STRINGS,
    MAX_FRET,
    SEMITONES_IN_OCTAVE,
    is_valid_fret_number,
    is_valid_string_number,
    log_validation_error,
)

logger = get_logger(__name__)

# Standard guitar tuning, from the 1st string (high E) to the 6th (low E)
STANDARD_TUNING: Tuple[str, ...] = ("E4", "B3", "G3", "D3", "A2", "E2")


@dataclass(frozen=True)
class VoicingConstraints:
    """Playability limits applied while enumerating voicings."""

    max_fret: int = MAX_FRET  # Fret ceiling
    max_span: int = 4  # Widest stretch between fretted notes
    include_open_strings: bool = True
    min_strings: int = 3
    max_strings: int = GUITAR_STRINGS

    def is_valid(self) -> bool:
        return (
            is_valid_fret_number(self.max_fret)
            and isinstance(self.max_span, int)
            and self.max_span >= 0
            and 1 <= self.min_strings <= self.max_strings <= GUITAR_STRINGS
        )


@dataclass(frozen=True)
class DifficultyPolicy:
    """Scores a voicing and buckets the score into a difficulty level.

    score = fret span + strings beyond three + 2 per skipped string
            + 1 per dissonant pair of adjacent voices
    """

    beginner_max_score: int = 2
    intermediate_max_score: int = 4

    def score(self, positions: Sequence[FretboardPosition]) -> int:
        fretted = [p.fret for p in positions if not p.is_open]
        span = max(fretted) - min(fretted) if fretted else 0

        strings = sorted(p.string for p in positions)
        extra_strings = max(0, len(strings) - 3)
        skipped = (strings[-1] - strings[0] + 1) - len(strings)

        # Walk voices from the bass (highest string number) upwards
        by_pitch = sorted(positions, key=lambda p: p.string, reverse=True)
        dissonant = sum(
            1
            for low, high in zip(by_pitch, by_pitch[1:])
            if not is_consonant(calculate_interval(low.note, high.note))
        )

        return span + extra_strings + 2 * skipped + dissonant

    def classify(self, score: int) -> str:
        if score <= self.beginner_max_score:
            return DIFFICULTY_LEVELS[0]
        if score <= self.intermediate_max_score:
            return DIFFICULTY_LEVELS[1]
        return DIFFICULTY_LEVELS[2]


def _fingering(positions: Sequence[FretboardPosition], neck_position: int) -> Tuple[int, ...]:
    return tuple(0 if p.is_open else min(p.fret - neck_position + 1, 4) for p in positions)


def shape_id(positions: Sequence[FretboardPosition]) -> str:
    return "-".join(f"{p.string}:{p.fret}" for p in sorted(positions, key=lambda p: p.string))


class FretboardMapper:
    """Maps notes and triads onto a six-string fretboard with a fixed tuning."""

    def __init__(
        self,
        tuning: Sequence[Union[str, Note]] = STANDARD_TUNING,
        max_fret: int = MAX_FRET,
        difficulty_policy: Optional[DifficultyPolicy] = None,
    ) -> None:
        """Initialize the mapper.

        Args:
            tuning: Open-string notes from string 1 (highest) to string 6
            max_fret: Fret ceiling of the instrument
            difficulty_policy: Scoring thresholds, or None for the defaults

        Raises:
            ValueError: If the tuning or fret ceiling is unusable
        """
        open_strings = [to_note(n, "FretboardMapper") for n in tuning]
        if len(open_strings) != GUITAR_STRINGS or any(n is None for n in open_strings):
            raise ValueError(f"Tuning must name {GUITAR_STRINGS} valid notes, got {list(tuning)!r}")
        if not is_valid_fret_number(max_fret):
            raise ValueError(f"Invalid fret ceiling: {max_fret!r}")

        self._tuning: Tuple[Note, ...] = tuple(open_strings)
        self._max_fret = max_fret
        self._policy = difficulty_policy or DifficultyPolicy()

    @property
    def tuning(self) -> Tuple[Note, ...]:
        return self._tuning

    @property
    def max_fret(self) -> int:
        return self._max_fret

    @property
    def difficulty_policy(self) -> DifficultyPolicy:
        return self._policy

    def fretted_note(self, string: int, fret: int) -> Note:
        return add_semitones(self._tuning[string - 1], fret)

    def _ceiling(self, max_fret: Any, operation: str) -> Optional[int]:
        if max_fret is None:
            return self._max_fret
        if not is_valid_fret_number(max_fret):
            log_validation_error(operation, "max_fret", max_fret)
            return None
        return min(max_fret, self._max_fret)

    @staticmethod
    def _pitch_class(value: Any, operation: str) -> Optional[int]:
        if isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value < SEMITONES_IN_OCTAVE:
                return value
            log_validation_error(operation, "pitch class", value)
            return None
        note = to_note(value, operation)
        return None if note is None else note.pitch_class

    def find_note_on_fretboard(
        self, pitch_class: Union[int, str, Note], string: int, max_fret: Optional[int] = None
    ) -> List[FretboardPosition]:
        """Every fret on one string that sounds the given pitch class.

        The first entry is the lowest such fret; the rest are its octave
        repeats up to the fret ceiling.
        """
        target = self._pitch_class(pitch_class, "find_note_on_fretboard")
        if target is None:
            return []
        if not is_valid_string_number(string):
            log_validation_error("find_note_on_fretboard", "string", string)
            return []
        ceiling = self._ceiling(max_fret, "find_note_on_fretboard")
        if ceiling is None:
            return []

        first_fret = (target - self._tuning[string - 1].pitch_class) % SEMITONES_IN_OCTAVE
        return [
            FretboardPosition(string, fret, self.fretted_note(string, fret))
            for fret in range(first_fret, ceiling + 1, SEMITONES_IN_OCTAVE)
        ]

    def find_note_positions(
        self, note: Union[int, str, Note], max_fret: Optional[int] = None
    ) -> List[FretboardPosition]:
        """Positions of a pitch class across all six strings."""
        positions: List[FretboardPosition] = []
        for string in range(1, GUITAR_STRINGS + 1):
            positions.extend(self.find_note_on_fretboard(note, string, max_fret))
        return positions

    def _chord_tone_positions(self, triad: Triad, ceiling: int) -> List[List[FretboardPosition]]:
        per_string = []
        for string in range(1, GUITAR_STRINGS + 1):
            positions = [
                FretboardPosition(p.string, p.fret, p.note, triad.role_of(p.note.pitch_class))
                for note in triad.notes
                for p in self.find_note_on_fretboard(note.pitch_class, string, ceiling)
            ]
            per_string.append(sorted(positions, key=lambda p: p.fret))
        return per_string

    def get_triad_positions(self, triad: Triad, max_fret: Optional[int] = None) -> List[FretboardPosition]:
        """Every chord-tone position on the neck, tagged with its role."""
        if not isinstance(triad, Triad):
            log_validation_error("get_triad_positions", "triad", triad)
            return []
        ceiling = self._ceiling(max_fret, "get_triad_positions")
        if ceiling is None:
            return []
        return [p for string in self._chord_tone_positions(triad, ceiling) for p in string]

    def map_triad_to_fretboard(
        self, triad: Triad, constraints: Optional[VoicingConstraints] = None
    ) -> List[ChordVoicing]:
        """Enumerate every playable voicing of a triad.

        Each hand window is anchored at a base fret; a string contributes
        nothing, its open note, or a chord tone between the base fret and
        base + max_span. A voicing is kept only in the window whose base is
        its lowest fretted note, and base 0 holds the all-open voicings, so
        each voicing is produced exactly once.

        Returns:
            Voicings ordered by neck position
        """
        if not isinstance(triad, Triad):
            log_validation_error("map_triad_to_fretboard", "triad", triad)
            return []
        constraints = constraints or VoicingConstraints()
        if not constraints.is_valid():
            log_validation_error("map_triad_to_fretboard", "constraints", constraints)
            return []

        ceiling = min(constraints.max_fret, self._max_fret)
        per_string = self._chord_tone_positions(triad, ceiling)
        open_options = [
            [p for p in positions if p.is_open] if constraints.include_open_strings else []
            for positions in per_string
        ]

        bases = range(0 if constraints.include_open_strings else 1, ceiling + 1)
        voicings: List[ChordVoicing] = []
        for base in bases:
            top = base + constraints.max_span if base else 0
            options = [
                [None] + opens + [p for p in positions if base <= p.fret <= top and p.fret > 0]
                for positions, opens in zip(per_string, open_options)
            ]
            for choice in itertools.product(*options):
                voicing = self._build_voicing(triad, choice, base, constraints)
                if voicing is not None:
                    voicings.append(voicing)

        logger.debug(f"Mapped {triad.symbol} to {len(voicings)} voicings with {constraints}")
        return voicings

    def _build_voicing(
        self,
        triad: Triad,
        choice: Sequence[Optional[FretboardPosition]],
        base: int,
        constraints: VoicingConstraints,
    ) -> Optional[ChordVoicing]:
        positions = tuple(p for p in choice if p is not None)
        if not constraints.min_strings <= len(positions) <= constraints.max_strings:
            return None

        fretted = [p.fret for p in positions if not p.is_open]
        if (min(fretted) if fretted else 0) != base:
            return None
        if frozenset(p.note.pitch_class for p in positions) != triad.pitch_classes:
            return None

        score = self._policy.score(positions)
        return ChordVoicing(
            triad=triad,
            positions=positions,
            fingering=_fingering(positions, base),
            difficulty=self._policy.classify(score),
            neck_position=base,
            shape=shape_id(positions),
            score=score,
        )


@lru_cache(maxsize=None)
def standard_mapper() -> FretboardMapper:
    """Shared standard-tuning mapper; it holds no mutable state."""
    return FretboardMapper()


def find_note_on_fretboard(
    pitch_class: Union[int, str, Note], string: int, max_fret: Optional[int] = None
) -> List[FretboardPosition]:
    return standard_mapper().find_note_on_fretboard(pitch_class, string, max_fret)


def map_triad_to_fretboard(
    triad: Triad, constraints: Optional[VoicingConstraints] = None
) -> List[ChordVoicing]:
    return standard_mapper().map_triad_to_fretboard(triad, constraints)
