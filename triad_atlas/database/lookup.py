"""Read-only queries over the precomputed triad database."""

import os
import random
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional

from ..logger import get_logger
from ..note_types import ChordVoicing
from ..validation import (
    DIFFICULTY_LEVELS,
    FLAT_TO_SHARP,
    is_valid_difficulty_level,
    is_valid_fret_number,
    is_valid_neck_position,
    is_valid_note_name,
    is_valid_triad_quality,
    log_validation_error,
)
from .builder import TriadDatabaseBuilder
from .models import UNKNOWN, DatabaseLoadError, TriadDatabase, TriadDatabaseEntry, load_database

logger = get_logger(__name__)

DATABASE_ENV_VAR = "TRIAD_ATLAS_DATABASE"


def _log_database_error(operation: str, error: Exception) -> None:
    logger.error(f"Database operation '{operation}' failed: {error!r}")


class TriadLookup:
    """Validated, read-only access to a TriadDatabase.

    Every query checks its arguments before touching the data; bad input is
    logged and answered with an empty result instead of an exception.
    """

    def __init__(self, database: TriadDatabase) -> None:
        self._database = database

    @property
    def database(self) -> TriadDatabase:
        return self._database

    @staticmethod
    def _root(root: Any, operation: str) -> Optional[str]:
        if not is_valid_note_name(root):
            log_validation_error(operation, "root", root)
            return None
        return FLAT_TO_SHARP.get(root, root)

    @staticmethod
    def _quality(quality: Any, operation: str) -> Optional[str]:
        if not is_valid_triad_quality(quality):
            log_validation_error(operation, "quality", quality)
            return None
        return quality

    def _all_entries(self) -> List[TriadDatabaseEntry]:
        return list(self._database.entries)

    def get_triad(self, root: str, quality: str) -> Optional[TriadDatabaseEntry]:
        root = self._root(root, "get_triad")
        if root is None or self._quality(quality, "get_triad") is None:
            return None

        try:
            return self._database.entry(root, quality)
        except Exception as e:
            _log_database_error("get_triad", e)
            return None

    def get_triads_by_root(self, root: str) -> List[TriadDatabaseEntry]:
        root = self._root(root, "get_triads_by_root")
        if root is None:
            return []

        try:
            return self._database.entries_at(self._database.by_root.get(root, ()))
        except Exception as e:
            _log_database_error("get_triads_by_root", e)
            return []

    def get_triads_by_quality(self, quality: str) -> List[TriadDatabaseEntry]:
        if self._quality(quality, "get_triads_by_quality") is None:
            return []

        try:
            return self._database.entries_at(self._database.by_quality.get(quality, ()))
        except Exception as e:
            _log_database_error("get_triads_by_quality", e)
            return []

    def get_voicings_by_difficulty(self, difficulty: str) -> List[ChordVoicing]:
        if not is_valid_difficulty_level(difficulty):
            log_validation_error("get_voicings_by_difficulty", "difficulty", difficulty)
            return []

        try:
            return self._database.voicings_at(self._database.by_difficulty.get(difficulty, ()))
        except Exception as e:
            _log_database_error("get_voicings_by_difficulty", e)
            return []

    def get_voicings_by_neck_position(self, position: int) -> List[ChordVoicing]:
        if not is_valid_neck_position(position):
            log_validation_error("get_voicings_by_neck_position", "position", position)
            return []

        try:
            return self._database.voicings_at(self._database.by_neck_position.get(position, ()))
        except Exception as e:
            _log_database_error("get_voicings_by_neck_position", e)
            return []

    def find_triads(self, root: Optional[str] = None, quality: Optional[str] = None) -> List[TriadDatabaseEntry]:
        """Entries matching the given root and/or quality; all entries with no filter."""
        try:
            if root is not None and quality is not None:
                entry = self.get_triad(root, quality)
                return [entry] if entry else []
            if root is not None:
                return self.get_triads_by_root(root)
            if quality is not None:
                return self.get_triads_by_quality(quality)
            return self._all_entries()
        except Exception as e:
            _log_database_error("find_triads", e)
            return []

    def find_voicings(
        self,
        root: Optional[str] = None,
        quality: Optional[str] = None,
        difficulty: Optional[str] = None,
        neck_position: Optional[int] = None,
        max_frets: Optional[int] = None,
        include_open_strings: Optional[bool] = None,
    ) -> List[ChordVoicing]:
        """Voicings of the matching triads that pass every given filter.

        Args:
            root: Root note name (sharp or flat spelling)
            quality: Triad quality
            difficulty: Exact difficulty level
            neck_position: Exact neck position
            max_frets: Highest fret any position may use
            include_open_strings: False drops voicings that ring an open string
        """
        predicates: List[Callable[[ChordVoicing], bool]] = []

        if difficulty is not None:
            if not is_valid_difficulty_level(difficulty):
                log_validation_error("find_voicings", "difficulty", difficulty)
                return []
            predicates.append(lambda v: v.difficulty == difficulty)

        if neck_position is not None:
            if not is_valid_neck_position(neck_position):
                log_validation_error("find_voicings", "neck_position", neck_position)
                return []
            predicates.append(lambda v: v.neck_position == neck_position)

        if max_frets is not None:
            if not is_valid_fret_number(max_frets):
                log_validation_error("find_voicings", "max_frets", max_frets)
                return []
            predicates.append(lambda v: all(p.fret <= max_frets for p in v.positions))

        if include_open_strings is False:
            predicates.append(lambda v: not v.uses_open_strings)

        if root is not None and self._root(root, "find_voicings") is None:
            return []
        if quality is not None and self._quality(quality, "find_voicings") is None:
            return []

        try:
            return [
                voicing
                for entry in self.find_triads(root, quality)
                for voicing in entry.voicings
                if all(predicate(voicing) for predicate in predicates)
            ]
        except Exception as e:
            _log_database_error("find_voicings", e)
            return []

    def get_random_triad(
        self, quality: Optional[str] = None, rng: Optional[random.Random] = None
    ) -> Optional[TriadDatabaseEntry]:
        """Pick an entry uniformly at random, optionally of one quality."""
        if quality is not None and self._quality(quality, "get_random_triad") is None:
            return None

        try:
            candidates = self.get_triads_by_quality(quality) if quality else self._all_entries()
            if not candidates:
                return None
            return (rng or random).choice(candidates)
        except Exception as e:
            _log_database_error("get_random_triad", e)
            return None

    def get_common_voicings(self, root: str, quality: str) -> List[ChordVoicing]:
        root = self._root(root, "get_common_voicings")
        if root is None or self._quality(quality, "get_common_voicings") is None:
            return []

        entry = self.get_triad(root, quality)
        return list(entry.common_voicings) if entry else []

    def get_all_triad_symbols(self) -> List[str]:
        try:
            return sorted({entry.triad.symbol for entry in self._database.entries})
        except Exception as e:
            _log_database_error("get_all_triad_symbols", e)
            return []

    def get_database_stats(self) -> Dict[str, Any]:
        """Totals recorded in the dataset, plus its metadata."""
        try:
            stats = self._database.stats
            return {
                "total_triads": stats.total_triads,
                "total_voicings": stats.total_voicings,
                "total_positions": stats.total_positions,
                "voicings_by_difficulty": dict(stats.voicings_by_difficulty),
                "version": self._database.version,
                "generated": self._database.generated,
                "instrument": self._database.instrument,
            }
        except Exception as e:
            _log_database_error("get_database_stats", e)
            return {
                "total_triads": 0,
                "total_voicings": 0,
                "total_positions": 0,
                "voicings_by_difficulty": {level: 0 for level in DIFFICULTY_LEVELS},
                "version": UNKNOWN,
                "generated": UNKNOWN,
                "instrument": UNKNOWN,
            }


def open_database(path: Optional[str] = None) -> TriadDatabase:
    """Load the dataset at path, or build it in-process when no path is given.

    A failure is logged and yields an empty database, so every query degrades
    to an empty result instead of raising.
    """
    if path:
        try:
            return load_database(path)
        except DatabaseLoadError as e:
            _log_database_error("load", e)
            return TriadDatabase.empty()

    try:
        return TriadDatabaseBuilder().build()
    except Exception as e:
        _log_database_error("build", e)
        return TriadDatabase.empty()


@lru_cache(maxsize=None)
def get_default_lookup() -> TriadLookup:
    """Process-wide lookup, created on first use and shared afterwards."""
    return TriadLookup(open_database(os.environ.get(DATABASE_ENV_VAR)))


def get_triad(root: str, quality: str) -> Optional[TriadDatabaseEntry]:
    return get_default_lookup().get_triad(root, quality)


def get_triads_by_root(root: str) -> List[TriadDatabaseEntry]:
    return get_default_lookup().get_triads_by_root(root)


def get_triads_by_quality(quality: str) -> List[TriadDatabaseEntry]:
    return get_default_lookup().get_triads_by_quality(quality)


def get_voicings_by_difficulty(difficulty: str) -> List[ChordVoicing]:
    return get_default_lookup().get_voicings_by_difficulty(difficulty)


def get_voicings_by_neck_position(position: int) -> List[ChordVoicing]:
    return get_default_lookup().get_voicings_by_neck_position(position)


def find_triads(root: Optional[str] = None, quality: Optional[str] = None) -> List[TriadDatabaseEntry]:
    return get_default_lookup().find_triads(root, quality)


def find_voicings(**filters: Any) -> List[ChordVoicing]:
    return get_default_lookup().find_voicings(**filters)


def get_random_triad(
    quality: Optional[str] = None, rng: Optional[random.Random] = None
) -> Optional[TriadDatabaseEntry]:
    return get_default_lookup().get_random_triad(quality, rng)


def get_common_voicings(root: str, quality: str) -> List[ChordVoicing]:
    return get_default_lookup().get_common_voicings(root, quality)


def get_all_triad_symbols() -> List[str]:
    return get_default_lookup().get_all_triad_symbols()


def get_database_stats() -> Dict[str, Any]:
    return get_default_lookup().get_database_stats()
