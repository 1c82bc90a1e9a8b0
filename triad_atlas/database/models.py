"""Immutable in-memory triad database and its JSON document codec."""

import json
from collections import defaultdict
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..logger import get_logger
from ..note_types import ChordVoicing, FretboardPosition, Triad
from ..note_utils import note_from_name
from ..triads import generate_triad
from ..validation import DIFFICULTY_LEVELS, SHARP_NOTES, TRIAD_QUALITIES

logger = get_logger(__name__)

UNKNOWN = "unknown"

IndexMap = Mapping[Any, Tuple[int, ...]]


class DatabaseLoadError(Exception):
    """The dataset document is missing, unreadable or inconsistent."""


def _freeze(index: Mapping[Any, Iterable[int]]) -> IndexMap:
    return MappingProxyType({key: tuple(values) for key, values in index.items()})


def _zero_counts() -> Mapping[str, int]:
    return MappingProxyType({level: 0 for level in DIFFICULTY_LEVELS})


def entry_key(root: str, quality: str) -> str:
    return f"{root}:{quality}"


@dataclass(frozen=True)
class TriadDatabaseEntry:
    """A triad with its precomputed voicings."""

    triad: Triad
    voicings: Tuple[ChordVoicing, ...]
    common_voicings: Tuple[ChordVoicing, ...]
    positions: Tuple[FretboardPosition, ...] = ()  # Role-tagged chord tones on the neck

    @property
    def position_count(self) -> int:
        return len(self.positions)

    @property
    def key(self) -> Tuple[str, str]:
        return (self.triad.root.name, self.triad.quality)


@dataclass(frozen=True)
class DatabaseStats:
    """Totals recorded when the dataset was generated."""

    total_triads: int = 0
    total_voicings: int = 0
    total_positions: int = 0
    voicings_by_difficulty: Mapping[str, int] = field(default_factory=_zero_counts)

    @classmethod
    def from_entries(cls, entries: Sequence[TriadDatabaseEntry]) -> "DatabaseStats":
        counts = {level: 0 for level in DIFFICULTY_LEVELS}
        for entry in entries:
            for voicing in entry.voicings:
                counts[voicing.difficulty] += 1
        return cls(
            total_triads=len(entries),
            total_voicings=sum(len(e.voicings) for e in entries),
            total_positions=sum(e.position_count for e in entries),
            voicings_by_difficulty=MappingProxyType(counts),
        )


@dataclass(frozen=True)
class TriadDatabase:
    """Read-only triad table with flat arenas and secondary indices.

    Entries and voicings live in flat tuples; the primary map and the four
    indices hold positions into those tuples. Nothing is mutated after
    construction, so one instance can be shared by every caller.
    """

    version: str
    generated: str
    instrument: str
    tuning: Tuple[str, ...]
    max_fret: int
    policy: Mapping[str, Any]
    stats: DatabaseStats
    entries: Tuple[TriadDatabaseEntry, ...]
    voicings: Tuple[ChordVoicing, ...]
    triads: Mapping[Tuple[str, str], int]
    by_root: IndexMap
    by_quality: IndexMap
    by_difficulty: IndexMap
    by_neck_position: IndexMap

    @classmethod
    def empty(cls) -> "TriadDatabase":
        return assemble_database(
            [],
            version=UNKNOWN,
            generated=UNKNOWN,
            instrument=UNKNOWN,
            tuning=(),
            max_fret=0,
            policy={},
        )

    def entry(self, root: str, quality: str) -> Optional[TriadDatabaseEntry]:
        index = self.triads.get((root, quality))
        return None if index is None else self.entries[index]

    def entries_at(self, indices: Iterable[int]) -> List[TriadDatabaseEntry]:
        return [self.entries[i] for i in indices]

    def voicings_at(self, indices: Iterable[int]) -> List[ChordVoicing]:
        return [self.voicings[i] for i in indices]


def assemble_database(
    entries: Sequence[TriadDatabaseEntry],
    *,
    version: str,
    generated: str,
    instrument: str,
    tuning: Sequence[str],
    max_fret: int,
    policy: Mapping[str, Any],
    stats: Optional[DatabaseStats] = None,
    index: Optional[Mapping[str, Mapping[Any, Iterable[int]]]] = None,
) -> TriadDatabase:
    """Lay entries out into arenas and build (or adopt) the secondary indices.

    Args:
        entries: Triad entries, in root-then-quality order
        stats: Recorded totals; computed from the entries when omitted
        index: Pre-resolved byRoot/byQuality/byDifficulty/byNeckPosition maps;
            built from the entries when omitted
    """
    voicings: List[ChordVoicing] = []
    triads: Dict[Tuple[str, str], int] = {}
    built: Dict[str, Dict[Any, List[int]]] = {
        "byRoot": defaultdict(list),
        "byQuality": defaultdict(list),
        "byDifficulty": {level: [] for level in DIFFICULTY_LEVELS},
        "byNeckPosition": defaultdict(list),
    }

    for entry_index, entry in enumerate(entries):
        triads[entry.key] = entry_index
        built["byRoot"][entry.triad.root.name].append(entry_index)
        built["byQuality"][entry.triad.quality].append(entry_index)
        for voicing in entry.voicings:
            voicing_id = len(voicings)
            voicings.append(voicing)
            built["byDifficulty"][voicing.difficulty].append(voicing_id)
            built["byNeckPosition"][voicing.neck_position].append(voicing_id)

    index = index if index is not None else built
    return TriadDatabase(
        version=version,
        generated=generated,
        instrument=instrument,
        tuning=tuple(tuning),
        max_fret=max_fret,
        policy=MappingProxyType(dict(policy)),
        stats=stats if stats is not None else DatabaseStats.from_entries(entries),
        entries=tuple(entries),
        voicings=tuple(voicings),
        triads=MappingProxyType(triads),
        by_root=_freeze(index["byRoot"]),
        by_quality=_freeze(index["byQuality"]),
        by_difficulty=_freeze(index["byDifficulty"]),
        by_neck_position=_freeze(index["byNeckPosition"]),
    )


# ---------------------------------------------------------------------------
# JSON document codec
# ---------------------------------------------------------------------------


def _position_to_dict(position: FretboardPosition) -> Dict[str, Any]:
    return {
        "string": position.string,
        "fret": position.fret,
        "note": str(position.note),
        "role": position.role,
    }


def _voicing_to_dict(voicing: ChordVoicing, voicing_id: int) -> Dict[str, Any]:
    return {
        "id": voicing_id,
        "positions": [_position_to_dict(p) for p in voicing.positions],
        "fingering": list(voicing.fingering),
        "difficulty": voicing.difficulty,
        "neckPosition": voicing.neck_position,
        "shape": voicing.shape,
        "score": voicing.score,
    }


def database_to_dict(database: TriadDatabase) -> Dict[str, Any]:
    """Serialize a database into the dataset document shape."""
    voicing_ids = {id(v): i for i, v in enumerate(database.voicings)}
    keys = [entry_key(*e.key) for e in database.entries]

    triads: Dict[str, Dict[str, Any]] = {}
    for entry in database.entries:
        triad = entry.triad
        triads.setdefault(triad.root.name, {})[triad.quality] = {
            "triad": {
                "root": triad.root.name,
                "third": triad.third.name,
                "fifth": triad.fifth.name,
                "quality": triad.quality,
                "symbol": triad.symbol,
            },
            "positionCount": entry.position_count,
            "positions": [_position_to_dict(p) for p in entry.positions],
            "voicings": [_voicing_to_dict(v, voicing_ids[id(v)]) for v in entry.voicings],
            "commonVoicings": [voicing_ids[id(v)] for v in entry.common_voicings],
        }

    stats = database.stats
    return {
        "version": database.version,
        "generated": database.generated,
        "instrument": {
            "name": database.instrument,
            "strings": len(database.tuning),
            "frets": database.max_fret,
            "tuning": list(database.tuning),
            "generationPolicy": dict(database.policy),
        },
        "stats": {
            "totalTriads": stats.total_triads,
            "totalVoicings": stats.total_voicings,
            "totalPositions": stats.total_positions,
            "voicingsByDifficulty": dict(stats.voicings_by_difficulty),
        },
        "triads": triads,
        "index": {
            "byRoot": {root: [keys[i] for i in ids] for root, ids in database.by_root.items()},
            "byQuality": {q: [keys[i] for i in ids] for q, ids in database.by_quality.items()},
            "byDifficulty": {d: list(ids) for d, ids in database.by_difficulty.items()},
            "byNeckPosition": {
                str(n): list(ids) for n, ids in sorted(database.by_neck_position.items())
            },
        },
    }


def _position_from_dict(data: Mapping[str, Any]) -> FretboardPosition:
    note = note_from_name(data["note"])
    if note is None:
        raise DatabaseLoadError(f"Invalid note in position: {data!r}")
    return FretboardPosition(int(data["string"]), int(data["fret"]), note, data.get("role"))


def _entry_from_dict(
    data: Mapping[str, Any], root: str, quality: str, first_voicing_id: int
) -> TriadDatabaseEntry:
    triad = generate_triad(root, quality)
    if triad is None or data["triad"]["symbol"] != triad.symbol:
        raise DatabaseLoadError(f"Triad record does not match {root} {quality}")

    voicings = []
    for offset, raw in enumerate(data["voicings"]):
        if raw["id"] != first_voicing_id + offset:
            raise DatabaseLoadError(f"Voicing ids out of order in {triad.symbol}")
        voicings.append(
            ChordVoicing(
                triad=triad,
                positions=tuple(_position_from_dict(p) for p in raw["positions"]),
                fingering=tuple(raw["fingering"]),
                difficulty=raw["difficulty"],
                neck_position=int(raw["neckPosition"]),
                shape=raw["shape"],
                score=int(raw.get("score", 0)),
            )
        )

    by_id = {first_voicing_id + i: v for i, v in enumerate(voicings)}
    try:
        common = tuple(by_id[i] for i in data["commonVoicings"])
    except KeyError as e:
        raise DatabaseLoadError(f"Common voicing {e} is not a voicing of {triad.symbol}")

    positions = tuple(_position_from_dict(p) for p in data["positions"])
    if int(data.get("positionCount", len(positions))) != len(positions):
        raise DatabaseLoadError(f"Position count does not match the positions of {triad.symbol}")

    return TriadDatabaseEntry(triad, tuple(voicings), common, positions)


def _resolve_index(
    raw: Mapping[str, Any], keys: Mapping[str, int], voicing_count: int
) -> Dict[str, Dict[Any, List[int]]]:
    def entries(ids: Iterable[str]) -> List[int]:
        try:
            return [keys[i] for i in ids]
        except KeyError as e:
            raise DatabaseLoadError(f"Index references unknown triad {e}")

    def voicings(ids: Iterable[int]) -> List[int]:
        ids = [int(i) for i in ids]
        if any(not 0 <= i < voicing_count for i in ids):
            raise DatabaseLoadError("Index references an unknown voicing id")
        return ids

    return {
        "byRoot": {k: entries(v) for k, v in raw["byRoot"].items()},
        "byQuality": {k: entries(v) for k, v in raw["byQuality"].items()},
        "byDifficulty": {k: voicings(v) for k, v in raw["byDifficulty"].items()},
        "byNeckPosition": {int(k): voicings(v) for k, v in raw["byNeckPosition"].items()},
    }


def _check_partition(
    index: Mapping[Any, List[int]], name: str, count: int, key_of: Callable[[int], Any]
) -> None:
    ids = sorted(i for values in index.values() for i in values)
    if ids != list(range(count)):
        raise DatabaseLoadError(f"Index '{name}' does not hold every record exactly once")
    for key, values in index.items():
        if any(key_of(i) != key for i in values):
            raise DatabaseLoadError(f"Index '{name}' files a record under the wrong key {key!r}")


def _check_consistency(
    index: Mapping[str, Mapping[Any, List[int]]],
    entries: Sequence[TriadDatabaseEntry],
    voicings: Sequence[ChordVoicing],
) -> None:
    """Every secondary index must partition its arena by the record's own key."""
    _check_partition(index["byRoot"], "byRoot", len(entries), lambda i: entries[i].triad.root.name)
    _check_partition(index["byQuality"], "byQuality", len(entries), lambda i: entries[i].triad.quality)
    _check_partition(index["byDifficulty"], "byDifficulty", len(voicings), lambda i: voicings[i].difficulty)
    _check_partition(
        index["byNeckPosition"], "byNeckPosition", len(voicings), lambda i: voicings[i].neck_position
    )


def database_from_dict(document: Mapping[str, Any]) -> TriadDatabase:
    """Rebuild a database from its document.

    Raises:
        DatabaseLoadError: If the document is missing keys or is inconsistent
    """
    try:
        entries: List[TriadDatabaseEntry] = []
        keys: Dict[str, int] = {}
        voicing_count = 0
        for root in SHARP_NOTES:
            for quality in TRIAD_QUALITIES:
                raw = document["triads"].get(root, {}).get(quality)
                if raw is None:
                    continue
                entry = _entry_from_dict(raw, root, quality, voicing_count)
                keys[entry_key(root, quality)] = len(entries)
                entries.append(entry)
                voicing_count += len(entry.voicings)

        index = _resolve_index(document["index"], keys, voicing_count)
        _check_consistency(index, entries, [v for e in entries for v in e.voicings])

        raw_stats = document["stats"]
        stats = DatabaseStats(
            total_triads=int(raw_stats["totalTriads"]),
            total_voicings=int(raw_stats["totalVoicings"]),
            total_positions=int(raw_stats["totalPositions"]),
            voicings_by_difficulty=MappingProxyType(
                {level: int(raw_stats["voicingsByDifficulty"].get(level, 0)) for level in DIFFICULTY_LEVELS}
            ),
        )

        instrument = document["instrument"]
        return assemble_database(
            entries,
            version=str(document["version"]),
            generated=str(document["generated"]),
            instrument=str(instrument["name"]),
            tuning=tuple(instrument["tuning"]),
            max_fret=int(instrument["frets"]),
            policy=instrument.get("generationPolicy", {}),
            stats=stats,
            index=index,
        )
    except DatabaseLoadError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise DatabaseLoadError(f"Malformed triad database document: {e!r}") from e


def save_database(database: TriadDatabase, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(database_to_dict(database), f, indent=2, ensure_ascii=False)
    logger.info(f"Saved triad database to {path}")


def load_database(path: str) -> TriadDatabase:
    """Read a dataset document from disk.

    Raises:
        DatabaseLoadError: If the file cannot be read or parsed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, ValueError) as e:
        raise DatabaseLoadError(f"Could not read triad database from {path}: {e}") from e

    database = database_from_dict(document)
    logger.info(
        f"Loaded triad database {database.version} from {path} "
        f"({database.stats.total_triads} triads, {database.stats.total_voicings} voicings)"
    )
    return database
