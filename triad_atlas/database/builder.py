"""Precompiles every triad and its voicings into a TriadDatabase."""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import List, Optional

from ..fretboard import FretboardMapper, VoicingConstraints
from ..logger import get_logger
from ..note_types import ChordVoicing
from ..note_utils import make_note
from ..triads import generate_triad, get_all_triad_qualities
from ..validation import DIFFICULTY_LEVELS, SHARP_NOTES
from .models import TriadDatabase, TriadDatabaseEntry, assemble_database

logger = get_logger(__name__)

# Generation policy for the shipped dataset
DEFAULT_VERSION = "1.0.0"
DEFAULT_CONSTRAINTS = VoicingConstraints(max_fret=12, max_strings=4)
DEFAULT_COMMON_MAX_NECK_POSITION = 5


class TriadDatabaseBuilder:
    """Runs the theory engine over all 48 triads and lays out the dataset."""

    def __init__(
        self,
        mapper: Optional[FretboardMapper] = None,
        constraints: Optional[VoicingConstraints] = None,
        common_max_neck_position: int = DEFAULT_COMMON_MAX_NECK_POSITION,
        version: str = DEFAULT_VERSION,
        instrument: str = "guitar",
    ) -> None:
        """Initialize the builder.

        Args:
            mapper: Fretboard mapper (tuning and difficulty policy), or None for standard tuning
            constraints: Voicing search limits used for every triad
            common_max_neck_position: Highest neck position for an intermediate
                voicing to count as common
            version: Dataset version recorded in the document
            instrument: Instrument name recorded in the document
        """
        self.mapper = mapper or FretboardMapper()
        self.constraints = constraints or DEFAULT_CONSTRAINTS
        self.common_max_neck_position = common_max_neck_position
        self.version = version
        self.instrument = instrument

    def is_common(self, voicing: ChordVoicing) -> bool:
        return voicing.difficulty == DIFFICULTY_LEVELS[0] or (
            voicing.difficulty == DIFFICULTY_LEVELS[1]
            and voicing.neck_position <= self.common_max_neck_position
        )

    def build_entry(self, root: str, quality: str) -> TriadDatabaseEntry:
        triad = generate_triad(make_note(SHARP_NOTES.index(root)), quality)
        voicings = tuple(self.mapper.map_triad_to_fretboard(triad, self.constraints))
        positions = self.mapper.get_triad_positions(triad, self.constraints.max_fret)
        return TriadDatabaseEntry(
            triad=triad,
            voicings=voicings,
            common_voicings=tuple(v for v in voicings if self.is_common(v)),
            positions=tuple(positions),
        )

    def policy(self) -> dict:
        return {
            "constraints": asdict(self.constraints),
            "difficulty": asdict(self.mapper.difficulty_policy),
            "commonMaxNeckPosition": self.common_max_neck_position,
        }

    def build(self) -> TriadDatabase:
        logger.info("Building triad database...")

        entries: List[TriadDatabaseEntry] = []
        for root in SHARP_NOTES:
            for quality in get_all_triad_qualities():
                entry = self.build_entry(root, quality)
                logger.debug(f"  {entry.triad.symbol}: {len(entry.voicings)} voicings")
                entries.append(entry)

        database = assemble_database(
            entries,
            version=self.version,
            generated=datetime.now(timezone.utc).isoformat(),
            instrument=self.instrument,
            tuning=[str(n) for n in self.mapper.tuning],
            max_fret=self.constraints.max_fret,
            policy=self.policy(),
        )
        logger.info(
            f"Generated database with {database.stats.total_triads} triads, "
            f"{database.stats.total_voicings} voicings"
        )
        return database
