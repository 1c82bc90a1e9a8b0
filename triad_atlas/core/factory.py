"""Factory for creating Triad Atlas components from configuration."""

from typing import Optional, Dict, Type

from ..database.builder import TriadDatabaseBuilder
from ..database.lookup import TriadLookup, open_database
from ..fretboard import DifficultyPolicy, FretboardMapper, VoicingConstraints
from ..logger import get_logger
from .config import ConfigManager

logger = get_logger(__name__)


class ComponentFactory:
    """Factory for creating Triad Atlas components."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

        # Register default component implementations
        self.fretboard_mapper_classes: Dict[str, Type[FretboardMapper]] = {
            "default": FretboardMapper,
        }

        self.database_builder_classes: Dict[str, Type[TriadDatabaseBuilder]] = {
            "default": TriadDatabaseBuilder,
        }

    def create_difficulty_policy(self, **kwargs) -> DifficultyPolicy:
        config = self.config_manager.get_config("difficulty")
        config.update(kwargs)
        return DifficultyPolicy(**config)

    def create_voicing_constraints(self, **kwargs) -> VoicingConstraints:
        """Search limits from the 'fretboard' section, with overrides."""
        config = self.config_manager.get_config("fretboard")
        config.pop("tuning", None)
        config.update(kwargs)
        return VoicingConstraints(**config)

    def create_fretboard_mapper(
        self, implementation: str = "default", **kwargs
    ) -> FretboardMapper:
        """Create a fretboard mapper.

        Args:
            implementation: Name of the implementation to use
            **kwargs: Overrides for 'tuning' and 'max_fret'

        Returns:
            Fretboard mapper instance

        Raises:
            ValueError: If the implementation is not registered or the tuning is invalid
        """
        if implementation not in self.fretboard_mapper_classes:
            raise ValueError(f"Unknown fretboard mapper implementation: {implementation}")

        config = self.config_manager.get_config("fretboard")
        params = {"tuning": config["tuning"], "max_fret": config["max_fret"]}
        params.update(kwargs)

        cls = self.fretboard_mapper_classes[implementation]
        instance = cls(difficulty_policy=self.create_difficulty_policy(), **params)

        logger.info(f"Created fretboard mapper: {implementation}")
        return instance

    def create_database_builder(
        self, implementation: str = "default", **kwargs
    ) -> TriadDatabaseBuilder:
        """Create a database builder using the 'database' generation policy.

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.database_builder_classes:
            raise ValueError(f"Unknown database builder implementation: {implementation}")

        config = self.config_manager.get_config("database")
        constraints = self.create_voicing_constraints(
            max_fret=config["max_fret"], max_strings=config["max_strings"]
        )

        params = {
            "constraints": constraints,
            "common_max_neck_position": config["common_max_neck_position"],
            "version": config["version"],
        }
        params.update(kwargs)
        if "mapper" not in params:
            params["mapper"] = self.create_fretboard_mapper()

        cls = self.database_builder_classes[implementation]
        instance = cls(**params)

        logger.info(f"Created database builder: {implementation}")
        return instance

    def create_lookup(self, path: Optional[str] = None) -> TriadLookup:
        """Open the configured dataset, or build one with the configured policy."""
        path = path or self.config_manager.get_config("database").get("path")
        if path:
            return TriadLookup(open_database(path))
        return TriadLookup(self.create_database_builder().build())
