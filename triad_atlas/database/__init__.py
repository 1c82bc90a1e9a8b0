"""Precomputed triad dataset: model, builder and read-only queries."""

from .builder import TriadDatabaseBuilder
from .lookup import TriadLookup, get_default_lookup, open_database
from .models import (
    DatabaseLoadError,
    DatabaseStats,
    TriadDatabase,
    TriadDatabaseEntry,
    load_database,
    save_database,
)

__all__ = [
    "DatabaseLoadError",
    "DatabaseStats",
    "TriadDatabase",
    "TriadDatabaseBuilder",
    "TriadDatabaseEntry",
    "TriadLookup",
    "get_default_lookup",
    "load_database",
    "open_database",
    "save_database",
]
