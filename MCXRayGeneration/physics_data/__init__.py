"""Bundled Bremsstrahlung table databases.

Tables written by scripts/generate_bremsstrahlung_tables.py land in
``physics_data/bremsstrahlung`` and are shipped with the package.
"""

from pathlib import Path
from typing import List, Optional


def get_physics_data_dir() -> Path:
    """Get the physics data directory path."""
    return Path(__file__).parent


def get_bremsstrahlung_data_dir() -> Path:
    return get_physics_data_dir() / 'bremsstrahlung'


def list_bremsstrahlung_databases() -> List[str]:
    """List the bundled Bremsstrahlung databases.

    Returns:
        Sorted HDF5 filenames (empty if none were generated)
    """
    brems_dir = get_bremsstrahlung_data_dir()
    if not brems_dir.exists():
        return []
    return sorted(f.name for f in brems_dir.glob('*.h5'))


def get_bremsstrahlung_database_path(database_name: str = 'kramers.h5') -> Path:
    """Get path to a bundled Bremsstrahlung database.

    Args:
        database_name: Name of the database file (default: 'kramers.h5')

    Returns:
        Path to the database file

    Raises:
        FileNotFoundError: If the database file doesn't exist
    """
    db_path = get_bremsstrahlung_data_dir() / database_name
    if not db_path.exists():
        raise FileNotFoundError(
            f"Bremsstrahlung database not found: {db_path}\n"
            f"Available databases: {list_bremsstrahlung_databases()}"
        )
    return db_path


def find_default_bremsstrahlung_database() -> Optional[str]:
    """Path of the bundled default database, or None if it was never generated."""
    try:
        return str(get_bremsstrahlung_database_path())
    except FileNotFoundError:
        return None


__all__ = [
    'get_physics_data_dir',
    'get_bremsstrahlung_data_dir',
    'list_bremsstrahlung_databases',
    'get_bremsstrahlung_database_path',
    'find_default_bremsstrahlung_database',
]
