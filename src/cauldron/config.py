"""Runtime configuration for the cauldron store.

### Resolution Order

1. Explicit arguments (CLI options)
2. Environment variables `CAULDRON_DATABASE` and `CAULDRON_DEBUG`
3. Defaults: `<user data dir>/cauldron.db`, debug off
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from platformdirs import user_data_dir

DATABASE_ENV = "CAULDRON_DATABASE"
DEBUG_ENV = "CAULDRON_DEBUG"
DATABASE_FILE = "cauldron.db"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class CauldronConfig:
    """Resolved store configuration."""

    database_path: Path
    debug: bool = False
    source: str = "default"  # "argument", "environment", "default"


def default_database_path() -> Path:
    """Location of the store when nothing else is configured."""
    return Path(user_data_dir("cauldron", "Cauldron")) / DATABASE_FILE


def parse_flag(value: Optional[str]) -> bool:
    """Interpret an environment variable as a boolean flag."""
    return (value or "").strip().lower() in _TRUTHY


def resolve_config(
    database: Optional[Path] = None,
    debug: Optional[bool] = None,
) -> CauldronConfig:
    """Resolve the database path and debug flag.

    Args:
        database: Explicit database path (wins over the environment)
        debug: Explicit debug flag; None defers to the environment

    Returns:
        CauldronConfig with the resolved settings
    """
    if database is not None:
        path, source = Path(database), "argument"
    elif os.environ.get(DATABASE_ENV):
        path, source = Path(os.environ[DATABASE_ENV]).expanduser(), "environment"
    else:
        path, source = default_database_path(), "default"

    if debug is None:
        debug = parse_flag(os.environ.get(DEBUG_ENV))

    return CauldronConfig(database_path=path, debug=debug, source=source)
