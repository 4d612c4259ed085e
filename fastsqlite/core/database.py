"""
Database file and connection management for fastsqlite.

This module handles:
- Creating the database file (and its directory) if it doesn't exist
- Building and parsing "key=value;key=value" connection option strings
- Opening a configured SQLite connection from a path and options
"""

import sqlite3
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from fastsqlite.core.config import Config
from fastsqlite.utils.logging_config import get_logger


logger = get_logger(__name__)

MEMORY_DATABASE = ":memory:"

ConnectionOptions = Union[str, Mapping[str, Any]]

# Option keys are matched case-insensitively with spaces and underscores removed
_PRAGMA_OPTIONS = {
    "busytimeout": "busy_timeout",
    "journalmode": "journal_mode",
    "foreignkeys": "foreign_keys",
    "synchronous": "synchronous",
    "cachesize": "cache_size",
    "pagesize": "page_size",
}
_BOOLEAN_PRAGMAS = {"foreign_keys"}
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _normalize_key(key: str) -> str:
    return "".join(key.split()).replace("_", "").lower()


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Option '{key}' expects a boolean, got '{value}'")


def build_connection_string(options: Optional[ConnectionOptions] = None) -> str:
    """
    Merge connection options into one "key=value;key=value" string.

    Args:
        options: Either a ready-made options string or a mapping of option
            names to values.

    Returns:
        The flat options string ("" when there are no options).
    """
    if not options:
        return ""
    if isinstance(options, str):
        return options.strip().strip(";")
    return ";".join(f"{key}={value}" for key, value in options.items())


def parse_connection_string(options: str) -> Dict[str, str]:
    """
    Split an options string into an ordered mapping.

    Empty segments are ignored; a segment without "=" is an error.
    """
    parsed: Dict[str, str] = {}
    for segment in options.split(";"):
        if not segment.strip():
            continue
        key, sep, value = segment.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Malformed connection option: '{segment.strip()}'")
        parsed[key.strip()] = value.strip()
    return parsed


def resolve_db_path(db_path: Optional[str] = None) -> str:
    """
    Path to open: the given one, or Config.DB_PATH when it is None or blank.

    A blank path would make SQLite open an anonymous temporary database.
    """
    if db_path is None or not db_path.strip():
        db_path = Config.DB_PATH
    Config.validate(db_path)
    return db_path


def ensure_database_file(db_path: str) -> bool:
    """
    Create the database file and its directory if they don't exist.

    Returns:
        True when a new file was created.
    """
    if db_path == MEMORY_DATABASE:
        return False

    path = Path(db_path)
    if path.exists():
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch()
    logger.info("database_file_created", path=str(path))
    return True


def open_connection(
    db_path: Optional[str] = None, options: Optional[ConnectionOptions] = None
) -> sqlite3.Connection:
    """
    Open a SQLite connection configured by an options string.

    Args:
        db_path: Path to the SQLite database file. If None or blank, uses
            Config.DB_PATH.
        options: Extra connection options (string or mapping). Config's
            CONNECTION_OPTIONS are applied first, explicit options override them.

    Returns:
        Connection in autocommit mode with sqlite3.Row rows.

    Raises:
        ValueError: On unknown or malformed options.
        sqlite3.Error: When SQLite cannot open or configure the database.
    """
    db_path = resolve_db_path(db_path)

    merged = parse_connection_string(Config.CONNECTION_OPTIONS)
    merged.update(parse_connection_string(build_connection_string(options)))

    timeout = Config.CONNECT_TIMEOUT
    read_only = False
    pragmas = []
    for key, value in merged.items():
        normalized = _normalize_key(key)
        if normalized in ("timeout", "defaulttimeout"):
            timeout = float(value)
        elif normalized == "readonly":
            read_only = _parse_bool(key, value)
        elif normalized == "version":
            if value != "3":
                raise ValueError(f"Unsupported SQLite version: {value}")
        elif normalized in _PRAGMA_OPTIONS:
            pragma = _PRAGMA_OPTIONS[normalized]
            if pragma in _BOOLEAN_PRAGMAS:
                value = "ON" if _parse_bool(key, value) else "OFF"
            pragmas.append((pragma, value))
        elif normalized == "datasource":
            raise ValueError("Data Source is given by the database path, not by options")
        else:
            raise ValueError(f"Unsupported connection option: '{key}'")

    if read_only and db_path != MEMORY_DATABASE:
        target = f"{Path(db_path).resolve().as_uri()}?mode=ro"
        conn = sqlite3.connect(
            target, uri=True, timeout=timeout, check_same_thread=False, isolation_level=None
        )
    else:
        if not read_only:
            ensure_database_file(db_path)
        conn = sqlite3.connect(
            db_path, timeout=timeout, check_same_thread=False, isolation_level=None
        )

    try:
        conn.row_factory = sqlite3.Row
        for pragma, value in pragmas:
            conn.execute(f"PRAGMA {pragma} = {value}")
    except sqlite3.Error:
        conn.close()
        raise

    logger.debug("connection_opened", path=db_path, options=list(merged))
    return conn
