"""
Shared utilities for the Civ League tracker.

This module provides common functions used across multiple modules
to avoid code duplication.
"""

import json
import logging
import shutil
import tempfile
import time
import uuid
from datetime import datetime
from pathlib import Path

from civ_league.config import OUTPUT_FOLDER


# --- Logging Setup ---
def setup_logging(name: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__ from the calling module)
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


# --- Identifiers ---
def new_id() -> str:
    """Return an opaque, unique record identifier."""
    return f"{uuid.uuid4().hex[:12]}{int(time.time() * 1000):x}"


# --- File Operations ---
def cleanup_old_files(pattern: str, keep_file: Path | None = None, folder: Path | None = None) -> list[Path]:
    """
    Remove old files matching pattern, optionally keeping one specific file.

    Args:
        pattern: Glob pattern to match files (e.g., "leaderboard_*.csv")
        keep_file: Path to the file that should NOT be deleted (usually the newest)
        folder: Folder to search in (default: OUTPUT_FOLDER)

    Returns:
        List of deleted file paths
    """
    logger = setup_logging(__name__)
    target_folder = folder or OUTPUT_FOLDER
    deleted = []

    for f in target_folder.glob(pattern):
        if keep_file and f.resolve() == keep_file.resolve():
            continue
        try:
            f.unlink()
            deleted.append(f)
            logger.debug(f"Deleted old file: {f}")
        except OSError as e:
            logger.warning(f"Could not delete {f}: {e}")

    return deleted


def _atomic_write(path: Path, suffix: str, write) -> None:
    # Temp file lives in the destination folder so the move is a rename
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode='w',
            delete=False,
            suffix=suffix,
            dir=path.parent,
            encoding='utf-8',
        ) as tmp:
            tmp_path = Path(tmp.name)
            write(tmp)

        shutil.move(str(tmp_path), str(path))
    except Exception:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise


def atomic_write_csv(df, path: Path, **kwargs) -> None:
    """
    Write a DataFrame to CSV atomically using a temporary file.

    This prevents data corruption if the write is interrupted.

    Args:
        df: pandas DataFrame to write
        path: Destination path for the CSV file
        **kwargs: Additional arguments to pass to df.to_csv()
    """
    logger = setup_logging(__name__)
    _atomic_write(path, '.csv', lambda tmp: df.to_csv(tmp, **kwargs))
    logger.debug(f"Atomically wrote {len(df)} rows to {path}")


def atomic_write_json(data, path: Path) -> None:
    """
    Write a JSON-serializable value atomically using a temporary file.

    Args:
        data: Value to serialize
        path: Destination path for the JSON file
    """
    logger = setup_logging(__name__)
    _atomic_write(path, '.json', lambda tmp: json.dump(data, tmp, ensure_ascii=False, indent=2))
    logger.debug(f"Atomically wrote {path}")


# --- Validation ---
def validate_input_size(text: str, max_size: int) -> None:
    """
    Validate that input text does not exceed maximum size.

    Args:
        text: Input text to validate
        max_size: Maximum allowed size in characters

    Raises:
        ValueError: If input exceeds max_size
    """
    if len(text) > max_size:
        raise ValueError(
            f"Input too large: {len(text):,} characters. "
            f"Maximum allowed: {max_size:,} characters"
        )


def validate_played_at(played_at: str) -> None:
    """
    Validate a YYYY-MM-DD session date.

    Raises:
        ValueError: If the date is missing or not in YYYY-MM-DD format
    """
    try:
        datetime.strptime(played_at, "%Y-%m-%d")
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date: '{played_at}'. Expected format: YYYY-MM-DD")


def normalize_player_name(name: str | None) -> str:
    """Trim surrounding whitespace; names are otherwise matched literally."""
    return (name or "").strip()


__all__ = [
    # Logging
    'setup_logging',
    # Identifiers
    'new_id',
    # File operations
    'cleanup_old_files',
    'atomic_write_csv',
    'atomic_write_json',
    # Validation
    'validate_input_size',
    'validate_played_at',
    'normalize_player_name',
]
