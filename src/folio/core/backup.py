"""
Backup and safe file writing utilities.

Provides atomic text/JSON writes and timestamped backups of files or
whole directories.
"""

from __future__ import annotations

import contextlib
import json
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def create_backup(
    source: Path,
    backup_dir: Path,
    label: str | None = None,
    timestamp_format: str = TIMESTAMP_FORMAT,
) -> Path:
    """Create a timestamped backup of a file or directory.

    Args:
        source: File or directory to back up
        backup_dir: Directory that receives the backup
        label: Name prefix for the backup (defaults to the source name)
        timestamp_format: strftime format for the timestamp suffix

    Returns:
        Path to the created backup

    Raises:
        FileNotFoundError: If source doesn't exist
    """
    source = Path(source)
    if not source.exists():
        raise FileNotFoundError(f"Cannot backup non-existent path: {source}")

    backup_dir = Path(backup_dir)
    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime(timestamp_format)
    name = label or source.stem
    backup_path = backup_dir / f"{name}_{timestamp}{'' if source.is_dir() else source.suffix}"

    # Two backups within the same second must not collide
    counter = 1
    while backup_path.exists():
        backup_path = backup_path.with_name(f"{backup_path.stem}_{counter}{backup_path.suffix}")
        counter += 1

    if source.is_dir():
        # Never copy the backup directory into itself
        ignore = None
        if backup_dir.resolve().is_relative_to(source.resolve()):
            skip = backup_dir.resolve()
            ignore = lambda d, names: [n for n in names if (Path(d) / n).resolve() == skip]  # noqa: E731
        shutil.copytree(source, backup_path, ignore=ignore)
    else:
        shutil.copy2(source, backup_path)

    return backup_path


def write_text_atomic(file_path: Path, content: str) -> None:
    """Write text through a temp file in the same directory, then replace.

    A crash mid-write cannot leave a truncated target behind.

    Raises:
        OSError: If file operations fail
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path = tempfile.mkstemp(
        prefix=f".{file_path.name}.",
        suffix=".tmp",
        dir=file_path.parent,
        text=True,
    )
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        Path(temp_path).replace(file_path)
    except Exception as e:
        with contextlib.suppress(OSError):
            Path(temp_path).unlink()
        raise OSError(f"Failed to write {file_path}: {e}") from e


def safe_write_json(
    file_path: Path,
    data: Any,
    indent: int = 2,
    ensure_ascii: bool = False,
) -> None:
    """Serialize data and write it atomically as JSON.

    Args:
        file_path: Path to JSON file to write
        data: Data to write (dict or list)
        indent: JSON indentation
        ensure_ascii: Whether to escape non-ASCII characters

    Raises:
        ValueError: If data cannot be serialized to JSON
        OSError: If file operations fail
    """
    try:
        json_str = json.dumps(data, indent=indent, ensure_ascii=ensure_ascii)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Cannot serialize data to JSON: {e}") from e

    write_text_atomic(file_path, json_str + "\n")


def remove_path(path: Path) -> bool:
    """Remove a file or directory tree.

    Returns:
        True if something was removed, False if the path did not exist
    """
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False
