"""
Atomic file writing.

Every output file is written to a temporary file in the target directory and
moved into place with ``os.replace``, so a reader never sees a half-written
description, resume or run summary.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, IO

import structlog

logger = structlog.get_logger(__name__)


def _atomic_write(target_path: Path, write: Callable[[IO[Any]], None], *, binary: bool, encoding: str) -> None:
    target_path = Path(target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)
    temp_file_path = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="wb" if binary else "w",
            dir=target_path.parent,
            prefix=f".{target_path.name}.",
            suffix=".tmp",
            delete=False,
            encoding=None if binary else encoding,
        ) as temp_file:
            temp_file_path = Path(temp_file.name)
            write(temp_file)
            temp_file.flush()
            os.fsync(temp_file.fileno())

        os.replace(str(temp_file_path), str(target_path))
        logger.debug("Atomic write completed", target=str(target_path))

    except OSError as e:
        if temp_file_path and temp_file_path.exists():
            try:
                temp_file_path.unlink()
            except OSError as cleanup_error:
                logger.warning(
                    "Failed to clean up temporary file", temp_file=str(temp_file_path), error=str(cleanup_error)
                )
        raise OSError(f"Failed to atomically write {target_path}: {e}") from e


def atomic_write_text(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Atomically write text content to a file.

    Raises:
        OSError: If the file cannot be written or moved into place
    """
    _atomic_write(target_path, lambda f: f.write(content), binary=False, encoding=encoding)


def atomic_write_bytes(target_path: Path, content: bytes) -> None:
    _atomic_write(target_path, lambda f: f.write(content), binary=True, encoding="utf-8")


def atomic_write_json(target_path: Path, data: Any) -> None:
    """
    Atomically write JSON data to a file.

    Raises:
        ValueError: If data cannot be serialized to JSON
        OSError: If the file cannot be written
    """
    try:
        json_content = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError) as e:
        logger.error("Failed to serialize data to JSON", error=str(e))
        raise ValueError(f"Cannot serialize data to JSON: {e}") from e
    atomic_write_text(target_path, json_content + "\n")
