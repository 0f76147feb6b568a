"""Atomic, change-aware writes for generated source files.

Generated files are written to a temporary sibling first and renamed into
place, so an interrupted run never leaves a half-written module behind.
Unchanged output is not rewritten, which keeps file timestamps stable for
diff-based regeneration workflows.
"""

from __future__ import annotations

import hashlib
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Optional

from fsmgen.utils.logging import get_logger

logger = get_logger("utils.files")


class AtomicWriteError(Exception):
    """Raised when an atomic write operation fails."""

    pass


def get_content_hash(content: str) -> str:
    """
    Generate a SHA256 hash of content.

    Args:
        content: Content to hash

    Returns:
        Full SHA256 hex digest
    """
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def read_content_hash(path: Path) -> Optional[str]:
    """Hash of an existing file, or None if it does not exist."""
    path = Path(path)
    if not path.is_file():
        return None
    # Raw bytes, so a file that is not UTF-8 simply hashes as changed
    return hashlib.sha256(path.read_bytes()).hexdigest()


@contextmanager
def atomic_write(
    path: Path,
    encoding: str = "utf-8",
) -> Generator[Any, None, None]:
    """
    Context manager for atomic text file writes.

    Args:
        path: Target file path
        encoding: Text encoding

    Yields:
        File handle for writing

    Raises:
        AtomicWriteError: If the atomic write fails
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file must live in the target directory for the rename to be atomic
    fd, temp_name = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    temp_path = Path(temp_name)
    success = False

    try:
        os.close(fd)

        # newline="" so emitted "\n" line endings survive on every platform
        with open(temp_path, "w", encoding=encoding, newline="") as f:
            yield f

        temp_path.replace(path)
        success = True

        logger.debug("atomic_write_success", path=str(path))

    except Exception as e:
        logger.error("atomic_write_failed", path=str(path), error=str(e))
        raise AtomicWriteError(f"Failed to atomically write {path}: {e}") from e

    finally:
        if not success and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass


def write_if_changed(path: Path, content: str, force: bool = False) -> bool:
    """
    Atomically write content unless the file already holds identical text.

    Args:
        path: Target file path
        content: Text to write
        force: Write even when the content hash matches

    Returns:
        True if the file was written, False if it was left untouched
    """
    path = Path(path)

    if not force and read_content_hash(path) == get_content_hash(content):
        logger.debug("write_skipped_unchanged", path=str(path))
        return False

    with atomic_write(path) as f:
        f.write(content)

    return True
