"""
Filesystem helpers: atomic whole-file writes and per-path locks.

Rules:
- No partial files: temp file in the same directory -> fsync -> os.replace
- Failed writes clean up their temp file and leave the original untouched
- fsync failures are logged and ignored (durability is best-effort)
- Per-path locks live outside the project tree, keyed by a path hash
- Lock files are never deleted: one per distinct path, reused by every run.
  Unlinking on release would let a waiter lock an orphaned inode
"""

import hashlib
import json
import logging
import os
import tempfile
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from src.domain.errors import ErrorCodes, HarnessError

logger = logging.getLogger(__name__)

# Seconds to wait for a per-path lock before giving up
DEFAULT_LOCK_TIMEOUT = 10.0

# Lock files go here unless the caller supplies a directory
DEFAULT_LOCK_DIR = Path(tempfile.gettempdir()) / "golden-harness-locks"


# =============================================================================
# Atomic Writes
# =============================================================================


def _fsync_dir(dir_path: Path) -> None:
    """
    fsync a directory so the rename entry itself is durable.

    Only meaningful on POSIX; O_DIRECTORY is missing on Windows.
    """
    try:
        dir_fd = os.open(str(dir_path), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        logger.debug(f"Directory fsync skipped for {dir_path}: {e}")


def atomic_write_text(path: Path, text: str) -> None:
    """
    Replace the contents of `path` with `text` in one step.

    Newlines are written verbatim (no platform translation) so expectation
    files keep "\\n" endings everywhere.

    Args:
        path: Destination file
        text: Full new contents

    Raises:
        OSError: If the directory cannot be created or the rename fails
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="",
        ) as f:
            temp_path = Path(f.name)
            f.write(text)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(
                    f"File fsync failed for {path}: {e}. "
                    f"Data may not be durable on power loss."
                )

        os.replace(temp_path, path)
        _fsync_dir(dir_path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise


def atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    """Atomic JSON write (UTF-8, indented, trailing newline)."""
    atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")


# =============================================================================
# Locking
# =============================================================================


def lock_file_for(path: Path, lock_dir: Path | None = None) -> Path:
    """
    Lock file guarding `path`.

    Keyed by a hash of the resolved path so two spellings of the same file
    share one lock.
    """
    key = hashlib.sha256(str(path.resolve()).encode()).hexdigest()[:16]
    return (lock_dir or DEFAULT_LOCK_DIR) / f"{key}.lock"


@contextmanager
def path_lock(
    path: Path,
    lock_dir: Path | None = None,
    timeout: float = DEFAULT_LOCK_TIMEOUT,
) -> Generator[None, None, None]:
    """
    Hold an exclusive lock for writes to `path`.

    The sequential harness never contends on it; a parallel runner would.

    Raises:
        HarnessError: EXPECTATION_LOCK_TIMEOUT
    """
    lock_path = lock_file_for(path, lock_dir)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(lock_path, timeout=timeout)

    try:
        lock.acquire()
    except Timeout as e:
        raise HarnessError(
            ErrorCodes.EXPECTATION_LOCK_TIMEOUT,
            path=str(path),
            timeout=timeout,
        ) from e

    try:
        yield
    finally:
        lock.release()
