"""Cross-process lock for the artifact cache.

The lock is a PID file. A process holds the lock while the file exists and
names a live process; a file left behind by a dead process is stale and is
removed on the next acquisition attempt.

The PID is written to a private temporary file which is then hard-linked to
the lock path, so the lock file never appears without its owner. A file whose
owner cannot be read is only treated as stale once it is older than
stale_after seconds.
"""

import logging
import os
import time
import uuid
from pathlib import Path
from typing import Optional

import psutil

from precache.errors import LockTimeoutError

logger = logging.getLogger(__name__)


class CacheLock:
    """Exclusive lock on the cache directory."""

    def __init__(
        self,
        lock_path: Path,
        timeout: Optional[float] = None,
        poll_interval: float = 0.5,
        stale_after: float = 10.0,
    ):
        """Initialize the lock.

        Args:
            lock_path: Path of the PID file
            timeout: Seconds to wait before giving up (None waits forever)
            poll_interval: Seconds between acquisition attempts
            stale_after: Age in seconds after which an unreadable lock file
                is considered abandoned
        """
        self.lock_path = Path(lock_path)
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.stale_after = stale_after
        self._held = False

    @property
    def is_held(self) -> bool:
        return self._held

    def _unique_sibling(self, suffix: str) -> Path:
        return self.lock_path.with_name(
            f"{self.lock_path.name}.{os.getpid()}.{uuid.uuid4().hex}.{suffix}"
        )

    def _try_create(self) -> bool:
        temp_path = self._unique_sibling("tmp")
        temp_path.write_text(str(os.getpid()))
        try:
            os.link(temp_path, self.lock_path)
        except FileExistsError:
            return False
        finally:
            temp_path.unlink(missing_ok=True)
        return True

    def _read_owner(self) -> Optional[int]:
        try:
            return int(self.lock_path.read_text().strip())
        except (FileNotFoundError, ValueError):
            return None

    def _remove_if_stale(self) -> None:
        try:
            checked = os.stat(self.lock_path)
        except FileNotFoundError:
            return

        owner = self._read_owner()
        if owner is None:
            if time.time() - checked.st_mtime < self.stale_after:
                return
        elif psutil.pid_exists(owner):
            return

        # Move the file aside before deleting so a lock created after the
        # check is never unlinked.
        stale_path = self._unique_sibling("stale")
        try:
            os.rename(self.lock_path, stale_path)
        except FileNotFoundError:
            return

        if os.stat(stale_path).st_ino != checked.st_ino:
            try:
                os.link(stale_path, self.lock_path)
            except FileExistsError:
                logger.warning(f"Cache lock {self.lock_path} changed hands during takeover")
            stale_path.unlink(missing_ok=True)
            return

        logger.info(f"Removing stale cache lock {self.lock_path} (pid={owner})")
        stale_path.unlink(missing_ok=True)

    def acquire(self) -> None:
        """Acquire the lock, waiting while another process holds it.

        Raises:
            LockTimeoutError: If the lock is not acquired within the timeout
        """
        if self._held:
            return

        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        start_time = time.time()
        announced = False

        while not self._try_create():
            self._remove_if_stale()
            if self._try_create():
                break

            if not announced:
                print("Waiting for another precache command to release the cache lock...")
                announced = True

            if self.timeout is not None and time.time() - start_time > self.timeout:
                raise LockTimeoutError(
                    f"Timed out after {self.timeout}s waiting for cache lock {self.lock_path}"
                )
            time.sleep(self.poll_interval)

        self._held = True
        logger.debug(f"Acquired cache lock {self.lock_path}")

    def release(self) -> None:
        """Release the lock if this process holds it."""
        if not self._held:
            return
        if self._read_owner() == os.getpid():
            self.lock_path.unlink(missing_ok=True)
        self._held = False
        logger.debug(f"Released cache lock {self.lock_path}")

    def __enter__(self) -> "CacheLock":
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
