"""Unit tests for the cache lock."""

import os
import tempfile
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from precache.cache.lock import CacheLock
from precache.errors import LockTimeoutError


class TestCacheLock:
    """Test cases for CacheLock."""

    def test_acquire_writes_pid(self):
        """Test acquiring writes the current PID."""
        with tempfile.TemporaryDirectory() as temp_dir:
            lock_path = Path(temp_dir) / "lockfile"
            lock = CacheLock(lock_path)
            lock.acquire()
            try:
                assert lock.is_held
                assert lock_path.read_text() == str(os.getpid())
            finally:
                lock.release()
            assert not lock_path.exists()
            assert not lock.is_held

    def test_context_manager(self):
        """Test the lock works as a context manager."""
        with tempfile.TemporaryDirectory() as temp_dir:
            lock_path = Path(temp_dir) / "nested" / "lockfile"
            with CacheLock(lock_path):
                assert lock_path.exists()
            assert not lock_path.exists()

    def test_acquire_is_reentrant(self):
        """Test acquiring twice in the same object is a no-op."""
        with tempfile.TemporaryDirectory() as temp_dir:
            lock = CacheLock(Path(temp_dir) / "lockfile")
            lock.acquire()
            lock.acquire()
            lock.release()

    def test_stale_lock_removed(self):
        """Test a lock file from a dead process is taken over."""
        with tempfile.TemporaryDirectory() as temp_dir:
            lock_path = Path(temp_dir) / "lockfile"
            lock_path.write_text("999999")
            with patch("psutil.pid_exists", return_value=False):
                lock = CacheLock(lock_path, timeout=1)
                lock.acquire()
            assert lock_path.read_text() == str(os.getpid())
            lock.release()

    def test_corrupt_lock_removed(self):
        """Test an old unreadable lock file is treated as stale."""
        with tempfile.TemporaryDirectory() as temp_dir:
            lock_path = Path(temp_dir) / "lockfile"
            lock_path.write_text("not-a-pid")
            old = time.time() - 3600
            os.utime(lock_path, (old, old))
            lock = CacheLock(lock_path, timeout=1)
            lock.acquire()
            assert lock_path.read_text() == str(os.getpid())
            lock.release()

    def test_live_lock_times_out(self, capsys):
        """Test waiting on a live holder times out."""
        with tempfile.TemporaryDirectory() as temp_dir:
            lock_path = Path(temp_dir) / "lockfile"
            lock_path.write_text("12345")
            with patch("psutil.pid_exists", return_value=True):
                lock = CacheLock(lock_path, timeout=0.05, poll_interval=0.01)
                with pytest.raises(LockTimeoutError):
                    lock.acquire()
            assert "Waiting for another precache command" in capsys.readouterr().out
            assert lock_path.read_text() == "12345"

    def test_release_does_not_remove_foreign_lock(self):
        """Test release leaves a lock file owned by another process."""
        with tempfile.TemporaryDirectory() as temp_dir:
            lock_path = Path(temp_dir) / "lockfile"
            lock = CacheLock(lock_path)
            lock.acquire()
            lock_path.write_text("12345")
            lock.release()
            assert lock_path.exists()

    def test_empty_lock_is_held(self):
        """Test a freshly created lock without a PID yet is not taken over."""
        with tempfile.TemporaryDirectory() as temp_dir:
            lock_path = Path(temp_dir) / "lockfile"
            lock_path.touch()
            lock = CacheLock(lock_path, timeout=0.05, poll_interval=0.01)
            with pytest.raises(LockTimeoutError):
                lock.acquire()
            assert lock_path.exists()
            assert lock_path.read_text() == ""

    def test_takeover_keeps_lock_created_after_check(self):
        """Test a lock replaced between the owner check and removal survives."""
        with tempfile.TemporaryDirectory() as temp_dir:
            lock_path = Path(temp_dir) / "lockfile"
            lock_path.write_text("999999")
            lock = CacheLock(lock_path)

            def replace_with_live_lock():
                new_lock = Path(temp_dir) / "new"
                new_lock.write_text("4242")
                os.replace(new_lock, lock_path)
                return 999999

            with patch.object(lock, "_read_owner", side_effect=replace_with_live_lock):
                with patch("psutil.pid_exists", return_value=False):
                    lock._remove_if_stale()

            assert lock_path.read_text() == "4242"
            assert [p.name for p in Path(temp_dir).iterdir()] == ["lockfile"]

    def test_no_temporary_files_left(self):
        """Test acquisition does not leave temporary files behind."""
        with tempfile.TemporaryDirectory() as temp_dir:
            lock_path = Path(temp_dir) / "lockfile"
            with CacheLock(lock_path):
                assert [p.name for p in Path(temp_dir).iterdir()] == ["lockfile"]
            assert list(Path(temp_dir).iterdir()) == []
