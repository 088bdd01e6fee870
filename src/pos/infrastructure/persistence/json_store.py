"""Single JSON document holding every ledger, plus the lock guarding it.

Products, customers and bills share one file so that a checkout's stock,
loyalty and bill changes reach disk in a single ``os.replace``: readers
see either the whole checkout or none of it.

Writers are serialized by a per-path thread lock and, on POSIX, an
``flock`` on a sidecar ``.lock`` file so separate processes (several
tills on one machine) queue up as well.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path

from pos.domain.exceptions import PersistenceError

try:
    import fcntl
except ImportError:  # Windows: in-process locking only
    fcntl = None  # type: ignore[assignment]

SECTIONS = ("products", "customers", "bills")

_thread_locks: dict[Path, threading.Lock] = {}
_registry_lock = threading.Lock()


def _thread_lock_for(path: Path) -> threading.Lock:
    with _registry_lock:
        return _thread_locks.setdefault(path, threading.Lock())


class JsonStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path.resolve()
        self._lock_path = self._file_path.with_name(self._file_path.name + ".lock")
        self._thread_lock = _thread_lock_for(self._file_path)
        self._lock_file = None
        self._ensure_file()

    @property
    def file_path(self) -> Path:
        return self._file_path

    # --- Locking --------------------------------------------------------------

    def acquire(self) -> None:
        self._thread_lock.acquire()
        if fcntl is None:
            return
        try:
            self._lock_file = open(self._lock_path, "a+", encoding="utf-8")
            fcntl.flock(self._lock_file.fileno(), fcntl.LOCK_EX)
        except OSError as exc:
            self._close_lock_file()
            self._thread_lock.release()
            raise PersistenceError(f"Cannot lock {self._lock_path}: {exc}") from exc

    def release(self) -> None:
        try:
            if self._lock_file is not None:
                fcntl.flock(self._lock_file.fileno(), fcntl.LOCK_UN)
        finally:
            self._close_lock_file()
            self._thread_lock.release()

    def _close_lock_file(self) -> None:
        if self._lock_file is not None:
            self._lock_file.close()
            self._lock_file = None

    # --- Document I/O ---------------------------------------------------------

    def load(self) -> dict:
        try:
            doc = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Cannot read {self._file_path}: {exc}") from exc
        if not isinstance(doc, dict):
            raise PersistenceError(f"{self._file_path} is not a POS store document")
        for section in SECTIONS:
            doc.setdefault(section, [])
        return doc

    def save(self, doc: dict) -> None:
        """Write the document atomically (temp file + rename)."""
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=self._file_path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(doc, indent=2, ensure_ascii=False) + "\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._file_path)
        except OSError as exc:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise PersistenceError(f"Cannot write {self._file_path}: {exc}") from exc

    def _ensure_file(self) -> None:
        """Create an empty store document unless one already exists.

        The existence check and the write both happen under the store lock,
        so a till starting on a fresh data directory cannot overwrite a
        bill another till has just committed.
        """
        if self._file_path.exists():
            return
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Cannot create {self._file_path.parent}: {exc}") from exc
        self.acquire()
        try:
            if not self._file_path.exists():
                self.save({s: [] for s in SECTIONS})
        finally:
            self.release()
