"""JSON document file shared by the JSON-backed repositories.

A read-modify-write done inside ``transaction()`` holds an exclusive
``flock`` on a sidecar ``.<name>.lock`` file, so it never interleaves with
another one on that file, whether from this process or another CLI
process.  Within a process a re-entrant thread lock serialises access to
the sidecar file and lets a transaction nest.
"""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO


class _FileLock:
    """Thread lock plus an exclusive flock, taken once per outermost hold."""

    def __init__(self, lock_path: Path) -> None:
        self._lock_path = lock_path
        self._thread_lock = threading.RLock()
        self._depth = 0
        self._handle: IO[str] | None = None

    @contextmanager
    def hold(self) -> Iterator[None]:
        with self._thread_lock:
            if self._depth == 0:
                self._lock_path.parent.mkdir(parents=True, exist_ok=True)
                self._handle = open(self._lock_path, "w")
                fcntl.flock(self._handle.fileno(), fcntl.LOCK_EX)
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
                if self._depth == 0:
                    fcntl.flock(self._handle.fileno(), fcntl.LOCK_UN)
                    self._handle.close()
                    self._handle = None


_locks: dict[Path, _FileLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> _FileLock:
    with _locks_guard:
        if path not in _locks:
            _locks[path] = _FileLock(path.with_name(f".{path.name}.lock"))
        return _locks[path]


class JsonDocumentStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path).resolve()
        self._lock = _lock_for(self._file_path)
        self._ensure_file()

    def load(self) -> list[dict]:
        # os.replace swaps whole files, so an unlocked read sees old or new.
        return self._load_raw()

    @contextmanager
    def transaction(self) -> Iterator[list[dict]]:
        """Yield the records under the file lock and write them back.

        Nothing is written if the block raises.
        """
        with self._lock.hold():
            records = self._load_raw()
            yield records
            self._persist_raw(records)

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        fd, temp_path = tempfile.mkstemp(
            dir=self._file_path.parent,
            prefix=f".{self._file_path.stem}_",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
                f.write("\n")
            os.replace(temp_path, self._file_path)
        except BaseException:
            Path(temp_path).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        if self._file_path.exists():
            return
        with self._lock.hold():
            if not self._file_path.exists():
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                self._persist_raw([])
