"""A JSON document stored in one file, shared by the JSON repositories."""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator


class JsonFile:
    """Read/replace a JSON document kept in a single file.

    Writes go to a temporary file that is then renamed over the target, so
    readers polling the file never see a half-written document.

    ``locked()`` guards read-modify-write sequences.  It takes a thread lock
    for this process and an exclusive ``flock`` on a sidecar ``.lock`` file
    for every other process sharing the data directory.  It is re-entrant
    within one thread.
    """

    def __init__(self, file_path: Path, empty: Any = None) -> None:
        self.path = file_path
        self._empty = [] if empty is None else empty
        self._lock_path = file_path.with_name(f".{file_path.name}.lock")
        self._thread_lock = threading.RLock()
        self._depth = 0
        self._lock_file = None
        self._ensure_file()

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._thread_lock:
            if self._depth == 0:
                lock_file = open(self._lock_path, "w")
                try:
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
                except BaseException:
                    lock_file.close()
                    raise
                self._lock_file = lock_file
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
                if self._depth == 0:
                    lock_file, self._lock_file = self._lock_file, None
                    try:
                        fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
                    finally:
                        lock_file.close()

    def read(self) -> Any:
        return json.loads(self.path.read_text(encoding="utf-8"))

    def write(self, document: Any) -> None:
        fd, tmp = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(document, indent=2, ensure_ascii=False) + "\n")
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.locked():
            if not self.path.exists():
                self.write(self._empty)
