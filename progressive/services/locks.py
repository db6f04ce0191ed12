"""Per-program write serialisation."""
from __future__ import annotations

import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager

_registry_lock = threading.Lock()
_program_locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()


def _lock_for(program_id: str) -> threading.Lock:
    with _registry_lock:
        lock = _program_locks.get(program_id)
        if lock is None:
            lock = threading.Lock()
            _program_locks[program_id] = lock
        return lock


@contextmanager
def program_lock(program_id: str) -> Iterator[None]:
    """Hold the write lock of one program; other programs are unaffected."""
    lock = _lock_for(program_id)
    with lock:
        yield
