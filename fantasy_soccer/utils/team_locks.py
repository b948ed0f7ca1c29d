# fantasy_soccer/utils/team_locks.py
import os
import threading
import weakref
from contextlib import contextmanager

# In-memory registry (per-process). One lock per fantasy team; an entry drops out
# once no caller holds or waits on that team's lock.
_team_locks: "weakref.WeakValueDictionary[int, threading.Lock]" = weakref.WeakValueDictionary()
_registry_guard = threading.Lock()

DEFAULT_TIMEOUT_SECONDS = float(os.getenv("ROSTER_LOCK_TIMEOUT_SECONDS", "5"))


class LockTimeout(Exception):
    """Raised when a team's roster lock can't be acquired in time."""

    pass


def _lock_for(team_id: int) -> threading.Lock:
    with _registry_guard:
        lock = _team_locks.get(team_id)
        if lock is None:
            lock = threading.Lock()
            _team_locks[team_id] = lock
        return lock


@contextmanager
def team_lock(team_id: int, timeout: float | None = None):
    """
    Exclusive writer lock for one team's roster.
    Mutations on different teams never wait on each other.
    """
    timeout = DEFAULT_TIMEOUT_SECONDS if timeout is None else timeout
    lock = _lock_for(team_id)
    if not lock.acquire(timeout=timeout):
        raise LockTimeout(f"Roster for team {team_id} is busy (waited {timeout:.1f}s)")
    try:
        yield
    finally:
        lock.release()
