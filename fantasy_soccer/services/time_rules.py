# fantasy_soccer/services/time_rules.py
import os
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field


def _get_deadline_zone() -> ZoneInfo:
    """
    Zone used to interpret a TRANSFER_DEADLINE given without an offset.
    Gives a helpful error if tzdata isn't installed.
    """
    key = os.getenv("DEADLINE_TZ", "UTC")
    try:
        return ZoneInfo(key)
    except ZoneInfoNotFoundError:
        raise RuntimeError(
            f"No IANA timezone data found for '{key}'. "
            "Install tzdata inside your venv: pip install tzdata"
        )


DEADLINE_TZ = _get_deadline_zone()


def parse_deadline(value: str) -> datetime:
    """
    Parse an ISO-8601 date or timestamp. Naive values are read in DEADLINE_TZ.
    """
    try:
        dt = datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid deadline '{value}'. Expected ISO-8601, e.g. '2025-06-30T00:00:00'.") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=DEADLINE_TZ)
    return dt


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "y", "on")


# Midnight at the start of 2025-06-30 (UTC) unless overridden.
TRANSFER_DEADLINE: datetime = parse_deadline(os.getenv("TRANSFER_DEADLINE", "2025-06-30T00:00:00"))

# Captain/vice-captain changes are allowed after the deadline unless this is set.
ROLE_CHANGES_LOCKED_AFTER_DEADLINE: bool = _env_flag("ROLE_CHANGES_LOCKED_AFTER_DEADLINE")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_transfer_window_open(dt: datetime | None = None, deadline: datetime | None = None) -> bool:
    """
    Changes are allowed up to and including the deadline instant.
    """
    dt = dt or utc_now()
    deadline = deadline or TRANSFER_DEADLINE
    return dt <= deadline


class DeadlinePolicy(BaseModel):
    transfer_deadline: datetime = Field(..., description="Cutoff after which transfers are refused.")
    lock_roles_after_deadline: bool = Field(
        False, description="Also refuse captain/vice-captain changes after the deadline."
    )

    @classmethod
    def from_env(cls) -> "DeadlinePolicy":
        return cls(
            transfer_deadline=TRANSFER_DEADLINE,
            lock_roles_after_deadline=ROLE_CHANGES_LOCKED_AFTER_DEADLINE,
        )

    def transfers_open(self, now: datetime) -> bool:
        return is_transfer_window_open(now, self.transfer_deadline)

    def role_changes_open(self, now: datetime) -> bool:
        if not self.lock_roles_after_deadline:
            return True
        return is_transfer_window_open(now, self.transfer_deadline)
