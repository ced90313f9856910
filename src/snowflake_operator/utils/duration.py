"""Account lifetime policy: duration parsing and expiry checks."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol

from ..constants import DEFAULT_DURATION

logger = logging.getLogger(__name__)

# Multipliers in microseconds, the resolution of timedelta
_UNIT_MICROSECONDS = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}

_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_DURATION = re.compile(r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+")

# Largest duration representable as signed 64-bit nanoseconds (about 2562047h)
_MAX_MICROSECONDS = (2**63 - 1) / 1_000


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Return the current timezone-aware time."""
        ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DurationCheck:
    """Outcome of an expiry check.

    ``remaining`` is None when no wake-up should be scheduled.
    """

    due: bool
    remaining: timedelta | None = None

    @classmethod
    def not_yet_due(cls, remaining: timedelta | None = None) -> DurationCheck:
        return cls(due=False, remaining=remaining)

    @classmethod
    def expired(cls) -> DurationCheck:
        return cls(due=True)


def parse_duration(value: str) -> timedelta:
    """Parse a Go-style duration string such as ``90s``, ``2m`` or ``1h30m``.

    Raises:
        ValueError: If the string is not a valid duration
    """
    text = value.strip()
    if text in ("0", "+0", "-0"):
        return timedelta(0)
    if not _DURATION.fullmatch(text):
        raise ValueError(f"invalid duration {value!r}")

    sign = -1 if text.startswith("-") else 1
    total = sum(float(number) * _UNIT_MICROSECONDS[unit] for number, unit in _COMPONENT.findall(text))
    if total > _MAX_MICROSECONDS:
        raise ValueError(f"invalid duration {value!r}: out of range")
    return timedelta(microseconds=sign * total)


def effective_duration(value: str | None) -> timedelta:
    """Return the duration to apply, falling back to the default on empty or invalid input."""
    default = parse_duration(DEFAULT_DURATION)
    if not value:
        return default
    try:
        return parse_duration(value)
    except (ValueError, OverflowError):
        logger.warning(f"Failed to parse duration {value!r}, using default {DEFAULT_DURATION}")
        return default


def check_duration(
    creation_time: datetime | None,
    duration: str | None,
    clock: Clock,
) -> DurationCheck:
    """Decide whether an account has outlived its duration.

    Args:
        creation_time: When the account was created, or None if not recorded
        duration: Duration text from the resource spec
        clock: Clock used to read the current time

    Returns:
        ``DurationCheck.expired()`` if ``now > creation_time + duration``,
        otherwise ``DurationCheck.not_yet_due`` with the time left until expiry
    """
    if creation_time is None:
        logger.info("No creation time set, skipping duration check")
        return DurationCheck.not_yet_due()

    expiration_time = creation_time + effective_duration(duration)
    now = clock.now()

    if now > expiration_time:
        logger.info(f"Duration has expired (created {creation_time.isoformat()}, expired {expiration_time.isoformat()})")
        return DurationCheck.expired()

    return DurationCheck.not_yet_due(expiration_time - now)
