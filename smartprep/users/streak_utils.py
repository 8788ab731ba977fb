"""
smartprep/users/streak_utils.py
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional, Tuple

from smartprep import db
from smartprep.models import Preference

log = logging.getLogger(__name__)

STREAK_KEY      = "smartprep_streak"
LAST_ACTIVE_KEY = "smartprep_last_active"


# ── Pure rule ─────────────────────────────────────────────────────────────────

def next_streak(streak: int, last_active: str, today: date) -> Optional[int]:
    """
    New streak value for a visit on `today`, or None when nothing changes.

      last_active == today     → None
      no last_active           → 1
      one calendar day later   → streak + 1
      more than one day later  → 1
      today before last_active → None   (clock skew)
    """
    if not last_active:
        return 1
    try:
        last = date.fromisoformat(last_active)
    except ValueError:
        return 1
    diff = (today - last).days
    if diff <= 0:
        return None
    if diff == 1:
        return streak + 1
    return 1


# ── Persistence ───────────────────────────────────────────────────────────────

def _read(key: str) -> str:
    row = db.session.get(Preference, key)
    return row.value if row else ""


def _write(key: str, value: str) -> None:
    row = db.session.get(Preference, key)
    if row:
        row.value = value
    else:
        db.session.add(Preference(key=key, value=value))


def load_streak() -> Tuple[int, str]:
    raw = _read(STREAK_KEY)
    try:
        streak = int(raw) if raw else 0
    except ValueError:
        streak = 0
    return streak, _read(LAST_ACTIVE_KEY)


def update_streak(today: Optional[date] = None) -> Tuple[int, str]:
    """
    Apply the daily streak rule once and persist both keys if it changed.
    Returns (streak, last_active) as they stand afterwards.
    """
    today = today or datetime.now(timezone.utc).date()
    streak, last_active = load_streak()
    new = next_streak(streak, last_active, today)
    if new is None:
        return streak, last_active

    stamp = today.isoformat()
    _write(STREAK_KEY, str(new))
    _write(LAST_ACTIVE_KEY, stamp)
    try:
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        log.error("Could not persist streak: %s", exc)
    return new, stamp
