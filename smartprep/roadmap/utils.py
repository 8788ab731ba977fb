from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from smartprep.schemas import DayPlan, Roadmap

WEEK_LENGTH = 7
REST_DAY = "Rest Day / Review"


@dataclass
class TimetableCell:
    date: date
    plan: Optional[DayPlan]

    @property
    def is_today(self) -> bool:
        return self.date == datetime.now(timezone.utc).date()

    @property
    def label(self) -> str:
        return self.plan.topic if self.plan else REST_DAY


# ── helpers ──────────────────────────────────────────────────────────────────

def build_timetable(roadmap: Roadmap, start: Optional[date] = None) -> List[TimetableCell]:
    """Seven dates from `start` (today by default); date i shows roadmap day i+1."""
    start = start or datetime.now(timezone.utc).date()
    by_day = {d.day: d for d in roadmap.days}
    return [
        TimetableCell(date=start + timedelta(days=i), plan=by_day.get(i + 1))
        for i in range(WEEK_LENGTH)
    ]
