"""
smartprep/roadmap/tracker.py

Progress maths and view helpers for the study roadmap.
"""
from __future__ import annotations

import logging
import math
from threading import RLock
from typing import Callable, Dict, Iterable, Iterator, Optional, Set, Tuple
from urllib.parse import quote_plus

from smartprep.assessment.workspace import CodingWorkspace
from smartprep.provider.base import ContentProvider, ProviderError
from smartprep.schemas import AssessmentResult, CodeEvaluationResult, DayPlan, Roadmap, Task
from smartprep.state import COMPREHENSIVE_TOPIC, task_id

log = logging.getLogger(__name__)

ASSESSMENT_WEIGHT = 40
PROGRESS_WEIGHT   = 60


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


# ── Task ids ──────────────────────────────────────────────────────────────────

def iter_tasks(roadmap: Roadmap) -> Iterator[Tuple[str, DayPlan, Task]]:
    for day in roadmap.days:
        for position, task in enumerate(day.tasks):
            yield task_id(day.day, position), day, task


def all_task_ids(roadmap: Roadmap) -> Set[str]:
    return {tid for tid, _, _ in iter_tasks(roadmap)}


def find_task(roadmap: Roadmap, tid: str) -> Optional[Task]:
    for candidate, _, task in iter_tasks(roadmap):
        if candidate == tid:
            return task
    return None


# ── Progress ──────────────────────────────────────────────────────────────────

def day_completion_pct(day: DayPlan, completed: Iterable[str]) -> int:
    if not day.tasks:
        return 0
    done = set(completed)
    hits = sum(1 for i in range(len(day.tasks)) if task_id(day.day, i) in done)
    return round_half_up(hits / len(day.tasks) * 100)


def readiness_score(
    result: Optional[AssessmentResult],
    roadmap: Optional[Roadmap],
    completed: Iterable[str],
) -> int:
    """
    Up to 40 points from the assessment and up to 60 from finished tasks.
    Only ids that belong to the roadmap count.
    """
    score = 0
    if result is not None and result.total > 0:
        score += round_half_up(result.score / result.total * ASSESSMENT_WEIGHT)
    if roadmap is not None:
        ids = all_task_ids(roadmap)
        if ids:
            done = len(ids & set(completed))
            score += round_half_up(done / len(ids) * PROGRESS_WEIGHT)
    return max(0, min(100, score))


def roadmap_days_for(topic: str, default_days: int = 5, comprehensive_days: int = 14) -> int:
    return comprehensive_days if topic == COMPREHENSIVE_TOPIC else default_days


# ── Links ─────────────────────────────────────────────────────────────────────

def platform_link(task: Task) -> str:
    """The task's own link, or a web search for the resource."""
    link = (task.link or "").strip()
    if link and link.lower() != "null":
        return link if link.startswith("http") else f"https://{link}"
    query = f"{task.platform or ''} {task.title} tutorial".strip()
    return f"https://www.google.com/search?q={quote_plus(query)}"


# ── Per-view state ────────────────────────────────────────────────────────────

class RoadmapView:
    """
    Transient state of the roadmap screen: the expanded day and any open
    embedded coding challenges. The roadmap itself lives in AppState.
    """

    def __init__(self, provider: ContentProvider) -> None:
        self.provider     = provider
        self.expanded_day: Optional[int] = 1
        self.workspaces:  Dict[str, CodingWorkspace] = {}
        self.error: Optional[str] = None
        self._lock = RLock()

    def toggle_day(self, day: int) -> Optional[int]:
        with self._lock:
            self.expanded_day = None if self.expanded_day == day else day
            return self.expanded_day

    def generate(self, topic: str, level: str, weak_areas: Iterable[str], days: int) -> Optional[Roadmap]:
        try:
            roadmap = self.provider.generate_roadmap(topic, level, list(weak_areas), days)
        except ProviderError as exc:
            log.warning("Roadmap generation failed for %r: %s", topic, exc)
            self.error = "Error loading roadmap."
            return None
        self.error = None
        return roadmap

    def open_challenge(self, roadmap: Roadmap, tid: str,
                       on_success: Callable[[str], None]) -> Optional[CodingWorkspace]:
        """Workspace for the task's embedded challenge, created on first open."""
        with self._lock:
            if tid in self.workspaces:
                return self.workspaces[tid]
            task = find_task(roadmap, tid)
            if task is None or task.coding_challenge is None:
                return None

            def _done(_evaluation: CodeEvaluationResult) -> None:
                on_success(tid)

            ws = CodingWorkspace(task.coding_challenge, self.provider, on_success=_done)
            self.workspaces[tid] = ws
            return ws

    def close_challenge(self, tid: str) -> None:
        with self._lock:
            self.workspaces.pop(tid, None)
