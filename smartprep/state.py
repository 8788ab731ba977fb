"""
smartprep/state.py

Application state and the pure reducers that move it between views.

Every reducer takes the current AppState (plus action arguments) and
returns a new one; nothing here mutates in place, so concurrent readers
always see a consistent snapshot.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Optional

from smartprep.schemas import AssessmentResult, Roadmap


class View(str, Enum):
    LOGIN            = "LOGIN"
    TOPIC_SELECTION  = "TOPIC_SELECTION"
    DASHBOARD        = "DASHBOARD"
    ASSESSMENT       = "ASSESSMENT"
    FULL_ASSESSMENT  = "FULL_ASSESSMENT"
    ASSESSMENT_RESULT = "ASSESSMENT_RESULT"
    ROADMAP          = "ROADMAP"
    TIMETABLE        = "TIMETABLE"


class Level(str, Enum):
    BEGINNER     = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED     = "Advanced"


# ── Catalogue ─────────────────────────────────────────────────────────────────

CATEGORIES = ["Aptitude", "Coding", "Core Subjects", "Communication", "Group Discussion"]
CODING_CATEGORY = "Coding"
SUGGESTED_TOPICS = ["Java", "Python", "JavaScript", "C++", "SQL", "Spring Boot"]
COMPREHENSIVE_TOPIC = "Comprehensive Interview Prep"

# Views that only make sense once a roadmap exists.
ROADMAP_VIEWS = frozenset({View.ROADMAP, View.TIMETABLE})


@dataclass(frozen=True)
class UserIdentity:
    username: str
    role: str = "student"


@dataclass(frozen=True)
class AppState:
    view: View = View.LOGIN
    user: Optional[UserIdentity] = None
    selected_topic: str = ""
    level: Level = Level.BEGINNER
    roadmap: Optional[Roadmap] = None
    assessment_result: Optional[AssessmentResult] = None
    completed_tasks: FrozenSet[str] = field(default_factory=frozenset)
    streak: int = 0
    last_active_date: str = ""


def task_id(day: int, position: int) -> str:
    """Stable identifier of the task at `position` within roadmap day `day`."""
    return f"day-{day}-task-{position}"


def derive_level(result: AssessmentResult) -> Level:
    pct = result.percentage
    if pct > 75:
        return Level.ADVANCED
    if pct >= 40:
        return Level.INTERMEDIATE
    return Level.BEGINNER


# ── Reducers ──────────────────────────────────────────────────────────────────

def _reset(state: AppState) -> AppState:
    return replace(
        state,
        selected_topic="",
        level=Level.BEGINNER,
        roadmap=None,
        assessment_result=None,
        completed_tasks=frozenset(),
    )


def login(state: AppState, user: UserIdentity) -> AppState:
    return replace(_reset(state), user=user, view=View.DASHBOARD)


def logout(state: AppState) -> AppState:
    return replace(_reset(state), user=None, view=View.LOGIN)


def select_category(state: AppState, category: str) -> AppState:
    if category == CODING_CATEGORY:
        return replace(state, view=View.TOPIC_SELECTION)
    return replace(state, selected_topic=category, view=View.ASSESSMENT)


def select_topic(state: AppState, topic: str) -> AppState:
    topic = (topic or "").strip()
    if not topic:
        return state
    return replace(state, selected_topic=topic, view=View.ASSESSMENT)


def start_full_assessment(state: AppState) -> AppState:
    return replace(state, selected_topic=COMPREHENSIVE_TOPIC, view=View.FULL_ASSESSMENT)


def complete_assessment(state: AppState, result: AssessmentResult) -> AppState:
    return replace(
        state,
        assessment_result=result,
        level=derive_level(result),
        view=View.ASSESSMENT_RESULT,
    )


def proceed_to_roadmap(state: AppState) -> AppState:
    return replace(state, view=View.ROADMAP)


def save_roadmap(state: AppState, roadmap: Roadmap) -> AppState:
    """Cache the first roadmap of the planning session; later ones are ignored."""
    if state.roadmap is not None:
        return state
    return replace(state, roadmap=roadmap)


def toggle_task(state: AppState, tid: str) -> AppState:
    if tid in state.completed_tasks:
        return replace(state, completed_tasks=state.completed_tasks - {tid})
    return replace(state, completed_tasks=state.completed_tasks | {tid})


def mark_task_complete(state: AppState, tid: str) -> AppState:
    if tid in state.completed_tasks:
        return state
    return replace(state, completed_tasks=state.completed_tasks | {tid})


def navigate_to(state: AppState, view: View) -> AppState:
    if view in ROADMAP_VIEWS and state.roadmap is None:
        return state
    return replace(state, view=view)


def with_streak(state: AppState, streak: int, last_active: str) -> AppState:
    return replace(state, streak=streak, last_active_date=last_active)
