"""
smartprep/sessions.py

One SessionContext per browser session, kept in-process and keyed by a
random id stored in the Flask session cookie. A context owns the
AppState snapshot plus whichever stage objects (assessment, full
assessment, roadmap screen) are currently live.
"""
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from threading import Lock, RLock
from typing import Callable, Optional
from uuid import uuid4

from flask import session
from flask_login import current_user

from smartprep import state as st
from smartprep.assessment.engine import AssessmentEngine
from smartprep.assessment.full import FullAssessment
from smartprep.roadmap.tracker import RoadmapView
from smartprep.users.streak_utils import update_streak


@dataclass
class SessionContext:
    sid: str
    state: st.AppState
    assessment:   Optional[AssessmentEngine] = None
    full:         Optional[FullAssessment]   = None
    roadmap_view: Optional[RoadmapView]      = None
    lock: RLock = field(default_factory=RLock, repr=False)

    def dispatch(self, reducer: Callable[..., st.AppState], *args) -> st.AppState:
        with self.lock:
            self.state = reducer(self.state, *args)
            return self.state

    def close_stages(self) -> None:
        """Stop every live stage; any response still in flight is dropped."""
        with self.lock:
            stages = [s for s in (self.assessment, self.full) if s is not None]
            self.assessment = None
            self.full = None
            self.roadmap_view = None
        # Stages call back into this context on completion; close outside our lock.
        for stage in stages:
            stage.close()


class SessionRegistry:
    """
    Contexts by session id, least recently used first. Past `max_contexts`
    the oldest context is evicted and its stages closed; logout drops a
    context explicitly.
    """

    def __init__(self, max_contexts: int = 1000) -> None:
        self.max_contexts = max_contexts
        self._lock = Lock()
        self._contexts: OrderedDict[str, SessionContext] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._contexts)

    def get(self, sid: str) -> Optional[SessionContext]:
        with self._lock:
            return self._contexts.get(sid)

    def get_or_create(self, sid: str, factory: Callable[[], st.AppState]) -> SessionContext:
        evicted = []
        with self._lock:
            ctx = self._contexts.get(sid)
            if ctx is None:
                ctx = SessionContext(sid=sid, state=factory())
                self._contexts[sid] = ctx
                while len(self._contexts) > self.max_contexts:
                    evicted.append(self._contexts.popitem(last=False)[1])
            else:
                self._contexts.move_to_end(sid)
        for old in evicted:
            old.close_stages()
        return ctx

    def drop(self, sid: str) -> None:
        with self._lock:
            ctx = self._contexts.pop(sid, None)
        if ctx is not None:
            ctx.close_stages()


registry = SessionRegistry()


def _initial_state() -> st.AppState:
    streak, last_active = update_streak()
    state = st.with_streak(st.AppState(), streak, last_active)
    if current_user.is_authenticated:
        state = st.login(state, st.UserIdentity(current_user.username, current_user.role))
    return state


def current_sid() -> str:
    sid = session.get('sid')
    if not sid:
        sid = uuid4().hex
        session['sid'] = sid
    return sid


def current_context() -> SessionContext:
    """Context of the requesting browser; created (and the streak applied) on first use."""
    return registry.get_or_create(current_sid(), _initial_state)


def end_session() -> None:
    """Forget the requesting browser's context and its session id."""
    sid = session.pop('sid', None)
    if sid:
        registry.drop(sid)
