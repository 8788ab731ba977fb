"""
smartprep/assessment/full.py

Full mock assessment:
    LOADING → MCQ → TRANSITION → CODING → CALCULATING → COMPLETE

Ten mixed questions (Aptitude + Core CS) followed by one coding problem.
The two fetches run concurrently; each has its own fallback. The MCQ
phase and the coding phase each get a fresh countdown, and the coding
phase only starts when the user asks for it.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from threading import RLock
from typing import Callable, List, Optional

from smartprep.assessment import data
from smartprep.assessment.engine import Phase, score_answers
from smartprep.assessment.workspace import CodingWorkspace
from smartprep.provider.base import ContentProvider, ProviderError
from smartprep.schemas import (AssessmentResult, CodeEvaluationResult,
                               CodingChallenge, Question, RunCodeResult)
from smartprep.timer import Ticker, Timer

log = logging.getLogger(__name__)


def weak_areas_for(questions: List[Question], answers: List[int], coding_passed: bool) -> List[str]:
    """
    Categories of the answered-but-wrong questions, in question order
    without duplicates, plus the coding area if it failed. Unanswered and
    uncategorised questions contribute nothing.
    """
    areas: List[str] = []
    for q, chosen in zip(questions, answers):
        if chosen == q.correct_index or not q.category:
            continue
        if q.category not in areas:
            areas.append(q.category)
    if not coding_passed:
        areas.append(data.CODING_FAILED_AREA)
    return areas or [data.DEFAULT_WEAK_AREA]


class FullAssessment:
    def __init__(
        self,
        provider: ContentProvider,
        on_complete: Optional[Callable[[AssessmentResult], None]] = None,
        duration: int = data.ASSESSMENT_SECONDS,
        room: Optional[str] = None,
    ) -> None:
        self.provider    = provider
        self.on_complete = on_complete
        self.duration    = duration
        self.phase       = Phase.LOADING

        self.questions: List[Question] = []
        self.answers:   List[int]      = []
        self.challenge: Optional[CodingChallenge] = None
        self.workspace: Optional[CodingWorkspace] = None
        self.coding_passed = False
        self.result: Optional[AssessmentResult] = None

        self._lock   = RLock()
        self._closed = False
        self.timer  = Timer(on_expire=self.expire, is_active=self._timer_active)
        self.ticker = Ticker(self.timer, room)

    # ── Loading ───────────────────────────────────────────────────────────

    def load(self) -> None:
        with ThreadPoolExecutor(max_workers=2) as pool:
            questions_f = pool.submit(self._fetch_questions)
            challenge_f = pool.submit(self._fetch_challenge)
            questions, challenge = questions_f.result(), challenge_f.result()

        with self._lock:
            if self._closed or self.phase is not Phase.LOADING:
                return
            self.questions = questions
            self.challenge = challenge
            self.phase = Phase.MCQ
            self._arm()

    def _fetch_questions(self) -> List[Question]:
        try:
            questions = self.provider.generate_mixed_assessment()
        except ProviderError as exc:
            log.warning("Mixed assessment generation failed: %s", exc)
            questions = []
        return questions or data.failed_mixed_questions()

    def _fetch_challenge(self) -> CodingChallenge:
        try:
            return self.provider.generate_coding_challenge(data.FULL_CHALLENGE_TOPIC)
        except ProviderError as exc:
            log.warning("Full assessment challenge generation failed: %s", exc)
            return data.fallback_challenge(data.FULL_CHALLENGE_TOPIC)

    def _arm(self) -> None:
        self.timer.start(self.duration)
        self.ticker.start()

    # ── MCQ phase ─────────────────────────────────────────────────────────

    @property
    def current_index(self) -> int:
        return len(self.answers)

    @property
    def current_question(self) -> Optional[Question]:
        if self.phase is not Phase.MCQ or self.current_index >= len(self.questions):
            return None
        return self.questions[self.current_index]

    def answer(self, option_index: int) -> bool:
        with self._lock:
            if self.phase is not Phase.MCQ:
                return False
            if not 0 <= option_index < len(self.questions[self.current_index].options):
                return False
            self.answers.append(option_index)
            if len(self.answers) == len(self.questions):
                self._to_transition()
            return True

    def _to_transition(self) -> None:
        self.timer.cancel()
        self.ticker.stop()
        self.phase = Phase.TRANSITION

    # ── Coding phase ──────────────────────────────────────────────────────

    def begin_coding(self) -> bool:
        with self._lock:
            if self.phase is not Phase.TRANSITION:
                return False
            self.workspace = CodingWorkspace(self.challenge, self.provider,
                                             on_success=self._on_coding_success)
            self.phase = Phase.CODING
            self._arm()
            return True

    def run_code(self, code: Optional[str] = None) -> Optional[RunCodeResult]:
        with self._lock:
            if self.phase is not Phase.CODING:
                return None
            return self.workspace.run(code)

    def reset_code(self) -> bool:
        with self._lock:
            if self.phase is not Phase.CODING:
                return False
            self.workspace.reset()
            return True

    def evaluate(self, code: Optional[str] = None) -> Optional[CodeEvaluationResult]:
        """Grade the buffer; success moves on to scoring, failure stays in CODING."""
        with self._lock:
            if self.phase is not Phase.CODING:
                return None
            return self.workspace.evaluate(code)

    def _on_coding_success(self, _evaluation: CodeEvaluationResult) -> None:
        self._finish(coding_passed=True)

    def skip_coding(self) -> bool:
        with self._lock:
            if self.phase is not Phase.CODING:
                return False
            self._finish(coding_passed=False)
            return True

    # ── Scoring ───────────────────────────────────────────────────────────

    def _finish(self, coding_passed: bool) -> None:
        self.timer.cancel()
        self.ticker.stop()
        self.phase = Phase.CALCULATING
        self.coding_passed = coding_passed

        score = score_answers(self.questions, self.answers)
        if coding_passed:
            score += data.CODING_BONUS
        self.result = AssessmentResult(
            score=score,
            total=len(self.questions) + data.CODING_BONUS,
            weak_areas=weak_areas_for(self.questions, self.answers, coding_passed),
            strong_areas=list(data.FULL_STRONG_AREAS),
        )
        self.phase = Phase.COMPLETE
        if self.on_complete is not None and not self._closed:
            self.on_complete(self.result)

    # ── Timer / lifecycle ─────────────────────────────────────────────────

    def _timer_active(self) -> bool:
        return self.phase in (Phase.MCQ, Phase.CODING)

    def expire(self) -> None:
        with self._lock:
            if self.phase is Phase.MCQ:
                log.info("Full assessment MCQ time up after %d answers", len(self.answers))
                self._to_transition()
            elif self.phase is Phase.CODING:
                self._finish(coding_passed=False)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self.timer.cancel()
            self.ticker.stop()

    def to_dict(self) -> dict:
        q = self.current_question
        return {
            "phase":     self.phase.value,
            "remaining": self.timer.remaining,
            "index":     self.current_index,
            "total":     len(self.questions),
            "question":  (
                {"id": q.id, "text": q.text, "options": q.options, "category": q.category}
                if q else None
            ),
            "workspace": self.workspace.to_dict() if self.workspace else None,
            "result":    self.result.model_dump() if self.result else None,
        }
