"""
smartprep/assessment/engine.py

Single-topic assessment: LOADING → (MCQ | CODING) → COMPLETE.

The flow is picked from the topic name. Both flows run under one Timer;
when it expires the MCQ flow scores whatever has been answered and the
coding flow submits the current buffer. Provider failures never leave
the engine stuck in LOADING: a static fallback is substituted.
"""
from __future__ import annotations

import logging
from enum import Enum
from threading import RLock
from typing import Callable, List, Optional

from smartprep.assessment import data
from smartprep.assessment.workspace import CodingWorkspace
from smartprep.provider.base import ContentProvider, ProviderError
from smartprep.schemas import AssessmentResult, Question, RunCodeResult
from smartprep.timer import Ticker, Timer

log = logging.getLogger(__name__)


class Phase(str, Enum):
    LOADING     = "loading"
    MCQ         = "mcq"
    TRANSITION  = "transition"
    CODING      = "coding"
    CALCULATING = "calculating"
    COMPLETE    = "complete"


class Mode(str, Enum):
    MCQ    = "mcq"
    CODING = "coding"


def score_answers(questions: List[Question], answers: List[int]) -> int:
    return sum(1 for q, a in zip(questions, answers) if a == q.correct_index)


class AssessmentEngine:
    def __init__(
        self,
        topic: str,
        provider: ContentProvider,
        on_complete: Optional[Callable[[AssessmentResult], None]] = None,
        duration: int = data.ASSESSMENT_SECONDS,
        room: Optional[str] = None,
    ) -> None:
        self.topic       = topic
        self.provider    = provider
        self.on_complete = on_complete
        self.duration    = duration
        self.mode        = Mode.CODING if data.is_coding_topic(topic) else Mode.MCQ
        self.phase       = Phase.LOADING

        self.questions: List[Question] = []
        self.answers:   List[int]      = []
        self.workspace: Optional[CodingWorkspace] = None
        self.result:    Optional[AssessmentResult] = None

        self._lock       = RLock()
        self._submitting = False
        self._closed     = False
        self.timer  = Timer(on_expire=self.expire, is_active=self._timer_active)
        self.ticker = Ticker(self.timer, room)

    # ── Loading ───────────────────────────────────────────────────────────

    def load(self) -> None:
        """Fetch content (blocking), enter the flow's first phase and arm the timer."""
        if self.mode is Mode.MCQ:
            questions = self._fetch_questions()
        else:
            workspace = CodingWorkspace(self._fetch_challenge(), self.provider)

        with self._lock:
            if self._closed or self.phase is not Phase.LOADING:
                return
            if self.mode is Mode.MCQ:
                self.questions = questions
                self.phase = Phase.MCQ
            else:
                self.workspace = workspace
                self.phase = Phase.CODING
            self.timer.start(self.duration)
            self.ticker.start()

    def _fetch_questions(self) -> List[Question]:
        try:
            questions = self.provider.generate_questions(self.topic)
        except ProviderError as exc:
            log.warning("Question generation failed for %r: %s", self.topic, exc)
            questions = []
        return questions or [data.placeholder_question(self.topic)]

    def _fetch_challenge(self):
        try:
            return self.provider.generate_coding_challenge(self.topic)
        except ProviderError as exc:
            log.warning("Challenge generation failed for %r: %s", self.topic, exc)
            return data.fallback_challenge(self.topic)

    # ── MCQ flow ──────────────────────────────────────────────────────────

    @property
    def current_index(self) -> int:
        return len(self.answers)

    @property
    def current_question(self) -> Optional[Question]:
        if self.phase is not Phase.MCQ or self.current_index >= len(self.questions):
            return None
        return self.questions[self.current_index]

    def answer(self, option_index: int) -> bool:
        """Record an answer for the current question. False when refused."""
        with self._lock:
            if self.phase is not Phase.MCQ:
                return False
            if not 0 <= option_index < len(self.questions[self.current_index].options):
                return False
            self.answers.append(option_index)
            if len(self.answers) == len(self.questions):
                self._finish_mcq()
            return True

    def _finish_mcq(self) -> None:
        score = score_answers(self.questions, self.answers)
        total = len(self.questions)
        if score < total / 2:
            weak, strong = [f"{self.topic} Basics", "Problem Solving"], []
        else:
            weak, strong = ["Advanced Concepts"], ["Syntax", "Core Logic"]
        self._complete(AssessmentResult(score=score, total=total,
                                        weak_areas=weak, strong_areas=strong))

    # ── Coding flow ───────────────────────────────────────────────────────

    def run_code(self, code: Optional[str] = None) -> Optional[RunCodeResult]:
        with self._lock:
            if self.phase is not Phase.CODING or self._submitting:
                return None
            return self.workspace.run(code)

    def reset_code(self) -> bool:
        with self._lock:
            if self.phase is not Phase.CODING or self._submitting:
                return False
            self.workspace.reset()
            return True

    def submit(self, code: Optional[str] = None) -> Optional[AssessmentResult]:
        with self._lock:
            if self.phase is not Phase.CODING or self._submitting:
                return None
            self._submitting = True
            if code is not None:
                self.workspace.code = code
            challenge = self.workspace.challenge
            try:
                evaluation = self.provider.evaluate(
                    challenge.problem_description, self.workspace.code, challenge.solution_language
                )
            except ProviderError as exc:
                log.warning("Evaluation failed for %r: %s", self.topic, exc)
                result = data.evaluation_error_result()
            else:
                self.workspace.last_evaluation = evaluation
                score = evaluation.score or (
                    data.CODING_PASS_SCORE if evaluation.success else data.CODING_FAIL_SCORE
                )
                result = AssessmentResult(
                    score=score,
                    total=data.CODING_TOTAL,
                    weak_areas=evaluation.weak_areas or list(data.CODING_DEFAULT_WEAK),
                    strong_areas=evaluation.strong_areas or list(data.CODING_DEFAULT_STRONG),
                )
            finally:
                self._submitting = False
            self._complete(result)
            return result

    # ── Timer / lifecycle ─────────────────────────────────────────────────

    def _timer_active(self) -> bool:
        return self.phase in (Phase.MCQ, Phase.CODING) and not self._submitting

    def expire(self) -> None:
        with self._lock:
            if self.phase is Phase.MCQ:
                log.info("Time up on %r after %d answers", self.topic, len(self.answers))
                self._finish_mcq()
            elif self.phase is Phase.CODING:
                self.submit()

    def _complete(self, result: AssessmentResult) -> None:
        self.phase  = Phase.COMPLETE
        self.result = result
        self.timer.cancel()
        self.ticker.stop()
        if self.on_complete is not None and not self._closed:
            self.on_complete(result)

    def close(self) -> None:
        """Tear down when the view is left; late responses are ignored afterwards."""
        with self._lock:
            self._closed = True
            self.timer.cancel()
            self.ticker.stop()

    def to_dict(self) -> dict:
        q = self.current_question
        return {
            "topic":     self.topic,
            "mode":      self.mode.value,
            "phase":     self.phase.value,
            "remaining": self.timer.remaining,
            "index":     self.current_index,
            "total":     len(self.questions),
            "question":  {"id": q.id, "text": q.text, "options": q.options} if q else None,
            "workspace": self.workspace.to_dict() if self.workspace else None,
            "result":    self.result.model_dump() if self.result else None,
        }
