"""
smartprep/assessment/workspace.py

Editor-side mechanics shared by every place a coding challenge is shown:
the code buffer, "Run" (simulated execution against the visible test
cases) and "Run & Submit" (evaluation by the provider).
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from smartprep.provider.base import ContentProvider, ProviderError
from smartprep.schemas import CodeEvaluationResult, CodingChallenge, RunCodeResult

log = logging.getLogger(__name__)

EVALUATION_UNAVAILABLE = "Error connecting to evaluation service."


class CodingWorkspace:
    def __init__(
        self,
        challenge: CodingChallenge,
        provider: ContentProvider,
        on_success: Optional[Callable[[CodeEvaluationResult], None]] = None,
    ) -> None:
        self.challenge  = challenge
        self.provider   = provider
        self.on_success = on_success
        self.code       = challenge.starter_code
        self.last_run: Optional[RunCodeResult] = None
        self.last_evaluation: Optional[CodeEvaluationResult] = None

    def _set_code(self, code: Optional[str]) -> None:
        if code is not None:
            self.code = code

    def reset(self) -> None:
        """Put the starter code back in the buffer."""
        self.code = self.challenge.starter_code

    def run(self, code: Optional[str] = None) -> RunCodeResult:
        self._set_code(code)
        try:
            result = self.provider.run_tests(
                self.challenge.problem_description,
                self.code,
                self.challenge.solution_language,
                self.challenge.test_cases,
            )
        except ProviderError as exc:
            log.warning("Run failed for %r: %s", self.challenge.problem_name, exc)
            result = RunCodeResult(passed=False, results=[], error=f"Runtime Error: {exc}")
        self.last_run = result
        return result

    def evaluate(self, code: Optional[str] = None) -> CodeEvaluationResult:
        """Grade the buffer; a successful grade triggers on_success."""
        self._set_code(code)
        try:
            result = self.provider.evaluate(
                self.challenge.problem_description,
                self.code,
                self.challenge.solution_language,
            )
        except ProviderError as exc:
            log.warning("Evaluation failed for %r: %s", self.challenge.problem_name, exc)
            result = CodeEvaluationResult(success=False, feedback=EVALUATION_UNAVAILABLE)
        self.last_evaluation = result
        if result.success and self.on_success is not None:
            self.on_success(result)
        return result

    def to_dict(self) -> dict:
        return {
            "challenge":       self.challenge.model_dump(),
            "code":            self.code,
            "last_run":        self.last_run.model_dump() if self.last_run else None,
            "last_evaluation": self.last_evaluation.model_dump() if self.last_evaluation else None,
        }
