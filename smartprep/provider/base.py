"""
smartprep/provider/base.py

The content provider is the only source of questions, coding problems,
simulated execution results, evaluation feedback and roadmaps. Everything
behind this interface is replaceable; callers only rely on the typed
results and on ProviderError for every kind of failure.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Sequence

from smartprep.schemas import (
    CodeEvaluationResult,
    CodingChallenge,
    Question,
    Roadmap,
    RunCodeResult,
    TestCase,
)


class ProviderError(Exception):
    """Network, parsing or schema failure while talking to the provider."""


class ContentProvider(ABC):

    @abstractmethod
    def generate_questions(self, topic: str) -> List[Question]:
        """Multiple-choice questions for a single topic."""

    @abstractmethod
    def generate_mixed_assessment(self) -> List[Question]:
        """Ten questions, five Aptitude and five Core CS, each tagged with its category."""

    @abstractmethod
    def generate_coding_challenge(self, topic: str) -> CodingChallenge:
        ...

    @abstractmethod
    def run_tests(
        self,
        problem: str,
        code: str,
        language: str,
        test_cases: Sequence[TestCase],
    ) -> RunCodeResult:
        """Simulate running `code` against `test_cases`."""

    @abstractmethod
    def evaluate(self, problem: str, code: str, language: str) -> CodeEvaluationResult:
        ...

    @abstractmethod
    def generate_roadmap(
        self,
        topic: str,
        level: str,
        weak_areas: Sequence[str],
        days: int,
    ) -> Roadmap:
        ...
