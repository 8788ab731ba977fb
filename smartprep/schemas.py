"""
smartprep/schemas.py

Pydantic models for every shape exchanged with the content provider.
The JSON schema of the expected response travels inside each prompt, and
every response is validated against the same model before it is used.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ── Assessment content ────────────────────────────────────────────────────────

class Question(_Frozen):
    id: str = Field(description="Unique identifier of the question")
    text: str = Field(description="The question text")
    options: List[str] = Field(description="Exactly four answer options", min_length=4, max_length=4)
    correct_index: int = Field(description="Index (0-3) of the correct option", ge=0, le=3)
    category: Optional[str] = Field(default=None, description="Area the question belongs to, e.g. Aptitude or Core CS")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        return str(v)


class QuestionSet(_Frozen):
    questions: List[Question]


class TestCase(_Frozen):
    input: str = Field(description="Input passed to the solution")
    output: str = Field(description="Expected output")

    @field_validator("input", "output", mode="before")
    @classmethod
    def _stringify(cls, v):
        return v if isinstance(v, str) else str(v)


class CodingChallenge(_Frozen):
    problem_name: str = Field(description="Short title of the problem")
    problem_description: str = Field(description="Full problem statement")
    constraints: str = Field(default="", description="Input constraints")
    test_cases: List[TestCase] = Field(description="Ordered example test cases")
    starter_code: str = Field(default="", description="Code the editor starts with")
    solution_language: str = Field(description="Language the solution must be written in")


# ── Code execution / evaluation ───────────────────────────────────────────────

class TestCaseResult(_Frozen):
    input: str
    expected: str
    actual: str
    passed: bool
    error: Optional[str] = None


class RunCodeResult(_Frozen):
    passed: bool = Field(description="True only if every test case passed")
    results: List[TestCaseResult] = Field(default_factory=list)
    error: Optional[str] = Field(default=None, description="Compile or runtime error, if any")


class CodeEvaluationResult(_Frozen):
    success: bool
    feedback: str
    score: Optional[int] = Field(default=None, ge=0, le=100)
    weak_areas: Optional[List[str]] = None
    strong_areas: Optional[List[str]] = None


class AssessmentResult(_Frozen):
    score: int
    total: int
    weak_areas: List[str] = Field(default_factory=list)
    strong_areas: List[str] = Field(default_factory=list)

    @property
    def percentage(self) -> float:
        return (self.score / self.total) * 100 if self.total else 0.0


# ── Roadmap ───────────────────────────────────────────────────────────────────

TaskType = Literal["video", "reading", "coding", "practice"]


class Task(_Frozen):
    title: str
    duration: str = Field(description="Estimated time, e.g. '30 mins'")
    type: TaskType
    platform: Optional[str] = Field(default=None, description="Where to study, e.g. YouTube or LeetCode")
    link: Optional[str] = Field(default=None, description="Direct URL to the resource")
    coding_challenge: Optional[CodingChallenge] = Field(
        default=None, description="Required when type is 'coding'"
    )


class DayPlan(_Frozen):
    day: int
    topic: str
    summary: str = ""
    tasks: List[Task]


class Roadmap(_Frozen):
    title: str
    generated_date: str = ""
    days: List[DayPlan]
