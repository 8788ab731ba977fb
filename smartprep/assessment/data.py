"""
smartprep/assessment/data.py

Constants and static fallback content for the assessment stages.
"""
from __future__ import annotations

from typing import List

from smartprep.schemas import AssessmentResult, CodingChallenge, Question, TestCase

ASSESSMENT_SECONDS = 20 * 60

# A topic runs the coding flow when it contains any of these (case-insensitive).
CODING_TOPICS = [
    "Java", "Python", "JavaScript", "C++", "SQL", "Spring Boot",
    "Go", "Rust", "TypeScript", "Technical Coding", "Coding", "DSA",
]

# ── Full assessment ───────────────────────────────────────────────────────────
FULL_CHALLENGE_TOPIC = "Python (Basic DSA)"
CODING_BONUS         = 5
CODING_FAILED_AREA   = "Technical Coding Implementation"
DEFAULT_WEAK_AREA    = "Advanced System Design"
FULL_STRONG_AREAS    = ["Perseverance"]

# ── Coding flow scoring ───────────────────────────────────────────────────────
CODING_TOTAL          = 100
CODING_PASS_SCORE     = 100
CODING_FAIL_SCORE     = 40
CODING_DEFAULT_WEAK   = ["Optimization", "Edge Cases"]
CODING_DEFAULT_STRONG = ["Basic Logic"]


def is_coding_topic(topic: str) -> bool:
    lowered = (topic or "").lower()
    return any(t.lower() in lowered for t in CODING_TOPICS)


def placeholder_question(topic: str) -> Question:
    return Question(
        id="1",
        text=f"What is a core concept of {topic}?",
        options=["Concept A", "Concept B", "Concept C", "Concept D"],
        correct_index=0,
    )


def failed_mixed_questions() -> List[Question]:
    return [
        Question(
            id="1",
            text="Failed to load. Correct is A.",
            options=["A", "B", "C", "D"],
            correct_index=0,
            category="Error",
        )
    ]


def fallback_challenge(language: str) -> CodingChallenge:
    return CodingChallenge(
        problem_name="Sum of Array",
        problem_description="Write a function to return the sum of all elements in an array.",
        constraints="Array length <= 1000",
        test_cases=[TestCase(input="[1,2,3]", output="6")],
        starter_code="// Write your code here",
        solution_language=language,
    )


def evaluation_error_result() -> AssessmentResult:
    return AssessmentResult(score=50, total=100, weak_areas=["Error Handling"], strong_areas=[])
