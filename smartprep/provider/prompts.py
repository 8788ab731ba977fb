"""
smartprep/provider/prompts.py

Prompt builders for the Groq content provider. Each returns the user
prompt only; the system prompt and the response schema are attached by
the provider.
"""
from __future__ import annotations

import json
from typing import Sequence

from smartprep.schemas import TestCase
from smartprep.state import COMPREHENSIVE_TOPIC

SYSTEM_PROMPT = (
    "You are an interview preparation assistant for students. "
    "Return ONLY valid JSON matching the schema you are given: "
    "no markdown, no code fences, no commentary."
)

# Category names are widened so the model stays on the intended syllabus.
TOPIC_EXPANSIONS = {
    "Core Subjects": (
        "Core Computer Science subjects: Operating Systems, DBMS, "
        "Computer Networks and Object Oriented Programming (OOPS)"
    ),
    "Aptitude": "Quantitative Aptitude and Logical Reasoning",
}


def questions_prompt(topic: str, count: int = 20) -> str:
    subject = TOPIC_EXPANSIONS.get(topic, topic)
    return (
        f"Write {count} beginner-friendly multiple-choice interview questions on {subject}.\n"
        f"Every question must stay strictly within {subject}.\n"
        "Each question has exactly 4 options and the 0-based index of the correct one.\n"
        'Wrap the list as {"questions": [...]}.'
    )


def mixed_assessment_prompt() -> str:
    return (
        "Write a 10-question screening assessment for a campus placement candidate:\n"
        "- 5 questions on Quantitative Aptitude and Logical Reasoning, category 'Aptitude'\n"
        "- 5 questions on Core Computer Science (OS, DBMS, Networks), category 'Core CS'\n"
        "Each question has exactly 4 options, the 0-based index of the correct one "
        "and its category.\n"
        'Wrap the list as {"questions": [...]}.'
    )


def coding_challenge_prompt(topic: str) -> str:
    return (
        f"Write one beginner-to-intermediate coding interview problem for {topic}, "
        "suitable for a screening round.\n"
        "Give a short name, a full description, constraints, exactly 3 test cases "
        f"and starter code in {topic}. Set solution_language to the language used."
    )


def run_tests_prompt(problem: str, code: str, language: str, test_cases: Sequence[TestCase]) -> str:
    cases = json.dumps([tc.model_dump() for tc in test_cases])
    return (
        "Act as a compiler and code runner.\n"
        f"Problem: {problem}\n"
        f"Language: {language}\n"
        f"Code:\n{code}\n"
        f"Test cases: {cases}\n\n"
        "Trace the code for every test case in order. For each one report the input, "
        "the expected output, the output the code would actually print, whether they "
        "match, and any compile or runtime error (null otherwise). "
        "`passed` is true only when every case passes."
    )


def evaluate_prompt(problem: str, code: str, language: str) -> str:
    return (
        "Act as a technical interviewer grading a coding round.\n"
        f"Problem: {problem}\n"
        f"Language: {language}\n"
        f"Candidate code:\n{code}\n\n"
        "Judge correctness, syntax and efficiency. `success` is true only if the "
        "logic is correct for hidden edge cases too. Give detailed feedback, a score "
        "from 0 to 100, the concepts the candidate struggled with (weak_areas) and "
        "the ones handled well (strong_areas)."
    )


def _level_instruction(level: str) -> str:
    if level.lower() == "beginner":
        return (
            "The student has ZERO prior knowledge: start from the absolute basics "
            "and keep explanations simple."
        )
    return f"Target level: {level}."


def roadmap_prompt(topic: str, level: str, weak_areas: Sequence[str], days: int) -> str:
    weakness = (
        f"The student needs extra help with: {', '.join(weak_areas)}.\n" if weak_areas else ""
    )
    task_rules = (
        "Give every day a main topic, a short summary and 3 concrete tasks.\n"
        "Every task names a specific, high-quality platform or resource.\n"
        "Task types: 'video' (a YouTube search for the topic), 'reading' (introductory "
        "articles), 'coding' (write code), 'practice' (mock test or speaking practice).\n"
        "Every 'coding' task MUST carry a coding_challenge about the day's topic, "
        "with valid starter code."
    )

    if topic == COMPREHENSIVE_TOPIC:
        return (
            f"Create a {days}-day interview preparation roadmap for a {level} student "
            "that covers every interview round in a sensible order:\n"
            "1. Aptitude and Logical Reasoning\n"
            "2. Core Computer Science (OS, DBMS, Computer Networks)\n"
            "3. Technical Coding (Data Structures and Algorithms)\n"
            "4. HR and Behavioural\n"
            f"{_level_instruction(level)}\n{weakness}"
            "Either interleave the rounds or take them in blocks "
            "(e.g. week 1 coding and aptitude, week 2 core CS and HR).\n"
            f"{task_rules}\nStarter code should be in Python or JavaScript."
        )

    return (
        f"Create a step-by-step {days}-day interview preparation roadmap on {topic} "
        f"for a {level} student.\n"
        f"{_level_instruction(level)}\n{weakness}"
        f"{task_rules}\nStarter code should be in the language of the topic "
        "(Python or JavaScript if none is implied)."
    )
