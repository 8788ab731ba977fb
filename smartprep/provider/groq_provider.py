"""
smartprep/provider/groq_provider.py

ContentProvider backed by Groq chat completions in JSON mode.

Every call goes through _complete(): build prompt → call Groq → strip any
markdown fences → json.loads → validate against the pydantic model.
Anything that goes wrong along the way surfaces as ProviderError.
"""
from __future__ import annotations

import json
import logging
from datetime import date
from typing import List, Optional, Sequence, Type, TypeVar

from groq import Groq
from pydantic import BaseModel, ValidationError

from smartprep.provider import prompts
from smartprep.provider.base import ContentProvider, ProviderError
from smartprep.schemas import (
    CodeEvaluationResult,
    CodingChallenge,
    Question,
    QuestionSet,
    Roadmap,
    RunCodeResult,
    TestCase,
)

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _strip_fences(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("```"):
        raw = raw.split("```")[1]
        if raw.startswith("json"):
            raw = raw[4:]
    return raw.strip()


class GroqContentProvider(ContentProvider):

    def __init__(self, api_key: Optional[str], model: str = "llama-3.3-70b-versatile") -> None:
        self.api_key = api_key
        self.model   = model
        self._client: Optional[Groq] = None

    # ── Transport ─────────────────────────────────────────────────────────

    def _get_client(self) -> Groq:
        if not self.api_key:
            raise ProviderError("GROQ_API_KEY not configured.")
        if self._client is None:
            self._client = Groq(api_key=self.api_key)
        return self._client

    def _complete(self, prompt: str, model_cls: Type[M], temperature: float = 0.6,
                  max_tokens: int = 4000) -> M:
        schema = json.dumps(model_cls.model_json_schema())
        client = self._get_client()
        try:
            resp = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": f"{prompts.SYSTEM_PROMPT}\nJSON schema: {schema}"},
                    {"role": "user",   "content": prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
            )
        except Exception as exc:
            raise ProviderError(f"Groq request failed: {exc}") from exc

        content = resp.choices[0].message.content if resp.choices else None
        if not content:
            raise ProviderError("Empty response from Groq.")

        try:
            data = json.loads(_strip_fences(content))
        except json.JSONDecodeError as exc:
            raise ProviderError(f"Groq returned invalid JSON: {exc}") from exc

        try:
            return model_cls.model_validate(data)
        except ValidationError as exc:
            raise ProviderError(f"Groq response failed validation: {exc}") from exc

    # ── ContentProvider ───────────────────────────────────────────────────

    def generate_questions(self, topic: str) -> List[Question]:
        result = self._complete(prompts.questions_prompt(topic), QuestionSet, temperature=0.7)
        log.info("Generated %d questions for %r", len(result.questions), topic)
        return list(result.questions)

    def generate_mixed_assessment(self) -> List[Question]:
        result = self._complete(prompts.mixed_assessment_prompt(), QuestionSet, temperature=0.7)
        return list(result.questions)

    def generate_coding_challenge(self, topic: str) -> CodingChallenge:
        return self._complete(prompts.coding_challenge_prompt(topic), CodingChallenge)

    def run_tests(self, problem: str, code: str, language: str,
                  test_cases: Sequence[TestCase]) -> RunCodeResult:
        return self._complete(
            prompts.run_tests_prompt(problem, code, language, test_cases),
            RunCodeResult,
            temperature=0.0,
        )

    def evaluate(self, problem: str, code: str, language: str) -> CodeEvaluationResult:
        return self._complete(
            prompts.evaluate_prompt(problem, code, language),
            CodeEvaluationResult,
            temperature=0.2,
        )

    def generate_roadmap(self, topic: str, level: str, weak_areas: Sequence[str],
                         days: int) -> Roadmap:
        roadmap = self._complete(
            prompts.roadmap_prompt(topic, level, weak_areas, days),
            Roadmap,
            temperature=0.7,
            max_tokens=8000,
        )
        if not roadmap.days:
            raise ProviderError("Roadmap has no days.")
        if not roadmap.generated_date:
            roadmap = roadmap.model_copy(update={"generated_date": date.today().isoformat()})
        log.info("Generated %d-day roadmap %r", len(roadmap.days), roadmap.title)
        return roadmap
