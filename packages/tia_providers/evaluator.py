import json
import random
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from pydantic import ValidationError

from packages.tia_core.dto import AnswerEvaluation, LLMMessageDTO
from packages.tia_core.errors import ExternalCallError
from packages.tia_providers.llm.base import ILLMProvider
from packages.tia_providers.llm.parsing import extract_json_object

FEEDBACK_POOL = [
    "Reasonable attempt with room to deepen specifics.",
    "Balanced response; clarify key terms and provide succinct examples.",
    "Fair explanation; tighten structure and emphasize core trade-offs.",
    "Acceptable overview; add precision around edge cases and assumptions.",
]


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def mentions_key_point(answer: str, expected_key_points: Sequence[str]) -> bool:
    """True when the first word of any key point appears in the answer (case-insensitive)."""
    answer_lower = answer.lower()
    for point in expected_key_points:
        tokens = str(point).lower().split()
        if tokens and tokens[0] in answer_lower:
            return True
    return False


def mock_evaluation(
    answer: str,
    expected_key_points: Sequence[str],
    rng: Optional[random.Random] = None,
) -> AnswerEvaluation:
    """
    Deterministic stand-in used when the evaluator is unavailable.

    Starts every axis at 0.5, then:
      +0.2 correctness if len(answer) > 100
      +0.2 clarity     if len(answer) > 200
      +0.3 correctness if a key point's first word appears in the answer
      +0.1 clarity     if the answer says "example" or "for instance"
    Axes are clamped to [0, 1] and rounded to one decimal.
    """
    rng = rng or random.Random()
    correctness = clarity = confidence = 0.5

    if len(answer) > 100:
        correctness += 0.2
    if len(answer) > 200:
        clarity += 0.2
    if mentions_key_point(answer, expected_key_points):
        correctness += 0.3
    if "example" in answer or "for instance" in answer:
        clarity += 0.1

    return AnswerEvaluation(
        correctness=round(_clamp(correctness), 1),
        clarity=round(_clamp(clarity), 1),
        confidence=round(_clamp(confidence), 1),
        feedback=rng.choice(FEEDBACK_POOL),
    )


class AnswerEvaluator(ABC):
    @abstractmethod
    async def evaluate(self, question: str, answer: str, expected_key_points: List[str]) -> AnswerEvaluation:
        pass


EVALUATION_PROMPT = """You are an expert technical interviewer evaluating a candidate's answer. Please evaluate the following response and provide a JSON response.

Question: "{question}"

Candidate's Answer: "{answer}"

Expected Key Points: {key_points}

Please evaluate the answer based on:
1. Correctness (0-1): How accurate is the technical content?
2. Clarity (0-1): How clear and well-structured is the explanation?
3. Confidence (0-1): How confident and comprehensive is the response?

Provide constructive feedback highlighting strengths and areas for improvement.

Return ONLY a valid JSON object in this exact format:
{{
  "correctness": 0.8,
  "clarity": 0.7,
  "confidence": 0.6,
  "feedback": "Your feedback here..."
}}

Ensure the JSON is valid and all scores are between 0 and 1."""


class LLMAnswerEvaluator(AnswerEvaluator):
    """
    Scores an answer through the LLM.
    Missing keys or scores outside [0, 1] raise ExternalCallError.
    """

    def __init__(self, llm: ILLMProvider):
        self.llm = llm

    async def evaluate(self, question, answer, expected_key_points):
        prompt = EVALUATION_PROMPT.format(
            question=question,
            answer=answer,
            key_points=json.dumps(list(expected_key_points)),
        )
        response = await self.llm.chat([LLMMessageDTO(role="user", content=prompt)])
        data = extract_json_object(response.content)
        if not data.get("feedback"):
            raise ExternalCallError("Evaluator reply has no feedback")
        try:
            return AnswerEvaluation.model_validate(data)
        except ValidationError as e:
            raise ExternalCallError("Invalid evaluator reply", details={"errors": e.errors()}) from e
