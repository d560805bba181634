import json
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import Field, ValidationError, field_validator

from packages.tia_adaptive.difficulty import Difficulty
from packages.tia_adaptive.domains import Domain
from packages.tia_core.dto import BaseDTO, LLMMessageDTO
from packages.tia_core.errors import ExternalCallError
from packages.tia_providers.llm.base import ILLMProvider
from packages.tia_providers.llm.parsing import extract_json_object

DEFAULT_KEY_POINTS = ["Concept understanding", "Technical details"]

FALLBACK_KEY_POINTS = [
    "Concept definition",
    "Key characteristics",
    "Use cases or applications",
    "Important considerations",
]


def new_generated_question_id() -> str:
    return "Q" + uuid.uuid4().hex[:10].upper()


class PreviousResponse(BaseDTO):
    """
    What the generator knows about the last turn.
    """
    performance_band: str
    performance_score: float
    previous_answer: str = ""
    covered_key_points: List[str] = Field(default_factory=list)
    missed_key_points: List[str] = Field(default_factory=list)
    previous_question: str = ""


class GeneratedQuestion(BaseDTO):
    question_id: str = Field(default_factory=new_generated_question_id)
    question_text: str
    expected_key_points: List[str] = Field(default_factory=lambda: list(DEFAULT_KEY_POINTS))
    difficulty: Difficulty
    domain: Domain
    reasoning: str = ""


def fallback_question(topic: Domain, difficulty: Difficulty) -> GeneratedQuestion:
    topic = Domain(topic)
    return GeneratedQuestion(
        question_text=(
            f"Explain the concept of {topic.value.replace('_', ' ')} in the context of software development. "
            "What are the key aspects you would consider?"
        ),
        expected_key_points=list(FALLBACK_KEY_POINTS),
        difficulty=Difficulty(difficulty),
        domain=topic,
        reasoning="Fallback question due to generator error",
    )


class QuestionGenerator(ABC):
    @abstractmethod
    async def generate(
        self,
        topic: Domain,
        difficulty: Difficulty,
        previous_response: Optional[PreviousResponse] = None,
    ) -> GeneratedQuestion:
        pass


GENERATOR_SYSTEM_PROMPT = """You are an intelligent question generator for an adaptive learning system.
Your job is to generate technical interview questions whose difficulty follows the candidate's previous responses.

Behavior Rules:
1. If the answer shows confidence and correctness, the next question is harder.
2. If the answer is partially correct, keep the same level with slight variation.
3. If the answer is incorrect or confused, ask a simpler conceptual question.
4. Keep questions precise, clear, and engaging.
5. Never provide the answer."""

GENERATOR_PROMPT = """Current Topic: {topic}
Current Difficulty Level: {difficulty}
{previous}

Generate an appropriate question for the candidate. Return the response in the following JSON format:
{{
  "question_text": "Your generated question here",
  "expected_key_points": ["key point 1", "key point 2", "key point 3"],
  "difficulty": "{difficulty}",
  "domain": "{topic}",
  "reasoning": "Brief explanation of why this question is appropriate"
}}

Ensure the question:
- Is appropriate for the {difficulty} difficulty level
- Is relevant to the {topic} topic
- Has 2-4 expected key points that a good answer should cover
- {direction}
- If missed_key_points exist, ensure at least one of them is directly assessed in the new question.
- Do not repeat the previous question verbatim. Use a different angle or example.

Return ONLY the JSON object."""


def _direction(previous: Optional[PreviousResponse]) -> str:
    if previous is None:
        return "Serves as a good starting point"
    if previous.performance_score >= 0.7:
        return "Is more challenging than the previous question"
    if previous.performance_score < 0.5:
        return "Is easier and more conceptual than the previous question"
    return "Maintains similar difficulty with slight variation"


def _previous_block(previous: Optional[PreviousResponse]) -> str:
    if previous is None:
        return "This is the first question."
    performance = {
        "performance_band": previous.performance_band,
        "performance_score": previous.performance_score,
        "covered_key_points": previous.covered_key_points,
        "missed_key_points": previous.missed_key_points,
    }
    return (
        f"Previous Response Performance: {json.dumps(performance)}\n\n"
        f"Previous Question: {previous.previous_question}\n"
        f"Previous Answer: {previous.previous_answer}\n\n"
        "Instruction: Focus the next question to reinforce the missed_key_points and avoid repeating "
        "the same exact problem statement."
    )


class _GeneratorReply(BaseDTO):
    question_text: str = Field(min_length=1)
    expected_key_points: Optional[List[str]] = None
    reasoning: str = ""

    @field_validator("expected_key_points", mode="before")
    @classmethod
    def _drop_invalid_key_points(cls, value):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            return None
        return value


class LLMQuestionGenerator(QuestionGenerator):
    """
    Generates a question through the LLM.

    The returned difficulty and domain are always the requested ones; the
    model's own labels are ignored.
    """

    def __init__(self, llm: ILLMProvider):
        self.llm = llm

    async def generate(self, topic, difficulty, previous_response=None):
        topic = Domain(topic)
        difficulty = Difficulty(difficulty)
        prompt = GENERATOR_PROMPT.format(
            topic=topic.value,
            difficulty=difficulty.value,
            previous=_previous_block(previous_response),
            direction=_direction(previous_response),
        )
        response = await self.llm.chat(
            [LLMMessageDTO(role="user", content=prompt)],
            system_prompt=GENERATOR_SYSTEM_PROMPT,
        )
        data = extract_json_object(response.content)
        try:
            reply = _GeneratorReply.model_validate(data)
        except ValidationError as e:
            raise ExternalCallError("Invalid generator reply", details={"errors": e.errors()}) from e

        return GeneratedQuestion(
            question_text=reply.question_text,
            expected_key_points=reply.expected_key_points or list(DEFAULT_KEY_POINTS),
            difficulty=difficulty,
            domain=topic,
            reasoning=reply.reasoning,
        )
