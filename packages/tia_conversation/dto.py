from datetime import datetime
from typing import List, Optional

from pydantic import Field

from packages.tia_adaptive.difficulty import Difficulty
from packages.tia_adaptive.domains import Domain
from packages.tia_adaptive.scoring import PerformanceBand
from packages.tia_core.dto import BaseDTO

INPUT_FORMAT_PLACEHOLDER = "As per problem statement. Provide necessary inputs described in the problem."
OUTPUT_FORMAT_PLACEHOLDER = "Return/print output exactly as specified in the problem."
CONSTRAINTS_PLACEHOLDER = "Follow typical coding constraints for the topic unless specified otherwise."
EXAMPLE_PLACEHOLDER = "Example I/O will be provided when relevant by the generator."


class LastQuestion(BaseDTO):
    question_id: str
    question_text: str
    expected_key_points: List[str] = Field(default_factory=list)
    asked_at: datetime
    domain: Domain


class ConversationTurn(BaseDTO):
    question_id: str
    answer: str
    evaluation: str
    difficulty: Difficulty
    performance: PerformanceBand
    covered_key_points: List[str] = Field(default_factory=list)
    missed_key_points: List[str] = Field(default_factory=list)
    responded_at: datetime


class ConversationState(BaseDTO):
    """
    Ephemeral per-token state. history is append-only.
    """
    topic: Domain
    difficulty: Difficulty
    last_question: Optional[LastQuestion] = None
    history: List[ConversationTurn] = Field(default_factory=list)


class QuestionPayload(BaseDTO):
    problem: str
    input_format: str = INPUT_FORMAT_PLACEHOLDER
    output_format: str = OUTPUT_FORMAT_PLACEHOLDER
    constraints: str = CONSTRAINTS_PLACEHOLDER
    example: str = EXAMPLE_PLACEHOLDER
    difficulty: str


class TurnResult(BaseDTO):
    evaluation: Optional[str] = None
    next_question: QuestionPayload
