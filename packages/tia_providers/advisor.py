import json
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Optional

from pydantic import ConfigDict, ValidationError, field_validator

from packages.tia_adaptive.difficulty import Difficulty
from packages.tia_adaptive.domains import Domain
from packages.tia_core.dto import BaseDTO, LLMMessageDTO
from packages.tia_core.errors import ExternalCallError
from packages.tia_providers.llm.base import ILLMProvider
from packages.tia_providers.llm.parsing import extract_json_object


@dataclass(frozen=True)
class PerformanceSummary:
    performance_score: float
    recent_average: float
    band: str
    answered_count: int

    def to_dict(self) -> dict:
        return asdict(self)


class AdvisorSuggestion(BaseDTO):
    """
    Untrusted suggestion. domain and difficulty are kept as raw strings and
    validated by the selector.
    """
    model_config = ConfigDict(str_strip_whitespace=False)

    domain: Optional[str] = None
    difficulty: Optional[str] = None
    reasoning: str = ""

    @field_validator("domain", "difficulty", mode="before")
    @classmethod
    def _drop_non_string(cls, value):
        # Non-string values are left for the selector to replace with the current one.
        return value if isinstance(value, str) else None

    @field_validator("reasoning", mode="before")
    @classmethod
    def _reasoning_text(cls, value):
        return value if isinstance(value, str) else ""


class NextParamsAdvisor(ABC):
    @abstractmethod
    async def suggest_next_params(
        self,
        domain: Domain,
        difficulty: Difficulty,
        summary: PerformanceSummary,
    ) -> AdvisorSuggestion:
        """
        Suggest the next question's domain and difficulty.
        May raise; callers treat any failure as "no suggestion".
        """
        pass


ADVISOR_PROMPT = """You are an AI assistant helping to generate appropriate interview questions. Based on the candidate's performance, suggest the next question parameters.

Current Domain: {domain}
Current Difficulty: {difficulty}
Previous Performance: {performance}

Allowed domains: {domains}
Allowed difficulties: easy, medium, hard

Suggest the next question parameters in JSON format:
{{
  "domain": "data_structures",
  "difficulty": "medium",
  "reasoning": "Explanation for the choice"
}}

Consider:
- If performance is high (>=0.7), consider increasing difficulty or moving to a harder domain
- If performance is low (<0.5), maintain or decrease difficulty
- If performance is medium (0.5-0.7), maintain current level
- Ensure domain progression makes sense

Return ONLY the JSON object."""


class LLMNextParamsAdvisor(NextParamsAdvisor):
    def __init__(self, llm: ILLMProvider):
        self.llm = llm

    async def suggest_next_params(self, domain, difficulty, summary):
        prompt = ADVISOR_PROMPT.format(
            domain=Domain(domain).value,
            difficulty=Difficulty(difficulty).value,
            performance=json.dumps(summary.to_dict()),
            domains=", ".join(d.value for d in Domain),
        )
        response = await self.llm.chat([LLMMessageDTO(role="user", content=prompt)])
        data = extract_json_object(response.content)
        try:
            return AdvisorSuggestion.model_validate(data)
        except ValidationError as e:
            raise ExternalCallError("Invalid advisor reply", details={"errors": e.errors()}) from e
