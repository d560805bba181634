from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BaseDTO(BaseModel):
    """
    Base class for every DTO in the project.

    Features:
        - from_attributes=True (build from plain objects)
        - str_strip_whitespace=True
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        populate_by_name=True
    )


# -------------------------------------------------------------------------
# LLM Provider DTOs
# -------------------------------------------------------------------------
class LLMMessageDTO(BaseDTO):
    role: str  # "system", "user", "assistant"
    content: str

class LLMResponseDTO(BaseDTO):
    content: str
    token_usage: dict[str, int] | None = None
    finish_reason: str | None = None


# -------------------------------------------------------------------------
# Answer evaluation
# -------------------------------------------------------------------------
class AnswerEvaluation(BaseDTO):
    """
    Three-axis evaluation of one answer. Producers clamp to [0, 1].
    """
    correctness: float = Field(..., ge=0.0, le=1.0)
    clarity: float = Field(..., ge=0.0, le=1.0)
    confidence: float = Field(..., ge=0.0, le=1.0)
    feedback: Optional[str] = None

    @property
    def average(self) -> float:
        return (self.correctness + self.clarity + self.confidence) / 3
