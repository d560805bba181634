from typing import Any, List, Optional

from pydantic import BaseModel, EmailStr, Field

from packages.tia_adaptive.domains import Domain
from packages.tia_session.state import ExperienceLevel

# --- Request Schemas ---

class StartSessionRequest(BaseModel):
    candidate_id: str = Field(..., min_length=1, max_length=50)
    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    experience_level: Optional[ExperienceLevel] = None
    preferred_domains: Optional[List[Domain]] = None

class EvaluateAnswerRequest(BaseModel):
    session_id: str = Field(..., min_length=1, max_length=50)
    question_id: str = Field(..., min_length=1, max_length=50)
    answer: str = Field(..., min_length=1, max_length=5000)
    candidate_id: Optional[str] = Field(default=None, min_length=1, max_length=50)

class EndSessionRequest(BaseModel):
    session_id: str = Field(..., min_length=1, max_length=50)

class AdaptiveTurnRequest(BaseModel):
    answer: Optional[str] = Field(default=None, max_length=5000)

# --- Response Schemas ---

class ApiResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Any = None
