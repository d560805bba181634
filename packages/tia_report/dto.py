from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class SessionSummary(BaseModel):
    total_questions: int
    questions_answered: int
    session_duration_minutes: int
    overall_score: float
    performance_level: str


class GroupAnalysis(BaseModel):
    """
    Aggregate for one domain or one difficulty.
    """
    total_questions: int = 0
    average_score: float = 0.0


class Strength(BaseModel):
    category: str
    description: str
    score: float
    domain: Optional[str] = None
    difficulty: Optional[str] = None


class Weakness(BaseModel):
    category: str
    description: str
    score: Optional[float] = None
    priority: str = Field(..., description="high / medium / low")
    domain: Optional[str] = None
    difficulty: Optional[str] = None


class Recommendation(BaseModel):
    category: str
    priority: str
    action: str
    resources: List[str] = Field(default_factory=list)


class DetailedScore(BaseModel):
    question_id: str
    domain: str
    difficulty: str
    overall: float
    correctness: float
    clarity: float
    confidence: float
    feedback: Optional[str] = None


class SessionReport(BaseModel):
    """
    Final report for one interview session.
    """
    report_version: str = "1.0"
    session_id: str
    candidate_id: str
    candidate_name: str
    session_summary: SessionSummary
    domain_analysis: Dict[str, GroupAnalysis] = Field(default_factory=dict)
    difficulty_analysis: Dict[str, GroupAnalysis] = Field(default_factory=dict)
    strengths: List[Strength] = Field(default_factory=list)
    weaknesses: List[Weakness] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
    detailed_scores: List[DetailedScore] = Field(default_factory=list)
    generated_at: datetime
