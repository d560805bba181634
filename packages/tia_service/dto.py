from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from packages.tia_report.dto import SessionReport


class QuestionView(BaseModel):
    question_id: str
    question_text: str
    domain: str
    difficulty: str
    expected_key_points: List[str] = []


class SessionInfo(BaseModel):
    current_domain: str
    current_difficulty: str
    questions_answered: int = 0
    total_questions: int = 0
    started_at: Optional[datetime] = None
    timeout_at: Optional[datetime] = None


class EvaluationView(BaseModel):
    correctness: float
    clarity: float
    confidence: float
    feedback: Optional[str] = None


class StartSessionResult(BaseModel):
    session_id: str
    candidate_id: str
    first_question: QuestionView
    session_info: SessionInfo


class EvaluateAnswerResult(BaseModel):
    """
    Either session_ended is True and final_report is set, or next_question is set.
    """
    evaluation: EvaluationView
    session_ended: bool = False
    reason: Optional[str] = None
    final_report: Optional[SessionReport] = None
    next_question: Optional[QuestionView] = None
    session_info: Optional[SessionInfo] = None
    adaptive_reasoning: Optional[str] = None


class EndSessionSummary(BaseModel):
    session_id: str
    total_questions: int
    questions_answered: int
    session_score: float
    duration_minutes: int


class EndSessionResult(BaseModel):
    session_summary: EndSessionSummary
    report: SessionReport


class SessionListItem(BaseModel):
    session_id: str
    status: str
    total_questions: int
    session_score: Optional[float] = None
    started_at: datetime
    ended_at: Optional[datetime] = None
    duration_minutes: Optional[int] = None


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class CandidateSessionsResult(BaseModel):
    sessions: List[SessionListItem]
    pagination: Pagination
