import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import ConfigDict, Field

from packages.tia_adaptive.difficulty import Difficulty
from packages.tia_adaptive.domains import Domain
from packages.tia_core.dto import AnswerEvaluation, BaseDTO
from .state import ExperienceLevel, SessionStatus


def new_session_id() -> str:
    return str(uuid.uuid4())


class AskedQuestion(BaseDTO):
    """
    Snapshot of a question at the moment it was asked.
    Stores the text by value so later bank edits do not rewrite history.
    """
    question_id: str
    question_text: str
    difficulty: Difficulty
    domain: Domain
    expected_key_points: List[str] = Field(default_factory=list)
    asked_at: datetime


class AnswerRecord(BaseDTO):
    """Answer text is stored verbatim."""
    model_config = ConfigDict(str_strip_whitespace=False)

    question_id: str
    answer: str
    evaluation: AnswerEvaluation
    answered_at: datetime


class InterviewSession(BaseDTO):
    """
    Persisted interview session.
    questions_asked and evaluations are append-only; total_questions always
    equals len(questions_asked).
    """
    session_id: str = Field(default_factory=new_session_id)
    candidate_id: str
    status: SessionStatus = SessionStatus.ACTIVE
    current_difficulty: Difficulty = Difficulty.MEDIUM
    current_domain: Domain = Domain.DATA_STRUCTURES
    questions_asked: List[AskedQuestion] = Field(default_factory=list)
    evaluations: List[AnswerRecord] = Field(default_factory=list)
    current_question_index: int = 0
    total_questions: int = 0
    session_score: Optional[float] = None
    started_at: datetime
    ended_at: Optional[datetime] = None
    timeout_at: datetime

    @classmethod
    def open(
        cls,
        candidate_id: str,
        domain: Domain,
        difficulty: Difficulty,
        now: datetime,
        timeout_sec: int = 3600,
        session_id: Optional[str] = None,
    ) -> "InterviewSession":
        return cls(
            session_id=session_id or new_session_id(),
            candidate_id=candidate_id,
            current_domain=domain,
            current_difficulty=difficulty,
            started_at=now,
            timeout_at=now + timedelta(seconds=timeout_sec),
        )

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    @property
    def current_question(self) -> Optional[AskedQuestion]:
        return self.questions_asked[-1] if self.questions_asked else None

    @property
    def last_activity_at(self) -> datetime:
        """Time the most recent question was asked, or session start."""
        if self.questions_asked:
            return self.questions_asked[-1].asked_at
        return self.started_at

    def asked_question_ids(self) -> List[str]:
        return [q.question_id for q in self.questions_asked]

    def record_question(self, question: AskedQuestion) -> None:
        """Append a question and advance both counters."""
        self.questions_asked.append(question)
        self.total_questions = len(self.questions_asked)
        self.current_question_index = self.total_questions - 1

    def calculate_session_score(self) -> float:
        """Mean per-answer average across all evaluations, 0 when nothing was answered."""
        if not self.evaluations:
            return 0.0
        total = sum(record.evaluation.average for record in self.evaluations)
        return total / len(self.evaluations)


class EvaluationRecord(BaseDTO):
    """
    One evaluated answer. overall_score is fixed when the record is created.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=False)

    evaluation_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    session_id: str
    candidate_id: str
    question_id: str
    domain: Domain
    difficulty: Difficulty
    answer: str
    correctness: float = Field(ge=0.0, le=1.0)
    clarity: float = Field(ge=0.0, le=1.0)
    confidence: float = Field(ge=0.0, le=1.0)
    feedback: Optional[str] = None
    overall_score: float
    created_at: datetime

    @classmethod
    def create(
        cls,
        session_id: str,
        candidate_id: str,
        question: AskedQuestion,
        answer: str,
        evaluation: AnswerEvaluation,
        now: datetime,
    ) -> "EvaluationRecord":
        return cls(
            session_id=session_id,
            candidate_id=candidate_id,
            question_id=question.question_id,
            domain=question.domain,
            difficulty=question.difficulty,
            answer=answer,
            correctness=evaluation.correctness,
            clarity=evaluation.clarity,
            confidence=evaluation.confidence,
            feedback=evaluation.feedback,
            overall_score=evaluation.average,
            created_at=now,
        )


class Candidate(BaseDTO):
    candidate_id: str
    name: str = "Anonymous"
    email: Optional[str] = None
    experience_level: ExperienceLevel = ExperienceLevel.JUNIOR
    preferred_domains: List[Domain] = Field(default_factory=list)
    total_sessions: int = 0
    average_score: float = 0.0
    created_at: Optional[datetime] = None
