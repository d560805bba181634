from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .dto import Candidate, EvaluationRecord, InterviewSession


class SessionRepository(ABC):
    """
    Interface for persisted interview sessions.
    """
    @abstractmethod
    def save(self, session: InterviewSession) -> None:
        pass

    @abstractmethod
    def get(self, session_id: str) -> Optional[InterviewSession]:
        pass

    @abstractmethod
    def find_active_by_candidate(self, candidate_id: str) -> Optional[InterviewSession]:
        pass

    @abstractmethod
    def list_by_candidate(self, candidate_id: str, limit: int, offset: int) -> Tuple[List[InterviewSession], int]:
        """
        Sessions of a candidate, newest first.
        Returns (page, total_count).
        """
        pass


class CandidateRepository(ABC):
    @abstractmethod
    def save(self, candidate: Candidate) -> None:
        pass

    @abstractmethod
    def get(self, candidate_id: str) -> Optional[Candidate]:
        pass


class EvaluationRepository(ABC):
    """
    Append-only store of evaluated answers.
    """
    @abstractmethod
    def add(self, record: EvaluationRecord) -> None:
        pass

    @abstractmethod
    def list_by_session(self, session_id: str) -> List[EvaluationRecord]:
        pass

    @abstractmethod
    def list_by_candidate(self, candidate_id: str) -> List[EvaluationRecord]:
        pass
