from typing import Dict, List, Optional, Tuple

from packages.tia_session.dto import Candidate, EvaluationRecord, InterviewSession
from packages.tia_session.repository import CandidateRepository, EvaluationRepository, SessionRepository


class MemorySessionRepository(SessionRepository):
    """
    In-Memory implementation of SessionRepository.
    Stores copies so callers only observe state they explicitly saved.
    """
    def __init__(self):
        self._store: Dict[str, InterviewSession] = {}

    def save(self, session: InterviewSession) -> None:
        self._store[session.session_id] = session.model_copy(deep=True)

    def get(self, session_id: str) -> Optional[InterviewSession]:
        session = self._store.get(session_id)
        return session.model_copy(deep=True) if session else None

    def find_active_by_candidate(self, candidate_id: str) -> Optional[InterviewSession]:
        for session in self._store.values():
            if session.candidate_id == candidate_id and session.is_active:
                return session.model_copy(deep=True)
        return None

    def list_by_candidate(self, candidate_id: str, limit: int, offset: int) -> Tuple[List[InterviewSession], int]:
        matches = [s for s in self._store.values() if s.candidate_id == candidate_id]
        matches.sort(key=lambda s: s.started_at, reverse=True)
        page = matches[offset:offset + limit]
        return [s.model_copy(deep=True) for s in page], len(matches)


class MemoryCandidateRepository(CandidateRepository):
    def __init__(self):
        self._store: Dict[str, Candidate] = {}

    def save(self, candidate: Candidate) -> None:
        self._store[candidate.candidate_id] = candidate.model_copy(deep=True)

    def get(self, candidate_id: str) -> Optional[Candidate]:
        candidate = self._store.get(candidate_id)
        return candidate.model_copy(deep=True) if candidate else None


class MemoryEvaluationRepository(EvaluationRepository):
    def __init__(self):
        self._records: List[EvaluationRecord] = []

    def add(self, record: EvaluationRecord) -> None:
        # frozen, stored as-is
        self._records.append(record)

    def list_by_session(self, session_id: str) -> List[EvaluationRecord]:
        return [r for r in self._records if r.session_id == session_id]

    def list_by_candidate(self, candidate_id: str) -> List[EvaluationRecord]:
        return [r for r in self._records if r.candidate_id == candidate_id]
