from abc import ABC, abstractmethod
from typing import List, Optional

from .domain import Question


class QuestionRepository(ABC):
    """
    Abstract Interface for Question Bank Repository.
    """

    @abstractmethod
    def save(self, question: Question) -> None:
        """Save a question (create or update)."""
        pass

    @abstractmethod
    def find_by_id(self, question_id: str) -> Optional[Question]:
        """Find a question by ID, regardless of status."""
        pass

    @abstractmethod
    def find_all_active(self) -> List[Question]:
        """Find all ACTIVE questions."""
        pass

    @abstractmethod
    def delete(self, question_id: str) -> bool:
        """Soft delete a question by ID."""
        pass


class InMemoryQuestionRepository(QuestionRepository):
    """
    Dict-backed repository, used by tests and when no bank file is configured.
    """

    def __init__(self, questions: Optional[List[Question]] = None):
        self._store = {q.question_id: q for q in (questions or [])}

    def save(self, question: Question) -> None:
        self._store[question.question_id] = question

    def find_by_id(self, question_id: str) -> Optional[Question]:
        return self._store.get(question_id)

    def find_all_active(self) -> List[Question]:
        return [q for q in self._store.values() if q.is_active()]

    def delete(self, question_id: str) -> bool:
        question = self._store.get(question_id)
        if question is None:
            return False
        question.mark_deleted()
        return True
