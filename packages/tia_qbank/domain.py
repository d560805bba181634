from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from packages.tia_adaptive.difficulty import Difficulty
from packages.tia_adaptive.domains import Domain


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuestionStatus(str, Enum):
    """
    Status of the question in the bank.
    """
    ACTIVE = "ACTIVE"
    DELETED = "DELETED"  # Soft Deleted


@dataclass
class Question:
    """
    Represents a question asset in the Question Bank.
    """
    question_id: str
    question_text: str
    domain: Domain
    difficulty: Difficulty
    expected_key_points: List[str] = field(default_factory=list)
    sample_answer: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    status: QuestionStatus = QuestionStatus.ACTIVE
    updated_at: datetime = field(default_factory=utcnow)

    def mark_deleted(self):
        """Soft delete the question."""
        self.status = QuestionStatus.DELETED
        self.updated_at = utcnow()

    def is_active(self) -> bool:
        return self.status == QuestionStatus.ACTIVE
