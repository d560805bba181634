from .domain import Question, QuestionStatus
from .repository import JsonFileQuestionRepository
from .repository_interface import InMemoryQuestionRepository, QuestionRepository
from .service import QuestionBankService

__all__ = [
    "Question",
    "QuestionStatus",
    "QuestionRepository",
    "InMemoryQuestionRepository",
    "JsonFileQuestionRepository",
    "QuestionBankService",
]
