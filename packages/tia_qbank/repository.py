import json
import os
from datetime import datetime
from typing import List, Optional

from packages.tia_adaptive.difficulty import Difficulty
from packages.tia_adaptive.domains import Domain
from packages.tia_core.logging import get_logger
from .domain import Question, QuestionStatus, utcnow
from .repository_interface import QuestionRepository

logger = get_logger("tia.qbank.repository")


class JsonFileQuestionRepository(QuestionRepository):
    """
    File-based implementation of QuestionRepository using a single JSON file.
    The whole file is read and rewritten on each operation.
    """

    def __init__(self, file_path: str):
        self.file_path = file_path
        self._ensure_file_exists()

    def _ensure_file_exists(self):
        if not os.path.exists(self.file_path):
            directory = os.path.dirname(self.file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.file_path, 'w', encoding='utf-8') as f:
                json.dump([], f)

    def _load_all(self) -> List[Question]:
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load questions from {self.file_path}: {e}")
            return []

        questions = []
        for item in data:
            try:
                questions.append(Question(
                    question_id=item['question_id'],
                    question_text=item['question_text'],
                    domain=Domain(item['domain']),
                    difficulty=Difficulty(item['difficulty']),
                    expected_key_points=list(item.get('expected_key_points', [])),
                    sample_answer=item.get('sample_answer'),
                    tags=list(item.get('tags', [])),
                    status=QuestionStatus(item.get('status', QuestionStatus.ACTIVE.value)),
                    updated_at=datetime.fromisoformat(item['updated_at']) if item.get('updated_at') else utcnow(),
                ))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping malformed question entry {item.get('question_id')}: {e}")
        return questions

    def _save_all(self, questions: List[Question]):
        data = []
        for q in questions:
            data.append({
                'question_id': q.question_id,
                'question_text': q.question_text,
                'domain': q.domain.value,
                'difficulty': q.difficulty.value,
                'expected_key_points': q.expected_key_points,
                'sample_answer': q.sample_answer,
                'tags': q.tags,
                'status': q.status.value,
                'updated_at': q.updated_at.isoformat()
            })
        try:
            with open(self.file_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to save questions to {self.file_path}: {e}")
            raise

    def save(self, question: Question) -> None:
        questions = self._load_all()
        for i, q in enumerate(questions):
            if q.question_id == question.question_id:
                questions[i] = question
                self._save_all(questions)
                logger.info(f"Updated question {question.question_id} in bank.")
                return

        questions.append(question)
        self._save_all(questions)
        logger.info(f"Saved new question {question.question_id} to bank.")

    def replace_all(self, questions: List[Question]) -> None:
        """Overwrite the bank with the given questions."""
        self._save_all(questions)
        logger.info(f"Replaced question bank with {len(questions)} questions.")

    def find_by_id(self, question_id: str) -> Optional[Question]:
        for q in self._load_all():
            if q.question_id == question_id:
                return q
        return None

    def find_all_active(self) -> List[Question]:
        return [q for q in self._load_all() if q.is_active()]

    def delete(self, question_id: str) -> bool:
        questions = self._load_all()
        for q in questions:
            if q.question_id == question_id:
                q.mark_deleted()
                self._save_all(questions)
                logger.info(f"Soft deleted question {question_id}.")
                return True
        logger.warning(f"Attempted to delete non-existent question {question_id}.")
        return False
