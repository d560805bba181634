import random
from typing import Iterable, List, Optional

from packages.tia_adaptive.difficulty import Difficulty
from packages.tia_adaptive.domains import Domain
from packages.tia_core.errors import NoQuestionAvailableError, NotFoundError
from packages.tia_core.logging import get_logger
from .domain import Question
from .repository_interface import QuestionRepository

logger = get_logger("tia.qbank.service")


class QuestionBankService:
    """
    Facade for drawing questions from the bank.
    Only ACTIVE questions are ever drawn.
    """

    def __init__(self, repository: QuestionRepository, rng: Optional[random.Random] = None):
        self.repository = repository
        self.rng = rng or random.Random()

    def draw_question(
        self,
        domain: Domain,
        difficulty: Difficulty,
        exclude_ids: Iterable[str] = (),
        rng: Optional[random.Random] = None,
    ) -> Question:
        """
        Uniformly random ACTIVE question for (domain, difficulty), excluding exclude_ids.

        When nothing matches, constraints are relaxed in order:
          1. same domain, any difficulty (still excluding asked ids)
          2. same domain, repeats allowed
          3. any domain
        Raises NoQuestionAvailableError when the bank has no active question at all.
        """
        rng = rng or self.rng
        excluded = set(exclude_ids)
        active = self.repository.find_all_active()

        steps = [
            ("exact", lambda q: q.domain == domain and q.difficulty == difficulty and q.question_id not in excluded),
            ("domain", lambda q: q.domain == domain and q.question_id not in excluded),
            ("domain_repeat", lambda q: q.domain == domain),
            ("any", lambda q: True),
        ]
        for step, predicate in steps:
            candidates = [q for q in active if predicate(q)]
            if candidates:
                if step != "exact":
                    logger.info(f"Relaxed question draw to '{step}' for {domain.value}/{difficulty.value}")
                return rng.choice(candidates)

        raise NoQuestionAvailableError(details={"domain": domain.value, "difficulty": difficulty.value})

    def get_candidates(self, domain: Optional[Domain] = None, difficulty: Optional[Difficulty] = None) -> List[Question]:
        """ACTIVE questions, optionally filtered by domain and difficulty."""
        candidates = []
        for q in self.repository.find_all_active():
            if domain and q.domain != domain:
                continue
            if difficulty and q.difficulty != difficulty:
                continue
            candidates.append(q)
        return candidates

    def get_question_by_id(self, question_id: str) -> Question:
        """
        Retrieve a question by ID, even if soft deleted.
        """
        question = self.repository.find_by_id(question_id)
        if question is None:
            raise NotFoundError("Question", question_id)
        return question

    def soft_delete_question(self, question_id: str) -> bool:
        return self.repository.delete(question_id)
