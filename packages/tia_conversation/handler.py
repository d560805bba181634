import random
from datetime import datetime, timezone
from typing import Callable, Optional

from packages.tia_adaptive.difficulty import Difficulty, alternate, decrease, increase, random_difficulty
from packages.tia_adaptive.domains import Domain, random_domain
from packages.tia_adaptive.scoring import PerformanceBand, band_proxy_score, classify
from packages.tia_core.dto import AnswerEvaluation
from packages.tia_core.logging import get_logger
from packages.tia_providers.evaluator import AnswerEvaluator, mock_evaluation
from packages.tia_providers.question import GeneratedQuestion, PreviousResponse, QuestionGenerator, fallback_question
from packages.tia_providers.resilience import FALLBACK, call_with_fallback
from .coverage import keyword_coverage
from .dto import ConversationState, ConversationTurn, LastQuestion, QuestionPayload, TurnResult
from .store import ConversationStore

logger = get_logger("tia.conversation.handler")

EMPTY_SUBMISSION_MESSAGE = "No Response: empty submission."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_difficulty(current: Difficulty, band: PerformanceBand, rng: random.Random) -> Difficulty:
    """
    correct -> up, incorrect/timeout -> down, partial -> same.
    If that leaves the rung unchanged, pick one of the other two rungs.
    """
    if band == PerformanceBand.CORRECT:
        target = increase(current)
    elif band in (PerformanceBand.INCORRECT, PerformanceBand.TIMEOUT):
        target = decrease(current)
    else:
        target = Difficulty(current)

    if target == current:
        target = alternate(current, rng)
    return target


def to_question_payload(question: GeneratedQuestion) -> QuestionPayload:
    return QuestionPayload(
        problem=question.question_text,
        difficulty=question.difficulty.value.capitalize(),
    )


class ConversationTurnHandler:
    """
    Cookie-keyed adaptive loop.

    Each turn evaluates the previous answer, moves the difficulty (always to a
    different rung), rotates the topic at random and asks a generated question.
    """

    def __init__(
        self,
        generator: QuestionGenerator,
        evaluator: AnswerEvaluator,
        store: ConversationStore,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utcnow,
        response_timeout_sec: int = 90,
        default_difficulty: Optional[Difficulty] = None,
        evaluation_timeout_sec: float = 30.0,
        generation_timeout_sec: float = 30.0,
    ):
        self.generator = generator
        self.evaluator = evaluator
        self.store = store
        self.rng = rng or random.Random()
        self.clock = clock
        self.response_timeout_sec = response_timeout_sec
        self.default_difficulty = Difficulty(default_difficulty) if default_difficulty else None
        self.evaluation_timeout_sec = evaluation_timeout_sec
        self.generation_timeout_sec = generation_timeout_sec

    @property
    def timeout_message(self) -> str:
        return f"No Response: timed out after {self.response_timeout_sec} seconds."

    def _starting_difficulty(self) -> Difficulty:
        return self.default_difficulty or random_difficulty(self.rng)

    async def _generate(
        self,
        topic: Domain,
        difficulty: Difficulty,
        previous: Optional[PreviousResponse],
    ) -> GeneratedQuestion:
        question = await call_with_fallback(
            self.generator.generate(topic, difficulty, previous),
            self.generation_timeout_sec,
            "generator",
        )
        if question is FALLBACK:
            return fallback_question(topic, difficulty)
        if question.difficulty != difficulty:
            logger.debug(f"Generator returned {question.difficulty.value}, keeping requested {difficulty.value}")
            question = question.model_copy(update={"difficulty": difficulty})
        return question

    async def _evaluate(self, last: LastQuestion, answer: str) -> AnswerEvaluation:
        evaluation = await call_with_fallback(
            self.evaluator.evaluate(last.question_text, answer, list(last.expected_key_points)),
            self.evaluation_timeout_sec,
            "evaluator",
        )
        if evaluation is FALLBACK:
            return mock_evaluation(answer, last.expected_key_points, self.rng)
        return evaluation

    def _remember(self, state: ConversationState, question: GeneratedQuestion) -> None:
        state.last_question = LastQuestion(
            question_id=question.question_id,
            question_text=question.question_text,
            expected_key_points=list(question.expected_key_points),
            asked_at=self.clock(),
            domain=question.domain,
        )

    async def handle_turn(self, token: str, answer_text: Optional[str]) -> TurnResult:
        state = self.store.get(token)
        if state is None:
            state = ConversationState(
                topic=random_domain(self.rng),
                difficulty=self._starting_difficulty(),
            )

        if state.last_question is None:
            question = await self._generate(state.topic, state.difficulty, None)
            self._remember(state, question)
            self.store.save(token, state)
            logger.info(f"Conversation {token} started on {state.topic.value}/{state.difficulty.value}")
            return TurnResult(evaluation=None, next_question=to_question_payload(question))

        last = state.last_question
        answer = answer_text or ""
        now = self.clock()
        blank = not answer.strip()
        timed_out = (now - last.asked_at).total_seconds() > self.response_timeout_sec

        if blank and timed_out:
            band = PerformanceBand.TIMEOUT
            evaluation_text = self.timeout_message
        elif blank:
            band = PerformanceBand.INCORRECT
            evaluation_text = EMPTY_SUBMISSION_MESSAGE
        else:
            evaluation = await self._evaluate(last, answer)
            band = classify(evaluation.average)
            evaluation_text = evaluation.feedback or "Evaluated."

        covered, missed = keyword_coverage(answer, last.expected_key_points)
        target = next_difficulty(state.difficulty, band, self.rng)

        state.history.append(ConversationTurn(
            question_id=last.question_id,
            answer=answer,
            evaluation=evaluation_text,
            difficulty=state.difficulty,
            performance=band,
            covered_key_points=covered,
            missed_key_points=missed,
            responded_at=now,
        ))

        previous = PreviousResponse(
            performance_band=band.value,
            performance_score=band_proxy_score(band),
            previous_answer=answer,
            covered_key_points=covered,
            missed_key_points=missed,
            previous_question=last.question_text,
        )
        state.topic = random_domain(self.rng)

        question = await self._generate(state.topic, target, previous)
        state.difficulty = target
        self._remember(state, question)
        self.store.save(token, state)

        logger.info(
            f"Conversation {token}: band={band.value}, difficulty -> {target.value}, topic -> {state.topic.value}"
        )
        return TurnResult(evaluation=evaluation_text, next_question=to_question_payload(question))
