import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from packages.tia_core.dto import AnswerEvaluation
from packages.tia_core.logging import get_logger
from packages.tia_providers.advisor import AdvisorSuggestion, NextParamsAdvisor, PerformanceSummary
from packages.tia_providers.resilience import FALLBACK, call_with_fallback
from packages.tia_qbank.domain import Question
from packages.tia_qbank.service import QuestionBankService
from packages.tia_session.dto import AskedQuestion, InterviewSession
from .difficulty import Difficulty, decrease, increase, parse_difficulty
from .domains import Domain, parse_domain, successor
from .scoring import DECREASE_THRESHOLD, INCREASE_THRESHOLD, classify, performance_score

logger = get_logger("tia.adaptive.selector")

RECENT_WINDOW = 3
PROGRESSION_RUN = 3
PROGRESSION_THRESHOLD = 0.6


@dataclass(frozen=True)
class NextParams:
    domain: Domain
    difficulty: Difficulty
    reasoning: str
    source: str = "advisor"


@dataclass(frozen=True)
class Selection:
    params: NextParams
    question: Question


def recent_average(session: InterviewSession, fallback: float, window: int = RECENT_WINDOW) -> float:
    """Mean performance over the last `window` evaluations, or `fallback` when there are none."""
    recent = session.evaluations[-window:]
    if not recent:
        return fallback
    return sum(performance_score(r.evaluation) for r in recent) / len(recent)


def apply_score_rule(difficulty: Difficulty, score: float) -> Difficulty:
    """Increase at >= 0.7, decrease below 0.5, otherwise unchanged."""
    if score >= INCREASE_THRESHOLD:
        return increase(difficulty)
    if score < DECREASE_THRESHOLD:
        return decrease(difficulty)
    return Difficulty(difficulty)


def trailing_domain_run(session: InterviewSession, domain: Domain, limit: int = PROGRESSION_RUN) -> int:
    """Length of the most recent contiguous run of asked questions in `domain`, capped at `limit`."""
    run = 0
    for asked in reversed(session.questions_asked):
        if asked.domain != domain or run >= limit:
            break
        run += 1
    return run


def validate_suggestion(
    suggestion: AdvisorSuggestion,
    session: InterviewSession,
    recent_avg: float,
) -> NextParams:
    """
    Unknown domain or difficulty falls back to the session's current value.

    A recent average >= 0.7 forces increase(current difficulty) and one below
    0.5 forces decrease(current difficulty), whatever the advisor suggested.
    In between, the validated suggestion stands. The domain is only validated.
    """
    domain = parse_domain(suggestion.domain) or session.current_domain
    difficulty = parse_difficulty(suggestion.difficulty) or session.current_difficulty
    if recent_avg >= INCREASE_THRESHOLD or recent_avg < DECREASE_THRESHOLD:
        difficulty = apply_score_rule(session.current_difficulty, recent_avg)
    return NextParams(
        domain=domain,
        difficulty=difficulty,
        reasoning=suggestion.reasoning or f"Adjusted based on performance score: {recent_avg:.2f}",
        source="advisor",
    )


def fallback_params(session: InterviewSession, score: float) -> NextParams:
    """
    Rule-based choice used when the advisor is unavailable.
    Moves to the next domain only after a run of 3 questions in the current
    domain with score >= 0.6.
    """
    difficulty = apply_score_rule(session.current_difficulty, score)

    domain = session.current_domain
    if (
        trailing_domain_run(session, domain) >= PROGRESSION_RUN
        and score >= PROGRESSION_THRESHOLD
    ):
        domain = successor(domain)

    return NextParams(
        domain=domain,
        difficulty=difficulty,
        reasoning=f"fallback rule-based selection (performance {score:.2f})",
        source="fallback",
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AdaptiveSelector:
    """
    Picks the next question's domain and difficulty and records the question.

    The advisor is optional. Without it, or when it fails or times out, the
    rule-based fallback decides.
    """

    def __init__(
        self,
        question_bank: QuestionBankService,
        advisor: Optional[NextParamsAdvisor] = None,
        rng: Optional[random.Random] = None,
        advisor_timeout_sec: float = 15.0,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.question_bank = question_bank
        self.advisor = advisor
        self.rng = rng or random.Random()
        self.advisor_timeout_sec = advisor_timeout_sec
        self.clock = clock

    async def choose_params(
        self,
        session: InterviewSession,
        last_evaluation: Optional[AnswerEvaluation],
    ) -> NextParams:
        score = performance_score(last_evaluation)
        recent_avg = recent_average(session, fallback=score)

        suggestion = FALLBACK
        if self.advisor is not None:
            summary = PerformanceSummary(
                performance_score=round(score, 3),
                recent_average=round(recent_avg, 3),
                band=classify(score).value,
                answered_count=len(session.evaluations),
            )
            suggestion = await call_with_fallback(
                self.advisor.suggest_next_params(session.current_domain, session.current_difficulty, summary),
                self.advisor_timeout_sec,
                "advisor",
            )

        if suggestion is FALLBACK:
            return fallback_params(session, score)
        return validate_suggestion(suggestion, session, recent_avg)

    async def select_next(
        self,
        session: InterviewSession,
        last_evaluation: Optional[AnswerEvaluation],
    ) -> Selection:
        """
        Choose params, draw a question and record it on the session.

        The draw happens before any mutation, so a NoQuestionAvailableError
        leaves the session untouched.
        """
        params = await self.choose_params(session, last_evaluation)
        question = self.question_bank.draw_question(
            params.domain,
            params.difficulty,
            exclude_ids=session.asked_question_ids(),
            rng=self.rng,
        )

        session.current_domain = params.domain
        session.current_difficulty = params.difficulty
        session.record_question(AskedQuestion(
            question_id=question.question_id,
            question_text=question.question_text,
            difficulty=question.difficulty,
            domain=question.domain,
            expected_key_points=list(question.expected_key_points),
            asked_at=self.clock(),
        ))

        logger.info(
            f"Session {session.session_id}: next {params.domain.value}/{params.difficulty.value} "
            f"({params.source}) -> {question.question_id}"
        )
        return Selection(params=params, question=question)
