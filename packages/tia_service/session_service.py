import random
from datetime import datetime, timezone
from typing import Callable, List, Optional

from packages.tia_adaptive.difficulty import Difficulty
from packages.tia_adaptive.domains import Domain
from packages.tia_adaptive.selector import AdaptiveSelector
from packages.tia_adaptive.termination import TerminationPolicy
from packages.tia_core.dto import AnswerEvaluation
from packages.tia_core.errors import (
    InvalidSessionStateError,
    NotFoundError,
    QuestionAlreadyAnsweredError,
    SessionConflictError,
)
from packages.tia_core.logging import get_logger
from packages.tia_providers.evaluator import AnswerEvaluator, mock_evaluation
from packages.tia_providers.resilience import FALLBACK, call_with_fallback
from packages.tia_qbank.service import QuestionBankService
from packages.tia_report.dto import SessionReport
from packages.tia_report.engine import SessionReportGenerator, duration_minutes
from packages.tia_service.concurrency import SessionLockManager
from packages.tia_service.dto import (
    CandidateSessionsResult,
    EndSessionResult,
    EndSessionSummary,
    EvaluateAnswerResult,
    Pagination,
    StartSessionResult,
)
from packages.tia_service.mapper import SessionMapper
from packages.tia_session.dto import AnswerRecord, AskedQuestion, Candidate, EvaluationRecord, InterviewSession
from packages.tia_session.repository import CandidateRepository, EvaluationRepository, SessionRepository
from packages.tia_session.state import ExperienceLevel

logger = get_logger("tia.service.session")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InterviewSessionService:
    """
    Application Service for persisted interview sessions.
    Responsible for:
    1. Loading and saving session, candidate and evaluation records
    2. Concurrency Control (fail-fast per-session lock)
    3. Orchestrating evaluator, termination policy and adaptive selector
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        candidate_repo: CandidateRepository,
        evaluation_repo: EvaluationRepository,
        question_bank: QuestionBankService,
        selector: AdaptiveSelector,
        evaluator: AnswerEvaluator,
        termination: Optional[TerminationPolicy] = None,
        locks: Optional[SessionLockManager] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utcnow,
        evaluation_timeout_sec: float = 30.0,
        session_timeout_sec: int = 3600,
        default_domain: Domain = Domain.DATA_STRUCTURES,
        default_difficulty: Difficulty = Difficulty.MEDIUM,
    ):
        self.session_repo = session_repo
        self.candidate_repo = candidate_repo
        self.evaluation_repo = evaluation_repo
        self.question_bank = question_bank
        self.selector = selector
        self.evaluator = evaluator
        self.termination = termination or TerminationPolicy()
        self.locks = locks or SessionLockManager()
        self.rng = rng or random.Random()
        self.clock = clock
        self.evaluation_timeout_sec = evaluation_timeout_sec
        self.session_timeout_sec = session_timeout_sec
        self.default_domain = Domain(default_domain)
        self.default_difficulty = Difficulty(default_difficulty)

    def _load(self, session_id: str) -> InterviewSession:
        session = self.session_repo.get(session_id)
        if session is None:
            raise NotFoundError("Session", session_id)
        return session

    def _load_active(self, session_id: str) -> InterviewSession:
        session = self._load(session_id)
        if not session.is_active:
            raise InvalidSessionStateError(session_id, session.status.value)
        return session

    async def start_session(
        self,
        candidate_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        experience_level: Optional[ExperienceLevel] = None,
        preferred_domains: Optional[List[Domain]] = None,
    ) -> StartSessionResult:
        now = self.clock()
        candidate = self.candidate_repo.get(candidate_id)
        if candidate is None:
            candidate = Candidate(
                candidate_id=candidate_id,
                name=name or "Anonymous",
                email=email,
                experience_level=experience_level or ExperienceLevel.JUNIOR,
                preferred_domains=list(preferred_domains or [self.default_domain]),
                created_at=now,
            )
            self.candidate_repo.save(candidate)
            logger.info(f"Registered candidate {candidate_id}")

        active = self.session_repo.find_active_by_candidate(candidate_id)
        if active is not None:
            raise SessionConflictError(candidate_id, active.session_id)

        preferred = preferred_domains or candidate.preferred_domains
        domain = Domain(preferred[0]) if preferred else self.default_domain

        session = InterviewSession.open(
            candidate_id=candidate_id,
            domain=domain,
            difficulty=self.default_difficulty,
            now=now,
            timeout_sec=self.session_timeout_sec,
        )
        question = self.question_bank.draw_question(domain, self.default_difficulty, rng=self.rng)
        session.record_question(AskedQuestion(
            question_id=question.question_id,
            question_text=question.question_text,
            difficulty=question.difficulty,
            domain=question.domain,
            expected_key_points=list(question.expected_key_points),
            asked_at=now,
        ))
        self.session_repo.save(session)

        logger.info(f"Started session {session.session_id} for {candidate_id} on {domain.value}")
        return StartSessionResult(
            session_id=session.session_id,
            candidate_id=candidate_id,
            first_question=SessionMapper.question_view(session.questions_asked[-1]),
            session_info=SessionMapper.session_info(session),
        )

    async def _evaluate(self, question: AskedQuestion, answer: str) -> AnswerEvaluation:
        evaluation = await call_with_fallback(
            self.evaluator.evaluate(question.question_text, answer, list(question.expected_key_points)),
            self.evaluation_timeout_sec,
            "evaluator",
        )
        if evaluation is FALLBACK:
            return mock_evaluation(answer, question.expected_key_points, self.rng)
        return evaluation

    async def evaluate_answer(
        self,
        session_id: str,
        question_id: str,
        answer: str,
        candidate_id: Optional[str] = None,
    ) -> EvaluateAnswerResult:
        """
        Evaluate an answer, then either end the session or pick the next question.
        Nothing is persisted unless the whole step succeeds.
        """
        with self.locks.acquire_lock(session_id):
            session = self._load_active(session_id)
            asked = next((q for q in session.questions_asked if q.question_id == question_id), None)
            if asked is None:
                raise NotFoundError("Question", question_id)
            if any(r.question_id == question_id for r in session.evaluations):
                raise QuestionAlreadyAnsweredError(session_id, question_id)
            if candidate_id and candidate_id != session.candidate_id:
                logger.warning(f"Candidate {candidate_id} submitted to session {session_id} of {session.candidate_id}")

            evaluation = await self._evaluate(asked, answer)
            now = self.clock()
            record = EvaluationRecord.create(session.session_id, session.candidate_id, asked, answer, evaluation, now)
            session.evaluations.append(AnswerRecord(
                question_id=question_id,
                answer=answer,
                evaluation=evaluation,
                answered_at=now,
            ))

            decision = self.termination.should_end(session, now)
            if decision.should_end:
                self.termination.finalize(session, decision.reason, now)
                self.evaluation_repo.add(record)
                self.session_repo.save(session)
                self._update_candidate_stats(session.candidate_id)
                return EvaluateAnswerResult(
                    evaluation=SessionMapper.evaluation_view(evaluation),
                    session_ended=True,
                    reason=decision.reason.value,
                    final_report=self._report(session),
                )

            selection = await self.selector.select_next(session, evaluation)
            self.evaluation_repo.add(record)
            self.session_repo.save(session)

            return EvaluateAnswerResult(
                evaluation=SessionMapper.evaluation_view(evaluation),
                next_question=SessionMapper.question_view(session.questions_asked[-1]),
                session_info=SessionMapper.session_info(session),
                adaptive_reasoning=selection.params.reasoning,
            )

    async def end_session(self, session_id: str) -> EndSessionResult:
        with self.locks.acquire_lock(session_id):
            session = self._load_active(session_id)
            now = self.clock()
            self.termination.finalize(session, None, now)
            self.session_repo.save(session)
            self._update_candidate_stats(session.candidate_id)

            return EndSessionResult(
                session_summary=EndSessionSummary(
                    session_id=session.session_id,
                    total_questions=session.total_questions,
                    questions_answered=len(session.evaluations),
                    session_score=session.session_score,
                    duration_minutes=duration_minutes(session),
                ),
                report=self._report(session),
            )

    def get_session(self, session_id: str) -> InterviewSession:
        return self._load(session_id)

    def get_report(self, session_id: str) -> SessionReport:
        return self._report(self._load(session_id))

    def list_candidate_sessions(self, candidate_id: str, limit: int = 10, offset: int = 0) -> CandidateSessionsResult:
        sessions, total = self.session_repo.list_by_candidate(candidate_id, limit, offset)
        return CandidateSessionsResult(
            sessions=[SessionMapper.list_item(s) for s in sessions],
            pagination=Pagination(
                total=total,
                limit=limit,
                offset=offset,
                has_more=total > offset + limit,
            ),
        )

    def _report(self, session: InterviewSession) -> SessionReport:
        return SessionReportGenerator.generate(
            session,
            self.evaluation_repo.list_by_session(session.session_id),
            self.candidate_repo.get(session.candidate_id),
            now=self.clock(),
        )

    def _update_candidate_stats(self, candidate_id: str) -> None:
        candidate = self.candidate_repo.get(candidate_id)
        if candidate is None:
            return
        candidate.total_sessions += 1
        records = self.evaluation_repo.list_by_candidate(candidate_id)
        if records:
            candidate.average_score = sum(r.overall_score for r in records) / len(records)
        self.candidate_repo.save(candidate)
