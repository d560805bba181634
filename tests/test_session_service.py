import random
import unittest

from packages.tia_adaptive.difficulty import Difficulty
from packages.tia_adaptive.domains import Domain
from packages.tia_adaptive.selector import AdaptiveSelector
from packages.tia_adaptive.termination import TerminationPolicy
from packages.tia_core.errors import (
    InvalidSessionStateError,
    NoQuestionAvailableError,
    NotFoundError,
    QuestionAlreadyAnsweredError,
    SessionBusyError,
    SessionConflictError,
)
from packages.tia_service.session_service import InterviewSessionService
from packages.tia_session.infrastructure.memory_repo import (
    MemoryCandidateRepository,
    MemoryEvaluationRepository,
    MemorySessionRepository,
)
from packages.tia_session.state import ExperienceLevel, SessionStatus, TerminationReason
from tests.factories import FailingEvaluator, FakeClock, FixedEvaluator, full_grid_bank


class SessionServiceTestCase(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.session_repo = MemorySessionRepository()
        self.candidate_repo = MemoryCandidateRepository()
        self.evaluation_repo = MemoryEvaluationRepository()
        self.bank = full_grid_bank()
        self.evaluator = FixedEvaluator(0.9)

    def make_service(self, evaluator=None, termination=None):
        selector = AdaptiveSelector(self.bank, advisor=None, rng=random.Random(1), clock=self.clock)
        return InterviewSessionService(
            session_repo=self.session_repo,
            candidate_repo=self.candidate_repo,
            evaluation_repo=self.evaluation_repo,
            question_bank=self.bank,
            selector=selector,
            evaluator=evaluator or self.evaluator,
            termination=termination,
            rng=random.Random(2),
            clock=self.clock,
        )

    async def answer_current(self, service, session_id, answer="hash tables use buckets"):
        session = service.get_session(session_id)
        return await service.evaluate_answer(session_id, session.current_question.question_id, answer)


class TestStartSession(SessionServiceTestCase):

    async def test_start_registers_candidate_and_asks_first_question(self):
        service = self.make_service()
        result = await service.start_session("cand-1", name="Ada", experience_level=ExperienceLevel.SENIOR)

        self.assertEqual(result.candidate_id, "cand-1")
        self.assertEqual(result.first_question.domain, "data_structures")
        self.assertEqual(result.first_question.difficulty, "medium")
        self.assertEqual(result.session_info.total_questions, 1)
        self.assertEqual(result.session_info.questions_answered, 0)

        session = service.get_session(result.session_id)
        self.assertEqual(session.status, SessionStatus.ACTIVE)
        self.assertEqual(session.current_question_index, 0)

        candidate = self.candidate_repo.get("cand-1")
        self.assertEqual(candidate.name, "Ada")
        self.assertEqual(candidate.experience_level, ExperienceLevel.SENIOR)

    async def test_preferred_domain_is_used(self):
        service = self.make_service()
        result = await service.start_session("cand-1", preferred_domains=[Domain.SECURITY, Domain.DATABASE])
        self.assertEqual(result.first_question.domain, "security")

    async def test_second_active_session_conflicts(self):
        service = self.make_service()
        first = await service.start_session("cand-1")
        with self.assertRaises(SessionConflictError) as ctx:
            await service.start_session("cand-1")
        self.assertEqual(ctx.exception.details["session_id"], first.session_id)

    async def test_new_session_allowed_after_end(self):
        service = self.make_service()
        first = await service.start_session("cand-1")
        await service.end_session(first.session_id)
        second = await service.start_session("cand-1")
        self.assertNotEqual(first.session_id, second.session_id)


class TestEvaluateAnswer(SessionServiceTestCase):

    async def test_strong_answer_raises_difficulty(self):
        service = self.make_service()
        started = await service.start_session("cand-1")

        result = await self.answer_current(service, started.session_id)

        self.assertFalse(result.session_ended)
        self.assertAlmostEqual(result.evaluation.correctness, 0.9)
        self.assertEqual(result.next_question.difficulty, "hard")
        self.assertEqual(result.session_info.current_difficulty, "hard")
        self.assertEqual(result.session_info.total_questions, 2)
        self.assertEqual(result.session_info.questions_answered, 1)
        self.assertTrue(result.adaptive_reasoning.startswith("fallback rule-based"))

        records = self.evaluation_repo.list_by_session(started.session_id)
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].question_id, started.first_question.question_id)
        self.assertEqual(records[0].difficulty, Difficulty.MEDIUM)
        self.assertAlmostEqual(records[0].overall_score, 0.9)

    async def test_weak_answer_lowers_difficulty(self):
        service = self.make_service(evaluator=FixedEvaluator(0.2))
        started = await service.start_session("cand-1")
        result = await self.answer_current(service, started.session_id)
        self.assertEqual(result.next_question.difficulty, "easy")

    async def test_evaluator_failure_falls_back_to_mock_scores(self):
        service = self.make_service(evaluator=FailingEvaluator())
        started = await service.start_session("cand-1")
        result = await self.answer_current(service, started.session_id, "short")
        self.assertEqual(
            (result.evaluation.correctness, result.evaluation.clarity, result.evaluation.confidence),
            (0.5, 0.5, 0.5),
        )
        self.assertFalse(result.session_ended)

    async def test_unknown_session_and_question(self):
        service = self.make_service()
        with self.assertRaises(NotFoundError):
            await service.evaluate_answer("missing", "Q", "answer")
        started = await service.start_session("cand-1")
        with self.assertRaises(NotFoundError):
            await service.evaluate_answer(started.session_id, "not-asked", "answer")

    async def test_answered_question_cannot_be_resubmitted(self):
        service = self.make_service()
        started = await service.start_session("cand-1")
        first_id = started.first_question.question_id
        await service.evaluate_answer(started.session_id, first_id, "hash tables")

        with self.assertRaises(QuestionAlreadyAnsweredError):
            await service.evaluate_answer(started.session_id, first_id, "again")

        session = service.get_session(started.session_id)
        self.assertEqual([r.question_id for r in session.evaluations], [first_id])
        self.assertEqual(session.total_questions, 2)
        self.assertEqual(len(self.evaluation_repo.list_by_session(started.session_id)), 1)

    async def test_answer_text_is_stored_verbatim(self):
        service = self.make_service()
        started = await service.start_session("cand-1")
        await self.answer_current(service, started.session_id, "  indented code\n")
        session = service.get_session(started.session_id)
        self.assertEqual(session.evaluations[0].answer, "  indented code\n")
        self.assertEqual(self.evaluation_repo.list_by_session(started.session_id)[0].answer, "  indented code\n")

    async def test_ended_session_rejects_answers(self):
        service = self.make_service()
        started = await service.start_session("cand-1")
        await service.end_session(started.session_id)
        with self.assertRaises(InvalidSessionStateError):
            await service.evaluate_answer(started.session_id, started.first_question.question_id, "late")
        with self.assertRaises(InvalidSessionStateError):
            await service.end_session(started.session_id)

    async def test_busy_session_fails_fast(self):
        service = self.make_service()
        started = await service.start_session("cand-1")
        with service.locks.acquire_lock(started.session_id):
            with self.assertRaises(SessionBusyError):
                await self.answer_current(service, started.session_id)
        self.assertFalse(service.locks.is_locked(started.session_id))
        result = await self.answer_current(service, started.session_id)
        self.assertFalse(result.session_ended)

    async def test_exhausted_bank_persists_nothing(self):
        service = self.make_service()
        started = await service.start_session("cand-1")
        for question in self.bank.get_candidates():
            self.bank.soft_delete_question(question.question_id)

        with self.assertRaises(NoQuestionAvailableError):
            await self.answer_current(service, started.session_id)

        session = service.get_session(started.session_id)
        self.assertEqual(session.evaluations, [])
        self.assertEqual(session.total_questions, 1)
        self.assertEqual(self.evaluation_repo.list_by_session(started.session_id), [])


class TestAutomaticEnd(SessionServiceTestCase):

    async def test_max_questions_ends_with_report(self):
        service = self.make_service(termination=TerminationPolicy(max_questions=2))
        started = await service.start_session("cand-1", name="Ada")

        first = await self.answer_current(service, started.session_id)
        self.assertFalse(first.session_ended)
        second = await self.answer_current(service, started.session_id)

        self.assertTrue(second.session_ended)
        self.assertEqual(second.reason, TerminationReason.MAX_QUESTIONS_REACHED.value)
        self.assertIsNone(second.next_question)
        report = second.final_report
        self.assertEqual(report.candidate_name, "Ada")
        self.assertEqual(report.session_summary.questions_answered, 2)
        self.assertEqual(report.session_summary.performance_level, "Excellent")

        session = service.get_session(started.session_id)
        self.assertEqual(session.status, SessionStatus.COMPLETED)
        self.assertAlmostEqual(session.session_score, 0.9)
        self.assertEqual(session.total_questions, 2)

        candidate = self.candidate_repo.get("cand-1")
        self.assertEqual(candidate.total_sessions, 1)
        self.assertAlmostEqual(candidate.average_score, 0.9)

    async def test_session_timeout_sets_timeout_status(self):
        service = self.make_service(termination=TerminationPolicy(inactivity_timeout_sec=7200))
        started = await service.start_session("cand-1")
        self.clock.advance(3601)

        result = await self.answer_current(service, started.session_id)

        self.assertTrue(result.session_ended)
        self.assertEqual(result.reason, "timeout")
        self.assertEqual(service.get_session(started.session_id).status, SessionStatus.TIMEOUT)

    async def test_inactivity_completes_session(self):
        service = self.make_service()
        started = await service.start_session("cand-1")
        self.clock.advance(1801)

        result = await self.answer_current(service, started.session_id)

        self.assertTrue(result.session_ended)
        self.assertEqual(result.reason, "inactivity")
        self.assertEqual(service.get_session(started.session_id).status, SessionStatus.COMPLETED)


class TestEndAndList(SessionServiceTestCase):

    async def test_end_session_summary(self):
        service = self.make_service(evaluator=FixedEvaluator(0.65))
        started = await service.start_session("cand-1")
        await self.answer_current(service, started.session_id)
        self.clock.advance(600)

        result = await service.end_session(started.session_id)

        summary = result.session_summary
        self.assertEqual(summary.total_questions, 2)
        self.assertEqual(summary.questions_answered, 1)
        self.assertAlmostEqual(summary.session_score, 0.65)
        self.assertEqual(summary.duration_minutes, 10)
        self.assertEqual(result.report.session_summary.performance_level, "Good")
        self.assertEqual(self.candidate_repo.get("cand-1").total_sessions, 1)

    async def test_end_without_answers_gives_empty_report(self):
        service = self.make_service()
        started = await service.start_session("cand-1")
        result = await service.end_session(started.session_id)
        self.assertEqual(result.session_summary.session_score, 0.0)
        self.assertEqual(result.report.session_summary.performance_level, "No Data")

    async def test_list_candidate_sessions_newest_first(self):
        service = self.make_service()
        ids = []
        for _ in range(3):
            started = await service.start_session("cand-1")
            ids.append(started.session_id)
            await service.end_session(started.session_id)
            self.clock.advance(60)

        page = service.list_candidate_sessions("cand-1", limit=2, offset=0)
        self.assertEqual([s.session_id for s in page.sessions], [ids[2], ids[1]])
        self.assertEqual(page.pagination.total, 3)
        self.assertTrue(page.pagination.has_more)
        self.assertEqual(page.sessions[0].status, "completed")

        last = service.list_candidate_sessions("cand-1", limit=2, offset=2)
        self.assertEqual([s.session_id for s in last.sessions], [ids[0]])
        self.assertFalse(last.pagination.has_more)

        self.assertEqual(service.list_candidate_sessions("nobody").pagination.total, 0)
        self.assertEqual(self.candidate_repo.get("cand-1").total_sessions, 3)

    async def test_get_report_for_unknown_session(self):
        with self.assertRaises(NotFoundError):
            self.make_service().get_report("missing")


if __name__ == "__main__":
    unittest.main()
