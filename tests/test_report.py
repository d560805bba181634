import unittest
from datetime import timedelta

from packages.tia_adaptive.difficulty import Difficulty
from packages.tia_adaptive.domains import Domain
from packages.tia_report.engine import SessionReportGenerator, duration_minutes, performance_level
from packages.tia_session.dto import AskedQuestion, Candidate, EvaluationRecord
from tests.factories import T0, evaluation, make_session


def record(session, score, domain=Domain.DATA_STRUCTURES, difficulty=Difficulty.MEDIUM, qid="Q"):
    question = AskedQuestion(
        question_id=qid,
        question_text="text",
        difficulty=difficulty,
        domain=domain,
        asked_at=T0,
    )
    return EvaluationRecord.create(session.session_id, session.candidate_id, question, "answer", evaluation(score), T0)


class TestPerformanceLevel(unittest.TestCase):

    def test_bands(self):
        self.assertEqual(performance_level(0.85), "Excellent")
        self.assertEqual(performance_level(0.65), "Good")
        self.assertEqual(performance_level(0.45), "Average")
        self.assertEqual(performance_level(0.1), "Needs Improvement")

    def test_duration_prefers_ended_at(self):
        session = make_session()
        session.ended_at = T0 + timedelta(minutes=25)
        self.assertEqual(duration_minutes(session, T0 + timedelta(hours=3)), 25)
        session.ended_at = None
        self.assertEqual(duration_minutes(session, T0 + timedelta(minutes=7)), 7)


class TestSessionReportGenerator(unittest.TestCase):

    def test_empty_session(self):
        session = make_session()
        report = SessionReportGenerator.generate(session, [], None, now=T0)
        self.assertEqual(report.candidate_name, "Unknown")
        self.assertEqual(report.session_summary.performance_level, "No Data")
        self.assertEqual(report.session_summary.questions_answered, 0)
        self.assertEqual(report.weaknesses[0].category, "Session Completion")
        self.assertEqual(report.recommendations[0].category, "Session Participation")

    def test_strong_session(self):
        session = make_session()
        records = [
            record(session, 0.9, Domain.DATA_STRUCTURES, Difficulty.MEDIUM, "Q1"),
            record(session, 0.9, Domain.ALGORITHMS, Difficulty.HARD, "Q2"),
        ]
        candidate = Candidate(candidate_id="cand-1", name="Ada")
        report = SessionReportGenerator.generate(session, records, candidate, now=T0 + timedelta(minutes=12))

        self.assertEqual(report.candidate_name, "Ada")
        self.assertEqual(report.session_summary.performance_level, "Excellent")
        self.assertEqual(report.session_summary.session_duration_minutes, 12)
        self.assertEqual(set(report.domain_analysis), {"data_structures", "algorithms"})
        self.assertEqual(report.difficulty_analysis["hard"].total_questions, 1)
        self.assertEqual(report.strengths[0].category, "Overall Performance")
        self.assertLessEqual(len(report.strengths), 5)
        self.assertEqual(report.weaknesses, [])
        self.assertEqual(report.recommendations[-1].category, "Leverage Strengths")
        self.assertEqual([d.question_id for d in report.detailed_scores], ["Q1", "Q2"])

    def test_weak_session(self):
        session = make_session()
        records = [record(session, 0.2, Domain.NETWORKING, Difficulty.EASY)]
        report = SessionReportGenerator.generate(session, records, now=T0)

        self.assertEqual(report.session_summary.performance_level, "Needs Improvement")
        self.assertEqual(report.strengths, [])
        self.assertEqual(report.weaknesses[0].priority, "high")
        self.assertLessEqual(len(report.weaknesses), 5)
        categories = [r.category for r in report.recommendations]
        self.assertEqual(categories[0], "General Improvement")
        self.assertIn("Domain-Specific", categories)
        domain_rec = report.recommendations[categories.index("Domain-Specific")]
        self.assertIn("Network protocols", domain_rec.resources)
        self.assertLessEqual(len(report.recommendations), 6)


if __name__ == "__main__":
    unittest.main()
