from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from packages.tia_adaptive.domains import display_name
from packages.tia_session.dto import Candidate, EvaluationRecord, InterviewSession
from packages.tia_report.dto import (
    DetailedScore,
    GroupAnalysis,
    Recommendation,
    SessionReport,
    SessionSummary,
    Strength,
    Weakness,
)

EXCELLENT = 0.8
GOOD = 0.6
AVERAGE = 0.4

MAX_STRENGTHS = 5
MAX_WEAKNESSES = 5
MAX_RECOMMENDATIONS = 6

DOMAIN_RESOURCES = {
    "data_structures": ["Data Structures and Algorithms books", "LeetCode practice", "Visualization tools"],
    "algorithms": ["Algorithm design books", "Competitive programming", "Algorithm visualization"],
    "system_design": ["System design books", "Architecture patterns", "Case studies"],
    "database": ["Database design books", "SQL practice", "NoSQL concepts"],
    "networking": ["Network protocols", "TCP/IP fundamentals", "Network security"],
    "security": ["Security fundamentals", "OWASP guidelines", "Penetration testing"],
}
GENERIC_RESOURCES = ["General technical resources", "Online courses", "Practice problems"]


def performance_level(score: float) -> str:
    if score >= EXCELLENT:
        return "Excellent"
    if score >= GOOD:
        return "Good"
    if score >= AVERAGE:
        return "Average"
    return "Needs Improvement"


def duration_minutes(session: InterviewSession, now: Optional[datetime] = None) -> int:
    end = session.ended_at or now or datetime.now(timezone.utc)
    return round((end - session.started_at).total_seconds() / 60)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _group(records: Sequence[EvaluationRecord], key) -> Dict[str, GroupAnalysis]:
    scores = defaultdict(list)
    for record in records:
        scores[key(record)].append(record.overall_score)
    return {
        name: GroupAnalysis(total_questions=len(values), average_score=_mean(values))
        for name, values in scores.items()
    }


class SessionReportGenerator:
    """
    Converts a finished (or in-progress) session and its evaluations into a SessionReport.
    """

    @staticmethod
    def generate(
        session: InterviewSession,
        evaluations: Sequence[EvaluationRecord],
        candidate: Optional[Candidate] = None,
        now: Optional[datetime] = None,
    ) -> SessionReport:
        now = now or datetime.now(timezone.utc)
        candidate_name = candidate.name if candidate else "Unknown"

        if not evaluations:
            return SessionReportGenerator._empty(session, candidate_name, now)

        overall = _mean([r.overall_score for r in evaluations])
        correctness = _mean([r.correctness for r in evaluations])
        clarity = _mean([r.clarity for r in evaluations])
        confidence = _mean([r.confidence for r in evaluations])

        domain_analysis = _group(evaluations, lambda r: r.domain.value)
        difficulty_analysis = _group(evaluations, lambda r: r.difficulty.value)

        strengths = SessionReportGenerator._strengths(overall, correctness, clarity, confidence, domain_analysis, difficulty_analysis)
        weaknesses = SessionReportGenerator._weaknesses(overall, correctness, clarity, confidence, domain_analysis, difficulty_analysis)
        recommendations = SessionReportGenerator._recommendations(overall, clarity, confidence, domain_analysis, strengths)

        return SessionReport(
            session_id=session.session_id,
            candidate_id=session.candidate_id,
            candidate_name=candidate_name,
            session_summary=SessionSummary(
                total_questions=session.total_questions,
                questions_answered=len(evaluations),
                session_duration_minutes=duration_minutes(session, now),
                overall_score=overall,
                performance_level=performance_level(overall),
            ),
            domain_analysis=domain_analysis,
            difficulty_analysis=difficulty_analysis,
            strengths=strengths,
            weaknesses=weaknesses,
            recommendations=recommendations,
            detailed_scores=[
                DetailedScore(
                    question_id=r.question_id,
                    domain=r.domain.value,
                    difficulty=r.difficulty.value,
                    overall=r.overall_score,
                    correctness=r.correctness,
                    clarity=r.clarity,
                    confidence=r.confidence,
                    feedback=r.feedback,
                )
                for r in evaluations
            ],
            generated_at=now,
        )

    @staticmethod
    def _strengths(overall, correctness, clarity, confidence, domains, difficulties) -> List[Strength]:
        strengths = []
        if overall >= EXCELLENT:
            strengths.append(Strength(
                category="Overall Performance",
                description="Excellent overall performance across all areas",
                score=overall,
            ))
        for domain, data in domains.items():
            if data.average_score >= GOOD:
                strengths.append(Strength(
                    category="Domain Expertise",
                    description=f"Strong performance in {display_name(domain)}",
                    score=data.average_score,
                    domain=domain,
                ))
        for difficulty, data in difficulties.items():
            if data.average_score >= GOOD:
                strengths.append(Strength(
                    category="Difficulty Handling",
                    description=f"Good performance on {difficulty} level questions",
                    score=data.average_score,
                    difficulty=difficulty,
                ))
        if correctness >= GOOD:
            strengths.append(Strength(category="Technical Accuracy", description="Strong technical knowledge and accuracy", score=correctness))
        if clarity >= GOOD:
            strengths.append(Strength(category="Communication", description="Clear and well-structured explanations", score=clarity))
        if confidence >= GOOD:
            strengths.append(Strength(category="Confidence", description="Confident and comprehensive responses", score=confidence))
        return strengths[:MAX_STRENGTHS]

    @staticmethod
    def _weaknesses(overall, correctness, clarity, confidence, domains, difficulties) -> List[Weakness]:
        weaknesses = []
        if overall < AVERAGE:
            weaknesses.append(Weakness(
                category="Overall Performance",
                description="Overall performance needs improvement",
                score=overall,
                priority="high",
            ))
        for domain, data in domains.items():
            if data.average_score < AVERAGE:
                weaknesses.append(Weakness(
                    category="Domain Knowledge",
                    description=f"Needs improvement in {display_name(domain)}",
                    score=data.average_score,
                    priority="medium",
                    domain=domain,
                ))
        for difficulty, data in difficulties.items():
            if data.average_score < AVERAGE:
                weaknesses.append(Weakness(
                    category="Difficulty Handling",
                    description=f"Struggles with {difficulty} level questions",
                    score=data.average_score,
                    priority="medium",
                    difficulty=difficulty,
                ))
        if correctness < AVERAGE:
            weaknesses.append(Weakness(category="Technical Accuracy", description="Technical knowledge needs strengthening", score=correctness, priority="high"))
        if clarity < AVERAGE:
            weaknesses.append(Weakness(category="Communication", description="Explanation clarity needs improvement", score=clarity, priority="medium"))
        if confidence < AVERAGE:
            weaknesses.append(Weakness(category="Confidence", description="Response confidence needs building", score=confidence, priority="medium"))
        return weaknesses[:MAX_WEAKNESSES]

    @staticmethod
    def _recommendations(overall, clarity, confidence, domains, strengths) -> List[Recommendation]:
        recommendations = []
        if overall < AVERAGE:
            recommendations.append(Recommendation(
                category="General Improvement",
                priority="high",
                action="Focus on fundamental concepts and practice more coding problems",
                resources=["Online coding platforms", "Technical books", "Practice problems"],
            ))
        for domain, data in domains.items():
            if data.average_score < AVERAGE:
                recommendations.append(Recommendation(
                    category="Domain-Specific",
                    priority="high",
                    action=f"Strengthen knowledge in {display_name(domain)}",
                    resources=list(DOMAIN_RESOURCES.get(domain, GENERIC_RESOURCES)),
                ))
        if clarity < AVERAGE:
            recommendations.append(Recommendation(
                category="Communication",
                priority="medium",
                action="Practice explaining technical concepts clearly and concisely",
                resources=["Technical writing courses", "Presentation practice", "Peer review sessions"],
            ))
        if confidence < AVERAGE:
            recommendations.append(Recommendation(
                category="Confidence Building",
                priority="medium",
                action="Build confidence through consistent practice and preparation",
                resources=["Mock interviews", "Study groups", "Regular practice sessions"],
            ))
        if strengths:
            recommendations.append(Recommendation(
                category="Leverage Strengths",
                priority="low",
                action=f"Continue building on your strength in {strengths[0].category.lower()}",
                resources=["Advanced courses", "Specialized projects", "Mentorship opportunities"],
            ))
        return recommendations[:MAX_RECOMMENDATIONS]

    @staticmethod
    def _empty(session: InterviewSession, candidate_name: str, now: datetime) -> SessionReport:
        return SessionReport(
            session_id=session.session_id,
            candidate_id=session.candidate_id,
            candidate_name=candidate_name,
            session_summary=SessionSummary(
                total_questions=session.total_questions,
                questions_answered=0,
                session_duration_minutes=duration_minutes(session, now),
                overall_score=0.0,
                performance_level="No Data",
            ),
            weaknesses=[Weakness(
                category="Session Completion",
                description="No questions were answered in this session",
                priority="high",
            )],
            recommendations=[Recommendation(
                category="Session Participation",
                priority="high",
                action="Complete the interview session to receive detailed feedback",
                resources=["Retry the interview", "Check technical setup"],
            )],
            generated_at=now,
        )
