from packages.tia_core.dto import AnswerEvaluation
from packages.tia_report.engine import duration_minutes
from packages.tia_session.dto import AskedQuestion, InterviewSession
from packages.tia_service.dto import EvaluationView, QuestionView, SessionInfo, SessionListItem


class SessionMapper:
    """
    Explicit Mapper from session records to service DTOs.
    Keeps persisted models out of the API layer.
    """

    @staticmethod
    def question_view(question: AskedQuestion) -> QuestionView:
        return QuestionView(
            question_id=question.question_id,
            question_text=question.question_text,
            domain=question.domain.value,
            difficulty=question.difficulty.value,
            expected_key_points=list(question.expected_key_points),
        )

    @staticmethod
    def session_info(session: InterviewSession) -> SessionInfo:
        return SessionInfo(
            current_domain=session.current_domain.value,
            current_difficulty=session.current_difficulty.value,
            questions_answered=len(session.evaluations),
            total_questions=session.total_questions,
            started_at=session.started_at,
            timeout_at=session.timeout_at,
        )

    @staticmethod
    def evaluation_view(evaluation: AnswerEvaluation) -> EvaluationView:
        return EvaluationView(
            correctness=evaluation.correctness,
            clarity=evaluation.clarity,
            confidence=evaluation.confidence,
            feedback=evaluation.feedback,
        )

    @staticmethod
    def list_item(session: InterviewSession) -> SessionListItem:
        return SessionListItem(
            session_id=session.session_id,
            status=session.status.value,
            total_questions=session.total_questions,
            session_score=session.session_score,
            started_at=session.started_at,
            ended_at=session.ended_at,
            duration_minutes=duration_minutes(session) if session.ended_at else None,
        )
