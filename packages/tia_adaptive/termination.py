from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from packages.tia_core.errors import InvalidSessionStateError
from packages.tia_core.logging import get_logger
from packages.tia_session.dto import InterviewSession
from packages.tia_session.state import SessionStatus, TerminationReason

logger = get_logger("tia.adaptive.termination")

DEFAULT_MAX_QUESTIONS = 20
DEFAULT_INACTIVITY_TIMEOUT_SEC = 1800


@dataclass(frozen=True)
class EndDecision:
    should_end: bool
    reason: Optional[TerminationReason] = None


CONTINUE = EndDecision(should_end=False)


class TerminationPolicy:
    """
    Decides whether a session must end, and applies the terminal transition.

    Rules are checked in priority order, first match wins:
      1. total_questions >= max_questions -> MAX_QUESTIONS_REACHED
      2. now > timeout_at                 -> TIMEOUT
      3. idle since last question > limit -> INACTIVITY
    """

    def __init__(
        self,
        max_questions: int = DEFAULT_MAX_QUESTIONS,
        inactivity_timeout_sec: int = DEFAULT_INACTIVITY_TIMEOUT_SEC,
    ):
        self.max_questions = max_questions
        self.inactivity_timeout_sec = inactivity_timeout_sec

    def should_end(self, session: InterviewSession, now: datetime) -> EndDecision:
        if session.total_questions >= self.max_questions:
            return EndDecision(True, TerminationReason.MAX_QUESTIONS_REACHED)

        if now > session.timeout_at:
            return EndDecision(True, TerminationReason.TIMEOUT)

        idle_sec = (now - session.last_activity_at).total_seconds()
        if idle_sec > self.inactivity_timeout_sec:
            return EndDecision(True, TerminationReason.INACTIVITY)

        return CONTINUE

    def finalize(
        self,
        session: InterviewSession,
        reason: Optional[TerminationReason],
        now: datetime,
    ) -> InterviewSession:
        """
        Terminal transition. Status is TIMEOUT for a timeout reason, COMPLETED otherwise.
        session_score is computed here once.
        """
        if not session.is_active:
            raise InvalidSessionStateError(session.session_id, session.status.value)

        session.status = SessionStatus.TIMEOUT if reason == TerminationReason.TIMEOUT else SessionStatus.COMPLETED
        session.ended_at = now
        session.session_score = session.calculate_session_score()

        logger.info(
            f"Session {session.session_id} ended: status={session.status.value}, "
            f"reason={reason.value if reason else None}, score={session.session_score:.2f}"
        )
        return session
