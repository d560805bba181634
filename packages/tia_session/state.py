from enum import Enum


class SessionStatus(str, Enum):
    """
    Interview Session Status.
    ACTIVE is the only non-terminal status; transitions never leave a terminal status.
    """
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"
    TIMEOUT = "timeout"


TERMINAL_STATUSES = frozenset({SessionStatus.COMPLETED, SessionStatus.ABANDONED, SessionStatus.TIMEOUT})


class TerminationReason(str, Enum):
    """
    Reason for session termination.
    """
    MAX_QUESTIONS_REACHED = "max_questions_reached"
    TIMEOUT = "timeout"
    INACTIVITY = "inactivity"


class ExperienceLevel(str, Enum):
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
