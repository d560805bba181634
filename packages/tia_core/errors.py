from typing import Optional, Dict, Any


class TIABaseError(Exception):
    """
    Root exception for the project.
    Every custom exception derives from this class.

    Attributes:
        code (str): error identifier (e.g. 'NOT_FOUND')
        message (str): human readable message
        details (Optional[Dict[str, Any]]): extra debugging info
    """
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code}] {message}")


class ConfigurationError(TIABaseError):
    """Raised when settings cannot be loaded or validated."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="CONF_ERROR", message=message, details=details)


class NotFoundError(TIABaseError):
    """A referenced session, candidate or question does not exist."""
    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource} not found",
            details={"resource": resource, "id": resource_id}
        )


class InvalidSessionStateError(TIABaseError):
    """Operation attempted on a session that is no longer active."""
    def __init__(self, session_id: str, status: str):
        super().__init__(
            code="INVALID_STATE",
            message=f"Session {session_id} is not active",
            details={"session_id": session_id, "status": status}
        )


class SessionConflictError(TIABaseError):
    """Candidate already owns an active session."""
    def __init__(self, candidate_id: str, session_id: str):
        super().__init__(
            code="CONFLICT",
            message="Candidate already has an active session",
            details={"candidate_id": candidate_id, "session_id": session_id}
        )


class QuestionAlreadyAnsweredError(TIABaseError):
    """An answer was already recorded for this question."""
    def __init__(self, session_id: str, question_id: str):
        super().__init__(
            code="ALREADY_ANSWERED",
            message=f"Question {question_id} was already answered",
            details={"session_id": session_id, "question_id": question_id}
        )


class SessionBusyError(TIABaseError):
    """Another command is already running for the same session."""
    def __init__(self, session_id: str):
        super().__init__(
            code="SESSION_BUSY",
            message=f"Session {session_id} is currently locked by another request",
            details={"session_id": session_id}
        )


class NoQuestionAvailableError(TIABaseError):
    """Question pool exhausted even after every relaxation step."""
    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="NO_QUESTION", message="No questions found in question bank", details=details)


class ExternalCallError(TIABaseError):
    """An LLM-backed collaborator failed or returned unusable output."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="EXTERNAL_CALL", message=message, details=details)
