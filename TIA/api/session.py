from fastapi import APIRouter, Depends, Query, status

from TIA.api.dependencies import get_session_service
from TIA.api.schemas import ApiResponse, EndSessionRequest, EvaluateAnswerRequest, StartSessionRequest
from packages.tia_service.session_service import InterviewSessionService

router = APIRouter(tags=["Session"])


@router.post("/start-session", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def start_session(
    request: StartSessionRequest,
    service: InterviewSessionService = Depends(get_session_service)
):
    """
    Start an interview session and return its first question.
    A candidate may hold only one active session.
    """
    result = await service.start_session(
        candidate_id=request.candidate_id,
        name=request.name,
        email=request.email,
        experience_level=request.experience_level,
        preferred_domains=request.preferred_domains,
    )
    return ApiResponse(message="Session started successfully", data=result.model_dump(mode="json"))


@router.post("/evaluate-answer", response_model=ApiResponse)
async def evaluate_answer(
    request: EvaluateAnswerRequest,
    service: InterviewSessionService = Depends(get_session_service)
):
    result = await service.evaluate_answer(
        session_id=request.session_id,
        question_id=request.question_id,
        answer=request.answer,
        candidate_id=request.candidate_id,
    )
    message = "Answer evaluated and session ended" if result.session_ended else "Answer evaluated successfully"
    return ApiResponse(message=message, data=result.model_dump(mode="json", exclude_none=True))


@router.post("/end-session", response_model=ApiResponse)
async def end_session(
    request: EndSessionRequest,
    service: InterviewSessionService = Depends(get_session_service)
):
    result = await service.end_session(request.session_id)
    return ApiResponse(message="Session ended successfully", data=result.model_dump(mode="json"))


@router.get("/session/{session_id}", response_model=ApiResponse)
async def get_session(
    session_id: str,
    service: InterviewSessionService = Depends(get_session_service)
):
    session = service.get_session(session_id)
    return ApiResponse(data=session.model_dump(mode="json"))


@router.get("/candidate/{candidate_id}/sessions", response_model=ApiResponse)
async def get_candidate_sessions(
    candidate_id: str,
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: InterviewSessionService = Depends(get_session_service)
):
    result = service.list_candidate_sessions(candidate_id, limit=limit, offset=offset)
    return ApiResponse(data=result.model_dump(mode="json"))


@router.get("/session/{session_id}/report", response_model=ApiResponse)
async def get_session_report(
    session_id: str,
    service: InterviewSessionService = Depends(get_session_service)
):
    report = service.get_report(session_id)
    return ApiResponse(data=report.model_dump(mode="json"))
