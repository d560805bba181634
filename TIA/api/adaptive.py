import secrets
import time
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, Response

from TIA.api.dependencies import get_turn_handler
from TIA.api.schemas import AdaptiveTurnRequest, ApiResponse
from packages.tia_conversation.handler import ConversationTurnHandler

router = APIRouter(tags=["Adaptive"])

COOKIE_NAME = "adaptive_sid"
COOKIE_MAX_AGE_SEC = 24 * 60 * 60


def new_conversation_token() -> str:
    return f"ASID-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


@router.post("/adaptive", response_model=ApiResponse)
async def adaptive_turn(
    request: Request,
    response: Response,
    body: Optional[AdaptiveTurnRequest] = Body(default=None),
    handler: ConversationTurnHandler = Depends(get_turn_handler)
):
    """
    One turn of the cookie-keyed adaptive conversation.
    The first call (no prior question) returns the opening question and no evaluation.
    """
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        token = new_conversation_token()
        response.set_cookie(COOKIE_NAME, token, max_age=COOKIE_MAX_AGE_SEC, path="/", httponly=True)

    answer = body.answer if body and body.answer else ""
    result = await handler.handle_turn(token, answer)
    return ApiResponse(data=result.model_dump(mode="json"))
