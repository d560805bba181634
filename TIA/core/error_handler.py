from datetime import datetime, timezone

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from packages.tia_core.errors import TIABaseError
from packages.tia_core.logging import get_logger

logger = get_logger("tia.api.error_handler")

STATUS_BY_CODE = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_STATE": status.HTTP_400_BAD_REQUEST,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "ALREADY_ANSWERED": status.HTTP_409_CONFLICT,
    "SESSION_BUSY": status.HTTP_423_LOCKED,
    "NO_QUESTION": status.HTTP_503_SERVICE_UNAVAILABLE,
    "EXTERNAL_CALL": status.HTTP_502_BAD_GATEWAY,
    "CONF_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def tia_exception_handler(request: Request, exc: TIABaseError) -> JSONResponse:
    """Render TIABaseError as the standard error envelope."""
    status_code = STATUS_BY_CODE.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}", exc_info=exc)
    else:
        logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

    content = {
        "success": False,
        "error": {
            "code": exc.code,
            "message": exc.message,
            "details": jsonable_encoder(exc.details, custom_encoder={Exception: str}),
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return JSONResponse(status_code=status_code, content=content)
