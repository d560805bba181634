from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from TIA.api.dependencies import get_config
from packages.tia_core.config import TIAConfig

router = APIRouter()


@router.get("/health")
async def health_check(config: TIAConfig = Depends(get_config)):
    """
    Server Liveness Probe.
    Returns status, version, and current timestamp.
    """
    return {
        "status": "ok",
        "version": config.VERSION,
        "llm": "openai" if config.llm_enabled else "mock",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
