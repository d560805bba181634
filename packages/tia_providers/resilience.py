import asyncio
from typing import Awaitable, TypeVar, Union

from packages.tia_core.logging import get_logger

logger = get_logger("tia.providers.resilience")

T = TypeVar("T")


class _Fallback:
    def __repr__(self) -> str:
        return "FALLBACK"


FALLBACK = _Fallback()


async def call_with_fallback(awaitable: Awaitable[T], timeout_sec: float, label: str) -> Union[T, _Fallback]:
    """
    Await an external call bounded by timeout_sec.
    On timeout or any error, log a warning and return FALLBACK. No retry.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_sec)
    except asyncio.TimeoutError:
        logger.warning(f"[{label}] timed out after {timeout_sec}s; using fallback")
    except Exception as e:
        logger.warning(f"[{label}] failed ({type(e).__name__}: {e}); using fallback")
    return FALLBACK
