import asyncio
from typing import List, Optional

from packages.tia_core.dto import LLMMessageDTO, LLMResponseDTO
from packages.tia_providers.llm.base import ILLMProvider

DEFAULT_MOCK_CONTENT = "This is a mock LLM response based on the input."


class MockLLMProvider(ILLMProvider):
    """
    Offline provider.

    Without scripted responses it returns plain text, which no adapter can
    parse, so every model-backed collaborator runs its fallback path.
    Scripted responses are returned in order; the last one repeats.
    """

    def __init__(
        self,
        responses: Optional[List[str]] = None,
        latency_ms: int = 0,
        error: Optional[Exception] = None,
    ):
        self.responses = list(responses or [])
        self.latency_ms = latency_ms
        self.error = error
        self.calls: List[List[LLMMessageDTO]] = []

    async def chat(self, messages: List[LLMMessageDTO], system_prompt: Optional[str] = None) -> LLMResponseDTO:
        self.calls.append(list(messages))
        if self.latency_ms > 0:
            await asyncio.sleep(self.latency_ms / 1000.0)
        if self.error is not None:
            raise self.error

        if len(self.responses) > 1:
            content = self.responses.pop(0)
        elif self.responses:
            content = self.responses[0]
        else:
            content = DEFAULT_MOCK_CONTENT

        return LLMResponseDTO(
            content=content,
            token_usage={"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
            finish_reason="stop"
        )
