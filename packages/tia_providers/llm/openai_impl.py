from typing import List, Optional

from openai import AsyncOpenAI

from packages.tia_core.config import TIAConfig
from packages.tia_core.dto import LLMMessageDTO, LLMResponseDTO
from packages.tia_core.errors import ExternalCallError
from packages.tia_providers.llm.base import ILLMProvider


class OpenAILLMProvider(ILLMProvider):
    """
    Chat completions through the OpenAI async client.
    Replies are requested in JSON object mode.
    """

    def __init__(self, config: TIAConfig, client: Optional[AsyncOpenAI] = None, temperature: float = 0.3):
        self.model = config.OPENAI_MODEL
        self.temperature = temperature
        self.client = client or AsyncOpenAI(
            api_key=config.OPENAI_API_KEY,
            base_url=config.OPENAI_BASE_URL,
        )

    async def chat(self, messages: List[LLMMessageDTO], system_prompt: Optional[str] = None) -> LLMResponseDTO:
        payload = []
        if system_prompt:
            payload.append({"role": "system", "content": system_prompt})
        payload.extend({"role": m.role, "content": m.content} for m in messages)

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=payload,
            temperature=self.temperature,
            response_format={"type": "json_object"},
        )
        if not response.choices:
            raise ExternalCallError("LLM returned no choices")

        choice = response.choices[0]
        usage = None
        if response.usage is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }
        return LLMResponseDTO(
            content=choice.message.content or "",
            token_usage=usage,
            finish_reason=choice.finish_reason,
        )
