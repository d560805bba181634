from abc import ABC, abstractmethod
from typing import List, Optional

from packages.tia_core.dto import LLMMessageDTO, LLMResponseDTO


class ILLMProvider(ABC):
    @abstractmethod
    async def chat(self, messages: List[LLMMessageDTO], system_prompt: Optional[str] = None) -> LLMResponseDTO:
        """
        Chat with LLM.
        Args:
            messages: List of LLMMessageDTO
            system_prompt: Optional system prompt override
        Returns:
            LLMResponseDTO
        """
        pass
