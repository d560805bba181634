from packages.tia_core.config import TIAConfig
from packages.tia_core.logging import get_logger
from packages.tia_providers.llm.base import ILLMProvider
from packages.tia_providers.llm.mock import MockLLMProvider

logger = get_logger("tia.providers.llm")


def build_llm_provider(config: TIAConfig) -> ILLMProvider:
    if not config.llm_enabled:
        logger.info("OpenAI key missing or mock forced; using MockLLMProvider")
        return MockLLMProvider()

    from packages.tia_providers.llm.openai_impl import OpenAILLMProvider
    logger.info(f"Using OpenAILLMProvider (model={config.OPENAI_MODEL})")
    return OpenAILLMProvider(config)
