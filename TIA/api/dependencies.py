import os
import random
from functools import lru_cache

from packages.tia_adaptive.difficulty import Difficulty
from packages.tia_adaptive.domains import Domain
from packages.tia_adaptive.selector import AdaptiveSelector
from packages.tia_adaptive.termination import TerminationPolicy
from packages.tia_conversation.handler import ConversationTurnHandler
from packages.tia_conversation.store import ConversationStore, MemoryConversationStore
from packages.tia_core.config import TIAConfig
from packages.tia_core.logging import get_logger
from packages.tia_providers.advisor import LLMNextParamsAdvisor, NextParamsAdvisor
from packages.tia_providers.evaluator import AnswerEvaluator, LLMAnswerEvaluator
from packages.tia_providers.llm.base import ILLMProvider
from packages.tia_providers.llm.factory import build_llm_provider
from packages.tia_providers.question import LLMQuestionGenerator, QuestionGenerator
from packages.tia_qbank.repository import JsonFileQuestionRepository
from packages.tia_qbank.seed import seed_repository
from packages.tia_qbank.service import QuestionBankService
from packages.tia_service.session_service import InterviewSessionService
from packages.tia_session.infrastructure.memory_repo import (
    MemoryCandidateRepository,
    MemoryEvaluationRepository,
    MemorySessionRepository,
)
from packages.tia_session.repository import CandidateRepository, EvaluationRepository, SessionRepository

logger = get_logger("tia.api.dependencies")

# --- Config ---

@lru_cache
def get_config() -> TIAConfig:
    return TIAConfig.load()

@lru_cache
def get_rng() -> random.Random:
    return random.Random()

# --- Providers (External Adapters) ---

@lru_cache
def get_llm_provider() -> ILLMProvider:
    return build_llm_provider(get_config())

@lru_cache
def get_advisor() -> NextParamsAdvisor:
    return LLMNextParamsAdvisor(get_llm_provider())

@lru_cache
def get_evaluator() -> AnswerEvaluator:
    return LLMAnswerEvaluator(get_llm_provider())

@lru_cache
def get_question_generator() -> QuestionGenerator:
    return LLMQuestionGenerator(get_llm_provider())

# --- Repositories (Persistence) ---

@lru_cache
def get_question_repository() -> JsonFileQuestionRepository:
    """
    Singleton Question Bank Repository (File-based).
    Seeded with the starter set when the file has no active questions.
    """
    file_path = get_config().QUESTION_BANK_PATH
    if not os.path.isabs(file_path):
        file_path = os.path.join(os.getcwd(), file_path)
    repo = JsonFileQuestionRepository(file_path=file_path)
    if not repo.find_all_active():
        count = seed_repository(repo)
        logger.info(f"Seeded empty question bank at {file_path} with {count} questions")
    return repo

@lru_cache
def get_session_repository() -> SessionRepository:
    return MemorySessionRepository()

@lru_cache
def get_candidate_repository() -> CandidateRepository:
    return MemoryCandidateRepository()

@lru_cache
def get_evaluation_repository() -> EvaluationRepository:
    return MemoryEvaluationRepository()

@lru_cache
def get_conversation_store() -> ConversationStore:
    return MemoryConversationStore(ttl_sec=get_config().CONVERSATION_TTL_SEC)

# --- Domain Services (Application Logic) ---

@lru_cache
def get_question_bank_service() -> QuestionBankService:
    return QuestionBankService(repository=get_question_repository(), rng=get_rng())

@lru_cache
def get_selector() -> AdaptiveSelector:
    return AdaptiveSelector(
        question_bank=get_question_bank_service(),
        advisor=get_advisor(),
        rng=get_rng(),
        advisor_timeout_sec=get_config().ADVISOR_TIMEOUT_SEC,
    )

@lru_cache
def get_termination_policy() -> TerminationPolicy:
    config = get_config()
    return TerminationPolicy(
        max_questions=config.MAX_QUESTIONS_PER_SESSION,
        inactivity_timeout_sec=config.INACTIVITY_TIMEOUT_SEC,
    )

@lru_cache
def get_session_service() -> InterviewSessionService:
    """
    Singleton Session Service. Shares repositories and the lock manager
    across requests.
    """
    config = get_config()
    return InterviewSessionService(
        session_repo=get_session_repository(),
        candidate_repo=get_candidate_repository(),
        evaluation_repo=get_evaluation_repository(),
        question_bank=get_question_bank_service(),
        selector=get_selector(),
        evaluator=get_evaluator(),
        termination=get_termination_policy(),
        rng=get_rng(),
        evaluation_timeout_sec=config.EVALUATION_TIMEOUT_SEC,
        session_timeout_sec=config.SESSION_TIMEOUT_SEC,
        default_domain=Domain(config.DEFAULT_DOMAIN),
        default_difficulty=Difficulty(config.DEFAULT_DIFFICULTY),
    )

@lru_cache
def get_turn_handler() -> ConversationTurnHandler:
    config = get_config()
    default_difficulty = config.CONVERSATION_DEFAULT_DIFFICULTY
    return ConversationTurnHandler(
        generator=get_question_generator(),
        evaluator=get_evaluator(),
        store=get_conversation_store(),
        rng=get_rng(),
        response_timeout_sec=config.RESPONSE_TIMEOUT_SEC,
        default_difficulty=Difficulty(default_difficulty) if default_difficulty else None,
        evaluation_timeout_sec=config.EVALUATION_TIMEOUT_SEC,
        generation_timeout_sec=config.GENERATION_TIMEOUT_SEC,
    )
