import asyncio
import json
import random
import unittest
from types import SimpleNamespace

from packages.tia_adaptive.difficulty import Difficulty
from packages.tia_adaptive.domains import Domain
from packages.tia_core.config import TIAConfig
from packages.tia_core.dto import LLMMessageDTO
from packages.tia_core.errors import ExternalCallError
from packages.tia_providers.advisor import LLMNextParamsAdvisor, PerformanceSummary
from packages.tia_providers.evaluator import FEEDBACK_POOL, LLMAnswerEvaluator, mentions_key_point, mock_evaluation
from packages.tia_providers.llm.factory import build_llm_provider
from packages.tia_providers.llm.mock import DEFAULT_MOCK_CONTENT, MockLLMProvider
from packages.tia_providers.llm.openai_impl import OpenAILLMProvider
from packages.tia_providers.llm.parsing import extract_json_object
from packages.tia_providers.question import (
    DEFAULT_KEY_POINTS,
    FALLBACK_KEY_POINTS,
    LLMQuestionGenerator,
    PreviousResponse,
    fallback_question,
)
from packages.tia_providers.resilience import FALLBACK, call_with_fallback

SUMMARY = PerformanceSummary(performance_score=0.8, recent_average=0.75, band="correct", answered_count=2)


class TestExtractJson(unittest.TestCase):

    def test_extracts_object_from_surrounding_prose(self):
        data = extract_json_object('Sure! ```json\n{"a": 1, "b": {"c": 2}}\n``` hope that helps')
        self.assertEqual(data, {"a": 1, "b": {"c": 2}})

    def test_missing_object_raises(self):
        with self.assertRaises(ExternalCallError):
            extract_json_object("no json here")

    def test_malformed_object_raises(self):
        with self.assertRaises(ExternalCallError):
            extract_json_object('{"a": 1,, }')

    def test_none_raises(self):
        with self.assertRaises(ExternalCallError):
            extract_json_object(None)


class TestMockEvaluation(unittest.TestCase):

    def test_short_answer_is_neutral(self):
        ev = mock_evaluation("no idea", ["Hash function design"], random.Random(0))
        self.assertEqual((ev.correctness, ev.clarity, ev.confidence), (0.5, 0.5, 0.5))
        self.assertIn(ev.feedback, FEEDBACK_POOL)

    def test_long_answer_with_key_point_and_example(self):
        answer = "A hash maps keys to buckets, for example " + "x" * 80
        self.assertGreater(len(answer), 100)
        self.assertLessEqual(len(answer), 200)
        ev = mock_evaluation(answer, ["Hash function design"], random.Random(0))
        self.assertAlmostEqual(ev.correctness, 1.0)
        self.assertAlmostEqual(ev.clarity, 0.6)
        self.assertAlmostEqual(ev.confidence, 0.5)

    def test_very_long_answer_adds_clarity(self):
        answer = "for instance " + "y" * 200
        ev = mock_evaluation(answer, ["Collision handling"], random.Random(0))
        self.assertAlmostEqual(ev.correctness, 0.7)
        self.assertAlmostEqual(ev.clarity, 0.8)

    def test_example_check_is_case_sensitive(self):
        ev = mock_evaluation("Example", [], random.Random(0))
        self.assertAlmostEqual(ev.clarity, 0.5)

    def test_key_point_match_uses_first_word_case_insensitively(self):
        self.assertTrue(mentions_key_point("I would use HASHING", ["Hash function design"]))
        self.assertFalse(mentions_key_point("function only", ["Hash function design"]))
        self.assertFalse(mentions_key_point("anything", ["", "   "]))


class TestLLMAdapters(unittest.IsolatedAsyncioTestCase):

    async def test_evaluator_parses_reply(self):
        llm = MockLLMProvider([json.dumps({"correctness": 0.9, "clarity": 0.8, "confidence": 0.7, "feedback": "Good"})])
        ev = await LLMAnswerEvaluator(llm).evaluate("Q?", "A.", ["point"])
        self.assertAlmostEqual(ev.average, 0.8)
        self.assertEqual(ev.feedback, "Good")
        prompt = llm.calls[0][0].content
        self.assertIn('"point"', prompt)

    async def test_evaluator_rejects_out_of_range_scores(self):
        llm = MockLLMProvider([json.dumps({"correctness": 1.5, "clarity": 0.8, "confidence": 0.7, "feedback": "x"})])
        with self.assertRaises(ExternalCallError):
            await LLMAnswerEvaluator(llm).evaluate("Q?", "A.", [])

    async def test_evaluator_requires_feedback(self):
        llm = MockLLMProvider([json.dumps({"correctness": 0.5, "clarity": 0.5, "confidence": 0.5})])
        with self.assertRaises(ExternalCallError):
            await LLMAnswerEvaluator(llm).evaluate("Q?", "A.", [])

    async def test_evaluator_fails_on_default_mock_text(self):
        with self.assertRaises(ExternalCallError):
            await LLMAnswerEvaluator(MockLLMProvider()).evaluate("Q?", "A.", [])

    async def test_advisor_returns_raw_suggestion(self):
        llm = MockLLMProvider(['{"domain": "cooking", "difficulty": "hard", "reasoning": "why not"}'])
        suggestion = await LLMNextParamsAdvisor(llm).suggest_next_params(Domain.DATABASE, Difficulty.EASY, SUMMARY)
        self.assertEqual(suggestion.domain, "cooking")
        self.assertEqual(suggestion.difficulty, "hard")
        self.assertIn("database", llm.calls[0][0].content)

    async def test_advisor_nulls_non_string_fields(self):
        llm = MockLLMProvider(['{"domain": 5, "difficulty": ["hard"], "reasoning": 3}'])
        suggestion = await LLMNextParamsAdvisor(llm).suggest_next_params(Domain.DATABASE, Difficulty.EASY, SUMMARY)
        self.assertIsNone(suggestion.domain)
        self.assertIsNone(suggestion.difficulty)
        self.assertEqual(suggestion.reasoning, "")

    async def test_advisor_values_are_not_stripped(self):
        llm = MockLLMProvider(['{"domain": "database", "difficulty": " hard "}'])
        suggestion = await LLMNextParamsAdvisor(llm).suggest_next_params(Domain.DATABASE, Difficulty.EASY, SUMMARY)
        self.assertEqual(suggestion.difficulty, " hard ")

    async def test_generator_pins_requested_difficulty_and_domain(self):
        reply = {
            "question_text": "Design a rate limiter.",
            "expected_key_points": ["Token bucket", "Sliding window"],
            "difficulty": "easy",
            "domain": "security",
        }
        llm = MockLLMProvider([json.dumps(reply)])
        previous = PreviousResponse(performance_band="correct", performance_score=0.8, missed_key_points=["Sliding window"])
        question = await LLMQuestionGenerator(llm).generate(Domain.SYSTEM_DESIGN, Difficulty.HARD, previous)
        self.assertEqual(question.difficulty, Difficulty.HARD)
        self.assertEqual(question.domain, Domain.SYSTEM_DESIGN)
        self.assertEqual(question.expected_key_points, ["Token bucket", "Sliding window"])
        self.assertTrue(question.question_id.startswith("Q"))
        self.assertIn("more challenging", llm.calls[0][0].content)

    async def test_generator_defaults_bad_key_points(self):
        llm = MockLLMProvider(['{"question_text": "What is TCP?", "expected_key_points": "handshake"}'])
        question = await LLMQuestionGenerator(llm).generate(Domain.NETWORKING, Difficulty.EASY)
        self.assertEqual(question.expected_key_points, DEFAULT_KEY_POINTS)

    async def test_generator_requires_question_text(self):
        llm = MockLLMProvider(['{"expected_key_points": ["a"]}'])
        with self.assertRaises(ExternalCallError):
            await LLMQuestionGenerator(llm).generate(Domain.NETWORKING, Difficulty.EASY)

    async def test_mock_provider_scripts_then_repeats(self):
        llm = MockLLMProvider(["one", "two"])
        msg = [LLMMessageDTO(role="user", content="hi")]
        self.assertEqual((await llm.chat(msg)).content, "one")
        self.assertEqual((await llm.chat(msg)).content, "two")
        self.assertEqual((await llm.chat(msg)).content, "two")
        self.assertEqual((await MockLLMProvider().chat(msg)).content, DEFAULT_MOCK_CONTENT)


class TestFallbackQuestion(unittest.TestCase):

    def test_fallback_question_shape(self):
        question = fallback_question(Domain.SYSTEM_DESIGN, Difficulty.EASY)
        self.assertIn("system design", question.question_text)
        self.assertEqual(question.expected_key_points, FALLBACK_KEY_POINTS)
        self.assertEqual(question.difficulty, Difficulty.EASY)


class TestCallWithFallback(unittest.IsolatedAsyncioTestCase):

    async def test_returns_value(self):
        async def ok():
            return 42
        self.assertEqual(await call_with_fallback(ok(), 1.0, "test"), 42)

    async def test_timeout_returns_sentinel(self):
        async def slow():
            await asyncio.sleep(5)
        self.assertIs(await call_with_fallback(slow(), 0.01, "test"), FALLBACK)

    async def test_error_returns_sentinel(self):
        provider = MockLLMProvider(error=ConnectionError("down"))
        result = await call_with_fallback(provider.chat([]), 1.0, "test")
        self.assertIs(result, FALLBACK)
        self.assertEqual(len(provider.calls), 1)


class _FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=self.content), finish_reason="stop")],
            usage=SimpleNamespace(prompt_tokens=3, completion_tokens=4, total_tokens=7),
        )


class TestOpenAIProvider(unittest.IsolatedAsyncioTestCase):

    async def test_chat_builds_payload_and_maps_reply(self):
        completions = _FakeCompletions('{"ok": true}')
        client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
        provider = OpenAILLMProvider(TIAConfig(OPENAI_API_KEY="sk-test", OPENAI_MODEL="gpt-test"), client=client)

        reply = await provider.chat([LLMMessageDTO(role="user", content="hello")], system_prompt="be brief")

        self.assertEqual(reply.content, '{"ok": true}')
        self.assertEqual(reply.token_usage["total_tokens"], 7)
        self.assertEqual(completions.kwargs["model"], "gpt-test")
        self.assertEqual(completions.kwargs["messages"][0], {"role": "system", "content": "be brief"})
        self.assertEqual(completions.kwargs["response_format"], {"type": "json_object"})


class TestFactory(unittest.TestCase):

    def test_mock_without_key(self):
        config = TIAConfig(OPENAI_API_KEY=None, FORCE_MOCK_LLM=False)
        self.assertIsInstance(build_llm_provider(config), MockLLMProvider)

    def test_force_mock_wins_over_key(self):
        config = TIAConfig(OPENAI_API_KEY="sk-test", FORCE_MOCK_LLM=True)
        self.assertIsInstance(build_llm_provider(config), MockLLMProvider)

    def test_openai_with_key(self):
        config = TIAConfig(OPENAI_API_KEY="sk-test", FORCE_MOCK_LLM=False)
        self.assertIsInstance(build_llm_provider(config), OpenAILLMProvider)


if __name__ == "__main__":
    unittest.main()
