import random
import unittest

from packages.tia_adaptive.difficulty import (
    Difficulty,
    alternate,
    decrease,
    increase,
    parse_difficulty,
    random_difficulty,
)
from packages.tia_adaptive.domains import DOMAIN_PROGRESSION, Domain, display_name, parse_domain, successor
from packages.tia_adaptive.scoring import (
    NEUTRAL_SCORE,
    PerformanceBand,
    band_proxy_score,
    classify,
    performance_score,
)
from tests.factories import evaluation
from packages.tia_core.dto import AnswerEvaluation


class TestPerformanceScore(unittest.TestCase):

    def test_score_is_arithmetic_mean(self):
        ev = AnswerEvaluation(correctness=0.9, clarity=0.6, confidence=0.3)
        self.assertAlmostEqual(performance_score(ev), 0.6)

    def test_score_stays_in_unit_interval(self):
        rng = random.Random(7)
        for _ in range(200):
            c, l, f = rng.random(), rng.random(), rng.random()
            score = performance_score(AnswerEvaluation(correctness=c, clarity=l, confidence=f))
            self.assertGreaterEqual(score, 0.0)
            self.assertLessEqual(score, 1.0)
            self.assertAlmostEqual(score, (c + l + f) / 3)

    def test_missing_evaluation_is_neutral_partial(self):
        self.assertEqual(performance_score(None), NEUTRAL_SCORE)
        self.assertEqual(classify(performance_score(None)), PerformanceBand.PARTIAL)

    def test_band_thresholds(self):
        self.assertEqual(classify(0.7), PerformanceBand.CORRECT)
        self.assertEqual(classify(0.69), PerformanceBand.PARTIAL)
        self.assertEqual(classify(0.5), PerformanceBand.PARTIAL)
        self.assertEqual(classify(0.49), PerformanceBand.INCORRECT)
        self.assertEqual(classify(performance_score(evaluation(0.9))), PerformanceBand.CORRECT)

    def test_band_proxy_scores(self):
        self.assertEqual(band_proxy_score(PerformanceBand.CORRECT), 0.8)
        self.assertEqual(band_proxy_score(PerformanceBand.PARTIAL), 0.6)
        self.assertEqual(band_proxy_score(PerformanceBand.INCORRECT), 0.3)
        self.assertEqual(band_proxy_score(PerformanceBand.TIMEOUT), 0.3)


class TestDifficultyLadder(unittest.TestCase):

    def test_increase_saturates_at_hard(self):
        self.assertEqual(increase(increase(increase(Difficulty.EASY))), Difficulty.HARD)
        self.assertEqual(increase(Difficulty.HARD), Difficulty.HARD)

    def test_decrease_saturates_at_easy(self):
        self.assertEqual(decrease(decrease(decrease(Difficulty.HARD))), Difficulty.EASY)
        self.assertEqual(decrease(Difficulty.EASY), Difficulty.EASY)

    def test_alternate_never_returns_input(self):
        rng = random.Random(3)
        for d in Difficulty:
            seen = {alternate(d, rng) for _ in range(50)}
            self.assertNotIn(d, seen)
            self.assertEqual(len(seen), 2)

    def test_random_difficulty_covers_all_rungs(self):
        rng = random.Random(1)
        self.assertEqual({random_difficulty(rng) for _ in range(100)}, set(Difficulty))

    def test_parse_difficulty(self):
        self.assertEqual(parse_difficulty("hard"), Difficulty.HARD)
        self.assertIsNone(parse_difficulty("impossible"))
        self.assertIsNone(parse_difficulty(None))


class TestDomainGraph(unittest.TestCase):

    def test_progression_cycle_covers_all_domains(self):
        seen = []
        current = Domain.DATA_STRUCTURES
        for _ in range(len(Domain)):
            seen.append(current)
            current = successor(current)
        self.assertEqual(current, Domain.DATA_STRUCTURES)
        self.assertEqual(set(seen), set(Domain))

    def test_first_successors(self):
        self.assertEqual(DOMAIN_PROGRESSION[Domain.DATA_STRUCTURES], [Domain.ALGORITHMS, Domain.SYSTEM_DESIGN])
        self.assertEqual(DOMAIN_PROGRESSION[Domain.SECURITY], [Domain.DATA_STRUCTURES])

    def test_parse_and_display(self):
        self.assertEqual(parse_domain("networking"), Domain.NETWORKING)
        self.assertIsNone(parse_domain("cooking"))
        self.assertEqual(display_name(Domain.SYSTEM_DESIGN), "System Design")


if __name__ == "__main__":
    unittest.main()
