import unittest

from chefiq_actions.appliances import get_pattern
from chefiq_actions.classifier import (
    ScoringWeights,
    MethodScore,
    analyze_step_methods,
    confidence_for,
    count_keyword,
    detect_grill_substitution,
    find_method_step,
    is_stovetop_only,
    rank_methods,
    score_methods,
    select_secondary_methods,
)
from chefiq_actions.models import CookerMethod, OvenMethod


def _scores_by_name(scores):
    return {s.pattern.name: s.score for s in scores}


class ScoringTests(unittest.TestCase):
    def test_every_method_is_scored_in_registry_order(self) -> None:
        scores = score_methods("Serve cold")
        self.assertEqual(len(scores), 11)
        self.assertEqual(scores[0].pattern.name, "Pressure Cook")
        self.assertTrue(all(s.score == 0 for s in scores))

    def test_keyword_frequency(self) -> None:
        self.assertEqual(count_keyword("Bake, bake, BAKE", "bake"), 3)
        scores = _scores_by_name(score_methods("Seal lid and pressure cook on high pressure"))
        self.assertEqual(scores["Pressure Cook"], 2)

    def test_increase_boosts_bake(self) -> None:
        reasoning: list[str] = []
        text = "Bake for 20 minutes. Increase oven temperature and bake again."
        scores = _scores_by_name(score_methods(text, reasoning=reasoning))
        self.assertEqual(scores["Bake"], 2 + 1 + 5)
        self.assertIn("Detected temperature increase instructions - prioritizing bake method.", reasoning)

    def test_boost_is_tunable(self) -> None:
        text = "Bake, then increase temperature"
        scores = _scores_by_name(score_methods(text, weights=ScoringWeights(bake_increase_boost=1)))
        self.assertEqual(scores["Bake"], 2)

    def test_dehydrate_penalised_at_oven_temperatures(self) -> None:
        text = "Dehydrate the slices at 450°F"
        self.assertEqual(_scores_by_name(score_methods(text, 450))["Dehydrate"], 0)
        self.assertEqual(_scores_by_name(score_methods(text, 150))["Dehydrate"], 1)

    def test_rank_drops_zero_and_keeps_registry_order_on_ties(self) -> None:
        ranked = rank_methods(score_methods("Roast, then bake"))
        self.assertEqual([s.pattern.name for s in ranked], ["Bake", "Roast"])

    def test_confidence(self) -> None:
        self.assertAlmostEqual(confidence_for(1), 0.7)
        self.assertEqual(confidence_for(5), 1.0)


class SecondaryMethodTests(unittest.TestCase):
    def test_same_family_runner_up_only(self) -> None:
        ranked = [
            MethodScore(pattern=get_pattern(OvenMethod.BAKE), score=5),
            MethodScore(pattern=get_pattern(OvenMethod.ROAST), score=3),
            MethodScore(pattern=get_pattern(CookerMethod.PRESSURE), score=3),
            MethodScore(pattern=get_pattern(OvenMethod.TOAST), score=2),
        ]
        self.assertEqual([s.pattern.name for s in select_secondary_methods(ranked)], ["Roast"])

    def test_weak_runner_up_ignored(self) -> None:
        ranked = [
            MethodScore(pattern=get_pattern(OvenMethod.BAKE), score=4),
            MethodScore(pattern=get_pattern(OvenMethod.ROAST), score=1),
        ]
        self.assertEqual(select_secondary_methods(ranked), [])
        self.assertEqual(select_secondary_methods([]), [])


class OverrideTests(unittest.TestCase):
    def test_stovetop_only(self) -> None:
        self.assertTrue(is_stovetop_only("Bring to a boil in a saucepan"))
        self.assertFalse(is_stovetop_only("Bring to a boil, then bake"))
        self.assertFalse(is_stovetop_only("Bake the cake"))

    def test_grill_needs_protein(self) -> None:
        self.assertIsNone(detect_grill_substitution("Grill the vegetables", ["Grill the vegetables"]))

    def test_grill_crispy_goes_to_air_fry(self) -> None:
        steps = ["Season the chicken wings", "Grill until crispy"]
        grill = detect_grill_substitution(" ".join(steps), steps)
        self.assertEqual(grill.method_id, OvenMethod.AIR_FRY)
        self.assertEqual(grill.step_index, 1)
        self.assertIn("Detected need for crispy texture - suggesting Air Fry.", grill.reasoning)

    def test_grill_char_goes_to_broil(self) -> None:
        grill = detect_grill_substitution("Grill the pork chops until charred", [])
        self.assertEqual(grill.method_id, OvenMethod.BROIL)
        self.assertIsNone(grill.step_index)

    def test_grill_long_cook_goes_to_bake(self) -> None:
        grill = detect_grill_substitution("Grill the salmon", ["Grill the salmon"], cook_time_minutes=30)
        self.assertEqual(grill.method_id, OvenMethod.BAKE)

    def test_grill_default_is_air_fry(self) -> None:
        grill = detect_grill_substitution("Grill the salmon", ["Grill the salmon"], cook_time_minutes=12)
        self.assertEqual(grill.method_id, OvenMethod.AIR_FRY)


class StepBindingTests(unittest.TestCase):
    def test_temperature_raise_is_a_bake_stage(self) -> None:
        step_methods = analyze_step_methods(
            ["Dehydrate the fruit", "Raise the temperature and dehydrate another hour"]
        )
        names = [[p.name for p in matches] for matches in step_methods]
        self.assertEqual(names, [["Dehydrate"], ["Bake"]])

    def test_find_method_step(self) -> None:
        step_methods = analyze_step_methods(["Chop the onions", "Steam the rice", "Steam again"])
        self.assertEqual(find_method_step(step_methods, CookerMethod.STEAM), 1)
        self.assertIsNone(find_method_step(step_methods, OvenMethod.BAKE))


if __name__ == "__main__":
    unittest.main()
