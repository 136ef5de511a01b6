import unittest

from chefiq_actions.analyzer import (
    ERROR_REASON,
    NO_METHOD_REASON,
    STOVETOP_ONLY_REASON,
    analyze,
    analyze_recipe,
    extract_remove_temperature,
    get_protein_temperature,
    should_use_remove_temp,
)
from chefiq_actions.models import (
    FanSpeed,
    OvenMethod,
    PressureLevel,
    PressureRelease,
    RecipeText,
)

COOKER_ID = "c8ff3aef-3de6-4a74-bba6-03e943b2762c"
MINI_OVEN_ID = "4a3cd4f1-839b-4f45-80ea-08f594ff74c3"

PRESSURE_STEPS = ["Seal lid and pressure cook on high pressure for 8 minutes", "Quick release pressure"]
GRILLED_CHICKEN_STEPS = ["Grill chicken breast over medium-high heat until internal temperature reaches 165°F"]
TWO_STAGE_BAKE_STEPS = [
    "Bake at 325°F for 40 minutes",
    "Increase oven temperature to 425°F and bake an additional 15 minutes",
]
ROAST_BEEF_STEPS = [
    "Preheat oven to 450°F",
    "Roast the beef for 60 minutes until a meat thermometer reads 135°F",
    "Let the roast rest for 15 minutes",
]


def _signature(result):
    """Comparable view of a result, ignoring the random action ids."""
    return (
        result.suggested_appliance_id,
        [(a.method_id, a.method_name, a.parameters, a.step_index) for a in result.suggested_actions],
        result.use_probe,
        result.probe_temp,
        result.confidence,
        result.reasoning,
    )


class PressureCookScenarioTests(unittest.TestCase):
    def test_pressure_cook(self) -> None:
        result = analyze_recipe("Rice", "", PRESSURE_STEPS)

        self.assertEqual(result.suggested_appliance_id, COOKER_ID)
        self.assertEqual(len(result.suggested_actions), 1)
        action = result.suggested_actions[0]
        self.assertEqual(action.method_id, "0")
        self.assertEqual(action.method_name, "Pressure Cook")
        self.assertEqual(action.step_index, 0)
        self.assertEqual(action.parameters.pres_level, PressureLevel.HIGH)
        self.assertEqual(action.parameters.pres_release, PressureRelease.QUICK)
        self.assertEqual(action.parameters.cooking_time, 480)
        self.assertFalse(result.use_probe)
        self.assertEqual(result.confidence, 1.0)

    def test_storage_notes_are_ignored(self) -> None:
        description = "Fluffy every time.\nStorage: reheat in a steamer basket with a splash of water."
        result = analyze_recipe("Rice", description, PRESSURE_STEPS)
        self.assertEqual([a.method_name for a in result.suggested_actions], ["Pressure Cook"])


class GrillSubstitutionScenarioTests(unittest.TestCase):
    def test_grilled_chicken_goes_to_oven_with_probe(self) -> None:
        result = analyze_recipe("Grilled Chicken Breast", "", GRILLED_CHICKEN_STEPS)

        self.assertEqual(result.suggested_appliance_id, MINI_OVEN_ID)
        action = result.suggested_actions[0]
        self.assertEqual(action.method_id, OvenMethod.AIR_FRY.value)
        self.assertEqual(action.step_index, 0)
        self.assertEqual(action.parameters.cooking_time, 900)
        self.assertEqual(action.parameters.target_probe_temp, 165)
        self.assertEqual(action.parameters.remove_probe_temp, 155)
        self.assertTrue(result.use_probe)
        self.assertEqual(result.probe_temp, 165)
        self.assertEqual(result.confidence, 0.8)
        self.assertIn(
            "Detected grilling recipe with protein - suggesting oven as ChefIQ alternative.",
            result.reasoning,
        )

    def test_grill_without_temperature_language_has_no_probe(self) -> None:
        result = analyze_recipe("BBQ Pork", "", ["Grill the pork chops for 12 minutes"])
        self.assertFalse(result.use_probe)
        self.assertIsNone(result.probe_temp)
        self.assertIsNone(result.suggested_actions[0].parameters.target_probe_temp)


class MultiStageBakeScenarioTests(unittest.TestCase):
    def test_two_bake_actions(self) -> None:
        result = analyze_recipe("Country Loaf", "", TWO_STAGE_BAKE_STEPS)

        self.assertEqual(result.suggested_appliance_id, MINI_OVEN_ID)
        first, second = result.suggested_actions
        self.assertEqual(first.method_id, OvenMethod.BAKE.value)
        self.assertEqual(first.parameters.target_cavity_temp, 325)
        self.assertEqual(first.parameters.cooking_time, 55 * 60)
        self.assertEqual(first.step_index, 0)

        self.assertEqual(second.method_id, OvenMethod.BAKE.value)
        self.assertEqual(second.method_name, "Bake (Increased Temp)")
        self.assertEqual(second.parameters.target_cavity_temp, 425)
        self.assertEqual(second.parameters.cooking_time, 55 * 60 // 3)
        self.assertEqual(second.step_index, 1)
        self.assertEqual(result.confidence, 1.0)
        self.assertIn("Detected initial temperature: 325°F", result.reasoning)


    def test_hotter_plain_step_suppresses_second_stage(self) -> None:
        steps = [
            "Bake at 325°F for 20 minutes",
            "Increase oven temperature to 375°F and bake an additional 10 minutes",
            "Broil at 500°F for 2 minutes",
        ]
        result = analyze_recipe("Gratin", "", steps)

        self.assertEqual([a.method_name for a in result.suggested_actions], ["Bake"])
        self.assertEqual(result.suggested_actions[0].parameters.target_cavity_temp, 325)


class DurationPrecedenceTests(unittest.TestCase):
    def test_instruction_time_beats_declared_time(self) -> None:
        result = analyze_recipe("Rice", "", PRESSURE_STEPS, cook_time_minutes=30)
        self.assertEqual(result.suggested_actions[0].parameters.cooking_time, 480)

    def test_declared_time_beats_method_time(self) -> None:
        result = analyze_recipe("Broccoli", "", ["Steam the broccoli for 5 minutes"], cook_time_minutes=30)
        action = result.suggested_actions[0]
        self.assertEqual(action.method_name, "Steam")
        self.assertEqual(action.parameters.cooking_time, 1800)

    def test_method_time_when_nothing_declared(self) -> None:
        result = analyze_recipe("Broccoli", "", ["Steam the broccoli for 5 minutes"])
        self.assertEqual(result.suggested_actions[0].parameters.cooking_time, 300)

    def test_method_default_when_no_time_stated(self) -> None:
        result = analyze_recipe("Broccoli", "", ["Steam the broccoli until tender"])
        self.assertEqual(result.suggested_actions[0].parameters.cooking_time, 900)


class SecondaryActionTests(unittest.TestCase):
    STEPS = [
        "Sear the beef on all sides, then brown the onions",
        "Pressure cook on high pressure in the instant pot for 60 minutes",
        "Quick release pressure",
    ]

    def _actions(self, cook_time_minutes=None):
        return analyze_recipe("Beef and Onions", "", self.STEPS, cook_time_minutes).suggested_actions

    def test_secondary_uses_method_default(self) -> None:
        primary, secondary = self._actions()
        self.assertEqual(primary.method_name, "Pressure Cook")
        self.assertEqual(primary.parameters.cooking_time, 3600)
        self.assertEqual(secondary.method_name, "Sear/Sauté")
        self.assertEqual(secondary.step_index, 0)
        self.assertEqual(secondary.parameters.cooking_time, 600)

    def test_secondary_capped_by_third_of_declared_time(self) -> None:
        primary, secondary = self._actions(cook_time_minutes=15)
        self.assertEqual(primary.parameters.cooking_time, 3600)
        self.assertEqual(secondary.parameters.cooking_time, 300)

    def test_long_declared_time_keeps_default(self) -> None:
        _, secondary = self._actions(cook_time_minutes=90)
        self.assertEqual(secondary.parameters.cooking_time, 600)


class DehydrateSuppressionScenarioTests(unittest.TestCase):
    def test_oven_temperature_beats_dehydrate(self) -> None:
        steps = ["Preheat oven to 450°F", "Dehydrate the apple slices, then bake for 10 minutes"]
        result = analyze_recipe("Apple Chips", "", steps)
        methods = [a.method_id for a in result.suggested_actions]
        self.assertEqual(methods[0], OvenMethod.BAKE.value)
        self.assertNotIn(OvenMethod.DEHYDRATE.value, methods)


class ProbeTests(unittest.TestCase):
    def test_roast_with_carryover(self) -> None:
        result = analyze_recipe("Roast Beef", "", ROAST_BEEF_STEPS)

        roast = result.suggested_actions[0]
        self.assertEqual(roast.method_id, OvenMethod.ROAST.value)
        self.assertEqual(roast.step_index, 1)
        self.assertEqual(roast.parameters.target_cavity_temp, 450)
        self.assertEqual(roast.parameters.fan_speed, FanSpeed.MEDIUM)
        self.assertEqual(roast.parameters.cooking_time, 3600)
        self.assertEqual(roast.parameters.target_probe_temp, 145)
        self.assertEqual(roast.parameters.remove_probe_temp, 140)
        self.assertTrue(result.use_probe)
        self.assertEqual(result.probe_temp, 145)

    def test_remove_temperature_always_below_target(self) -> None:
        for title, steps in [
            ("Roast Beef", ROAST_BEEF_STEPS),
            ("Grilled Chicken Breast", GRILLED_CHICKEN_STEPS),
            ("Pork Loin", ["Roast the pork loin until the internal temperature reaches 145°F, remove at 140°F"]),
        ]:
            for action in analyze_recipe(title, "", steps).suggested_actions:
                remove = getattr(action.parameters, "remove_probe_temp", None)
                if remove is not None:
                    self.assertLess(remove, action.parameters.target_probe_temp, title)

    def test_explicit_remove_temperature(self) -> None:
        self.assertEqual(extract_remove_temperature("pull the pork loin, remove at 140°f", 145), 140)

    def test_implausible_remove_temperature_falls_back(self) -> None:
        self.assertEqual(extract_remove_temperature("remove at 120°F and let rest", 145), 140)
        self.assertEqual(extract_remove_temperature("let rest before slicing", 165), 155)
        self.assertIsNone(extract_remove_temperature("serve immediately", 145))

    def test_remove_cues(self) -> None:
        self.assertTrue(should_use_remove_temp("Chicken breast with rice"))
        self.assertTrue(should_use_remove_temp("Let rest 10 minutes"))
        self.assertFalse(should_use_remove_temp("Black forest cake"))

    def test_protein_temperature(self) -> None:
        self.assertEqual(get_protein_temperature("Grilled salmon"), 145)
        self.assertEqual(get_protein_temperature("Duck confit"), 165)
        self.assertEqual(get_protein_temperature("Tofu bowl"), 145)


class EdgeCaseTests(unittest.TestCase):
    def test_stovetop_only(self) -> None:
        result = analyze_recipe("Tomato Soup", "", ["Bring to a boil in a saucepan", "Season and serve"])
        self.assertEqual(result.suggested_actions, [])
        self.assertEqual(result.confidence, 0.0)
        self.assertEqual(result.reasoning, [STOVETOP_ONLY_REASON])

    def test_no_method(self) -> None:
        result = analyze_recipe("Salad", "", ["Toss the greens with dressing"])
        self.assertEqual(result.suggested_actions, [])
        self.assertEqual(result.reasoning, [NO_METHOD_REASON])

    def test_empty_recipe(self) -> None:
        result = analyze_recipe("", "", [])
        self.assertEqual(result.suggested_actions, [])
        self.assertEqual(result.confidence, 0.0)

    def test_failure_gives_empty_result(self) -> None:
        with self.assertLogs("chefiq_actions.analyzer", level="ERROR"):
            result = analyze_recipe("Broken", "", [None])
        self.assertEqual(result.suggested_actions, [])
        self.assertEqual(result.confidence, 0.0)
        self.assertEqual(result.reasoning, [ERROR_REASON])

    def test_idempotent(self) -> None:
        for title, steps in [
            ("Rice", PRESSURE_STEPS),
            ("Grilled Chicken Breast", GRILLED_CHICKEN_STEPS),
            ("Country Loaf", TWO_STAGE_BAKE_STEPS),
            ("Roast Beef", ROAST_BEEF_STEPS),
        ]:
            self.assertEqual(
                _signature(analyze_recipe(title, "", steps)),
                _signature(analyze_recipe(title, "", steps)),
                title,
            )

    def test_values_within_plausible_windows(self) -> None:
        for title, steps in [("Country Loaf", TWO_STAGE_BAKE_STEPS), ("Roast Beef", ROAST_BEEF_STEPS)]:
            for action in analyze_recipe(title, "", steps).suggested_actions:
                self.assertGreaterEqual(action.parameters.target_cavity_temp, 150)
                self.assertLessEqual(action.parameters.target_cavity_temp, 550)
                self.assertGreater(action.parameters.cooking_time, 0)

    def test_mapping_steps(self) -> None:
        steps = [{"text": step} for step in PRESSURE_STEPS]
        self.assertEqual(
            _signature(analyze_recipe("Rice", "", steps)),
            _signature(analyze_recipe("Rice", "", PRESSURE_STEPS)),
        )

    def test_recipe_text_entry_point(self) -> None:
        recipe = RecipeText(title="Rice", steps=PRESSURE_STEPS)
        self.assertEqual(_signature(analyze(recipe)), _signature(analyze_recipe("Rice", "", PRESSURE_STEPS)))


if __name__ == "__main__":
    unittest.main()
