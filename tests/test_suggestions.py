import unittest

from chefiq_actions.analyzer import analyze
from chefiq_actions.llm_service import LLMServiceError
from chefiq_actions.models import BakeParameters, CookingAction, RecipeText
from chefiq_actions.suggestions import suggest_cooking_actions

MINI_OVEN_ID = "4a3cd4f1-839b-4f45-80ea-08f594ff74c3"

RECIPE = RecipeText(
    title="Rice",
    steps=["Seal lid and pressure cook on high pressure for 8 minutes", "Quick release pressure"],
)

LLM_ACTION = CookingAction(
    appliance_id=MINI_OVEN_ID,
    method_id="METHOD_BAKE",
    method_name="Bake",
    parameters=BakeParameters(cooking_time=1200, target_probe_temp=165),
    step_index=0,
)


class FakeAnalyzer:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def analyze_cooking_actions(self, recipe):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


async def no_sleep(delay):
    pass


class SuggestCookingActionsTests(unittest.IsolatedAsyncioTestCase):
    async def test_llm_actions_are_adopted(self) -> None:
        result = await suggest_cooking_actions(RECIPE, FakeAnalyzer([LLM_ACTION]), sleep=no_sleep)
        self.assertEqual(result.suggested_actions, [LLM_ACTION])
        self.assertEqual(result.suggested_appliance_id, MINI_OVEN_ID)
        self.assertEqual(result.confidence, 0.9)
        self.assertTrue(result.use_probe)
        self.assertEqual(result.probe_temp, 165)
        self.assertEqual(result.reasoning, ["AI analysis suggested 1 cooking action(s)."])

    async def test_no_analyzer_uses_heuristics(self) -> None:
        result = await suggest_cooking_actions(RECIPE)
        self.assertEqual(result.suggested_actions[0].method_name, "Pressure Cook")
        self.assertEqual(result.reasoning, analyze(RECIPE).reasoning)

    async def test_empty_llm_answer_falls_back(self) -> None:
        analyzer = FakeAnalyzer([])
        result = await suggest_cooking_actions(RECIPE, analyzer, sleep=no_sleep)
        self.assertEqual(analyzer.calls, 1)
        self.assertEqual(result.suggested_actions[0].method_name, "Pressure Cook")

    async def test_transient_error_is_retried(self) -> None:
        analyzer = FakeAnalyzer(LLMServiceError(503, "overloaded"), [LLM_ACTION])
        result = await suggest_cooking_actions(RECIPE, analyzer, sleep=no_sleep)
        self.assertEqual(analyzer.calls, 2)
        self.assertEqual(result.suggested_actions, [LLM_ACTION])

    async def test_failure_falls_back_without_raising(self) -> None:
        analyzer = FakeAnalyzer(ValueError("LLM response is not valid JSON"))
        with self.assertLogs("chefiq_actions.suggestions", level="WARNING"):
            result = await suggest_cooking_actions(RECIPE, analyzer, sleep=no_sleep)
        self.assertEqual(analyzer.calls, 1)
        self.assertEqual(result.suggested_actions[0].method_name, "Pressure Cook")
        self.assertEqual(result.confidence, 1.0)


if __name__ == "__main__":
    unittest.main()
