# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest
from datetime import date

import httpx

from fitdash.core.config import Settings
from fitdash.models import (
    Goals,
    GoalType,
    NutritionRecord,
    Profile,
    TrendPoint,
    UserState,
    WorkoutRecord,
)
from fitdash.prompts import generate_insight_prompt
from fitdash.services.adapter import AIProviderError, GeminiAdapter, get_ai_adapter
from fitdash.services.analytics import aggregate_metrics
from fitdash.services.insights import (
    INSIGHT_FALLBACK_MESSAGE,
    InsightParseError,
    InsightService,
    extract_text,
    parse_insights,
    split_insights,
)
from tests.fakes import FailingAdapter, FakeAdapter, gemini_body


def make_state(with_data: bool = True) -> UserState:
    workouts = [
        WorkoutRecord(date=date(2024, 1, d), exercise_name=name, calories_burned=cal)
        for d, name, cal in [(1, "Run", 300), (2, "Bike", 250), (3, "Swim", 200), (4, "Squat", 150)]
    ]
    nutrition = [
        NutritionRecord(date=date(2024, 1, 1), total_calories=2000),
        NutritionRecord(date=date(2024, 1, 2), total_calories=1900),
    ]
    return UserState(
        profile=Profile(display_name="Alex"),
        goals=Goals(target_weight_kg=75, target_body_fat_percent=15, goal_type=GoalType.MUSCLE_GAIN),
        workouts=workouts if with_data else [],
        nutrition=nutrition if with_data else [],
        trends=[TrendPoint(date=date(2024, 1, 1), weight_kg=80.5, body_fat_percent=20)],
    )


class TestInsightParser(unittest.TestCase):
    def test_split_drops_blank_lines(self) -> None:
        self.assertEqual(
            split_insights("First tip.\n\n   \nSecond tip.\r\nThird tip."),
            ["First tip.", "Second tip.", "Third tip."],
        )

    def test_split_only_on_newlines(self) -> None:
        self.assertEqual(
            split_insights("Tip\x0cone\u2028still one\x85\nTip two"),
            ["Tip\x0cone\u2028still one\x85", "Tip two"],
        )

    def test_extract_text(self) -> None:
        self.assertEqual(extract_text(gemini_body("hello")), "hello")

    def test_malformed_bodies_raise(self) -> None:
        bodies = [
            None,
            {},
            {"candidates": []},
            {"candidates": [{"content": {"parts": []}}]},
            {"candidates": [{"content": {"parts": [{}]}}]},
            {"candidates": [{"content": {"parts": [{"text": 42}]}}]},
        ]
        for body in bodies:
            with self.subTest(body=body):
                with self.assertRaises(InsightParseError):
                    extract_text(body)

    def test_parse_falls_back(self) -> None:
        self.assertEqual(parse_insights({"error": "quota"}, "fallback"), ["fallback"])

    def test_parse_success(self) -> None:
        self.assertEqual(parse_insights(gemini_body("a\nb"), "fallback"), ["a", "b"])


class TestInsightPrompt(unittest.TestCase):
    def test_prompt_contents(self) -> None:
        state = make_state()
        prompt = generate_insight_prompt(
            state, aggregate_metrics(state.workouts, state.nutrition), streak=4
        )
        self.assertIn("user data for Alex", prompt)
        self.assertIn("Primary Goal: Muscle Gain", prompt)
        self.assertIn("Current Weight: 80.5 kg (Goal: 75 kg)", prompt)
        self.assertIn("Workout Streak: 4 days", prompt)
        self.assertIn("Average Daily Calorie Intake: 1950 kcal", prompt)
        self.assertIn("Average Daily Calories Burned (from workouts): 225 kcal", prompt)
        # Only the three most recent workouts are named
        self.assertIn("Recent Workouts: Bike, Swim, Squat", prompt)

    def test_prompt_without_trend(self) -> None:
        state = make_state().model_copy(update={"trends": []})
        prompt = generate_insight_prompt(
            state, aggregate_metrics(state.workouts, state.nutrition), streak=0
        )
        self.assertIn("Current Weight: N/A kg", prompt)


class TestInsightService(unittest.IsolatedAsyncioTestCase):
    async def test_not_enough_data(self) -> None:
        adapter = FakeAdapter()
        service = InsightService(adapter)
        self.assertFalse(service.can_generate(make_state(with_data=False)))
        self.assertIsNone(await service.generate(make_state(with_data=False)))
        self.assertEqual(adapter.prompts, [])

    async def test_generates_insights(self) -> None:
        adapter = FakeAdapter(body=gemini_body("Tip one.\n\nTip two."))
        insights = await InsightService(adapter).generate(make_state())
        self.assertEqual(insights, ["Tip one.", "Tip two."])
        self.assertEqual(len(adapter.prompts), 1)
        self.assertIn("Alex", adapter.prompts[0])

    async def test_adapter_failure_falls_back(self) -> None:
        insights = await InsightService(FailingAdapter()).generate(make_state())
        self.assertEqual(insights, [INSIGHT_FALLBACK_MESSAGE])

    async def test_malformed_response_falls_back(self) -> None:
        insights = await InsightService(FakeAdapter(body={"candidates": []})).generate(make_state())
        self.assertEqual(insights, [INSIGHT_FALLBACK_MESSAGE])

    async def test_missing_adapter_falls_back(self) -> None:
        insights = await InsightService(None).generate(make_state())
        self.assertEqual(insights, [INSIGHT_FALLBACK_MESSAGE])


class TestGeminiAdapter(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.requests: list[httpx.Request] = []

    def make_adapter(self, status_code: int = 200, payload=None) -> GeminiAdapter:
        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return httpx.Response(status_code, json=payload if payload is not None else gemini_body("ok"))

        return GeminiAdapter(
            api_key="secret",
            model="test-model",
            base_url="https://ai.example.test/v1beta",
            transport=httpx.MockTransport(handler),
        )

    async def test_request_shape(self) -> None:
        body = await self.make_adapter().generate("Coach me")
        self.assertEqual(body, gemini_body("ok"))

        request = self.requests[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.url.path, "/v1beta/models/test-model:generateContent")
        self.assertEqual(request.url.params["key"], "secret")
        self.assertEqual(json.loads(request.content), {"contents": [{"parts": [{"text": "Coach me"}]}]})

    async def test_error_status_raises(self) -> None:
        with self.assertRaises(AIProviderError) as ctx:
            await self.make_adapter(status_code=500, payload={"error": "boom"}).generate("x")
        self.assertIn("500", str(ctx.exception))

    async def test_transport_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        adapter = GeminiAdapter(api_key="secret", transport=httpx.MockTransport(handler))
        with self.assertRaises(AIProviderError):
            await adapter.generate("x")

    async def test_service_falls_back_on_error_status(self) -> None:
        service = InsightService(self.make_adapter(status_code=429, payload={}))
        self.assertEqual(await service.generate(make_state()), [INSIGHT_FALLBACK_MESSAGE])


class TestAdapterFactory(unittest.TestCase):
    def test_missing_key(self) -> None:
        config = Settings(AI_API_KEY="", GEMINI_API_KEY=None)
        with self.assertRaises(ValueError):
            get_ai_adapter(config)

    def test_unknown_provider(self) -> None:
        with self.assertRaises(ValueError):
            get_ai_adapter(Settings(AI_PROVIDER="other", AI_API_KEY="k"))

    def test_gemini(self) -> None:
        adapter = get_ai_adapter(Settings(GEMINI_API_KEY="k", AI_MODEL="custom-model"))
        self.assertIsInstance(adapter, GeminiAdapter)
        self.assertEqual(adapter.model, "custom-model")
        self.assertEqual(adapter.api_key, "k")


if __name__ == "__main__":
    unittest.main()
