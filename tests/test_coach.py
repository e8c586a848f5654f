import json

import pytest
import requests

from myreps import coach, library, routines
from myreps.errors import AIServiceError


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text or json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def gemini_reply(text):
    return FakeResponse(payload={"candidates": [{"content": {"parts": [{"text": text}]}}]})


@pytest.fixture
def exercises(data_dir):
    return library.load_exercises(data_dir)


def test_call_gemini_sends_prompt(monkeypatch):
    captured = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        captured.update(url=url, json=json, headers=headers, timeout=timeout)
        return gemini_reply("  Keep going!  ")

    monkeypatch.setattr(requests, "post", fake_post)

    text = coach.call_gemini("hello", "key-1", "gemini-test", timeout=7, temperature=0.5)
    assert text == "Keep going!"
    assert captured["url"].endswith("/models/gemini-test:generateContent")
    assert captured["headers"]["x-goog-api-key"] == "key-1"
    assert captured["json"]["contents"][0]["parts"][0]["text"] == "hello"
    assert captured["json"]["generationConfig"] == {"temperature": 0.5}
    assert captured["timeout"] == 7


def test_call_gemini_without_key():
    with pytest.raises(AIServiceError) as exc:
        coach.call_gemini("hello", None, "gemini-test")
    assert exc.value.error == "ai_unavailable"
    assert exc.value.status == 503


@pytest.mark.parametrize("response, error", [
    (FakeResponse(403, text="denied"), "ai_auth_failed"),
    (FakeResponse(500, text="boom"), "ai_error"),
    (FakeResponse(200, payload={"candidates": []}), "ai_empty_response"),
    (gemini_reply("   "), "ai_empty_response"),
])
def test_call_gemini_failures(monkeypatch, response, error):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: response)
    with pytest.raises(AIServiceError) as exc:
        coach.call_gemini("hello", "key", "model")
    assert exc.value.error == error


def test_call_gemini_transport_error(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests, "post", boom)
    with pytest.raises(AIServiceError) as exc:
        coach.call_gemini("hello", "key", "model")
    assert exc.value.error == "ai_unreachable"


def test_coach_greeting():
    assert '"Muscle Gain"' in coach.coach_greeting("Muscle Gain")
    assert '"general fitness"' in coach.coach_greeting(None)


def test_build_coach_prompt_with_log():
    profile = {"name": "Ana", "goal": "Weight Loss"}
    log = {
        "workout_name": "Push",
        "start_time": "2024-03-05T18:00:00",
        "overall_difficulty_rating": "Hard",
        "completed_exercises": [{"exercise_id": "push-up", "sets": [{"reps": 12, "weight": 0}]}],
    }
    prompt = coach.build_coach_prompt(profile, log, {"push-up": {"name": "Push-up"}})

    assert "Ana" in prompt
    assert '"Weight Loss"' in prompt
    assert "05/03/2024" in prompt
    assert "Push-up: 1 set(s), first set 12 reps with 0kg" in prompt
    assert 'rated the workout overall as: "Hard"' in prompt


def test_build_coach_prompt_without_log():
    prompt = coach.build_coach_prompt({"name": "Ana"})
    assert "has not logged a workout recently" in prompt


@pytest.mark.parametrize("text", [
    '{"name": "A", "exercises": [{"exercise_name": "Plank", "sets": 3, "reps": 30}]}',
    '```json\n{"name": "A", "exercises": [{"exercise_name": "Plank", "sets": 3, "reps": 30}]}\n```',
    '```\n{"name": "A", "exercises": [{"exercise_name": "Plank", "sets": 3, "reps": 30}]}\n```',
])
def test_parse_generated_workout_strips_fences(text):
    workout = coach.parse_generated_workout(text)
    assert workout.name == "A"
    assert workout.exercises[0].exercise_name == "Plank"


@pytest.mark.parametrize("text, error", [
    ("not json at all", "invalid_json"),
    ('{"name": "A"}', "incomplete_routine"),
    ('{"name": "A", "exercises": []}', "incomplete_routine"),
    ('{"name": "A", "exercises": [{"exercise_name": "Plank", "sets": 0, "reps": 5}]}', "incomplete_routine"),
])
def test_parse_generated_workout_rejects(text, error):
    with pytest.raises(AIServiceError) as exc:
        coach.parse_generated_workout(text)
    assert exc.value.error == error


def test_generate_ai_routine_drops_unknown_names(monkeypatch, exercises, caplog):
    reply = {
        "name": "Core Blast",
        "description": "Short core session.",
        "exercises": [
            {"exercise_name": "Plank", "sets": 3, "reps": 30},
            {"exercise_name": "Dragon Flag", "sets": 3, "reps": 5},
        ],
    }
    monkeypatch.setattr(requests, "post", lambda *a, **kw: gemini_reply(json.dumps(reply)))

    generated = coach.generate_ai_routine(coach.RoutinePreferences(focus="Core"), exercises, "key", "model")
    assert [e.exercise_name for e in generated.exercises] == ["Plank"]
    assert "Dragon Flag" in caplog.text


def test_generate_ai_routine_with_no_valid_exercises(monkeypatch, exercises):
    reply = {"name": "X", "exercises": [{"exercise_name": "Dragon Flag", "sets": 3, "reps": 5}]}
    monkeypatch.setattr(requests, "post", lambda *a, **kw: gemini_reply(json.dumps(reply)))

    with pytest.raises(AIServiceError) as exc:
        coach.generate_ai_routine(coach.RoutinePreferences(), exercises, "key", "model")
    assert exc.value.error == "no_valid_exercises"


def test_generate_ai_routine_with_empty_library():
    with pytest.raises(AIServiceError) as exc:
        coach.generate_ai_routine(coach.RoutinePreferences(), [], "key", "model")
    assert exc.value.status == 400


def test_build_routine_prompt_lists_library(exercises):
    prompt = coach.build_routine_prompt(coach.RoutinePreferences(workout_duration=45), exercises)
    assert "45 minutes" in prompt
    assert '"name": "Hanging Leg Raise"' in prompt


def test_save_generated_workout(data_dir, exercises):
    generated = coach.GeneratedWorkout(
        name="Core Blast",
        description="Short core session.",
        exercises=[
            coach.GeneratedExercise(exercise_name="Plank", sets=3, reps=30),
            coach.GeneratedExercise(exercise_name="Hanging Leg Raise", sets=4, reps=8),
        ],
    )
    workout = coach.save_generated_workout(data_dir, "u1", generated, exercises)

    assert routines.get_workout(data_dir, "u1", workout["id"])["name"] == "Core Blast"
    assert [(e["exercise_id"], e["order"], e["sets"], e["reps"]) for e in workout["exercises"]] == [
        ("plank", 1, 3, 30),
        ("hanging-leg-raise", 2, 4, 8),
    ]
