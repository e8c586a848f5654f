"""
Generative-language helpers: coaching tips and AI-built routines.

Both go through `call_gemini`, a thin wrapper over the Gemini
generateContent REST endpoint.
"""
import re
import json
import logging
from datetime import datetime
from typing import List, Literal

import requests
from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

from . import routines
from .defaults import GEMINI_SAFETY_SETTINGS
from .errors import AIServiceError

logger = logging.getLogger(__name__)

GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
APP_NAME = "Myreps"

FENCE_RE = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)


# ============================================================================
# Pydantic models
# ============================================================================

class RoutinePreferences(BaseModel):
    """What the user asks the AI routine generator for."""
    days_per_week: int = Field(3, ge=1, le=7, description="Informative only, one session is generated")
    workout_duration: int = Field(60, ge=10, le=240, description="Session length in minutes")
    available_equipment: str = "Dumbbells, Bench"
    fitness_level: Literal["Beginner", "Intermediate", "Advanced"] = "Intermediate"
    focus: str = "Full Body"


class GeneratedExercise(BaseModel):
    exercise_name: str = Field(min_length=1)
    sets: int = Field(ge=1)
    reps: int = Field(ge=1)


class GeneratedWorkout(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    exercises: List[GeneratedExercise] = Field(min_length=1)


# ============================================================================
# Transport
# ============================================================================

def call_gemini(prompt, api_key, model, timeout=60, **generation_config):
    """Send one prompt and return the model's text. Raises AIServiceError on any failure."""
    if not api_key:
        raise AIServiceError("ai_unavailable", "The AI service is not configured.", status=503)

    payload = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": generation_config,
        "safetySettings": GEMINI_SAFETY_SETTINGS,
    }

    try:
        response = requests.post(
            GEMINI_ENDPOINT.format(model=model),
            json=payload,
            headers={"Content-Type": "application/json", "x-goog-api-key": api_key},
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.error("Gemini request failed: %s", e)
        raise AIServiceError("ai_unreachable", f"Could not reach the AI service: {e}")

    if response.status_code != 200:
        logger.error("Gemini API error %s: %s", response.status_code, response.text[:500])
        if response.status_code in (401, 403):
            raise AIServiceError("ai_auth_failed", "The AI service rejected the API key or model permissions.")
        raise AIServiceError("ai_error", f"AI service error {response.status_code}.")

    try:
        data = response.json()
        parts = data["candidates"][0]["content"]["parts"]
    except (ValueError, KeyError, IndexError, TypeError):
        logger.warning("Gemini returned no usable candidate")
        raise AIServiceError("ai_empty_response", "The AI returned an empty answer. Try rephrasing the request.")

    text = "".join(p.get("text", "") for p in parts).strip()
    if not text:
        raise AIServiceError("ai_empty_response", "The AI returned an empty answer. Try rephrasing the request.")
    return text


# ============================================================================
# Coaching tips
# ============================================================================

def coach_greeting(goal=None):
    return f"Hi! I'm your {APP_NAME} AI Coach. I'm here to help you reach your \"{goal or 'general fitness'}\" goals."


def _describe_exercise(logged, exercises_by_id):
    details = exercises_by_id.get(logged["exercise_id"]) or {}
    name = details.get("name") or logged["exercise_id"]
    sets = logged.get("sets") or []
    line = f"  - {name}: {len(sets)} set(s)"
    if sets:
        first = sets[0]
        line += f", first set {first.get('reps', 'N/A')} reps with {first.get('weight', 'N/A')}kg"
    return line


def build_coach_prompt(profile, last_log=None, exercises_by_id=None):
    exercises_by_id = exercises_by_id or {}
    goal = profile.get("goal") or "improve their general fitness"
    prompt = (
        f"You are {APP_NAME} AI Coach, an expert and motivating virtual personal trainer for the {APP_NAME} app. "
        f"You are talking to {profile.get('name') or 'a user'}. Their main goal is \"{goal}\".\n\n"
    )

    if last_log:
        start = last_log.get("start_time")
        try:
            date_label = datetime.fromisoformat(start).strftime("%d/%m/%Y")
        except (TypeError, ValueError):
            date_label = "unknown date"
        prompt += (
            "The user just logged a workout:\n"
            f"- Name/type: {last_log.get('workout_name') or 'Custom workout'}\n"
            f"- Date: {date_label}\n"
        )
        completed = last_log.get("completed_exercises") or []
        if completed:
            prompt += "- Exercises performed:\n"
            prompt += "\n".join(_describe_exercise(c, exercises_by_id) for c in completed) + "\n"
        if last_log.get("overall_difficulty_rating"):
            prompt += f"- They rated the workout overall as: \"{last_log['overall_difficulty_rating']}\".\n"
    else:
        prompt += "The user has not logged a workout recently.\n"

    prompt += (
        "\nBased on this (especially their goal and their last workout, if available), give a short tip "
        "(2-4 sentences) that is specific, practical and motivating. Encourage them and help them progress.\n"
        "If the workout was rated 'Hard', suggest how to adjust it next time or stress the importance of rest.\n"
        "If it was 'Easy', suggest ways to progress (more weight, more reps, harder variations).\n"
        "If it was 'Fair', positively reinforce their effort and consistency.\n"
        "If there is no rating, give general, motivating advice.\n"
        "Be direct and useful."
    )
    return prompt


def get_coach_advice(prompt, api_key, model, timeout=60):
    return call_gemini(prompt, api_key, model, timeout=timeout, temperature=0.7, topK=40, topP=0.95)


# ============================================================================
# AI routine generation
# ============================================================================

def build_routine_prompt(preferences: RoutinePreferences, exercises):
    catalog = [
        {
            "id": ex["id"],
            "name": ex["name"],
            "muscle_group": ex.get("muscle_group"),
            "equipment": ex.get("equipment") or "Bodyweight",
        }
        for ex in exercises
    ]
    return f"""
You are {APP_NAME} AI Coach, an expert fitness trainer. Create a personalised workout from the user's
preferences using only the exercises listed below.

**User preferences:**
- Days per week: {preferences.days_per_week} (informative only, generate a single day's workout).
- Workout duration: {preferences.workout_duration} minutes.
- Fitness level: {preferences.fitness_level}.
- Main focus: {preferences.focus}.
- Available equipment: {preferences.available_equipment}.

**Available exercises (use ONLY these):**
{json.dumps(catalog, indent=2)}

**Output instructions:**
1. Your answer MUST be a single valid JSON object, with no extra text, explanations or markdown fences.
2. The JSON object must have this structure:
   {{
     "name": "A creative, descriptive routine name",
     "description": "A short description of the routine (1-2 sentences).",
     "exercises": [
       {{"exercise_name": "Exact name from the list", "sets": 3, "reps": 10}}
     ]
   }}
3. Pick a number of exercises that fits {preferences.workout_duration} minutes, counting sets, reps and rest.
4. "exercise_name" must match a "name" in the list EXACTLY. "reps" is a single number, never a range.
5. Only choose exercises suited to the available equipment and the user's fitness level.
""".strip()


def strip_fences(text):
    text = (text or "").strip()
    match = FENCE_RE.match(text)
    if match and match.group(2):
        return match.group(2).strip()
    return text


def parse_generated_workout(text) -> GeneratedWorkout:
    try:
        data = json.loads(strip_fences(text))
    except json.JSONDecodeError:
        raise AIServiceError("invalid_json", "The AI returned invalid JSON. Please try again.")
    try:
        return GeneratedWorkout.model_validate(data)
    except SchemaError as e:
        logger.warning("AI routine failed validation: %s", e)
        raise AIServiceError(
            "incomplete_routine",
            "The AI produced an incomplete routine. Try again with clearer preferences.",
        )


def keep_known_exercises(workout: GeneratedWorkout, exercises) -> GeneratedWorkout:
    known = {ex["name"] for ex in exercises}
    for item in workout.exercises:
        if item.exercise_name not in known:
            logger.warning("AI generated an unknown exercise %r, ignoring it", item.exercise_name)
    kept = [item for item in workout.exercises if item.exercise_name in known]
    if not kept:
        raise AIServiceError(
            "no_valid_exercises",
            "The AI could not find valid exercises for your request. Try adjusting the equipment or focus.",
        )
    return workout.model_copy(update={"exercises": kept})


def generate_ai_routine(preferences: RoutinePreferences, exercises, api_key, model, timeout=60):
    if not exercises:
        raise AIServiceError("no_exercises", "The exercise library is empty.", status=400)
    text = call_gemini(
        build_routine_prompt(preferences, exercises),
        api_key,
        model,
        timeout=timeout,
        temperature=0.8,
        responseMimeType="application/json",
    )
    return keep_known_exercises(parse_generated_workout(text), exercises)


def save_generated_workout(data_dir, user_id, generated: GeneratedWorkout, exercises):
    """Store an AI routine for the user, resolving exercise names to library ids."""
    generated = keep_known_exercises(generated, exercises)
    ids_by_name = {ex["name"]: ex["id"] for ex in exercises}
    return routines.create_workout(
        data_dir,
        user_id,
        generated.name,
        generated.description,
        [
            {"exercise_id": ids_by_name[item.exercise_name], "sets": item.sets, "reps": item.reps}
            for item in generated.exercises
        ],
    )
