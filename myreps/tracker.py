"""
In-progress workout sessions.

A session is a plain dict kept in the in_progress document under
"{user_id}-{workout_id}", so a user can leave the session page and resume
where they stopped. Every mutating helper takes the state, changes it in
place and returns it; the routes persist it afterwards.
"""
import math
from datetime import datetime, timedelta

from . import storage
from .accounts import record_last_weights
from .defaults import DEFAULT_REST_SECONDS, DIFFICULTY_RATINGS
from .errors import ValidationError

CUSTOM_WORKOUT_KEY = "custom"
CUSTOM_WORKOUT_NAME = "Custom Workout"
SET_FIELDS = ("reps", "weight")


def session_key(user_id, workout_id):
    return f"{user_id}-{workout_id or CUSTOM_WORKOUT_KEY}"


def custom_workout(exercise_ids, sets=3, reps=10):
    """An unsaved, ad-hoc plan built from a list of exercise ids."""
    return {
        "id": None,
        "name": CUSTOM_WORKOUT_NAME,
        "exercises": [
            {"exercise_id": ex_id, "order": i, "sets": sets, "reps": reps, "target_weight": None}
            for i, ex_id in enumerate(exercise_ids, start=1)
        ],
    }


def _parse_time(value):
    return datetime.fromisoformat(value) if value else None


def new_state(user_id, workout, now=None):
    now = now or datetime.now()
    return {
        "user_id": user_id,
        "workout_id": workout.get("id"),
        "workout_name": workout.get("name"),
        "plan": [
            {
                "exercise_id": e["exercise_id"],
                "sets": e.get("sets") or 1,
                "reps": e.get("reps"),
                "target_weight": e.get("target_weight"),
            }
            for e in workout.get("exercises", [])
        ],
        "exercises": [
            {
                "exercise_id": e["exercise_id"],
                "sets": [{"reps": 0, "weight": 0} for _ in range(e.get("sets") or 1)],
                "notes": "",
            }
            for e in workout.get("exercises", [])
        ],
        "current_index": 0,
        "start_time": now.isoformat(),
        "rest_ends_at": None,
        "rest_seconds": None,
        "awaiting_rating": False,
    }


def restore_state(saved, workout):
    """Return the saved state if it still matches the workout's exercises in order, else None."""
    if not isinstance(saved, dict):
        return None
    logged = saved.get("exercises")
    planned = [e["exercise_id"] for e in workout.get("exercises", [])]
    if not isinstance(logged, list) or len(logged) != len(planned):
        return None
    if [p.get("exercise_id") for p in saved.get("plan") or []] != planned:
        return None
    try:
        _parse_time(saved.get("start_time"))
    except (TypeError, ValueError):
        return None
    saved.setdefault("current_index", 0)
    return saved


# ───────────── Persistence ─────────────

def load_state(data_dir, user_id, workout_id):
    return storage.load_document(data_dir, "in_progress").get(session_key(user_id, workout_id))


def save_state(data_dir, state):
    sessions = storage.load_document(data_dir, "in_progress")
    sessions[session_key(state["user_id"], state["workout_id"])] = state
    storage.save_document(data_dir, "in_progress", sessions)


def clear_state(data_dir, user_id, workout_id):
    sessions = storage.load_document(data_dir, "in_progress")
    if sessions.pop(session_key(user_id, workout_id), None) is not None:
        storage.save_document(data_dir, "in_progress", sessions)
        return True
    return False


def start_session(data_dir, user_id, workout, now=None):
    """Resume the saved session for this routine or start a fresh one. Returns (state, resumed)."""
    if not workout.get("exercises"):
        raise ValidationError("workout_empty", "This routine has no exercises. Add some before starting.")

    saved = load_state(data_dir, user_id, workout.get("id"))
    state = restore_state(saved, workout) if saved is not None else None
    resumed = state is not None
    if state is None:
        state = new_state(user_id, workout, now)
    save_state(data_dir, state)
    return state, resumed


# ───────────── Editing ─────────────

def _exercise_index(state, exercise_index):
    if exercise_index is None:
        return state["current_index"]
    try:
        exercise_index = int(exercise_index)
    except (TypeError, ValueError):
        raise ValidationError("invalid_exercise_index", "Exercise index must be a number.")
    if not 0 <= exercise_index < len(state["exercises"]):
        raise ValidationError("invalid_exercise_index", "Exercise index is out of range.")
    return exercise_index


def parse_set_value(field, value):
    if field not in SET_FIELDS:
        raise ValidationError("invalid_field", f"Field must be one of: {', '.join(SET_FIELDS)}.")
    if value in ("", None):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError("invalid_value", f"'{value}' is not a number.")
    if not math.isfinite(number):
        raise ValidationError("invalid_value", f"'{value}' is not a finite number.")
    if number < 0:
        raise ValidationError("invalid_value", "Values cannot be negative.")
    if field == "reps":
        if not number.is_integer():
            raise ValidationError("invalid_value", "Reps must be a whole number.")
        return int(number)
    return int(number) if number.is_integer() else number


def update_set(state, set_index, field, value, exercise_index=None):
    logged = state["exercises"][_exercise_index(state, exercise_index)]
    try:
        set_index = int(set_index)
    except (TypeError, ValueError):
        raise ValidationError("invalid_set_index", "Set index must be a number.")
    if not 0 <= set_index < len(logged["sets"]):
        raise ValidationError("invalid_set_index", "Set index is out of range.")

    logged["sets"][set_index][field] = parse_set_value(field, value)
    return state


def set_notes(state, notes, exercise_index=None):
    state["exercises"][_exercise_index(state, exercise_index)]["notes"] = (notes or "").strip()
    return state


def next_exercise(state):
    if state["current_index"] < len(state["exercises"]) - 1:
        state["current_index"] += 1
    else:
        state["awaiting_rating"] = True
    return state


def previous_exercise(state):
    state["awaiting_rating"] = False
    if state["current_index"] > 0:
        state["current_index"] -= 1
    return state


# ───────────── Clocks ─────────────

def start_rest(state, seconds=DEFAULT_REST_SECONDS, now=None):
    now = now or datetime.now()
    try:
        seconds = int(seconds)
    except (TypeError, ValueError):
        raise ValidationError("invalid_rest", "Rest duration must be a number of seconds.")
    if seconds < 1:
        raise ValidationError("invalid_rest", "Rest duration must be at least one second.")
    state["rest_seconds"] = seconds
    state["rest_ends_at"] = (now + timedelta(seconds=seconds)).isoformat()
    return state


def skip_rest(state):
    state["rest_ends_at"] = None
    state["rest_seconds"] = None
    return state


def rest_status(state, now=None):
    ends_at = _parse_time(state.get("rest_ends_at"))
    if ends_at is None:
        return {"resting": False, "seconds_left": 0, "finished": False, "display": "0:00"}
    now = now or datetime.now()
    left = max(0, math.ceil((ends_at - now).total_seconds()))
    return {
        "resting": True,
        "seconds_left": left,
        "finished": left == 0,
        "display": f"{left // 60}:{left % 60:02d}",
    }


def elapsed_seconds(state, now=None):
    now = now or datetime.now()
    return max(0, int((now - _parse_time(state["start_time"])).total_seconds()))


def elapsed_display(state, now=None):
    elapsed = elapsed_seconds(state, now)
    return f"{elapsed // 60:02d}:{elapsed % 60:02d}"


def duration_minutes(state, now=None):
    return elapsed_seconds(state, now) // 60


# ───────────── Views ─────────────

def session_view(state, exercises_by_id, profile=None, now=None):
    """Everything the logger screen needs for the current exercise."""
    index = state["current_index"]
    plan = state["plan"][index]
    logged = state["exercises"][index]
    last_weights = (profile or {}).get("last_exercise_weights") or {}
    return {
        "workout_id": state["workout_id"],
        "workout_name": state["workout_name"],
        "current_index": index,
        "total_exercises": len(state["exercises"]),
        "is_last": index == len(state["exercises"]) - 1,
        "awaiting_rating": state.get("awaiting_rating", False),
        "exercise": exercises_by_id.get(plan["exercise_id"]),
        "target": {"sets": plan["sets"], "reps": plan["reps"], "target_weight": plan.get("target_weight")},
        "last_weight": last_weights.get(plan["exercise_id"]),
        "logged": logged,
        "elapsed": elapsed_display(state, now),
        "rest": rest_status(state, now),
        "start_time": state["start_time"],
    }


# ───────────── Finishing ─────────────

def finish(data_dir, state, difficulty=None, notes="", now=None):
    """
    Persist the session as a workout log plus one exercise log per set,
    update the user's last recorded weights and drop the in-progress state.
    """
    if difficulty in ("", None):
        difficulty = None
    elif difficulty not in DIFFICULTY_RATINGS:
        raise ValidationError("invalid_rating", f"Rating must be one of: {', '.join(DIFFICULTY_RATINGS)}.")

    now = now or datetime.now()
    log = storage.insert(data_dir, "workout_logs", {
        "user_id": state["user_id"],
        "workout_id": state["workout_id"],
        "workout_name": state["workout_name"],
        "start_time": state["start_time"],
        "end_time": now.isoformat(),
        "duration_minutes": duration_minutes(state, now),
        "overall_difficulty_rating": difficulty,
        "notes": (notes or "").strip() or None,
    })

    set_rows = []
    completed = []
    for logged in state["exercises"]:
        sets = [{"reps": s.get("reps") or 0, "weight": s.get("weight") or 0} for s in logged["sets"]]
        completed.append({"exercise_id": logged["exercise_id"], "sets": sets, "notes": logged.get("notes") or ""})
        for number, logged_set in enumerate(sets, start=1):
            set_rows.append(dict(
                logged_set,
                workout_log_id=log["id"],
                exercise_id=logged["exercise_id"],
                set_number=number,
                comment=logged.get("notes") or None,
            ))
    if set_rows:
        storage.insert(data_dir, "exercise_logs", set_rows)

    record_last_weights(data_dir, state["user_id"], completed, state["start_time"])
    clear_state(data_dir, state["user_id"], state["workout_id"])

    return dict(log, completed_exercises=completed)
