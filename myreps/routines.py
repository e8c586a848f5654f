import math

from . import storage
from .library import exercise_lookup
from .errors import ValidationError

DEFAULT_SETS = 3
DEFAULT_REPS = 10


def _positive_int(value, field):
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"invalid_{field}", f"'{field}' must be a whole number.")
    if not math.isfinite(number) or not number.is_integer():
        raise ValidationError(f"invalid_{field}", f"'{field}' must be a whole number.")
    if number < 1:
        raise ValidationError(f"invalid_{field}", f"'{field}' must be at least 1.")
    return int(number)


def _clean_plan_exercises(data_dir, exercises):
    """Validate routine entries and number them 1..n in the given order."""
    known = exercise_lookup(data_dir)
    cleaned = []
    for position, entry in enumerate(exercises or [], start=1):
        exercise_id = entry.get("exercise_id")
        if exercise_id not in known:
            raise ValidationError("unknown_exercise", f"Exercise '{exercise_id}' does not exist.")

        target_weight = entry.get("target_weight")
        if target_weight in ("", None):
            target_weight = None
        else:
            try:
                target_weight = float(target_weight)
            except (TypeError, ValueError):
                raise ValidationError("invalid_target_weight", "'target_weight' must be a number.")
            if not math.isfinite(target_weight):
                raise ValidationError("invalid_target_weight", "'target_weight' must be a finite number.")
            if target_weight < 0:
                raise ValidationError("invalid_target_weight", "'target_weight' cannot be negative.")

        cleaned.append({
            "exercise_id": exercise_id,
            "order": position,
            "sets": _positive_int(entry.get("sets", DEFAULT_SETS), "sets"),
            "reps": _positive_int(entry.get("reps", DEFAULT_REPS), "reps"),
            "target_weight": target_weight,
        })
    return cleaned


def _clean_name(name):
    name = (name or "").strip()
    if not name:
        raise ValidationError("name_required", "Routine name cannot be empty.")
    return name


def _assemble(workout, plan_rows, lookup):
    plan_rows = sorted(plan_rows, key=lambda r: r.get("order") or 0)
    workout = dict(workout)
    workout["exercises"] = [
        {
            "exercise_id": row["exercise_id"],
            "exercise_details": lookup.get(row["exercise_id"]),
            "order": row.get("order"),
            "sets": row.get("sets"),
            "reps": row.get("reps"),
            "target_weight": row.get("target_weight"),
        }
        for row in plan_rows
    ]
    return workout


def list_workouts(data_dir, user_id):
    workouts = storage.select(data_dir, "workouts", user_id=user_id)
    if not workouts:
        return []

    ids = {w["id"] for w in workouts}
    by_workout = {}
    for row in storage.select(data_dir, "workout_exercises"):
        if row.get("workout_id") in ids:
            by_workout.setdefault(row["workout_id"], []).append(row)

    lookup = exercise_lookup(data_dir)
    workouts.sort(key=lambda w: w.get("created_at") or "", reverse=True)
    return [_assemble(w, by_workout.get(w["id"], []), lookup) for w in workouts]


def get_workout(data_dir, user_id, workout_id):
    """Return the routine with its exercises, or None if it is missing or not owned by the user."""
    workout = storage.select_one(data_dir, "workouts", id=workout_id)
    if workout is None or workout.get("user_id") != user_id:
        return None
    plan_rows = storage.select(data_dir, "workout_exercises", workout_id=workout_id)
    return _assemble(workout, plan_rows, exercise_lookup(data_dir))


def _insert_plan(data_dir, workout_id, plan):
    if plan:
        storage.insert(data_dir, "workout_exercises", [dict(p, workout_id=workout_id) for p in plan])


def create_workout(data_dir, user_id, name, description="", exercises=None):
    name = _clean_name(name)
    plan = _clean_plan_exercises(data_dir, exercises)
    workout = storage.insert(data_dir, "workouts", {
        "user_id": user_id,
        "name": name,
        "description": (description or "").strip(),
    })
    _insert_plan(data_dir, workout["id"], plan)
    return get_workout(data_dir, user_id, workout["id"])


def update_workout(data_dir, user_id, workout_id, name, description="", exercises=None):
    """Rename the routine and replace its exercise list."""
    if get_workout(data_dir, user_id, workout_id) is None:
        return None
    name = _clean_name(name)
    plan = _clean_plan_exercises(data_dir, exercises)

    storage.update(data_dir, "workouts", workout_id, {
        "name": name,
        "description": (description or "").strip(),
    })
    storage.delete(data_dir, "workout_exercises", workout_id=workout_id)
    _insert_plan(data_dir, workout_id, plan)
    return get_workout(data_dir, user_id, workout_id)


def delete_workout(data_dir, user_id, workout_id):
    if get_workout(data_dir, user_id, workout_id) is None:
        return False
    storage.delete(data_dir, "workout_exercises", workout_id=workout_id)
    storage.delete(data_dir, "workouts", id=workout_id)
    return True


def add_exercise_to_workout(data_dir, user_id, workout_id, exercise_id, sets=DEFAULT_SETS, reps=DEFAULT_REPS):
    workout = get_workout(data_dir, user_id, workout_id)
    if workout is None:
        return None
    if any(e["exercise_id"] == exercise_id for e in workout["exercises"]):
        raise ValidationError("already_in_routine", "This exercise is already in the selected routine.")

    entry = _clean_plan_exercises(data_dir, [{"exercise_id": exercise_id, "sets": sets, "reps": reps}])[0]
    entry["order"] = len(workout["exercises"]) + 1
    _insert_plan(data_dir, workout_id, [entry])
    return get_workout(data_dir, user_id, workout_id)


def drop_exercise_everywhere(data_dir, exercise_id):
    """Remove a deleted library exercise from all routines, closing the gaps in their order."""
    rows = storage.select(data_dir, "workout_exercises")
    affected = {r["workout_id"] for r in rows if r.get("exercise_id") == exercise_id}
    if not affected:
        return 0

    storage.delete(data_dir, "workout_exercises", exercise_id=exercise_id)
    for workout_id in affected:
        remaining = sorted(
            storage.select(data_dir, "workout_exercises", workout_id=workout_id),
            key=lambda r: r.get("order") or 0,
        )
        for position, row in enumerate(remaining, start=1):
            if row.get("order") != position:
                storage.update(data_dir, "workout_exercises", row["id"], {"order": position})
    return len(affected)
