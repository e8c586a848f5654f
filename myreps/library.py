from . import storage
from .defaults import DIFFICULTY_LEVELS
from .errors import ValidationError

CORE_FILTERS = ("", "core", "non_core")

EDITABLE_FIELDS = (
    "name", "description", "muscle_group", "muscles", "equipment",
    "instructions", "video_url", "image_url", "gif_url", "difficulty", "is_core",
)


def split_equipment(equipment):
    return [e.strip() for e in (equipment or "").split(",") if e.strip()]


def load_exercises(data_dir):
    exercises = storage.select(data_dir, "exercises")
    exercises.sort(key=lambda e: (e.get("name") or "").lower())
    return exercises


def get_exercise(data_dir, exercise_id):
    return storage.select_one(data_dir, "exercises", id=exercise_id)


def exercise_lookup(data_dir):
    return {e["id"]: e for e in storage.select(data_dir, "exercises")}


def filter_exercises(exercises, search="", muscle_group="", equipment="", difficulty="", core=""):
    search = (search or "").strip().lower()
    equipment = (equipment or "").strip().lower()
    if core not in CORE_FILTERS:
        core = ""

    result = []
    for ex in exercises:
        if search and search not in (ex.get("name") or "").lower():
            continue
        if muscle_group and ex.get("muscle_group") != muscle_group:
            continue
        if equipment and equipment not in (ex.get("equipment") or "").lower():
            continue
        if difficulty and ex.get("difficulty") != difficulty:
            continue
        if core == "core" and not ex.get("is_core"):
            continue
        if core == "non_core" and ex.get("is_core"):
            continue
        result.append(ex)
    return result


def filter_options(exercises):
    """Distinct values the client offers in its filter dropdowns."""
    muscle_groups = sorted({e["muscle_group"] for e in exercises if e.get("muscle_group")})
    equipment = sorted({item for e in exercises for item in split_equipment(e.get("equipment"))})
    difficulties = sorted({e["difficulty"] for e in exercises if e.get("difficulty")})
    return {"muscle_groups": muscle_groups, "equipment": equipment, "difficulties": difficulties}


# ───────── Admin maintenance ─────────

def _clean_exercise(data: dict, partial=False):
    cleaned = {k: data[k] for k in EDITABLE_FIELDS if k in data}

    for key in ("name", "muscle_group"):
        if key in cleaned or not partial:
            value = (cleaned.get(key) or "").strip()
            if not value:
                raise ValidationError(f"{key}_required", f"Exercise {key.replace('_', ' ')} is required.")
            cleaned[key] = value

    if cleaned.get("difficulty") in ("", None):
        if "difficulty" in cleaned or not partial:
            cleaned["difficulty"] = None
    elif cleaned["difficulty"] not in DIFFICULTY_LEVELS:
        raise ValidationError("invalid_difficulty", f"Difficulty must be one of: {', '.join(DIFFICULTY_LEVELS)}.")

    if "is_core" in cleaned or not partial:
        cleaned["is_core"] = bool(cleaned.get("is_core"))

    return cleaned


def _check_unique_name(data_dir, name, exercise_id=None):
    for e in storage.select(data_dir, "exercises"):
        if e.get("id") != exercise_id and (e.get("name") or "").lower() == name.lower():
            raise ValidationError("duplicate_exercise", f"An exercise named '{name}' already exists.")


def add_exercise(data_dir, data: dict):
    cleaned = _clean_exercise(data)
    _check_unique_name(data_dir, cleaned["name"])
    return storage.insert(data_dir, "exercises", cleaned)


def update_exercise(data_dir, exercise_id, data: dict):
    cleaned = _clean_exercise(data, partial=True)
    if "name" in cleaned:
        _check_unique_name(data_dir, cleaned["name"], exercise_id)
    return storage.update(data_dir, "exercises", exercise_id, cleaned)


def delete_exercise(data_dir, exercise_id):
    return storage.delete(data_dir, "exercises", id=exercise_id)
