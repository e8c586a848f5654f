import random
import logging
import unicodedata

from . import storage

logger = logging.getLogger(__name__)

SEED_SETS = 3
SEED_REPS = 10

# Synonyms are lowercase and accent-free so they match normalized input.
MUSCLE_GROUP_SYNONYMS = {
    "chest": ["chest", "pecs", "pectoral", "pectorals", "pecho", "pectorales"],
    "back": [
        "back", "lats", "upper back", "lower back", "traps", "trapezius",
        "espalda", "dorsal", "dorsales", "trapecio", "trapecios", "remo", "espalda baja", "lumbares",
    ],
    "shoulders": ["shoulder", "shoulders", "delts", "deltoids", "hombro", "hombros", "deltoides"],
    "triceps": ["triceps"],
    "biceps": ["biceps", "arms", "brazos"],
    "legs": [
        "legs", "leg", "lower body", "piernas", "pierna", "tren inferior",
        "quads", "quadriceps", "cuadriceps",
        "hamstrings", "hamstring", "isquiotibiales", "isquiotibial", "femoral", "femorales",
        "isquios", "isquiosurales", "corva", "parte posterior pierna", "biceps femoral",
        "glutes", "glute", "hips", "gluteos", "gluteo", "cadera", "caderas", "nalgas", "gluteo mayor",
        "calves", "calf", "pantorrillas", "pantorrilla", "gemelos", "gemelo", "soleo", "gastrocnemio",
    ],
    "abs": ["abs", "core", "abdomen", "obliques", "abdominales", "abdominal", "oblicuos"],
}

CANONICAL_GROUPS = {
    synonym: canonical
    for canonical, synonyms in MUSCLE_GROUP_SYNONYMS.items()
    for synonym in synonyms
}

ROUTINE_TEMPLATES = [
    {
        "name": "Push Day - Auto-generated",
        "description": "An automatically generated routine for the pushing muscles: chest, shoulders and triceps.",
        "distribution": {"chest": 2, "shoulders": 2, "triceps": 1},
    },
    {
        "name": "Pull Day - Auto-generated",
        "description": "An automatically generated routine for the pulling muscles: back and biceps.",
        "distribution": {"back": 3, "biceps": 2},
    },
    {
        "name": "Leg Day - Auto-generated",
        "description": "An automatically generated routine covering the whole lower body.",
        "distribution": {"legs": 5},
    },
    {
        "name": "Full Body - Auto-generated",
        "description": "An automatically generated full-body routine, good for getting started or short on time.",
        "distribution": {"legs": 1, "chest": 1, "back": 1, "shoulders": 1, "abs": 1},
    },
]


def normalize_name(name: str) -> str:
    decomposed = unicodedata.normalize("NFD", (name or "").strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def canonical_muscle_group(name: str) -> str:
    """Map a raw muscle group label to its canonical group, or to its normalized self."""
    normalized = normalize_name(name)
    return CANONICAL_GROUPS.get(normalized, normalized)


def group_exercises(exercises: list) -> dict:
    groups = {}
    for ex in exercises:
        group = canonical_muscle_group(ex.get("muscle_group"))
        if not group:
            continue
        groups.setdefault(group, []).append(ex)
    return groups


def missing_groups(template: dict, groups: dict) -> list:
    return [
        group for group, count in template["distribution"].items()
        if len(groups.get(canonical_muscle_group(group), [])) < count
    ]


def pick_exercises(template: dict, groups: dict) -> list:
    chosen = []
    for group, count in template["distribution"].items():
        pool = groups[canonical_muscle_group(group)][:]
        random.shuffle(pool)
        chosen.extend(pool[:count])
    random.shuffle(chosen)
    return chosen


def seed_default_workouts(data_dir: str, user_id: str) -> dict:
    """
    Create the template routines the user does not have yet from the exercise library.
    Templates that cannot be filled from the library are skipped.
    """
    if not user_id:
        return {"success": False, "message": "A user id is required.", "created": []}

    exercises = storage.select(data_dir, "exercises")
    if not exercises:
        return {
            "success": False,
            "message": "There are no exercises in the library to build routines from.",
            "created": [],
        }

    existing_names = {w.get("name") for w in storage.select(data_dir, "workouts", user_id=user_id)}
    templates = [t for t in ROUTINE_TEMPLATES if t["name"] not in existing_names]
    if not templates:
        return {"success": True, "message": "The auto-generated sample routines already exist in your account.", "created": []}

    groups = group_exercises(exercises)
    created = []
    for template in templates:
        missing = missing_groups(template, groups)
        if missing:
            logger.warning(
                "Skipping routine '%s', not enough exercises for: %s",
                template["name"], ", ".join(missing),
            )
            continue

        chosen = pick_exercises(template, groups)
        if not chosen:
            continue

        workout = storage.insert(data_dir, "workouts", {
            "user_id": user_id,
            "name": template["name"],
            "description": template["description"],
        })
        storage.insert(data_dir, "workout_exercises", [
            {
                "workout_id": workout["id"],
                "exercise_id": ex["id"],
                "order": position,
                "sets": SEED_SETS,
                "reps": SEED_REPS,
                "target_weight": None,
            }
            for position, ex in enumerate(chosen, start=1)
        ])
        created.append(workout["id"])

    if created:
        return {"success": True, "message": f"{len(created)} sample routine(s) created.", "created": created}
    return {
        "success": False,
        "message": "No new routines could be created. The library may not have enough variety, or the routines already exist.",
        "created": [],
    }
