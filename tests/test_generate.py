import logging

import pytest

from myreps import generate, routines, storage


@pytest.mark.parametrize("raw, expected", [
    ("Pecho", "chest"),
    ("  TRÍCEPS ", "triceps"),
    ("Glúteos", "legs"),
    ("Cuádriceps", "legs"),
    ("Deltoides", "shoulders"),
    ("Core", "abs"),
    ("Lats", "back"),
    ("Corva", "legs"),
    ("Parte posterior pierna", "legs"),
    ("Forearms", "forearms"),
    ("", ""),
    (None, ""),
])
def test_canonical_muscle_group(raw, expected):
    assert generate.canonical_muscle_group(raw) == expected


def test_seed_creates_all_templates(data_dir):
    result = generate.seed_default_workouts(data_dir, "u1")

    assert result["success"] is True
    assert result["message"] == "4 sample routine(s) created."
    workouts = routines.list_workouts(data_dir, "u1")
    assert {w["name"] for w in workouts} == {t["name"] for t in generate.ROUTINE_TEMPLATES}

    legs = next(w for w in workouts if w["name"].startswith("Leg Day"))
    assert len(legs["exercises"]) == 5
    assert [e["order"] for e in legs["exercises"]] == [1, 2, 3, 4, 5]
    assert all(e["sets"] == 3 and e["reps"] == 10 for e in legs["exercises"])
    assert all(generate.canonical_muscle_group(e["exercise_details"]["muscle_group"]) == "legs"
               for e in legs["exercises"])


def test_seed_twice_reports_existing(data_dir):
    generate.seed_default_workouts(data_dir, "u1")
    result = generate.seed_default_workouts(data_dir, "u1")

    assert result["success"] is True
    assert result["created"] == []
    assert "already exist" in result["message"]
    assert len(routines.list_workouts(data_dir, "u1")) == 4


def test_seed_requires_user(data_dir):
    result = generate.seed_default_workouts(data_dir, "")
    assert result["success"] is False
    assert result["message"] == "A user id is required."


def test_seed_with_empty_library(data_dir):
    storage.ensure_data_files(data_dir)
    storage.save_json(storage.table_path(data_dir, "exercises"), [])

    result = generate.seed_default_workouts(data_dir, "u1")
    assert result["success"] is False
    assert "no exercises" in result["message"]


def test_seed_skips_templates_without_enough_exercises(data_dir, caplog):
    storage.ensure_data_files(data_dir)
    legs_only = [e for e in storage.select(data_dir, "exercises")
                 if generate.canonical_muscle_group(e["muscle_group"]) == "legs"]
    storage.save_json(storage.table_path(data_dir, "exercises"), legs_only)

    with caplog.at_level(logging.WARNING, logger="myreps.generate"):
        result = generate.seed_default_workouts(data_dir, "u1")

    assert result["success"] is True
    assert [w["name"] for w in routines.list_workouts(data_dir, "u1")] == ["Leg Day - Auto-generated"]
    assert "Skipping routine 'Push Day - Auto-generated'" in caplog.text


def test_seed_fails_when_nothing_fits(data_dir):
    storage.ensure_data_files(data_dir)
    storage.save_json(storage.table_path(data_dir, "exercises"), [
        {"id": "x", "name": "Wrist Curl", "muscle_group": "Forearms"},
    ])

    result = generate.seed_default_workouts(data_dir, "u1")
    assert result["success"] is False
    assert result["message"].startswith("No new routines could be created")
