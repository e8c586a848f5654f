import os
import json

from myreps import storage
from myreps.defaults import DEFAULT_EXERCISES


def test_ensure_data_files_seeds_library(data_dir):
    storage.ensure_data_files(data_dir)

    for file_name, _ in storage.TABLES.values():
        assert os.path.exists(os.path.join(data_dir, file_name))

    exercises = storage.select(data_dir, "exercises")
    assert len(exercises) == len(DEFAULT_EXERCISES)
    assert all(e.get("created_at") for e in exercises)


def test_ensure_data_files_keeps_existing_content(data_dir):
    storage.ensure_data_files(data_dir)
    storage.delete(data_dir, "exercises", id="plank")
    storage.ensure_data_files(data_dir)

    assert storage.select_one(data_dir, "exercises", id="plank") is None


def test_insert_fills_id_and_created_at(data_dir):
    row = storage.insert(data_dir, "workouts", {"user_id": "u1", "name": "Legs"})
    assert row["id"]
    assert row["created_at"]
    assert storage.select_one(data_dir, "workouts", id=row["id"])["name"] == "Legs"


def test_insert_list_appends_to_jsonl(data_dir):
    storage.insert(data_dir, "exercise_logs", [{"workout_log_id": "a", "reps": 5}, {"workout_log_id": "a", "reps": 6}])
    storage.insert(data_dir, "exercise_logs", {"workout_log_id": "b", "reps": 7})

    with open(storage.table_path(data_dir, "exercise_logs")) as f:
        lines = [l for l in f.read().splitlines() if l]
    assert len(lines) == 3
    assert [r["reps"] for r in storage.select(data_dir, "exercise_logs", workout_log_id="a")] == [5, 6]


def test_update_and_delete(data_dir):
    row = storage.insert(data_dir, "workouts", {"user_id": "u1", "name": "Push"})

    updated = storage.update(data_dir, "workouts", row["id"], {"name": "Push A"})
    assert updated["name"] == "Push A"
    assert storage.update(data_dir, "workouts", "missing", {"name": "x"}) is None

    assert storage.delete(data_dir, "workouts", id=row["id"]) == 1
    assert storage.delete(data_dir, "workouts", id=row["id"]) == 0


def test_corrupt_file_falls_back_to_empty(data_dir):
    storage.ensure_data_files(data_dir)
    with open(os.path.join(data_dir, "workouts.json"), "w") as f:
        f.write("{not json")

    assert storage.select(data_dir, "workouts") == []


def test_corrupt_jsonl_line_is_skipped(data_dir):
    path = storage.table_path(data_dir, "workout_logs")
    with open(path, "w") as f:
        f.write(json.dumps({"id": "1", "user_id": "u"}) + "\n")
        f.write("garbage\n")
        f.write(json.dumps({"id": "2", "user_id": "u"}) + "\n")

    assert [r["id"] for r in storage.select(data_dir, "workout_logs", user_id="u")] == ["1", "2"]


def test_documents_round_trip(data_dir):
    assert storage.load_document(data_dir, "in_progress") == {}
    storage.save_document(data_dir, "in_progress", {"u-w": {"current_index": 2}})
    assert storage.load_document(data_dir, "in_progress")["u-w"]["current_index"] == 2
