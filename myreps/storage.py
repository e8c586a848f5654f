import os
import json
import uuid
import logging
from datetime import datetime

from .defaults import DEFAULT_EXERCISES

logger = logging.getLogger(__name__)

# table name -> (file name, initial content); .jsonl tables are append-only
TABLES = {
    "users": ("users.json", {}),
    "profiles": ("profiles.json", []),
    "exercises": ("exercises.json", None),
    "workouts": ("workouts.json", []),
    "workout_exercises": ("workout_exercises.json", []),
    "workout_logs": ("workout_logs.jsonl", ""),
    "exercise_logs": ("exercise_logs.jsonl", ""),
    "in_progress": ("in_progress.json", {}),
}


def ensure_data_files(data_dir: str) -> str:
    os.makedirs(data_dir, exist_ok=True)

    for name, (file_name, initial) in TABLES.items():
        path = os.path.join(data_dir, file_name)
        if os.path.exists(path):
            continue
        if file_name.endswith(".jsonl"):
            # JSON Lines file makes it easy to append
            with open(path, "w") as f:
                f.write("")
        elif name == "exercises":
            now = datetime.now().isoformat()
            save_json(path, [dict(e, created_at=now) for e in DEFAULT_EXERCISES])
        else:
            save_json(path, initial)

    return data_dir


def table_path(data_dir: str, table: str) -> str:
    ensure_data_files(data_dir)
    return os.path.join(data_dir, TABLES[table][0])


def load_json(path: str, fallback):
    try:
        with open(path, "r") as f:
            return json.load(f)
    except FileNotFoundError:
        return fallback
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s, using fallback: %s", path, e)
        return fallback


def save_json(path: str, data):
    tmp_path = path + ".tmp"
    with open(tmp_path, "w") as f:
        json.dump(data, f, indent=2)
    os.replace(tmp_path, path)


def append_jsonl(path: str, entries):
    """
    Append entries to a JSON Lines file, one object per line.
    """
    with open(path, "a") as f:
        for entry in entries:
            f.write(json.dumps(entry) + "\n")


def load_jsonl(path: str):
    rows = []
    if not os.path.exists(path):
        return rows
    try:
        with open(path, "r") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    rows.append(json.loads(line))
                except json.JSONDecodeError:
                    logger.warning("Skipping corrupt line in %s", path)
                    continue
    except OSError as e:
        logger.warning("Could not read %s: %s", path, e)
    return rows


def new_id() -> str:
    return uuid.uuid4().hex


# ───────────── Row helpers ─────────────

def _matches(row: dict, where: dict) -> bool:
    return all(row.get(key) == value for key, value in where.items())


def select(data_dir: str, table: str, **where):
    path = table_path(data_dir, table)
    if path.endswith(".jsonl"):
        rows = load_jsonl(path)
    else:
        rows = load_json(path, [])
    return [r for r in rows if _matches(r, where)]


def select_one(data_dir: str, table: str, **where):
    rows = select(data_dir, table, **where)
    return rows[0] if rows else None


def insert(data_dir: str, table: str, rows):
    """Insert one row or a list of rows, filling id and created_at. Returns what was inserted."""
    single = isinstance(rows, dict)
    rows = [rows] if single else list(rows)
    now = datetime.now().isoformat()
    stored = []
    for row in rows:
        row = dict(row)
        row.setdefault("id", new_id())
        row.setdefault("created_at", now)
        stored.append(row)

    path = table_path(data_dir, table)
    if path.endswith(".jsonl"):
        append_jsonl(path, stored)
    else:
        current = load_json(path, [])
        current.extend(stored)
        save_json(path, current)

    return stored[0] if single else stored


def update(data_dir: str, table: str, row_id: str, changes: dict):
    path = table_path(data_dir, table)
    rows = load_json(path, [])
    updated = None
    for row in rows:
        if row.get("id") == row_id:
            row.update(changes)
            updated = row
            break
    if updated is not None:
        save_json(path, rows)
    return updated


def delete(data_dir: str, table: str, **where) -> int:
    path = table_path(data_dir, table)
    rows = load_json(path, [])
    kept = [r for r in rows if not _matches(r, where)]
    removed = len(rows) - len(kept)
    if removed:
        save_json(path, kept)
    return removed


# ───────────── Keyed documents (users, in-progress sessions) ─────────────

def load_document(data_dir: str, table: str) -> dict:
    return load_json(table_path(data_dir, table), {})


def save_document(data_dir: str, table: str, document: dict):
    save_json(table_path(data_dir, table), document)
