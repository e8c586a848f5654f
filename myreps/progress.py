from datetime import datetime, timedelta

from . import storage
from .library import exercise_lookup


def _parse(ts):
    try:
        return datetime.fromisoformat(ts)
    except (TypeError, ValueError):
        return None


def format_timestamp(ts):
    dt = _parse(ts)
    return dt.strftime("%d/%m/%y %H:%M") if dt else (ts or "-")


def user_logs(data_dir, user_id):
    logs = storage.select(data_dir, "workout_logs", user_id=user_id)
    logs.sort(key=lambda x: x.get("start_time") or "", reverse=True)
    return logs


def _sets_for(data_dir, log_ids):
    return [r for r in storage.select(data_dir, "exercise_logs") if r.get("workout_log_id") in log_ids]


def completed_exercises(set_rows):
    """Group per-set rows back into one entry per exercise, keeping first-seen order."""
    grouped = {}
    for row in sorted(set_rows, key=lambda r: r.get("set_number") or 0):
        entry = grouped.setdefault(row["exercise_id"], {
            "exercise_id": row["exercise_id"],
            "sets": [],
            "notes": "",
        })
        entry["sets"].append({"reps": row.get("reps", 0), "weight": row.get("weight", 0)})
        if not entry["notes"] and row.get("comment"):
            entry["notes"] = row["comment"]
    return list(grouped.values())


def load_workout_log(data_dir, user_id, log_id):
    log = storage.select_one(data_dir, "workout_logs", id=log_id)
    if log is None or log.get("user_id") != user_id:
        return None
    log = dict(log)
    log["completed_exercises"] = completed_exercises(
        storage.select(data_dir, "exercise_logs", workout_log_id=log_id)
    )
    return log


def workout_history(data_dir, user_id):
    history = []
    for log in user_logs(data_dir, user_id):
        entry = dict(log)
        entry["started_display"] = format_timestamp(log.get("start_time"))
        entry["ended_display"] = format_timestamp(log.get("end_time"))
        history.append(entry)
    return history


def logged_exercises(data_dir, user_id):
    """Library entries for every exercise the user has logged at least one set of."""
    log_ids = {log["id"] for log in user_logs(data_dir, user_id)}
    if not log_ids:
        return []
    exercise_ids = {row["exercise_id"] for row in _sets_for(data_dir, log_ids)}
    lookup = exercise_lookup(data_dir)
    exercises = [lookup[ex_id] for ex_id in exercise_ids if ex_id in lookup]
    exercises.sort(key=lambda e: (e.get("name") or "").lower())
    return exercises


def exercise_progress(data_dir, user_id, exercise_id):
    """Heaviest weight per session for one exercise, oldest session first."""
    start_times = {log["id"]: log.get("start_time") for log in user_logs(data_dir, user_id)}
    if not start_times:
        return []

    session_max = {}
    for row in _sets_for(data_dir, set(start_times)):
        weight = row.get("weight") or 0
        if row.get("exercise_id") != exercise_id or weight <= 0:
            continue
        if weight > session_max.get(row["workout_log_id"], 0):
            session_max[row["workout_log_id"]] = weight

    points = [
        {"date": start_times[log_id], "max_weight": weight}
        for log_id, weight in session_max.items()
        if start_times.get(log_id)
    ]
    points.sort(key=lambda p: p["date"])
    return points


def summary(data_dir, user_id, now=None):
    now = now or datetime.now()
    counters = {
        "all": {"minutes": 0, "count": 0},
        "week": {"minutes": 0, "count": 0},
        "month": {"minutes": 0, "count": 0},
        "year": {"minutes": 0, "count": 0},
    }
    minutes_by_day = {}

    for log in user_logs(data_dir, user_id):
        start_dt = _parse(log.get("start_time"))
        if start_dt is None:
            continue
        duration = log.get("duration_minutes") or 0

        counters["all"]["minutes"] += duration
        counters["all"]["count"] += 1
        if start_dt.isocalendar()[:2] == now.isocalendar()[:2]:
            counters["week"]["minutes"] += duration
            counters["week"]["count"] += 1
        if start_dt.month == now.month and start_dt.year == now.year:
            counters["month"]["minutes"] += duration
            counters["month"]["count"] += 1
        if start_dt.year == now.year:
            counters["year"]["minutes"] += duration
            counters["year"]["count"] += 1

        day_key = start_dt.strftime("%Y-%m-%d")
        minutes_by_day[day_key] = minutes_by_day.get(day_key, 0) + duration

    # Build a 7-day view, oldest day first
    past_days = []
    for i in range(6, -1, -1):
        day = now - timedelta(days=i)
        past_days.append({
            "label": day.strftime("%a"),
            "date_label": day.strftime("%d/%m"),
            "minutes": minutes_by_day.get(day.strftime("%Y-%m-%d"), 0),
        })

    return {"counters": counters, "past_days": past_days}


def profile_stats(data_dir, user_id):
    logs = user_logs(data_dir, user_id)
    return {
        "total_sessions": len(logs),
        "last_session": logs[0].get("start_time") if logs else None,
    }


def dashboard(data_dir, user_id):
    logs = user_logs(data_dir, user_id)
    last = load_workout_log(data_dir, user_id, logs[0]["id"]) if logs else None
    return {
        "routines_count": len(storage.select(data_dir, "workouts", user_id=user_id)),
        "total_sessions": len(logs),
        "last_workout": last,
    }
