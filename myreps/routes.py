from flask import current_app, jsonify, request, session

from . import myreps_bp
from . import accounts, coach, library, progress, routines, tracker
from .generate import seed_default_workouts
from .errors import AIServiceError, ValidationError

from myreps_core import (
    admin_required,
    current_user_id,
    current_username,
    data_dir,
    error_response,
    log_action,
    login_required,
)


def _payload():
    return request.get_json(force=True, silent=True) or {}


def _ai_settings():
    cfg = current_app.config
    return {
        "api_key": cfg.get("GEMINI_API_KEY"),
        "model": cfg.get("GEMINI_MODEL_NAME"),
        "timeout": cfg.get("GEMINI_TIMEOUT", 60),
    }


@myreps_bp.errorhandler(ValidationError)
def handle_validation_error(e):
    log_action(current_username(), "validation_error", {"error": e.error})
    return error_response(e.error, 400, e.message)


@myreps_bp.errorhandler(AIServiceError)
def handle_ai_error(e):
    log_action(current_username(), "ai_error", {"error": e.error})
    return error_response(e.error, e.status, e.message)


# ───────── Exercise library ─────────

@myreps_bp.route("/exercises", methods=["GET"])
@login_required
def exercises():
    dd = data_dir()
    all_exercises = library.load_exercises(dd)
    filtered = library.filter_exercises(
        all_exercises,
        search=request.args.get("q", ""),
        muscle_group=request.args.get("muscle_group", ""),
        equipment=request.args.get("equipment", ""),
        difficulty=request.args.get("difficulty", ""),
        core=request.args.get("core", ""),
    )
    log_action(current_username(), "exercises_view", {"results": len(filtered)})
    return jsonify({"exercises": filtered, "filters": library.filter_options(all_exercises)})


@myreps_bp.route("/exercises/<exercise_id>", methods=["GET"])
@login_required
def exercise_detail(exercise_id):
    exercise = library.get_exercise(data_dir(), exercise_id)
    if exercise is None:
        return error_response("exercise_not_found", 404)
    return jsonify(exercise)


@myreps_bp.route("/exercises/<exercise_id>/add-to-routine", methods=["POST"])
@login_required
def add_to_routine(exercise_id):
    data = _payload()
    workout_id = data.get("workout_id")
    dd = data_dir()
    if library.get_exercise(dd, exercise_id) is None:
        return error_response("exercise_not_found", 404)

    workout = routines.add_exercise_to_workout(
        dd,
        current_user_id(),
        workout_id,
        exercise_id,
        sets=data.get("sets", routines.DEFAULT_SETS),
        reps=data.get("reps", routines.DEFAULT_REPS),
    )
    if workout is None:
        return error_response("routine_not_found", 404)

    log_action(current_username(), "exercise_added_to_routine", {"exercise_id": exercise_id, "workout_id": workout_id})
    return jsonify(workout)


# ───────── Admin (re-uses the admin role system) ─────────

@myreps_bp.route("/admin/exercises", methods=["POST"])
@admin_required
def admin_add_exercise():
    exercise = library.add_exercise(data_dir(), _payload())
    log_action(current_username(), "admin_exercise_added", {"name": exercise["name"]})
    return jsonify(exercise), 201


@myreps_bp.route("/admin/exercises/<exercise_id>", methods=["PUT"])
@admin_required
def admin_update_exercise(exercise_id):
    exercise = library.update_exercise(data_dir(), exercise_id, _payload())
    if exercise is None:
        return error_response("exercise_not_found", 404)
    log_action(current_username(), "admin_exercise_updated", {"id": exercise_id})
    return jsonify(exercise)


@myreps_bp.route("/admin/exercises/<exercise_id>", methods=["DELETE"])
@admin_required
def admin_delete_exercise(exercise_id):
    dd = data_dir()
    if not library.delete_exercise(dd, exercise_id):
        return error_response("exercise_not_found", 404)
    affected = routines.drop_exercise_everywhere(dd, exercise_id)
    log_action(current_username(), "admin_exercise_deleted", {"id": exercise_id, "routines_affected": affected})
    return jsonify({"ok": True, "routines_affected": affected})


# ───────── Routines ─────────

@myreps_bp.route("/routines", methods=["GET", "POST"])
@login_required
def routines_collection():
    dd = data_dir()
    user_id = current_user_id()

    if request.method == "POST":
        data = _payload()
        workout = routines.create_workout(
            dd, user_id, data.get("name"), data.get("description", ""), data.get("exercises", []),
        )
        log_action(current_username(), "routine_created", {"id": workout["id"], "name": workout["name"]})
        return jsonify(workout), 201

    workouts = routines.list_workouts(dd, user_id)
    log_action(current_username(), "routines_view", {"count": len(workouts)})
    return jsonify({"routines": workouts})


@myreps_bp.route("/routines/<workout_id>", methods=["GET", "PUT", "DELETE"])
@login_required
def routine_detail(workout_id):
    dd = data_dir()
    user_id = current_user_id()

    if request.method == "PUT":
        data = _payload()
        workout = routines.update_workout(
            dd, user_id, workout_id, data.get("name"), data.get("description", ""), data.get("exercises", []),
        )
        if workout is None:
            return error_response("routine_not_found", 404)
        log_action(current_username(), "routine_updated", {"id": workout_id})
        return jsonify(workout)

    if request.method == "DELETE":
        if not routines.delete_workout(dd, user_id, workout_id):
            return error_response("routine_not_found", 404)
        tracker.clear_state(dd, user_id, workout_id)
        log_action(current_username(), "routine_deleted", {"id": workout_id})
        return jsonify({"ok": True})

    workout = routines.get_workout(dd, user_id, workout_id)
    if workout is None:
        return error_response("routine_not_found", 404)
    return jsonify(workout)


@myreps_bp.route("/routines/seed", methods=["POST"])
@login_required
def routines_seed():
    result = seed_default_workouts(data_dir(), current_user_id())
    log_action(current_username(), "routines_seeded", {"created": len(result["created"])})
    return jsonify(result), (200 if result["success"] else 400)


@myreps_bp.route("/routines/ai/generate", methods=["POST"])
@login_required
def routines_ai_generate():
    try:
        preferences = coach.RoutinePreferences.model_validate(_payload())
    except coach.SchemaError as e:
        return error_response("invalid_preferences", 400, str(e))

    generated = coach.generate_ai_routine(preferences, library.load_exercises(data_dir()), **_ai_settings())
    log_action(current_username(), "ai_routine_generated", {"name": generated.name, "exercises": len(generated.exercises)})
    return jsonify(generated.model_dump())


@myreps_bp.route("/routines/ai/save", methods=["POST"])
@login_required
def routines_ai_save():
    try:
        generated = coach.GeneratedWorkout.model_validate(_payload())
    except coach.SchemaError as e:
        return error_response("invalid_routine", 400, str(e))

    dd = data_dir()
    workout = coach.save_generated_workout(dd, current_user_id(), generated, library.load_exercises(dd))
    log_action(current_username(), "ai_routine_saved", {"id": workout["id"]})
    return jsonify(workout), 201


# ───────── Workout sessions ─────────

def _session_workout(dd, user_id, workout_id, data=None):
    if workout_id == tracker.CUSTOM_WORKOUT_KEY:
        saved = tracker.load_state(dd, user_id, None)
        exercise_ids = (data or {}).get("exercise_ids")
        if exercise_ids is None and saved is not None:
            exercise_ids = [p["exercise_id"] for p in saved["plan"]]
        known = library.exercise_lookup(dd)
        unknown = [ex_id for ex_id in exercise_ids or [] if ex_id not in known]
        if unknown:
            raise ValidationError("unknown_exercise", f"Unknown exercises: {', '.join(unknown)}")
        return tracker.custom_workout(exercise_ids or [])
    return routines.get_workout(dd, user_id, workout_id)


def _state_or_404(dd, user_id, workout_id):
    key = None if workout_id == tracker.CUSTOM_WORKOUT_KEY else workout_id
    return tracker.load_state(dd, user_id, key)


def _view(dd, state):
    profile = accounts.get_profile(dd, state["user_id"])
    return tracker.session_view(state, library.exercise_lookup(dd), profile)


@myreps_bp.route("/sessions/<workout_id>/start", methods=["POST"])
@login_required
def session_start(workout_id):
    dd = data_dir()
    user_id = current_user_id()
    workout = _session_workout(dd, user_id, workout_id, _payload())
    if workout is None:
        return error_response("routine_not_found", 404)

    state, resumed = tracker.start_session(dd, user_id, workout)
    log_action(current_username(), "session_resumed" if resumed else "session_started", {"workout_id": workout_id})
    return jsonify({"resumed": resumed, "session": _view(dd, state)})


@myreps_bp.route("/sessions/<workout_id>", methods=["GET", "DELETE"])
@login_required
def session_detail(workout_id):
    dd = data_dir()
    user_id = current_user_id()
    state = _state_or_404(dd, user_id, workout_id)
    if state is None:
        return error_response("session_not_found", 404)

    if request.method == "DELETE":
        tracker.clear_state(dd, user_id, state["workout_id"])
        log_action(current_username(), "session_discarded", {"workout_id": workout_id})
        return jsonify({"ok": True})

    return jsonify(_view(dd, state))


SESSION_ACTIONS = ("sets", "notes", "next", "previous", "rest", "skip-rest")


@myreps_bp.route("/sessions/<workout_id>/<action>", methods=["POST"])
@login_required
def session_action(workout_id, action):
    if action not in SESSION_ACTIONS:
        return error_response("unknown_action", 404)

    dd = data_dir()
    state = _state_or_404(dd, current_user_id(), workout_id)
    if state is None:
        return error_response("session_not_found", 404)

    data = _payload()
    if action == "sets":
        tracker.update_set(state, data.get("set_index"), data.get("field"), data.get("value"), data.get("exercise_index"))
    elif action == "notes":
        tracker.set_notes(state, data.get("notes"), data.get("exercise_index"))
    elif action == "next":
        tracker.next_exercise(state)
    elif action == "previous":
        tracker.previous_exercise(state)
    elif action == "rest":
        tracker.start_rest(state, data.get("seconds", current_app.config.get("REST_SECONDS")))
    else:
        tracker.skip_rest(state)

    tracker.save_state(dd, state)
    if action in ("next", "previous", "rest", "skip-rest"):
        log_action(current_username(), f"session_{action.replace('-', '_')}", {"index": state["current_index"]})
    return jsonify(_view(dd, state))


@myreps_bp.route("/sessions/<workout_id>/finish", methods=["POST"])
@login_required
def session_finish(workout_id):
    dd = data_dir()
    state = _state_or_404(dd, current_user_id(), workout_id)
    if state is None:
        return error_response("session_not_found", 404)

    data = _payload()
    log = tracker.finish(dd, state, data.get("difficulty"), data.get("notes", ""))
    log_action(current_username(), "session_finished", {
        "workout_id": workout_id,
        "duration_minutes": log["duration_minutes"],
        "rating": log["overall_difficulty_rating"],
    })
    return jsonify(log), 201


# ───────── Progress & history ─────────

@myreps_bp.route("/logs", methods=["GET"])
@login_required
def workout_logs():
    logs = progress.workout_history(data_dir(), current_user_id())
    log_action(current_username(), "workout_logs_view")
    return jsonify({"logs": logs})


@myreps_bp.route("/logs/<log_id>", methods=["GET"])
@login_required
def workout_log_detail(log_id):
    log = progress.load_workout_log(data_dir(), current_user_id(), log_id)
    if log is None:
        return error_response("log_not_found", 404)
    return jsonify(log)


@myreps_bp.route("/progress/exercises", methods=["GET"])
@login_required
def progress_exercises():
    exercises = progress.logged_exercises(data_dir(), current_user_id())
    log_action(current_username(), "progress_view")
    return jsonify({"exercises": exercises})


@myreps_bp.route("/progress/exercises/<exercise_id>", methods=["GET"])
@login_required
def progress_exercise(exercise_id):
    dd = data_dir()
    exercise = library.get_exercise(dd, exercise_id)
    if exercise is None:
        return error_response("exercise_not_found", 404)
    points = progress.exercise_progress(dd, current_user_id(), exercise_id)
    return jsonify({"exercise": exercise, "points": points})


@myreps_bp.route("/progress/summary", methods=["GET"])
@login_required
def progress_summary():
    return jsonify(progress.summary(data_dir(), current_user_id()))


# ───────── Profile ─────────

@myreps_bp.route("/profile", methods=["GET", "PUT"])
@login_required
def profile():
    dd = data_dir()
    user_id = current_user_id()

    if request.method == "PUT":
        data = _payload()
        updated = accounts.update_profile(dd, user_id, name=data.get("name"), goal=data.get("goal"))
        if updated is None:
            return error_response("profile_not_found", 404)
        session["name"] = updated["name"]
        log_action(current_username(), "profile_updated", {"goal": updated.get("goal")})

    current = accounts.get_profile(dd, user_id)
    if current is None:
        return error_response("profile_not_found", 404)
    return jsonify({"profile": current, "stats": progress.profile_stats(dd, user_id)})


# ───────── AI coach ─────────

@myreps_bp.route("/coach/advice", methods=["POST"])
@login_required
def coach_advice():
    dd = data_dir()
    user_id = current_user_id()
    data = _payload()
    profile_row = accounts.get_profile(dd, user_id) or {}

    log_id = data.get("workout_log_id")
    if log_id:
        last_log = progress.load_workout_log(dd, user_id, log_id)
        if last_log is None:
            return error_response("log_not_found", 404)
    else:
        last_log = progress.dashboard(dd, user_id)["last_workout"]

    prompt = coach.build_coach_prompt(profile_row, last_log, library.exercise_lookup(dd))
    greeting = coach.coach_greeting(profile_row.get("goal"))
    try:
        advice = coach.get_coach_advice(prompt, **_ai_settings())
    except AIServiceError as e:
        log_action(current_username(), "coach_advice_failed", {"error": e.error})
        return jsonify({
            "ok": False,
            "error": e.error,
            "greeting": greeting,
            "message": "Sorry, I had trouble coming up with a tip. Please try again later.",
        }), e.status

    log_action(current_username(), "coach_advice", {"workout_log_id": (last_log or {}).get("id")})
    return jsonify({"ok": True, "greeting": greeting, "advice": advice})
