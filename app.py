#!/usr/bin/env python3
import os
import logging

from dotenv import load_dotenv
from flask import Flask, request, session, jsonify

from myreps import myreps_bp
from myreps import accounts, progress
from myreps.defaults import DEFAULT_GEMINI_MODEL, DEFAULT_REST_SECONDS
from myreps.errors import ValidationError
from myreps_core import (
    DATA_DIR,
    LOG_FILE,
    admin_required,
    current_user_id,
    current_username,
    data_dir,
    error_response,
    load_logs,
    log_action,
    login_required,
)

load_dotenv()
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = Flask(__name__)
app.register_blueprint(myreps_bp, url_prefix="/api")


# ───────────── Config ─────────────
app.config["SECRET_KEY"] = os.environ.get("FLASK_SECRET_KEY", "change-me-to-something-random")

# data/ and logs.jsonl live next to this file unless overridden
app.config["DATA_DIR"] = os.environ.get("MYREPS_DATA_DIR", DATA_DIR)
app.config["ACTION_LOG_FILE"] = os.environ.get("MYREPS_ACTION_LOG", LOG_FILE)

app.config["GEMINI_API_KEY"] = os.environ.get("GEMINI_API_KEY")
app.config["GEMINI_MODEL_NAME"] = os.environ.get("GEMINI_MODEL_NAME", DEFAULT_GEMINI_MODEL)
app.config["GEMINI_TIMEOUT"] = float(os.environ.get("GEMINI_TIMEOUT", "60"))
app.config["REST_SECONDS"] = int(os.environ.get("MYREPS_REST_SECONDS", DEFAULT_REST_SECONDS))


def _form_or_json():
    """Accept both a JSON body and a classic form post."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def _start_session(email, user, profile):
    session.clear()
    session["logged_in"] = True
    session["user_id"] = user["id"]
    session["email"] = email
    session["role"] = user.get("role", "user")
    session["name"] = (profile or {}).get("name", email)


# ───────────── Routes ─────────────
@app.route("/auth/register", methods=["POST"])
def register():
    data = _form_or_json()
    email = (data.get("email") or "").strip().lower()

    try:
        profile = accounts.register(data_dir(), email, data.get("password"), data.get("name"))
    except ValidationError as e:
        log_action(email or "unknown", "register_failed", {"error": e.error})
        return error_response(e.error, 400, e.message)

    _start_session(email, accounts.get_user(data_dir(), email), profile)
    log_action(email, "register")
    return jsonify({"ok": True, "profile": profile}), 201


@app.route("/auth/login", methods=["POST"])
def login():
    data = _form_or_json()
    email = (data.get("email") or "").strip().lower()

    user = accounts.authenticate(data_dir(), email, data.get("password"))
    if user is None:
        log_action(email or "unknown", "login_failed")  # ← log failed login
        return error_response("invalid_credentials", 401, "Invalid email or password")

    profile = accounts.get_profile(data_dir(), user["id"])
    _start_session(email, user, profile)
    log_action(email, "login", {"role": session["role"]})  # ← log successful login
    return jsonify({"ok": True, "profile": profile, "role": session["role"]})


@app.route("/auth/logout", methods=["POST"])
def logout():
    log_action(current_username(), "logout")
    session.clear()
    return jsonify({"ok": True})


@app.route("/auth/me")
@login_required
def me():
    return jsonify({
        "user_id": current_user_id(),
        "email": current_username(),
        "role": session.get("role", "user"),
        "profile": accounts.get_profile(data_dir(), current_user_id()),
    })


@app.route("/")
@login_required
def dashboard():
    summary = progress.dashboard(data_dir(), current_user_id())
    summary["name"] = session.get("name")
    log_action(current_username(), "view_dashboard")

    # Admins also get the recent action log
    if session.get("role") == "admin":
        summary["logs"] = load_logs(limit=200)

    return jsonify(summary)


@app.route("/logs")
@admin_required
def view_logs():
    """Admin-only action log."""
    log_action(current_username(), "view_logs")  # ← log that logs were viewed
    limit = request.args.get("limit", 200, type=int)
    return jsonify({"logs": load_logs(limit=limit)})


@app.route("/log-action", methods=["POST"])
@login_required
def log_action_endpoint():
    """Endpoint for client JS to log user actions (e.g. link clicks)."""
    data = request.get_json(force=True, silent=True) or {}

    action = data.get("action", "unknown_action")
    details = {
        "target": data.get("target"),
        "extra": data.get("extra"),
    }

    log_action(current_username(), action, details)
    return jsonify({"status": "ok"})


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", "8000")), debug=True)
