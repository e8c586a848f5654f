import os
import json
from datetime import datetime
from functools import wraps

from flask import current_app, jsonify, request, session

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.path.join(BASE_DIR, "data")
LOG_FILE = os.path.join(BASE_DIR, "logs.jsonl")


def log_action(username, action, details=None):
    """Append a single log entry to the action log."""
    entry = {
        "timestamp": datetime.now().strftime("%d/%m/%Y %H:%M"),
        "username": username or "anonymous",
        "action": action,
        "ip": request.remote_addr,
        "path": request.path,
        "details": details or {},
        "user_agent": request.headers.get("User-Agent", ""),
    }

    log_file = current_app.config.get("ACTION_LOG_FILE", LOG_FILE)
    try:
        with open(log_file, "a") as f:
            f.write(json.dumps(entry) + "\n")
    except OSError:
        # Don't break the app if logging fails
        pass


def load_logs(limit=200):
    """Load the last `limit` log entries, newest first."""
    log_file = current_app.config.get("ACTION_LOG_FILE", LOG_FILE)
    if not os.path.exists(log_file):
        return []

    try:
        with open(log_file, "r") as f:
            lines = f.readlines()
    except OSError:
        return []

    entries = []
    for line in lines[-limit:]:
        line = line.strip()
        if not line:
            continue
        try:
            entries.append(json.loads(line))
        except json.JSONDecodeError:
            continue

    entries.reverse()  # newest first
    return entries


def data_dir():
    return current_app.config.get("DATA_DIR", DATA_DIR)


def current_user_id():
    return session.get("user_id")


def current_username():
    return session.get("email")


def error_response(error, status, message=None):
    payload = {"ok": False, "error": error}
    if message:
        payload["message"] = message
    return jsonify(payload), status


def login_required(view_func):
    @wraps(view_func)
    def wrapped_view(*args, **kwargs):
        if not session.get("logged_in"):
            return error_response("not_authenticated", 401)
        return view_func(*args, **kwargs)
    return wrapped_view


def admin_required(view_func):
    @wraps(view_func)
    def wrapped_view(*args, **kwargs):
        if not session.get("logged_in"):
            return error_response("not_authenticated", 401)
        if session.get("role") != "admin":
            return error_response("forbidden", 403)
        return view_func(*args, **kwargs)
    return wrapped_view
