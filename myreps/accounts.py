from datetime import datetime

from werkzeug.security import check_password_hash, generate_password_hash

from . import storage
from .defaults import USER_GOALS
from .errors import ValidationError

MIN_PASSWORD_LENGTH = 6
VALID_ROLES = ("user", "admin")


# ───────────── User helpers ─────────────
def load_users(data_dir):
    """Load users keyed by email, like {email: {id: '...', password_hash: '...', role: 'user'}}"""
    return storage.load_document(data_dir, "users")


def get_user(data_dir, email):
    return load_users(data_dir).get((email or "").strip().lower())


def _clean_email(email):
    email = (email or "").strip().lower()
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValidationError("invalid_email", "A valid email address is required.")
    return email


def register(data_dir, email, password, name, role="user"):
    """Create an account and its profile. Returns the new profile."""
    email = _clean_email(email)
    name = (name or "").strip()
    if not name:
        raise ValidationError("name_required", "Name cannot be empty.")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "weak_password",
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters.",
        )
    if role not in VALID_ROLES:
        role = "user"

    users = load_users(data_dir)
    if email in users:
        raise ValidationError("email_taken", f"An account for '{email}' already exists.")

    user_id = storage.new_id()
    now = datetime.now().isoformat()
    users[email] = {
        "id": user_id,
        "password_hash": generate_password_hash(password),
        "role": role,
        "created_at": now,
    }
    storage.save_document(data_dir, "users", users)

    return storage.insert(data_dir, "profiles", {
        "id": user_id,
        "email": email,
        "name": name,
        "goal": None,
        "last_exercise_weights": {},
        "created_at": now,
        "updated_at": now,
    })


def authenticate(data_dir, email, password):
    user = get_user(data_dir, email)
    if user and check_password_hash(user["password_hash"], password or ""):
        return user
    return None


# ───────────── Profile ─────────────
def get_profile(data_dir, user_id):
    return storage.select_one(data_dir, "profiles", id=user_id)


def update_profile(data_dir, user_id, name=None, goal=None):
    changes = {}
    if name is not None:
        name = name.strip()
        if not name:
            raise ValidationError("name_required", "Name cannot be empty.")
        changes["name"] = name
    if goal is not None:
        if goal not in USER_GOALS:
            raise ValidationError("invalid_goal", f"Goal must be one of: {', '.join(USER_GOALS)}.")
        changes["goal"] = goal
    changes["updated_at"] = datetime.now().isoformat()
    return storage.update(data_dir, "profiles", user_id, changes)


def record_last_weights(data_dir, user_id, logged_exercises, date):
    """
    Remember the heaviest weight used per exercise in a finished session.
    Exercises where no weight was used keep their previous record.
    """
    profile = get_profile(data_dir, user_id)
    if profile is None:
        return None

    last_weights = dict(profile.get("last_exercise_weights") or {})
    for logged in logged_exercises:
        max_weight = max((s.get("weight") or 0 for s in logged.get("sets", [])), default=0)
        if max_weight > 0:
            last_weights[logged["exercise_id"]] = {"weight": max_weight, "date": date}

    return storage.update(data_dir, "profiles", user_id, {
        "last_exercise_weights": last_weights,
        "updated_at": datetime.now().isoformat(),
    })
