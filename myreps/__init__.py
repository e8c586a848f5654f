from flask import Blueprint

myreps_bp = Blueprint("myreps", __name__)

from . import routes  # noqa
