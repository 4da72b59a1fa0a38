"""blueprints/user/__init__.py"""
from flask import Blueprint

user_bp = Blueprint("user", __name__)

from . import routes  # noqa: F401, E402
