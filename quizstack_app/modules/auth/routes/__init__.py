from flask import Blueprint

blueprint = Blueprint('auth', __name__)

from . import api  # noqa: E402,F401
