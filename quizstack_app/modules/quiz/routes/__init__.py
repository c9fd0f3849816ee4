from flask import Blueprint

blueprint = Blueprint('quiz', __name__)

from . import api  # noqa: E402,F401
