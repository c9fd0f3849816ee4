from flask import Blueprint

blueprint = Blueprint('scores', __name__)

from . import api  # noqa: E402,F401
