from flask import Blueprint

blueprint = Blueprint('admin', __name__)

from . import api  # noqa: E402,F401
