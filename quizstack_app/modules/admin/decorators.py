from functools import wraps

from flask_login import current_user

from quizstack_app.core.error_handlers import AuthenticationError, AuthorizationError


def admin_required(f):
    """
    Route decorator: only administrators pass.
    Anonymous callers get 401, other users 403.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            raise AuthenticationError()
        if not current_user.is_admin:
            raise AuthorizationError('Admin access required')
        return f(*args, **kwargs)
    return decorated_function
