# File: quizstack_app/modules/auth/routes/api.py
from flask import current_app, jsonify
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf

from quizstack_app.core.error_handlers import AuthenticationError, ValidationError, success_response
from ..forms import LoginForm, RegistrationForm
from ..interface import AuthInterface
from ..services.auth_service import AuthService
from . import blueprint


@blueprint.route('/api/csrf-token', methods=['GET'])
def csrf_token():
    """Token to send back in the X-CSRFToken header of write requests."""
    return jsonify(success_response({'csrf_token': generate_csrf()}))


@blueprint.route('/api/register', methods=['POST'])
def register():
    form = RegistrationForm()
    if not form.validate():
        raise ValidationError('Registration data is invalid', errors=form.errors)

    user = AuthService.register_user(username=form.username.data, password=form.password.data)
    return jsonify(success_response(
        {'user': AuthInterface.to_dto(user).to_dict()},
        message='User registered successfully',
    )), 201


@blueprint.route('/api/login', methods=['POST'])
def login():
    form = LoginForm()
    if not form.validate():
        raise ValidationError('Username and password are required', errors=form.errors)

    user = AuthService.authenticate_user(form.username.data, form.password.data)
    if user is None:
        current_app.logger.info(f"Failed login for '{form.username.data}'")
        raise AuthenticationError('Invalid credentials')

    login_user(user, remember=form.remember_me.data)
    return jsonify(success_response({'user': AuthInterface.to_dto(user).to_dict()}))


@blueprint.route('/api/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify(success_response(message='Logged out'))


@blueprint.route('/api/me', methods=['GET'])
@login_required
def me():
    return jsonify(success_response({'user': AuthInterface.to_dto(current_user).to_dict()}))
