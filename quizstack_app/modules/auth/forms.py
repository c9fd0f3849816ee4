# File: quizstack_app/modules/auth/forms.py
# Login and registration forms. Both read JSON bodies through Flask-WTF;
# CSRF is checked globally by CSRFProtect from the X-CSRFToken header.

from flask_wtf import FlaskForm
from wtforms import BooleanField, PasswordField, StringField
from wtforms.validators import DataRequired, Length, ValidationError

from ...models import User


class LoginForm(FlaskForm):
    """
    Login form.
    """
    class Meta:
        csrf = False

    username = StringField('Username', validators=[DataRequired(message="Username is required.")])
    password = PasswordField('Password', validators=[DataRequired(message="Password is required.")])
    remember_me = BooleanField('Remember me')


class RegistrationForm(FlaskForm):
    """
    Registration form.
    """
    class Meta:
        csrf = False

    username = StringField('Username', validators=[
        DataRequired(message="Username is required."),
        Length(min=3, max=80, message="Username must be 3 to 80 characters long."),
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message="Password is required."),
        Length(min=6, message="Password must be at least 6 characters long."),
    ])

    def validate_username(self, username):
        """
        Reject a username that is already taken.
        """
        user = User.query.filter_by(username=username.data).first()
        if user is not None:
            raise ValidationError('Username already exists.')
