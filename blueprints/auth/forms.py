"""
Authentication forms using Flask-WTF.
Validates the JSON login payload.
"""

from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField
from wtforms.validators import DataRequired, Length


class LoginForm(FlaskForm):
    """Login form with email and password."""

    class Meta:
        csrf = False

    email = StringField('Email', validators=[
        DataRequired(message='Email is required'),
        Length(max=255)
    ])

    password = PasswordField('Password', validators=[
        DataRequired(message='Password is required')
    ])

    remember_me = BooleanField('Remember me')
