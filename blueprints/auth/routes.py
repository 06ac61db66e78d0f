"""
Authentication routes: login, logout, current user.
Session based (Flask-Login); every answer is JSON.
"""

import logging

from flask import Blueprint
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf

from blueprints.auth.forms import LoginForm
from models.user import User, get_user_by_email, update_last_login, check_password
from utils.api_response import api_success, api_error
from utils.forms import bind_json_form, form_error
from utils.messages import MESSAGES
from utils.permissions import cache_user_permissions, load_user_permissions

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Log a user in.

    Body:
        email, password, remember_me (optional)

    Returns:
        JSON with the user profile
    """
    form, _ = bind_json_form(LoginForm)
    if not form.validate():
        return form_error(form)

    user_dict = get_user_by_email(form.email.data.strip())

    if user_dict is None or not check_password(user_dict, form.password.data):
        logger.warning('Failed login for %s', form.email.data)
        return api_error(MESSAGES['invalid_credentials'], status=401, code='INVALID_CREDENTIALS')

    if not user_dict.get('active'):
        return api_error(MESSAGES['account_disabled'], status=403, code='ACCOUNT_DISABLED')

    user = User(user_dict)
    login_user(user, remember=bool(form.remember_me.data))

    update_last_login(user.id)
    cache_user_permissions(user.id)

    return api_success(
        data=user.to_dict(),
        message=MESSAGES['login_success'].format(name=user.name)
    )


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Logout current user."""
    logout_user()
    return api_success(message=MESSAGES['logout_success'])


@auth_bp.route('/me')
@login_required
def me():
    """Current user with its permission codes."""
    data = current_user.to_dict()
    data['permissions'] = sorted(load_user_permissions(current_user.id))
    return api_success(data=data)


@auth_bp.route('/csrf-token')
def csrf_token():
    """
    Hand out the session's CSRF token.

    Every POST/PATCH must echo it back in the X-CSRFToken header.
    """
    return api_success(data={'csrf_token': generate_csrf()})
