import logging

from flask import current_app, jsonify
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf import FlaskForm
from flask_wtf.csrf import generate_csrf
from wtforms import PasswordField, StringField
from wtforms.validators import DataRequired

from . import auth_bp
from ...extensions import db, limiter
from ...models import User
from ...utils.api_responses import APIResponse
from ...utils.timezone_utils import TimezoneUtils

logger = logging.getLogger(__name__)


class LoginForm(FlaskForm):
    username = StringField('Username', validators=[DataRequired()])
    password = PasswordField('Password', validators=[DataRequired()])


def _login_rate_limit():
    return current_app.config.get('LOGIN_RATE_LIMIT', '20 per minute')


@auth_bp.route('/csrf', methods=['GET'])
def csrf_token():
    return jsonify({'csrfToken': generate_csrf()})


@auth_bp.route('/login', methods=['POST'])
@limiter.limit(_login_rate_limit)
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        return APIResponse.validation_error(form.errors)

    user = User.query.filter_by(username=form.username.data.strip()).first()
    if not user or not user.check_password(form.password.data):
        logger.warning(f"Failed login for username {form.username.data!r}")
        return APIResponse.error('Invalid username or password', status_code=401)
    if not user.is_active or not (user.organization and user.organization.is_active):
        return APIResponse.error('Account is inactive', status_code=403)

    login_user(user)
    user.last_login = TimezoneUtils.utc_now()
    db.session.commit()
    logger.info(f"User {user.id} logged in (role {user.role})")
    return APIResponse.success(data=user.to_dict(), message='Logged in')


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    user_id = current_user.id
    logout_user()
    logger.info(f"User {user_id} logged out")
    return APIResponse.success(message='Logged out')


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    return APIResponse.success(data=current_user.to_dict())
