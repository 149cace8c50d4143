import logging

from flask import Blueprint, jsonify, session
from flask_wtf.csrf import generate_csrf
from werkzeug.security import check_password_hash

import storage
from auth_utils import current_user, login_required
from errors import AuthError, ValidationError
from forms import ChangePasswordForm, LoginForm, ProfileForm, validate_form
from models import User

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')

INVALID_CREDENTIALS = "Invalid phone number or password"


@auth_bp.route('/csrf', methods=['GET'])
def csrf_token():
    return jsonify({"csrfToken": generate_csrf()})


@auth_bp.route('/login', methods=['POST'])
def login():
    form = validate_form(LoginForm)
    identifier = form.phone.data.strip()

    user = storage.get_user_by_login(identifier)
    if not user or not check_password_hash(user.password_hash, form.password.data):
        logger.warning("Failed login for %s", identifier)
        raise AuthError(INVALID_CREDENTIALS)

    session.clear()
    session.permanent = True
    session['user_id'] = user.id
    session['user_name'] = user.name
    logger.info("User %s logged in", user.id)
    return jsonify({"user": user.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({"message": "Logged out"})


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({"user": current_user().to_dict()})


@auth_bp.route('/profile', methods=['PUT'])
@login_required
def profile():
    form = validate_form(ProfileForm, partial=True)
    user = storage.update(User, current_user().id, form.values())
    session['user_name'] = user.name
    return jsonify({"user": user.to_dict()})


@auth_bp.route('/change-password', methods=['PUT'])
@login_required
def change_password():
    form = validate_form(ChangePasswordForm)
    user = current_user()
    if not check_password_hash(user.password_hash, form.current_password.data):
        raise ValidationError(errors={"currentPassword": ["Current password is incorrect"]})
    storage.set_password(user, form.new_password.data)
    return jsonify({"message": "Password changed"})
