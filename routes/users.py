from flask import Blueprint, jsonify

import storage
from auth_utils import admin_required, current_user
from errors import ValidationError
from forms import UserForm, validate_form
from models import User

users_bp = Blueprint('users', __name__, url_prefix='/api/users')


@users_bp.route('', methods=['GET'])
@admin_required
def index():
    return jsonify([user.to_dict() for user in storage.list_users()])


@users_bp.route('', methods=['POST'])
@admin_required
def create_user():
    form = validate_form(UserForm)
    user = storage.create_user(form.values())
    return jsonify(user.to_dict()), 201


@users_bp.route('/<int:id>', methods=['DELETE'])
@admin_required
def delete_user(id):
    if id == current_user().id:
        raise ValidationError("You cannot delete your own account")
    storage.delete(User, id)
    return jsonify({"message": "User deleted"})
