import os
import uuid

from flask import Blueprint, current_app, jsonify, request
from werkzeug.utils import secure_filename

import storage
from auth_utils import login_required
from errors import ValidationError
from forms import (
    AllocationAccountForm, BranchForm, ExpenseCategoryForm, ShareholderForm,
    SystemSettingForm, validate_form,
)
from models import AllocationAccount, Branch, ExpenseCategory, Shareholder

settings_bp = Blueprint('settings', __name__, url_prefix='/api')

REFERENCE_RESOURCES = {
    'allocation-accounts': (AllocationAccount, AllocationAccountForm),
    'shareholders': (Shareholder, ShareholderForm),
    'expense-categories': (ExpenseCategory, ExpenseCategoryForm),
    'branches': (Branch, BranchForm),
}


def allowed_logo(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in current_app.config['ALLOWED_LOGO_EXT']


@settings_bp.route('/settings/system', methods=['GET'])
@login_required
def system_settings():
    return jsonify(storage.get_system_config().to_dict())


@settings_bp.route('/settings/system/<key>', methods=['PUT'])
@login_required
def update_system_setting(key):
    form = validate_form(SystemSettingForm)
    setting = storage.upsert_system_setting(key, form.value.data)
    return jsonify(setting.to_dict())


def _register_reference_routes(resource, model, form_cls):
    """List/create/update/soft-delete routes for one kind of reference data."""
    endpoint = resource.replace('-', '_')
    base = f'/settings/{resource}'

    @login_required
    def index():
        return jsonify([record.to_dict() for record in storage.list_active(model)])

    @login_required
    def create():
        form = validate_form(form_cls)
        return jsonify(storage.create(model, form.values()).to_dict()), 201

    @login_required
    def edit(id):
        form = validate_form(form_cls, partial=True)
        return jsonify(storage.update(model, id, form.values()).to_dict())

    @login_required
    def remove(id):
        storage.deactivate(model, id)
        return jsonify({"message": f"{model.__name__} deleted"})

    settings_bp.add_url_rule(base, f'{endpoint}_index', index, methods=['GET'])
    settings_bp.add_url_rule(base, f'{endpoint}_create', create, methods=['POST'])
    settings_bp.add_url_rule(f'{base}/<int:id>', f'{endpoint}_edit', edit, methods=['PUT'])
    settings_bp.add_url_rule(f'{base}/<int:id>', f'{endpoint}_delete', remove, methods=['DELETE'])


for _resource, (_model, _form) in REFERENCE_RESOURCES.items():
    _register_reference_routes(_resource, _model, _form)


@settings_bp.route('/logo/upload', methods=['POST'])
@login_required
def upload_logo():
    file = request.files.get('logo')
    if not file or not file.filename:
        raise ValidationError(errors={"logo": ["No file uploaded"]})
    if not allowed_logo(file.filename):
        raise ValidationError(errors={"logo": ["Unsupported file type"]})

    filename = f"{uuid.uuid4().hex}_{secure_filename(file.filename)}"
    os.makedirs(current_app.config['LOGO_FOLDER'], exist_ok=True)
    file.save(os.path.join(current_app.config['LOGO_FOLDER'], filename))

    logo_path = f"/uploads/logos/{filename}"
    storage.upsert_system_setting('logo', logo_path)
    return jsonify({"logoPath": logo_path})
