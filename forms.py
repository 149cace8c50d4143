"""
Request validation.

Every write endpoint runs its JSON body through one of these forms.
Flask-WTF reads JSON bodies into form data, so the same form classes
validate both JSON and classic form posts. Field ``name`` values are the
camelCase keys the API speaks; attribute names match the model columns.
"""

from flask import request
from flask_wtf import FlaskForm
from wtforms import BooleanField, DateField, DecimalField, IntegerField, PasswordField, StringField
from wtforms.validators import AnyOf, DataRequired, Length, NumberRange, Optional, Regexp
from wtforms.validators import ValidationError as FieldError

from errors import ValidationError
from formatters import normalize_amount

MAX_AMOUNT = 9999999999999
PHONE_PATTERN = r'^0[3-9][0-9]{8}$'


class AmountField(DecimalField):
    """Decimal field that also accepts dot-grouped display amounts."""

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        raw = valuelist[0]
        if raw is None or raw == '':
            self.data = None
            return
        try:
            self.data = normalize_amount(raw)
        except ValueError:
            self.data = None
            raise ValueError(self.gettext('Not a valid amount.'))


class FlagField(BooleanField):
    """Boolean that keeps its default when the key is absent."""

    def process_formdata(self, valuelist):
        if valuelist:
            super().process_formdata(valuelist)


class ApiForm(FlaskForm):
    # CSRFProtect checks the X-CSRFToken header before the view runs.
    class Meta:
        csrf = False

    def values(self):
        return {name: field.data for name, field in self._fields.items()}


def validate_form(form_cls, partial=False):
    """
    Validate the current request body with ``form_cls``.

    With ``partial`` only the keys present in the body are validated and
    returned, which gives PUT its merge semantics.
    """
    form = form_cls()
    if partial:
        payload = request.get_json(silent=True) or request.form
        for attr, field in list(form._fields.items()):
            if field.name not in payload:
                del form[attr]
    if not form.validate():
        errors = {form[attr].name: messages for attr, messages in form.errors.items()}
        raise ValidationError(errors=errors)
    return form


def _greater_than_zero(form, field):
    if field.data is not None and field.data <= 0:
        raise FieldError("Amount must be greater than 0.")


def _amount(label, positive=False):
    validators = [NumberRange(min=0, max=MAX_AMOUNT)]
    if positive:
        validators.append(_greater_than_zero)
    return AmountField(label, validators=validators)


def _phone(required=True):
    presence = DataRequired() if required else Optional()
    return StringField('Phone', validators=[
        presence, Regexp(PHONE_PATTERN, message='Not a valid phone number.'),
    ])


class LoginForm(ApiForm):
    # Accepts a username as well, so no phone format check here.
    phone = StringField('Phone', validators=[DataRequired(), Length(max=50)])
    password = PasswordField('Password', validators=[DataRequired()])


class UserForm(ApiForm):
    phone = _phone()
    username = StringField('Username', validators=[DataRequired(), Length(max=50)])
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    password = PasswordField('Password', validators=[DataRequired(), Length(min=6)])
    role = StringField('Role', default='user', validators=[AnyOf(['admin', 'user'])])


class ProfileForm(ApiForm):
    phone = _phone()
    username = StringField('Username', validators=[DataRequired(), Length(max=50)])
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])


class ChangePasswordForm(ApiForm):
    current_password = PasswordField('Current password', name='currentPassword',
                                     validators=[DataRequired()])
    new_password = PasswordField('New password', name='newPassword',
                                 validators=[DataRequired(), Length(min=6)])


class RevenueForm(ApiForm):
    year = IntegerField('Year', validators=[NumberRange(min=2000, max=2100)])
    month = IntegerField('Month', validators=[NumberRange(min=1, max=12)])
    amount = _amount('Amount')


class ExpenseForm(ApiForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=200)])
    category = StringField('Category', validators=[DataRequired(), Length(max=50)])
    amount = _amount('Amount', positive=True)
    expense_date = DateField('Expense date', name='expenseDate', validators=[DataRequired()])
    status = StringField('Status', default='spent', validators=[AnyOf(['spent', 'draft'])])
    notes = StringField('Notes', validators=[Optional(), Length(max=1000)])


class ReserveAllocationForm(ApiForm):
    year = IntegerField('Year', validators=[NumberRange(min=2000, max=2100)])
    month = IntegerField('Month', validators=[NumberRange(min=1, max=12)])
    account_type = StringField('Account', name='accountType', validators=[DataRequired(), Length(max=100)])
    amount = _amount('Amount', positive=True)


class ReserveExpenditureForm(ApiForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=200)])
    source_type = StringField('Account', name='sourceType', validators=[DataRequired(), Length(max=100)])
    amount = _amount('Amount', positive=True)
    expenditure_date = DateField('Expenditure date', name='expenditureDate', validators=[DataRequired()])
    notes = StringField('Notes', validators=[Optional(), Length(max=1000)])


class AllocationAccountForm(ApiForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    description = StringField('Description', validators=[Optional(), Length(max=500)])
    percentage = DecimalField('Percentage', validators=[NumberRange(min=0, max=100)])
    is_active = FlagField('Active', name='isActive', default=True)


class ShareholderForm(ApiForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    percentage = DecimalField('Percentage', validators=[NumberRange(min=0, max=100)])
    is_active = FlagField('Active', name='isActive', default=True)


class ExpenseCategoryForm(ApiForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    code = StringField('Code', validators=[DataRequired(), Length(max=50)])
    is_active = FlagField('Active', name='isActive', default=True)


class BranchForm(ApiForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    address = StringField('Address', validators=[DataRequired(), Length(max=255)])
    phone = _phone(required=False)
    is_active = FlagField('Active', name='isActive', default=True)


class StockItemForm(ApiForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=200)])
    category = StringField('Category', validators=[Optional(), Length(max=100)])
    unit = StringField('Unit', validators=[DataRequired(), Length(max=30)])
    unit_price = AmountField('Unit price', name='unitPrice', validators=[NumberRange(min=0, max=MAX_AMOUNT)])
    current_stock = DecimalField('Current stock', name='currentStock', default=0,
                                 validators=[NumberRange(min=0)])
    min_stock = DecimalField('Minimum stock', name='minStock', default=0,
                             validators=[NumberRange(min=0)])
    is_active = FlagField('Active', name='isActive', default=True)


class StockTransactionForm(ApiForm):
    item_id = IntegerField('Item', name='itemId', validators=[DataRequired()])
    type = StringField('Type', validators=[AnyOf(['in', 'out'])])
    quantity = DecimalField('Quantity', validators=[NumberRange(min=0.01)])
    unit_price = AmountField('Unit price', name='unitPrice', validators=[Optional(), NumberRange(min=0)])
    total_price = AmountField('Total price', name='totalPrice', validators=[Optional(), NumberRange(min=0)])
    transaction_date = DateField('Date', name='transactionDate', validators=[DataRequired()])
    notes = StringField('Notes', validators=[Optional(), Length(max=1000)])


class SystemSettingForm(ApiForm):
    value = StringField('Value', validators=[Optional(), Length(max=2000)])
