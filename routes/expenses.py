from datetime import date

from flask import Blueprint, jsonify, request

import finance
import storage
from auth_utils import login_required
from forms import ExpenseForm, validate_form
from models import Expense

expenses_bp = Blueprint('expenses', __name__, url_prefix='/api/expenses')


def _listing(year, month=None):
    expenses = storage.get_expenses(year, month, request.args.get('category'))
    return jsonify([e.to_dict() for e in expenses])


@expenses_bp.route('', methods=['GET'])
@login_required
def index():
    year = request.args.get('year', type=int) or date.today().year
    return _listing(year, request.args.get('month', type=int))


@expenses_bp.route('/summary', methods=['GET'])
@login_required
def summary():
    today = date.today()
    year = request.args.get('year', type=int) or today.year
    month = request.args.get('month', type=int) or today.month
    return jsonify(expense_summary(year, month))


@expenses_bp.route('/<int:year>', methods=['GET'])
@login_required
def by_year(year):
    return _listing(year)


@expenses_bp.route('/<int:year>/<int:month>', methods=['GET'])
@login_required
def by_month(year, month):
    return _listing(year, month)


@expenses_bp.route('', methods=['POST'])
@login_required
def add_expense():
    form = validate_form(ExpenseForm)
    expense = storage.create(Expense, form.values())
    return jsonify(expense.to_dict()), 201


@expenses_bp.route('/<int:id>', methods=['PUT'])
@login_required
def edit_expense(id):
    form = validate_form(ExpenseForm, partial=True)
    expense = storage.update(Expense, id, form.values())
    return jsonify(expense.to_dict())


@expenses_bp.route('/<int:id>', methods=['DELETE'])
@login_required
def delete_expense(id):
    storage.delete(Expense, id)
    return jsonify({"message": "Expense deleted"})


def expense_summary(year, month):
    return finance.period_summary(
        storage.get_expenses(year),
        storage.get_expenses(year - 1),
        year,
        month,
    )
