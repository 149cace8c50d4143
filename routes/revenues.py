from datetime import date

from flask import Blueprint, jsonify, request

import finance
import storage
from auth_utils import login_required
from forms import RevenueForm, validate_form
from models import Revenue

revenues_bp = Blueprint('revenues', __name__, url_prefix='/api/revenues')


@revenues_bp.route('', methods=['GET'])
@login_required
def index():
    year = request.args.get('year', type=int) or date.today().year
    return jsonify([r.to_dict() for r in storage.get_revenues_by_year(year)])


@revenues_bp.route('/<int:year>', methods=['GET'])
@login_required
def by_year(year):
    return jsonify([r.to_dict() for r in storage.get_revenues_by_year(year)])


@revenues_bp.route('/summary', methods=['GET'])
@login_required
def summary():
    today = date.today()
    year = request.args.get('year', type=int) or today.year
    month = request.args.get('month', type=int) or today.month
    return jsonify(revenue_summary(year, month))


@revenues_bp.route('', methods=['POST'])
@login_required
def upsert_revenue():
    form = validate_form(RevenueForm)
    revenue = storage.upsert_revenue(form.year.data, form.month.data, form.amount.data)
    return jsonify(revenue.to_dict())


@revenues_bp.route('/<int:id>', methods=['PUT'])
@login_required
def edit_revenue(id):
    form = validate_form(RevenueForm, partial=True)
    revenue = storage.update(Revenue, id, form.values())
    return jsonify(revenue.to_dict())


def revenue_summary(year, month):
    return finance.period_summary(
        storage.get_revenues_by_year(year),
        storage.get_revenues_by_year(year - 1),
        year,
        month,
    )
