from datetime import date

from flask import Blueprint, jsonify, request

import finance
import storage
from auth_utils import login_required
from forms import ReserveAllocationForm, ReserveExpenditureForm, validate_form
from models import AllocationAccount, ReserveAllocation, ReserveExpenditure

reserves_bp = Blueprint('reserves', __name__, url_prefix='/api')


def _year():
    return request.args.get('year', type=int) or date.today().year


# ─────────────────────────────────────────────────────────────
#  Allocations
# ─────────────────────────────────────────────────────────────

@reserves_bp.route('/reserve-allocations', methods=['GET'])
@login_required
def allocations():
    rows = storage.get_reserve_allocations(_year(), request.args.get('month', type=int))
    return jsonify([row.to_dict() for row in rows])


@reserves_bp.route('/reserve-allocations', methods=['POST'])
@login_required
def add_allocation():
    form = validate_form(ReserveAllocationForm)
    allocation = storage.create(ReserveAllocation, form.values())
    return jsonify(allocation.to_dict()), 201


@reserves_bp.route('/reserve-allocations/<int:id>', methods=['DELETE'])
@login_required
def delete_allocation(id):
    storage.delete(ReserveAllocation, id)
    return jsonify({"message": "Allocation deleted"})


@reserves_bp.route('/reserve-allocations/summary', methods=['GET'])
@login_required
def allocation_summary():
    return jsonify(reserve_summary(_year()))


def reserve_summary(year):
    return finance.reserve_summary(
        year,
        storage.list_active(AllocationAccount),
        storage.get_revenues_by_year(year),
        storage.get_expenses(year),
        storage.get_reserve_expenditures(year),
    )


# ─────────────────────────────────────────────────────────────
#  Expenditures
# ─────────────────────────────────────────────────────────────

@reserves_bp.route('/reserve-expenditures', methods=['GET'])
@login_required
def expenditures():
    rows = storage.get_reserve_expenditures(
        request.args.get('year', type=int),
        request.args.get('month', type=int),
    )
    return jsonify([row.to_dict() for row in rows])


@reserves_bp.route('/reserve-expenditures', methods=['POST'])
@login_required
def add_expenditure():
    form = validate_form(ReserveExpenditureForm)
    expenditure = storage.create(ReserveExpenditure, form.values())
    return jsonify(expenditure.to_dict()), 201


@reserves_bp.route('/reserve-expenditures/<int:id>', methods=['PUT'])
@login_required
def edit_expenditure(id):
    form = validate_form(ReserveExpenditureForm, partial=True)
    expenditure = storage.update(ReserveExpenditure, id, form.values())
    return jsonify(expenditure.to_dict())


@reserves_bp.route('/reserve-expenditures/<int:id>', methods=['DELETE'])
@login_required
def delete_expenditure(id):
    storage.delete(ReserveExpenditure, id)
    return jsonify({"message": "Expenditure deleted"})


@reserves_bp.route('/reserve-expenditures/summary/<int:year>', methods=['GET'])
@login_required
def expenditure_summary(year):
    return jsonify(finance.summarize_expenditures(storage.get_reserve_expenditures(year)))
