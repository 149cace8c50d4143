from datetime import date

from flask import Blueprint, jsonify, request

import finance
import storage
from auth_utils import login_required
from models import AllocationAccount
from routes.expenses import expense_summary
from routes.reserves import reserve_summary
from routes.revenues import revenue_summary

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api')


@dashboard_bp.route('/dashboard', methods=['GET'])
@login_required
def index():
    today = date.today()
    year = request.args.get('year', type=int) or today.year
    month = request.args.get('month', type=int) or today.month

    revenue = revenue_summary(year, month)
    expenses = expense_summary(year, month)
    net_profit = revenue['monthly'] - expenses['monthly']

    accounts = storage.list_active(AllocationAccount)
    allocations = [
        {
            "account": account.name,
            "percentage": account.percentage,
            "amount": finance.allocation_for_month(net_profit, account.percentage),
        }
        for account in accounts
    ]

    return jsonify({
        "year": year,
        "month": month,
        "revenue": revenue,
        "expenses": expenses,
        "netProfit": net_profit,
        "allocations": allocations,
        "reserves": reserve_summary(year),
    })


@dashboard_bp.route('/cash-flow/<int:year>', methods=['GET'])
@login_required
def cash_flow(year):
    months = finance.cash_flow(
        year,
        storage.get_revenues_by_year(year),
        storage.get_expenses(year),
        storage.list_active(AllocationAccount),
    )
    return jsonify({"year": year, "months": months})
