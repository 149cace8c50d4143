"""
Financial folding over query results.

Everything here is a pure function over rows already fetched by the
storage layer: revenue/expense period summaries, the monthly net-profit
allocation across reserve accounts, and the reserve expenditure ledger.
All arithmetic is done in ``Decimal``; amounts are never converted to float.
"""

import calendar
from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal('0')
CENT = Decimal('0.01')
HUNDRED = Decimal('100')
MONTHS = range(1, 13)


def to_decimal(value):
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _cents(value):
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


# ─────────────────────────────────────────────────────────────
#  Aggregation
# ─────────────────────────────────────────────────────────────

def sum_amounts(rows):
    return sum((to_decimal(row.amount) for row in rows), ZERO)


def monthly_totals(rows):
    """Sum ``amount`` per ``month``; months without rows are absent."""
    totals = defaultdict(lambda: ZERO)
    for row in rows:
        totals[row.month] += to_decimal(row.amount)
    return dict(totals)


def percentage_change(current, previous):
    """Percent change from ``previous`` to ``current``; 0 when previous is 0."""
    current, previous = to_decimal(current), to_decimal(previous)
    if previous == ZERO:
        return _cents(ZERO)
    return _cents((current - previous) / abs(previous) * HUNDRED)


def previous_period(year, month=None):
    if month is None:
        return year - 1, None
    if month == 1:
        return year - 1, 12
    return year, month - 1


def period_summary(rows, prior_year_rows, year, month):
    """
    Annual and monthly totals for ``year``/``month`` with their deltas.

    ``rows`` are the records filed under ``year``; ``prior_year_rows`` the
    ones under ``year - 1`` (January compares against the prior December).
    """
    current_months = monthly_totals(rows)
    prior_months = monthly_totals(prior_year_rows)

    annual = sum(current_months.values(), ZERO)
    previous_annual = sum(prior_months.values(), ZERO)

    prev_year, prev_month = previous_period(year, month)
    monthly = current_months.get(month, ZERO)
    source = prior_months if prev_year != year else current_months
    previous_monthly = source.get(prev_month, ZERO)

    return {
        "year": year,
        "month": month,
        "annual": annual,
        "monthly": monthly,
        "previousAnnual": previous_annual,
        "previousMonthly": previous_monthly,
        "annualChange": percentage_change(annual, previous_annual),
        "monthlyChange": percentage_change(monthly, previous_monthly),
    }


# ─────────────────────────────────────────────────────────────
#  Allocation
# ─────────────────────────────────────────────────────────────

def monthly_net_profit(revenues, expenses):
    """Net profit for months 1..12; a month without revenue counts as zero."""
    revenue_by_month = monthly_totals(revenues)
    expense_by_month = monthly_totals(expenses)
    return {
        month: revenue_by_month.get(month, ZERO) - expense_by_month.get(month, ZERO)
        for month in MONTHS
    }


def allocation_for_month(net_profit, percentage):
    """Share of one month's profit; a loss month contributes nothing."""
    share = to_decimal(net_profit) * to_decimal(percentage) / HUNDRED
    return max(share, ZERO)


def active_accounts(accounts):
    return [account for account in accounts if account.is_active]


def allocate(accounts, monthly_profit):
    """
    Total allocated per active account name over ``monthly_profit``.

    Percentages are applied as given; they are not required to add up to
    100, so the allocations may exceed the total net profit.
    """
    totals = {}
    for account in active_accounts(accounts):
        running = totals.get(account.name, ZERO)
        for net_profit in monthly_profit.values():
            running += allocation_for_month(net_profit, account.percentage)
        totals[account.name] = running
    return {name: _cents(total) for name, total in totals.items()}


# ─────────────────────────────────────────────────────────────
#  Expenditure ledger
# ─────────────────────────────────────────────────────────────

def summarize_expenditures(rows):
    total = ZERO
    by_account = defaultdict(lambda: ZERO)
    monthly = defaultdict(lambda: defaultdict(lambda: ZERO))

    for row in rows:
        amount = to_decimal(row.amount)
        total += amount
        by_account[row.source_type] += amount
        monthly[row.expenditure_date.month][row.source_type] += amount

    return {
        "totalExpended": total,
        "byAccount": dict(by_account),
        "monthlyExpenditure": {month: dict(accounts) for month, accounts in sorted(monthly.items())},
    }


def remaining_balances(allocated, expended):
    """Allocated minus expended per account; overspent accounts go negative."""
    balances = []
    for name in sorted(set(allocated) | set(expended)):
        spent = to_decimal(expended.get(name))
        given = to_decimal(allocated.get(name))
        balances.append({
            "account": name,
            "allocated": given,
            "expended": spent,
            "remaining": given - spent,
        })
    return balances


def reserve_summary(year, accounts, revenues, expenses, expenditures):
    allocated = allocate(accounts, monthly_net_profit(revenues, expenses))
    ledger = summarize_expenditures(expenditures)
    balances = remaining_balances(allocated, ledger["byAccount"])
    total_allocated = sum(allocated.values(), ZERO)
    return {
        "year": year,
        "total": total_allocated,
        "byAccount": allocated,
        "totalExpended": ledger["totalExpended"],
        "remaining": total_allocated - ledger["totalExpended"],
        "balances": balances,
    }


# ─────────────────────────────────────────────────────────────
#  Cash flow
# ─────────────────────────────────────────────────────────────

def _ratio(part, whole):
    if whole == ZERO:
        return _cents(ZERO)
    return _cents(part / whole * HUNDRED)


def cash_flow(year, revenues, expenses, accounts):
    """Month-by-month revenue, expenses by category, net profit and allocation."""
    revenue_by_month = monthly_totals(revenues)
    by_category = defaultdict(lambda: defaultdict(lambda: ZERO))
    for expense in expenses:
        by_category[expense.month][expense.category] += to_decimal(expense.amount)

    rows = []
    for month in MONTHS:
        revenue = revenue_by_month.get(month, ZERO)
        categories = dict(by_category.get(month, {}))
        total_expenses = sum(categories.values(), ZERO)
        net_profit = revenue - total_expenses
        days = calendar.monthrange(year, month)[1]
        rows.append({
            "month": month,
            "revenue": revenue,
            "dailyAverage": _cents(revenue / days),
            "expensesByCategory": categories,
            "categoryRatios": {name: _ratio(amount, revenue) for name, amount in categories.items()},
            "totalExpenses": total_expenses,
            "netProfit": net_profit,
            "profitRatio": _ratio(net_profit, revenue),
            "allocations": {
                account.name: _cents(allocation_for_month(net_profit, account.percentage))
                for account in active_accounts(accounts)
            },
        })
    return rows
