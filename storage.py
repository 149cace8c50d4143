"""
Record store: queries and writes over the ORM models.

Routes never touch ``db.session`` directly; they go through these
functions so that not-found and constraint errors surface as ``ApiError``
subclasses instead of raw SQLAlchemy exceptions.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date

from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash

from errors import ConflictError, NotFoundError, ValidationError
from finance import to_decimal
from models import (
    Expense, ReserveAllocation, ReserveExpenditure, Revenue, StockItem,
    StockTransaction, SystemSetting, User, db,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
#  Generic CRUD
# ─────────────────────────────────────────────────────────────

def _commit():
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Constraint violation: %s", exc.orig)
        raise ConflictError()


def get_or_404(model, record_id):
    record = db.session.get(model, record_id)
    if record is None:
        raise NotFoundError(f"{model.__name__} {record_id} not found")
    return record


def create(model, values):
    record = model(**values)
    db.session.add(record)
    _commit()
    logger.info("Created %s %s", model.__name__, record.id)
    return record


def update(model, record_id, values):
    record = get_or_404(model, record_id)
    for name, value in values.items():
        setattr(record, name, value)
    _commit()
    logger.info("Updated %s %s (%s)", model.__name__, record_id, ", ".join(sorted(values)))
    return record


def delete(model, record_id):
    record = get_or_404(model, record_id)
    db.session.delete(record)
    _commit()
    logger.info("Deleted %s %s", model.__name__, record_id)


def deactivate(model, record_id):
    return update(model, record_id, {"is_active": False})


def list_active(model):
    return model.query.filter_by(is_active=True).order_by(model.id).all()


def _date_range(year, month=None):
    errors = {}
    if not MINYEAR <= year <= MAXYEAR:
        errors["year"] = [f"Year must be between {MINYEAR} and {MAXYEAR}"]
    if month is not None and not 1 <= month <= 12:
        errors["month"] = ["Month must be between 1 and 12"]
    if errors:
        raise ValidationError(errors=errors)

    if month:
        return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])
    return date(year, 1, 1), date(year, 12, 31)


# ─────────────────────────────────────────────────────────────
#  Users
# ─────────────────────────────────────────────────────────────

def get_user_by_login(identifier):
    return User.query.filter((User.phone == identifier) | (User.username == identifier)).first()


def create_user(values):
    values = dict(values)
    values['password_hash'] = generate_password_hash(values.pop('password'))
    return create(User, values)


def set_password(user, password):
    user.password_hash = generate_password_hash(password)
    _commit()
    logger.info("Password changed for user %s", user.id)


def list_users():
    return User.query.order_by(User.created_at).all()


# ─────────────────────────────────────────────────────────────
#  Revenue & expenses
# ─────────────────────────────────────────────────────────────

def get_revenues_by_year(year):
    return Revenue.query.filter_by(year=year).order_by(Revenue.month).all()


def find_revenue(year, month):
    return Revenue.query.filter_by(year=year, month=month).first()


def upsert_revenue(year, month, amount):
    """Create or overwrite the revenue of one period; last write wins."""
    revenue = find_revenue(year, month)
    if revenue is None:
        revenue = Revenue(year=year, month=month, amount=amount)
        db.session.add(revenue)
    else:
        revenue.amount = amount

    try:
        db.session.commit()
    except IntegrityError:
        # Another request inserted this period first; overwrite its row.
        db.session.rollback()
        logger.info("Revenue %s-%02d inserted concurrently, updating instead", year, month)
        revenue = Revenue.query.filter_by(year=year, month=month).one()
        revenue.amount = amount
        _commit()

    logger.info("Revenue %s-%02d set to %s", year, month, amount)
    return revenue


def get_expenses(year, month=None, category=None):
    query = Expense.query.filter_by(year=year)
    if month:
        query = query.filter_by(month=month)
    if category:
        query = query.filter_by(category=category)
    return query.order_by(Expense.expense_date.desc(), Expense.id.desc()).all()


# ─────────────────────────────────────────────────────────────
#  Reserves
# ─────────────────────────────────────────────────────────────

def get_reserve_allocations(year, month=None):
    query = ReserveAllocation.query.filter_by(year=year)
    if month:
        query = query.filter_by(month=month)
    return query.order_by(ReserveAllocation.month).all()


def get_reserve_expenditures(year=None, month=None):
    query = ReserveExpenditure.query
    if year:
        start, end = _date_range(year, month)
        query = query.filter(ReserveExpenditure.expenditure_date.between(start, end))
    return query.order_by(ReserveExpenditure.expenditure_date.desc()).all()


# ─────────────────────────────────────────────────────────────
#  Stock
# ─────────────────────────────────────────────────────────────

def get_low_stock_items():
    return [item for item in list_active(StockItem) if item.is_low]


def get_stock_transactions(item_id=None):
    query = StockTransaction.query
    if item_id:
        query = query.filter_by(item_id=item_id)
    return query.order_by(StockTransaction.transaction_date.desc(), StockTransaction.id.desc()).all()


def get_price_history(item_id):
    get_or_404(StockItem, item_id)
    return [t for t in get_stock_transactions(item_id) if t.unit_price is not None]


def record_stock_transaction(values):
    """Persist a stock movement and apply it to the item's current stock."""
    item = get_or_404(StockItem, values['item_id'])
    quantity = to_decimal(values['quantity'])
    current = to_decimal(item.current_stock)

    if values['type'] == 'out':
        if quantity > current:
            raise ValidationError(errors={"quantity": [f"Only {current} {item.unit} in stock"]})
        item.current_stock = current - quantity
    else:
        item.current_stock = current + quantity

    if values.get('total_price') is None and values.get('unit_price') is not None:
        values = dict(values, total_price=quantity * to_decimal(values['unit_price']))

    transaction = StockTransaction(**values)
    db.session.add(transaction)
    _commit()
    logger.info("Stock %s of %s %s for item %s", values['type'], quantity, item.unit, item.id)
    return transaction


# ─────────────────────────────────────────────────────────────
#  System settings
# ─────────────────────────────────────────────────────────────

@dataclass
class SystemConfig:
    currency: str = "VNĐ"
    logo: str = None
    shop_name: str = None
    extra: dict = field(default_factory=dict)

    KNOWN_KEYS = ("currency", "logo", "shop_name")

    @classmethod
    def from_rows(cls, rows):
        config = cls()
        for row in rows:
            if row.key in cls.KNOWN_KEYS:
                if row.value is not None:
                    setattr(config, row.key, row.value)
            else:
                config.extra[row.key] = row.value
        return config

    def to_dict(self):
        return {
            "currency": self.currency,
            "logo": self.logo,
            "shopName": self.shop_name,
            "extra": dict(self.extra),
        }


def get_system_config():
    return SystemConfig.from_rows(SystemSetting.query.all())


def upsert_system_setting(key, value):
    setting = SystemSetting.query.filter_by(key=key).first()
    if setting is None:
        setting = SystemSetting(key=key, value=value)
        db.session.add(setting)
    else:
        setting.value = value
    _commit()
    logger.info("System setting %s updated", key)
    return setting
