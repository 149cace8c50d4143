from datetime import datetime
from decimal import Decimal

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event

db = SQLAlchemy()

MONEY = db.Numeric(15, 2)


def derive_period(value):
    """Return the (year, month) pair a dated record is filed under."""
    return value.year, value.month


def _money(value):
    return value if value is not None else Decimal('0')


def _iso(value):
    return value.isoformat() if value is not None else None


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    phone = db.Column(db.String(20), nullable=False, unique=True)
    username = db.Column(db.String(50), nullable=False, unique=True)
    name = db.Column(db.String(100), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(10), nullable=False, default='admin')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def is_admin(self):
        return self.role == 'admin'

    def to_dict(self):
        return {
            "id": self.id,
            "phone": self.phone,
            "username": self.username,
            "name": self.name,
            "role": self.role,
            "createdAt": _iso(self.created_at),
        }


class Revenue(db.Model):
    __tablename__ = 'revenues'
    __table_args__ = (db.UniqueConstraint('year', 'month', name='uq_revenue_period'),)

    id = db.Column(db.Integer, primary_key=True)
    year = db.Column(db.Integer, nullable=False, index=True)
    month = db.Column(db.Integer, nullable=False)
    amount = db.Column(MONEY, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "year": self.year,
            "month": self.month,
            "amount": _money(self.amount),
            "updatedAt": _iso(self.updated_at),
        }


class Expense(db.Model):
    __tablename__ = 'expenses'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(50), nullable=False)
    amount = db.Column(MONEY, nullable=False)
    expense_date = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(10), nullable=False, default='spent')
    notes = db.Column(db.Text)
    year = db.Column(db.Integer, nullable=False, index=True)
    month = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "amount": _money(self.amount),
            "expenseDate": _iso(self.expense_date),
            "status": self.status,
            "notes": self.notes,
            "year": self.year,
            "month": self.month,
        }


@event.listens_for(Expense, 'before_insert')
@event.listens_for(Expense, 'before_update')
def _sync_expense_period(mapper, connection, target):
    target.year, target.month = derive_period(target.expense_date)


class AllocationAccount(db.Model):
    __tablename__ = 'allocation_accounts'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text)
    percentage = db.Column(db.Numeric(5, 2), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "percentage": _money(self.percentage),
            "isActive": self.is_active,
        }


class ReserveAllocation(db.Model):
    __tablename__ = 'reserve_allocations'

    id = db.Column(db.Integer, primary_key=True)
    year = db.Column(db.Integer, nullable=False, index=True)
    month = db.Column(db.Integer, nullable=False)
    account_type = db.Column(db.String(100), nullable=False)
    amount = db.Column(MONEY, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "year": self.year,
            "month": self.month,
            "accountType": self.account_type,
            "amount": _money(self.amount),
        }


class ReserveExpenditure(db.Model):
    __tablename__ = 'reserve_expenditures'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    source_type = db.Column(db.String(100), nullable=False)
    amount = db.Column(MONEY, nullable=False)
    expenditure_date = db.Column(db.Date, nullable=False, index=True)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "sourceType": self.source_type,
            "amount": _money(self.amount),
            "expenditureDate": _iso(self.expenditure_date),
            "notes": self.notes,
        }


class StockItem(db.Model):
    __tablename__ = 'stock_items'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(100))
    unit = db.Column(db.String(30), nullable=False)
    unit_price = db.Column(db.Numeric(12, 0), nullable=False)
    current_stock = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal('0'))
    min_stock = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal('0'))
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    transactions = db.relationship('StockTransaction', back_populates='item',
                                   order_by='StockTransaction.transaction_date.desc()')

    @property
    def is_low(self):
        return _money(self.current_stock) <= _money(self.min_stock)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "unit": self.unit,
            "unitPrice": _money(self.unit_price),
            "currentStock": _money(self.current_stock),
            "minStock": _money(self.min_stock),
            "isActive": self.is_active,
            "isLow": self.is_low,
        }


class StockTransaction(db.Model):
    __tablename__ = 'stock_transactions'

    id = db.Column(db.Integer, primary_key=True)
    item_id = db.Column(db.Integer, db.ForeignKey('stock_items.id'), nullable=False)
    type = db.Column(db.String(3), nullable=False)
    quantity = db.Column(db.Numeric(10, 2), nullable=False)
    unit_price = db.Column(db.Numeric(10, 2))
    total_price = db.Column(MONEY)
    notes = db.Column(db.Text)
    transaction_date = db.Column(db.Date, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    item = db.relationship('StockItem', back_populates='transactions')

    def to_dict(self):
        return {
            "id": self.id,
            "itemId": self.item_id,
            "type": self.type,
            "quantity": _money(self.quantity),
            # None means no price was recorded for the movement, not a zero price.
            "unitPrice": self.unit_price,
            "totalPrice": self.total_price,
            "notes": self.notes,
            "transactionDate": _iso(self.transaction_date),
        }


class ExpenseCategory(db.Model):
    __tablename__ = 'expense_categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    code = db.Column(db.String(50), nullable=False, unique=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "code": self.code, "isActive": self.is_active}


class Shareholder(db.Model):
    __tablename__ = 'shareholders'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    percentage = db.Column(db.Numeric(5, 2), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "percentage": _money(self.percentage),
            "isActive": self.is_active,
        }


class Branch(db.Model):
    __tablename__ = 'branches'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    address = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(20))
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "isActive": self.is_active,
        }


class SystemSetting(db.Model):
    __tablename__ = 'general_settings'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(100), nullable=False, unique=True)
    value = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {"key": self.key, "value": self.value, "updatedAt": _iso(self.updated_at)}
