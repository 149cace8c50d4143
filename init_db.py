import logging
from decimal import Decimal

from config import Config
from models import AllocationAccount, ExpenseCategory, User, db
from storage import create_user

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNTS = [
    ("reinvestment", "Reinvestment fund", Decimal('25')),
    ("depreciation", "Equipment depreciation", Decimal('15')),
    ("risk_reserve", "Risk reserve", Decimal('20')),
    ("staff_bonus", "Staff bonus", Decimal('10')),
    ("dividends", "Shareholder dividends", Decimal('20')),
    ("marketing", "Marketing", Decimal('10')),
]

DEFAULT_CATEGORIES = [
    ("Staff salary", "staff_salary"),
    ("Ingredients", "ingredients"),
    ("Fixed costs", "fixed"),
    ("Additional costs", "additional"),
]


def seed(admin_phone, admin_password):
    """Insert the default accounts, categories and admin user when missing."""
    if not AllocationAccount.query.first():
        for name, description, percentage in DEFAULT_ACCOUNTS:
            db.session.add(AllocationAccount(name=name, description=description, percentage=percentage))
        logger.info("Seeded %d allocation accounts", len(DEFAULT_ACCOUNTS))

    if not ExpenseCategory.query.first():
        for name, code in DEFAULT_CATEGORIES:
            db.session.add(ExpenseCategory(name=name, code=code))
        logger.info("Seeded %d expense categories", len(DEFAULT_CATEGORIES))

    db.session.commit()

    if not User.query.first():
        create_user({
            "phone": admin_phone,
            "username": "admin",
            "name": "Administrator",
            "password": admin_password,
            "role": "admin",
        })
        logger.info("Created default admin user %s", admin_phone)


def init_db(app):
    with app.app_context():
        db.create_all()
        seed(app.config['DEFAULT_ADMIN_PHONE'], app.config['DEFAULT_ADMIN_PASSWORD'])


if __name__ == "__main__":
    from app import create_app
    init_db(create_app(Config))
