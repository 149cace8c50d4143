from functools import wraps

from flask import session

from errors import AuthError, ForbiddenError
from models import User, db


def current_user():
    user_id = session.get('user_id')
    return db.session.get(User, user_id) if user_id is not None else None


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            session.clear()
            raise AuthError()
        return fn(*args, **kwargs)
    return wrapper


def admin_required(fn):
    @wraps(fn)
    @login_required
    def wrapper(*args, **kwargs):
        if not current_user().is_admin:
            raise ForbiddenError("Administrator access required")
        return fn(*args, **kwargs)
    return wrapper
