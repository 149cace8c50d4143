import os
from dotenv import load_dotenv

load_dotenv()


def _database_uri():
    url = os.getenv('DATABASE_URL')
    if url:
        return url
    return "mysql+mysqlconnector://{user}:{password}@{host}/{database}".format(
        user=os.getenv('MYSQL_USER', 'root'),
        password=os.getenv('MYSQL_PASSWORD', ''),
        host=os.getenv('MYSQL_HOST', 'localhost'),
        database=os.getenv('MYSQL_DATABASE', 'shop_ledger'),
    )


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY')
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_size": 5, "pool_recycle": 280, "pool_pre_ping": True}

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'uploads'))
    LOGO_FOLDER = os.path.join(UPLOAD_FOLDER, 'logos')
    ALLOWED_LOGO_EXT = {"png", "jpg", "jpeg", "svg"}
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = os.getenv('FLASK_ENV') == 'production'
    PERMANENT_SESSION_LIFETIME = 60 * 60 * 24 * 7

    DEFAULT_ADMIN_PHONE = os.getenv('DEFAULT_ADMIN_PHONE', '0900000000')
    DEFAULT_ADMIN_PASSWORD = os.getenv('DEFAULT_ADMIN_PASSWORD', 'admin123')

    @staticmethod
    def init_db(app):
        from models import db
        db.init_app(app)
