import logging
import os
import secrets

from flask import Flask, send_from_directory
from flask_wtf.csrf import CSRFProtect

from config import Config
from errors import register_error_handlers
from routes.auth import auth_bp
from routes.dashboard import dashboard_bp
from routes.expenses import expenses_bp
from routes.reserves import reserves_bp
from routes.revenues import revenues_bp
from routes.settings import settings_bp
from routes.stock import stock_bp
from routes.users import users_bp

csrf = CSRFProtect()


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.setLevel(level)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get("SECRET_KEY"):
        app.config["SECRET_KEY"] = secrets.token_hex(32)

    configure_logging(app)
    config_class.init_db(app)
    csrf.init_app(app)
    register_error_handlers(app)

    os.makedirs(app.config['LOGO_FOLDER'], exist_ok=True)

    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(revenues_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(reserves_bp)
    app.register_blueprint(stock_bp)
    app.register_blueprint(settings_bp)

    @app.after_request
    def set_security_headers(response):
        response.headers.setdefault('X-Content-Type-Options', 'nosniff')
        response.headers.setdefault('X-Frame-Options', 'SAMEORIGIN')
        response.headers.setdefault('Referrer-Policy', 'strict-origin-when-cross-origin')
        return response

    @app.route('/uploads/logos/<path:filename>')
    def logo_file(filename):
        return send_from_directory(app.config['LOGO_FOLDER'], filename)

    app.logger.info("Application created with %s", config_class.__name__)
    return app


if __name__ == "__main__":
    create_app().run()
