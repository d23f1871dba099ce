"""
Application factory and process entry point.
"""
import argparse
import logging
import sys
from datetime import timedelta

from flask import Flask
from sqlalchemy.exc import SQLAlchemyError

from garage_booking.config import DB_URL_KEY, DB_USER_KEY, ConfigLoader, Settings, get_settings, load_settings
from garage_booking.database import create_db_engine, init_db
from garage_booking.errors import GarageError
from garage_booking.extensions import bcrypt, cors, jwt, mail
from garage_booking.mailer import MailNotifier, SmtpConfig
from garage_booking.pricing import PricingConfig
from garage_booking.repository import GarageRepository
from garage_booking.routers import EXTENSION_KEY, api, auth, bookings, dashboard, quick
from garage_booking.routers import settings as settings_router
from garage_booking.services import GarageService

logger = logging.getLogger(__name__)


def create_app(settings: Settings = None, testing: bool = False) -> Flask:
    """Build the Flask app; the database is not touched until ``prepare_database``."""
    settings = settings or get_settings()

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["JWT_SECRET_KEY"] = settings.jwt_secret_key
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(hours=24)
    app.config["TESTING"] = testing
    if testing:
        app.config["BCRYPT_LOG_ROUNDS"] = 4
    app.config.update(SmtpConfig.from_settings(settings).flask_config())

    # Initialize extensions
    bcrypt.init_app(app)
    jwt.init_app(app)
    mail.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": settings.cors_origins}})

    repository = GarageRepository(create_db_engine(settings))
    app.extensions[EXTENSION_KEY] = GarageService(
        repository,
        PricingConfig(),
        MailNotifier(mail, settings),
        bcrypt,
        email_enabled=settings.email_enabled,
    )

    app.register_blueprint(auth.router)
    app.register_blueprint(dashboard.router)
    app.register_blueprint(bookings.router)
    app.register_blueprint(settings_router.router)
    app.register_blueprint(quick.router)
    app.register_blueprint(api.router)

    @app.context_processor
    def inject_business():
        return {
            "app_name": settings.app_name,
            "business": app.extensions[EXTENSION_KEY].pricing.business,
        }

    return app


def prepare_database(app: Flask):
    """Create missing tables and load the stored price table."""
    service = app.extensions[EXTENSION_KEY]
    init_db(service.repository.engine)
    service.load_pricing()


def startup_error(message: str) -> int:
    logger.error(message)
    print(f"❌ {message}", file=sys.stderr)
    return 1


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="garage-booking", description="Garage service booking application")
    parser.add_argument("command", nargs="?", default="serve", choices=["serve", "init-db", "verify-smtp"])
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("--env-file", default=".env")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    loader = ConfigLoader(args.env_file)
    missing = loader.missing(DB_URL_KEY, DB_USER_KEY)
    if missing:
        return startup_error(
            "Missing required database configuration: " + ", ".join(missing)
            + ". Set values in environment variables or .env."
        )

    try:
        settings = load_settings(loader)
    except ValueError as e:
        return startup_error(f"Invalid configuration: {e}")

    app = create_app(settings)

    if args.command == "verify-smtp":
        with app.app_context():
            try:
                app.extensions[EXTENSION_KEY].notifier.verify()
            except GarageError as e:
                return startup_error(str(e))
        print(f"✅ SMTP login succeeded for {settings.smtp_host}:{settings.smtp_port}")
        return 0

    try:
        prepare_database(app)
    except SQLAlchemyError as e:
        return startup_error(f"Could not prepare the database: {e}")
    print("✅ Database initialized successfully")
    if args.command == "init-db":
        return 0

    print(f"🚀 Starting {settings.app_name}...")
    print(f"🌐 Screens: http://{args.host}:{args.port}/")
    print(f"🔧 API: http://{args.host}:{args.port}/api")
    # One request at a time, like a single UI event thread.
    app.run(host=args.host, port=args.port, debug=settings.debug, threaded=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
