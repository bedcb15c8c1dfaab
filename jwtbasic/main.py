"""Flask application entry point."""

import logging

from flask import Flask, jsonify
from flask_cors import CORS

from .config import DEFAULT_JWT_SECRET, Settings, settings as default_settings
from .db import init_db
from .exceptions import (
    AuthenticationError,
    ConflictError,
    JWTBasicError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _error_response(error: JWTBasicError, status: int):
    response = {
        "error": {
            "type": error.__class__.__name__,
            "message": error.message
        }
    }
    if error.details:
        response["error"]["details"] = error.details
    return jsonify(response), status


# Error handlers
def handle_validation_error(error):
    """Handle ValidationError exceptions."""
    return _error_response(error, 400)


def handle_authentication_error(error):
    """Handle AuthenticationError and TokenError exceptions."""
    return _error_response(error, 401)


def handle_conflict_error(error):
    """Handle ConflictError exceptions."""
    return _error_response(error, 409)


def handle_jwtbasic_error(error):
    """Handle generic JWTBasicError exceptions."""
    logger.error(f"{error.__class__.__name__}: {error.message}")
    return _error_response(error, 500)


def handle_internal_error(error):
    """Handle internal server errors."""
    logger.error(f"Internal error: {error}")
    return jsonify({
        "error": {
            "type": "InternalServerError",
            "message": "An internal error occurred"
        }
    }), 500


def register_error_handlers(app: Flask) -> None:
    app.register_error_handler(ValidationError, handle_validation_error)
    app.register_error_handler(AuthenticationError, handle_authentication_error)
    app.register_error_handler(ConflictError, handle_conflict_error)
    app.register_error_handler(JWTBasicError, handle_jwtbasic_error)
    app.register_error_handler(500, handle_internal_error)


def create_app(settings: Settings | None = None) -> Flask:
    """
    Build the Flask application.

    The signing secret is read once here and injected into a TokenIssuer
    and a TokenValidator kept in app.extensions for the process lifetime.

    Args:
        settings: Settings to use, defaults to the environment-derived ones

    Returns:
        Configured Flask app
    """
    from .auth.api import auth_bp
    from .auth.token import TokenIssuer, TokenValidator

    if settings is None:
        settings = default_settings

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    app = Flask(__name__)
    app.config["DATABASE_PATH"] = settings.database_path
    app.config["BCRYPT_WORK_FACTOR"] = settings.bcrypt_work_factor

    # CORS configuration
    CORS(app, origins=settings.cors_origins, supports_credentials=True)

    if settings.jwt_secret_key == DEFAULT_JWT_SECRET:
        logger.warning("Using the default JWT secret; set JWT_SECRET_KEY in production")

    app.extensions["token_issuer"] = TokenIssuer.from_settings(settings)
    app.extensions["token_validator"] = TokenValidator.from_settings(settings)

    try:
        init_db(settings.database_path)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    register_error_handlers(app)

    # Health check endpoint
    @app.route("/health")
    def health():
        """Health check endpoint."""
        return jsonify({"status": "ok"})

    app.register_blueprint(auth_bp)

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
