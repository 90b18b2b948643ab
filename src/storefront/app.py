import logging
from typing import Optional

import click
from flask import Flask, current_app, jsonify
from marshmallow import ValidationError as MarshmallowValidationError
from werkzeug.exceptions import HTTPException

from storefront.core.config import Config
from storefront.core.dependencies import EXTENSION_KEY, build_container, get_service
from storefront.core.exceptions import BaseAPIException, InternalServerError
from storefront.db.database import Database
from storefront.routes import (
    auth_bp, cart_bp, categories_bp, orders_bp, products_bp, users_bp
)
from storefront.utils.date_utils import DateUtils
from storefront.utils.formatting_utils import FormattingUtils

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None, db: Optional[Database] = None) -> Flask:
    """
    Application factory.

    Each call builds its own container (and, unless one is passed in, its
    own Database), so tests get fully isolated instances.
    """
    config = config or Config()
    config.validate()

    logging.basicConfig(
        level=getattr(logging, config.app.log_level.upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    app = Flask(__name__)
    app.config["STOREFRONT"] = config
    app.config["DEBUG"] = config.app.debug

    container = build_container(config, db)
    app.extensions[EXTENSION_KEY] = container

    if config.database.auto_create:
        container.get(Database).create_schema()

    # ------------------------------------------------------------------ #
    # Blueprints, each domain registered under /api/v1/                   #
    # ------------------------------------------------------------------ #
    prefix = f"/api/{config.api.version}"
    app.register_blueprint(auth_bp,       url_prefix=f"{prefix}/auth")
    app.register_blueprint(users_bp,      url_prefix=f"{prefix}/users")
    app.register_blueprint(categories_bp, url_prefix=f"{prefix}/categories")
    app.register_blueprint(products_bp,   url_prefix=f"{prefix}/products")
    app.register_blueprint(cart_bp,       url_prefix=f"{prefix}/cart")
    app.register_blueprint(orders_bp,     url_prefix=f"{prefix}/orders")

    _register_error_handlers(app)
    _register_commands(app)

    # ------------------------------------------------------------------ #
    # Health check                                                         #
    # ------------------------------------------------------------------ #
    @app.get("/health")
    def health():
        """Liveness + readiness probe. Returns 503 if DB is unreachable."""
        reachable = get_service(Database).ping()
        body = {
            "status": "ok" if reachable else "error",
            "database": "reachable" if reachable else "unreachable",
            "timestamp": DateUtils.to_iso_string(DateUtils.now_utc()),
        }
        return jsonify(body), 200 if reachable else 503

    return app


def _register_error_handlers(app: Flask) -> None:
    """Consistent JSON error envelope for every failure"""

    @app.errorhandler(BaseAPIException)
    def api_error(e: BaseAPIException):
        if e.status_code >= 500:
            logger.error(f"{e.error_code}: {e.internal_message}")
        return jsonify(FormattingUtils.format_error_response(e.to_dict())), e.status_code

    @app.errorhandler(MarshmallowValidationError)
    def body_validation_error(e: MarshmallowValidationError):
        field_errors = [
            {"field": field, "message": "; ".join(messages) if isinstance(messages, list) else str(messages)}
            for field, messages in e.normalized_messages().items()
        ]
        body = {
            "success": False,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Validation failed",
                "details": {"field_errors": field_errors},
            },
        }
        return jsonify(FormattingUtils.format_error_response(body)), 400

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        body = {
            "success": False,
            "error": {
                "code": e.name.upper().replace(" ", "_"),
                "message": e.description,
                "details": {},
            },
        }
        return jsonify(FormattingUtils.format_error_response(body)), e.code

    @app.errorhandler(Exception)
    def unexpected_error(e: Exception):
        logger.exception(f"Unhandled error: {e}")
        error = InternalServerError(str(e))
        return jsonify(FormattingUtils.format_error_response(error.to_dict())), error.status_code


def _register_commands(app: Flask) -> None:

    @app.cli.command("init-db")
    @click.option("--drop", is_flag=True, help="Drop all tables first.")
    def init_db(drop: bool):
        """Create database tables."""
        db = current_app.extensions[EXTENSION_KEY].get(Database)
        if drop:
            db.drop_schema()
            click.echo("  [-] Tables dropped")
        db.create_schema()
        click.echo("  [+] Tables created")

    @app.cli.command("seed-db")
    def seed_db():
        """Load development data."""
        from storefront.seed import seed

        seed(current_app.extensions[EXTENSION_KEY])


if __name__ == "__main__":
    application = create_app()
    cfg = application.config["STOREFRONT"].app
    application.run(debug=cfg.debug, host=cfg.host, port=cfg.port)
