from __future__ import annotations

from typing import Any, Dict

import click
import structlog
from flask import Flask, jsonify

from postdesk.config import Config
from postdesk.extensions import (
    db,
    migrate,
    limiter,
    cache,
    tokens,
)
from postdesk.error_handlers import register_error_handlers
from postdesk.logging_config import configure_logging
from postdesk.monitoring import register_request_hooks
from postdesk.security import apply_security_headers
from postdesk.models import User, Post  # noqa: F401  ensure models imported for migrations
from postdesk.utils.crypto import hash_password
from postdesk.utils.validators import validate_email


def create_app(config_overrides: Dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=False)

    # Load config
    app.config.from_object(Config())
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"), cache_loggers=not app.testing)

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)
    cache.init_app(app)
    if app.config.get("CACHE_TYPE") == "SimpleCache" and not (app.testing or app.debug):
        structlog.get_logger(__name__).warning(
            "process_local_cache",
            detail="listing invalidation will not reach other workers",
        )
    tokens.init_app(app)
    limiter.init_app(app)

    # Request id, timing and access log; errors are normalized to JSON
    register_request_hooks(app)
    register_error_handlers(app)

    # Security and CORS headers
    @app.after_request
    def set_headers(resp):
        return apply_security_headers(resp)

    # Blueprints
    from postdesk.blueprints.api.posts import bp as posts_bp
    from postdesk.blueprints.api.users import bp as users_bp

    app.register_blueprint(posts_bp)
    app.register_blueprint(users_bp)

    # Health route
    @app.get("/health")
    def health():
        try:
            db.session.execute(db.text("SELECT 1"))
            db_ok = "connected"
        except Exception:
            db.session.rollback()
            db_ok = "error"
        return jsonify({"status": "ok", "message": "Server is running", "db": db_ok}), 200

    @app.get("/api")
    def api_index():
        return jsonify({"message": "API is working"})

    # CLI: create tables without running migrations (development, tests)
    @app.cli.command("init-db")
    def init_db() -> None:
        db.create_all()
        click.echo("Database tables created")

    # CLI: create a user account
    @app.cli.command("create-user")
    @click.option("--username", prompt=True)
    @click.option("--email", prompt=True)
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    def create_user_command(username: str, email: str, password: str) -> None:
        if not validate_email(email):
            raise click.BadParameter("invalid email address", param_hint="--email")
        if db.session.execute(db.select(User).filter_by(username=username)).scalar_one_or_none():
            click.echo("User already exists")
            return
        user = User(
            username=username,
            email=email.lower(),
            password_hash=hash_password(password),
        )
        db.session.add(user)
        db.session.commit()
        click.echo(f"User created: {user.hex_id}")

    # CLI: print a bearer token for an existing user
    @app.cli.command("issue-token")
    @click.argument("username")
    def issue_token_command(username: str) -> None:
        user = db.session.execute(db.select(User).filter_by(username=username)).scalar_one_or_none()
        if user is None:
            raise click.ClickException(f"No user named {username}")
        click.echo(tokens.issue(user))

    structlog.get_logger(__name__).info("app_created", env=app.config.get("ENV"))
    return app
