import logging

import click
from flask import Flask, jsonify
from flask_migrate import Migrate
from werkzeug.exceptions import RequestEntityTooLarge

from config import Config
from routes import (
    health_bp,
    auth_bp,
    admin_bp,
    audit_bp,
    screens_bp,
    screen_bookings_bp,
    invoices_bp,
)
from models import db
from models.user import User, Role
from utils.seed import seed_roles, seed_screen_locations
from utils.auth_context import load_current_user
from security.csrf import csrf_protect


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=logging.DEBUG if app.config.get("DEBUG") else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(audit_bp)
    app.register_blueprint(screens_bp)
    app.register_blueprint(screen_bookings_bp)
    app.register_blueprint(invoices_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    with app.app_context():
        if app.config.get("TESTING"):
            db.create_all()
        # Seed default roles at startup (idempotent)
        seed_roles()

    @app.before_request
    def _load_user():
        load_current_user()

    # Only protect state-changing requests from logged-in callers
    app.before_request(csrf_protect)

    @app.errorhandler(RequestEntityTooLarge)
    def _too_large(_exc):
        limit_mb = app.config.get("MAX_CONTENT_LENGTH", 0) // (1024 * 1024)
        return jsonify(error=f"Upload exceeds {limit_mb} MB"), 413

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app


def register_cli(app):
    @app.cli.command("make-admin")
    @click.argument("email")
    def make_admin(email):
        """Promote a user to ADMIN by email (bootstrap)."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return

        admin_role = Role.query.filter_by(name="ADMIN").first()
        if not admin_role:
            admin_role = Role(name="ADMIN")
            db.session.add(admin_role)
            db.session.commit()

        if admin_role not in user.roles:
            user.roles.append(admin_role)
            db.session.commit()

        click.echo(f"{user.email} promoted to ADMIN")

    @app.cli.command("seed-screens")
    def seed_screens():
        """Insert demo screen locations and their rates."""
        added = seed_screen_locations()
        if added:
            click.echo(f"Added {added} screen locations")
        else:
            click.echo("Screen locations already present, nothing to do")


if __name__ == "__main__":
    app = create_app()
    app.run(host="127.0.0.1", port=5002)
