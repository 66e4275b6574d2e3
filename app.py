import click
from flask import Flask, jsonify
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from routes import (
    health_bp, auth_bp, admin_bp, family_bp,
    photo_bp, category_bp, children_bp, skills_bp, audit_bp,
)
from models import db
from security.bruteforce import init_lockout, get_lockout, format_duration
from security.pin import normalize_phone, is_valid_phone
from utils.auth_context import load_current_session


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Register routes
    for bp in (health_bp, auth_bp, admin_bp, audit_bp, family_bp, photo_bp, category_bp, children_bp, skills_bp):
        app.register_blueprint(bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # PIN lockout state is owned by this app instance
    init_lockout(app)

    @app.before_request
    def _load_session():
        load_current_session()

    @app.errorhandler(HTTPException)
    def _json_errors(exc):
        return jsonify(error=exc.description), exc.code

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        # API only, nothing to render
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

#-------------------------

def register_cli(app):
    @app.cli.command("create-family")
    @click.argument("name")
    @click.option("--phone", default=None, help="Phone number used to scope PIN logins.")
    def create_family_command(name, phone):
        """Create a family and print its viewer and editor PINs (bootstrap)."""
        from models.family import Family
        from routes.admin import create_family

        phone = normalize_phone(phone) or None
        if phone and not is_valid_phone(phone):
            raise click.BadParameter("invalid phone number format", param_hint="--phone")
        if phone and Family.query.filter_by(phone_number=phone).first():
            raise click.ClickException("phone number already registered")

        family, viewer_pin, editor_pin = create_family(name.strip(), phone)
        click.echo(f"Family #{family.id} {family.name} created")
        click.echo(f"  viewer PIN: {viewer_pin}")
        click.echo(f"  editor PIN: {editor_pin}")

    @app.cli.command("lockout-stats")
    def lockout_stats_command():
        """Print PIN lockout counters for this process."""
        stats = get_lockout().stats()
        for key, value in stats.items():
            click.echo(f"{key}: {value}")
        click.echo(f"level-2 cooldown: {format_duration(get_lockout().policy.cooldown_level2)}")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
