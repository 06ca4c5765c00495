import os
import logging

import click
from flask import Flask, jsonify

from toogo.config import config_by_name
from toogo.extensions import db, migrate, limiter


def create_app(config_name=None):
    """Application factory."""

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # --- Validate required env vars (skip in testing) ---
    if config_name != "testing":
        try:
            config_by_name[config_name].validate()
        except RuntimeError as e:
            app.logger.warning(f"Config validation: {e}")

    # --- Init extensions ---
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # --- Import models so Alembic can discover them ---
    with app.app_context():
        from toogo import models  # noqa: F401

    # --- Register blueprints ---
    from toogo.blueprints.domains import domains_bp

    app.register_blueprint(domains_bp)

    # --- Error handlers (JSON API) ---
    register_error_handlers(app)

    # --- CLI commands ---
    register_cli(app)

    # --- Logging ---
    if not app.debug:
        logging.basicConfig(level=logging.INFO)

    return app


def register_error_handlers(app):
    """Return JSON bodies instead of HTML error pages."""

    def _json_error(message, status):
        def handler(e):
            return jsonify({"error": message}), status
        return handler

    app.register_error_handler(400, _json_error("Bad request", 400))
    app.register_error_handler(401, _json_error("Unauthorized", 401))
    app.register_error_handler(404, _json_error("Not found", 404))
    app.register_error_handler(405, _json_error("Method not allowed", 405))
    app.register_error_handler(429, _json_error("Too many requests", 429))
    app.register_error_handler(500, _json_error("Internal server error", 500))


def register_cli(app):
    """Register custom CLI commands with the Flask app."""

    @app.cli.command("seed-tenant")
    @click.option("--domain", default="example.com", help="Purchased domain")
    @click.option("--email", default="owner@toogo.local", help="Owner email")
    @click.option("--name", default="Tienda Demo", help="Store name")
    def seed_tenant(domain, email, name):
        """Create an owner + tenant + pending domain purchase for local testing.

        Usage:
            flask seed-tenant
            flask seed-tenant --domain mitienda.com --email yo@mitienda.com
        """
        from toogo.models.domain_purchase import DomainPurchase
        from toogo.models.tenant import Tenant
        from toogo.models.user import User

        # --- 1. Owner ---
        owner = User.query.filter_by(email=email).first()
        if owner:
            click.echo(f"Owner already exists: {email}")
        else:
            owner = User(email=email, full_name="Demo Owner")
            db.session.add(owner)
            db.session.flush()
            click.echo(f"Created owner: {email}")

        # --- 2. Tenant ---
        tenant = Tenant(name=name, owner_user_id=owner.id, plan="basic")
        db.session.add(tenant)
        db.session.flush()

        # --- 3. Domain purchase ---
        purchase = DomainPurchase(tenant_id=tenant.id, domain=domain, status="pending")
        db.session.add(purchase)
        db.session.commit()

        click.echo("")
        click.echo("=" * 60)
        click.echo("Seed data created successfully!")
        click.echo("=" * 60)
        click.echo(f"  Owner:     {email} (id: {owner.id})")
        click.echo(f"  Tenant:    {tenant.name} (id: {tenant.id})")
        click.echo(f"  Purchase:  {purchase.domain} (id: {purchase.id})")
        click.echo("=" * 60)

    @app.cli.command("complete-domain-setup")
    @click.argument("domain_purchase_id")
    @click.option("--force-all", is_flag=True, help="Re-attempt steps that would be skipped.")
    def complete_domain_setup(domain_purchase_id, force_all):
        """Run the domain activation workflow for one purchase (manual re-run)."""
        from toogo.services.domain_setup import DomainPurchaseNotFound, run_domain_setup

        try:
            payload = run_domain_setup(domain_purchase_id, force_all=force_all)
        except DomainPurchaseNotFound as e:
            raise click.ClickException(str(e))

        if payload.get("reason"):
            click.echo(f"{payload['domain']}: {payload['reason']}")
        else:
            click.echo(f"{payload['domain']}: {payload['status']}")
        for step in payload["steps"]:
            click.echo(f"  [{step['status']:>9}] {step['step']}: {step['message']}")

    @app.cli.command("retry-pending-dns")
    def retry_pending_dns():
        """Re-run setup for dns_pending purchases (cron, every 15 minutes)."""
        from toogo.services.dns_verification_service import retry_pending_dns as _retry

        results = _retry(max_attempts=app.config["DNS_RETRY_MAX_ATTEMPTS"])
        click.echo(f"Checked {len(results)} pending domains")
        for r in results:
            outcome = r.get("status") or r.get("error")
            click.echo(f"  {r['domain']} (attempt {r['attempt']}): {outcome}")

    @app.cli.command("check-dns-status")
    def check_dns_status():
        """Verify DNS propagation and notify owners whose store is live."""
        from toogo.services.dns_verification_service import check_dns_status as _check

        summary = _check()
        click.echo(
            f"Verified {summary['verified']}/{summary['total_checked']} domains"
        )
