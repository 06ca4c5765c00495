"""Tests for the Flask CLI commands (cron entry points and local seeding)."""

from unittest.mock import patch

from toogo.models.domain_purchase import DomainPurchase
from toogo.models.tenant import Tenant


class TestSeedTenant:

    def test_creates_pending_purchase(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["seed-tenant", "--domain", "mitienda.com"])

        assert result.exit_code == 0
        assert "Seed data created successfully!" in result.output
        purchase = DomainPurchase.query.filter_by(domain="mitienda.com").one()
        assert purchase.status == "pending"
        assert Tenant.query.count() == 1


class TestCompleteDomainSetup:

    def test_runs_workflow(self, app, seed_data, vercel):
        runner = app.test_cli_runner()
        with patch("toogo.services.domain_setup.VercelClient", return_value=vercel):
            result = runner.invoke(args=["complete-domain-setup", seed_data["purchase_id"]])

        assert result.exit_code == 0
        assert "example.com: active" in result.output
        assert "bootstrap_product" in result.output

    def test_unknown_purchase(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["complete-domain-setup", "missing-id"])

        assert result.exit_code != 0
        assert "Domain purchase not found" in result.output


class TestCronCommands:

    def test_retry_pending_dns(self, app):
        runner = app.test_cli_runner()
        with patch("toogo.services.dns_verification_service.retry_pending_dns",
                   return_value=[{"domain": "example.com", "attempt": 2, "status": "active"}]) as mock_retry:
            result = runner.invoke(args=["retry-pending-dns"])

        assert result.exit_code == 0
        mock_retry.assert_called_once_with(max_attempts=10)
        assert "example.com (attempt 2): active" in result.output

    def test_check_dns_status(self, app):
        runner = app.test_cli_runner()
        with patch("toogo.services.dns_verification_service.check_dns_status",
                   return_value={"total_checked": 3, "verified": 1, "results": []}):
            result = runner.invoke(args=["check-dns-status"])

        assert result.exit_code == 0
        assert "Verified 1/3 domains" in result.output
