"""Tests for the /api/domains endpoints.

Covers:
- Bearer-token auth (missing / wrong / correct)
- Request validation
- Fatal vs. non-fatal responses from complete-setup
- Purchase status endpoint
- CORS preflight
"""

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from toogo.extensions import db
from toogo.services.vercel_client import ProviderOutcome

URL = "/api/domains/complete-setup"


class TestAuth:

    def test_missing_header(self, client, seed_data):
        resp = client.post(URL, json={"domainPurchaseId": seed_data["purchase_id"]})
        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Unauthorized"}

    def test_wrong_key(self, client, seed_data):
        resp = client.post(
            URL,
            json={"domainPurchaseId": seed_data["purchase_id"]},
            headers={"Authorization": "Bearer not-the-key"},
        )
        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Invalid API key"}

    def test_non_bearer_scheme(self, client, seed_data):
        resp = client.post(
            URL,
            json={"domainPurchaseId": seed_data["purchase_id"]},
            headers={"Authorization": "Basic c2V0dXA6a2V5"},
        )
        assert resp.status_code == 401

    def test_status_endpoint_requires_key(self, client, seed_data):
        resp = client.get(f"/api/domains/purchases/{seed_data['purchase_id']}")
        assert resp.status_code == 401


class TestCompleteSetup:

    def test_missing_id(self, client, auth_headers):
        resp = client.post(URL, json={}, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "domainPurchaseId is required"}

    def test_non_string_id(self, client, auth_headers):
        resp = client.post(URL, json={"domainPurchaseId": 42}, headers=auth_headers)
        assert resp.status_code == 400

    def test_no_json_body(self, client, auth_headers):
        resp = client.post(URL, data="not json", headers=auth_headers)
        assert resp.status_code == 400

    def test_unknown_purchase_is_500(self, client, auth_headers, vercel):
        with patch("toogo.services.domain_setup.VercelClient", return_value=vercel):
            resp = client.post(
                URL, json={"domainPurchaseId": "does-not-exist"}, headers=auth_headers
            )

        assert resp.status_code == 500
        body = resp.get_json()
        assert "does-not-exist" in body["error"]
        assert "DomainPurchaseNotFound" in body["details"]

    def test_success(self, client, auth_headers, seed_data, vercel):
        with patch("toogo.services.domain_setup.VercelClient", return_value=vercel):
            resp = client.post(
                URL,
                json={"domainPurchaseId": seed_data["purchase_id"]},
                headers=auth_headers,
            )

        assert resp.status_code == 200
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        body = resp.get_json()
        assert body["success"] is True
        assert body["status"] == "active"
        assert body["domain"] == "example.com"
        assert len(body["steps"]) == 9

    def test_step_errors_still_200(self, client, auth_headers, seed_data, vercel):
        vercel.fail("add_project_domain", "example.com",
                    ProviderOutcome.PERMANENT_FAILURE, "forbidden")

        with patch("toogo.services.domain_setup.VercelClient", return_value=vercel):
            resp = client.post(
                URL,
                json={"domainPurchaseId": seed_data["purchase_id"]},
                headers=auth_headers,
            )

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["success"] is False
        assert body["status"] == "failed"
        assert body["summary"]["errors"] == 1

    def test_dns_not_active_is_200(self, client, auth_headers, seed_data, vercel):
        vercel.domain_info = {"serviceType": "external", "nameservers": [], "verified": False}

        with patch("toogo.services.domain_setup.VercelClient", return_value=vercel):
            resp = client.post(
                URL,
                json={"domainPurchaseId": seed_data["purchase_id"]},
                headers=auth_headers,
            )

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["success"] is False
        assert body["reason"] == "dns_not_active_yet"

    def test_force_all_forwarded(self, client, auth_headers, seed_data):
        with patch("toogo.blueprints.domains.run_domain_setup",
                   return_value={"success": True, "steps": []}) as mock_run:
            resp = client.post(
                URL,
                json={"domainPurchaseId": seed_data["purchase_id"], "forceAll": True},
                headers=auth_headers,
            )

        assert resp.status_code == 200
        mock_run.assert_called_once_with(seed_data["purchase_id"], force_all=True)

    def test_force_all_requires_json_boolean(self, client, auth_headers, seed_data):
        with patch("toogo.blueprints.domains.run_domain_setup",
                   return_value={"success": True, "steps": []}) as mock_run:
            resp = client.post(
                URL,
                json={"domainPurchaseId": seed_data["purchase_id"], "forceAll": "false"},
                headers=auth_headers,
            )

        assert resp.status_code == 200
        mock_run.assert_called_once_with(seed_data["purchase_id"], force_all=False)

    def test_database_error_on_load_is_500_with_details(self, client, auth_headers, seed_data, vercel):
        error = OperationalError("SELECT domain_purchases", {}, Exception("database is down"))

        with patch("toogo.services.domain_setup.VercelClient", return_value=vercel), \
                patch.object(db.session, "get", side_effect=error):
            resp = client.post(
                URL,
                json={"domainPurchaseId": seed_data["purchase_id"]},
                headers=auth_headers,
            )

        assert resp.status_code == 500
        body = resp.get_json()
        assert "could not be loaded" in body["error"]
        assert "DomainPurchaseNotFound" in body["details"]
        assert vercel.calls == []


class TestPurchaseStatus:

    def test_returns_purchase(self, client, auth_headers, seed_data, vercel):
        with patch("toogo.services.domain_setup.VercelClient", return_value=vercel):
            client.post(
                URL,
                json={"domainPurchaseId": seed_data["purchase_id"]},
                headers=auth_headers,
            )

        resp = client.get(
            f"/api/domains/purchases/{seed_data['purchase_id']}", headers=auth_headers
        )

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["domain"] == "example.com"
        assert body["status"] == "active"
        assert body["dns_verified"] is False
        assert body["dns_verified_at"] is None
        assert body["metadata"]["retry_count"] == 0

    def test_unknown_purchase(self, client, auth_headers):
        resp = client.get("/api/domains/purchases/nope", headers=auth_headers)
        assert resp.status_code == 404


class TestPreflight:

    def test_options(self, client):
        resp = client.options(URL)
        assert resp.status_code == 204
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert "authorization" in resp.headers["Access-Control-Allow-Headers"]
