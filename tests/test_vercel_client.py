"""Tests for the Vercel client and its outcome classification.

Covers:
- Request shape (URL, bearer token, teamId scoping, payload)
- Provider error codes mapped to semantic outcomes
- Network errors and 5xx as transient failures
- Missing configuration
- DNS zone activity detection
"""

from unittest.mock import MagicMock

import pytest
import requests

from toogo.services.vercel_client import (
    HostingNotConfigured,
    ProviderOutcome,
    VercelClient,
    classify_response,
    is_zone_active,
)


def _response(status_code, body):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = body
    return resp


def _client(session, team_id="team_abc"):
    return VercelClient("tok_123", "prj_456", team_id, session=session)


class TestRequests:

    def test_add_project_domain_request_shape(self):
        session = MagicMock()
        session.request.return_value = _response(200, {"name": "example.com"})

        result = _client(session).add_project_domain("example.com")

        assert result.outcome is ProviderOutcome.CREATED
        method, url = session.request.call_args.args
        kwargs = session.request.call_args.kwargs
        assert method == "POST"
        assert url == "https://api.vercel.com/v10/projects/prj_456/domains"
        assert kwargs["params"] == {"teamId": "team_abc"}
        assert kwargs["headers"]["Authorization"] == "Bearer tok_123"
        assert kwargs["json"] == {"name": "example.com"}

    def test_redirect_payload(self):
        session = MagicMock()
        session.request.return_value = _response(200, {})

        _client(session).add_project_domain(
            "www.example.com", redirect="https://example.com", redirect_status_code=301
        )

        assert session.request.call_args.kwargs["json"] == {
            "name": "www.example.com",
            "redirect": "https://example.com",
            "redirectStatusCode": 301,
        }

    def test_no_team_id_sends_no_params(self):
        session = MagicMock()
        session.request.return_value = _response(200, {})

        _client(session, team_id=None).get_domain("example.com")

        assert session.request.call_args.kwargs["params"] is None
        assert session.request.call_args.args[1] == "https://api.vercel.com/v9/domains/example.com"

    def test_create_dns_record_payload(self):
        session = MagicMock()
        session.request.return_value = _response(200, {"uid": "rec_1"})

        result = _client(session).create_dns_record("example.com", "A", "@", "76.76.21.98")

        assert result.outcome is ProviderOutcome.CREATED
        assert session.request.call_args.args[1] == (
            "https://api.vercel.com/v2/domains/example.com/records"
        )
        assert session.request.call_args.kwargs["json"] == {
            "type": "A", "name": "@", "value": "76.76.21.98", "ttl": 60,
        }

    def test_update_project_domain_is_patch(self):
        session = MagicMock()
        session.request.return_value = _response(200, {})

        result = _client(session).update_project_domain(
            "www.example.com", redirect="https://example.com", redirectStatusCode=301
        )

        assert result.outcome is ProviderOutcome.OK
        method, url = session.request.call_args.args
        assert method == "PATCH"
        assert url == "https://api.vercel.com/v9/projects/prj_456/domains/www.example.com"

    def test_network_error_is_transient(self):
        session = MagicMock()
        session.request.side_effect = requests.exceptions.ConnectTimeout("timed out")

        result = _client(session).get_domain("example.com")

        assert result.outcome is ProviderOutcome.TRANSIENT_FAILURE
        assert not result.succeeded
        assert "timed out" in result.message

    def test_non_json_body(self):
        session = MagicMock()
        resp = _response(502, None)
        resp.json.side_effect = ValueError("no json")
        session.request.return_value = resp

        result = _client(session).get_domain("example.com")

        assert result.outcome is ProviderOutcome.TRANSIENT_FAILURE
        assert result.status_code == 502

    def test_missing_token_raises(self):
        client = VercelClient(None, "prj_456", session=MagicMock())
        with pytest.raises(HostingNotConfigured):
            client.get_domain("example.com")

    def test_missing_project_raises(self):
        client = VercelClient("tok", None, session=MagicMock())
        with pytest.raises(HostingNotConfigured):
            client.add_project_domain("example.com")


class TestClassifyResponse:

    @pytest.mark.parametrize("code", [
        "domain_already_in_use",
        "domain_already_exists",
        "record_already_exists",
    ])
    def test_already_exists_codes(self, code):
        result = classify_response(409, {"error": {"code": code, "message": "dup"}})
        assert result.outcome is ProviderOutcome.ALREADY_EXISTS
        assert result.succeeded

    def test_invalid_zone(self):
        result = classify_response(400, {"error": {"code": "invalid_zone"}})
        assert result.outcome is ProviderOutcome.ZONE_INACTIVE
        assert not result.succeeded

    def test_rate_limit_is_transient(self):
        result = classify_response(429, {"error": {"code": "rate_limited"}})
        assert result.outcome is ProviderOutcome.TRANSIENT_FAILURE

    def test_other_4xx_is_permanent(self):
        result = classify_response(403, {"error": {"code": "forbidden", "message": "Not allowed"}})
        assert result.outcome is ProviderOutcome.PERMANENT_FAILURE
        assert result.error_code == "forbidden"
        assert result.describe() == "permanent_failure: HTTP 403: forbidden: Not allowed"

    def test_success_describe(self):
        assert classify_response(200, {}).describe() == "ok"


class TestIsZoneActive:

    def test_service_type(self):
        assert is_zone_active({"serviceType": "zeit.world"})

    def test_vercel_nameservers(self):
        assert is_zone_active({"nameservers": ["ns1.vercel-dns.com"], "verified": False})

    def test_verified_flag(self):
        assert is_zone_active({"serviceType": "external", "verified": True})

    def test_nested_domain_payload(self):
        assert is_zone_active({"domain": {"serviceType": "zeit.world"}})

    def test_inactive(self):
        assert not is_zone_active({
            "serviceType": "external",
            "nameservers": ["ns1.registrar-servers.com"],
            "verified": False,
        })

    def test_empty(self):
        assert not is_zone_active({})
