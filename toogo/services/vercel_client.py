"""Vercel client: project domains and DNS records for custom store domains.

Wraps the Vercel REST API behind semantic outcomes so callers never
pattern-match provider error payloads:

    OK / CREATED       the call did what was asked
    ALREADY_EXISTS     the resource is already there (treated as success)
    ZONE_INACTIVE      Vercel has not activated the DNS zone yet
    TRANSIENT_FAILURE  rate limit, 5xx, timeout or network error
    PERMANENT_FAILURE  any other 4xx

Endpoints used:
    POST  /v10/projects/{project}/domains         attach a domain
    GET   /v9/domains/{domain}                    domain / zone info
    POST  /v2/domains/{domain}/records            create a DNS record
    PATCH /v9/projects/{project}/domains/{name}   update a project domain
"""

import enum
import logging
from dataclasses import dataclass, field

import requests

logger = logging.getLogger(__name__)

VERCEL_API_URL = "https://api.vercel.com"
REQUEST_TIMEOUT = 15  # seconds

ALREADY_EXISTS_CODES = {
    "domain_already_in_use",
    "domain_already_exists",
    "record_already_exists",
}
ZONE_INACTIVE_CODES = {"invalid_zone"}


class HostingNotConfigured(RuntimeError):
    """Raised when the API token or project id is missing."""


class ProviderOutcome(enum.Enum):
    OK = "ok"
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    ZONE_INACTIVE = "zone_inactive"
    TRANSIENT_FAILURE = "transient_failure"
    PERMANENT_FAILURE = "permanent_failure"


@dataclass
class ProviderResult:
    outcome: ProviderOutcome
    status_code: int | None = None
    data: dict = field(default_factory=dict)
    error_code: str | None = None
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome in (
            ProviderOutcome.OK,
            ProviderOutcome.CREATED,
            ProviderOutcome.ALREADY_EXISTS,
        )

    def describe(self) -> str:
        """Short human-readable summary for step messages."""
        if self.succeeded:
            return self.outcome.value
        parts = [self.outcome.value]
        if self.status_code:
            parts.append(f"HTTP {self.status_code}")
        if self.error_code:
            parts.append(self.error_code)
        if self.message:
            parts.append(self.message)
        return ": ".join(parts)


def classify_response(status_code: int, body: dict, created: bool = False) -> ProviderResult:
    """Map an HTTP status + Vercel JSON body to a ProviderResult."""
    if 200 <= status_code < 300:
        outcome = ProviderOutcome.CREATED if created else ProviderOutcome.OK
        return ProviderResult(outcome, status_code, body)

    error = body.get("error") if isinstance(body, dict) else None
    error = error if isinstance(error, dict) else {}
    code = error.get("code")
    message = error.get("message")

    if code in ALREADY_EXISTS_CODES:
        outcome = ProviderOutcome.ALREADY_EXISTS
    elif code in ZONE_INACTIVE_CODES:
        outcome = ProviderOutcome.ZONE_INACTIVE
    elif status_code == 429 or status_code >= 500:
        outcome = ProviderOutcome.TRANSIENT_FAILURE
    else:
        outcome = ProviderOutcome.PERMANENT_FAILURE

    return ProviderResult(outcome, status_code, body, code, message)


def is_zone_active(domain_info: dict) -> bool:
    """True when Vercel is authoritative for the domain's DNS zone.

    Any of: serviceType "zeit.world", a vercel-dns.com nameserver, or
    verified=True. GET /v9/domains nests the fields under "domain".
    """
    info = domain_info.get("domain", domain_info) if domain_info else {}
    nameservers = info.get("nameservers") or []
    return (
        info.get("serviceType") == "zeit.world"
        or any("vercel-dns.com" in ns for ns in nameservers)
        or info.get("verified") is True
    )


class VercelClient:
    """Thin, stateless wrapper around the Vercel REST API."""

    def __init__(self, token, project_id, team_id=None, base_url=VERCEL_API_URL,
                 session=None):
        self.token = token
        self.project_id = project_id
        self.team_id = team_id
        self.base_url = base_url.rstrip("/")
        self.http = session or requests.Session()

    # ──────────────────────────────────────────────
    # Project domains
    # ──────────────────────────────────────────────

    def add_project_domain(self, name, redirect=None, redirect_status_code=None):
        """Attach a domain to the project, optionally as a redirect."""
        payload = {"name": name}
        if redirect:
            payload["redirect"] = redirect
            payload["redirectStatusCode"] = redirect_status_code or 301
        return self._request(
            "POST",
            f"/v10/projects/{self._project()}/domains",
            json=payload,
            created=True,
        )

    def update_project_domain(self, name, **fields):
        """PATCH an attached domain (e.g. redirect, redirectStatusCode)."""
        return self._request(
            "PATCH",
            f"/v9/projects/{self._project()}/domains/{name}",
            json=fields,
        )

    # ──────────────────────────────────────────────
    # Domains & DNS
    # ──────────────────────────────────────────────

    def get_domain(self, domain):
        return self._request("GET", f"/v9/domains/{domain}")

    def create_dns_record(self, domain, record_type, name, value, ttl=60):
        return self._request(
            "POST",
            f"/v2/domains/{domain}/records",
            json={"type": record_type, "name": name, "value": value, "ttl": ttl},
            created=True,
        )

    # ──────────────────────────────────────────────
    # Internals
    # ──────────────────────────────────────────────

    def _project(self):
        if not self.project_id:
            raise HostingNotConfigured("VERCEL_PROJECT_ID not configured")
        return self.project_id

    def _request(self, method, path, json=None, created=False):
        if not self.token:
            raise HostingNotConfigured("VERCEL_API_TOKEN not configured")

        params = {"teamId": self.team_id} if self.team_id else None
        headers = {"Authorization": f"Bearer {self.token}"}

        try:
            resp = self.http.request(
                method,
                f"{self.base_url}{path}",
                params=params,
                json=json,
                headers=headers,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            logger.warning(f"Vercel {method} {path} failed: {e}")
            return ProviderResult(
                ProviderOutcome.TRANSIENT_FAILURE, message=str(e)
            )

        try:
            body = resp.json()
        except ValueError:
            body = {}

        result = classify_response(resp.status_code, body, created=created)
        if not result.succeeded:
            logger.warning(f"Vercel {method} {path} -> {result.describe()}")
        return result
