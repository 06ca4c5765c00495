"""Domain setup service: activate a purchased custom domain for a store.

Given a domain_purchases row, runs an ordered list of steps:

    1. load purchase + tenant           (fatal if missing)
    2. vercel_dns_check                 (early exit as dns_pending if inactive)
    3. vercel_domain_setup              (attach root + www to the project)
    4. vercel_dns_records               (A @ per Vercel IP, CNAME www)
    5. www_redirect                     (advisory: failures become warnings)
    6. create_order                     (one paid setup-fee order)
    7. bootstrap_*                      (settings, category, product, onboarding)
    8. finalize                         (status + metadata on the purchase)

Every step is check-then-create, so the whole run can be repeated for the
same purchase (manual retry or the retry-pending-dns job). Steps after the
load never raise: failures are captured as step results and the next step
runs anyway. There is no transaction across steps; each step commits its
own work and a crash mid-run is repaired by running again.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from toogo.extensions import db
from toogo.models.audit import AuditEvent
from toogo.models.domain_purchase import DomainPurchase
from toogo.services import billing_service, bootstrap_service
from toogo.services.setup_status import (
    COMPLETED,
    ERROR,
    REASON_DNS_ZONE_PENDING,
    SKIPPED,
    STEP_DNS_CHECK,
    STEP_DNS_RECORDS,
    STEP_DOMAINS,
    STEP_ORDER,
    STEP_WWW_REDIRECT,
    WARNING,
    StepResult,
    build_completion_metadata,
    derive_final_status,
    summarize,
)
from toogo.services.vercel_client import ProviderOutcome, VercelClient, is_zone_active

logger = logging.getLogger(__name__)

# Vercel's recommended apex IPs (2024-2025).
VERCEL_A_RECORD_IPS = ["76.76.21.98", "76.76.21.142", "76.76.21.164"]
VERCEL_CNAME_TARGET = "cname.vercel-dns.com"
RECORD_TTL = 60

DNS_NOT_ACTIVE_REASON = "dns_not_active_yet"


class DomainPurchaseNotFound(LookupError):
    """The purchase (or its tenant) could not be loaded. Fatal."""


class StepFailed(Exception):
    """Raised inside a step to record an error with a message and details."""

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


@dataclass
class SetupSettings:
    hosting_api_token: str | None
    hosting_project_id: str | None
    hosting_team_id: str | None = None
    redirect_delay: float = 2.0

    @classmethod
    def from_config(cls, config):
        return cls(
            hosting_api_token=config.get("VERCEL_API_TOKEN"),
            hosting_project_id=config.get("VERCEL_PROJECT_ID"),
            hosting_team_id=config.get("VERCEL_TEAM_ID"),
            redirect_delay=config.get("DOMAIN_SETUP_REDIRECT_DELAY", 2.0),
        )


@dataclass
class SetupContext:
    purchase: DomainPurchase
    force_all: bool = False

    @property
    def tenant(self):
        return self.purchase.tenant

    @property
    def domain(self):
        return self.purchase.domain


class DomainSetupOrchestrator:
    """Runs the activation steps for one domain purchase per call to run()."""

    def __init__(self, settings, session, client=None, sleep=time.sleep):
        self.settings = settings
        self.session = session
        self.client = client or VercelClient(
            settings.hosting_api_token,
            settings.hosting_project_id,
            settings.hosting_team_id,
        )
        self.sleep = sleep

    def run(self, domain_purchase_id, force_all=False):
        """Execute the workflow and return the JSON-ready response payload.

        Raises DomainPurchaseNotFound when the purchase can't be loaded.
        """
        logger.info(f"[Complete Setup] Starting for domain purchase: {domain_purchase_id}")
        ctx = SetupContext(self._load(domain_purchase_id), force_all=force_all)
        domain = ctx.domain
        tenant_id = ctx.tenant.id
        logger.info(f"[Complete Setup] Found domain: {domain}, tenant: {tenant_id}")

        steps = [self._run_step(STEP_DNS_CHECK, self.check_dns_zone, ctx)]
        if steps[0].status == SKIPPED:
            self._mark_dns_pending(ctx, steps)
            return {
                "success": False,
                "reason": DNS_NOT_ACTIVE_REASON,
                "domain": domain,
                "steps": [s.to_dict() for s in steps],
            }

        for name, func, advisory in self._pipeline():
            steps.append(self._run_step(name, func, ctx, advisory=advisory))

        final_status = self._finalize(ctx, steps)
        summary = summarize(steps)
        logger.info(
            f"[Complete Setup] {domain} finished as {final_status} "
            f"({summary['errors']} errors, {summary['warnings']} warnings)"
        )
        return {
            "success": summary["errors"] == 0,
            "domain": domain,
            "tenant_id": tenant_id,
            "status": final_status,
            "steps": [s.to_dict() for s in steps],
            "summary": summary,
        }

    # ──────────────────────────────────────────────
    # Runner
    # ──────────────────────────────────────────────

    def _pipeline(self):
        """(name, step callable, advisory) for every step after the DNS gate."""
        steps = [
            (STEP_DOMAINS, self.attach_domains, False),
            (STEP_DNS_RECORDS, self.create_dns_records, False),
            (STEP_WWW_REDIRECT, self.configure_www_redirect, True),
            (STEP_ORDER, self.record_order, False),
        ]
        for name, seed in bootstrap_service.BOOTSTRAP_STEPS:
            steps.append((name, self._bootstrap_step(seed), False))
        return steps

    def _run_step(self, name, func, ctx, advisory=False):
        """Run one step; never raises. Advisory steps fail as warnings."""
        failed_status = WARNING if advisory else ERROR
        try:
            result = func(ctx)
        except StepFailed as e:
            result = StepResult(name, failed_status, e.message, e.details)
        except Exception as e:
            self.session.rollback()
            logger.exception(f"[Complete Setup] Unexpected error in {name}")
            result = StepResult(name, failed_status, f"{name} failed: {e}", {"error": str(e)})

        if result.status == ERROR:
            logger.error(f"[Complete Setup] {name}: {result.message}")
        elif result.status == WARNING:
            logger.warning(f"[Complete Setup] {name}: {result.message}")
        else:
            logger.info(f"[Complete Setup] {name}: {result.status}")
        return result

    def _load(self, domain_purchase_id):
        try:
            purchase = self.session.get(DomainPurchase, domain_purchase_id) if domain_purchase_id else None
            tenant = purchase.tenant if purchase is not None else None
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception(f"[Complete Setup] Could not load domain purchase {domain_purchase_id}")
            raise DomainPurchaseNotFound(
                f"Domain purchase could not be loaded: {domain_purchase_id} ({e})"
            ) from e
        if purchase is None or tenant is None:
            raise DomainPurchaseNotFound(f"Domain purchase not found: {domain_purchase_id}")
        return purchase

    # ──────────────────────────────────────────────
    # Steps
    # ──────────────────────────────────────────────

    def check_dns_zone(self, ctx):
        """Skipped (not error) when Vercel hasn't activated the zone yet."""
        result = self.client.get_domain(ctx.domain)
        if not result.succeeded:
            raise StepFailed(
                f"Error checking DNS: {result.describe()}",
                {"error": result.describe()},
            )

        info = result.data.get("domain", result.data)
        details = {
            "serviceType": info.get("serviceType"),
            "nameservers": info.get("nameservers"),
        }

        if not is_zone_active(result.data):
            details["verified"] = info.get("verified")
            details["next_action"] = "retry-pending-dns will re-run setup automatically"
            return StepResult(
                STEP_DNS_CHECK,
                SKIPPED,
                "Nameservers delegated, waiting for Vercel to activate the DNS zone",
                details,
            )
        return StepResult(STEP_DNS_CHECK, COMPLETED, "DNS zone active in Vercel", details)

    def attach_domains(self, ctx):
        domain = ctx.domain
        www = f"www.{domain}"

        root = self.client.add_project_domain(domain)
        if not root.succeeded:
            raise StepFailed(
                f"Error adding domain to Vercel: {root.describe()}",
                {
                    "error": root.describe(),
                    "note": "Domain can be added manually in the Vercel dashboard",
                },
            )

        www_result = self.client.add_project_domain(www)
        details = {
            "domain": root.outcome.value,
            "www": www_result.outcome.value,
            "vercel_project_id": self.settings.hosting_project_id,
        }
        if not www_result.succeeded:
            # The redirect step attaches www again; the root domain is what matters.
            details["www_error"] = www_result.describe()

        return StepResult(
            STEP_DOMAINS,
            COMPLETED,
            f"Domains added to Vercel: {domain} and {www}",
            details,
        )

    def create_dns_records(self, ctx):
        domain = ctx.domain
        created = []
        failed = {}

        for ip in VERCEL_A_RECORD_IPS:
            result = self.client.create_dns_record(domain, "A", "@", ip, ttl=RECORD_TTL)
            if result.outcome is ProviderOutcome.ZONE_INACTIVE:
                self._downgrade_zone_pending(ctx)
            if result.succeeded:
                created.append(ip)
            else:
                failed[ip] = result.describe()

        if not created:
            raise StepFailed("No A records could be created", {"failed": failed})

        cname = self.client.create_dns_record(
            domain, "CNAME", "www", VERCEL_CNAME_TARGET, ttl=RECORD_TTL
        )
        if cname.outcome is ProviderOutcome.ZONE_INACTIVE:
            self._downgrade_zone_pending(ctx)
        if not cname.succeeded:
            raise StepFailed(
                f"Failed to create CNAME record: {cname.describe()}",
                {"error": cname.describe(), "a_records": created},
            )

        details = {
            "a_records": [
                {"type": "A", "name": "@", "value": ip, "ttl": RECORD_TTL}
                for ip in created
            ],
            "cname_record": {
                "type": "CNAME",
                "name": "www",
                "value": VERCEL_CNAME_TARGET,
                "ttl": RECORD_TTL,
            },
        }
        if failed:
            details["failed_a_records"] = failed

        return StepResult(
            STEP_DNS_RECORDS,
            COMPLETED,
            f"DNS records created: {len(created)}/{len(VERCEL_A_RECORD_IPS)} A @, "
            f"CNAME www -> {VERCEL_CNAME_TARGET}",
            details,
        )

    def configure_www_redirect(self, ctx):
        """301 www.<domain> -> https://<domain>. Runs as an advisory step."""
        www = f"www.{ctx.domain}"
        target = f"https://{ctx.domain}"

        if self.settings.redirect_delay:
            logger.info(f"[Complete Setup] Waiting {self.settings.redirect_delay}s for domain propagation...")
            self.sleep(self.settings.redirect_delay)

        result = self.client.add_project_domain(www, redirect=target, redirect_status_code=301)
        if result.outcome is ProviderOutcome.ALREADY_EXISTS:
            result = self.client.update_project_domain(
                www, redirect=target, redirectStatusCode=301
            )

        if not result.succeeded:
            raise StepFailed(
                "Could not configure the automatic www redirect",
                {
                    "error": result.describe(),
                    "note": "The redirect can be configured manually in Vercel",
                },
            )

        return StepResult(
            STEP_WWW_REDIRECT,
            COMPLETED,
            f"Redirect configured: {www} -> {ctx.domain} (301)",
            {"source": www, "destination": target, "statusCode": 301},
        )

    def record_order(self, ctx):
        return billing_service.ensure_setup_order(
            self.session, ctx.tenant, ctx.purchase.id, force_all=ctx.force_all
        )

    def _bootstrap_step(self, seed):
        def step(ctx):
            return seed(self.session, ctx.tenant.id)
        return step

    # ──────────────────────────────────────────────
    # Status writes
    # ──────────────────────────────────────────────

    def _downgrade_zone_pending(self, ctx):
        """Vercel answered invalid_zone: mark dns_pending and abort the step."""
        purchase = ctx.purchase
        metadata = dict(purchase.metadata_ or {})
        metadata.update({
            "error_code": "invalid_zone",
            "last_attempt": _now().isoformat(),
            "message": "DNS zone not active yet. The retry job will try again.",
        })
        purchase.status = "dns_pending"
        purchase.metadata_ = metadata
        self.session.commit()

        raise StepFailed(
            "DNS zone not active yet (invalid_zone)",
            {"reason": REASON_DNS_ZONE_PENDING, "error_code": "invalid_zone"},
        )

    def _mark_dns_pending(self, ctx, steps):
        gate = steps[0].details or {}
        purchase = ctx.purchase
        metadata = dict(purchase.metadata_ or {})
        metadata.update({
            "dns_status": "ns_delegated_waiting_activation",
            "last_check": _now().isoformat(),
            "service_type": gate.get("serviceType"),
            "detected_nameservers": gate.get("nameservers"),
            "setup_steps": [s.to_dict() for s in steps],
        })
        purchase.status = "dns_pending"
        purchase.metadata_ = metadata
        self.session.commit()
        logger.info(f"[Complete Setup] DNS zone not active yet for {ctx.domain}, marked dns_pending")

    def _finalize(self, ctx, steps):
        purchase = ctx.purchase
        final_status = derive_final_status(steps)

        purchase.metadata_ = build_completion_metadata(purchase.metadata_, steps, _now())
        purchase.status = final_status

        self.session.add(AuditEvent(
            tenant_id=ctx.tenant.id,
            action="domain_setup.finished",
            metadata_={
                "domain_purchase_id": purchase.id,
                "domain": purchase.domain,
                "status": final_status,
                "errors": [s.step for s in steps if s.status == ERROR],
                "force_all": ctx.force_all,
            },
        ))
        self.session.commit()
        return final_status


def _now():
    return datetime.now(timezone.utc)


def run_domain_setup(domain_purchase_id, force_all=False, client=None):
    """Run the workflow with settings from the current app config."""
    orchestrator = DomainSetupOrchestrator(
        SetupSettings.from_config(current_app.config),
        db.session,
        client=client,
    )
    return orchestrator.run(domain_purchase_id, force_all=force_all)
