"""Step outcomes and the status reducer for the domain setup workflow.

Everything here is pure (no DB, no HTTP) so the status rules can be tested
in isolation from the orchestrator.
"""

from dataclasses import dataclass, field

COMPLETED = "completed"
SKIPPED = "skipped"
WARNING = "warning"
ERROR = "error"

# Step names, in execution order.
STEP_DNS_CHECK = "vercel_dns_check"
STEP_DOMAINS = "vercel_domain_setup"
STEP_DNS_RECORDS = "vercel_dns_records"
STEP_WWW_REDIRECT = "www_redirect"
STEP_ORDER = "create_order"
STEP_SETTINGS = "bootstrap_settings"
STEP_CATEGORY = "bootstrap_category"
STEP_PRODUCT = "bootstrap_product"
STEP_ONBOARDING = "bootstrap_onboarding"

# details["reason"] on an error step caused by an inactive DNS zone.
REASON_DNS_ZONE_PENDING = "dns_zone_pending"


@dataclass
class StepResult:
    step: str
    status: str
    message: str
    details: dict | None = field(default=None)

    @property
    def is_dns_pending(self):
        if self.step == STEP_DNS_CHECK and self.status == SKIPPED:
            return True
        return (
            self.status == ERROR
            and (self.details or {}).get("reason") == REASON_DNS_ZONE_PENDING
        )

    def to_dict(self):
        data = {"step": self.step, "status": self.status, "message": self.message}
        if self.details is not None:
            data["details"] = self.details
        return data


def derive_final_status(steps):
    """Fold step outcomes into a domain purchase status.

    active       no step errored
    dns_pending  errors, but at least one is the DNS-zone-pending case
    failed       any other error
    """
    errors = [s for s in steps if s.status == ERROR]
    if not errors:
        return "active"
    if any(s.is_dns_pending for s in steps):
        return "dns_pending"
    return "failed"


def build_completion_metadata(current, steps, now):
    """Return the new metadata dict for a finished run.

    Existing keys are kept; setup_steps is replaced; this run's errors are
    prepended to error_history (most recent first); retry_count only grows
    on runs with errors.
    """
    current = dict(current or {})
    timestamp = now.isoformat()

    existing_history = current.get("error_history")
    if not isinstance(existing_history, list):
        existing_history = []

    new_errors = [
        {"timestamp": timestamp, "error": s.message, "step": s.step}
        for s in steps
        if s.status == ERROR
    ]
    has_errors = bool(new_errors)
    retry_count = current.get("retry_count") or 0

    current.update({
        "setup_completed_at": None if has_errors else timestamp,
        "setup_steps": [s.to_dict() for s in steps],
        "error_history": new_errors + existing_history,
        "retry_count": retry_count + 1 if has_errors else retry_count,
        "last_error": new_errors[0]["error"] if has_errors else None,
    })
    return current


def summarize(steps):
    counts = {
        status: sum(1 for s in steps if s.status == status)
        for status in (COMPLETED, SKIPPED, WARNING, ERROR)
    }
    return {
        "total": len(steps),
        "completed": counts[COMPLETED],
        "skipped": counts[SKIPPED],
        "warnings": counts[WARNING],
        "errors": counts[ERROR],
        "all_completed": all(s.status in (COMPLETED, SKIPPED) for s in steps),
    }
