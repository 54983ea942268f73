# ========================================
# jobboard/lifecycle/jobs.py
# ========================================
"""Job posting moderation lifecycle.

draft -> pending-approval -> active | rejected, active -> closed | filled,
closed | filled -> active. Every operation works on a copy of the job and
returns the new version; a failed call leaves the caller's job untouched.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError as PydanticValidationError

from jobboard.models.base import as_naive_utc, utcnow
from jobboard.models.job import JobPosting

from .actors import Actor, require_admin, require_owner
from .errors import Conflict, InvalidTransition, Unauthorized, ValidationError
from .transitions import JOB_TABLE

MAX_MODERATION_NOTES = 1000
CLOSE_REASONS = ("closed", "filled")

# Fields a recruiter can never write directly
PROTECTED_FIELDS = frozenset({
    "id",
    "version",
    "recruiter_id",
    "company_id",
    "status",
    "views",
    "application_count",
    "moderation_notes",
    "moderated_by",
    "moderated_at",
    "is_featured",
    "posted_at",
    "closed_at",
    "created_at",
    "updated_at",
})


# ===========================
# HELPERS
# ===========================

def _build(data: Dict[str, Any]) -> JobPosting:
    try:
        return JobPosting.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


def _stamp(job: JobPosting, now: datetime) -> None:
    """posted_at on first activation, closed_at on first close or fill."""
    if job.status == "active" and job.posted_at is None:
        job.posted_at = now
    if job.status in CLOSE_REASONS and job.closed_at is None:
        job.closed_at = now


def _check_deadline(deadline: Optional[datetime], now: datetime) -> None:
    if deadline is not None and as_naive_utc(deadline) <= now:
        raise ValidationError("Application deadline must be in the future")


def _transition(job: JobPosting, sources: Iterable[str], target: str, now: datetime) -> JobPosting:
    sources = tuple(sources)
    if job.status not in sources:
        raise InvalidTransition(
            "job",
            job.status,
            target,
            f"Cannot move job from '{job.status}' to '{target}'; "
            f"only {' or '.join(sources)} jobs allow it",
        )
    JOB_TABLE.ensure(job.status, target)

    updated = job.model_copy(deep=True)
    updated.status = target
    updated.updated_at = now
    _stamp(updated, now)
    return updated


# ===========================
# CREATION & EDITING
# ===========================

def create_job(
    data: Dict[str, Any],
    recruiter_id: str,
    company_id: str,
    recruiter_verified: bool = True,
    now: Optional[datetime] = None,
) -> JobPosting:
    """New posting in ``draft``, owned by a verified recruiter."""
    now = now or utcnow()
    if not recruiter_verified:
        raise Unauthorized("Your recruiter account must be verified before posting jobs")

    fields = {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}
    _check_deadline(fields.get("application_deadline"), now)

    return _build({
        **fields,
        "recruiter_id": recruiter_id,
        "company_id": company_id,
        "status": "draft",
        "created_at": now,
        "updated_at": now,
    })


def update_job(job: JobPosting, changes: Dict[str, Any], actor: Actor, now: Optional[datetime] = None) -> JobPosting:
    """Owner edit. A draft may be sent for approval by setting its status."""
    now = now or utcnow()
    require_owner(actor, job.recruiter_id, "update this job")

    requested_status = changes.get("status")
    current = job
    if requested_status and requested_status != job.status:
        if job.status == "draft" and requested_status == "pending-approval":
            current = submit_for_approval(job, actor, now=now)
        else:
            raise InvalidTransition("job", job.status, requested_status)

    fields = {k: v for k, v in changes.items() if k not in PROTECTED_FIELDS}
    if not fields:
        return current
    if "application_deadline" in fields:
        _check_deadline(fields["application_deadline"], now)

    data = current.model_dump()
    data.update(fields)
    data["updated_at"] = now
    return _build(data)


# ===========================
# MODERATION
# ===========================

def submit_for_approval(job: JobPosting, actor: Actor, now: Optional[datetime] = None) -> JobPosting:
    require_owner(actor, job.recruiter_id, "submit this job for approval")
    return _transition(job, ("draft",), "pending-approval", now or utcnow())


def approve(job: JobPosting, actor: Actor, now: Optional[datetime] = None) -> JobPosting:
    now = now or utcnow()
    require_admin(actor, "approve jobs")
    updated = _transition(job, ("pending-approval",), "active", now)
    updated.moderated_by = actor.actor_id
    updated.moderated_at = now
    return updated


def reject(job: JobPosting, actor: Actor, notes: str, now: Optional[datetime] = None) -> JobPosting:
    now = now or utcnow()
    require_admin(actor, "reject jobs")
    notes = (notes or "").strip()
    if not notes:
        raise ValidationError("Moderation notes are required when rejecting a job")
    if len(notes) > MAX_MODERATION_NOTES:
        raise ValidationError(f"Moderation notes cannot exceed {MAX_MODERATION_NOTES} characters")

    updated = _transition(job, ("pending-approval",), "rejected", now)
    updated.moderation_notes = notes
    updated.moderated_by = actor.actor_id
    updated.moderated_at = now
    return updated


# ===========================
# OWNER LIFECYCLE
# ===========================

def close(job: JobPosting, actor: Actor, reason: str = "closed", now: Optional[datetime] = None) -> JobPosting:
    """Stop accepting applications; ``reason`` picks closed or filled.

    A closed job is never featured, and reactivating does not restore it.
    """
    if reason not in CLOSE_REASONS:
        raise ValidationError(f"Close reason must be one of {', '.join(CLOSE_REASONS)}", reason=reason)
    require_owner(actor, job.recruiter_id, "close this job", allow_admin=True)
    updated = _transition(job, ("active", "pending-approval"), reason, now or utcnow())
    updated.is_featured = False
    return updated


def mark_filled(job: JobPosting, actor: Actor, now: Optional[datetime] = None) -> JobPosting:
    return close(job, actor, "filled", now=now)


def reactivate(job: JobPosting, actor: Actor, now: Optional[datetime] = None) -> JobPosting:
    require_owner(actor, job.recruiter_id, "reactivate this job")
    updated = _transition(job, ("closed", "filled"), "active", now or utcnow())
    updated.closed_at = None
    return updated


def toggle_featured(job: JobPosting, actor: Actor, now: Optional[datetime] = None) -> JobPosting:
    require_admin(actor, "feature jobs")
    if job.status != "active":
        raise InvalidTransition(
            "job", job.status, "featured", f"Only active jobs can be featured (status is '{job.status}')"
        )
    updated = job.model_copy(deep=True)
    updated.is_featured = not job.is_featured
    updated.updated_at = now or utcnow()
    return updated


def ensure_deletable(job: JobPosting, actor: Actor, application_count: int) -> None:
    """Jobs that received applications are closed, never deleted."""
    require_owner(actor, job.recruiter_id, "delete this job", allow_admin=True)
    if application_count > 0:
        raise Conflict(
            "Cannot delete job with existing applications. Close it instead.",
            job_id=job.id,
            application_count=application_count,
        )
