# ========================================
# jobboard/lifecycle/applications.py
# ========================================
"""Application hiring pipeline.

Status edges come from ``APPLICATION_TABLE``. Every successful status change
appends exactly one ``status_history`` entry, so the history length is always
the number of transitions plus the initial ``submitted`` entry.
"""

from collections import Counter
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from jobboard.models.application import (
    APPLICATION_STATUSES,
    WITHDRAWABLE_STATUSES,
    Application,
    InterviewDetails,
    RecruiterNote,
    StatusHistoryEntry,
)
from jobboard.models.base import as_naive_utc, utcnow
from jobboard.models.job import JobPosting

from .actors import Actor, require_owner
from .errors import Conflict, InvalidTransition, Unauthorized, ValidationError
from .transitions import APPLICATION_TABLE

MAX_STATUS_NOTES = 500
MAX_NOTE_LENGTH = 1000
INTERVIEW_STATUSES = ("shortlisted", "interviewing")


def _build(data: Dict[str, Any]) -> Application:
    try:
        return Application.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


def _require_recruiter_side(app: Application, actor: Actor, action: str) -> None:
    require_owner(actor, app.recruiter_id, action, allow_admin=True)


def _append_transition(app: Application, new_status: str, actor_id: str, notes: str, now: datetime) -> Application:
    APPLICATION_TABLE.ensure(app.status, new_status)
    notes = (notes or "").strip()
    if len(notes) > MAX_STATUS_NOTES:
        raise ValidationError(f"Status notes cannot exceed {MAX_STATUS_NOTES} characters")

    updated = app.model_copy(deep=True)
    updated.status = new_status
    updated.status_history.append(
        StatusHistoryEntry(status=new_status, changed_by=actor_id, changed_at=now, notes=notes)
    )
    updated.last_updated = now
    return updated


# ===========================
# CREATION
# ===========================

def apply(
    job: JobPosting,
    seeker: Actor,
    profile_complete: bool,
    already_applied: bool = False,
    cover_letter: Optional[str] = None,
    screening_answers: Optional[List[Dict[str, Any]]] = None,
    resume_used: Optional[Dict[str, Any]] = None,
    now: Optional[datetime] = None,
) -> Application:
    """Build a new ``submitted`` application of ``seeker`` against ``job``."""
    now = now or utcnow()

    if not job.is_accepting_applications:
        raise Conflict(
            f"This job is not accepting applications (status: {job.status})",
            job_id=job.id,
            job_status=job.status,
        )
    if seeker.owns(job.recruiter_id):
        raise Unauthorized("You cannot apply to your own job listing")
    if already_applied:
        raise Conflict("You have already applied to this job", job_id=job.id)
    if not profile_complete:
        raise ValidationError("Please complete your job seeker profile before applying")

    return _build({
        "job_id": job.id,
        "jobseeker_id": seeker.actor_id,
        "recruiter_id": job.recruiter_id,
        "cover_letter": cover_letter,
        "screening_answers": screening_answers or [],
        "resume_used": resume_used,
        "status": "submitted",
        "status_history": [{
            "status": "submitted",
            "changed_by": seeker.actor_id,
            "changed_at": now,
            "notes": "Application submitted",
        }],
        "applied_at": now,
        "last_updated": now,
    })


# ===========================
# STATUS CHANGES
# ===========================

def update_status(
    app: Application,
    new_status: str,
    actor: Actor,
    notes: str = "",
    now: Optional[datetime] = None,
) -> Application:
    """Move ``app`` along one edge of the pipeline.

    The owning recruiter (or an admin) drives the forward edges; the
    applicant may only withdraw.
    """
    now = now or utcnow()
    if new_status not in APPLICATION_STATUSES:
        raise InvalidTransition("application", app.status, new_status)

    if new_status == "withdrawn" and actor.owns(app.jobseeker_id):
        return withdraw(app, actor, now=now)
    if actor.owns(app.jobseeker_id) and not actor.owns(app.recruiter_id):
        raise Unauthorized("Applicants can only withdraw their application")
    _require_recruiter_side(app, actor, "update this application")
    if new_status == "withdrawn":
        raise Unauthorized("Only the applicant can withdraw an application")

    return _append_transition(app, new_status, actor.actor_id, notes, now)


def withdraw(app: Application, actor: Actor, now: Optional[datetime] = None) -> Application:
    require_owner(actor, app.jobseeker_id, "withdraw this application")
    if app.status not in WITHDRAWABLE_STATUSES:
        raise InvalidTransition(
            "application",
            app.status,
            "withdrawn",
            "Application can only be withdrawn if status is submitted or reviewed",
        )
    return _append_transition(app, "withdrawn", actor.actor_id, "Withdrawn by applicant", now or utcnow())


def review(app: Application, actor: Actor, notes: str = "", now: Optional[datetime] = None) -> Application:
    return update_status(app, "reviewed", actor, notes, now=now)


def shortlist(app: Application, actor: Actor, notes: str = "", now: Optional[datetime] = None) -> Application:
    return update_status(app, "shortlisted", actor, notes, now=now)


def reject(app: Application, actor: Actor, reason: str = "", now: Optional[datetime] = None) -> Application:
    return update_status(app, "rejected", actor, reason, now=now)


def make_offer(app: Application, actor: Actor, notes: str = "", now: Optional[datetime] = None) -> Application:
    return update_status(app, "offered", actor, notes, now=now)


def hire(app: Application, actor: Actor, notes: str = "", now: Optional[datetime] = None) -> Application:
    return update_status(app, "hired", actor, notes, now=now)


# ===========================
# RECRUITER ACTIONS
# ===========================

def schedule_interview(
    app: Application,
    actor: Actor,
    scheduled_at: Optional[datetime],
    meeting_link: str = "",
    notes: str = "",
    now: Optional[datetime] = None,
) -> Application:
    """Store interview details; a shortlisted application moves to interviewing."""
    now = now or utcnow()
    _require_recruiter_side(app, actor, "schedule interviews for this application")

    if scheduled_at is None:
        raise ValidationError("Interview date and time is required")
    scheduled_at = as_naive_utc(scheduled_at)
    if scheduled_at <= now:
        raise ValidationError("Interview must be scheduled for a future date")
    if app.status not in INTERVIEW_STATUSES:
        raise InvalidTransition(
            "application",
            app.status,
            "interviewing",
            f"Interviews can only be scheduled for shortlisted applications (status is '{app.status}')",
        )
    try:
        details = InterviewDetails(scheduled_at=scheduled_at, meeting_link=meeting_link or "", notes=notes or "")
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc

    if app.status == "shortlisted":
        updated = _append_transition(app, "interviewing", actor.actor_id, "Interview scheduled", now)
    else:
        updated = app.model_copy(deep=True)
    updated.interview_details = details
    updated.last_updated = now
    return updated


def rate_application(app: Application, actor: Actor, rating: Any, now: Optional[datetime] = None) -> Application:
    _require_recruiter_side(app, actor, "rate this application")
    if isinstance(rating, bool) or not isinstance(rating, (int, float)):
        raise ValidationError("Rating must be a whole number between 1 and 5")
    if isinstance(rating, float):
        if not rating.is_integer():
            raise ValidationError("Rating must be a whole number between 1 and 5")
        rating = int(rating)
    if not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5", rating=rating)

    updated = app.model_copy(deep=True)
    updated.rating = rating
    updated.last_updated = now or utcnow()
    return updated


def add_recruiter_note(app: Application, actor: Actor, note: str, now: Optional[datetime] = None) -> Application:
    now = now or utcnow()
    _require_recruiter_side(app, actor, "add notes to this application")
    note = (note or "").strip()
    if not note:
        raise ValidationError("Note content is required")
    if len(note) > MAX_NOTE_LENGTH:
        raise ValidationError(f"Note cannot exceed {MAX_NOTE_LENGTH} characters")

    updated = app.model_copy(deep=True)
    updated.recruiter_notes.append(RecruiterNote(note=note, created_by=actor.actor_id, created_at=now))
    updated.last_updated = now
    return updated


# ===========================
# READ HELPERS
# ===========================

def can_view(app: Application, actor: Actor) -> bool:
    return actor.is_admin or actor.owns(app.jobseeker_id) or actor.owns(app.recruiter_id)


def job_stats(applications: Iterable[Application]) -> Dict[str, int]:
    counts = Counter(app.status for app in applications)
    stats = {status: counts.get(status, 0) for status in APPLICATION_STATUSES}
    stats["total"] = sum(counts.values())
    return stats
