"""Tests for the job moderation lifecycle functions."""

from datetime import datetime, timedelta, timezone

import pytest

from jobboard.lifecycle import jobs
from jobboard.lifecycle.errors import Conflict, InvalidTransition, Unauthorized, ValidationError
from jobboard.models.base import utcnow


@pytest.fixture
def job_data():
    return {
        "title": "Data Engineer",
        "description": "Own the ingestion pipelines.",
        "experience_level": "senior",
        "employment_type": "full-time",
        "required_skills": ["python", "sql", "python"],
        "salary": {"min": 90000, "max": 120000, "currency": "usd"},
        "location": {"city": "Pune", "country": "India"},
    }


# ===========================
# CREATION & EDITING
# ===========================

def test_create_job_starts_in_draft(job_data, recruiter):
    job = jobs.create_job(job_data, recruiter.actor_id, "company-1")

    assert job.status == "draft"
    assert job.recruiter_id == recruiter.actor_id
    assert job.posted_at is None
    assert job.required_skills == ["python", "sql"]
    assert job.salary.currency == "USD"
    assert job.salary_range == "USD 90,000 - 120,000"
    assert job.full_location == "Pune, India"


def test_create_job_ignores_protected_fields(job_data, recruiter):
    job_data.update({"status": "active", "views": 99, "is_featured": True})
    job = jobs.create_job(job_data, recruiter.actor_id, "company-1")

    assert job.status == "draft"
    assert job.views == 0
    assert job.is_featured is False


def test_unverified_recruiter_cannot_post(job_data, recruiter):
    with pytest.raises(Unauthorized):
        jobs.create_job(job_data, recruiter.actor_id, "company-1", recruiter_verified=False)


def test_deadline_must_be_in_future(job_data, recruiter):
    job_data["application_deadline"] = utcnow() - timedelta(days=1)
    with pytest.raises(ValidationError):
        jobs.create_job(job_data, recruiter.actor_id, "company-1")


def test_aware_deadline_is_normalised(job_data, recruiter):
    job_data["application_deadline"] = datetime.now(timezone.utc) + timedelta(days=10)
    job = jobs.create_job(job_data, recruiter.actor_id, "company-1")
    assert job.application_deadline.tzinfo is None


@pytest.mark.parametrize(
    "field,value",
    [
        ("salary", {"min": 100, "max": 50}),
        ("experience_years", {"min": 5, "max": 2}),
        ("location", {"city": "Remote", "is_remote": True}),
        ("number_of_openings", 0),
    ],
)
def test_invalid_job_fields(job_data, recruiter, field, value):
    job_data[field] = value
    with pytest.raises(ValidationError) as exc_info:
        jobs.create_job(job_data, recruiter.actor_id, "company-1")
    assert exc_info.value.context["errors"]


def test_update_job_by_owner(make_job, recruiter):
    job = make_job()
    updated = jobs.update_job(job, {"title": "Senior Backend Engineer", "views": 500}, recruiter)

    assert updated.title == "Senior Backend Engineer"
    assert updated.views == 0
    assert job.title == "Backend Engineer"


def test_update_job_by_stranger(make_job, other_recruiter):
    with pytest.raises(Unauthorized):
        jobs.update_job(make_job(), {"title": "Mine now"}, other_recruiter)


def test_update_can_submit_draft(make_job, recruiter):
    updated = jobs.update_job(make_job(), {"status": "pending-approval", "title": "Edited"}, recruiter)
    assert updated.status == "pending-approval"
    assert updated.title == "Edited"


def test_update_cannot_activate(make_job, recruiter):
    with pytest.raises(InvalidTransition):
        jobs.update_job(make_job(status="pending-approval"), {"status": "active"}, recruiter)


# ===========================
# MODERATION
# ===========================

def test_submit_only_from_draft(make_job, recruiter):
    submitted = jobs.submit_for_approval(make_job(), recruiter)
    assert submitted.status == "pending-approval"

    with pytest.raises(InvalidTransition) as exc_info:
        jobs.submit_for_approval(submitted, recruiter)
    assert exc_info.value.current == "pending-approval"
    assert exc_info.value.target == "pending-approval"


def test_approve_sets_posted_at_and_moderator(make_job, admin):
    now = utcnow()
    approved = jobs.approve(make_job(status="pending-approval"), admin, now=now)

    assert approved.status == "active"
    assert approved.posted_at == now
    assert approved.moderated_by == admin.actor_id
    assert approved.moderated_at == now


def test_approve_requires_admin(make_job, recruiter):
    with pytest.raises(Unauthorized):
        jobs.approve(make_job(status="pending-approval"), recruiter)


def test_approve_from_draft_is_invalid(make_job, admin):
    with pytest.raises(InvalidTransition):
        jobs.approve(make_job(), admin)


def test_reject_requires_notes(make_job, admin):
    job = make_job(status="pending-approval")
    with pytest.raises(ValidationError):
        jobs.reject(job, admin, "   ")
    with pytest.raises(ValidationError):
        jobs.reject(job, admin, "x" * 1001)

    rejected = jobs.reject(job, admin, "Salary band missing")
    assert rejected.status == "rejected"
    assert rejected.moderation_notes == "Salary band missing"
    assert job.status == "pending-approval"


def test_rejected_is_terminal(make_job, recruiter, admin):
    rejected = make_job(status="rejected")
    with pytest.raises(InvalidTransition):
        jobs.approve(rejected, admin)
    with pytest.raises(InvalidTransition):
        jobs.reactivate(rejected, recruiter)


# ===========================
# OWNER LIFECYCLE
# ===========================

def test_closed_at_set_once(make_job, recruiter):
    first = utcnow() - timedelta(days=3)
    closed = jobs.close(make_job(status="active", posted_at=first), recruiter, now=first)
    assert closed.status == "closed"
    assert closed.closed_at == first

    reopened = jobs.reactivate(closed, recruiter)
    assert reopened.status == "active"
    assert reopened.closed_at is None
    assert reopened.posted_at == first

    later = utcnow()
    filled = jobs.mark_filled(reopened, recruiter, now=later)
    assert filled.status == "filled"
    assert filled.closed_at == later


def test_close_drops_featuring(make_job, recruiter):
    featured = make_job(status="active", is_featured=True)

    filled = jobs.mark_filled(featured, recruiter)
    assert filled.is_featured is False
    assert featured.is_featured is True
    assert jobs.reactivate(filled, recruiter).is_featured is False


def test_close_from_pending(make_job, recruiter):
    assert jobs.close(make_job(status="pending-approval"), recruiter).status == "closed"


def test_close_rejects_unknown_reason(make_job, recruiter):
    with pytest.raises(ValidationError):
        jobs.close(make_job(status="active"), recruiter, reason="archived")


def test_close_from_draft_is_invalid(make_job, recruiter):
    with pytest.raises(InvalidTransition):
        jobs.close(make_job(), recruiter)


def test_admin_may_close(make_job, admin):
    assert jobs.close(make_job(status="active"), admin).status == "closed"


def test_reactivate_only_from_closed_or_filled(make_job, recruiter):
    with pytest.raises(InvalidTransition):
        jobs.reactivate(make_job(status="active"), recruiter)


def test_toggle_featured_only_when_active(make_job, admin):
    featured = jobs.toggle_featured(make_job(status="active"), admin)
    assert featured.is_featured is True
    assert jobs.toggle_featured(featured, admin).is_featured is False

    with pytest.raises(InvalidTransition) as exc_info:
        jobs.toggle_featured(make_job(status="closed"), admin)
    assert exc_info.value.target == "featured"


def test_ensure_deletable(make_job, recruiter, other_recruiter):
    job = make_job()
    jobs.ensure_deletable(job, recruiter, 0)

    with pytest.raises(Conflict):
        jobs.ensure_deletable(job, recruiter, 3)
    with pytest.raises(Unauthorized):
        jobs.ensure_deletable(job, other_recruiter, 0)


def test_accepting_applications(make_job):
    assert make_job(status="active").is_accepting_applications
    assert not make_job(status="closed").is_accepting_applications
    assert not make_job(status="active", application_deadline=utcnow() - timedelta(hours=1)).is_accepting_applications
    assert not make_job(status="active", application_count=100).is_accepting_applications
