# ========================================
# jobboard/routes/application.py
# ========================================

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from jobboard.lifecycle.actors import Actor
from jobboard.models.application import Application
from jobboard.routes.deps import check_object_id, get_application_service
from jobboard.schemas.application import (
    ApplicationCreate,
    ApplicationStats,
    ApplicationStatusUpdate,
    InterviewSchedule,
    RatingUpdate,
    RecruiterNoteCreate,
)
from jobboard.services.applications import ApplicationService
from jobboard.utils.auth import get_current_actor

router = APIRouter(tags=["Applications"])


# ===========================
# JOBSEEKER ENDPOINTS
# ===========================

# ✅ 1. APPLY FOR JOB (Jobseeker)
@router.post("/applications", response_model=Application, status_code=status.HTTP_201_CREATED)
async def apply_job(
    application: ApplicationCreate,
    actor: Actor = Depends(get_current_actor),
    service: ApplicationService = Depends(get_application_service),
):
    """Apply for an active job. One application per job and jobseeker."""
    return await service.apply(
        actor,
        application.job_id,
        cover_letter=application.cover_letter,
        screening_answers=[a.model_dump() for a in application.screening_answers],
        resume_used=application.resume_used.model_dump() if application.resume_used else None,
    )


# ✅ 2. MY APPLICATIONS (Jobseeker)
@router.get("/my-applications", response_model=List[Application])
async def my_applications(
    status: Optional[str] = Query(None, description="Filter by status"),
    actor: Actor = Depends(get_current_actor),
    service: ApplicationService = Depends(get_application_service),
):
    """All applications submitted by the current jobseeker."""
    return await service.list_mine(actor, status=status)


# ✅ 3. WITHDRAW (Jobseeker, submitted/reviewed only)
@router.put("/applications/{application_id}/withdraw", response_model=Application)
async def withdraw_application(
    application_id: str,
    actor: Actor = Depends(get_current_actor),
    service: ApplicationService = Depends(get_application_service),
):
    """Withdraw an application while it is submitted or reviewed."""
    check_object_id(application_id, "application")
    return await service.withdraw(actor, application_id)


# ✅ 4. APPLICATION DETAILS (applicant, owning recruiter, admin)
@router.get("/applications/{application_id}", response_model=Application)
async def get_application(
    application_id: str,
    actor: Actor = Depends(get_current_actor),
    service: ApplicationService = Depends(get_application_service),
):
    check_object_id(application_id, "application")
    return await service.get(actor, application_id)


# ===========================
# RECRUITER ENDPOINTS
# ===========================

# ✅ 5. APPLICATIONS ACROSS MY JOBS
@router.get("/recruiter/applications", response_model=List[Application])
async def recruiter_applications(
    status: Optional[str] = Query(None, description="Filter by status"),
    actor: Actor = Depends(get_current_actor),
    service: ApplicationService = Depends(get_application_service),
):
    """Applications received across all of the recruiter's jobs."""
    return await service.list_for_recruiter(actor, status=status)


# ✅ 6. APPLICATIONS FOR ONE JOB
@router.get("/jobs/{job_id}/applications", response_model=List[Application])
async def job_applications(
    job_id: str,
    status: Optional[str] = Query(None, description="Filter by status"),
    actor: Actor = Depends(get_current_actor),
    service: ApplicationService = Depends(get_application_service),
):
    check_object_id(job_id, "job")
    return await service.list_for_job(actor, job_id, status=status)


# ✅ 7. PIPELINE COUNTS FOR ONE JOB
@router.get("/jobs/{job_id}/applications/stats", response_model=ApplicationStats)
async def job_application_stats(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: ApplicationService = Depends(get_application_service),
):
    """Count applications per pipeline status for one job."""
    check_object_id(job_id, "job")
    return await service.stats_for_job(actor, job_id)


# ✅ 8. UPDATE STATUS (one edge of the pipeline)
@router.put("/applications/{application_id}/status", response_model=Application)
async def update_status(
    application_id: str,
    status_update: ApplicationStatusUpdate,
    actor: Actor = Depends(get_current_actor),
    service: ApplicationService = Depends(get_application_service),
):
    """Move an application one step along the hiring pipeline."""
    check_object_id(application_id, "application")
    return await service.update_status(actor, application_id, status_update.status, status_update.notes)


# ✅ 9. SCHEDULE INTERVIEW (shortlisted -> interviewing)
@router.put("/applications/{application_id}/interview", response_model=Application)
async def schedule_interview(
    application_id: str,
    body: InterviewSchedule,
    actor: Actor = Depends(get_current_actor),
    service: ApplicationService = Depends(get_application_service),
):
    check_object_id(application_id, "application")
    return await service.schedule_interview(
        actor, application_id, body.scheduled_at, body.meeting_link, body.notes
    )


# ✅ 10. RATE CANDIDATE (1-5)
@router.put("/applications/{application_id}/rating", response_model=Application)
async def rate_application(
    application_id: str,
    body: RatingUpdate,
    actor: Actor = Depends(get_current_actor),
    service: ApplicationService = Depends(get_application_service),
):
    """Rate a candidate from 1 to 5."""
    check_object_id(application_id, "application")
    return await service.rate(actor, application_id, body.rating)


# ✅ 11. ADD RECRUITER NOTE
@router.post("/applications/{application_id}/notes", response_model=Application)
async def add_note(
    application_id: str,
    body: RecruiterNoteCreate,
    actor: Actor = Depends(get_current_actor),
    service: ApplicationService = Depends(get_application_service),
):
    check_object_id(application_id, "application")
    return await service.add_note(actor, application_id, body.note)
