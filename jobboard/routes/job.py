# ========================================
# jobboard/routes/job.py
# ========================================

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from jobboard.lifecycle.actors import Actor
from jobboard.models.job import EmploymentType, ExperienceLevel, JobPosting
from jobboard.routes.deps import check_object_id, get_job_service
from jobboard.schemas.job import JobCloseRequest, JobCreate, JobPage, JobSortField, JobUpdate
from jobboard.services.jobs import JobService
from jobboard.utils.auth import get_current_actor

router = APIRouter(prefix="/jobs", tags=["Jobs"])


# ===========================
# PUBLIC ENDPOINTS
# ===========================

# ✅ 1. LIST / SEARCH ACTIVE JOBS (featured first)
@router.get("", response_model=JobPage)
async def list_active_jobs(
    search: Optional[str] = Query(None, description="Search in title or description"),
    location: Optional[str] = Query(None, description="Match city, state or country"),
    experience_level: Optional[ExperienceLevel] = Query(None),
    employment_type: Optional[EmploymentType] = Query(None),
    is_remote: Optional[bool] = Query(None),
    is_featured: Optional[bool] = Query(None),
    skills: Optional[str] = Query(None, description="Filter by skill ids (comma-separated)"),
    category: Optional[str] = Query(None, description="Category id"),
    salary_min: Optional[float] = Query(None, ge=0),
    salary_max: Optional[float] = Query(None, ge=0),
    sort_by: JobSortField = Query("posted_at"),
    order: Literal["asc", "desc"] = Query("desc"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100, description="Results per page"),
    service: JobService = Depends(get_job_service),
):
    """Get active jobs with optional search and filtering. Featured jobs come first."""
    filters = {
        "search": search,
        "location": location,
        "experience_level": experience_level,
        "employment_type": employment_type,
        "is_remote": is_remote,
        "is_featured": is_featured,
        "skills": [s.strip() for s in skills.split(",") if s.strip()] if skills else None,
        "category": category,
        "salary_min": salary_min,
        "salary_max": salary_max,
    }
    return await service.search_active(filters, page=page, limit=limit, sort_by=sort_by, order=order)


# ===========================
# RECRUITER ENDPOINTS
# ===========================

# ✅ 2. MY JOBS (Recruiter)
@router.get("/my-jobs", response_model=List[JobPosting])
async def my_jobs(
    status: Optional[str] = Query(None, description="Filter by status"),
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    """Jobs posted by the current recruiter, in every status."""
    return await service.list_for_recruiter(actor, status=status)


# ✅ 3. GET SINGLE JOB (Public, counts a view)
@router.get("/{job_id}", response_model=JobPosting)
async def get_job(job_id: str, service: JobService = Depends(get_job_service)):
    """Get a job and count the view."""
    check_object_id(job_id, "job")
    return await service.record_view(job_id)


# ✅ 4. CREATE DRAFT (Verified recruiter)
@router.post("", response_model=JobPosting, status_code=status.HTTP_201_CREATED)
async def create_job(
    job: JobCreate,
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    """Create a new job as a draft. Only verified recruiters can post."""
    return await service.create(actor, job.model_dump(exclude_none=True))


# ✅ 5. EDIT JOB (Owner)
@router.put("/{job_id}", response_model=JobPosting)
async def update_job(
    job_id: str,
    job_update: JobUpdate,
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    """Edit a job. A draft may be sent for approval by setting status."""
    check_object_id(job_id, "job")
    return await service.update(actor, job_id, job_update.model_dump(exclude_unset=True))


# ✅ 6. SUBMIT FOR APPROVAL (Owner)
@router.put("/{job_id}/submit", response_model=JobPosting)
async def submit_job(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    check_object_id(job_id, "job")
    return await service.submit_for_approval(actor, job_id)


# ✅ 7. CLOSE JOB (Owner) - reason "closed" or "filled"
@router.put("/{job_id}/close", response_model=JobPosting)
async def close_job(
    job_id: str,
    body: Optional[JobCloseRequest] = None,
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    """Stop accepting applications."""
    check_object_id(job_id, "job")
    reason = body.reason if body else "closed"
    return await service.close(actor, job_id, reason)


# ✅ 8. MARK FILLED (Owner)
@router.put("/{job_id}/mark-filled", response_model=JobPosting)
async def mark_job_filled(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    check_object_id(job_id, "job")
    return await service.mark_filled(actor, job_id)


# ✅ 9. REACTIVATE (Owner)
@router.put("/{job_id}/reactivate", response_model=JobPosting)
async def reactivate_job(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    """Reopen a closed or filled job."""
    check_object_id(job_id, "job")
    return await service.reactivate(actor, job_id)


# ✅ 10. DELETE JOB (Owner, only without applications)
@router.delete("/{job_id}")
async def delete_job(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    """Delete a job that has no applications. Jobs with applications must be closed instead."""
    check_object_id(job_id, "job")
    await service.delete(actor, job_id)
    return {"message": "Job deleted successfully", "job_id": job_id}
