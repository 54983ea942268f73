# ========================================
# jobboard/routes/admin_jobs.py
# ========================================

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from jobboard.lifecycle.actors import Actor
from jobboard.models.job import JobPosting, JobStatus
from jobboard.routes.deps import check_object_id, get_job_service
from jobboard.schemas.job import (
    BulkApproveRequest,
    BulkApproveResponse,
    JobPage,
    JobRejectRequest,
    JobSortField,
)
from jobboard.services.jobs import JobService
from jobboard.utils.auth import get_current_actor

router = APIRouter(prefix="/admin/jobs", tags=["Admin - Job Moderation"])


# ✅ 1. ALL JOBS (any status, for the admin dashboard)
@router.get("", response_model=JobPage)
async def all_jobs(
    status: Optional[JobStatus] = Query(None, description="Filter by status"),
    search: Optional[str] = Query(None, description="Search in title or description"),
    recruiter_id: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    is_featured: Optional[bool] = Query(None),
    sort_by: JobSortField = Query("created_at"),
    order: Literal["asc", "desc"] = Query("desc"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    """List every job regardless of status, newest first by default."""
    filters = {
        "status": status,
        "search": search,
        "recruiter_id": recruiter_id,
        "category": category,
        "is_featured": is_featured,
    }
    return await service.list_all(actor, filters, page=page, limit=limit, sort_by=sort_by, order=order)


# ✅ 2. JOBS WAITING FOR APPROVAL
@router.get("/pending", response_model=List[JobPosting])
async def pending_jobs(
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    """Moderation queue: jobs in pending-approval."""
    return await service.list_pending(actor)


# ✅ 3. BULK APPROVE
@router.put("/bulk/approve", response_model=BulkApproveResponse)
async def bulk_approve(
    body: BulkApproveRequest,
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    """Approve several pending jobs; failures are reported per job, not raised."""
    return await service.bulk_approve(actor, body.job_ids)


# ✅ 4. APPROVE
@router.put("/{job_id}/approve", response_model=JobPosting)
async def approve_job(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    check_object_id(job_id, "job")
    return await service.approve(actor, job_id)


# ✅ 5. REJECT (notes required)
@router.put("/{job_id}/reject", response_model=JobPosting)
async def reject_job(
    job_id: str,
    body: JobRejectRequest,
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    check_object_id(job_id, "job")
    return await service.reject(actor, job_id, body.notes)


# ✅ 6. TOGGLE FEATURED (active jobs only)
@router.put("/{job_id}/feature", response_model=JobPosting)
async def toggle_featured(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    """Feature or unfeature an active job."""
    check_object_id(job_id, "job")
    return await service.toggle_featured(actor, job_id)


# ✅ 7. DELETE (soft close by default)
@router.delete("/{job_id}")
async def delete_job(
    job_id: str,
    permanent: bool = Query(False, description="Hard delete; refused when the job has applications"),
    actor: Actor = Depends(get_current_actor),
    service: JobService = Depends(get_job_service),
):
    """Close a job, or remove it for good with ``permanent=true``."""
    check_object_id(job_id, "job")
    job = await service.admin_delete(actor, job_id, permanent=permanent)
    if job is None:
        return {"message": "Job permanently deleted successfully", "job_id": job_id}
    return {
        "message": "Job closed successfully",
        "job_id": job_id,
        "status": job.status,
        "closed_at": job.closed_at,
    }
