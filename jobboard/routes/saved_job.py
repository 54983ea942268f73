# ========================================
# jobboard/routes/saved_job.py
# ========================================

from typing import List

from fastapi import APIRouter, Depends, status

from jobboard.lifecycle.actors import Actor
from jobboard.models.saved_job import SavedJob
from jobboard.routes.deps import check_object_id, get_saved_job_service
from jobboard.schemas.saved_job import SavedJobCheck, SavedJobCreate, SavedJobDetailResponse, SavedJobStats
from jobboard.services.saved_jobs import SavedJobService
from jobboard.utils.auth import get_current_actor

router = APIRouter(prefix="/saved-jobs", tags=["Saved Jobs"])


# ✅ 1. Save a Job
@router.post("/", response_model=SavedJob, status_code=status.HTTP_201_CREATED)
async def save_job(
    saved_job: SavedJobCreate,
    actor: Actor = Depends(get_current_actor),
    service: SavedJobService = Depends(get_saved_job_service),
):
    """Save a job for later"""
    return await service.save(actor, saved_job.job_id)


# ✅ 2. Get All Saved Jobs with Full Job Details
@router.get("/", response_model=List[SavedJobDetailResponse])
async def get_saved_jobs(
    actor: Actor = Depends(get_current_actor),
    service: SavedJobService = Depends(get_saved_job_service),
):
    """Get all saved jobs for the current jobseeker with full job details"""
    return [
        {"saved_job_id": entry.id, "saved_at": entry.saved_at, "job": job}
        for entry, job in await service.list(actor)
    ]


# ✅ 3. Saved-job counts by job state
@router.get("/stats", response_model=SavedJobStats)
async def saved_job_stats(
    actor: Actor = Depends(get_current_actor),
    service: SavedJobService = Depends(get_saved_job_service),
):
    return await service.stats(actor)


# ✅ 4. Check if Job is Saved
@router.get("/check/{job_id}", response_model=SavedJobCheck)
async def check_if_saved(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: SavedJobService = Depends(get_saved_job_service),
):
    """Check if a specific job is saved by the current user"""
    check_object_id(job_id, "job")
    saved = await service.is_saved(actor, job_id)
    return {
        "is_saved": saved is not None,
        "saved_job_id": saved.id if saved else None,
        "saved_at": saved.saved_at if saved else None,
    }


# ✅ 5. Unsave by Job ID
@router.delete("/by-job/{job_id}")
async def unsave_by_job_id(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: SavedJobService = Depends(get_saved_job_service),
):
    """Remove a saved job using the job ID instead of the saved_job ID"""
    check_object_id(job_id, "job")
    await service.remove_by_job(actor, job_id)
    return {"message": "Job removed from saved jobs", "job_id": job_id}


# ✅ 6. Remove Saved Job
@router.delete("/{saved_job_id}")
async def remove_saved_job(
    saved_job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: SavedJobService = Depends(get_saved_job_service),
):
    check_object_id(saved_job_id, "saved job")
    await service.remove(actor, saved_job_id)
    return {"message": "Saved job removed successfully", "deleted_id": saved_job_id}
