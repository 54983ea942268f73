import logging
from typing import Dict, List, Optional, Tuple

from jobboard.lifecycle.actors import JOBSEEKER, Actor, require_owner, require_role
from jobboard.lifecycle.errors import Conflict, NotFound
from jobboard.lifecycle.guards import ensure_saved_job_target
from jobboard.models.job import JobPosting
from jobboard.models.saved_job import SavedJob

logger = logging.getLogger(__name__)


class SavedJobService:
    def __init__(self, saved_jobs, jobs):
        self.saved_jobs = saved_jobs
        self.jobs = jobs

    async def save(self, actor: Actor, job_id: str) -> SavedJob:
        require_role(actor, JOBSEEKER)
        job = ensure_saved_job_target(await self.jobs.get(job_id), job_id)
        if await self.saved_jobs.get_for(actor.actor_id, job.id) is not None:
            raise Conflict("Job already saved", job_id=job.id)
        saved = await self.saved_jobs.insert(SavedJob(jobseeker_id=actor.actor_id, job_id=job.id))
        logger.info("Job %s saved by %s", job.id, actor.actor_id)
        return saved

    async def list(self, actor: Actor) -> List[Tuple[SavedJob, JobPosting]]:
        """Saved jobs paired with their job; entries whose job is gone are skipped."""
        require_role(actor, JOBSEEKER)
        saved = await self.saved_jobs.list_for_seeker(actor.actor_id)
        jobs = {job.id: job for job in await self.jobs.get_many([s.job_id for s in saved])}
        return [(entry, jobs[entry.job_id]) for entry in saved if entry.job_id in jobs]

    async def is_saved(self, actor: Actor, job_id: str) -> Optional[SavedJob]:
        return await self.saved_jobs.get_for(actor.actor_id, job_id)

    async def remove(self, actor: Actor, saved_job_id: str) -> None:
        entry = await self.saved_jobs.get(saved_job_id)
        if entry is None:
            raise NotFound("Saved job not found", saved_job_id=saved_job_id)
        require_owner(actor, entry.jobseeker_id, "remove this saved job")
        await self.saved_jobs.delete(entry.id)

    async def remove_by_job(self, actor: Actor, job_id: str) -> None:
        if not await self.saved_jobs.delete_for(actor.actor_id, job_id):
            raise NotFound("Job not found in saved jobs", job_id=job_id)

    async def stats(self, actor: Actor) -> Dict[str, int]:
        saved = await self.saved_jobs.list_for_seeker(actor.actor_id)
        jobs = await self.jobs.get_many([s.job_id for s in saved])
        stats = {"total": len(saved), "active": 0, "expired": 0, "closed": 0}
        for job in jobs:
            if job.status == "active":
                stats["expired" if job.is_expired else "active"] += 1
            elif job.status in ("closed", "filled"):
                stats["closed"] += 1
        return stats

    async def cleanup_orphans(self) -> int:
        """Drop saved-job entries whose job no longer exists."""
        entries = await self.saved_jobs.list_all()
        existing = {job.id for job in await self.jobs.get_many(list({e.job_id for e in entries}))}
        removed = 0
        for entry in entries:
            if entry.job_id not in existing:
                await self.saved_jobs.delete(entry.id)
                removed += 1
        if removed:
            logger.info("Removed %d orphaned saved job(s)", removed)
        return removed
