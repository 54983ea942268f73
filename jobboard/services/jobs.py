# ========================================
# jobboard/services/jobs.py
# ========================================

import logging
import math
from typing import Any, Dict, List, Optional

from jobboard.lifecycle import jobs as job_lifecycle
from jobboard.lifecycle.actors import RECRUITER, Actor, require_admin, require_role
from jobboard.lifecycle.errors import LifecycleError, NotFound
from jobboard.lifecycle.notifications import NotificationDispatcher
from jobboard.models.job import JobPosting

logger = logging.getLogger(__name__)


class JobService:
    """Loads a job, runs one moderation step, saves it, then notifies."""

    def __init__(self, jobs, applications, profiles, notifier: Optional[NotificationDispatcher] = None):
        self.jobs = jobs
        self.applications = applications
        self.profiles = profiles
        self.notifier = notifier or NotificationDispatcher(enabled=False)

    async def get(self, job_id: str) -> JobPosting:
        job = await self.jobs.get(job_id)
        if job is None:
            raise NotFound("Job not found", job_id=job_id)
        return job

    async def _save(self, job: JobPosting, action: str, actor: Actor) -> JobPosting:
        saved = await self.jobs.save(job)
        logger.info("Job %s %s by %s -> status=%s", saved.id, action, actor.actor_id, saved.status)
        return saved

    # ===========================
    # RECRUITER
    # ===========================

    async def create(self, actor: Actor, data: Dict[str, Any]) -> JobPosting:
        require_role(actor, RECRUITER)
        profile = await self.profiles.get_recruiter_profile(actor.actor_id)
        if not profile:
            raise NotFound("Recruiter profile not found. Please complete your profile first.")

        job = job_lifecycle.create_job(
            data,
            recruiter_id=actor.actor_id,
            company_id=str(profile["_id"]),
            recruiter_verified=bool(profile.get("is_verified")),
        )
        created = await self.jobs.insert(job)
        logger.info("Job %s created as draft by %s", created.id, actor.actor_id)
        return created

    async def update(self, actor: Actor, job_id: str, changes: Dict[str, Any]) -> JobPosting:
        job = await self.get(job_id)
        return await self._save(job_lifecycle.update_job(job, changes, actor), "updated", actor)

    async def submit_for_approval(self, actor: Actor, job_id: str) -> JobPosting:
        job = await self.get(job_id)
        return await self._save(job_lifecycle.submit_for_approval(job, actor), "submitted", actor)

    async def close(self, actor: Actor, job_id: str, reason: str = "closed") -> JobPosting:
        job = await self.get(job_id)
        return await self._save(job_lifecycle.close(job, actor, reason), reason, actor)

    async def mark_filled(self, actor: Actor, job_id: str) -> JobPosting:
        return await self.close(actor, job_id, "filled")

    async def reactivate(self, actor: Actor, job_id: str) -> JobPosting:
        job = await self.get(job_id)
        return await self._save(job_lifecycle.reactivate(job, actor), "reactivated", actor)

    async def delete(self, actor: Actor, job_id: str) -> None:
        job = await self.get(job_id)
        count = await self.applications.count_for_job(job.id)
        job_lifecycle.ensure_deletable(job, actor, count)
        await self.jobs.delete(job.id)
        logger.info("Job %s deleted by %s", job.id, actor.actor_id)

    async def list_for_recruiter(self, actor: Actor, status: Optional[str] = None) -> List[JobPosting]:
        require_role(actor, RECRUITER)
        return await self.jobs.list_by_recruiter(actor.actor_id, status=status)

    async def _page(self, filters: Dict[str, Any], page: int, limit: int, **sort) -> Dict[str, Any]:
        page, limit = max(page, 1), max(limit, 1)
        jobs, total = await self.jobs.search(filters, page=page, limit=limit, **sort)
        return {
            "jobs": jobs,
            "count": len(jobs),
            "total": total,
            "page": page,
            "total_pages": math.ceil(total / limit),
        }

    async def search_active(
        self,
        filters: Dict[str, Any],
        page: int = 1,
        limit: int = 20,
        sort_by: str = "posted_at",
        order: str = "desc",
    ) -> Dict[str, Any]:
        """Public listing: active jobs only, featured ones first."""
        filters = {**filters, "status": "active"}
        return await self._page(filters, page, limit, sort_by=sort_by, order=order, featured_first=True)

    async def record_view(self, job_id: str) -> JobPosting:
        job = await self.jobs.increment_views(job_id)
        if job is None:
            raise NotFound("Job not found", job_id=job_id)
        return job

    # ===========================
    # ADMIN MODERATION
    # ===========================

    async def list_pending(self, actor: Actor) -> List[JobPosting]:
        require_admin(actor, "review pending jobs")
        return await self.jobs.list_by_status("pending-approval")

    async def approve(self, actor: Actor, job_id: str) -> JobPosting:
        job = await self.get(job_id)
        saved = await self._save(job_lifecycle.approve(job, actor), "approved", actor)
        self.notifier.job_approved(saved)
        return saved

    async def reject(self, actor: Actor, job_id: str, notes: str) -> JobPosting:
        job = await self.get(job_id)
        saved = await self._save(job_lifecycle.reject(job, actor, notes), "rejected", actor)
        self.notifier.job_rejected(saved, saved.moderation_notes)
        return saved

    async def toggle_featured(self, actor: Actor, job_id: str) -> JobPosting:
        job = await self.get(job_id)
        return await self._save(job_lifecycle.toggle_featured(job, actor), "featured-toggled", actor)

    async def list_all(
        self,
        actor: Actor,
        filters: Dict[str, Any],
        page: int = 1,
        limit: int = 20,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> Dict[str, Any]:
        require_admin(actor, "list all jobs")
        return await self._page(filters, page, limit, sort_by=sort_by, order=order)

    async def bulk_approve(self, actor: Actor, job_ids: List[str]) -> Dict[str, list]:
        require_admin(actor, "approve jobs")
        results = {"approved": [], "failed": []}
        for job_id in job_ids:
            try:
                await self.approve(actor, job_id)
            except LifecycleError as exc:
                results["failed"].append({"job_id": job_id, "reason": exc.message})
            else:
                results["approved"].append(job_id)
        logger.info(
            "Bulk approval by %s: %d approved, %d failed",
            actor.actor_id, len(results["approved"]), len(results["failed"]),
        )
        return results

    async def admin_delete(self, actor: Actor, job_id: str, permanent: bool = False) -> Optional[JobPosting]:
        """Soft delete closes the job; permanent delete needs zero applications."""
        require_admin(actor, "delete jobs")
        if permanent:
            await self.delete(actor, job_id)
            return None
        return await self.close(actor, job_id, "closed")
