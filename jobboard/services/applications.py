# ========================================
# jobboard/services/applications.py
# ========================================

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from jobboard.lifecycle import applications as app_lifecycle
from jobboard.lifecycle.actors import JOBSEEKER, Actor, require_owner, require_role
from jobboard.lifecycle.errors import NotFound, Unauthorized
from jobboard.lifecycle.notifications import NotificationDispatcher
from jobboard.models.application import Application

logger = logging.getLogger(__name__)


def has_usable_profile(profile: Optional[dict]) -> bool:
    """Default completeness check: the seeker has created a profile at all."""
    return bool(profile)


def resume_from_profile(profile: Optional[dict]) -> Optional[Dict[str, Any]]:
    resume = (profile or {}).get("resume")
    if not resume:
        return None
    return {"file_name": resume.get("file_name"), "file_url": resume.get("file_url")}


class ApplicationService:
    def __init__(
        self,
        applications,
        jobs,
        profiles,
        notifier: Optional[NotificationDispatcher] = None,
        profile_check: Callable[[Optional[dict]], bool] = has_usable_profile,
    ):
        self.applications = applications
        self.jobs = jobs
        self.profiles = profiles
        self.notifier = notifier or NotificationDispatcher(enabled=False)
        self.profile_check = profile_check

    async def _load(self, application_id: str) -> Application:
        app = await self.applications.get(application_id)
        if app is None:
            raise NotFound("Application not found", application_id=application_id)
        return app

    async def _save_transition(self, before: Application, after: Application, actor: Actor) -> Application:
        saved = await self.applications.save(after)
        if before.status != saved.status:
            logger.info(
                "Application %s %s -> %s by %s", saved.id, before.status, saved.status, actor.actor_id
            )
            self.notifier.application_status_changed(saved, before.status, saved.status)
        return saved

    # ===========================
    # JOBSEEKER
    # ===========================

    async def apply(
        self,
        actor: Actor,
        job_id: str,
        cover_letter: Optional[str] = None,
        screening_answers: Optional[List[Dict[str, Any]]] = None,
        resume_used: Optional[Dict[str, Any]] = None,
    ) -> Application:
        require_role(actor, JOBSEEKER)
        job = await self.jobs.get(job_id)
        if job is None:
            raise NotFound("Job not found", job_id=job_id)

        already_applied = await self.applications.exists(job.id, actor.actor_id)
        profile = await self.profiles.get_jobseeker_profile(actor.actor_id)

        application = app_lifecycle.apply(
            job,
            actor,
            profile_complete=self.profile_check(profile),
            already_applied=already_applied,
            cover_letter=cover_letter,
            screening_answers=screening_answers,
            resume_used=resume_used or resume_from_profile(profile),
        )
        # the unique index settles races that slipped past already_applied
        created = await self.applications.insert(application)
        await self.jobs.increment_application_count(job.id)
        logger.info("Application %s submitted by %s for job %s", created.id, actor.actor_id, job.id)
        return created

    async def list_mine(self, actor: Actor, status: Optional[str] = None) -> List[Application]:
        require_role(actor, JOBSEEKER)
        return await self.applications.list_for_seeker(actor.actor_id, status=status)

    async def withdraw(self, actor: Actor, application_id: str) -> Application:
        app = await self._load(application_id)
        return await self._save_transition(app, app_lifecycle.withdraw(app, actor), actor)

    # ===========================
    # SHARED
    # ===========================

    async def get(self, actor: Actor, application_id: str) -> Application:
        app = await self._load(application_id)
        if not app_lifecycle.can_view(app, actor):
            raise Unauthorized("You are not authorized to view this application")
        return app

    # ===========================
    # RECRUITER
    # ===========================

    async def list_for_job(self, actor: Actor, job_id: str, status: Optional[str] = None) -> List[Application]:
        job = await self.jobs.get(job_id)
        if job is None:
            raise NotFound("Job not found", job_id=job_id)
        require_owner(actor, job.recruiter_id, "view this job's applications", allow_admin=True)
        return await self.applications.list_for_job(job.id, status=status)

    async def list_for_recruiter(self, actor: Actor, status: Optional[str] = None) -> List[Application]:
        return await self.applications.list_for_recruiter(actor.actor_id, status=status)

    async def stats_for_job(self, actor: Actor, job_id: str) -> Dict[str, int]:
        return app_lifecycle.job_stats(await self.list_for_job(actor, job_id))

    async def update_status(self, actor: Actor, application_id: str, new_status: str, notes: str = "") -> Application:
        app = await self._load(application_id)
        updated = app_lifecycle.update_status(app, new_status, actor, notes)
        return await self._save_transition(app, updated, actor)

    async def schedule_interview(
        self,
        actor: Actor,
        application_id: str,
        scheduled_at: datetime,
        meeting_link: str = "",
        notes: str = "",
    ) -> Application:
        app = await self._load(application_id)
        updated = app_lifecycle.schedule_interview(app, actor, scheduled_at, meeting_link, notes)
        return await self._save_transition(app, updated, actor)

    async def rate(self, actor: Actor, application_id: str, rating: Any) -> Application:
        app = await self._load(application_id)
        return await self.applications.save(app_lifecycle.rate_application(app, actor, rating))

    async def add_note(self, actor: Actor, application_id: str, note: str) -> Application:
        app = await self._load(application_id)
        return await self.applications.save(app_lifecycle.add_recruiter_note(app, actor, note))
