"""Service factories for the routers; tests swap them via dependency_overrides."""

from bson import ObjectId
from fastapi import HTTPException

from jobboard import config
from jobboard.database import get_db
from jobboard.lifecycle.notifications import LoggingNotificationHook, NotificationDispatcher
from jobboard.repositories.applications import ApplicationRepository
from jobboard.repositories.jobs import JobRepository
from jobboard.repositories.profiles import ProfileRepository
from jobboard.repositories.saved_jobs import SavedJobRepository
from jobboard.repositories.taxonomy import CategoryRepository, SkillRepository
from jobboard.services.applications import ApplicationService
from jobboard.services.jobs import JobService
from jobboard.services.saved_jobs import SavedJobService
from jobboard.services.taxonomy import TaxonomyService

notifier = NotificationDispatcher(LoggingNotificationHook(), enabled=config.NOTIFICATIONS_ENABLED)


def check_object_id(value: str, label: str) -> str:
    """Reject a malformed id in the path with 400 before any lookup."""
    if not ObjectId.is_valid(value):
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID")
    return value


def get_notifier() -> NotificationDispatcher:
    return notifier


def get_job_service() -> JobService:
    db = get_db()
    return JobService(JobRepository(db), ApplicationRepository(db), ProfileRepository(db), notifier)


def get_application_service() -> ApplicationService:
    db = get_db()
    return ApplicationService(ApplicationRepository(db), JobRepository(db), ProfileRepository(db), notifier)


def get_saved_job_service() -> SavedJobService:
    db = get_db()
    return SavedJobService(SavedJobRepository(db), JobRepository(db))


def get_taxonomy_service() -> TaxonomyService:
    db = get_db()
    return TaxonomyService(SkillRepository(db), CategoryRepository(db), JobRepository(db), ProfileRepository(db))
