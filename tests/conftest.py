"""Shared fixtures: actors, sample entities and in-memory repositories.

The in-memory repositories mirror the MongoDB ones method for method,
including the version check on ``save`` and the unique indexes, so the
services can be exercised without a database.
"""

import os
from datetime import timedelta

import pytest
from bson import ObjectId

os.environ.setdefault("NOTIFICATIONS_ENABLED", "false")

from jobboard.lifecycle.actors import ADMIN, JOBSEEKER, RECRUITER, Actor  # noqa: E402
from jobboard.lifecycle.errors import Conflict, NotFound, StaleState  # noqa: E402
from jobboard.lifecycle.notifications import NotificationDispatcher  # noqa: E402
from jobboard.models.application import Application  # noqa: E402
from jobboard.models.base import utcnow  # noqa: E402
from jobboard.models.job import JobPosting  # noqa: E402
from jobboard.models.saved_job import SavedJob  # noqa: E402
from jobboard.models.taxonomy import JobCategory, Skill  # noqa: E402
from jobboard.repositories.jobs import SORT_FIELDS  # noqa: E402
from jobboard.services.applications import ApplicationService  # noqa: E402
from jobboard.services.jobs import JobService  # noqa: E402
from jobboard.services.saved_jobs import SavedJobService  # noqa: E402
from jobboard.services.taxonomy import TaxonomyService  # noqa: E402


def new_id() -> str:
    return str(ObjectId())


# ===========================
# IN-MEMORY REPOSITORIES
# ===========================

class InMemoryRepository:
    model = None
    duplicate_message = "Document already exists"
    unique_fields = ()
    unmanaged_fields = frozenset()

    def __init__(self):
        self.docs = {}

    def _key(self, entity):
        return tuple(getattr(entity, f) for f in self.unique_fields)

    def _check_unique(self, entity):
        if not self.unique_fields:
            return
        key = self._key(entity)
        for other in self.docs.values():
            if other.id != entity.id and self._key(other) == key:
                raise Conflict(self.duplicate_message)

    def put(self, entity):
        """Store ``entity`` directly, bypassing the async API."""
        stored = entity.model_copy(update={"id": entity.id or new_id()}, deep=True)
        self.docs[stored.id] = stored
        return stored.model_copy(deep=True)

    async def get(self, entity_id):
        entity = self.docs.get(entity_id)
        return entity.model_copy(deep=True) if entity else None

    async def insert(self, entity):
        self._check_unique(entity)
        stored = entity.model_copy(update={"id": new_id(), "version": 0}, deep=True)
        self.docs[stored.id] = stored
        return stored.model_copy(deep=True)

    async def save(self, entity):
        current = self.docs.get(entity.id)
        if current is None:
            raise NotFound(f"{self.model.__name__} not found", id=entity.id)
        if current.version != entity.version:
            raise StaleState(f"{self.model.__name__} was modified concurrently; reload and retry", id=entity.id)
        self._check_unique(entity)
        kept = {field: getattr(current, field) for field in self.unmanaged_fields}
        self.docs[entity.id] = entity.model_copy(update={**kept, "version": entity.version + 1}, deep=True)
        return entity.model_copy(update={"version": entity.version + 1}, deep=True)

    async def delete(self, entity_id):
        return self.docs.pop(entity_id, None) is not None

    def _all(self, **filters):
        return [
            e.model_copy(deep=True)
            for e in self.docs.values()
            if all(getattr(e, k) == v for k, v in filters.items() if v is not None)
        ]


def _contains(value, text):
    return bool(value) and text.strip().lower() in value.lower()


def _matches(job, status=None, search=None, location=None, experience_level=None, employment_type=None,
             is_remote=None, is_featured=None, skills=None, category=None, recruiter_id=None,
             salary_min=None, salary_max=None):
    if status and job.status != status:
        return False
    if search and search.strip() and not (_contains(job.title, search) or _contains(job.description, search)):
        return False
    place = job.location
    if location and location.strip() and not any(_contains(v, location) for v in (place.city, place.state, place.country)):
        return False
    if experience_level and job.experience_level != experience_level:
        return False
    if employment_type and job.employment_type != employment_type:
        return False
    if is_remote is not None and place.is_remote != is_remote:
        return False
    if is_featured is not None and job.is_featured != is_featured:
        return False
    if skills and not set(skills) & set(job.required_skills):
        return False
    if category and job.category != category:
        return False
    if recruiter_id and job.recruiter_id != recruiter_id:
        return False
    if salary_min is not None and (job.salary.max is None or job.salary.max < salary_min):
        return False
    if salary_max is not None and (job.salary.min is None or job.salary.min > salary_max):
        return False
    return True


def _sort_value(job, field):
    value = job.salary.max if field == "salary.max" else getattr(job, field)
    # Mongo sorts missing values lowest
    return (value is not None, value if value is not None else 0)


class InMemoryJobRepository(InMemoryRepository):
    model = JobPosting
    unmanaged_fields = frozenset({"views", "application_count", "created_at"})

    def _increment(self, job_id, field):
        job = self.docs.get(job_id)
        if job is None:
            return None
        # counters skip model validation, like $inc does
        setattr(job, field, getattr(job, field) + 1)
        return job.model_copy(deep=True)

    async def increment_views(self, job_id):
        return self._increment(job_id, "views")

    async def increment_application_count(self, job_id):
        return self._increment(job_id, "application_count")

    async def list_by_status(self, status, limit=100):
        return self._all(status=status)[:limit]

    async def list_by_recruiter(self, recruiter_id, status=None, limit=100):
        return self._all(recruiter_id=recruiter_id, status=status)[:limit]

    async def search(self, filters, sort_by="posted_at", order="desc", featured_first=False, page=1, limit=20):
        jobs = [j for j in self._all() if _matches(j, **filters)]
        field = SORT_FIELDS[sort_by]
        jobs.sort(key=lambda j: _sort_value(j, field), reverse=order == "desc")
        if featured_first:
            jobs.sort(key=lambda j: not j.is_featured)
        start = (page - 1) * limit
        return jobs[start:start + limit], len(jobs)

    async def get_many(self, job_ids):
        return [self.docs[j].model_copy(deep=True) for j in job_ids if j in self.docs]

    async def count_with_skill(self, skill_id):
        return sum(1 for j in self.docs.values() if skill_id in j.required_skills)

    async def pull_skill(self, skill_id):
        touched = 0
        for job in self.docs.values():
            if skill_id in job.required_skills:
                job.required_skills = [s for s in job.required_skills if s != skill_id]
                job.version += 1
                touched += 1
        return touched

    async def count_in_category(self, category_id):
        return sum(1 for j in self.docs.values() if j.category == category_id)

    async def unset_category(self, category_id):
        touched = 0
        for job in self.docs.values():
            if job.category == category_id:
                job.category = None
                job.version += 1
                touched += 1
        return touched


class InMemoryApplicationRepository(InMemoryRepository):
    model = Application
    duplicate_message = "You have already applied to this job"
    unique_fields = ("job_id", "jobseeker_id")
    unmanaged_fields = frozenset({"applied_at"})

    async def exists(self, job_id, jobseeker_id):
        return bool(self._all(job_id=job_id, jobseeker_id=jobseeker_id))

    async def count_for_job(self, job_id):
        return len(self._all(job_id=job_id))

    async def list_for_job(self, job_id, status=None):
        return self._all(job_id=job_id, status=status)

    async def list_for_seeker(self, jobseeker_id, status=None):
        return self._all(jobseeker_id=jobseeker_id, status=status)

    async def list_for_recruiter(self, recruiter_id, status=None):
        return self._all(recruiter_id=recruiter_id, status=status)


class InMemorySavedJobRepository(InMemoryRepository):
    model = SavedJob
    duplicate_message = "Job already saved"
    unique_fields = ("jobseeker_id", "job_id")

    async def get_for(self, jobseeker_id, job_id):
        found = self._all(jobseeker_id=jobseeker_id, job_id=job_id)
        return found[0] if found else None

    async def list_for_seeker(self, jobseeker_id):
        return self._all(jobseeker_id=jobseeker_id)

    async def list_all(self):
        return self._all()

    async def delete_for(self, jobseeker_id, job_id):
        entry = await self.get_for(jobseeker_id, job_id)
        if entry is None:
            return False
        return await self.delete(entry.id)


class InMemorySkillRepository(InMemoryRepository):
    model = Skill
    duplicate_message = "A skill with this name already exists"
    unique_fields = ("name",)

    async def get_by_name(self, name):
        found = self._all(name=name.strip().lower())
        return found[0] if found else None

    async def list(self, category=None, active_only=True):
        return self._all(category=category, is_active=True if active_only else None)

    async def search(self, text, active_only=True, limit=20):
        needle = text.strip().lower()
        found = [s for s in await self.list(active_only=active_only) if needle in s.name]
        return sorted(found, key=lambda s: s.name)[:limit]


class InMemoryCategoryRepository(InMemoryRepository):
    model = JobCategory
    duplicate_message = "A category with this name already exists"
    unique_fields = ("name",)

    async def parent_map(self):
        return {c.id: c.parent_category for c in self.docs.values()}

    async def list(self, parent_id=None, top_level=False, active_only=True, search=None):
        result = []
        for c in self._all(is_active=True if active_only else None):
            if search and search.strip().lower() not in c.name.lower():
                continue
            if top_level and c.parent_category is not None:
                continue
            if not top_level and parent_id is not None and c.parent_category != parent_id:
                continue
            result.append(c)
        return result

    async def count_children(self, category_id):
        return sum(1 for c in self.docs.values() if c.parent_category == category_id)

    async def detach_children(self, category_id):
        touched = 0
        for c in self.docs.values():
            if c.parent_category == category_id:
                c.parent_category = None
                c.version += 1
                touched += 1
        return touched


class InMemoryProfileRepository:
    def __init__(self):
        self.jobseekers = {}
        self.recruiters = {}

    async def get_jobseeker_profile(self, user_id):
        return self.jobseekers.get(user_id)

    async def get_recruiter_profile(self, user_id):
        return self.recruiters.get(user_id)

    async def count_with_skill(self, skill_id):
        return sum(1 for p in self.jobseekers.values() if skill_id in p.get("skills", []))

    async def pull_skill(self, skill_id):
        touched = 0
        for profile in self.jobseekers.values():
            if skill_id in profile.get("skills", []):
                profile["skills"] = [s for s in profile["skills"] if s != skill_id]
                touched += 1
        return touched


# ===========================
# ACTORS
# ===========================

@pytest.fixture
def admin():
    return Actor(new_id(), ADMIN)


@pytest.fixture
def recruiter():
    return Actor(new_id(), RECRUITER)


@pytest.fixture
def other_recruiter():
    return Actor(new_id(), RECRUITER)


@pytest.fixture
def seeker():
    return Actor(new_id(), JOBSEEKER)


@pytest.fixture
def other_seeker():
    return Actor(new_id(), JOBSEEKER)


# ===========================
# ENTITIES
# ===========================

@pytest.fixture
def make_job(recruiter):
    def _make(**overrides):
        data = {
            "id": new_id(),
            "recruiter_id": recruiter.actor_id,
            "company_id": new_id(),
            "title": "Backend Engineer",
            "description": "Build and run the job board API.",
            "experience_level": "mid",
            "employment_type": "full-time",
        }
        data.update(overrides)
        return JobPosting(**data)

    return _make


@pytest.fixture
def make_application(recruiter, seeker):
    def _make(status="submitted", **overrides):
        applied_at = utcnow() - timedelta(days=2)
        data = {
            "id": new_id(),
            "job_id": new_id(),
            "jobseeker_id": seeker.actor_id,
            "recruiter_id": recruiter.actor_id,
            "status": status,
            "status_history": [
                {"status": "submitted", "changed_by": seeker.actor_id, "changed_at": applied_at,
                 "notes": "Application submitted"},
            ],
            "applied_at": applied_at,
            "last_updated": applied_at,
        }
        data.update(overrides)
        return Application(**data)

    return _make


# ===========================
# REPOSITORIES & SERVICES
# ===========================

@pytest.fixture
def job_repo():
    return InMemoryJobRepository()


@pytest.fixture
def application_repo():
    return InMemoryApplicationRepository()


@pytest.fixture
def saved_job_repo():
    return InMemorySavedJobRepository()


@pytest.fixture
def skill_repo():
    return InMemorySkillRepository()


@pytest.fixture
def category_repo():
    return InMemoryCategoryRepository()


@pytest.fixture
def profile_repo(recruiter, seeker):
    profiles = InMemoryProfileRepository()
    profiles.recruiters[recruiter.actor_id] = {"_id": ObjectId(), "user_id": recruiter.actor_id, "is_verified": True}
    profiles.jobseekers[seeker.actor_id] = {
        "_id": ObjectId(),
        "user_id": seeker.actor_id,
        "skills": [],
        "resume": {"file_name": "cv.pdf", "file_url": "/files/cv.pdf"},
    }
    return profiles


@pytest.fixture
def notifier():
    return NotificationDispatcher(enabled=False)


@pytest.fixture
def job_service(job_repo, application_repo, profile_repo, notifier):
    return JobService(job_repo, application_repo, profile_repo, notifier)


@pytest.fixture
def application_service(application_repo, job_repo, profile_repo, notifier):
    return ApplicationService(application_repo, job_repo, profile_repo, notifier)


@pytest.fixture
def saved_job_service(saved_job_repo, job_repo):
    return SavedJobService(saved_job_repo, job_repo)


@pytest.fixture
def taxonomy_service(skill_repo, category_repo, job_repo, profile_repo):
    return TaxonomyService(skill_repo, category_repo, job_repo, profile_repo, max_category_depth=3)
