import re
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING, ReturnDocument

from jobboard.lifecycle.errors import ValidationError
from jobboard.models.job import JobPosting

from .base import MongoRepository, to_object_id

SORT_FIELDS = {
    "posted_at": "posted_at",
    "created_at": "created_at",
    "salary": "salary.max",
    "views": "views",
    "title": "title",
}


def _contains(text: str) -> dict:
    return {"$regex": re.escape(text.strip()), "$options": "i"}


def build_search_query(
    status: Optional[str] = None,
    search: Optional[str] = None,
    location: Optional[str] = None,
    experience_level: Optional[str] = None,
    employment_type: Optional[str] = None,
    is_remote: Optional[bool] = None,
    is_featured: Optional[bool] = None,
    skills: Optional[List[str]] = None,
    category: Optional[str] = None,
    recruiter_id: Optional[str] = None,
    salary_min: Optional[float] = None,
    salary_max: Optional[float] = None,
) -> dict:
    """Mongo filter for the job list and search endpoints; None means no filter."""
    query: Dict[str, Any] = {}
    alternatives = []

    if status:
        query["status"] = status
    if search and search.strip():
        alternatives.append({"$or": [{"title": _contains(search)}, {"description": _contains(search)}]})
    if location and location.strip():
        alternatives.append({"$or": [
            {"location.city": _contains(location)},
            {"location.state": _contains(location)},
            {"location.country": _contains(location)},
        ]})
    if alternatives:
        query["$and"] = alternatives

    if experience_level:
        query["experience_level"] = experience_level
    if employment_type:
        query["employment_type"] = employment_type
    if is_remote is not None:
        query["location.is_remote"] = is_remote
    if is_featured is not None:
        query["is_featured"] = is_featured
    if skills:
        query["required_skills"] = {"$in": list(skills)}
    if category:
        query["category"] = category
    if recruiter_id:
        query["recruiter_id"] = recruiter_id

    # overlap: the posted band must reach the requested floor and start below the ceiling
    if salary_min is not None:
        query["salary.max"] = {"$gte": salary_min}
    if salary_max is not None:
        query["salary.min"] = {"$lte": salary_max}
    return query


class JobRepository(MongoRepository):
    collection_name = "jobs"
    model = JobPosting
    unmanaged_fields = frozenset({"views", "application_count", "created_at"})

    # ===========================
    # COUNTERS (atomic, no validation)
    # ===========================

    async def _increment(self, job_id: str, field: str) -> Optional[JobPosting]:
        oid = to_object_id(job_id)
        if oid is None:
            return None
        doc = await self.collection.find_one_and_update(
            {"_id": oid},
            {"$inc": {field: 1}},
            return_document=ReturnDocument.AFTER,
        )
        return JobPosting.from_document(doc)

    async def increment_views(self, job_id: str) -> Optional[JobPosting]:
        return await self._increment(job_id, "views")

    async def increment_application_count(self, job_id: str) -> Optional[JobPosting]:
        return await self._increment(job_id, "application_count")

    # ===========================
    # QUERIES
    # ===========================

    async def list_by_status(self, status: str, limit: int = 100) -> List[JobPosting]:
        return await self._find({"status": status}, sort=[("created_at", -1)], limit=limit)

    async def list_by_recruiter(self, recruiter_id: str, status: Optional[str] = None, limit: int = 100) -> List[JobPosting]:
        query = {"recruiter_id": recruiter_id}
        if status:
            query["status"] = status
        return await self._find(query, sort=[("created_at", -1)], limit=limit)

    async def search(
        self,
        filters: Dict[str, Any],
        sort_by: str = "posted_at",
        order: str = "desc",
        featured_first: bool = False,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[JobPosting], int]:
        """One page of matching jobs plus the total match count."""
        if sort_by not in SORT_FIELDS:
            raise ValidationError(f"Cannot sort jobs by '{sort_by}'", allowed=sorted(SORT_FIELDS))
        query = build_search_query(**filters)
        direction = ASCENDING if order == "asc" else DESCENDING
        sort = [("is_featured", DESCENDING)] if featured_first else []
        sort.append((SORT_FIELDS[sort_by], direction))

        total = await self.collection.count_documents(query)
        jobs = await self._find(query, sort=sort, limit=limit, skip=(page - 1) * limit)
        return jobs, total

    async def get_many(self, job_ids: List[str]) -> List[JobPosting]:
        oids = [oid for oid in (to_object_id(j) for j in job_ids) if oid is not None]
        if not oids:
            return []
        return await self._find({"_id": {"$in": oids}})

    # ===========================
    # REFERENCE DATA
    # ===========================

    async def count_with_skill(self, skill_id: str) -> int:
        return await self.collection.count_documents({"required_skills": skill_id})

    async def pull_skill(self, skill_id: str) -> int:
        result = await self.collection.update_many(
            {"required_skills": skill_id},
            {"$pull": {"required_skills": skill_id}, "$inc": {"version": 1}},
        )
        return result.modified_count

    async def count_in_category(self, category_id: str) -> int:
        return await self.collection.count_documents({"category": category_id})

    async def unset_category(self, category_id: str) -> int:
        result = await self.collection.update_many(
            {"category": category_id},
            {"$set": {"category": None}, "$inc": {"version": 1}},
        )
        return result.modified_count
