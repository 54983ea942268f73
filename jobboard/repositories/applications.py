from typing import List, Optional

from jobboard.models.application import Application

from .base import MongoRepository


class ApplicationRepository(MongoRepository):
    collection_name = "applications"
    model = Application
    duplicate_message = "You have already applied to this job"
    unmanaged_fields = frozenset({"applied_at"})

    async def exists(self, job_id: str, jobseeker_id: str) -> bool:
        count = await self.collection.count_documents({"job_id": job_id, "jobseeker_id": jobseeker_id}, limit=1)
        return count > 0

    async def count_for_job(self, job_id: str) -> int:
        return await self.collection.count_documents({"job_id": job_id})

    async def list_for_job(self, job_id: str, status: Optional[str] = None) -> List[Application]:
        query = {"job_id": job_id}
        if status:
            query["status"] = status
        return await self._find(query, sort=[("applied_at", -1)])

    async def list_for_seeker(self, jobseeker_id: str, status: Optional[str] = None) -> List[Application]:
        query = {"jobseeker_id": jobseeker_id}
        if status:
            query["status"] = status
        return await self._find(query, sort=[("applied_at", -1)])

    async def list_for_recruiter(self, recruiter_id: str, status: Optional[str] = None) -> List[Application]:
        query = {"recruiter_id": recruiter_id}
        if status:
            query["status"] = status
        return await self._find(query, sort=[("applied_at", -1)])
