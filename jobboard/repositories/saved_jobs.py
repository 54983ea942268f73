from typing import List, Optional

from jobboard.models.saved_job import SavedJob

from .base import MongoRepository


class SavedJobRepository(MongoRepository):
    collection_name = "saved_jobs"
    model = SavedJob
    duplicate_message = "Job already saved"

    async def get_for(self, jobseeker_id: str, job_id: str) -> Optional[SavedJob]:
        doc = await self.collection.find_one({"jobseeker_id": jobseeker_id, "job_id": job_id})
        return SavedJob.from_document(doc)

    async def list_for_seeker(self, jobseeker_id: str) -> List[SavedJob]:
        return await self._find({"jobseeker_id": jobseeker_id}, sort=[("saved_at", -1)])

    async def list_all(self) -> List[SavedJob]:
        return await self._find({})

    async def delete_for(self, jobseeker_id: str, job_id: str) -> bool:
        result = await self.collection.delete_one({"jobseeker_id": jobseeker_id, "job_id": job_id})
        return result.deleted_count > 0
