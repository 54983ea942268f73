"""Read access to profiles owned by the user-management side of the app."""

from typing import Optional


class ProfileRepository:
    def __init__(self, db):
        self.db = db

    async def get_jobseeker_profile(self, user_id: str) -> Optional[dict]:
        return await self.db.jobseeker_profiles.find_one({"user_id": user_id})

    async def get_recruiter_profile(self, user_id: str) -> Optional[dict]:
        return await self.db.recruiter_profiles.find_one({"user_id": user_id})

    async def count_with_skill(self, skill_id: str) -> int:
        return await self.db.jobseeker_profiles.count_documents({"skills": skill_id})

    async def pull_skill(self, skill_id: str) -> int:
        result = await self.db.jobseeker_profiles.update_many({"skills": skill_id}, {"$pull": {"skills": skill_id}})
        return result.modified_count
