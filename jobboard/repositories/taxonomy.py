import re
from typing import Dict, List, Optional

from jobboard.models.taxonomy import JobCategory, Skill

from .base import MongoRepository


class SkillRepository(MongoRepository):
    collection_name = "skills"
    model = Skill
    duplicate_message = "A skill with this name already exists"
    unmanaged_fields = frozenset({"created_at"})

    async def get_by_name(self, name: str) -> Optional[Skill]:
        doc = await self.collection.find_one({"name": name.strip().lower()})
        return Skill.from_document(doc)

    async def list(self, category: Optional[str] = None, active_only: bool = True) -> List[Skill]:
        query = {}
        if category:
            query["category"] = category
        if active_only:
            query["is_active"] = True
        return await self._find(query, sort=[("name", 1)])

    async def search(self, text: str, active_only: bool = True, limit: int = 20) -> List[Skill]:
        query = {"name": {"$regex": re.escape(text.strip().lower())}}
        if active_only:
            query["is_active"] = True
        return await self._find(query, sort=[("name", 1)], limit=limit)


class CategoryRepository(MongoRepository):
    collection_name = "job_categories"
    model = JobCategory
    duplicate_message = "A category with this name already exists"
    unmanaged_fields = frozenset({"created_at"})

    async def parent_map(self) -> Dict[str, Optional[str]]:
        cursor = self.collection.find({}, {"parent_category": 1})
        return {str(doc["_id"]): doc.get("parent_category") async for doc in cursor}

    async def list(
        self,
        parent_id: Optional[str] = None,
        top_level: bool = False,
        active_only: bool = True,
        search: Optional[str] = None,
    ) -> List[JobCategory]:
        query = {}
        if search and search.strip():
            query["name"] = {"$regex": re.escape(search.strip()), "$options": "i"}
        if top_level:
            query["parent_category"] = None
        elif parent_id is not None:
            query["parent_category"] = parent_id
        if active_only:
            query["is_active"] = True
        return await self._find(query, sort=[("name", 1)])

    async def count_children(self, category_id: str) -> int:
        return await self.collection.count_documents({"parent_category": category_id})

    async def detach_children(self, category_id: str) -> int:
        result = await self.collection.update_many(
            {"parent_category": category_id},
            {"$set": {"parent_category": None}, "$inc": {"version": 1}},
        )
        return result.modified_count
