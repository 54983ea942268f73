# ========================================
# jobboard/services/taxonomy.py
# ========================================
"""Admin management of the skill and job-category reference data."""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from jobboard.config import MAX_CATEGORY_DEPTH
from jobboard.lifecycle import guards
from jobboard.lifecycle.actors import Actor, require_admin
from jobboard.lifecycle.errors import NotFound, ValidationError
from jobboard.models.base import utcnow
from jobboard.models.taxonomy import JobCategory, Skill

logger = logging.getLogger(__name__)

SKILL_FIELDS = ("name", "category", "is_active")
CATEGORY_FIELDS = ("name", "description", "icon", "parent_category", "is_active")


def _validate(model, data: Dict[str, Any]):
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


class TaxonomyService:
    def __init__(self, skills, categories, jobs, profiles, max_category_depth: int = MAX_CATEGORY_DEPTH):
        self.skills = skills
        self.categories = categories
        self.jobs = jobs
        self.profiles = profiles
        self.max_category_depth = max_category_depth

    # ===========================
    # SKILLS
    # ===========================

    async def get_skill(self, skill_id: str) -> Skill:
        skill = await self.skills.get(skill_id)
        if skill is None:
            raise NotFound("Skill not found", skill_id=skill_id)
        return skill

    async def list_skills(self, category: Optional[str] = None, active_only: bool = True) -> List[Skill]:
        return await self.skills.list(category=category, active_only=active_only)

    async def search_skills(self, text: str, active_only: bool = True, limit: int = 20) -> List[Skill]:
        if not text or not text.strip():
            raise ValidationError("Please provide a search term")
        return await self.skills.search(text, active_only=active_only, limit=limit)

    async def create_skill(self, actor: Actor, name: str, category: str = "other") -> Skill:
        require_admin(actor, "create skills")
        skill = await self.skills.insert(_validate(Skill, {"name": name, "category": category}))
        logger.info("Skill %s (%s) created by %s", skill.id, skill.name, actor.actor_id)
        return skill

    async def find_or_create_skill(self, name: str, category: str = "other") -> Skill:
        existing = await self.skills.get_by_name(name)
        if existing is not None:
            return existing
        return await self.skills.insert(_validate(Skill, {"name": name, "category": category}))

    async def update_skill(self, actor: Actor, skill_id: str, changes: Dict[str, Any]) -> Skill:
        require_admin(actor, "update skills")
        skill = await self.get_skill(skill_id)
        data = skill.model_dump()
        data.update({k: v for k, v in changes.items() if k in SKILL_FIELDS and v is not None})
        data["updated_at"] = utcnow()
        return await self.skills.save(_validate(Skill, data))

    async def set_skill_active(self, actor: Actor, skill_id: str, is_active: Optional[bool] = None) -> Skill:
        """Activate, deactivate, or with ``is_active=None`` toggle."""
        require_admin(actor, "update skills")
        skill = await self.get_skill(skill_id)
        target = (not skill.is_active) if is_active is None else is_active
        return await self.skills.save(skill.model_copy(update={"is_active": target, "updated_at": utcnow()}))

    async def delete_skill(self, actor: Actor, skill_id: str, force: bool = False) -> Dict[str, int]:
        """Delete a skill; ``force`` also strips it from every job and profile."""
        require_admin(actor, "delete skills")
        skill = await self.get_skill(skill_id)
        usage = await self.jobs.count_with_skill(skill.id) + await self.profiles.count_with_skill(skill.id)
        guards.ensure_skill_deletable(skill, usage, force=force)

        detached_jobs = detached_profiles = 0
        if usage:
            detached_jobs = await self.jobs.pull_skill(skill.id)
            detached_profiles = await self.profiles.pull_skill(skill.id)
            logger.warning(
                "Force-deleting skill %s (%s): removed from %d job(s) and %d profile(s)",
                skill.id, skill.name, detached_jobs, detached_profiles,
            )
        await self.skills.delete(skill.id)
        logger.info("Skill %s deleted by %s", skill.id, actor.actor_id)
        return {"jobs_updated": detached_jobs, "profiles_updated": detached_profiles}

    # ===========================
    # CATEGORIES
    # ===========================

    async def get_category(self, category_id: str) -> JobCategory:
        category = await self.categories.get(category_id)
        if category is None:
            raise NotFound("Category not found", category_id=category_id)
        return category

    async def list_categories(
        self,
        parent_id: Optional[str] = None,
        top_level: bool = False,
        active_only: bool = True,
        search: Optional[str] = None,
    ) -> List[JobCategory]:
        return await self.categories.list(
            parent_id=parent_id, top_level=top_level, active_only=active_only, search=search
        )

    async def create_category(self, actor: Actor, data: Dict[str, Any]) -> JobCategory:
        require_admin(actor, "create categories")
        fields = {k: v for k, v in data.items() if k in CATEGORY_FIELDS}
        category = _validate(JobCategory, fields)
        guards.validate_category_parent(
            None, category.parent_category, await self.categories.parent_map(), self.max_category_depth
        )
        created = await self.categories.insert(category)
        logger.info("Category %s (%s) created by %s", created.id, created.name, actor.actor_id)
        return created

    async def update_category(self, actor: Actor, category_id: str, changes: Dict[str, Any]) -> JobCategory:
        require_admin(actor, "update categories")
        category = await self.get_category(category_id)
        fields = {k: v for k, v in changes.items() if k in CATEGORY_FIELDS}
        if "parent_category" in fields and fields["parent_category"] != category.parent_category:
            guards.validate_category_parent(
                category.id, fields["parent_category"], await self.categories.parent_map(), self.max_category_depth
            )
        data = category.model_dump()
        data.update(fields)
        data["updated_at"] = utcnow()
        return await self.categories.save(_validate(JobCategory, data))

    async def delete_category(self, actor: Actor, category_id: str, force: bool = False) -> Dict[str, int]:
        """Delete an unused category; ``force`` detaches its subcategories and jobs first."""
        require_admin(actor, "delete categories")
        category = await self.get_category(category_id)
        children = await self.categories.count_children(category.id)
        job_count = await self.jobs.count_in_category(category.id)
        guards.ensure_category_deletable(category, children, job_count, force=force)

        detached_children = detached_jobs = 0
        if children or job_count:
            detached_children = await self.categories.detach_children(category.id)
            detached_jobs = await self.jobs.unset_category(category.id)
            logger.warning(
                "Force-deleting category %s (%s): detached %d subcategories and %d job(s)",
                category.id, category.name, detached_children, detached_jobs,
            )
        await self.categories.delete(category.id)
        logger.info("Category %s deleted by %s", category.id, actor.actor_id)
        return {"subcategories_detached": detached_children, "jobs_updated": detached_jobs}

    async def category_path(self, category_id: str) -> str:
        """Full path such as ``Technology > Web Development``."""
        names: List[str] = []
        seen = set()
        current = await self.get_category(category_id)
        while current is not None and current.id not in seen:
            seen.add(current.id)
            names.append(current.name)
            current = await self.categories.get(current.parent_category) if current.parent_category else None
        return " > ".join(reversed(names))

    async def category_tree(self, active_only: bool = True) -> List[Dict[str, Any]]:
        tree = []
        for parent in await self.categories.list(top_level=True, active_only=active_only):
            children = await self.categories.list(parent_id=parent.id, active_only=active_only)
            tree.append({**parent.model_dump(), "subcategories": [c.model_dump() for c in children]})
        return tree
