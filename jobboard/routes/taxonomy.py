# ========================================
# jobboard/routes/taxonomy.py
# ========================================

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from jobboard.lifecycle.actors import Actor
from jobboard.models.taxonomy import JobCategory, Skill
from jobboard.routes.deps import check_object_id, get_taxonomy_service
from jobboard.schemas.taxonomy import (
    CategoryCreate,
    CategoryTreeNode,
    CategoryUpdate,
    DeleteResult,
    SkillCreate,
    SkillUpdate,
)
from jobboard.services.taxonomy import TaxonomyService
from jobboard.utils.auth import get_current_actor

router = APIRouter(tags=["Skills & Categories"])


# ===========================
# SKILLS
# ===========================

# ✅ 1. LIST SKILLS (Public)
@router.get("/skills", response_model=List[Skill])
async def list_skills(
    category: Optional[str] = Query(None),
    active_only: bool = Query(True),
    service: TaxonomyService = Depends(get_taxonomy_service),
):
    return await service.list_skills(category=category, active_only=active_only)


# ✅ 2. SEARCH SKILLS (Public, for autocomplete)
@router.get("/skills/search", response_model=List[Skill])
async def search_skills(
    q: str = Query(..., min_length=1, description="Part of the skill name"),
    include_inactive: bool = Query(False),
    limit: int = Query(20, ge=1, le=100),
    service: TaxonomyService = Depends(get_taxonomy_service),
):
    """Find skills whose name contains ``q``."""
    return await service.search_skills(q, active_only=not include_inactive, limit=limit)


# ✅ 3. CREATE SKILL (Admin)
@router.post("/skills", response_model=Skill, status_code=status.HTTP_201_CREATED)
async def create_skill(
    body: SkillCreate,
    actor: Actor = Depends(get_current_actor),
    service: TaxonomyService = Depends(get_taxonomy_service),
):
    """Add a skill. Names are stored lowercased and must be unique."""
    return await service.create_skill(actor, body.name, body.category)


# ✅ 4. UPDATE SKILL (Admin)
@router.put("/skills/{skill_id}", response_model=Skill)
async def update_skill(
    skill_id: str,
    body: SkillUpdate,
    actor: Actor = Depends(get_current_actor),
    service: TaxonomyService = Depends(get_taxonomy_service),
):
    check_object_id(skill_id, "skill")
    return await service.update_skill(actor, skill_id, body.model_dump(exclude_unset=True))


# ✅ 5. TOGGLE ACTIVE (Admin)
@router.put("/skills/{skill_id}/toggle", response_model=Skill)
async def toggle_skill(
    skill_id: str,
    actor: Actor = Depends(get_current_actor),
    service: TaxonomyService = Depends(get_taxonomy_service),
):
    check_object_id(skill_id, "skill")
    return await service.set_skill_active(actor, skill_id)


# ✅ 6. DELETE SKILL (Admin, guarded)
@router.delete("/skills/{skill_id}", response_model=DeleteResult)
async def delete_skill(
    skill_id: str,
    force: bool = Query(False, description="Also strip the skill from every job and profile"),
    actor: Actor = Depends(get_current_actor),
    service: TaxonomyService = Depends(get_taxonomy_service),
):
    """Delete a skill. Refused while jobs or profiles use it unless ``force=true``."""
    check_object_id(skill_id, "skill")
    details = await service.delete_skill(actor, skill_id, force=force)
    return {"message": "Skill deleted successfully", "details": details}


# ===========================
# CATEGORIES
# ===========================

# ✅ 7. LIST CATEGORIES (Public, flat)
@router.get("/categories", response_model=List[JobCategory])
async def list_categories(
    parent_id: Optional[str] = Query(None, description="Only subcategories of this category"),
    top_level: bool = Query(False, description="Only categories without a parent"),
    include_inactive: bool = Query(False),
    q: Optional[str] = Query(None, description="Part of the category name"),
    service: TaxonomyService = Depends(get_taxonomy_service),
):
    """Flat category list sorted by name."""
    return await service.list_categories(
        parent_id=parent_id, top_level=top_level, active_only=not include_inactive, search=q
    )


# ✅ 8. CATEGORY TREE (Public)
@router.get("/categories/tree", response_model=List[CategoryTreeNode])
async def category_tree(
    active_only: bool = Query(True),
    service: TaxonomyService = Depends(get_taxonomy_service),
):
    """Top-level categories, each with its direct subcategories."""
    return await service.category_tree(active_only=active_only)


# ✅ 9. CATEGORY PATH (Public)
@router.get("/categories/{category_id}/path")
async def category_path(category_id: str, service: TaxonomyService = Depends(get_taxonomy_service)):
    check_object_id(category_id, "category")
    return {"category_id": category_id, "path": await service.category_path(category_id)}


# ✅ 10. CREATE CATEGORY (Admin)
@router.post("/categories", response_model=JobCategory, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreate,
    actor: Actor = Depends(get_current_actor),
    service: TaxonomyService = Depends(get_taxonomy_service),
):
    return await service.create_category(actor, body.model_dump(exclude_none=True))


# ✅ 11. UPDATE CATEGORY (Admin)
@router.put("/categories/{category_id}", response_model=JobCategory)
async def update_category(
    category_id: str,
    body: CategoryUpdate,
    actor: Actor = Depends(get_current_actor),
    service: TaxonomyService = Depends(get_taxonomy_service),
):
    """Update a category. Re-parenting is checked for cycles and depth."""
    check_object_id(category_id, "category")
    return await service.update_category(actor, category_id, body.model_dump(exclude_unset=True))


# ✅ 12. DELETE CATEGORY (Admin, guarded)
@router.delete("/categories/{category_id}", response_model=DeleteResult)
async def delete_category(
    category_id: str,
    force: bool = Query(False, description="Detach subcategories and jobs instead of refusing"),
    actor: Actor = Depends(get_current_actor),
    service: TaxonomyService = Depends(get_taxonomy_service),
):
    """Delete a category. Refused while any subcategory or job references it unless ``force=true``."""
    check_object_id(category_id, "category")
    details = await service.delete_category(actor, category_id, force=force)
    return {"message": "Category deleted successfully", "details": details}
