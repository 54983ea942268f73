from typing import List, Optional

from pydantic import BaseModel

from jobboard.models.taxonomy import JobCategory, SkillCategory


class SkillCreate(BaseModel):
    name: str
    category: SkillCategory = "other"


class SkillUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[SkillCategory] = None
    is_active: Optional[bool] = None


class CategoryCreate(BaseModel):
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    parent_category: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    parent_category: Optional[str] = None
    is_active: Optional[bool] = None


class CategoryTreeNode(JobCategory):
    subcategories: List[JobCategory] = []


class DeleteResult(BaseModel):
    message: str
    details: dict = {}
