from typing import Literal, Optional

from pydantic import Field, computed_field, field_validator

from .base import MongoBaseModel, UTCDateTime, utcnow

SkillCategory = Literal["technical", "soft-skill", "tool", "language", "framework", "other"]


class Skill(MongoBaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: SkillCategory = "other"
    is_active: bool = True
    created_at: UTCDateTime = Field(default_factory=utcnow)
    updated_at: UTCDateTime = Field(default_factory=utcnow)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return value.strip().lower()

    @computed_field
    @property
    def display_name(self) -> str:
        return " ".join(word[:1].upper() + word[1:] for word in self.name.split(" "))


class JobCategory(MongoBaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = None
    parent_category: Optional[str] = None
    is_active: bool = True
    created_at: UTCDateTime = Field(default_factory=utcnow)
    updated_at: UTCDateTime = Field(default_factory=utcnow)

    @computed_field
    @property
    def is_subcategory(self) -> bool:
        return self.parent_category is not None
