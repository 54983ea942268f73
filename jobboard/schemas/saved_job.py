from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from jobboard.models.job import JobPosting


class SavedJobCreate(BaseModel):
    """Schema for creating a saved job"""
    job_id: str


class SavedJobDetailResponse(BaseModel):
    """Saved entry with the full job"""
    saved_job_id: str
    saved_at: datetime
    job: JobPosting


class SavedJobCheck(BaseModel):
    is_saved: bool
    saved_job_id: Optional[str] = None
    saved_at: Optional[datetime] = None


class SavedJobStats(BaseModel):
    total: int
    active: int
    expired: int
    closed: int
