from pydantic import Field

from .base import MongoBaseModel, UTCDateTime, utcnow


class SavedJob(MongoBaseModel):
    jobseeker_id: str
    job_id: str
    saved_at: UTCDateTime = Field(default_factory=utcnow)
