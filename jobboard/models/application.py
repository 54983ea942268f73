from typing import List, Literal, Optional

from pydantic import BaseModel, Field, computed_field

from .base import MongoBaseModel, UTCDateTime, utcnow

ApplicationStatus = Literal[
    "submitted",
    "reviewed",
    "shortlisted",
    "interviewing",
    "rejected",
    "offered",
    "hired",
    "withdrawn",
]

APPLICATION_STATUSES = (
    "submitted",
    "reviewed",
    "shortlisted",
    "interviewing",
    "rejected",
    "offered",
    "hired",
    "withdrawn",
)

CLOSED_STATUSES = ("rejected", "hired", "withdrawn")
WITHDRAWABLE_STATUSES = ("submitted", "reviewed")


class StatusHistoryEntry(BaseModel):
    status: ApplicationStatus
    changed_by: str
    changed_at: UTCDateTime = Field(default_factory=utcnow)
    notes: str = Field("", max_length=500)


class RecruiterNote(BaseModel):
    note: str = Field(..., min_length=1, max_length=1000)
    created_by: str
    created_at: UTCDateTime = Field(default_factory=utcnow)


class InterviewDetails(BaseModel):
    scheduled_at: Optional[UTCDateTime] = None
    meeting_link: str = ""
    notes: str = Field("", max_length=1000)


class ScreeningAnswer(BaseModel):
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1, max_length=1000)


class ResumeSnapshot(BaseModel):
    file_name: Optional[str] = None
    file_url: Optional[str] = None


class Application(MongoBaseModel):
    job_id: str
    jobseeker_id: str
    # copied from the job at creation so ownership checks never need the job
    recruiter_id: str

    cover_letter: Optional[str] = Field(None, max_length=3000)
    resume_used: Optional[ResumeSnapshot] = None
    screening_answers: List[ScreeningAnswer] = []

    status: ApplicationStatus = "submitted"
    status_history: List[StatusHistoryEntry] = []
    recruiter_notes: List[RecruiterNote] = []
    rating: Optional[int] = Field(None, ge=1, le=5)
    interview_details: Optional[InterviewDetails] = None

    applied_at: UTCDateTime = Field(default_factory=utcnow)
    last_updated: UTCDateTime = Field(default_factory=utcnow)

    @computed_field
    @property
    def is_active(self) -> bool:
        return self.status not in CLOSED_STATUSES

    @computed_field
    @property
    def can_withdraw(self) -> bool:
        return self.status in WITHDRAWABLE_STATUSES

    @computed_field
    @property
    def has_interview(self) -> bool:
        return bool(self.interview_details and self.interview_details.scheduled_at)

    @computed_field
    @property
    def days_since_applied(self) -> int:
        return abs(utcnow() - self.applied_at).days
