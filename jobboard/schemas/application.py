# ========================================
# jobboard/schemas/application.py
# ========================================

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from jobboard.models.application import ResumeSnapshot, ScreeningAnswer


# 1. Input: Create Application
class ApplicationCreate(BaseModel):
    job_id: str
    cover_letter: Optional[str] = None
    screening_answers: List[ScreeningAnswer] = []
    resume_used: Optional[ResumeSnapshot] = None


# 2. Input: Update Status
class ApplicationStatusUpdate(BaseModel):
    status: str
    notes: str = ""


# 3. Recruiter actions
class RecruiterNoteCreate(BaseModel):
    note: str


class RatingUpdate(BaseModel):
    # float accepted so 4.0 passes and 4.5 gets the lifecycle's message
    rating: float


class InterviewSchedule(BaseModel):
    scheduled_at: datetime
    meeting_link: str = ""
    notes: str = ""


# 4. Output: per-status counts for one job
class ApplicationStats(BaseModel):
    total: int = 0
    submitted: int = 0
    reviewed: int = 0
    shortlisted: int = 0
    interviewing: int = 0
    rejected: int = 0
    offered: int = 0
    hired: int = 0
    withdrawn: int = 0
