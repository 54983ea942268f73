# ========================================
# jobboard/schemas/job.py
# ========================================

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel

from jobboard.models.job import (
    EducationRequirement,
    EmploymentType,
    ExperienceLevel,
    ExperienceRange,
    JobLocation,
    JobPosting,
    SalaryRange,
    ScreeningQuestion,
)


# 1. Input: What the Recruiter sends
class JobCreate(BaseModel):
    title: str
    description: str
    experience_level: ExperienceLevel
    employment_type: EmploymentType
    required_skills: List[str] = []
    qualifications: List[str] = []
    experience_years: Optional[ExperienceRange] = None
    education: Optional[EducationRequirement] = None
    salary: Optional[SalaryRange] = None
    location: Optional[JobLocation] = None
    number_of_openings: int = 1
    application_deadline: Optional[datetime] = None
    screening_questions: List[ScreeningQuestion] = []
    category: Optional[str] = None


# 2. Input: Update existing job (status only for draft -> pending-approval)
class JobUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    experience_level: Optional[ExperienceLevel] = None
    employment_type: Optional[EmploymentType] = None
    required_skills: Optional[List[str]] = None
    qualifications: Optional[List[str]] = None
    experience_years: Optional[ExperienceRange] = None
    education: Optional[EducationRequirement] = None
    salary: Optional[SalaryRange] = None
    location: Optional[JobLocation] = None
    number_of_openings: Optional[int] = None
    application_deadline: Optional[datetime] = None
    screening_questions: Optional[List[ScreeningQuestion]] = None
    category: Optional[str] = None
    status: Optional[Literal["pending-approval"]] = None


# 3. Close / mark filled
class JobCloseRequest(BaseModel):
    reason: Literal["closed", "filled"] = "closed"


# 4. Admin moderation
class JobRejectRequest(BaseModel):
    notes: str


class BulkApproveRequest(BaseModel):
    job_ids: List[str]


class BulkApproveFailure(BaseModel):
    job_id: str
    reason: str


class BulkApproveResponse(BaseModel):
    approved: List[str]
    failed: List[BulkApproveFailure]


# 5. Listing & search
JobSortField = Literal["posted_at", "created_at", "salary", "views", "title"]


class JobPage(BaseModel):
    """One page of a job listing"""
    jobs: List[JobPosting]
    count: int
    total: int
    page: int
    total_pages: int
