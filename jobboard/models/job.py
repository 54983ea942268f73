from typing import List, Literal, Optional

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from .base import MongoBaseModel, UTCDateTime, utcnow

JobStatus = Literal["draft", "pending-approval", "active", "closed", "filled", "rejected"]
EmploymentType = Literal["full-time", "part-time", "contract", "internship"]
ExperienceLevel = Literal["entry", "mid", "senior", "lead", "executive"]
RemoteType = Literal["fully-remote", "hybrid", "onsite"]
DegreeLevel = Literal["high-school", "associate", "bachelor", "master", "doctorate"]

JOB_STATUSES = ("draft", "pending-approval", "active", "closed", "filled", "rejected")

# Safety cap on applications per opening
APPLICATIONS_PER_OPENING = 100


class SalaryRange(BaseModel):
    min: Optional[float] = Field(None, ge=0)
    max: Optional[float] = Field(None, ge=0)
    currency: str = "USD"
    is_visible: bool = True

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def check_range(self):
        if self.min and self.max is not None and self.max < self.min:
            raise ValueError("Maximum salary must be greater than or equal to minimum salary")
        return self


class ExperienceRange(BaseModel):
    min: float = Field(0, ge=0)
    max: Optional[float] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_range(self):
        if self.min and self.max is not None and self.max < self.min:
            raise ValueError("Maximum experience must be greater than or equal to minimum experience")
        return self


class EducationRequirement(BaseModel):
    min_degree: Optional[DegreeLevel] = None
    preferred_fields: List[str] = []


class JobLocation(BaseModel):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    is_remote: bool = False
    remote_type: Optional[RemoteType] = None

    @model_validator(mode="after")
    def check_remote_type(self):
        if self.is_remote and not self.remote_type:
            raise ValueError("Remote type must be specified for remote jobs")
        return self


class ScreeningQuestion(BaseModel):
    question: str = Field(..., min_length=1, max_length=500)
    is_required: bool = False


class JobPosting(MongoBaseModel):
    recruiter_id: str
    company_id: str

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    required_skills: List[str] = []
    qualifications: List[str] = []
    experience_level: ExperienceLevel
    experience_years: ExperienceRange = Field(default_factory=ExperienceRange)
    education: EducationRequirement = Field(default_factory=EducationRequirement)
    salary: SalaryRange = Field(default_factory=SalaryRange)
    location: JobLocation = Field(default_factory=JobLocation)
    employment_type: EmploymentType
    number_of_openings: int = Field(1, ge=1)
    application_deadline: Optional[UTCDateTime] = None
    screening_questions: List[ScreeningQuestion] = []
    category: Optional[str] = None

    status: JobStatus = "draft"
    moderation_notes: Optional[str] = Field(None, max_length=1000)
    moderated_by: Optional[str] = None
    moderated_at: Optional[UTCDateTime] = None
    is_featured: bool = False

    views: int = Field(0, ge=0)
    application_count: int = Field(0, ge=0)

    created_at: UTCDateTime = Field(default_factory=utcnow)
    updated_at: UTCDateTime = Field(default_factory=utcnow)
    posted_at: Optional[UTCDateTime] = None
    closed_at: Optional[UTCDateTime] = None

    @field_validator("required_skills")
    @classmethod
    def dedupe_skills(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))

    @field_validator("qualifications")
    @classmethod
    def check_qualifications(cls, value: List[str]) -> List[str]:
        for item in value:
            if len(item) > 500:
                raise ValueError("Qualification cannot exceed 500 characters")
        return value

    @computed_field
    @property
    def full_location(self) -> Optional[str]:
        parts = [p for p in (self.location.city, self.location.state, self.location.country) if p]
        return ", ".join(parts) if parts else None

    @computed_field
    @property
    def salary_range(self) -> Optional[str]:
        low, high = self.salary.min, self.salary.max
        currency = self.salary.currency or "USD"
        if low and high:
            return f"{currency} {low:,.0f} - {high:,.0f}"
        if low:
            return f"{currency} {low:,.0f}+"
        if high:
            return f"Up to {currency} {high:,.0f}"
        return None

    @computed_field
    @property
    def is_expired(self) -> bool:
        if self.application_deadline is None:
            return False
        return utcnow() > self.application_deadline

    @computed_field
    @property
    def is_accepting_applications(self) -> bool:
        return (
            self.status == "active"
            and not self.is_expired
            and self.application_count < self.number_of_openings * APPLICATIONS_PER_OPENING
        )
