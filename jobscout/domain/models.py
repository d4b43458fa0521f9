"""Core domain models for companies and job postings.

This module defines the data structures used throughout the application:
- Company: a watched employer and the ATS it publishes postings through
- ScrapedJob: transient structure produced by ATS adapters
- CanonicalJob: persisted job posting with lifecycle and scoring metadata
- JobFilters: listing criteria for stored jobs
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..utils.timestamps import ensure_utc


class ProviderType(str, Enum):
    """Supported ATS (Applicant Tracking System) providers."""

    GREENHOUSE = "greenhouse"
    LEVER = "lever"
    WORKDAY = "workday"
    ASHBY = "ashby"
    SMARTRECRUITERS = "smartrecruiters"
    CUSTOM = "custom"


class JobStatus(str, Enum):
    """Lifecycle and workflow states of a canonical job."""

    NEW = "new"
    SEEN = "seen"
    REVIEWED = "reviewed"
    APPLIED = "applied"
    INTERVIEW = "interview"
    REJECTED = "rejected"
    ARCHIVED = "archived"
    EXPIRED = "expired"


class Priority(str, Enum):
    """User-assigned job priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Company(BaseModel):
    """A watched company and its ATS configuration.

    Only the identifier matching ``provider`` is needed; the others are kept so a
    company can be switched between providers without losing its settings.
    """

    name: str = Field(..., min_length=1, description="Company display name")
    careers_url: str = Field("", description="Public careers page")
    provider: ProviderType = Field(..., description="ATS provider type")
    greenhouse_id: Optional[str] = Field(None, description="Greenhouse board token")
    lever_id: Optional[str] = Field(None, description="Lever site name")
    workday_id: Optional[str] = Field(None, description="Workday tenant")
    workday_site: str = Field("External_Career", description="Workday career site id")
    ashby_id: Optional[str] = Field(None, description="Ashby job board name")
    smartrecruiters_id: Optional[str] = Field(None, description="SmartRecruiters company id")
    active: bool = Field(True, description="Whether the company is polled")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Strip whitespace from the company name."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Company name cannot be empty or whitespace-only")
        return stripped

    @field_validator(
        "greenhouse_id", "lever_id", "workday_id", "ashby_id", "smartrecruiters_id"
    )
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank identifiers as missing."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None

    def provider_identifier(self) -> Optional[str]:
        """Return the identifier required by the configured provider, if any."""
        attribute = {
            ProviderType.GREENHOUSE: "greenhouse_id",
            ProviderType.LEVER: "lever_id",
            ProviderType.WORKDAY: "workday_id",
            ProviderType.ASHBY: "ashby_id",
            ProviderType.SMARTRECRUITERS: "smartrecruiters_id",
        }.get(self.provider)
        return getattr(self, attribute) if attribute else None

    model_config = {"json_schema_extra": {"example": {
        "name": "Linear",
        "careers_url": "https://linear.app/careers",
        "provider": "ashby",
        "ashby_id": "linear",
        "active": True,
    }}}


class ScrapedJob(BaseModel):
    """Job posting as produced by an ATS adapter.

    This is the transient structure that adapters return. It is never persisted
    directly; the pipeline turns new identities into CanonicalJob rows.
    """

    job_id: str = Field(..., description="Stable identity derived from company + title")
    company: str = Field(..., description="Company name")
    title: str = Field(..., description="Job title")
    url: str = Field(..., description="Direct link to the job posting")
    description: str = Field("", description="Plain-text description")
    requirements: str = Field("", description="Requirements excerpt")
    tech_stack: List[str] = Field(default_factory=list, description="Detected technologies")
    location: str = Field("Not specified", description="Job location")
    remote: bool = Field(False, description="Whether the posting looks remote-friendly")

    @field_validator("job_id", "company", "title", "url")
    @classmethod
    def strip_required(cls, v: str) -> str:
        """Strip whitespace from required string fields."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("location", mode="before")
    @classmethod
    def default_location(cls, v: Optional[str]) -> str:
        """Fall back to 'Not specified' for blank locations."""
        if v is None or not v.strip():
            return "Not specified"
        return v.strip()

    model_config = {"json_schema_extra": {"example": {
        "job_id": "3f1c0e...",
        "company": "Linear",
        "title": "Senior Backend Engineer",
        "url": "https://jobs.ashbyhq.com/linear/123",
        "description": "We are looking for a backend engineer...",
        "requirements": "Requirements: 5+ years of experience...",
        "tech_stack": ["Node.js", "PostgreSQL"],
        "location": "Remote (US)",
        "remote": True,
    }}}


class CanonicalJob(BaseModel):
    """Persisted job posting with lifecycle, workflow and scoring metadata.

    Created on the first sighting of an identity and updated on every later
    pass. Expired jobs are retained and only hidden from default listings.
    """

    job_id: str = Field(..., description="Stable identity derived from company + title")
    company: str = Field(..., description="Company name")
    title: str = Field(..., description="Job title")
    url: str = Field(..., description="Direct link to the job posting")
    description: str = Field("", description="Plain-text description")
    requirements: str = Field("", description="Requirements excerpt")
    tech_stack: List[str] = Field(default_factory=list, description="Detected technologies")
    location: str = Field("Not specified", description="Job location")
    remote: bool = Field(False, description="Whether the posting looks remote-friendly")
    status: JobStatus = Field(JobStatus.NEW, description="Lifecycle / workflow status")
    priority: Priority = Field(Priority.MEDIUM, description="User priority")
    alignment_score: Optional[float] = Field(None, description="Last computed fit score (0-100)")
    strong_matches: List[str] = Field(default_factory=list, description="Matched strengths")
    gaps: List[str] = Field(default_factory=list, description="Identified gaps")
    notes: Optional[str] = Field(None, description="User notes")
    found_at: datetime = Field(..., description="First sighting (UTC)")
    last_updated: datetime = Field(..., description="Last modification (UTC)")
    last_seen_at: datetime = Field(..., description="Last pass that saw the posting (UTC)")
    expired_at: Optional[datetime] = Field(None, description="When the job was marked expired")
    expiry_check_count: int = Field(0, ge=0, description="Consecutive passes without a sighting")

    @field_validator("found_at", "last_updated", "last_seen_at", "expired_at")
    @classmethod
    def normalize_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)

    @property
    def is_expired(self) -> bool:
        return self.status == JobStatus.EXPIRED

    model_config = {"use_enum_values": False}


class JobFilters(BaseModel):
    """Criteria for listing stored jobs. Unset fields do not filter.

    Expired jobs are hidden unless ``include_expired`` is set or ``status`` is
    ``expired``.
    """

    status: Optional[JobStatus] = None
    priority: Optional[Priority] = None
    companies: Optional[List[str]] = None
    min_alignment: Optional[float] = Field(None, ge=0, le=100)
    remote: Optional[bool] = None
    include_expired: bool = False
    limit: Optional[int] = Field(None, ge=1)
