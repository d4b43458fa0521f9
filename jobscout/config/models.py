"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..domain.models import Company, ProviderType
from .duration import DurationParseError, parse_duration, validate_duration_range


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class CompanyConfig(BaseModel):
    """A company entry in the YAML file.

    Mirrors :class:`jobscout.domain.models.Company`; provider identifiers are
    optional here because a missing one only causes that company to be skipped.
    """

    name: str = Field(..., min_length=1, description="Company display name")
    provider: ProviderType = Field(..., description="ATS provider")
    careers_url: str = Field("", description="Public careers page")
    greenhouse_id: Optional[str] = None
    lever_id: Optional[str] = None
    workday_id: Optional[str] = None
    workday_site: str = "External_Career"
    ashby_id: Optional[str] = None
    smartrecruiters_id: Optional[str] = None
    active: bool = Field(True, description="Whether to poll this company")

    @field_validator("name")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from the name."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    def to_domain(self) -> Company:
        return Company(**self.model_dump())


class ExpiryConfig(BaseModel):
    """Expiry tracking settings."""

    threshold: int = Field(
        3, ge=1, le=100, description="Consecutive missed passes before a job expires"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Advanced runtime settings."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for ATS calls (seconds)"
    )
    user_agent: str = Field(
        "jobscout/1.0", min_length=1, description="User-Agent string for HTTP requests"
    )
    max_jobs_per_company: int = Field(
        1000, ge=0, description="Maximum jobs to keep per company (0 = unlimited)"
    )
    max_workers: int = Field(
        4, ge=1, le=32, description="Companies scraped concurrently"
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Strip whitespace from user agent."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object for jobscout."""

    companies: List[CompanyConfig] = Field(
        default_factory=list, description="Companies to monitor"
    )
    scan_interval: str = Field("6h", description="Polling interval between search passes")
    expiry: ExpiryConfig = Field(default_factory=ExpiryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)

    scan_interval_seconds: Optional[int] = None

    @field_validator("scan_interval")
    @classmethod
    def validate_scan_interval(cls, v: str) -> str:
        """Validate and parse scan interval."""
        try:
            validate_duration_range(parse_duration(v), min_seconds=300, max_seconds=86400)
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def validate_companies_and_compute_fields(self):
        """Reject duplicate company names and compute derived fields."""
        seen = set()
        for company in self.companies:
            key = company.name.lower()
            if key in seen:
                raise ValueError(f"Duplicate company: '{company.name}' appears multiple times")
            seen.add(key)

        self.scan_interval_seconds = parse_duration(self.scan_interval)
        return self

    def get_companies(self) -> List[Company]:
        """Return the configured companies as domain objects."""
        return [company.to_domain() for company in self.companies]
