"""Job API schemas."""

from decimal import Decimal
from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Largest value an INTEGER column holds
INT4_MAX = 2_147_483_647


class JobCreate(BaseModel):
    """Schema for creating a job."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, description="Job title")
    salary: Optional[int] = Field(None, ge=0, le=INT4_MAX, description="Annual salary")
    equity: Optional[Decimal] = Field(None, ge=0, le=1, description="Equity share between 0 and 1")
    company_handle: str = Field(
        ...,
        min_length=1,
        max_length=25,
        validation_alias=AliasChoices("company_handle", "companyHandle"),
        description="Handle of the owning company",
    )

    @field_validator("title", "company_handle", mode="before")
    @classmethod
    def strip_whitespace(cls, v: Any) -> Any:
        """Strip surrounding whitespace from text fields."""
        if isinstance(v, str):
            return v.strip()
        return v


class JobUpdate(BaseModel):
    """Schema for a partial job update. The owning company cannot change."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0, le=INT4_MAX)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)

    @field_validator("title", mode="before")
    @classmethod
    def strip_whitespace(cls, v: Any) -> Any:
        """Strip surrounding whitespace from the title."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: Optional[str]) -> str:
        """Title is a required column; it may be omitted but not cleared."""
        if v is None:
            raise ValueError("Title cannot be null")
        return v


class JobResponse(BaseModel):
    """Job record as exposed by the API."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Software Engineer",
                "salary": 100000,
                "equity": "0.05",
                "companyHandle": "acme",
            }
        },
    )

    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None
    company_handle: str = Field(alias="companyHandle")

    @field_validator("equity", mode="before")
    @classmethod
    def equity_as_string(cls, v: Any) -> Optional[str]:
        """Render numeric equity the way the database prints it."""
        if v is None or isinstance(v, str):
            return v
        return str(v)


class JobEnvelope(BaseModel):
    """Single job response body."""

    job: JobResponse


class JobListEnvelope(BaseModel):
    """Job list response body."""

    jobs: list[JobResponse]


class DeletedResponse(BaseModel):
    """Delete confirmation body."""

    deleted: str
