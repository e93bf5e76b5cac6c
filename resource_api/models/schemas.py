"""Pydantic schemas for request/response validation"""
from pydantic import BaseModel, ConfigDict, Field, validator
from typing import Any, List, Optional, Tuple
from datetime import datetime, timezone
from uuid import UUID

from resource_api.core.management import DEFAULT_PAGE, DEFAULT_PER_PAGE, Searchable


class NewUser(BaseModel):
    """Input schema for user creation and update"""
    first_name: str = Field(..., min_length=1, description="First name", examples=["Jules"])
    last_name: str = Field(..., min_length=1, description="Last name", examples=["RAKOTOBE"])
    email: str = Field(..., min_length=3, description="Email address", examples=["jules.rak@example.com"])

    @validator("first_name", "last_name", "email")
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Field cannot be empty or whitespace only")
        return v.strip()


class User(NewUser):
    """A stored user"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Server-assigned identifier")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")


class UserSearchPage(BaseModel):
    """One page of users"""
    num_pages: int = Field(..., ge=0, description="Total number of pages")
    result: List[User] = Field(..., description="Users of the requested page")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class QuerySearch(BaseModel, Searchable):
    """Query-string search criteria"""
    id: Optional[str] = Field(None, description="Exact user identifier")
    pattern: Optional[str] = Field(None, description="Exact first name, last name or email")
    start_date: Optional[datetime] = Field(None, description="Inclusive lower bound")
    end_date: Optional[datetime] = Field(None, description="Inclusive upper bound")
    page: Optional[int] = Field(None, description="1-based page number")
    per_page: Optional[int] = Field(None, description="Page size")

    def get_id(self) -> Optional[Any]:
        return self.id

    def get_pattern(self) -> Optional[str]:
        return self.pattern

    def get_date_range(self) -> Optional[Tuple[datetime, datetime]]:
        if self.start_date is None or self.end_date is None:
            return None
        return _as_utc(self.start_date), _as_utc(self.end_date)

    def get_page(self) -> int:
        if self.page is None or self.page < 1:
            return DEFAULT_PAGE
        return self.page

    def get_per_page(self) -> int:
        if self.per_page is None or self.per_page < 1:
            return DEFAULT_PER_PAGE
        return self.per_page


class HealthCheck(BaseModel):
    """Health check response"""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    database_reachable: bool = Field(..., description="Whether the database answers")
    version: str = Field(..., description="API version")


class ErrorResponse(BaseModel):
    """Error response schema"""
    error: str = Field(..., description="Error kind")
    detail: str = Field(..., description="Error details")
    path: str = Field(..., description="Request path")
