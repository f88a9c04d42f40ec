from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IncidentStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    REJECTED = "Rejected"

    @classmethod
    def values(cls):
        return [s.value for s in cls]


class IncidentFields(BaseModel):
    title: str
    details: str
    address: str
    landmark: Optional[str] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value

    @field_validator("details", "address")
    @classmethod
    def not_blank(cls, value: str, info) -> str:
        if not value.strip():
            raise ValueError(f"{info.field_name} must not be empty")
        return value

    @field_validator("landmark")
    @classmethod
    def blank_landmark_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value


class IncidentCreate(IncidentFields):
    image_url: str

    @field_validator("image_url")
    @classmethod
    def url_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("image_url must not be empty")
        return value


class StatusUpdate(BaseModel):
    status: str


class IncidentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    details: str
    address: str
    landmark: Optional[str] = None
    image_url: str = Field(serialization_alias="imageUrl")
    status: IncidentStatus
    created_at: datetime = Field(serialization_alias="createdAt")
