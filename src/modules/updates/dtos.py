"""System update DTOs for the Service Layer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class CreateSystemUpdateDTO(BaseModel):
    """Immutable DTO for announcement creation; both fields are required."""

    model_config = ConfigDict(frozen=True)

    title: str
    body: str

    @field_validator("title")
    @classmethod
    def title_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Update title is required.")
        return v.strip()

    @field_validator("body")
    @classmethod
    def body_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Update body is required.")
        return v.strip()
