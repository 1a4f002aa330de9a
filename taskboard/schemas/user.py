from datetime import datetime

from pydantic import BaseModel, field_validator, model_validator
from taskboard.utils.validation import sanitize_string, is_valid_email


class UserBase(BaseModel):
    name: str | None = None
    email: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class UserCreate(UserBase):

    @model_validator(mode="after")
    def check_fields(self):
        if not self.name or not self.email:
            raise ValueError("Name and email are required")
        if not is_valid_email(self.email):
            raise ValueError("Invalid email format")
        return self


class UserUpdate(UserBase):
    """Patch body: only non-empty fields are written."""

    @model_validator(mode="after")
    def check_fields(self):
        if not self.name and not self.email:
            raise ValueError("At least name or email must be provided")
        if self.email and not is_valid_email(self.email):
            raise ValueError("Invalid email format")
        return self

    def changes(self) -> dict:
        columns = {}
        if self.name:
            columns["username"] = self.name
        if self.email:
            columns["email"] = self.email
        return columns


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
