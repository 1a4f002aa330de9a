from pydantic import BaseModel, field_validator, model_validator
from datetime import datetime
from taskboard.utils.validation import sanitize_string, is_valid_priority, PRIORITY_ERROR


class TaskCreate(BaseModel):
    title: str | None = None
    description: str | None = None
    priority: str | None = "medium"
    user_id: int | None = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)

    @model_validator(mode="after")
    def check_fields(self):
        if not self.title or not self.user_id:
            raise ValueError("Title and user_id are required")
        if not is_valid_priority(self.priority):
            raise ValueError(PRIORITY_ERROR)
        return self


class TaskUpdate(BaseModel):
    """
    Patch body for a task.

    ``title`` and ``priority`` count only when non-empty. ``description`` and
    ``completed`` count whenever the key is present, so a task's description
    can be cleared with an explicit null.
    """
    title: str | None = None
    description: str | None = None
    completed: bool | None = None
    priority: str | None = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)

    @field_validator("completed", mode="before")
    @classmethod
    def coerce_completed(cls, v):
        # Any JSON value counts by truthiness; null means not completed
        return bool(v)

    @model_validator(mode="after")
    def check_fields(self):
        supplied = self.model_fields_set
        if not (self.title or "description" in supplied or "completed" in supplied or self.priority):
            raise ValueError("At least one field must be provided for update")
        if self.priority and not is_valid_priority(self.priority):
            raise ValueError(PRIORITY_ERROR)
        return self

    def changes(self) -> dict:
        supplied = self.model_fields_set
        columns = {}
        if self.title:
            columns["title"] = self.title
        if "description" in supplied:
            columns["description"] = self.description
        if "completed" in supplied:
            columns["completed"] = bool(self.completed)
        if self.priority:
            columns["priority"] = self.priority
        return columns


class TaskResponse(BaseModel):
    id: int
    title: str
    description: str | None = None
    priority: str
    completed: bool
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    username: str | None = None

    class Config:
        from_attributes = True
