"""
app/schemas/completion.py

Request and response schemas for completed-task queries.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class CompletedTaskQueryRequest(BaseModel):
    """
    Identifiers are assignee emails, or team names when ``is_team`` is set.
    """

    identifiers: list[str] = Field(..., min_length=1)
    start_date: datetime
    end_date: datetime
    is_team: bool = False

    @model_validator(mode="after")
    def _check_range(self) -> "CompletedTaskQueryRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be earlier than start_date.")
        return self


class CompletedTaskResponse(BaseModel):
    id: uuid.UUID
    task_id: str
    task_name: str
    assignee_id: str
    team: str
    task_type: str
    level: int
    tools: list[int]
    project: str
    done_date: datetime

    model_config = {"from_attributes": True}
