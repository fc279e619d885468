"""
app/schemas/staff.py

Staff directory schemas.
"""

from __future__ import annotations

from pydantic import BaseModel


class StaffMemberQueryRequest(BaseModel):
    teams: list[str] = []


class StaffMemberResponse(BaseModel):
    email: str
    name: str
    team: str
    role: str | None

    model_config = {"from_attributes": True}
