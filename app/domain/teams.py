"""
app/domain/teams.py

Fixed team catalogue and per-source classification settings.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


@dataclass(frozen=True)
class TeamProfile:
    """
    One production team.

    ``name`` is the label stored on completed tasks; ``source_label`` is the
    abbreviation the tracker uses inside custom-field names such as
    ``"PLA Difficult"`` or ``"Tool/CTST PLA"``.
    """

    name: str
    source_label: str

    @property
    def difficulty_field(self) -> str:
        return f"{self.source_label} Difficult"

    @property
    def tool_field(self) -> str:
        return f"Tool/CTST {self.source_label}"


TEAM_PLAYABLE = TeamProfile(name="Playable", source_label="PLA")
TEAM_ART = TeamProfile(name="Art", source_label="Art")
TEAM_VIDEO = TeamProfile(name="Video", source_label="Video")
TEAM_CONCEPT = TeamProfile(name="Concept", source_label="Concept")

ALL_TEAMS: tuple[TeamProfile, ...] = (TEAM_PLAYABLE, TEAM_ART, TEAM_VIDEO, TEAM_CONCEPT)

PROJECT_FIELD = "Game Name"
CONCEPT_DONE_DATE_FIELD = "Ngày tick Done Concept"

# Tags used in the concept space to route work to other teams.
TAG_PLAYABLE = "pla"
TAG_CPP = "cpp"
TAG_ICON = "icon"
TAG_BANNER = "banner"
TAG_VIDEO = "vid"
TAG_CONCEPT_DONE = "concept done"

PLAYABLE_SOURCE_TASK_TYPE = "pla"
PLAYABLE_TASK_TYPE = "playable"
ART_ASSET_TASK_TYPE = "art_asset"


class AssigneePolicy(str, enum.Enum):
    """
    Which assignee of a multi-assignee task becomes the completed task owner.
    """

    FIRST = "first"
    PREFER_SECOND = "prefer_second"


class TeamGroup(str, enum.Enum):
    CREATIVE = "creative"
    PRODUCTION = "production"


@dataclass(frozen=True)
class TaskSource:
    """
    One fetch-and-classify source: a tracker space filtered by tag for a team.

    When ``done_date_field`` is set the completion instant is read from that
    custom field instead of the task's own ``date_done``.
    """

    team: TeamProfile
    space_id: str
    tag: str = ""
    completed_only: bool = True
    done_date_field: str | None = None
    assignee_policy: AssigneePolicy = AssigneePolicy.PREFER_SECOND

    @property
    def label(self) -> str:
        suffix = f":{self.tag}" if self.tag else ""
        return f"{self.team.name}{suffix}@{self.space_id}"


def derive_task_type(team: TeamProfile, tag: str) -> str:
    """
    Map a team plus the source tag to the canonical task-type label.
    """

    if team.name == TEAM_ART.name:
        normalized_tag = tag.strip().lower()
        if not normalized_tag:
            return ART_ASSET_TASK_TYPE
        return f"art_{normalized_tag}"

    task_type = team.source_label.lower()
    if task_type == PLAYABLE_SOURCE_TASK_TYPE:
        return PLAYABLE_TASK_TYPE
    return task_type


def team_for_task_type(task_type: str) -> TeamProfile | None:
    """
    Reverse lookup used by the reconciliation report.
    """

    if task_type.startswith("art_"):
        return TEAM_ART
    if task_type == PLAYABLE_TASK_TYPE:
        return TEAM_PLAYABLE
    if task_type == TEAM_VIDEO.source_label.lower():
        return TEAM_VIDEO
    if task_type == TEAM_CONCEPT.source_label.lower():
        return TEAM_CONCEPT
    return None
