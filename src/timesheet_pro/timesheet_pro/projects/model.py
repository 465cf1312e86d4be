from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.enums import ProjectStatus


@dataclass(frozen=True)
class Project:
    project_id: int
    name: str
    manager_id: int
    company: str
    description: str = ""
    customer_name: str = ""
    job_name: str = ""
    team_leader_id: Optional[int] = None
    team_ids: Tuple[int, ...] = ()
    estimated_hours: float = 0.0
    # Derived from approved timesheets; see projects.aggregator.
    actual_hours: float = 0.0
    status: ProjectStatus = ProjectStatus.NOT_STARTED

    def involves(self, user_id: int) -> bool:
        return user_id in self.team_ids or user_id == self.manager_id or user_id == self.team_leader_id


@dataclass(frozen=True)
class ProjectDraft:
    name: str
    description: str = ""
    manager_id: Optional[int] = None
    team_leader_id: Optional[int] = None
    team_ids: Tuple[int, ...] = ()
    customer_name: str = ""
    job_name: str = ""
    estimated_hours: float = 0.0
    status: ProjectStatus = ProjectStatus.NOT_STARTED
