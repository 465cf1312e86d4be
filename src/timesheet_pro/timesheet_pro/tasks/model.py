from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from ..core.enums import TaskStatus


@dataclass(frozen=True)
class Task:
    task_id: int
    project_id: int
    title: str
    description: str = ""
    assigned_to: Tuple[int, ...] = ()
    status: TaskStatus = TaskStatus.TODO
    deadline: Optional[date] = None
    completion_date: Optional[date] = None


@dataclass(frozen=True)
class TaskDraft:
    project_id: int
    title: str
    description: str = ""
    assigned_to: Tuple[int, ...] = ()
    status: TaskStatus = TaskStatus.TODO
    deadline: Optional[date] = None
    completion_date: Optional[date] = None
