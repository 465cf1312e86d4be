from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .approvals.state_machine import ApprovalStateMachine
from .approvals.visibility import VisibilityResolver
from .common.datetime_utils import Clock, now_local
from .core.constants import DEFAULT_DATA_FILE
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .leaves.service import LeaveService
from .notifications.dispatcher import LiveAlertSink, NotificationDispatcher
from .notifications.service import NotificationService
from .projects.service import ProjectService
from .store.entity_store import EntityStore
from .store.json_file_backend import JsonFileBackend
from .store.memory_backend import MemoryBackend
from .store.mysql_backend import MySQLBackend
from .store.repository import CollectionBackend
from .tasks.service import TaskService
from .timesheets.service import TimesheetService
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    store: EntityStore
    resolver: VisibilityResolver
    dispatcher: NotificationDispatcher

    auth_service: AuthService
    user_service: UserService
    timesheet_service: TimesheetService
    leave_service: LeaveService
    project_service: ProjectService
    task_service: TaskService
    notification_service: NotificationService
    dashboard_service: DashboardService


def build_backend(
    store_backend: str,
    *,
    data_file: Optional[str] = None,
    db_config: Optional[Mapping] = None,
) -> CollectionBackend:
    kind = (store_backend or "json").lower()
    if kind == "memory":
        return MemoryBackend()
    if kind == "json":
        return JsonFileBackend(Path(data_file or DEFAULT_DATA_FILE))
    if kind == "mysql":
        return MySQLBackend(DatabaseConnection(DBConfig.from_mapping(db_config or {})))
    raise ValueError(f"Unknown STORE_BACKEND: {store_backend!r}")


def build_container(
    *,
    backend: CollectionBackend,
    clock: Clock = now_local,
    live_alert: Optional[LiveAlertSink] = None,
) -> Container:
    store = EntityStore(backend)
    resolver = VisibilityResolver()
    state_machine = ApprovalStateMachine(resolver)
    dispatcher = NotificationDispatcher(clock=clock, live_alert=live_alert)

    return Container(
        store=store,
        resolver=resolver,
        dispatcher=dispatcher,
        auth_service=AuthService(store),
        user_service=UserService(store, resolver),
        timesheet_service=TimesheetService(store, resolver, state_machine, dispatcher),
        leave_service=LeaveService(store, resolver, state_machine, dispatcher),
        project_service=ProjectService(store, resolver),
        task_service=TaskService(store, resolver, dispatcher, clock=clock),
        notification_service=NotificationService(store, resolver, dispatcher),
        dashboard_service=DashboardService(store, resolver),
    )
