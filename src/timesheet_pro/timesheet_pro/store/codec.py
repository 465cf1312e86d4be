"""Structural JSON encoding of the entities, one array per collection.

Keys follow the client's camelCase shape (`userId`, `projectWork`, ...);
dates are ISO strings.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from ..core.enums import (
    Collection,
    HalfDaySession,
    LeaveType,
    ProjectStatus,
    Role,
    Status,
    TaskStatus,
    View,
)
from ..leaves.model import LeaveEntry, LeaveRequest
from ..notifications.model import Notification
from ..projects.model import Project
from ..tasks.model import Task
from ..timesheets.model import ProjectWork, Timesheet, WorkEntry
from ..users.model import User


def _date_out(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def _date_in(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _int_or_none(value: Any) -> Optional[int]:
    return int(value) if value not in (None, "") else None


def user_to_dict(u: User) -> Dict[str, Any]:
    return {
        "id": u.user_id,
        "name": u.name,
        "email": u.email,
        "password": u.password_hash,
        "role": u.role.value,
        "company": u.company,
        "managerId": u.manager_id,
        "employeeId": u.employee_code,
        "designation": u.designation,
        "phone": u.phone,
        "address": u.address,
        "dob": _date_out(u.dob),
    }


def user_from_dict(r: Dict[str, Any]) -> User:
    return User(
        user_id=int(r["id"]),
        name=r.get("name", ""),
        email=r.get("email", ""),
        password_hash=r.get("password", ""),
        role=Role(r["role"]),
        company=r.get("company", ""),
        manager_id=_int_or_none(r.get("managerId")),
        employee_code=r.get("employeeId") or "",
        designation=r.get("designation") or "",
        phone=r.get("phone") or "",
        address=r.get("address") or "",
        dob=_date_in(r.get("dob")),
    )


def project_to_dict(p: Project) -> Dict[str, Any]:
    return {
        "id": p.project_id,
        "name": p.name,
        "description": p.description,
        "managerId": p.manager_id,
        "teamLeaderId": p.team_leader_id,
        "teamIds": list(p.team_ids),
        "customerName": p.customer_name,
        "jobName": p.job_name,
        "estimatedHours": p.estimated_hours,
        "actualHours": p.actual_hours,
        "company": p.company,
        "status": p.status.value,
    }


def project_from_dict(r: Dict[str, Any]) -> Project:
    return Project(
        project_id=int(r["id"]),
        name=r.get("name", ""),
        description=r.get("description", ""),
        manager_id=int(r["managerId"]),
        company=r.get("company", ""),
        customer_name=r.get("customerName", ""),
        job_name=r.get("jobName", ""),
        team_leader_id=_int_or_none(r.get("teamLeaderId")),
        team_ids=tuple(int(i) for i in r.get("teamIds") or ()),
        estimated_hours=float(r.get("estimatedHours") or 0),
        actual_hours=float(r.get("actualHours") or 0),
        status=ProjectStatus(r.get("status") or ProjectStatus.NOT_STARTED.value),
    )


def timesheet_to_dict(t: Timesheet) -> Dict[str, Any]:
    return {
        "id": t.timesheet_id,
        "userId": t.user_id,
        "date": t.date.isoformat(),
        "inTime": t.in_time,
        "outTime": t.out_time,
        "projectWork": [
            {
                "projectId": pw.project_id,
                "workEntries": [{"description": e.description, "hours": e.hours} for e in pw.work_entries],
            }
            for pw in t.project_work
        ],
        "status": t.status.value,
        "approverId": t.approver_id,
    }


def timesheet_from_dict(r: Dict[str, Any]) -> Timesheet:
    return Timesheet(
        timesheet_id=int(r["id"]),
        user_id=int(r["userId"]),
        date=date.fromisoformat(r["date"]),
        in_time=r.get("inTime", ""),
        out_time=r.get("outTime", ""),
        project_work=tuple(
            ProjectWork(
                project_id=int(pw["projectId"]),
                work_entries=tuple(
                    WorkEntry(description=e.get("description", ""), hours=float(e["hours"]))
                    for e in pw.get("workEntries") or ()
                ),
            )
            for pw in r.get("projectWork") or ()
        ),
        status=Status(r["status"]),
        approver_id=_int_or_none(r.get("approverId")),
    )


def leave_request_to_dict(lr: LeaveRequest) -> Dict[str, Any]:
    entries = []
    for e in lr.leave_entries:
        item: Dict[str, Any] = {"date": e.date.isoformat(), "leaveType": e.leave_type.value}
        if e.half_day_session is not None:
            item["halfDaySession"] = e.half_day_session.value
        entries.append(item)
    return {
        "id": lr.request_id,
        "userId": lr.user_id,
        "leaveEntries": entries,
        "reason": lr.reason,
        "status": lr.status.value,
        "approverId": lr.approver_id,
    }


def leave_request_from_dict(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["id"]),
        user_id=int(r["userId"]),
        leave_entries=tuple(
            LeaveEntry(
                date=date.fromisoformat(e["date"]),
                leave_type=LeaveType(e["leaveType"]),
                half_day_session=HalfDaySession(e["halfDaySession"]) if e.get("halfDaySession") else None,
            )
            for e in r.get("leaveEntries") or ()
        ),
        reason=r.get("reason", ""),
        status=Status(r["status"]),
        approver_id=_int_or_none(r.get("approverId")),
    )


def task_to_dict(t: Task) -> Dict[str, Any]:
    return {
        "id": t.task_id,
        "projectId": t.project_id,
        "title": t.title,
        "description": t.description,
        "assignedTo": list(t.assigned_to),
        "status": t.status.value,
        "deadline": _date_out(t.deadline),
        "completionDate": _date_out(t.completion_date),
    }


def task_from_dict(r: Dict[str, Any]) -> Task:
    return Task(
        task_id=int(r["id"]),
        project_id=int(r["projectId"]),
        title=r.get("title", ""),
        description=r.get("description", ""),
        assigned_to=tuple(int(i) for i in r.get("assignedTo") or ()),
        status=TaskStatus(r.get("status") or TaskStatus.TODO.value),
        deadline=_date_in(r.get("deadline")),
        completion_date=_date_in(r.get("completionDate")),
    )


def notification_to_dict(n: Notification) -> Dict[str, Any]:
    return {
        "id": n.notification_id,
        "userId": n.user_id,
        "title": n.title,
        "message": n.message,
        "read": n.read,
        "dismissed": n.dismissed,
        "createdAt": n.created_at.isoformat(),
        "linkTo": n.link_to.value if n.link_to else None,
        "isAnnouncement": n.is_announcement,
    }


def notification_from_dict(r: Dict[str, Any]) -> Notification:
    return Notification(
        notification_id=int(r["id"]),
        user_id=int(r["userId"]),
        title=r.get("title", ""),
        message=r.get("message", ""),
        created_at=datetime.fromisoformat(r["createdAt"]),
        read=bool(r.get("read", False)),
        dismissed=bool(r.get("dismissed", False)),
        link_to=View(r["linkTo"]) if r.get("linkTo") else None,
        is_announcement=bool(r.get("isAnnouncement", False)),
    )


ENCODERS: Dict[Collection, Callable[[Any], Any]] = {
    Collection.USERS: user_to_dict,
    Collection.PROJECTS: project_to_dict,
    Collection.TIMESHEETS: timesheet_to_dict,
    Collection.LEAVE_REQUESTS: leave_request_to_dict,
    Collection.TASKS: task_to_dict,
    Collection.NOTIFICATIONS: notification_to_dict,
    Collection.BEST_EMPLOYEE_IDS: int,
    Collection.BEST_EMPLOYEE_OF_YEAR_IDS: int,
}

DECODERS: Dict[Collection, Callable[[Any], Any]] = {
    Collection.USERS: user_from_dict,
    Collection.PROJECTS: project_from_dict,
    Collection.TIMESHEETS: timesheet_from_dict,
    Collection.LEAVE_REQUESTS: leave_request_from_dict,
    Collection.TASKS: task_from_dict,
    Collection.NOTIFICATIONS: notification_from_dict,
    Collection.BEST_EMPLOYEE_IDS: int,
    Collection.BEST_EMPLOYEE_OF_YEAR_IDS: int,
}


def encode_collection(collection: Collection, items) -> list:
    encode = ENCODERS[collection]
    return [encode(item) for item in items]


def decode_collection(collection: Collection, rows) -> tuple:
    decode = DECODERS[collection]
    return tuple(decode(row) for row in rows or ())
