"""Demo data: one company with every role, a few timesheets, leave and tasks.

All demo accounts use the password `admin`.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List

from werkzeug.security import generate_password_hash

from ..core.enums import (
    Collection,
    HalfDaySession,
    LeaveType,
    ProjectStatus,
    Role,
    Status,
    TaskStatus,
)
from ..leaves.model import LeaveEntry, LeaveRequest
from ..projects.aggregator import apply_project_hours
from ..projects.model import Project
from ..store.entity_store import EntityStore
from ..tasks.model import Task
from ..timesheets.model import ProjectWork, Timesheet, WorkEntry
from ..users.model import User

logger = logging.getLogger(__name__)

DEMO_COMPANY = "Timesheet Pro Inc."
DEMO_PASSWORD = "admin"


def _users(password_hash: str) -> List[User]:
    def user(user_id, name, email, role, code, designation, dob, phone, address, manager_id=None):
        return User(
            user_id=user_id,
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            company=DEMO_COMPANY,
            manager_id=manager_id,
            employee_code=code,
            designation=designation,
            phone=phone,
            address=address,
            dob=date.fromisoformat(dob),
        )

    return [
        user(1, "Alice Johnson", "alice@example.com", Role.EMPLOYEE, "E001", "Software Engineer",
             "1995-08-15", "123-456-7890", "123 Maple St, Springfield", manager_id=7),
        user(2, "Bob Williams", "bob@example.com", Role.EMPLOYEE, "E002", "UI/UX Designer",
             "1992-05-20", "234-567-8901", "456 Oak Ave, Springfield", manager_id=3),
        user(3, "Charlie Brown", "charlie@example.com", Role.MANAGER, "M001", "Engineering Manager",
             "1985-11-10", "345-678-9012", "789 Pine Ln, Springfield"),
        user(4, "Diana Prince", "diana@example.com", Role.ADMIN, "A001", "System Administrator",
             "1980-03-25", "456-789-0123", "101 Justice Rd, Metropolis"),
        user(5, "Eve Adams", "eve@example.com", Role.EMPLOYEE, "E003", "QA Tester",
             "1998-01-30", "567-890-1234", "210 Garden Pl, Springfield", manager_id=7),
        user(6, "Admin User", "admin@gmail.com", Role.ADMIN, "A002", "Head Administrator",
             "1970-01-01", "999-999-9999", "1 Admin Way, System City"),
        user(7, "Frank Miller", "frank@example.com", Role.TEAM_LEADER, "TL001", "Team Leader",
             "1990-02-01", "678-901-2345", "321 Elm St, Springfield", manager_id=3),
    ]


def _timesheet(timesheet_id, user_id, day, in_time, out_time, work, status=Status.PENDING, approver_id=None):
    return Timesheet(
        timesheet_id=timesheet_id,
        user_id=user_id,
        date=date.fromisoformat(day),
        in_time=in_time,
        out_time=out_time,
        project_work=tuple(
            ProjectWork(project_id=pid, work_entries=tuple(WorkEntry(d, h) for d, h in entries))
            for pid, entries in work
        ),
        status=status,
        approver_id=approver_id,
    )


def _timesheets() -> List[Timesheet]:
    return [
        _timesheet(1, 1, "2023-10-26", "09:00", "17:00",
                   [(1, [("Created new user authentication flow", 5), ("Updated database schema for new fields", 3)])]),
        _timesheet(2, 2, "2023-10-26", "09:30", "17:30",
                   [(1, [("Fixed bug Y in Project Management dashboard", 8)])], Status.APPROVED, 3),
        _timesheet(3, 1, "2023-10-25", "08:45", "16:50",
                   [(2, [("Team meeting and planning for next sprint", 8)])], Status.REJECTED, 7),
        _timesheet(4, 3, "2023-10-26", "09:00", "18:00",
                   [(1, [("Managerial duties, 1-on-1s, and project planning", 9)])], Status.APPROVED, 4),
        _timesheet(5, 7, "2023-10-26", "09:00", "17:30",
                   [(1, [("Code review for auth feature", 4), ("Team sync meeting", 1.5)])]),
        _timesheet(6, 1, "2023-10-27", "09:00", "18:00",
                   [(1, [("Work on Phoenix feature A", 4)]), (2, [("Refactor DevOps pipeline script", 4)])]),
    ]


def _leave(request_id, user_id, days, reason, status=Status.PENDING, approver_id=None, session=None):
    if session is None:
        entries = tuple(LeaveEntry(date.fromisoformat(d), LeaveType.FULL_DAY) for d in days)
    else:
        entries = tuple(LeaveEntry(date.fromisoformat(d), LeaveType.HALF_DAY, session) for d in days)
    return LeaveRequest(request_id, user_id, entries, reason, status, approver_id)


def _leave_requests() -> List[LeaveRequest]:
    return [
        _leave(1, 1, ["2023-11-10", "2023-11-11", "2023-11-12"], "Family vacation to the Grand Canyon."),
        _leave(2, 2, ["2023-11-05"], "Doctor appointment.", Status.APPROVED, 3, HalfDaySession.FIRST_HALF),
        _leave(3, 3, ["2023-12-24", "2023-12-25", "2023-12-26", "2023-12-27", "2023-12-28"], "Holiday leave."),
        _leave(4, 7, ["2023-11-20", "2023-11-21"], "Personal leave.", Status.APPROVED, 3),
    ]


def _projects() -> List[Project]:
    return [
        Project(
            project_id=1,
            name="Project Phoenix",
            description="A revolutionary new web application with a user-centric design.",
            manager_id=3,
            company=DEMO_COMPANY,
            customer_name="Innovate Corp",
            job_name="Phoenix Web App",
            team_leader_id=7,
            team_ids=(1, 2, 5, 7),
            estimated_hours=500,
            status=ProjectStatus.IN_PROGRESS,
        ),
        Project(
            project_id=2,
            name="Project Titan",
            description="Internal tooling improvements to streamline the development workflow.",
            manager_id=3,
            company=DEMO_COMPANY,
            customer_name="Internal",
            job_name="DevOps Pipeline",
            team_ids=(1, 5),
            estimated_hours=200,
            status=ProjectStatus.IN_PROGRESS,
        ),
    ]


def _tasks() -> List[Task]:
    d = date.fromisoformat
    return [
        Task(1, 1, "Setup Authentication", "Implement JWT-based authentication for the main application.",
             (1,), TaskStatus.DONE, d("2023-11-10"), d("2023-10-20")),
        Task(2, 1, "Design Landing Page", "Create mockups and final designs for the new marketing landing page.",
             (2,), TaskStatus.IN_PROGRESS, d("2023-11-20")),
        Task(3, 1, "Create Test Plan", "Develop a comprehensive test plan for the Q4 release.",
             (5,), TaskStatus.TODO),
        Task(4, 2, "Upgrade CI/CD Pipeline", "Migrate the existing pipeline to the new infrastructure.",
             (1,), TaskStatus.IN_PROGRESS, d("2023-11-15")),
        Task(5, 2, "End-to-end testing for Pipeline", "Test the new CI/CD pipeline.",
             (5,), TaskStatus.TODO),
    ]


def seed_if_empty(store: EntityStore) -> bool:
    """Load the demo data into a store that has no users yet."""
    if store.get(Collection.USERS):
        logger.info("Store already has users; skipping demo seed")
        return False
    with store.unit_of_work() as uow:
        uow.replace(Collection.USERS, _users(generate_password_hash(DEMO_PASSWORD)))
        timesheets = _timesheets()
        uow.replace(Collection.TIMESHEETS, timesheets)
        uow.replace(Collection.PROJECTS, apply_project_hours(timesheets, _projects()))
        uow.replace(Collection.LEAVE_REQUESTS, _leave_requests())
        uow.replace(Collection.TASKS, _tasks())
        uow.replace(Collection.BEST_EMPLOYEE_IDS, [1])
    logger.info("Seeded demo data for %s", DEMO_COMPANY)
    return True
