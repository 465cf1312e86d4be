from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for visibility and permission checks."""

    ADMIN = "Admin"
    MANAGER = "Manager"
    TEAM_LEADER = "Team Leader"
    EMPLOYEE = "Employee"


class Status(str, Enum):
    """Approval status shared by timesheets and leave requests."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class ProjectStatus(str, Enum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    ON_HOLD = "On Hold"
    COMPLETED = "Completed"


class TaskStatus(str, Enum):
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


class LeaveType(str, Enum):
    FULL_DAY = "Full Day"
    HALF_DAY = "Half Day"


class HalfDaySession(str, Enum):
    FIRST_HALF = "First Half"
    SECOND_HALF = "Second Half"


class VisibilityScope(str, Enum):
    """How far a role can see other users' records."""

    COMPANY = "COMPANY"
    DIRECT_REPORTS = "DIRECT_REPORTS"
    SELF = "SELF"


class Collection(str, Enum):
    """Names of the entity store collections (one array each when persisted)."""

    USERS = "users"
    PROJECTS = "projects"
    TIMESHEETS = "timesheets"
    LEAVE_REQUESTS = "leaveRequests"
    TASKS = "tasks"
    NOTIFICATIONS = "notifications"
    BEST_EMPLOYEE_IDS = "bestEmployeeIds"
    BEST_EMPLOYEE_OF_YEAR_IDS = "bestEmployeeOfYearIds"


class View(str, Enum):
    """Client view a notification links to."""

    DASHBOARD = "DASHBOARD"
    TIMESHEETS = "TIMESHEETS"
    LEAVE = "LEAVE"
    TASKS = "TASKS"
    TEAM_TIMESHEETS = "TEAM_TIMESHEETS"
    TEAM_LEAVE = "TEAM_LEAVE"
