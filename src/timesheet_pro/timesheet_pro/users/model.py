from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object; the password field only ever holds a hash.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    company: str
    manager_id: Optional[int] = None
    employee_code: str = ""
    designation: str = ""
    phone: str = ""
    address: str = ""
    dob: Optional[date] = None


@dataclass(frozen=True)
class UserDraft:
    """Unpersisted profile data submitted at signup or by an admin."""

    name: str
    email: str
    password: str
    company: str
    role: Optional[Role] = None
    manager_id: Optional[int] = None
    employee_code: str = ""
    designation: str = ""
    phone: str = ""
    address: str = ""
    dob: Optional[date] = None
