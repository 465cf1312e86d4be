from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import View


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: int
    title: str
    message: str
    created_at: datetime
    read: bool = False
    dismissed: bool = False
    link_to: Optional[View] = None
    is_announcement: bool = False
