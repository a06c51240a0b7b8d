from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

NotificationSeverity = Literal["success", "info", "warning", "error"]
ToastSeverity = Literal["success", "info", "error"]


class Notification(BaseModel):
    """Entry in the persistent-for-the-session notification log."""

    id: str
    title: str
    message: str
    severity: NotificationSeverity = "info"
    read: bool = False
    timestamp: str

    model_config = ConfigDict(extra="forbid", frozen=True)


class Toast(BaseModel):
    """Short-lived message that disappears on its own."""

    id: str
    message: str
    severity: ToastSeverity = "info"
    expires_at: datetime

    model_config = ConfigDict(extra="forbid", frozen=True)
