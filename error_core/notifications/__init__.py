"""瞬时通知（toast）生命周期管理。"""

from error_core.notifications.controller import NotificationController
from error_core.notifications.scheduler import AsyncioScheduler, ManualScheduler, Scheduler, ScheduledTask

__all__ = [
    "AsyncioScheduler",
    "ManualScheduler",
    "NotificationController",
    "ScheduledTask",
    "Scheduler",
]
