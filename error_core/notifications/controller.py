"""Notification Lifecycle Controller。

持有唯一的“当前 toast”状态（active + deadline），其他组件只能通过
show / dismiss / current / subscribe 访问，不得直接修改。

- show(): 新错误立即替换旧错误（不排队），并取消旧的自动关闭任务。
- dismiss(): 清空状态并取消挂起任务；无内容时调用是空操作。
- 自动关闭任务带有 ticket，被替换后即使触发也会被忽略。
"""

import itertools
from typing import Callable, List, Optional

from error_core.config.settings import settings
from error_core.domain.exceptions import ConfigurationError
from error_core.domain.models import ErrorRecord
from error_core.notifications.scheduler import ScheduledTask, Scheduler

Listener = Callable[[Optional[ErrorRecord]], None]


class NotificationController:
    def __init__(self, scheduler: Scheduler, default_duration_ms: Optional[int] = None):
        self._scheduler = scheduler
        self._default_duration_ms = (
            settings.toast_duration_ms if default_duration_ms is None else default_duration_ms
        )
        self._active: Optional[ErrorRecord] = None
        self._deadline: Optional[float] = None
        self._pending: Optional[ScheduledTask] = None
        self._tickets = itertools.count(1)
        self._ticket = 0
        self._listeners: List[Listener] = []

    @property
    def deadline(self) -> Optional[float]:
        """已登记的自动关闭时间（调度器时钟，毫秒）；没有则为 None。"""
        return self._deadline

    @property
    def default_duration_ms(self) -> int:
        return self._default_duration_ms

    def current(self) -> Optional[ErrorRecord]:
        return self._active

    def show(self, record: ErrorRecord, duration_ms: Optional[int] = None) -> None:
        """显示 record，替换当前 toast。

        Args:
            record: 要显示的错误记录。
            duration_ms: 自动关闭时间；None 使用默认值，0 表示只能手动关闭。
        """

        if duration_ms is None:
            duration_ms = self._default_duration_ms
        if duration_ms < 0:
            raise ConfigurationError(code="INVALID_DURATION", message=f"duration_ms must be >= 0, got {duration_ms}")

        self._clear()
        self._active = record
        self._ticket = next(self._tickets)
        if duration_ms > 0:
            ticket = self._ticket
            self._deadline = self._scheduler.now() + duration_ms
            self._pending = self._scheduler.call_later(duration_ms, lambda: self._expire(ticket))
        self._emit()

    def dismiss(self) -> None:
        """手动关闭当前 toast；幂等。"""

        if self._active is None and self._pending is None:
            return
        self._clear()
        self._emit()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """订阅 current() 的变化，返回取消订阅函数。"""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- internals -------------------------------------------------

    def _expire(self, ticket: int) -> None:
        # 已被新的 show/dismiss 取代的计时器直接忽略
        if ticket != self._ticket or self._active is None:
            return
        self._pending = None
        self.dismiss()

    def _clear(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._deadline = None
        self._active = None
        self._ticket = next(self._tickets)

    def _emit(self) -> None:
        snapshot = self._active
        for listener in list(self._listeners):
            listener(snapshot)
