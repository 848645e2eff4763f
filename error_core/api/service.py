"""对外 API 服务模块。

提供 ErrorCenter：把 Classifier、Dispatcher 与 NotificationController
组装在一起，供页面代码用一个入口上报失败。
"""

from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

import httpx

from error_core.boundary.trap import BoundaryTrap, Fallback
from error_core.classification.classifier import classify
from error_core.dispatch.dispatcher import Dispatcher
from error_core.dispatch.navigation import HistoryNavigator, Navigator
from error_core.domain.exceptions import BusinessError
from error_core.domain.models import Directive, ErrorRecord
from error_core.notifications.controller import Listener, NotificationController
from error_core.notifications.scheduler import ManualScheduler, Scheduler

# capture() 会上报并吞下的异常类型；其他异常原样向上抛
REPORTABLE = (BusinessError, httpx.HTTPError, ConnectionError, TimeoutError)


class ErrorCenter:
    def __init__(
        self,
        navigator: Optional[Navigator] = None,
        scheduler: Optional[Scheduler] = None,
        *,
        duration_ms: Optional[int] = None,
    ):
        self.navigator = navigator or HistoryNavigator()
        self.scheduler = scheduler or ManualScheduler()
        self.controller = NotificationController(self.scheduler, default_duration_ms=duration_ms)
        self.dispatcher = Dispatcher(self.controller, self.navigator)

    def report(
        self,
        failure: Any,
        *,
        title: Optional[str] = None,
        detail: Optional[str] = None,
        auth_directive: Optional[Directive] = None,
        duration_ms: Optional[int] = None,
    ) -> ErrorRecord:
        """分类并分发一次失败，返回生成的 ErrorRecord。"""

        record, directive = classify(failure, title=title, detail=detail, auth_directive=auth_directive)
        self.dispatcher.dispatch(record, directive, duration_ms=duration_ms)
        return record

    @contextmanager
    def capture(self, **overrides) -> Iterator[None]:
        """在 with 块内捕获可分类的失败并上报。

        用法::

            with center.capture(title="Failed to Add Item"):
                client.post("/api/cart", json=item)
        """

        try:
            yield
        except REPORTABLE as exc:
            self.report(exc, **overrides)

    def trap(
        self,
        render: Callable[..., Any],
        fallback: Optional[Fallback] = None,
        name: Optional[str] = None,
    ) -> BoundaryTrap:
        return BoundaryTrap(render, self.dispatcher, fallback=fallback, name=name)

    def current(self) -> Optional[ErrorRecord]:
        return self.controller.current()

    def dismiss(self) -> None:
        self.controller.dismiss()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.controller.subscribe(listener)


_center: Optional[ErrorCenter] = None


def get_default_center() -> ErrorCenter:
    """获取默认的 ErrorCenter 实例（单例）。

    默认使用 HistoryNavigator 与 ManualScheduler，宿主需要自行推进时钟；
    有事件循环的宿主应当直接构造 ErrorCenter 并传入 AsyncioScheduler。
    """
    global _center
    if _center is None:
        _center = ErrorCenter()
    return _center
