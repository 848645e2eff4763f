"""可取消的延迟任务调度。

NotificationController 不直接依赖任何计时原语，而是依赖此协议：

- now(): 当前时间（毫秒，调度器自己的时钟）。
- call_later(delay_ms, callback): 登记一次延迟回调，返回可取消的任务。

所有实现都在单线程事件队列上回调，不引入额外线程。
"""

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class ScheduledTask(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def now(self) -> float:
        ...

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        ...


class _ManualTask:
    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """虚拟时钟调度器：只有调用 advance() 时才推进时间并触发到期任务。

    用于确定性测试，以及没有事件循环的宿主（由宿主自行驱动时钟）。
    """

    def __init__(self, start_ms: float = 0.0):
        self._now = float(start_ms)
        self._queue: List[Tuple[float, int, _ManualTask]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _ManualTask:
        task = _ManualTask(self._now + delay_ms, callback)
        heapq.heappush(self._queue, (task.due, next(self._seq), task))
        return task

    def advance(self, ms: float) -> None:
        """推进时钟 ms 毫秒，按到期顺序执行期间到期的任务。"""

        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            self._now = due
            if not task.cancelled:
                task.callback()
        self._now = target

    def advance_to(self, at_ms: float) -> None:
        self.advance(max(0.0, at_ms - self._now))

    @property
    def pending(self) -> int:
        return sum(1 for _, _, task in self._queue if not task.cancelled)


class AsyncioScheduler:
    """基于 asyncio 事件循环的调度器（loop.call_later）。"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self.loop.time() * 1000.0

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay_ms / 1000.0, callback)
