"""导航协作方抽象。

Dispatcher 不关心错误页如何渲染，只依赖此协议：
navigate(destination, payload) 跳转到目标视图，并把 ErrorRecord 作为视图输入。
"""

from dataclasses import dataclass
from typing import List, Optional, Protocol

from error_core.domain.models import ErrorRecord


class Navigator(Protocol):
    def navigate(self, destination: str, payload: ErrorRecord) -> None:
        ...


@dataclass
class NavigationEntry:
    destination: str
    payload: ErrorRecord


class HistoryNavigator:
    """内存中的导航历史栈，供无路由框架的宿主与测试使用。"""

    def __init__(self):
        self.history: List[NavigationEntry] = []

    def navigate(self, destination: str, payload: ErrorRecord) -> None:
        self.history.append(NavigationEntry(destination=destination, payload=payload))

    @property
    def current_view(self) -> Optional[NavigationEntry]:
        return self.history[-1] if self.history else None

    def back(self) -> Optional[NavigationEntry]:
        """返回上一个视图（用户显式离开错误页）。"""
        if self.history:
            self.history.pop()
        return self.current_view
