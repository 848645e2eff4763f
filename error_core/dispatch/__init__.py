"""呈现分发：toast 或整页跳转。"""

from error_core.dispatch.dispatcher import Dispatcher, default_views
from error_core.dispatch.navigation import HistoryNavigator, Navigator

__all__ = ["Dispatcher", "HistoryNavigator", "Navigator", "default_views"]
