"""Presentation Dispatcher。

无状态路由：根据 Directive 把 ErrorRecord 交给 NotificationController，
或者跳转到该类别指定的错误视图。整页跳转总是先清掉当前 toast。
本身不做任何重试。
"""

from typing import Dict, Mapping, Optional

from error_core.config.settings import settings
from error_core.domain.exceptions import ConfigurationError
from error_core.domain.models import NOTIFY, REDIRECT, Directive, ErrorRecord
from error_core.dispatch.navigation import Navigator
from error_core.infrastructure.logging.logger import logger
from error_core.notifications.controller import NotificationController


def default_views() -> Dict[str, str]:
    """每个错误类别对应的整页错误视图。"""

    return {
        "connectivity-failure": "/error/network",
        "validation-failure": "/error/400",
        "auth-failure": settings.login_view,
        "permission-failure": "/error/403",
        "not-found": "/error/404",
        "server-fault": "/error/500",
        "generic-failure": "/error",
    }


class Dispatcher:
    def __init__(
        self,
        controller: NotificationController,
        navigator: Navigator,
        *,
        views: Optional[Mapping[str, str]] = None,
        duration_ms: Optional[int] = None,
    ):
        self._controller = controller
        self._navigator = navigator
        self._views = default_views()
        if views:
            self._views.update(views)
        self._duration_ms = duration_ms

    def view_for(self, category: str) -> str:
        return self._views.get(category, self._views["generic-failure"])

    def dispatch(self, record: ErrorRecord, directive: Directive, *, duration_ms: Optional[int] = None) -> None:
        logger.info(
            "dispatch",
            extra={"extra": {
                "category": record.category,
                "status": record.status_code,
                "directive": directive,
                "path": record.source_path,
            }},
        )
        if directive == NOTIFY:
            self._controller.show(record, duration_ms if duration_ms is not None else self._duration_ms)
        elif directive == REDIRECT:
            # 整页跳转总是取代 toast
            self._controller.dismiss()
            self._navigator.navigate(self.view_for(record.category), record)
        else:
            raise ConfigurationError(code="UNKNOWN_DIRECTIVE", message=f"Unknown directive: {directive!r}")
