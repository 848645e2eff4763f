"""Boundary Trap。

包裹一个渲染子树：子树在构建或更新时抛出的未处理异常，在这里被打上
RenderFault 标记并终止传播，记录日志后交给 Classifier（渲染故障路径）
与 Dispatcher，同时用 fallback 替代子树的渲染结果。

一旦触发，Trap 在子树生命周期内保持失败状态，不会自动重试；
恢复需要宿主丢弃并重新构建子树（例如用户刷新页面）。
"""

from typing import Any, Callable, Optional

from error_core.classification.classifier import classify
from error_core.dispatch.dispatcher import Dispatcher
from error_core.domain.exceptions import RenderFault
from error_core.domain.models import ErrorRecord
from error_core.infrastructure.logging.logger import logger

Fallback = Callable[[ErrorRecord], Any]


class BoundaryTrap:
    def __init__(
        self,
        render: Callable[..., Any],
        dispatcher: Dispatcher,
        *,
        fallback: Optional[Fallback] = None,
        name: Optional[str] = None,
    ):
        self._render = render
        self._dispatcher = dispatcher
        self._fallback = fallback
        self.name = name or getattr(render, "__name__", None) or "subtree"
        self._record: Optional[ErrorRecord] = None

    @property
    def tripped(self) -> bool:
        return self._record is not None

    @property
    def record(self) -> Optional[ErrorRecord]:
        return self._record

    def render(self, *args, **kwargs) -> Any:
        """渲染子树；失败后始终返回 fallback 的结果。"""

        if self._record is not None:
            return self._render_fallback()
        try:
            return self._render(*args, **kwargs)
        except Exception as exc:  # noqa: BLE001 - 子树边界：所有渲染异常都在这里终止
            self._trip(RenderFault.wrap(exc, component=self.name))
        return self._render_fallback()

    __call__ = render

    def _trip(self, fault: RenderFault) -> None:
        logger.error(
            f"Render fault in {self.name}: {fault}",
            exc_info=(type(fault), fault, fault.__traceback__),
            extra={"extra": {"component": self.name}},
        )
        record, directive = classify(fault)
        self._record = record
        self._dispatcher.dispatch(record, directive)

    def _render_fallback(self) -> Any:
        if self._fallback is None:
            return None
        return self._fallback(self._record)
