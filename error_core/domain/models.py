"""统一的错误记录与呈现指令模型。

本模块定义了错误分类层内部共享的标准数据结构：

- ErrorRecord: 一次已分类失败的不可变记录。
- ErrorCategory: 七种错误类别。
- Directive: 呈现指令（瞬时通知 / 整页跳转）。
- ResponseFailure: 与具体 HTTP 库无关的“结构化响应”输入。

ErrorRecord 只能由 Classifier 构造，Dispatcher 与展示层只读使用。
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Literal, Mapping, Optional


ErrorCategory = Literal[
    "connectivity-failure",
    "validation-failure",
    "auth-failure",
    "permission-failure",
    "not-found",
    "server-fault",
    "generic-failure",
]

CATEGORIES: tuple[str, ...] = (
    "connectivity-failure",
    "validation-failure",
    "auth-failure",
    "permission-failure",
    "not-found",
    "server-fault",
    "generic-failure",
)

# notify: 瞬时通知（toast），不替换当前页面
# redirect: 整页跳转到该类别对应的错误视图
Directive = Literal["notify", "redirect"]
NOTIFY: Directive = "notify"
REDIRECT: Directive = "redirect"

# 无法解析的输入使用的状态码占位，只有 connectivity-failure 没有状态码
UNKNOWN_STATUS = 0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ErrorRecord:
    """一次已分类失败的规范表示。

    - status_code: HTTP 状态码；None 表示没有收到任何响应（连接失败）。
    - category: 错误类别。
    - title: 简短的类别标题，例如 "Connection Problem"。
    - detail: 面向用户的说明文字。
    - field_errors: 字段 -> 错误信息，仅 validation-failure 时非空。
    - occurred_at: 分类发生的时间（不是原始故障时间）。
    - source_path: 失败的资源路径，例如请求路径。
    - trace: 诊断信息，仅在非 production 环境填充。
    """

    status_code: Optional[int]
    category: ErrorCategory
    title: str
    detail: str
    field_errors: Mapping[str, str] = field(default_factory=dict, hash=False)
    occurred_at: datetime = field(default_factory=_utcnow)
    source_path: Optional[str] = None
    trace: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "field_errors", MappingProxyType(dict(self.field_errors)))

    @property
    def is_connectivity_failure(self) -> bool:
        return self.status_code is None

    def to_dict(self) -> Dict[str, Any]:
        """按远端错误响应体的形状输出，便于错误页或日志使用。"""
        payload: Dict[str, Any] = {
            "status": self.status_code,
            "category": self.category,
            "message": self.title,
            "details": self.detail,
            "errors": dict(self.field_errors),
            "timestamp": self.occurred_at.isoformat(),
            "path": self.source_path,
        }
        if self.trace is not None:
            payload["trace"] = self.trace
        return payload


@dataclass
class ResponseFailure:
    """结构化的失败响应：状态码 + 可选的 JSON 错误体。

    与具体 HTTP 库解耦；httpx.Response 会在 Classifier 中被转换成本结构。
    """

    status: Any
    body: Dict[str, Any] = field(default_factory=dict)
    path: Optional[str] = None
