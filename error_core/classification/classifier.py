"""Classifier：原始失败 -> (ErrorRecord, Directive)。

可接受的输入：

1. 结构化响应：httpx.Response、ApiError、带 http_status 的 BusinessError、
   ResponseFailure，或形如远端错误体的 dict（{"status": 400, "errors": {...}}）。
2. 没有响应的异常：NetworkError、httpx.TransportError、ConnectionError、TimeoutError，
   以及缺少 status 的 dict 或 ResponseFailure。
3. 渲染故障：RenderFault（由 BoundaryTrap 打标记）。

规则按顺序匹配，见 classify()。本函数没有副作用，也永远不会抛异常：
字段缺失时退回类别默认值，完全无法解析时退回 generic-failure。
"""

import traceback
from typing import Any, Dict, Mapping, Optional, Tuple

import httpx

from error_core.classification.defaults import CATEGORY_DEFAULTS, DEFAULT_DIRECTIVES, UNEXPECTED_DETAIL
from error_core.config.settings import settings
from error_core.domain.exceptions import ApiError, BusinessError, NetworkError, RenderFault
from error_core.domain.models import (
    NOTIFY,
    REDIRECT,
    UNKNOWN_STATUS,
    Directive,
    ErrorCategory,
    ErrorRecord,
    ResponseFailure,
)

# 本地合成失败时，BusinessError.extra 中可以携带的错误体字段
_BODY_KEYS = ("message", "details", "errors", "path", "trace")


class _Unparseable(Exception):
    pass


def classify(
    failure: Any,
    *,
    title: Optional[str] = None,
    detail: Optional[str] = None,
    auth_directive: Optional[Directive] = None,
    include_trace: Optional[bool] = None,
) -> Tuple[ErrorRecord, Directive]:
    """将一次原始失败分类为 ErrorRecord 与呈现指令。

    规则（按顺序）：
        1. 没有响应 -> connectivity-failure，整页跳转。
        2. 渲染故障 -> server-fault，整页跳转（不检查状态码）。
        3. 400 且字段错误非空 -> validation-failure，toast。
        4. 401 -> auth-failure，默认 toast，可由 auth_directive 覆盖。
        5. 403 -> permission-failure，整页跳转。
        6. 404 -> not-found，整页跳转。
        7. >=500 -> server-fault，整页跳转。
        8. 其他 -> generic-failure，toast。

    Args:
        failure: 原始失败对象。
        title: 调用方覆盖的标题，优先于响应体和默认值。
        detail: 调用方覆盖的说明，优先于响应体和默认值。
        auth_directive: 401 的呈现方式；为空时读取 settings.auth_failure_directive。
        include_trace: 是否保留诊断 trace；为空时仅在非 production 环境保留。
    """

    if include_trace is None:
        include_trace = not settings.is_production
    if auth_directive not in (NOTIFY, REDIRECT):
        auth_directive = getattr(settings, "auth_failure_directive", NOTIFY)
        if auth_directive not in (NOTIFY, REDIRECT):
            auth_directive = NOTIFY

    try:
        if _is_connectivity_failure(failure):
            return _connectivity(failure, title, detail, include_trace)
        if isinstance(failure, RenderFault):
            return _render_fault(failure, title, detail, include_trace)
        response = _to_response(failure)
        trace = _exception_trace(failure) if isinstance(failure, BaseException) else None
        return _structured(response, title, detail, auth_directive, include_trace, trace)
    except Exception as exc:  # noqa: BLE001 - 分类本身不允许失败
        return _unparseable(exc if not isinstance(exc, _Unparseable) else failure, title, detail, include_trace)


# ---- rule 1: 没有响应 ------------------------------------------------------


def _is_connectivity_failure(failure: Any) -> bool:
    if isinstance(failure, (NetworkError, httpx.TransportError, ConnectionError, TimeoutError)):
        return True
    if isinstance(failure, ResponseFailure):
        return failure.status is None
    if isinstance(failure, Mapping):
        return failure.get("status") is None
    return False


def _connectivity(failure: Any, title, detail, include_trace: bool) -> Tuple[ErrorRecord, Directive]:
    defaults = CATEGORY_DEFAULTS["connectivity-failure"]
    path = None
    trace = None
    if isinstance(failure, ResponseFailure):
        body = failure.body if isinstance(failure.body, Mapping) else {}
        path = _text(body.get("path")) or failure.path
        detail = detail or body.get("details")
        trace = _text(body.get("trace"))
    elif isinstance(failure, Mapping):
        path = _text(failure.get("path"))
        detail = detail or failure.get("details")
        trace = _text(failure.get("trace"))
    else:
        if isinstance(failure, BusinessError):
            path = _text(failure.extra.get("path"))
        path = path or _request_path(failure)
        trace = _exception_trace(failure)
    record = ErrorRecord(
        status_code=None,
        category="connectivity-failure",
        title=_text(title) or defaults.title,
        detail=_text(detail) or defaults.detail,
        source_path=path,
        trace=trace if include_trace else None,
    )
    return record, REDIRECT


# ---- rule 2: 渲染故障 ------------------------------------------------------


def _render_fault(fault: RenderFault, title, detail, include_trace: bool) -> Tuple[ErrorRecord, Directive]:
    defaults = CATEGORY_DEFAULTS["server-fault"]
    record = ErrorRecord(
        status_code=500,
        category="server-fault",
        title=_text(title) or defaults.title,
        detail=_text(detail) or defaults.detail,
        source_path=fault.component,
        trace=_exception_trace(fault) if include_trace else None,
    )
    return record, REDIRECT


# ---- rules 3-8: 结构化响应 -------------------------------------------------


def _structured(
    response: ResponseFailure,
    title,
    detail,
    auth_directive: Directive,
    include_trace: bool,
    exc_trace: Optional[str],
) -> Tuple[ErrorRecord, Directive]:
    status = _status(response.status)
    body = response.body if isinstance(response.body, Mapping) else {}
    field_errors = _field_errors(body.get("errors"))

    category: ErrorCategory
    if status == 400 and field_errors:
        category = "validation-failure"
    elif status == 401:
        category = "auth-failure"
    elif status == 403:
        category = "permission-failure"
    elif status == 404:
        category = "not-found"
    elif status >= 500:
        category = "server-fault"
    else:
        category = "generic-failure"

    directive = auth_directive if category == "auth-failure" else DEFAULT_DIRECTIVES[category]
    defaults = CATEGORY_DEFAULTS[category]
    trace = _text(body.get("trace")) or exc_trace
    record = ErrorRecord(
        status_code=status,
        category=category,
        title=_text(title) or _text(body.get("message")) or defaults.title,
        detail=_text(detail) or _text(body.get("details")) or defaults.detail,
        field_errors=field_errors if category == "validation-failure" else {},
        source_path=_text(body.get("path")) or response.path,
        trace=trace if include_trace else None,
    )
    return record, directive


def _to_response(failure: Any) -> ResponseFailure:
    """把各类结构化输入统一为 ResponseFailure。"""

    if isinstance(failure, ResponseFailure):
        return failure
    if isinstance(failure, httpx.HTTPStatusError):
        return _from_httpx(failure.response)
    if isinstance(failure, httpx.Response):
        return _from_httpx(failure)
    if isinstance(failure, ApiError):
        return ResponseFailure(
            status=failure.http_status,
            body=dict(failure.body),
            path=_text(failure.extra.get("path")),
        )
    if isinstance(failure, BusinessError):
        body: Dict[str, Any] = {"details": failure.message}
        body.update({k: failure.extra[k] for k in _BODY_KEYS if k in failure.extra})
        return ResponseFailure(status=failure.http_status, body=body)
    if isinstance(failure, Mapping):
        return ResponseFailure(status=failure["status"], body=dict(failure))
    raise _Unparseable(type(failure).__name__)


def _from_httpx(resp: httpx.Response) -> ResponseFailure:
    try:
        data = resp.json()
    except ValueError:
        data = {}
    return ResponseFailure(
        status=resp.status_code,
        body=data if isinstance(data, dict) else {},
        path=_request_path(resp),
    )


def _unparseable(cause: Any, title, detail, include_trace: bool) -> Tuple[ErrorRecord, Directive]:
    defaults = CATEGORY_DEFAULTS["generic-failure"]
    trace = None
    if include_trace:
        trace = _exception_trace(cause) if isinstance(cause, BaseException) else repr(cause)
    record = ErrorRecord(
        status_code=UNKNOWN_STATUS,
        category="generic-failure",
        title=_text(title) or defaults.title,
        detail=_text(detail) or UNEXPECTED_DETAIL,
        trace=trace,
    )
    return record, NOTIFY


# ---- helpers -------------------------------------------------------------


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _status(value: Any) -> int:
    if isinstance(value, bool):
        raise _Unparseable(f"status={value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise _Unparseable(f"status={value!r}")


def _field_errors(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, Mapping):
        return {}
    return {str(k): str(v) for k, v in raw.items() if v is not None}


def _request_path(obj: Any) -> Optional[str]:
    # httpx 在未绑定 request 时访问 .request 会抛 RuntimeError
    try:
        request = getattr(obj, "request", None)
    except RuntimeError:
        return None
    if isinstance(request, httpx.Request):
        return request.url.path
    return None


def _exception_trace(exc: Any) -> Optional[str]:
    if not isinstance(exc, BaseException):
        return None
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
