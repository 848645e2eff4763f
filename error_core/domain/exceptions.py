"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于 Classifier 统一识别并转换为 ErrorRecord。
"""

from typing import Any, Dict, Optional


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "API_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 details、path 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时等；此时没有收到任何响应。"""


class ApiError(BusinessError):
    """远端 API 返回 >=400 时抛出，携带解析后的错误响应体。"""

    def __init__(
        self,
        code: str,
        message: str,
        http_status: int = 500,
        body: Optional[Dict[str, Any]] = None,
        **extra,
    ):
        super().__init__(code, message, http_status, **extra)
        self.body = body or {}


class UnauthorizedError(BusinessError):
    """未登录或登录失效（401）。"""

    def __init__(self, message: str = "Please log in to continue", **extra):
        super().__init__("UNAUTHORIZED", message, 401, **extra)


class ForbiddenError(BusinessError):
    """已登录但无权访问（403），例如被封禁的账号。"""

    def __init__(self, message: str = "You do not have permission to access this resource", **extra):
        super().__init__("FORBIDDEN", message, 403, **extra)


class NotFoundError(BusinessError):
    """资源不存在（404）。"""

    def __init__(self, message: str = "The requested resource could not be found", **extra):
        super().__init__("NOT_FOUND", message, 404, **extra)


class ConfigurationError(Exception):
    """库被错误调用（例如负的 toast 时长、未知的呈现指令）。

    不继承 BusinessError：这类错误属于调用方的编程错误，
    不会映射到 HTTP 状态码，也不会被 ErrorCenter.capture() 吞掉。
    """

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class RenderFault(Exception):
    """渲染期间未处理的异常，由 BoundaryTrap 在子树边界处打上标记。

    原始异常保存在 __cause__ 中。
    """

    def __init__(self, message: str, component: Optional[str] = None):
        self.component = component
        super().__init__(message)

    @classmethod
    def wrap(cls, exc: BaseException, component: Optional[str] = None) -> "RenderFault":
        if isinstance(exc, RenderFault):
            return exc
        fault = cls(str(exc) or type(exc).__name__, component=component)
        fault.__cause__ = exc
        fault.__traceback__ = exc.__traceback__
        return fault
