"""错误类别的静态默认值表。

响应体缺少 message/details 时，Classifier 从这里取默认标题与说明；
每个类别必须恰好有一对默认值，保证 ErrorRecord.title 永远非空。
"""

from dataclasses import dataclass
from typing import Mapping

from error_core.domain.models import NOTIFY, REDIRECT, Directive


@dataclass(frozen=True)
class CategoryDefaults:
    title: str
    detail: str


UNEXPECTED_DETAIL = "An unexpected error occurred."

CATEGORY_DEFAULTS: Mapping[str, CategoryDefaults] = {
    "connectivity-failure": CategoryDefaults(
        title="Connection Problem",
        detail="Unable to reach the server. Please check your internet connection and try again.",
    ),
    "validation-failure": CategoryDefaults(
        title="Validation Failed",
        detail="Please correct the highlighted fields and try again.",
    ),
    "auth-failure": CategoryDefaults(
        title="Authentication Required",
        detail="Please log in to continue.",
    ),
    "permission-failure": CategoryDefaults(
        title="Access Denied",
        detail="You do not have permission to access this resource.",
    ),
    "not-found": CategoryDefaults(
        title="Resource Not Found",
        detail="The requested resource could not be found.",
    ),
    "server-fault": CategoryDefaults(
        title="Internal Server Error",
        detail="Something went wrong on our end. Please try again later.",
    ),
    "generic-failure": CategoryDefaults(
        title="Request Failed",
        detail=UNEXPECTED_DETAIL,
    ),
}

# auth-failure 的默认值可被 settings.auth_failure_directive 或调用方覆盖
DEFAULT_DIRECTIVES: Mapping[str, Directive] = {
    "connectivity-failure": REDIRECT,
    "validation-failure": NOTIFY,
    "auth-failure": NOTIFY,
    "permission-failure": REDIRECT,
    "not-found": REDIRECT,
    "server-fault": REDIRECT,
    "generic-failure": NOTIFY,
}
