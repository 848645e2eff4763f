"""Error Core 顶层包。

该包负责把电商客户端中出现的各类失败（HTTP 错误、网络故障、渲染异常）
统一分类为 ErrorRecord，并决定以何种方式呈现：
瞬时通知（toast）或整页跳转到错误视图。
"""

from error_core.api.service import ErrorCenter, get_default_center
from error_core.classification import classify
from error_core.domain.models import ErrorRecord

__all__ = ["ErrorCenter", "ErrorRecord", "classify", "get_default_center"]
