"""失败分类层。

- defaults: 每个错误类别的默认 (title, detail) 与默认呈现方式。
- classifier: 把原始失败映射为 (ErrorRecord, Directive)。
"""

from error_core.classification.classifier import classify
from error_core.classification.defaults import CATEGORY_DEFAULTS, DEFAULT_DIRECTIVES

__all__ = ["CATEGORY_DEFAULTS", "DEFAULT_DIRECTIVES", "classify"]
