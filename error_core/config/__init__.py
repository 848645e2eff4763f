"""配置加载（pydantic-settings + config.yaml）。"""

from error_core.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
