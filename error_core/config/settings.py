"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置。
环境变量统一使用 ERROR_CORE_ 前缀，例如 ERROR_CORE_ENVIRONMENT=production。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Literal

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("ERROR_CORE_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class Settings(BaseSettings):
    """配置设置（使用 Pydantic）。"""

    # ---- 运行环境 ----
    environment: Literal["development", "production"] = Field(
        default="development",
        description="运行环境；非 production 时 ErrorRecord 会携带 trace",
    )

    # ---- 呈现策略 ----
    toast_duration_ms: int = Field(
        default=5000,
        ge=0,
        description="瞬时通知自动关闭时间（毫秒），0 表示只能手动关闭",
    )
    auth_failure_directive: Literal["notify", "redirect"] = Field(
        default="notify",
        description="401 的默认呈现方式：toast 或跳转登录页",
    )
    login_view: str = Field(default="/login", description="登录页路由")

    # ---- 远端 API ----
    api_base_url: str = Field(default="http://localhost:8080", description="后端 API 基础URL")
    http_timeout: float = Field(default=30.0, ge=1.0, description="HTTP 超时时间（秒）")

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_prefix="ERROR_CORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


settings = Settings()
