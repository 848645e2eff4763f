"""商城后端 HTTP 客户端。

本模块负责：

1. 发送 HTTP 请求并处理网络异常。
2. 把 >=400 的响应解析为统一的错误体，包装成 ApiError。
3. 成功时返回解码后的 JSON。

错误体遵循后端约定的格式：status / message / errors / details /
timestamp / path / trace。这里不做任何重试，失败直接交给上层分类。
"""

from typing import Any, Dict, Optional

import httpx

from error_core.domain.exceptions import ApiError, NetworkError
from error_core.infrastructure.logging.logger import logger


class ApiClient:
    """后端 API 客户端。

    - request: 统一调用入口，失败抛出 NetworkError / ApiError。
    """

    def __init__(self, settings):
        # Settings 里包含 api_base_url、超时等配置
        self._settings = settings

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        base = getattr(self._settings, "api_base_url", "").rstrip("/")
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = client.request(
                    method,
                    f"{base}{path}",
                    json=json,
                    params=params,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接超时等，没有响应
            logger.warning(f"{method} {path} failed: {e}", extra={"extra": {"path": path}})
            raise NetworkError(code="NETWORK_ERROR", message=str(e), path=path)
        if resp.status_code >= 400:
            body = self._error_body(resp)
            logger.warning(
                f"{method} {path} -> {resp.status_code}",
                extra={"extra": {"path": path, "status": resp.status_code}},
            )
            raise ApiError(
                code="API_ERROR",
                message=str(body.get("message") or resp.text or resp.status_code),
                http_status=resp.status_code,
                body=body,
                path=path,
            )
        if not resp.content:
            return None
        return resp.json()

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        return self.request("POST", path, **kwargs)

    @staticmethod
    def _error_body(resp) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
