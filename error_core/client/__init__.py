"""远端 API 客户端。"""

from error_core.client.api_client import ApiClient

__all__ = ["ApiClient"]
