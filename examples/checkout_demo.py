"""Minimal demonstration of failure reporting around a checkout call."""

from error_core import ErrorCenter
from error_core.client import ApiClient
from error_core.config import settings

if __name__ == "__main__":
    center = ErrorCenter()
    center.subscribe(lambda rec: print("toast:", rec and f"{rec.title}: {rec.detail}"))
    client = ApiClient(settings)
    with center.capture(title="Order Failed"):
        client.post("/api/orders", json={"userId": 1, "items": [{"productId": 42, "quantity": 1}]})
    view = center.navigator.current_view
    if view:
        print("page:", view.destination, view.payload.to_dict())
