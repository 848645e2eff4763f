import tkinter as tk
from datetime import datetime, timezone

import httpx

from error_core.api.service import ErrorCenter
from error_core.domain.exceptions import ApiError, NetworkError, UnauthorizedError


class TkScheduler:
    """用 Tk 的 after/after_cancel 实现 Scheduler 协议。"""

    def __init__(self, root):
        self._root = root

    def now(self) -> float:
        return datetime.now(timezone.utc).timestamp() * 1000.0

    def call_later(self, delay_ms, callback):
        return _TkTask(self._root, self._root.after(int(delay_ms), callback))


class _TkTask:
    def __init__(self, root, after_id):
        self._root = root
        self._after_id = after_id

    def cancel(self) -> None:
        if self._after_id is not None:
            self._root.after_cancel(self._after_id)
            self._after_id = None


class ConsoleNavigator:
    def __init__(self, app):
        self.app = app

    def navigate(self, destination, payload):
        self.app.show_page(destination, payload)


class App:
    def __init__(self, root):
        self.root = root
        self.root.title("Error Core Console")
        self.center = ErrorCenter(ConsoleNavigator(self), TkScheduler(root))
        self.center.subscribe(self.on_toast)
        self.toast = tk.Frame(root, bg="#fce8e6")
        self.toast.pack(fill=tk.X)
        self.toast_text = tk.Label(self.toast, text="", bg="#fce8e6", fg="#d93025", anchor=tk.W, justify=tk.LEFT)
        self.toast_text.pack(side=tk.LEFT, fill=tk.X, expand=True)
        tk.Button(self.toast, text="X", command=self.center.dismiss).pack(side=tk.RIGHT)
        btns = tk.LabelFrame(root, text="Simulate")
        btns.pack(fill=tk.X)
        for label, cmd in [
            ("400 validation", self.sim_validation),
            ("401", self.sim_unauthorized),
            ("403", lambda: self.sim_status(403, "Access Denied", "Your account has been blocked")),
            ("404", lambda: self.sim_status(404, "Resource Not Found", "Product 42 not found")),
            ("500", lambda: self.sim_status(500, "Internal Server Error", "Insufficient stock")),
            ("409", lambda: self.sim_status(409, "Invalid Operation", "Cart is locked")),
            ("network", self.sim_network),
            ("render fault", self.sim_render),
        ]:
            tk.Button(btns, text=label, command=cmd).pack(side=tk.LEFT)
        self.page = tk.Label(root, text="/shop", font=("TkDefaultFont", 14), height=8, anchor=tk.NW, justify=tk.LEFT)
        self.page.pack(fill=tk.BOTH, expand=True)
        tk.Button(root, text="Back to shop", command=lambda: self.page.config(text="/shop")).pack(anchor=tk.E)
        self.widget = self.center.trap(self._broken_widget, fallback=lambda rec: None, name="ProductCard")

    def on_toast(self, record):
        if record is None:
            self.toast_text.config(text="")
            return
        lines = [f"{record.title}: {record.detail}"]
        for field, msg in record.field_errors.items():
            lines.append(f"  {field}: {msg}")
        self.toast_text.config(text="\n".join(lines))

    def show_page(self, destination, record):
        self.page.config(text=f"{destination}\n\n{record.status_code or ''} {record.title}\n{record.detail}")

    def sim_status(self, status, message, details):
        body = {"status": status, "message": message, "details": details, "path": "/api/orders"}
        self.center.report(ApiError(code="API_ERROR", message=message, http_status=status, body=body))

    def sim_validation(self):
        body = {
            "status": 400,
            "message": "Validation Failed",
            "errors": {"email": "Email is required", "password": "Password too short"},
            "path": "/api/register",
        }
        self.center.report(httpx.Response(400, json=body, request=httpx.Request("POST", "http://shop/api/register")))

    def sim_unauthorized(self):
        with self.center.capture(title="Authentication Required"):
            raise UnauthorizedError("Please log in to continue")

    def sim_network(self):
        self.center.report(NetworkError(code="NETWORK_ERROR", message="Connection refused", path="/api/products"))

    def sim_render(self):
        self.widget.render({"name": "Laptop"})

    @staticmethod
    def _broken_widget(product):
        return product["price"] * 2


if __name__ == "__main__":
    root = tk.Tk()
    app = App(root)
    root.mainloop()
