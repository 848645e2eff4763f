import httpx
import pytest

from error_core.classification import CATEGORY_DEFAULTS, classify
from error_core.classification.defaults import UNEXPECTED_DETAIL
from error_core.domain.exceptions import (
    ApiError,
    BusinessError,
    ConfigurationError,
    NetworkError,
    RenderFault,
    UnauthorizedError,
)
from error_core.domain.models import CATEGORIES, UNKNOWN_STATUS, ResponseFailure


class SettingsStub:
    environment = "development"
    auth_failure_directive = "notify"

    @property
    def is_production(self):
        return self.environment == "production"


@pytest.fixture(autouse=True)
def _settings(monkeypatch):
    stub = SettingsStub()
    monkeypatch.setattr("error_core.classification.classifier.settings", stub)
    return stub


def test_missing_status_is_connectivity_failure():
    rec, directive = classify({"message": "boom"})
    assert rec.status_code is None
    assert rec.category == "connectivity-failure"
    assert rec.title == "Connection Problem"
    assert directive == "redirect"


@pytest.mark.parametrize(
    "exc",
    [
        NetworkError(code="NETWORK_ERROR", message="refused"),
        httpx.ConnectError("refused"),
        httpx.ReadTimeout("slow"),
        ConnectionRefusedError("refused"),
        TimeoutError("slow"),
    ],
)
def test_exceptions_without_response_are_connectivity_failures(exc):
    rec, directive = classify(exc)
    assert rec.category == "connectivity-failure"
    assert rec.status_code is None
    assert directive == "redirect"


def test_network_error_keeps_path():
    rec, _ = classify(NetworkError(code="NETWORK_ERROR", message="refused", path="/api/cart"))
    assert rec.source_path == "/api/cart"


def test_validation_failure_is_transient():
    rec, directive = classify({"status": 400, "errors": {"email": "Email is required"}})
    assert rec.category == "validation-failure"
    assert dict(rec.field_errors) == {"email": "Email is required"}
    assert rec.title == "Validation Failed"
    assert directive == "notify"


def test_validation_title_from_body():
    rec, _ = classify({"status": 400, "message": "Check the form", "errors": {"email": "bad"}})
    assert rec.title == "Check the form"


def test_400_without_field_errors_is_generic():
    rec, directive = classify({"status": 400, "message": "Invalid Operation", "details": "Insufficient stock"})
    assert rec.category == "generic-failure"
    assert rec.field_errors == {}
    assert rec.detail == "Insufficient stock"
    assert directive == "notify"


def test_field_errors_dropped_outside_validation():
    rec, _ = classify({"status": 422, "errors": {"email": "bad"}})
    assert rec.category == "generic-failure"
    assert dict(rec.field_errors) == {}


def test_auth_failure_defaults_to_notify():
    rec, directive = classify({"status": 401})
    assert rec.category == "auth-failure"
    assert rec.title == "Authentication Required"
    assert directive == "notify"


def test_auth_failure_caller_override(_settings):
    _, directive = classify({"status": 401}, auth_directive="redirect")
    assert directive == "redirect"
    _settings.auth_failure_directive = "redirect"
    _, directive = classify({"status": 401})
    assert directive == "redirect"


@pytest.mark.parametrize(
    "status,category",
    [(403, "permission-failure"), (404, "not-found"), (500, "server-fault"), (503, "server-fault")],
)
def test_redirect_categories(status, category):
    rec, directive = classify({"status": status})
    assert rec.category == category
    assert rec.status_code == status
    assert directive == "redirect"


def test_other_status_is_generic():
    rec, directive = classify(ResponseFailure(status=409, body={}))
    assert rec.category == "generic-failure"
    assert rec.title == CATEGORY_DEFAULTS["generic-failure"].title
    assert directive == "notify"


def test_server_fault_detail_from_body():
    rec, directive = classify({"status": 500, "message": "Internal Server Error", "details": "Insufficient stock"})
    assert rec.category == "server-fault"
    assert directive == "redirect"
    assert rec.detail == "Insufficient stock"


def test_render_fault_bypasses_status():
    try:
        raise KeyError("price")
    except KeyError as exc:
        fault = RenderFault.wrap(exc, component="ProductCard")
    rec, directive = classify(fault)
    assert rec.category == "server-fault"
    assert directive == "redirect"
    assert rec.source_path == "ProductCard"
    assert "KeyError" in rec.trace


def test_caller_overrides_win():
    rec, _ = classify(
        {"status": 500, "message": "Internal Server Error", "details": "x"},
        title="Order Failed",
        detail="Please try again",
    )
    assert rec.title == "Order Failed"
    assert rec.detail == "Please try again"


def test_blank_body_fields_fall_back_to_defaults():
    rec, _ = classify({"status": 404, "message": "  ", "details": None})
    assert rec.title == "Resource Not Found"
    assert rec.detail == CATEGORY_DEFAULTS["not-found"].detail


def test_httpx_response():
    req = httpx.Request("POST", "https://shop.example/api/register")
    resp = httpx.Response(400, json={"status": 400, "errors": {"password": "Password too short"}}, request=req)
    rec, directive = classify(resp)
    assert rec.category == "validation-failure"
    assert rec.source_path == "/api/register"
    assert directive == "notify"


def test_httpx_response_with_non_json_body():
    req = httpx.Request("GET", "https://shop.example/api/products/9")
    rec, _ = classify(httpx.Response(502, text="<html>bad gateway</html>", request=req))
    assert rec.category == "server-fault"
    assert rec.title == "Internal Server Error"


def test_http_status_error_uses_response():
    req = httpx.Request("GET", "https://shop.example/api/products/9")
    resp = httpx.Response(404, json={"message": "Resource Not Found", "details": "Product 9"}, request=req)
    exc = httpx.HTTPStatusError("not found", request=req, response=resp)
    rec, _ = classify(exc)
    assert rec.category == "not-found"
    assert rec.detail == "Product 9"


def test_api_error_body():
    exc = ApiError(
        code="API_ERROR",
        message="Access Denied",
        http_status=403,
        body={"message": "Access Denied", "details": "Account blocked", "path": "/api/orders"},
    )
    rec, directive = classify(exc)
    assert rec.category == "permission-failure"
    assert rec.detail == "Account blocked"
    assert rec.source_path == "/api/orders"
    assert directive == "redirect"


def test_locally_synthesized_business_error():
    rec, _ = classify(UnauthorizedError("Please log in to continue"), title="Authentication Required")
    assert rec.status_code == 401
    assert rec.title == "Authentication Required"
    assert rec.detail == "Please log in to continue"


@pytest.mark.parametrize("failure", [None, 42, "oops", {"status": "abc"}, {"status": True}, ValueError("x")])
def test_unparseable_input_never_raises(failure):
    rec, directive = classify(failure)
    assert rec.category == "generic-failure"
    assert rec.status_code == UNKNOWN_STATUS
    assert rec.detail == UNEXPECTED_DETAIL
    assert rec.title
    assert directive == "notify"


def test_trace_only_outside_production(_settings):
    body = {"status": 500, "trace": "at OrderService.place"}
    rec, _ = classify(body)
    assert rec.trace == "at OrderService.place"
    _settings.environment = "production"
    rec, _ = classify(body)
    assert rec.trace is None


def test_every_category_has_defaults():
    assert set(CATEGORY_DEFAULTS) == set(CATEGORIES)
    for defaults in CATEGORY_DEFAULTS.values():
        assert defaults.title.strip()
        assert defaults.detail.strip()


@pytest.mark.parametrize(
    "failure",
    [{"message": ""}, {"status": 400, "errors": {"a": "b"}}, {"status": 401}, {"status": 403},
     {"status": 404}, {"status": 500}, {"status": 418}, object()],
)
def test_title_never_empty(failure):
    rec, _ = classify(failure, title="   ")
    assert rec.title.strip()


def test_unparseable_input_keeps_caller_detail():
    rec, directive = classify(ValueError("boom"), title="Order Failed", detail="Insufficient stock")
    assert rec.category == "generic-failure"
    assert rec.title == "Order Failed"
    assert rec.detail == "Insufficient stock"
    assert directive == "notify"


def test_response_failure_without_status_is_connectivity_failure():
    rec, directive = classify(ResponseFailure(status=None, body={"details": "offline"}, path="/api/cart"))
    assert rec.category == "connectivity-failure"
    assert rec.status_code is None
    assert rec.title == "Connection Problem"
    assert rec.detail == "offline"
    assert rec.source_path == "/api/cart"
    assert directive == "redirect"


def test_configuration_error_is_not_an_http_failure():
    rec, _ = classify(ConfigurationError(code="INVALID_DURATION", message="duration_ms must be >= 0"))
    assert not isinstance(ConfigurationError("X", "y"), BusinessError)
    assert rec.category == "generic-failure"
    assert rec.status_code == UNKNOWN_STATUS
