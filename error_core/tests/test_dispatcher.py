import pytest

from error_core.classification import classify
from error_core.dispatch import Dispatcher, HistoryNavigator
from error_core.domain.exceptions import ConfigurationError
from error_core.notifications import ManualScheduler, NotificationController


def _setup(**kwargs):
    sched = ManualScheduler()
    ctl = NotificationController(sched, default_duration_ms=5000)
    nav = HistoryNavigator()
    return sched, ctl, nav, Dispatcher(ctl, nav, **kwargs)


def test_notify_goes_to_controller():
    _, ctl, nav, dispatcher = _setup()
    record, directive = classify({"status": 400, "errors": {"email": "Email is required"}})
    dispatcher.dispatch(record, directive)
    assert ctl.current() is record
    assert nav.history == []


def test_redirect_navigates_with_payload():
    _, ctl, nav, dispatcher = _setup()
    record, directive = classify({"status": 404, "details": "Product 42"})
    dispatcher.dispatch(record, directive)
    assert nav.current_view.destination == "/error/404"
    assert nav.current_view.payload is record


def test_redirect_clears_active_toast():
    sched, ctl, nav, dispatcher = _setup()
    toast, _ = classify({"status": 409})
    ctl.show(toast, 5000)
    record, directive = classify({"status": 403})
    dispatcher.dispatch(record, directive)
    assert ctl.current() is None
    assert sched.pending == 0
    assert nav.current_view.destination == "/error/403"


def test_auth_redirect_goes_to_login():
    _, _, nav, dispatcher = _setup()
    record, directive = classify({"status": 401}, auth_directive="redirect")
    dispatcher.dispatch(record, directive)
    assert nav.current_view.destination == "/login"


def test_custom_views_and_duration():
    sched, ctl, nav, dispatcher = _setup(views={"server-fault": "/oops"}, duration_ms=0)
    record, directive = classify({"status": 500})
    dispatcher.dispatch(record, directive)
    assert nav.current_view.destination == "/oops"
    toast, directive = classify({"status": 409})
    dispatcher.dispatch(toast, directive)
    sched.advance(60_000)
    assert ctl.current() is toast


def test_duration_override_per_dispatch():
    sched, ctl, _, dispatcher = _setup()
    record, directive = classify({"status": 409})
    dispatcher.dispatch(record, directive, duration_ms=10_000)
    assert ctl.deadline == 10_000


def test_unknown_directive():
    _, _, _, dispatcher = _setup()
    record, _ = classify({"status": 409})
    with pytest.raises(ConfigurationError):
        dispatcher.dispatch(record, "popup")


def test_history_back():
    _, _, nav, dispatcher = _setup()
    for status in (404, 500):
        record, directive = classify({"status": status})
        dispatcher.dispatch(record, directive)
    assert nav.back().destination == "/error/404"
    assert nav.back() is None
