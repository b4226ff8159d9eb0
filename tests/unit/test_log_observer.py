import logging

import pytest

from chart_mcp.adapters.log_observer import CompositeObserver, LoggingObserver, RecordingObserver
from chart_mcp.components.delivery import DeliveryEvent, DeliveryMode, EventKind

DELIVERED = DeliveryEvent(
    kind=EventKind.DELIVERED,
    label="generate_echarts",
    mode=DeliveryMode.OBJECT_STORE,
    details={"url": "https://store/x.png"},
)
FAILED = DeliveryEvent(
    kind=EventKind.STEP_FAILED,
    label="generate_echarts",
    mode=DeliveryMode.LOCAL_FILE,
    details={"error": "disk full"},
)


def test_routine_events_log_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG):
        LoggingObserver().notify(DELIVERED)

    assert len(caplog.records) == 1
    assert caplog.records[0].levelno == logging.DEBUG
    assert "generate_echarts delivered [object_store]" in caplog.records[0].message


def test_debug_mode_logs_at_info(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO):
        LoggingObserver(debug=True).notify(DELIVERED)

    assert caplog.records[0].levelno == logging.INFO


def test_failures_log_at_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        LoggingObserver().notify(FAILED)

    assert caplog.records[0].levelno == logging.WARNING
    assert "disk full" in caplog.records[0].message


def test_composite_fans_out() -> None:
    first, second = RecordingObserver(), RecordingObserver()
    CompositeObserver([first, second]).notify(DELIVERED)

    assert first.events == [DELIVERED]
    assert second.kinds() == [EventKind.DELIVERED]
