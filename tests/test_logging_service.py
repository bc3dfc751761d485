"""
Pytest tests for callback routing, level filtering and backlog replay.
"""

from __future__ import annotations

import logging

from interop_counter.services.logging_service import LogLevel, LoggingService


def collect(service, **kwargs):
    seen = []
    service.add_handler(lambda message, level: seen.append((message, level)), **kwargs)
    return seen


def test_messages_reach_callbacks_with_caller_location():
    service = LoggingService(level="DEBUG")
    seen = collect(service)

    service.warning("node slow")

    ((message, level),) = seen
    assert level is LogLevel.WARNING
    assert "test_logging_service.py" in message
    assert message.endswith("WARNING - node slow")


def test_level_filters_messages():
    service = LoggingService(level="INFO")
    seen = collect(service)

    service.debug("hidden")
    service.set_level("debug")
    service.debug("shown")

    assert [m.rsplit(" - ", 1)[-1] for m, _ in seen] == ["shown"]
    assert service.level == logging.DEBUG


def test_backlog_is_replayed_to_late_handlers():
    service = LoggingService(level="INFO", backlog_size=2)
    service.info("one")
    service.info("two")
    service.info("three")

    replayed = collect(service)
    fresh = collect(service, replay=False)

    assert [m.rsplit(" - ", 1)[-1] for m, _ in replayed] == ["two", "three"]
    assert fresh == []


def test_package_module_loggers_are_routed():
    service = LoggingService(level="INFO")
    seen = collect(service, replay=False)

    logging.getLogger("interop_counter.managers.state_manager").error("observer failed")

    assert seen[-1][1] is LogLevel.ERROR


def test_broken_handler_does_not_stop_others():
    service = LoggingService(level="INFO")

    def broken(message, level):
        raise RuntimeError("boom")

    service.add_handler(broken, replay=False)
    seen = collect(service, replay=False)

    service.info("still delivered")

    assert len(seen) == 1
    service.remove_handler(broken)
