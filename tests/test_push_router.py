# Area: Push Tests
"""Tests for the push router."""

import logging
from unittest.mock import Mock

from gamelift_server._push.events import ProcessTerminateEvent
from gamelift_server._push.router import PushRouter


def make_handler(event_name):
    handler = Mock()
    handler.event_name = event_name
    return handler


class TestPushRouter:
    """Tests for handler registration and routing."""

    def test_register_and_get(self):
        router = PushRouter()
        handler = make_handler("TerminateProcess")
        router.register_handler(handler)
        assert router.get_handler("TerminateProcess") is handler
        assert router.event_names == ["TerminateProcess"]

    def test_get_unknown_returns_none(self):
        assert PushRouter().get_handler("StartGameSession") is None

    def test_route_calls_handler(self):
        router = PushRouter()
        handler = make_handler("TerminateProcess")
        router.register_handler(handler)
        event = ProcessTerminateEvent(termination_time=1)
        router.route(event)
        handler.handle.assert_called_once_with(event)

    def test_route_without_handler_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            PushRouter().route(ProcessTerminateEvent(termination_time=1))
        assert "No handler for push: TerminateProcess" in caplog.text
