"""Tests for the log handler that mirrors records into the Logs panel."""

import logging
from types import SimpleNamespace

import pytest

pytest.importorskip("tkinter")

from hunt.ui import TkLogHandler  # noqa: E402


class _FakeRoot:
    def __init__(self) -> None:
        self.scheduled = []

    def after(self, delay: int, callback) -> None:
        self.scheduled.append(callback)


def test_detached_handler_stops_posting_to_tk() -> None:
    ui = SimpleNamespace(root=_FakeRoot(), _append_log=lambda line: None)
    handler = TkLogHandler(ui)
    log = logging.getLogger("hunt.tests.ui")
    handler.attach()
    try:
        log.warning("while running")
        assert len(ui.root.scheduled) == 1
    finally:
        handler.detach()

    log.warning("after shutdown")
    assert len(ui.root.scheduled) == 1
    assert handler not in logging.getLogger().handlers
