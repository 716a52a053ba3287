"""Shared fixtures: a fake camera and a scripted clock, so no hardware is needed."""

from __future__ import annotations

import logging
from typing import List, Optional
from unittest.mock import MagicMock

import numpy as np
import pytest

from camtiming import capture


class FakeCapture:
    """Stands in for ``cv2.VideoCapture`` and hands out blank 320x240 frames."""

    def __init__(self, index: int = 0, opened: bool = True, fail_reads: Optional[set] = None):
        self.index = index
        self.opened = opened
        self.fail_reads = fail_reads or set()
        self.props = {}
        self.reads = 0
        self.released = False

    def isOpened(self) -> bool:
        return self.opened

    def set(self, prop_id, value) -> bool:
        self.props[prop_id] = value
        return True

    def read(self):
        n = self.reads
        self.reads += 1
        if n in self.fail_reads:
            return False, None
        return True, np.full((240, 320, 3), n % 256, dtype=np.uint8)

    def release(self) -> None:
        self.released = True


class ScriptedClock:
    """Returns the given timestamps (seconds) in order, then keeps advancing by 10 ms."""

    def __init__(self, times: Optional[List[float]] = None):
        self.times = list(times or [])
        self.now = 0.0

    def __call__(self) -> float:
        if self.times:
            self.now = self.times.pop(0)
        else:
            self.now += 0.010
        return self.now


@pytest.fixture
def fake_camera(monkeypatch):
    """Patch ``cv2.VideoCapture`` with a :class:`FakeCapture` and return it."""
    cam = FakeCapture()

    def factory(index):
        cam.index = index
        return cam

    monkeypatch.setattr(capture.cv2, "VideoCapture", factory)
    return cam


@pytest.fixture
def rate_cmd(monkeypatch):
    """Keep v4l2-ctl from actually running."""
    run = MagicMock()
    monkeypatch.setattr(capture.subprocess, "run", run)
    return run


@pytest.fixture
def gui(monkeypatch):
    """Replace the HighGUI calls with mocks."""
    mocks = {}
    for name in ("namedWindow", "imshow", "waitKey", "destroyAllWindows"):
        mocks[name] = MagicMock()
        monkeypatch.setattr(capture.cv2, name, mocks[name])
    return mocks


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """``cli.configure_logging`` replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
