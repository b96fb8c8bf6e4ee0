"""Pytest configuration for layerpaint tests."""

from concurrent.futures import Future
from typing import Any

import numpy as np
import pytest
from PIL import Image


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "scenario: end-to-end painting scenarios on a 200x200 canvas",
    )


class SyncExecutor(object):
    """Executor running every job immediately on submit."""

    def __init__(self):
        self.submitted = []
        self.is_shutdown = False

    def submit(self, fn, *args, **kwargs):
        self.submitted.append(args)
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait=True, cancel_futures=False):
        self.is_shutdown = True


class DeferredExecutor(SyncExecutor):
    """Executor holding jobs until :py:meth:`run` is called."""

    def __init__(self):
        super().__init__()
        self._jobs = []

    def submit(self, fn, *args, **kwargs):
        self.submitted.append(args)
        future = Future()
        self._jobs.append((future, fn, args, kwargs))
        return future

    def run(self):
        jobs, self._jobs = self._jobs, []
        for future, fn, args, kwargs in jobs:
            try:
                future.set_result(fn(*args, **kwargs))
            except Exception as e:
                future.set_exception(e)


@pytest.fixture
def sync_executor():
    return SyncExecutor()


@pytest.fixture
def deferred_executor():
    return DeferredExecutor()


@pytest.fixture
def engine(sync_executor):
    from layerpaint import Engine

    with Engine(200, 200, executor=sync_executor) as engine:
        yield engine


@pytest.fixture
def pattern_file(tmp_path):
    """Path of an opaque blue 8x8 pattern image."""
    path = tmp_path / "pattern.png"
    Image.new("RGBA", (8, 8), (0, 0, 255, 255)).save(path)
    return str(path)


@pytest.fixture
def blue_pixels():
    pixels = np.zeros((10, 10, 4), dtype=np.uint8)
    pixels[:, :] = (0, 0, 255, 255)
    return pixels
