"""
Coalescing scheduler for frame recomputation.

Painting only marks the frame stale and requests a recompute. Each request
replaces any request that has not run yet, so a burst of stamps between two
display refreshes costs a single recompute.

Without hooks the host drives refreshes by calling :py:meth:`FrameScheduler.tick`
once per display frame. A host with its own event loop can pass
``call_later``/``cancel`` hooks instead, e.g. a GUI's frame callback::

    scheduler = FrameScheduler(
        call_later=lambda fn: root.after(16, fn),
        cancel=root.after_cancel,
    )
"""

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class FrameScheduler(object):
    """Run at most one pending callback per display refresh."""

    def __init__(
        self,
        call_later: Optional[Callable[[Callable[[], Any]], Any]] = None,
        cancel: Optional[Callable[[Any], Any]] = None,
    ):
        self._call_later = call_later
        self._cancel = cancel
        self._callback: Optional[Callable[[], Any]] = None
        self._handle: Any = None
        self.requested = 0
        self.executed = 0

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def request(self, callback: Callable[[], Any]) -> None:
        """Cancel any pending run and schedule ``callback`` for the next tick."""
        self.cancel()
        self._callback = callback
        self.requested += 1
        if self._call_later is not None:
            self._handle = self._call_later(self.tick)

    def cancel(self) -> None:
        if self._handle is not None and self._cancel is not None:
            self._cancel(self._handle)
        self._handle = None
        self._callback = None

    def tick(self) -> bool:
        """Run the pending callback, if any. Returns whether one ran."""
        callback, self._callback = self._callback, None
        self._handle = None
        if callback is None:
            return False
        self.executed += 1
        callback()
        return True

    def __repr__(self) -> str:
        return "%s(pending=%s requested=%d executed=%d)" % (
            self.__class__.__name__,
            self.pending,
            self.requested,
            self.executed,
        )
