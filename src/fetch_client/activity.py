"""
In-flight request tracking for HttpClient.

Every fetch call enters the tracker once when it starts and exits once when
its outcome is known, whichever way it settles. Both operations are plain
synchronous updates, so no locking is needed on a single event loop.
"""


class ActivityTracker:
    """Counter of in-flight fetch calls with a derived ``is_active`` flag."""

    def __init__(self):
        self._count = 0
        self._is_active = False

    @property
    def count(self) -> int:
        return self._count

    @property
    def is_active(self) -> bool:
        return self._is_active

    def enter(self) -> None:
        self._count += 1
        self._is_active = self._count > 0

    def exit(self) -> None:
        if self._count == 0:
            raise RuntimeError("ActivityTracker.exit() called without a matching enter()")
        self._count -= 1
        self._is_active = self._count > 0

    def __repr__(self) -> str:
        return f"ActivityTracker(count={self._count})"
