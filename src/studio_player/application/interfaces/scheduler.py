"""Port interface for timers driving simulated playback."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable


class ScheduledCall(ABC):
    """Handle for a callback registered with :meth:`Scheduler.call_later`."""

    @abstractmethod
    def cancel(self) -> None:
        ...


class Scheduler(ABC):
    """Interface for scheduling callbacks on the player's event loop."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run ``callback`` once after ``delay`` seconds."""
        ...

    @abstractmethod
    def time(self) -> float:
        """Monotonic clock in seconds."""
        ...
