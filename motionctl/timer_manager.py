"""Periodic and one-shot timers that run a callback when they fire."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

TimerCallback = Callable[[], None]

DEFAULT_TIMER_COUNT = 2


class TimerError(ValueError):
    """A timer was asked for with an invalid index, interval or callback."""


@dataclass
class _TimerSlot:
    running: bool = False
    interval_us: int = 0
    auto_reload: bool = False
    callback: TimerCallback | None = None


class TimerManager:
    """Owns a fixed set of timers, addressed by index.

    Firing is driven from outside through :meth:`fire`, which stands in for
    the timer's alarm. A timer started with ``auto_reload`` keeps running
    after it fires; a one-shot timer stops after its first alarm.
    """

    def __init__(self, timer_count: int = DEFAULT_TIMER_COUNT) -> None:
        if timer_count <= 0:
            raise ValueError(f"timer_count must be positive, got {timer_count}")
        self._timers = [_TimerSlot() for _ in range(timer_count)]

    @property
    def timer_count(self) -> int:
        return len(self._timers)

    def _slot(self, timer_index: int) -> _TimerSlot | None:
        if 0 <= timer_index < len(self._timers):
            return self._timers[timer_index]
        return None

    def _require_slot(self, timer_index: int) -> _TimerSlot:
        slot = self._slot(timer_index)
        if slot is None:
            raise TimerError(f"timer index {timer_index} out of range")
        return slot

    def start_timer(
        self,
        timer_index: int,
        interval_us: int,
        auto_reload: bool,
        callback: TimerCallback,
    ) -> None:
        """Start a timer, restarting it if it is already running."""
        slot = self._require_slot(timer_index)
        if interval_us <= 0:
            raise TimerError(f"interval_us must be positive, got {interval_us}")
        if not callable(callback):
            raise TimerError("timer callback must be callable")
        if slot.running:
            self.stop_timer(timer_index)
        slot.interval_us = interval_us
        slot.auto_reload = auto_reload
        slot.callback = callback
        slot.running = True

    def stop_timer(self, timer_index: int) -> None:
        """Pause a timer; stopping a stopped timer does nothing."""
        self._require_slot(timer_index).running = False

    def is_timer_running(self, timer_index: int) -> bool:
        slot = self._slot(timer_index)
        return slot is not None and slot.running

    def timer_interval(self, timer_index: int) -> int:
        """Interval in microseconds, or 0 for an unknown timer."""
        slot = self._slot(timer_index)
        return slot.interval_us if slot is not None else 0

    def set_timer_interval(self, timer_index: int, interval_us: int) -> None:
        """Change the interval; a running timer is restarted with it."""
        slot = self._require_slot(timer_index)
        if interval_us <= 0:
            raise TimerError(f"interval_us must be positive, got {interval_us}")
        slot.interval_us = interval_us
        if slot.running:
            self.stop_timer(timer_index)
            self.start_timer(timer_index, interval_us, slot.auto_reload, slot.callback)

    def timer_callback(self, timer_index: int) -> TimerCallback | None:
        """Callback of a timer, or ``None`` for an unknown or unset timer."""
        slot = self._slot(timer_index)
        return slot.callback if slot is not None else None

    def fire(self, timer_index: int) -> bool:
        """Deliver one alarm to a timer; return whether its callback ran."""
        slot = self._require_slot(timer_index)
        if not slot.running or slot.callback is None:
            return False
        if not slot.auto_reload:
            slot.running = False
        slot.callback()
        return True