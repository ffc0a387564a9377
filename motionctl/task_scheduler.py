"""Interval-driven scheduler for control-loop and auxiliary tasks."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

_U32_MASK = 0xFFFFFFFF

TaskFunction = Callable[[], None]


class TaskTimingMode(Enum):
    FIXED_FREQUENCY = auto()
    ADAPTIVE = auto()


@dataclass
class TaskInfo:
    """A registered task together with its timing statistics."""

    function: TaskFunction
    interval_us: int
    last_execution_us: int
    is_control_task: bool
    timing_mode: TaskTimingMode
    execution_time_us: int = 0
    max_execution_time_us: int = 0
    missed_deadlines: int = 0
    enabled: bool = True

    def reset_stats(self) -> None:
        self.execution_time_us = 0
        self.max_execution_time_us = 0
        self.missed_deadlines = 0


@dataclass(frozen=True)
class TaskStats:
    """Timing figures of one task; the average is the last execution time."""

    avg_execution_time_us: int
    max_execution_time_us: int
    missed_deadlines: int


@dataclass(frozen=True)
class SchedulerStats:
    control_task_count: int
    auxiliary_task_count: int
    total_missed_deadlines: int
    average_control_loop_time_us: int


def _default_clock() -> int:
    return (time.monotonic_ns() // 1000) & _U32_MASK


def _elapsed(start: int, end: int) -> int:
    """Microseconds from ``start`` to ``end`` on a wrapping 32-bit counter."""
    return (end - start) & _U32_MASK


class TaskScheduler:
    """Runs registered tasks once their interval has elapsed.

    Control tasks count a missed deadline whenever one run takes longer than
    its interval; auxiliary tasks do not. Task indices are positions within
    each list; a lookup by index checks the control tasks first and then the
    auxiliary tasks.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock if clock is not None else _default_clock
        self._control_tasks: list[TaskInfo] = []
        self._auxiliary_tasks: list[TaskInfo] = []
        self._total_executions = 0
        self._total_execution_time_us = 0
        self._total_missed_deadlines = 0
        self._last_control_loop_start_us = 0
        self._control_loop_time_us = 0
        self._max_control_loop_time_us = 0

    def _now(self) -> int:
        return self._clock() & _U32_MASK

    @property
    def control_loop_time_us(self) -> int:
        return self._control_loop_time_us

    @property
    def max_control_loop_time_us(self) -> int:
        return self._max_control_loop_time_us

    def initialize(self) -> None:
        """Reset the control-loop timing reference to now."""
        self._last_control_loop_start_us = self._now()

    def _register(
        self, function: TaskFunction, interval_us: int, timing_mode: TaskTimingMode, control: bool
    ) -> int:
        if not callable(function):
            raise TypeError("task function must be callable")
        if interval_us <= 0:
            raise ValueError(f"interval_us must be positive, got {interval_us}")
        task = TaskInfo(
            function=function,
            interval_us=interval_us,
            last_execution_us=self._now(),
            is_control_task=control,
            timing_mode=TaskTimingMode(timing_mode),
        )
        tasks = self._control_tasks if control else self._auxiliary_tasks
        tasks.append(task)
        return len(tasks) - 1

    def register_control_task(
        self,
        function: TaskFunction,
        interval_us: int,
        timing_mode: TaskTimingMode = TaskTimingMode.FIXED_FREQUENCY,
    ) -> int:
        """Add a high-priority task and return its index."""
        return self._register(function, interval_us, timing_mode, control=True)

    def register_auxiliary_task(
        self,
        function: TaskFunction,
        interval_us: int,
        timing_mode: TaskTimingMode = TaskTimingMode.ADAPTIVE,
    ) -> int:
        """Add a low-priority task and return its index."""
        return self._register(function, interval_us, timing_mode, control=False)

    def execute_control_tasks(self) -> int:
        """Run every due control task; return how many ran."""
        current = self._now()
        self._last_control_loop_start_us = current
        executed = 0
        for task in self._control_tasks:
            if task.enabled and self._is_due(task, current):
                duration = self._execute(task, current)
                executed += 1
                if duration > task.interval_us:
                    task.missed_deadlines += 1
                    self._total_missed_deadlines += 1
                current = self._now()
        self._control_loop_time_us = _elapsed(self._last_control_loop_start_us, self._now())
        self._max_control_loop_time_us = max(
            self._max_control_loop_time_us, self._control_loop_time_us
        )
        return executed

    def execute_auxiliary_tasks(self) -> int:
        """Run every due auxiliary task; return how many ran."""
        current = self._now()
        executed = 0
        for task in self._auxiliary_tasks:
            if task.enabled and self._is_due(task, current):
                self._execute(task, current)
                executed += 1
                current = self._now()
        return executed

    def _find(self, task_index: int) -> TaskInfo:
        if task_index >= 0:
            for tasks in (self._control_tasks, self._auxiliary_tasks):
                if task_index < len(tasks):
                    return tasks[task_index]
        raise IndexError(f"task index {task_index} out of range")

    def enable_task(self, task_index: int) -> None:
        self._find(task_index).enabled = True

    def disable_task(self, task_index: int) -> None:
        self._find(task_index).enabled = False

    def set_task_interval(self, task_index: int, interval_us: int) -> None:
        if interval_us <= 0:
            raise ValueError(f"interval_us must be positive, got {interval_us}")
        self._find(task_index).interval_us = interval_us

    def task_stats(self, task_index: int) -> TaskStats:
        task = self._find(task_index)
        return TaskStats(task.execution_time_us, task.max_execution_time_us, task.missed_deadlines)

    def reset_task_stats(self, task_index: int = -1) -> None:
        """Reset one task's statistics, or everything for a negative index."""
        if task_index < 0:
            for task in (*self._control_tasks, *self._auxiliary_tasks):
                task.reset_stats()
            self._total_executions = 0
            self._total_execution_time_us = 0
            self._total_missed_deadlines = 0
            self._max_control_loop_time_us = 0
            return
        self._find(task_index).reset_stats()

    def scheduler_stats(self) -> SchedulerStats:
        average = (
            self._total_execution_time_us // self._total_executions
            if self._total_executions
            else 0
        )
        return SchedulerStats(
            len(self._control_tasks),
            len(self._auxiliary_tasks),
            self._total_missed_deadlines,
            average,
        )

    @staticmethod
    def _is_due(task: TaskInfo, current_us: int) -> bool:
        return _elapsed(task.last_execution_us, current_us) >= task.interval_us

    def _execute(self, task: TaskInfo, current_us: int) -> int:
        start = self._now()
        task.function()
        duration = _elapsed(start, self._now())
        task.execution_time_us = duration
        task.max_execution_time_us = max(task.max_execution_time_us, duration)
        self._total_executions += 1
        self._total_execution_time_us += duration
        task.last_execution_us = current_us
        return duration