"""Shared counters and completion log for the scheduler simulation."""

from __future__ import annotations

import threading
import time
from collections import defaultdict
from dataclasses import replace
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Callable, Dict, List

from trainingkit.task import Task

_REPORT_RULE = "==============================================="


def _format_duration(duration: timedelta) -> str:
    seconds = duration.total_seconds()
    if abs(seconds) >= 1:
        return f"{seconds:.3f}s"
    return f"{seconds * 1000:.3f}ms"


class Metrics:
    """Thread-safe record of completed tasks, context switches and starvation."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._start = clock()
        self._context_switches = 0
        self._starvation = 0
        self._completed: List[Task] = []

    def reset(self) -> None:
        """Forget everything recorded so far and restart the clock."""
        with self._lock:
            self._completed = []
            self._context_switches = 0
            self._starvation = 0
            self._start = self._clock()

    def record_completion(self, task: Task) -> None:
        """Log a copy of ``task`` stamped with its completion time."""
        done = replace(task, completion_time=datetime.now())
        with self._lock:
            self._completed.append(done)

    def record_context_switch(self) -> None:
        with self._lock:
            self._context_switches += 1

    def record_starvation(self) -> None:
        with self._lock:
            self._starvation += 1

    @property
    def context_switches(self) -> int:
        with self._lock:
            return self._context_switches

    @property
    def starvation_count(self) -> int:
        with self._lock:
            return self._starvation

    def relative_time(self) -> float:
        """Seconds since the metrics were created or last reset."""
        with self._lock:
            start = self._start
        return self._clock() - start

    def completed_tasks(self) -> List[Task]:
        """Completed tasks in the order they finished."""
        with self._lock:
            return list(self._completed)

    def report(self) -> str:
        """Summary of throughput, switches, starvation and waits per priority."""
        with self._lock:
            completed = list(self._completed)
            switches = self._context_switches
            starvation = self._starvation
            start = self._start
        total = self._clock() - start
        if total == 0:
            total = 0.001

        lines = [
            "",
            "========== SCHEDULING METRICS REPORT ==========",
            f"Total Time Elapsed: {total:.2f}s",
            f"Total Tasks Completed: {len(completed)}",
            f"Throughput: {len(completed) / total:.2f} tasks/sec",
            f"Total Context Switches: {switches}",
            f"Total Starvation Events (>5s): {starvation}",
            "",
            "Average Wait Time by Priority Level:",
        ]

        waits: Dict[int, List[timedelta]] = defaultdict(list)
        for task in completed:
            if task.first_scheduled_time is not None and task.arrival_time is not None:
                wait = task.first_scheduled_time - task.arrival_time
            else:
                wait = timedelta(0)
            waits[task.priority].append(wait)

        for priority in range(1, 11):
            times = waits.get(priority)
            if not times:
                continue
            average = sum(times, timedelta(0)) / len(times)
            lines.append(
                f"  Priority {priority:2d}: {_format_duration(average)} (Count: {len(times)})"
            )
        lines.append(_REPORT_RULE)
        return "\n".join(lines)


@lru_cache(maxsize=None)
def get_metrics() -> Metrics:
    """The process-wide metrics instance."""
    return Metrics()