"""Priority, aging and multi-level round-robin schedulers for simulated tasks."""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Deque, List, Optional, Tuple

from trainingkit.metrics import Metrics, get_metrics
from trainingkit.minheap import MinHeap
from trainingkit.task import Task

STARVATION_THRESHOLD = timedelta(seconds=5)
AGING_INTERVAL = 0.5
HIGH_PRIORITY_MAX = 3
MEDIUM_PRIORITY_MAX = 7
QUANTA = (
    timedelta(milliseconds=50),
    timedelta(milliseconds=100),
    timedelta(milliseconds=200),
)


def _by_priority(a: Task, b: Task) -> bool:
    return a.priority < b.priority


class Scheduler(ABC):
    """Runs submitted tasks until shut down; ``schedule`` blocks the caller."""

    def __init__(self, metrics: Optional[Metrics] = None) -> None:
        self.metrics = metrics if metrics is not None else get_metrics()
        self.completed = 0
        self._cond = threading.Condition()
        self._stopping = False

    @abstractmethod
    def add_task(self, task: Task) -> None:
        """Queue a copy of ``task``."""

    @abstractmethod
    def schedule(self) -> None:
        """Run queued tasks until shut down and the queue is empty."""

    @abstractmethod
    def shutdown(self) -> None:
        """Ask ``schedule`` to return once nothing is left to run."""

    def _log(self, message: str) -> None:
        print(f"[T={self.metrics.relative_time():.2f}s] {message}", flush=True)

    def _begin(self, task: Task) -> None:
        now = datetime.now()
        if task.first_scheduled_time is None:
            task.first_scheduled_time = now
            if task.arrival_time is not None and now - task.arrival_time > STARVATION_THRESHOLD:
                self.metrics.record_starvation()
        self.metrics.record_context_switch()

    def _finish(self, task: Task) -> None:
        with self._cond:
            self.completed += 1
        self.metrics.record_completion(task)

    def _request_stop(self) -> None:
        with self._cond:
            self._stopping = True
            self._cond.notify_all()


class _HeapScheduler(Scheduler):
    label = "Scheduler"

    def __init__(self, metrics: Optional[Metrics] = None) -> None:
        super().__init__(metrics)
        self._queue: MinHeap[Task] = MinHeap(_by_priority)

    def add_task(self, task: Task) -> None:
        with self._cond:
            self._queue.insert(replace(task))
            self._cond.notify()

    def schedule(self) -> None:
        while True:
            with self._cond:
                while not self._queue:
                    if self._stopping:
                        self._log(f"{self.label}: Shutdown signal received. Exiting.")
                        return
                    self._cond.wait()
                task = self._queue.extract_min()
            self._run(task)

    def _run(self, task: Task) -> None:
        self._begin(task)
        self._log(f"PID={task.pid} (P{task.priority}) START | {self.label}")
        time.sleep(task.cpu_burst.total_seconds() / 10)
        self._log(f"PID={task.pid} DONE | {self.label}")
        self._finish(task)

    def shutdown(self) -> None:
        self._request_stop()


class PriorityScheduler(_HeapScheduler):
    """Always runs the waiting task with the lowest priority value."""

    label = "Priority Scheduler"

    def __init__(self, metrics: Optional[Metrics] = None) -> None:
        super().__init__(metrics)

    def add_task(self, task: Task) -> None:
        super().add_task(task)

    def schedule(self) -> None:
        super().schedule()

    def shutdown(self) -> None:
        super().shutdown()


class AgingScheduler(_HeapScheduler):
    """Priority scheduler whose waiting tasks gain priority every half second."""

    label = "Aging Scheduler"

    def __init__(self, metrics: Optional[Metrics] = None) -> None:
        super().__init__(metrics)
        self._stop_aging = threading.Event()
        self._ager: Optional[threading.Thread] = None

    def add_task(self, task: Task) -> None:
        with self._cond:
            super().add_task(task)
            if self._ager is None:
                self._ager = threading.Thread(target=self._age_loop, daemon=True)
                self._ager.start()

    def _age_loop(self) -> None:
        while not self._stop_aging.wait(AGING_INTERVAL):
            self.age()

    def age(self) -> None:
        """Lower every waiting task's priority value by one, never below 1."""
        with self._cond:
            data = self._queue.data
            if not data:
                return
            for task in data:
                if task.priority > 1:
                    task.priority -= 1
            for index in range(len(data) // 2 - 1, -1, -1):
                self._queue.heapify_down(index)

    def schedule(self) -> None:
        super().schedule()

    def shutdown(self) -> None:
        self._stop_aging.set()
        super().shutdown()


def _level(priority: int) -> int:
    if priority <= HIGH_PRIORITY_MAX:
        return 0
    if priority <= MEDIUM_PRIORITY_MAX:
        return 1
    return 2


def _format_quantum(quantum: timedelta) -> str:
    return f"{round(quantum.total_seconds() * 1000)}ms"


class RoundRobinScheduler(Scheduler):
    """Three round-robin queues by priority band, with time slices of 50/100/200 ms.

    A high-priority arrival pre-empts a running task of lower priority.
    """

    def __init__(self, metrics: Optional[Metrics] = None) -> None:
        super().__init__(metrics)
        self._queues: List[Deque[Task]] = [deque(), deque(), deque()]
        self._running: Optional[Task] = None
        self._interrupt = threading.Event()

    def add_task(self, task: Task) -> None:
        task = replace(task)
        with self._cond:
            level = _level(task.priority)
            self._queues[level].append(task)
            if (
                level == 0
                and self._running is not None
                and self._running.priority > HIGH_PRIORITY_MAX
            ):
                self._interrupt.set()
            self._cond.notify()

    def _next_task(self) -> Tuple[Task, timedelta]:
        for queue, quantum in zip(self._queues, QUANTA):
            if queue:
                return queue.popleft(), quantum
        raise LookupError("no queued task")

    def schedule(self) -> None:
        while True:
            with self._cond:
                while not any(self._queues):
                    if self._stopping:
                        self._log("Round Robin Scheduler: Shutdown signal received. Exiting.")
                        return
                    self._cond.wait()
                task, quantum = self._next_task()
            self._execute(task, quantum)

    def _execute(self, task: Task, quantum: timedelta) -> None:
        with self._cond:
            self._running = task
        self._begin(task)
        self._log(
            f"PID={task.pid} (P{task.priority}) START | Round Robin (Q={_format_quantum(quantum)})"
        )

        run_time = min(task.cpu_burst, quantum)
        if self._interrupt.wait(run_time.total_seconds()):
            self._interrupt.clear()
            self._log(f"PID={task.pid} PRE-EMPTED | Round Robin")
            task.cpu_burst -= run_time / 2
        else:
            task.cpu_burst -= run_time
            self._log(f"PID={task.pid} QUANTUM DONE | Round Robin")

        with self._cond:
            self._running = None
            if task.cpu_burst > timedelta(0):
                self._queues[_level(task.priority)].append(task)
                self._cond.notify()
                return
        self._log(f"PID={task.pid} DONE | Round Robin")
        self._finish(task)

    def shutdown(self) -> None:
        self._request_stop()