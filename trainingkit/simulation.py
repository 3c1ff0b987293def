"""Feeds random tasks to all schedulers at once and reports on shutdown."""

from __future__ import annotations

import argparse
import random
import signal
import sys
import threading
import time
import tracemalloc
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from trainingkit.metrics import Metrics, get_metrics
from trainingkit.schedulers import (
    AgingScheduler,
    PriorityScheduler,
    RoundRobinScheduler,
    Scheduler,
)
from trainingkit.task import Task

_BANNER = "==============================================================="


class _Waitable(Protocol):
    def wait(self, timeout: Optional[float] = None) -> bool: ...


class _CallProfiler:
    """Call counts and wall-clock time per function on the profiled thread."""

    def __init__(self) -> None:
        self._totals: Dict[str, List[float]] = {}
        self._stack: List[Tuple[str, float]] = []

    @staticmethod
    def _key(frame: Any, event: str, arg: Any) -> str:
        if event.startswith("c_"):
            return f"<built-in {getattr(arg, '__qualname__', repr(arg))}>"
        code = frame.f_code
        return f"{code.co_filename}:{code.co_firstlineno}({code.co_name})"

    def _hook(self, frame: Any, event: str, arg: Any) -> None:
        if event in ("call", "c_call"):
            self._stack.append((self._key(frame, event, arg), time.perf_counter()))
        elif event in ("return", "c_return", "c_exception") and self._stack:
            key, started = self._stack.pop()
            entry = self._totals.setdefault(key, [0, 0.0])
            entry[0] += 1
            entry[1] += time.perf_counter() - started

    def enable(self) -> None:
        sys.setprofile(self._hook)

    def disable(self) -> None:
        sys.setprofile(None)

    def dump(self, path: str) -> None:
        rows = sorted(self._totals.items(), key=lambda kv: kv[1][1], reverse=True)
        with open(path, "w", encoding="utf-8") as out:
            out.write(f"{'calls':>10} {'seconds':>12}  function\n")
            for key, (calls, seconds) in rows:
                out.write(f"{int(calls):>10} {seconds:12.6f}  {key}\n")


def task_producer(
    stop: _Waitable,
    schedulers: Sequence[Scheduler],
    metrics: Optional[Metrics] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """Hand a new random task to every scheduler every 200-800 ms until ``stop``.

    Returns how many tasks were produced.
    """
    metrics = metrics if metrics is not None else get_metrics()
    rng = rng if rng is not None else random.Random()
    pid = 1
    while True:
        delay = (200 + rng.randrange(600)) / 1000
        if stop.wait(delay):
            print("\n[Producer] Stopping task generation...", flush=True)
            return pid - 1
        burst_ms = 50 + rng.randrange(450)
        task = Task(
            pid=pid,
            name=f"Task-{pid}",
            priority=1 + rng.randrange(10),
            cpu_burst=timedelta(milliseconds=burst_ms),
            arrival_time=datetime.now(),
        )
        pid += 1
        for scheduler in schedulers:
            scheduler.add_task(task)
        print(
            f"[Producer] Added: {task.name} (Priority: {task.priority}, Burst: {burst_ms}ms) "
            f"at T={metrics.relative_time():.2f}s",
            flush=True,
        )


def _simulate() -> None:
    metrics = get_metrics()
    metrics.reset()
    schedulers = [
        PriorityScheduler(metrics),
        AgingScheduler(metrics),
        RoundRobinScheduler(metrics),
    ]

    print(_BANNER)
    print("--- OS Scheduler Simulation: Metrics & Timeline Visualization ---")
    print(_BANNER)

    for scheduler in schedulers:
        threading.Thread(target=scheduler.schedule, daemon=True).start()

    stop = threading.Event()
    producer = threading.Thread(
        target=task_producer, args=(stop, schedulers, metrics, random.Random())
    )
    producer.start()

    interrupted = threading.Event()

    def on_signal(signum, frame) -> None:
        interrupted.set()

    previous = {sig: signal.signal(sig, on_signal) for sig in (signal.SIGINT, signal.SIGTERM)}
    print("\nSimulation Running (Press Ctrl+C to initiate graceful shutdown and see report)")
    try:
        while not interrupted.wait(0.5):
            pass
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    print("\nInterrupt received. Closing task production and draining queues...")
    stop.set()
    producer.join()
    for scheduler in schedulers:
        scheduler.shutdown()

    time.sleep(2)
    print(metrics.report())
    print("\nSimulation finished.")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Run the simulation until interrupted, profiling CPU and memory."""
    parser = argparse.ArgumentParser(prog="scheduler-sim", description=__doc__)
    parser.add_argument("--cpuprofile", default="cpu.prof", help="where to write the CPU profile")
    parser.add_argument("--heapprofile", default="heap.prof", help="where to write the memory snapshot")
    args = parser.parse_args(argv)

    profiler = _CallProfiler()
    profiler.enable()
    tracemalloc.start()
    try:
        _simulate()
    finally:
        profiler.disable()
        try:
            profiler.dump(args.cpuprofile)
        except OSError:
            pass
        try:
            tracemalloc.take_snapshot().dump(args.heapprofile)
        except OSError:
            pass
        tracemalloc.stop()


if __name__ == "__main__":
    main()