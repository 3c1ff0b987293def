import threading
from datetime import datetime, timedelta

from trainingkit.metrics import Metrics, get_metrics
from trainingkit.task import Task


class _FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_get_metrics_is_shared():
    first = get_metrics()
    second = get_metrics()
    before = second.context_switches
    first.record_context_switch()
    assert second.context_switches == before + 1


def test_relative_time_follows_clock():
    clock = _FakeClock()
    metrics = Metrics(clock=clock)
    clock.now += 2.5
    assert metrics.relative_time() == 2.5


def test_reset_restarts_clock_and_clears_counts():
    clock = _FakeClock()
    metrics = Metrics(clock=clock)
    metrics.record_context_switch()
    metrics.record_starvation()
    metrics.record_completion(Task(pid=1))
    clock.now += 4
    metrics.reset()
    assert metrics.relative_time() == 0
    assert metrics.context_switches == 0
    assert metrics.starvation_count == 0
    assert metrics.completed_tasks() == []


def test_record_completion_stamps_a_copy():
    metrics = Metrics()
    task = Task(pid=7, priority=3)
    metrics.record_completion(task)
    (done,) = metrics.completed_tasks()
    assert done.pid == 7
    assert done.completion_time is not None
    assert task.completion_time is None


def test_completed_tasks_returns_copy_in_order():
    metrics = Metrics()
    for pid in (3, 1, 2):
        metrics.record_completion(Task(pid=pid))
    snapshot = metrics.completed_tasks()
    snapshot.clear()
    assert [t.pid for t in metrics.completed_tasks()] == [3, 1, 2]


def test_counters_are_thread_safe():
    metrics = Metrics()

    def work():
        for _ in range(200):
            metrics.record_context_switch()
            metrics.record_starvation()

    threads = [threading.Thread(target=work) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert metrics.context_switches == 2000
    assert metrics.starvation_count == 2000


def test_report_contents():
    clock = _FakeClock()
    metrics = Metrics(clock=clock)
    arrival = datetime(2024, 1, 1, 12, 0, 0)
    metrics.record_completion(
        Task(pid=1, priority=2, arrival_time=arrival,
             first_scheduled_time=arrival + timedelta(seconds=1))
    )
    metrics.record_completion(
        Task(pid=2, priority=2, arrival_time=arrival,
             first_scheduled_time=arrival + timedelta(seconds=3))
    )
    metrics.record_context_switch()
    metrics.record_context_switch()
    metrics.record_context_switch()
    clock.now += 2
    text = metrics.report()
    assert "SCHEDULING METRICS REPORT" in text
    assert "Total Time Elapsed: 2.00s" in text
    assert "Total Tasks Completed: 2" in text
    assert "Throughput: 1.00 tasks/sec" in text
    assert "Total Context Switches: 3" in text
    assert "Total Starvation Events (>5s): 0" in text
    assert "Priority  2:" in text
    assert "(Count: 2)" in text


def test_report_skips_priorities_outside_range():
    metrics = Metrics()
    metrics.record_completion(Task(pid=1, priority=11))
    metrics.record_completion(Task(pid=2, priority=10))
    text = metrics.report()
    assert "Priority 11" not in text
    assert "Priority 10:" in text