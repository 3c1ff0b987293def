import random
from datetime import timedelta

from trainingkit.metrics import Metrics
from trainingkit.schedulers import Scheduler
from trainingkit.simulation import task_producer


class _CountdownStop:
    """Lets the producer run a fixed number of rounds without real waiting."""

    def __init__(self, rounds):
        self.rounds = rounds
        self.delays = []

    def wait(self, timeout=None):
        self.delays.append(timeout)
        if self.rounds == 0:
            return True
        self.rounds -= 1
        return False


class _Collector(Scheduler):
    def __init__(self, metrics):
        super().__init__(metrics)
        self.tasks = []

    def add_task(self, task):
        self.tasks.append(task)

    def schedule(self):
        self._request_stop()

    def shutdown(self):
        self._request_stop()


def _produce(rounds, seed=7):
    metrics = Metrics()
    collectors = [_Collector(metrics), _Collector(metrics)]
    stop = _CountdownStop(rounds)
    count = task_producer(stop, collectors, metrics, random.Random(seed))
    return count, collectors, stop


def test_stop_before_first_task_produces_nothing():
    count, collectors, _ = _produce(0)
    assert count == 0
    assert all(c.tasks == [] for c in collectors)


def test_produces_numbered_tasks_for_every_scheduler():
    count, collectors, _ = _produce(5)
    assert count == 5
    first, second = collectors
    assert [t.pid for t in first.tasks] == [1, 2, 3, 4, 5]
    assert [t.name for t in first.tasks] == [f"Task-{pid}" for pid in range(1, 6)]
    assert [t.pid for t in second.tasks] == [t.pid for t in first.tasks]


def test_task_fields_within_ranges():
    _, collectors, stop = _produce(50)
    for task in collectors[0].tasks:
        assert 1 <= task.priority <= 10
        assert timedelta(milliseconds=50) <= task.cpu_burst < timedelta(milliseconds=500)
        assert task.arrival_time is not None
    assert all(0.2 <= delay < 0.8 for delay in stop.delays)
    assert len(stop.delays) == 51


def test_same_seed_gives_same_tasks():
    _, first, _ = _produce(10, seed=3)
    _, second, _ = _produce(10, seed=3)
    key = lambda t: (t.pid, t.priority, t.cpu_burst)
    assert [key(t) for t in first[0].tasks] == [key(t) for t in second[0].tasks]