"""Task record shared by the scheduler simulation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional


class TaskStatus(str, Enum):
    READY = "READY"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    STARVED = "STARVED"


@dataclass
class Task:
    """A unit of simulated work; lower ``priority`` values run first."""

    pid: int
    name: str = ""
    priority: int = 0
    cpu_burst: timedelta = timedelta(0)
    deadline: Optional[datetime] = None
    arrival_time: Optional[datetime] = None
    wait_time: timedelta = timedelta(0)
    turnaround_time: timedelta = timedelta(0)
    status: TaskStatus = TaskStatus.READY
    first_scheduled_time: Optional[datetime] = None
    completion_time: Optional[datetime] = None