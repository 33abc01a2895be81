"""Fair task scheduling across capability work queues."""

from shardwise.scheduler.scheduler import TaskScheduler, WorkQueue, Task, shard_suffix

__all__ = ["TaskScheduler", "WorkQueue", "Task", "shard_suffix"]
