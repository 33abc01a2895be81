"""
Task scheduler.

The scheduler keeps track of the spec files that still need to run and which
capability is running what. It suggests the next task (a capability paired
with a list of spec files) while observing the per-capability rules of the
suite configuration:

- max_instances: most tasks from one capability in flight at once
- shard_test_files: run every spec file as its own task
- count: independent replicas of the same capability

Selection rotates among the work queues so a queue that was just served is
the last one reconsidered next time, and no capability starves another.

Claiming a slot and releasing it are guarded by a lock, so release callbacks
may be invoked from worker threads while a driver loop awaits next_task().
Capability enrichment runs after the claim, outside the lock.
"""

import copy
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple, Type
from dataclasses import dataclass, field

from shardwise.errors import ConfigError, EnrichmentError
from shardwise.suite import SuiteConfig, get_specs
from shardwise.enrichers.base import CapabilityEnricher
from shardwise.enrichers.registry import ENRICHERS, get_enricher
from shardwise.utils.config import get_config
from shardwise.utils.logging import get_logger
from shardwise.utils.patterns import resolve_file_patterns, unique

log = get_logger("scheduler")

def shard_suffix(index: int) -> str:
    """
    Letter suffix identifying the shard at a zero-based index.

    Uses bijective base-26 with digits a..z, like spreadsheet columns:
    0 -> "a", 25 -> "z", 26 -> "aa", 27 -> "ab".

    :param index: Zero-based shard index.
    :return: Non-empty lowercase suffix.
    """
    if index < 0:
        raise ValueError(f"Shard index must be non-negative, got {index}")

    n = index + 1
    letters = []
    while n > 0:
        n, remainder = divmod(n - 1, 26)
        letters.append(chr(ord("a") + remainder))
    return "".join(reversed(letters))

@dataclass
class WorkQueue:
    """
    Pending work and concurrency accounting for one capability lane.
    """
    capability: Dict[str, Any]
    # One entry per dispatchable unit
    spec_lists: List[List[str]]
    max_instances: int = 1
    # Cursor into spec_lists; never decreases
    specs_index: int = 0
    num_running_instances: int = 0

    @property
    def remaining(self) -> int:
        """Units not yet claimed."""
        return len(self.spec_lists) - self.specs_index

    @property
    def sharded(self) -> bool:
        return len(self.spec_lists) > 1

    def is_available(self) -> bool:
        """True if a unit can be claimed without exceeding max_instances."""
        return (self.num_running_instances < self.max_instances
                and self.specs_index < len(self.spec_lists))

@dataclass
class Task:
    """
    A unit of work handed out by the scheduler.

    Call done() once the specs have finished running to free the slot.
    """
    capability: Dict[str, Any]
    specs: List[str]
    task_id: str
    done: Callable[[], None] = field(repr=False, compare=False)

class TaskScheduler:
    """
    Scheduler over the work queues built from a suite configuration.

    Queues are built once at construction: one per capability entry, repeated
    `count` times. The queue list is never resized afterwards.
    """

    def __init__(self,
                 suite_config: SuiteConfig,
                 enrichers: Optional[Dict[str, Type[CapabilityEnricher]]] = None):
        """
        Build the work queues for a suite.

        :param suite_config: Suite configuration with at least one capability.
        :param enrichers: Capability kind to enricher class mapping
                          (default: the global enricher registry).
        :raises ConfigError: If the suite configuration or the configured
                             default instance limit is invalid.
        """
        suite_config.validate()

        settings = get_config().scheduler
        default_max_instances = settings.default_max_instances
        if isinstance(default_max_instances, bool) or not isinstance(default_max_instances, int) \
                or default_max_instances < 1:
            raise ConfigError(
                f"scheduler.default_max_instances must be a positive integer, got {default_max_instances!r}"
            )

        self.config = suite_config
        self.max_sessions = suite_config.max_sessions or settings.max_sessions
        self.enrichers = ENRICHERS if enrichers is None else enrichers
        self.task_queues: List[WorkQueue] = []
        # Helps suggestions rotate amongst capabilities
        self.rotation_index = 0
        self._lock = threading.Lock()

        config_dir = suite_config.config_dir
        excludes = set(resolve_file_patterns(suite_config.exclude, True, config_dir))
        all_specs = [
            path for path in resolve_file_patterns(get_specs(suite_config), False, config_dir)
            if path not in excludes
        ]

        for capability in suite_config.capabilities:
            capability_specs = list(all_specs)
            if capability.get("specs"):
                capability_specs += resolve_file_patterns(capability["specs"], False, config_dir)

            if capability.get("exclude"):
                capability_excludes = set(resolve_file_patterns(capability["exclude"], True, config_dir))
                capability_specs = [
                    path for path in unique(capability_specs) if path not in capability_excludes
                ]

            # Sharding fans out to one unit per spec file; otherwise a single
            # unit holds every spec file, even when there are none
            if capability.get("shard_test_files"):
                spec_lists = [[spec] for spec in capability_specs]
            else:
                spec_lists = [capability_specs]

            max_instances = capability.get("max_instances") or default_max_instances
            for _ in range(capability.get("count") or 1):
                self.task_queues.append(WorkQueue(
                    capability=capability,
                    spec_lists=[list(specs) for specs in spec_lists],
                    max_instances=max_instances,
                ))

            log.debug(
                f"Capability {capability.get('browser_name', '?')}: {len(capability_specs)} specs, "
                f"{len(spec_lists)} units, max_instances={max_instances}, count={capability.get('count') or 1}"
            )

        log.info(
            f"Scheduler ready: {len(self.task_queues)} queues from "
            f"{len(suite_config.capabilities)} capabilities, {len(all_specs)} base specs"
        )

    def _claim(self) -> Optional[Tuple[WorkQueue, str, List[str]]]:
        """
        Reserve a slot on the next eligible queue in rotation order.

        :return: (queue, task_id, specs) or None if no queue is eligible.
        """
        with self._lock:
            count = len(self.task_queues)
            for i in range(count):
                rotated_index = (i + self.rotation_index) % count
                queue = self.task_queues[rotated_index]
                if not queue.is_available():
                    continue

                self.rotation_index = (rotated_index + 1) % count
                queue.num_running_instances += 1

                task_id = str(rotated_index + 1)
                if queue.sharded:
                    task_id += shard_suffix(queue.specs_index)

                specs = list(queue.spec_lists[queue.specs_index])
                queue.specs_index += 1
                return queue, task_id, specs

        return None

    def _release_callback(self, queue: WorkQueue, task_id: str) -> Callable[[], None]:
        """Build the done() callback for a claimed task. Only the first call counts."""
        released = False

        def done() -> None:
            nonlocal released
            with self._lock:
                if released:
                    log.debug(f"Task {task_id} already released")
                    return
                released = True
                queue.num_running_instances -= 1

        return done

    async def next_task(self) -> Optional[Task]:
        """
        Get the next task that is allowed to run without going over max_instances.

        The task's capability is a deep copy of the queue's capability, enriched
        for the task when an enricher is registered for its browser_name. The
        task is returned only once enrichment has finished.

        :return: The next Task, or None if no task is currently available.
        :raises EnrichmentError: If the enricher fails. The claimed slot is
                                 released; the unit stays consumed.
        """
        claim = self._claim()
        if claim is None:
            return None

        queue, task_id, specs = claim
        done = self._release_callback(queue, task_id)

        # Anything failing between claim and hand-off frees the slot
        try:
            capability = copy.deepcopy(queue.capability)
            kind = capability.get("browser_name")
            enricher = get_enricher(kind, self.enrichers)
            if enricher is not None:
                try:
                    capability = await enricher.enrich(capability, task_id)
                except Exception as e:
                    log.error(f"Enricher {enricher.name} failed for task {task_id}: {e}")
                    raise EnrichmentError(task_id, kind, str(e)) from e
        except BaseException:
            done()
            raise

        log.debug(f"Task {task_id}: {len(specs)} specs, capability {capability}")
        return Task(capability=capability, specs=specs, task_id=task_id, done=done)

    def num_tasks_outstanding(self) -> int:
        """
        Number of tasks left to run or currently running.

        Reaches zero once every queue is exhausted and nothing is in flight.
        """
        with self._lock:
            return sum(q.num_running_instances + q.remaining for q in self.task_queues)

    def max_concurrent_tasks(self) -> int:
        """
        Maximum number of concurrent tasks required/permitted.

        A positive max_sessions is reported as is. It is a ceiling for the
        caller to apply; next_task() does not enforce it.
        """
        if self.max_sessions and self.max_sessions > 0:
            return self.max_sessions
        return sum(min(q.max_instances, len(q.spec_lists)) for q in self.task_queues)

    def count_active_tasks(self) -> int:
        """Number of tasks currently running."""
        with self._lock:
            return sum(q.num_running_instances for q in self.task_queues)
