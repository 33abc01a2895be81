"""
Planning commands for the shardwise CLI.

These commands build a scheduler from a suite file and show what it would
hand out, without running any specs.

Commands:
- plan: Drive the scheduler in waves and print every task
- queues: List the work queues built from the suite
"""

import asyncio
import typer
from rich import print
from pathlib import Path
from typing import List, Optional
from rich.table import Table

from shardwise.errors import ShardwiseError
from shardwise.suite import load_suite
from shardwise.scheduler import TaskScheduler, Task
from shardwise.utils.logging import get_logger

log = get_logger("cli.plan")

async def drive_in_waves(scheduler: TaskScheduler) -> List[List[Task]]:
    """
    Claim tasks wave by wave until nothing is outstanding.

    A wave claims tasks until the scheduler has none to offer or the reported
    concurrency limit is reached, then releases all of them.

    :param scheduler: Freshly built scheduler.
    :return: The tasks of each wave in claim order.
    """
    waves = []
    while scheduler.num_tasks_outstanding() > 0:
        wave = []
        limit = scheduler.max_concurrent_tasks()
        while scheduler.count_active_tasks() < limit:
            task = await scheduler.next_task()
            if task is None:
                break
            wave.append(task)

        if not wave:
            log.warning(f"{scheduler.num_tasks_outstanding()} tasks outstanding but none claimable")
            break

        waves.append(wave)
        for task in wave:
            task.done()
    return waves

def _build(suite_file: Path, max_sessions: Optional[int]) -> TaskScheduler:
    suite = load_suite(suite_file)
    if max_sessions is not None:
        suite.max_sessions = max_sessions
    return TaskScheduler(suite)

def plan(
    suite_file: Path = typer.Argument(..., help="Suite file (YAML)"),
    max_sessions: Optional[int] = typer.Option(None, "--max-sessions", "-n", help="Concurrency ceiling per wave"),
) -> None:
    """
    Show the tasks the scheduler would hand out, wave by wave.
    """
    try:
        scheduler = _build(suite_file, max_sessions)
        total = scheduler.num_tasks_outstanding()
        waves = asyncio.run(drive_in_waves(scheduler))
    except ShardwiseError as e:
        print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Wave")
    table.add_column("Task")
    table.add_column("Browser")
    table.add_column("Specs", justify="right")

    for number, wave in enumerate(waves, start=1):
        for task in wave:
            table.add_row(
                str(number),
                task.task_id,
                str(task.capability.get("browser_name", "-")),
                str(len(task.specs)),
            )

    print(table)
    print(
        f"\n[bold green]✓ {total} tasks in {len(waves)} waves[/bold green] "
        f"(max concurrency {scheduler.max_concurrent_tasks()}, "
        f"outstanding {scheduler.num_tasks_outstanding()})"
    )

def queues(
    suite_file: Path = typer.Argument(..., help="Suite file (YAML)"),
) -> None:
    """
    List the work queues built from a suite file.
    """
    try:
        scheduler = _build(suite_file, None)
    except ShardwiseError as e:
        print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Queue")
    table.add_column("Browser")
    table.add_column("Max instances", justify="right")
    table.add_column("Units", justify="right")
    table.add_column("Sharded")

    for position, queue in enumerate(scheduler.task_queues, start=1):
        table.add_row(
            str(position),
            str(queue.capability.get("browser_name", "-")),
            str(queue.max_instances),
            str(len(queue.spec_lists)),
            "yes" if queue.capability.get("shard_test_files") else "no",
        )

    print(table)
