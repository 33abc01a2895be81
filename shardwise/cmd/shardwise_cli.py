import typer
from pathlib import Path
from typing import Optional

from shardwise.utils.config import load_config
from shardwise.cmd.cli import plan, queues, config_app
from shardwise.utils.logging import setup_logging, get_logger

log = get_logger("cli")

app = typer.Typer(no_args_is_help=True, help="shardwise - fair task scheduling for sharded test runs")

@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Write logs to file"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
):
    config = load_config(config_file)

    # Override with CLI args
    level = "DEBUG" if verbose else config.logging.level
    log_path = log_file or (Path(config.logging.file) if config.logging.file else None)
    setup_logging(level=level, log_file=log_path, verbose=verbose or config.logging.verbose)

app.command("plan")(plan)
app.command("queues")(queues)
app.add_typer(config_app, name="config", help="Configuration management")

def main():
    app()

if __name__ == "__main__":
    main()
