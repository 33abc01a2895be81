"""Exception types raised by shardwise."""


class ShardwiseError(Exception):
    """Base exception for shardwise errors."""


class ConfigError(ShardwiseError):
    """Raised when a suite or capability configuration is unusable."""


class EnrichmentError(ShardwiseError):
    """Raised when a capability enricher fails for a claimed task."""

    def __init__(self, task_id: str, kind: str, message: str):
        super().__init__(f"Enriching {kind} capability for task {task_id} failed: {message}")
        self.task_id = task_id
        self.kind = kind
