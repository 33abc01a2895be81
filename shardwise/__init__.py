"""
shardwise - fair task scheduling for sharded browser test runs.

Builds one work queue per configured capability, fans spec files out into
shards when asked to, and hands out the next runnable task while honouring
per-capability concurrency limits.
"""

__version__ = "0.1.0"
