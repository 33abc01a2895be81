"""Capability enrichers.

This module contains the per-browser enrichers applied to a task's
capability just before the task is handed out.
"""

from shardwise.enrichers.base import CapabilityEnricher
from shardwise.enrichers.registry import get_enricher, register, list_enrichers

__all__ = ["CapabilityEnricher", "get_enricher", "register", "list_enrichers"]
