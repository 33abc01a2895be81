"""
Enricher Registry

Simple dict mapping capability kind (browser_name) → Enricher class.
To add a new enricher, call the register function with the kind and class.
"""

from typing import Dict, Optional, Type
from shardwise.enrichers.custom import ChromeEnricher, FirefoxEnricher
from shardwise.enrichers.base import CapabilityEnricher

# Global registry
ENRICHERS: Dict[str, Type[CapabilityEnricher]] = {
    "chrome": ChromeEnricher,
    "firefox": FirefoxEnricher,
}

def get_enricher(kind: Optional[str],
                 registry: Optional[Dict[str, Type[CapabilityEnricher]]] = None
                 ) -> Optional[CapabilityEnricher]:
    """
    Get an enricher instance for a capability kind.

    :param kind: Capability kind (browser_name). Case-insensitive; non-strings
                 have no enricher.
    :param registry: Registry to look in (default: ENRICHERS).
    :return: Enricher instance, or None when the kind has no enricher.
    """
    if not kind or not isinstance(kind, str):
        return None

    registry = ENRICHERS if registry is None else registry
    cls = registry.get(kind) or registry.get(kind.lower())
    if cls is None:
        return None
    return cls()

def register(kind: str, cls: Type[CapabilityEnricher]) -> None:
    """Register an enricher class at runtime.

    :param kind: Capability kind (browser_name)
    :param cls: Enricher class for registry
    """
    ENRICHERS[kind.lower()] = cls


def list_enrichers() -> Dict[str, dict]:
    """Return info for every registered enricher."""
    return {k: cls().get_info() for k, cls in ENRICHERS.items()}
