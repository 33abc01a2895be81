"""Base capability enricher."""

from pathlib import Path
from typing import Any, Dict

from shardwise.utils.config import get_config

class CapabilityEnricher:
    """
    Base enricher for one kind of capability (keyed by browser_name).

    Enrichers receive a private deep copy of a queue's capability and may
    mutate it freely before returning it.
    """

    name: str = "base"

    def __init__(self):
        pass

    async def enrich(self, capability: Dict[str, Any], task_id: str) -> Dict[str, Any]:
        """Abstract method to adapt a capability copy for one task.

        :param capability: Deep copy of the queue's capability.
        :param task_id: Identifier of the task the capability is for.
        :return: The capability to hand to the caller.
        """
        raise NotImplementedError

    def download_directory(self, capability: Dict[str, Any], task_id: str) -> str:
        """Per-task download directory.

        Uses the capability's download_directory, falling back to the
        configured enrich.download_dir.

        :param capability: Capability being enriched.
        :param task_id: Identifier of the task.
        :return: Absolute directory path as string.
        """
        root = capability.get("download_directory") or get_config().enrich.download_dir
        return str(Path(root).expanduser() / task_id)

    def get_info(self) -> Dict[str, Any]:
        """Get the info of the enricher.

        :return: A dictionary containing the enricher information.
        """
        return {
            "name": self.name,
            "class": type(self).__name__,
        }
