from typing import Any, Dict

from shardwise.enrichers.base import CapabilityEnricher
from shardwise.utils.logging import get_logger

log = get_logger("enrich.chrome")

CHROME_OPTIONS_KEY = "goog:chromeOptions"

class ChromeEnricher(CapabilityEnricher):
    """
    Points Chrome downloads at a directory private to the task.
    """

    name = "chrome"

    async def enrich(self, capability: Dict[str, Any], task_id: str) -> Dict[str, Any]:
        """Set download preferences in the chrome options of the capability.

        Other chrome options and prefs already on the capability are kept.

        :param capability: Deep copy of the queue's capability.
        :param task_id: Identifier of the task.
        :return: The same capability with download prefs set.
        """
        download_dir = self.download_directory(capability, task_id)

        chrome_options = capability.setdefault(CHROME_OPTIONS_KEY, {})
        prefs = chrome_options.setdefault("prefs", {})
        prefs["download"] = {
            "prompt_for_download": False,
            "default_directory": download_dir,
        }

        log.debug(f"Task {task_id}: chrome downloads go to {download_dir}")
        return capability
