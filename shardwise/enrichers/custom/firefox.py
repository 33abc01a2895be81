import shutil
import asyncio
from typing import Any, Dict

from selenium.webdriver.firefox.firefox_profile import FirefoxProfile

from shardwise.enrichers.base import CapabilityEnricher
from shardwise.utils.logging import get_logger

log = get_logger("enrich.firefox")

class FirefoxEnricher(CapabilityEnricher):
    """
    Attaches an encoded Firefox profile that saves downloads to a directory
    private to the task without prompting.
    """

    name = "firefox"

    def preferences(self, download_dir: str) -> Dict[str, Any]:
        """Profile preferences for silent downloads into download_dir."""
        return {
            "browser.download.dir": download_dir,
            "browser.download.folderList": 2,
            "browser.download.manager.showWhenStarting": False,
            "browser.download.defaultFolder": download_dir,
            "browser.helperApps.alwaysAsk.force": False,
            "browser.helperApps.neverAsk.saveToDisk": "application/octet-stream",
        }

    def encode_profile(self, preferences: Dict[str, Any]) -> str:
        """Build a Firefox profile with preferences and encode it.

        The profile starts from selenium's default preferences. Its temporary
        directory is removed once encoded.

        :param preferences: Preference name to value mapping.
        :return: Base64 encoded zip archive of the profile directory.
        """
        profile = FirefoxProfile()
        try:
            for key, value in preferences.items():
                profile.set_preference(key, value)
            return profile.encoded
        finally:
            shutil.rmtree(profile.path, ignore_errors=True)

    async def enrich(self, capability: Dict[str, Any], task_id: str) -> Dict[str, Any]:
        """Store an encoded download profile on the capability.

        :param capability: Deep copy of the queue's capability.
        :param task_id: Identifier of the task.
        :return: The same capability with firefox_profile set.
        """
        download_dir = self.download_directory(capability, task_id)
        preferences = self.preferences(download_dir)

        capability["firefox_profile"] = await asyncio.to_thread(self.encode_profile, preferences)

        log.debug(f"Task {task_id}: firefox downloads go to {download_dir}")
        return capability
