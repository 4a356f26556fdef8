"""
Whitelist management for website blocking.

Sites on the whitelist are never blocked, even when they appear in
the default block list.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

_STRIP_PREFIXES = ("https://", "http://", "www.")


def normalize_site(site: str) -> str:
    """
    Normalize user input into a bare domain.

    "HTTPS://WWW.Example.com/ " -> "example.com"

    Args:
        site: Raw text typed by the user.

    Returns:
        Normalized domain, or an empty string if nothing is left.
    """
    cleaned = site.strip().lower()
    for prefix in _STRIP_PREFIXES:
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix):]
    # Drop any path the user pasted along with the domain
    cleaned = cleaned.split("/", 1)[0]
    return cleaned.strip()


class WhitelistStore:
    """
    Ordered, de-duplicated set of allowed domains persisted as JSON.
    """

    def __init__(self, settings_path: Path):
        """
        Initialize the store and load any saved entries.

        Args:
            settings_path: Path to the JSON settings file
        """
        self.settings_path = settings_path
        self._sites: List[str] = []
        self.load()

    def load(self) -> List[str]:
        """
        Load the whitelist from file, or start empty if not present.

        Returns:
            The loaded entries
        """
        self._sites = []
        if not self.settings_path.exists():
            logger.info("No saved whitelist, starting empty")
            return self.list()

        try:
            with open(self.settings_path, "r") as f:
                data = json.load(f)
            for site in data.get("whitelist", []):
                if isinstance(site, str) and site and site not in self._sites:
                    self._sites.append(site)
            logger.info(f"Loaded whitelist from {self.settings_path} ({len(self._sites)} sites)")
        except (json.JSONDecodeError, AttributeError, IOError, OSError) as e:
            logger.warning(f"Invalid whitelist file, using empty whitelist: {e}")
            self._sites = []

        return self.list()

    def save(self) -> bool:
        """
        Save the whitelist to file atomically.

        Returns:
            True if saved successfully, False otherwise
        """
        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            temp_fd, temp_path = tempfile.mkstemp(
                suffix='.tmp',
                prefix='whitelist_',
                dir=self.settings_path.parent
            )

            try:
                with os.fdopen(temp_fd, 'w') as f:
                    json.dump({"whitelist": self._sites}, f, indent=2)
                os.replace(temp_path, self.settings_path)
                logger.debug(f"Saved whitelist to {self.settings_path}")
                return True
            except Exception:
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass
                raise

        except Exception as e:
            logger.error(f"Failed to save whitelist: {e}")
            return False

    def add(self, site: str) -> bool:
        """
        Add a site to the whitelist.

        Args:
            site: Domain or URL (normalized before storing)

        Returns:
            True if the site was added, False if empty or already present
        """
        cleaned = normalize_site(site)
        if not cleaned or cleaned in self._sites:
            return False
        self._sites.append(cleaned)
        logger.info(f"Added to whitelist: {cleaned}")
        self.save()
        return True

    def remove(self, site: str) -> bool:
        """
        Remove an exact entry from the whitelist.

        Returns:
            True if removed, False if not found
        """
        if site not in self._sites:
            return False
        self._sites.remove(site)
        logger.info(f"Removed from whitelist: {site}")
        self.save()
        return True

    def list(self) -> List[str]:
        """Get the entries in insertion order."""
        return list(self._sites)

    def contains(self, site: Optional[str]) -> bool:
        """Check whether an exact entry is whitelisted."""
        return site in self._sites

    def __len__(self) -> int:
        return len(self._sites)
