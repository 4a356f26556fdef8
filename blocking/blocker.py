"""
Website blocker using the system hosts file.

Adds a marked block of loopback entries for distracting sites while
a work phase is running and removes it again for breaks. All edits go
through ElevatedRunner; failures are logged and leave the blocker's
flags untouched.
"""

import sys
import logging
from pathlib import Path
from typing import List, Optional, Sequence

import config
from blocking import hosts
from blocking.privileges import ElevatedRunner
from blocking.whitelist import WhitelistStore

logger = logging.getLogger(__name__)


# Common distracting sites blocked during work phases
DEFAULT_BLOCK_LIST = (
    "facebook.com", "www.facebook.com",
    "twitter.com", "www.twitter.com", "x.com", "www.x.com",
    "instagram.com", "www.instagram.com",
    "youtube.com", "www.youtube.com",
    "tiktok.com", "www.tiktok.com",
    "reddit.com", "www.reddit.com",
    "netflix.com", "www.netflix.com",
    "twitch.tv", "www.twitch.tv",
)

_AUTH_TOKEN = "authorized"


class WebsiteBlocker:
    """
    Coordinates site blocking through the hosts file.

    Attributes:
        is_authorized: True once an elevated command succeeded in this process
        is_blocking: True while our marked block is in the hosts file
    """

    def __init__(
        self,
        whitelist: WhitelistStore,
        runner: Optional[ElevatedRunner] = None,
        block_list: Sequence[str] = DEFAULT_BLOCK_LIST,
        hosts_path: Path = config.HOSTS_PATH,
        platform: Optional[str] = None,
    ):
        """
        Initialize the website blocker.

        Args:
            whitelist: Store of sites that must never be blocked
            runner: Elevated command runner (default: ElevatedRunner())
            block_list: Candidate sites to block
            hosts_path: Hosts file to edit
            platform: sys.platform value used to pick command variants
        """
        self.whitelist = whitelist
        self.platform = platform or sys.platform
        self.runner = runner or ElevatedRunner(self.platform)
        self.block_list = tuple(block_list)
        self.hosts_path = hosts_path

        self.is_authorized: bool = False
        self.is_blocking: bool = False

    def request_authorization(self) -> bool:
        """
        Ask for administrator privileges once per process.

        Runs a harmless command to trigger the password prompt; the OS keeps
        the credentials cached for a short while afterwards.

        Returns:
            True if authorized (now or earlier), False if denied or cancelled.
        """
        if self.is_authorized:
            return True

        success, output = self.runner.run(f"echo {_AUTH_TOKEN}")
        if success and output == _AUTH_TOKEN:
            self.is_authorized = True
            logger.info("Administrator authorization granted")
            return True

        logger.info("Administrator authorization not granted")
        return False

    def sites_to_block(self) -> List[str]:
        """
        Get block list entries that are not whitelisted.

        A site is skipped if either its own name or its name without
        "www." is on the whitelist.
        """
        sites = []
        for site in self.block_list:
            base_domain = site[len("www."):] if site.startswith("www.") else site
            if self.whitelist.contains(site) or self.whitelist.contains(base_domain):
                continue
            sites.append(site)
        return sites

    def enable_blocking(self) -> None:
        """Add the marked block to the hosts file and flush DNS."""
        # Only one marked block may exist in the hosts file
        if self.is_blocking:
            return

        sites = self.sites_to_block()

        if not sites:
            # Everything is whitelisted - nothing to write
            self.is_blocking = True
            logger.info("All block list sites are whitelisted, nothing to block")
            return

        if not self.is_authorized:
            self.request_authorization()

        command = hosts.build_block_command(sites, self.hosts_path, self.platform)
        success, _ = self.runner.run(command)
        if success:
            self.is_blocking = True
            self.is_authorized = True
            logger.info(f"Website blocking enabled ({len(sites)} sites)")
        else:
            logger.warning("Could not enable website blocking")

    def disable_blocking(self) -> None:
        """Remove the marked block from the hosts file and flush DNS."""
        if not self.is_blocking:
            return

        command = hosts.build_unblock_command(self.hosts_path, self.platform)
        success, _ = self.runner.run(command)
        if success:
            self.is_blocking = False
            logger.info("Website blocking disabled")
        else:
            logger.warning("Could not disable website blocking")

    def remove_stale_block(self) -> bool:
        """
        Remove a block left behind by a previous run that did not exit cleanly.

        Returns:
            True if the hosts file is clean afterwards, False otherwise.
        """
        if not hosts.has_block(self.hosts_path):
            logger.info("No leftover FocusBar entries in hosts file")
            return True

        if not self.request_authorization():
            return False

        command = hosts.build_unblock_command(self.hosts_path, self.platform)
        success, _ = self.runner.run(command)
        if success:
            self.is_blocking = False
            logger.info("Removed leftover FocusBar entries from hosts file")
        else:
            logger.warning("Could not remove leftover FocusBar entries")
        return success
