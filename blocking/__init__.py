"""
Website blocking package for FocusBar.

Blocks distracting sites during work phases by adding a marked block
to the system hosts file. Zero UI dependencies.
"""

from blocking.blocker import WebsiteBlocker, DEFAULT_BLOCK_LIST
from blocking.whitelist import WhitelistStore, normalize_site

__all__ = ["WebsiteBlocker", "DEFAULT_BLOCK_LIST", "WhitelistStore", "normalize_site"]
