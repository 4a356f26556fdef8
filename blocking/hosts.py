"""
Hosts file commands for website blocking.

Builds the shell commands that add and remove FocusBar's marked block
in the hosts file. The commands run through ElevatedRunner, so they are
plain `sh` command strings. Only lines between the two markers are
ever touched.
"""

import shlex
import sys
import logging
from pathlib import Path
from typing import Iterable, List, Optional

import config

logger = logging.getLogger(__name__)


def build_block_lines(
    sites: Iterable[str],
    redirect_ip: str = config.BLOCK_REDIRECT_IP,
) -> List[str]:
    """
    Build the marked block of hosts entries.

    Returns:
        Lines from the start marker to the end marker, inclusive.
    """
    lines = [config.HOSTS_MARKER_START]
    lines.extend(f"{redirect_ip} {site}" for site in sites)
    lines.append(config.HOSTS_MARKER_END)
    return lines


def flush_dns_command(platform: Optional[str] = None) -> str:
    """Get the command that flushes the OS DNS cache (never fails)."""
    platform = platform or sys.platform
    if platform == "darwin":
        return "{ dscacheutil -flushcache; killall -HUP mDNSResponder; } 2>/dev/null || true"
    return "{ resolvectl flush-caches || systemd-resolve --flush-caches; } 2>/dev/null || true"


def build_block_command(
    sites: Iterable[str],
    hosts_path: Path = config.HOSTS_PATH,
    platform: Optional[str] = None,
) -> str:
    """
    Build the command that appends the marked block and flushes DNS.

    A newline is added first if the hosts file does not end with one,
    so the start marker always lands on its own line.
    """
    path = shlex.quote(str(hosts_path))
    entries = " ".join(shlex.quote(line) for line in build_block_lines(sites))
    return (
        f"{{ [ -z \"$(tail -c 1 {path})\" ] || echo >> {path}; }} && "
        f"printf '%s\\n' {entries} | tee -a {path} > /dev/null && "
        f"{flush_dns_command(platform)}"
    )


def build_unblock_command(
    hosts_path: Path = config.HOSTS_PATH,
    platform: Optional[str] = None,
) -> str:
    """
    Build the command that deletes the marked block and flushes DNS.

    BSD sed (macOS) needs an explicit empty suffix for in-place edits.
    """
    platform = platform or sys.platform
    path = shlex.quote(str(hosts_path))
    in_place = "-i ''" if platform == "darwin" else "-i"
    pattern = shlex.quote(f"/^{config.HOSTS_MARKER_START}$/,/^{config.HOSTS_MARKER_END}$/d")
    return f"sed {in_place} {pattern} {path} && {flush_dns_command(platform)}"


def has_block(hosts_path: Path = config.HOSTS_PATH) -> bool:
    """
    Check whether the hosts file contains a FocusBar block.

    Reading the hosts file needs no privileges.
    """
    try:
        content = hosts_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"Could not read hosts file {hosts_path}: {e}")
        return False
    return any(line.strip() == config.HOSTS_MARKER_START for line in content.splitlines())
