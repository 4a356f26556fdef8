#!/usr/bin/env python3
"""
FocusBar - Main Entry Point

A menu bar focus timer: 25 minute work phases, 5 minute breaks,
sound and voice cues, and optional blocking of distracting websites
while you work.

Usage:
    python main.py            # Launch menu bar app (default)
    python main.py --cli      # Launch CLI mode
    python main.py --unblock  # Remove leftover blocking entries and exit
"""

import sys
import logging
import argparse
from typing import Dict, Optional

import config
from instance_lock import check_single_instance, get_existing_pid
from core.engine import TimerEngine
from core.phases import Phase
from blocking.blocker import WebsiteBlocker
from blocking.whitelist import WhitelistStore

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format=config.LOG_FORMAT
)
logger = logging.getLogger(__name__)


CLI_HELP = """
Commands:
  start            Start or resume the timer
  pause            Pause the timer
  reset            Restart the current phase
  skip             Skip to the next phase
  end              End the session (back to an idle work phase)
  block on|off     Block distracting sites during work phases
  auth             Ask for administrator privileges now
  allow <site>     Never block <site>
  disallow <site>  Remove <site> from the allowed list
  list             Show allowed sites
  voice            Toggle voice cues
  lang             Toggle voice language (EN/ES)
  status           Show timer status
  help             Show this help
  quit             Exit FocusBar
"""


class FocusBarCLI:
    """
    Terminal front end for the timer engine.
    """

    def __init__(self, engine: Optional[TimerEngine] = None):
        """Initialize FocusBar CLI."""
        self.engine = engine or TimerEngine()
        self._last_phase: Phase = self.engine.phase
        self.engine.subscribe(self._on_engine_change)

    def _on_engine_change(self, status: Dict) -> None:
        """Announce phase changes (the timer itself ticks silently)."""
        if status["phase"] is not self._last_phase:
            self._last_phase = status["phase"]
            print(f"\n⏱  {status['phase'].title} — {status['time_string']}")

    def display_welcome(self) -> None:
        print("\n" + "=" * 50)
        print("🍅 FocusBar - Focus Timer")
        print("=" * 50)
        print(CLI_HELP)

    def print_status(self) -> None:
        status = self.engine.get_status()
        state = "running" if status["is_running"] else "paused" if self.engine.has_started_once else "idle"
        print(f"{status['phase'].title}: {status['time_string']} ({state})")
        print(f"Site blocking: {'on' if status['blocking_enabled'] else 'off'}"
              f"{' (active)' if status['is_blocking'] else ''}"
              f" | authorized: {'yes' if status['is_authorized'] else 'no'}")

    def handle(self, line: str) -> bool:
        """
        Run one command.

        Returns:
            False when the user asked to quit, True otherwise.
        """
        parts = line.strip().split(maxsplit=1)
        if not parts:
            return True
        command = parts[0].lower()
        argument = parts[1] if len(parts) > 1 else ""

        if command == "start":
            self.engine.start()
        elif command == "pause":
            self.engine.stop()
        elif command == "reset":
            self.engine.reset()
        elif command == "skip":
            self.engine.toggle_mode()
        elif command == "end":
            self.engine.end_session()
        elif command == "block":
            if argument.lower() not in ("on", "off"):
                print("Usage: block on|off")
            else:
                self.engine.set_blocking_enabled(argument.lower() == "on")
        elif command == "auth":
            if self.engine.request_authorization():
                print("✓ Authorized")
            else:
                print("✗ Not authorized")
        elif command == "allow":
            if not self.engine.add_to_whitelist(argument):
                print("Nothing added (empty or already allowed)")
        elif command == "disallow":
            if not self.engine.remove_from_whitelist(argument.strip()):
                print(f"Not in allowed list: {argument.strip()}")
        elif command == "list":
            sites = self.engine.get_status()["whitelist"]
            print("\n".join(f"  • {site}" for site in sites) if sites else "No allowed sites")
        elif command == "voice":
            mode = self.engine.audio.toggle_audio_mode()
            print("Voice cues on" if mode == config.AUDIO_SOUND_AND_VOICE else "Voice cues off")
        elif command == "lang":
            print(f"Language: {self.engine.audio.toggle_language().upper()}")
        elif command == "status":
            self.print_status()
        elif command == "help":
            print(CLI_HELP)
        elif command in ("quit", "exit"):
            return False
        else:
            print(f"Unknown command: {command} (type 'help')")
        return True

    def run(self) -> None:
        """Read commands until quit or end of input."""
        self.display_welcome()
        try:
            while True:
                try:
                    line = input("focusbar> ")
                except EOFError:
                    break
                if not self.handle(line):
                    break
        finally:
            self.engine.cleanup()


def main_cli():
    """Run the CLI version of the application."""
    FocusBarCLI().run()


def main_menubar():
    """Run the menu bar / system tray application."""
    from menubar import run_menubar_app
    run_menubar_app()


def main_unblock() -> int:
    """Remove blocking entries left behind by a crashed run."""
    blocker = WebsiteBlocker(WhitelistStore(config.WHITELIST_FILE))
    if blocker.remove_stale_block():
        print("Hosts file is clean.")
        return 0
    print("Could not remove FocusBar entries from the hosts file.")
    return 1


def main():
    """
    Main entry point — parses arguments and launches appropriate mode.

    Default mode is menu bar unless --cli is specified.
    """
    parser = argparse.ArgumentParser(
        description="FocusBar - Focus Timer with Website Blocking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py            Launch menu bar app (default)
  python main.py --cli      Launch CLI mode
  python main.py --unblock  Remove leftover blocking entries
        """
    )
    parser.add_argument(
        "--cli",
        action="store_true",
        help="Run in CLI mode (terminal-based)",
    )
    parser.add_argument(
        "--unblock",
        action="store_true",
        help="Remove FocusBar entries from the hosts file and exit",
    )

    args = parser.parse_args()

    # Single instance enforcement
    if not check_single_instance():
        existing_pid = get_existing_pid()
        pid_info = f" (PID: {existing_pid})" if existing_pid else ""
        print(f"\nFocusBar is already running{pid_info}.")
        print("Only one instance can run at a time.\n")
        sys.exit(1)

    if args.unblock:
        sys.exit(main_unblock())

    try:
        if args.cli:
            main_cli()
        else:
            main_menubar()
    except KeyboardInterrupt:
        print("\n\nGoodbye!")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        print(f"\nFatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
