"""
Tests for blocking/blocker.py — authorization memoization, whitelist
filtering and the enable/disable command flow with a fake runner.
"""

import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from blocking.blocker import WebsiteBlocker, DEFAULT_BLOCK_LIST
from blocking.whitelist import WhitelistStore


class BlockerTestCase(unittest.TestCase):
    """Builds a blocker backed by a temp whitelist and a fake runner."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.hosts_path = Path(self.tmpdir.name) / "hosts"
        self.hosts_path.write_text("127.0.0.1 localhost\n")
        self.whitelist = WhitelistStore(Path(self.tmpdir.name) / "whitelist.json")
        self.runner = MagicMock()
        self.runner.run.return_value = (True, "authorized")

    def tearDown(self):
        self.tmpdir.cleanup()

    def make_blocker(self, block_list=DEFAULT_BLOCK_LIST):
        return WebsiteBlocker(
            self.whitelist,
            runner=self.runner,
            block_list=block_list,
            hosts_path=self.hosts_path,
            platform="darwin",
        )


class TestRequestAuthorization(BlockerTestCase):

    def test_authorization_success(self):
        blocker = self.make_blocker()
        self.assertTrue(blocker.request_authorization())
        self.assertTrue(blocker.is_authorized)
        self.runner.run.assert_called_once_with("echo authorized")

    def test_authorization_memoized(self):
        """A second request does not prompt again."""
        blocker = self.make_blocker()
        blocker.request_authorization()
        blocker.request_authorization()
        self.assertEqual(self.runner.run.call_count, 1)

    def test_authorization_cancelled(self):
        self.runner.run.return_value = (False, "")
        blocker = self.make_blocker()
        self.assertFalse(blocker.request_authorization())
        self.assertFalse(blocker.is_authorized)

    def test_authorization_unexpected_output(self):
        self.runner.run.return_value = (True, "something else")
        blocker = self.make_blocker()
        self.assertFalse(blocker.request_authorization())
        self.assertFalse(blocker.is_authorized)


class TestSitesToBlock(BlockerTestCase):

    def test_no_whitelist_blocks_everything(self):
        blocker = self.make_blocker()
        self.assertEqual(blocker.sites_to_block(), list(DEFAULT_BLOCK_LIST))

    def test_whitelist_excludes_both_forms(self):
        """Whitelisting youtube.com also lets www.youtube.com through."""
        self.whitelist.add("youtube.com")
        blocker = self.make_blocker()
        sites = blocker.sites_to_block()
        self.assertNotIn("youtube.com", sites)
        self.assertNotIn("www.youtube.com", sites)
        self.assertIn("reddit.com", sites)

    def test_whitelist_from_url_input(self):
        self.whitelist.add("https://www.reddit.com/r/python")
        blocker = self.make_blocker()
        sites = blocker.sites_to_block()
        self.assertNotIn("reddit.com", sites)
        self.assertNotIn("www.reddit.com", sites)


class TestEnableBlocking(BlockerTestCase):

    def test_enable_requests_authorization_then_blocks(self):
        blocker = self.make_blocker()
        blocker.enable_blocking()

        self.assertTrue(blocker.is_blocking)
        self.assertTrue(blocker.is_authorized)
        self.assertEqual(self.runner.run.call_count, 2)
        command = self.runner.run.call_args_list[1][0][0]
        self.assertIn(config.HOSTS_MARKER_START, command)
        self.assertIn(config.HOSTS_MARKER_END, command)
        self.assertIn("127.0.0.1 facebook.com", command)
        self.assertIn("dscacheutil -flushcache", command)

    def test_enable_when_authorized_issues_one_command(self):
        blocker = self.make_blocker()
        blocker.is_authorized = True
        blocker.enable_blocking()
        self.assertEqual(self.runner.run.call_count, 1)
        self.assertTrue(blocker.is_blocking)

    def test_enable_when_already_blocking_runs_nothing(self):
        """A second enable must not append another marked block."""
        blocker = self.make_blocker()
        blocker.is_authorized = True
        blocker.enable_blocking()
        blocker.enable_blocking()
        self.assertEqual(self.runner.run.call_count, 1)
        self.assertTrue(blocker.is_blocking)

    def test_enable_skips_whitelisted_sites(self):
        self.whitelist.add("youtube.com")
        blocker = self.make_blocker()
        blocker.is_authorized = True
        blocker.enable_blocking()
        command = self.runner.run.call_args[0][0]
        self.assertNotIn("youtube.com", command)
        self.assertIn("twitch.tv", command)

    def test_enable_with_everything_whitelisted(self):
        """Nothing to block: marked active without running any command."""
        self.whitelist.add("youtube.com")
        blocker = self.make_blocker(block_list=("youtube.com", "www.youtube.com"))
        blocker.enable_blocking()
        self.assertTrue(blocker.is_blocking)
        self.runner.run.assert_not_called()

    def test_enable_failure_leaves_state(self):
        self.runner.run.return_value = (False, "")
        blocker = self.make_blocker()
        blocker.enable_blocking()
        self.assertFalse(blocker.is_blocking)
        self.assertFalse(blocker.is_authorized)


class TestDisableBlocking(BlockerTestCase):

    def test_disable_when_not_blocking_runs_nothing(self):
        blocker = self.make_blocker()
        blocker.disable_blocking()
        self.runner.run.assert_not_called()

    def test_disable_removes_block(self):
        blocker = self.make_blocker()
        blocker.is_authorized = True
        blocker.enable_blocking()
        blocker.disable_blocking()

        self.assertFalse(blocker.is_blocking)
        command = self.runner.run.call_args[0][0]
        self.assertTrue(command.startswith("sed -i ''"))
        self.assertIn(config.HOSTS_MARKER_START, command)

    def test_disable_failure_keeps_blocking(self):
        blocker = self.make_blocker()
        blocker.is_authorized = True
        blocker.enable_blocking()
        self.runner.run.return_value = (False, "")
        blocker.disable_blocking()
        self.assertTrue(blocker.is_blocking)


class TestRemoveStaleBlock(BlockerTestCase):

    def test_clean_hosts_file_needs_no_command(self):
        blocker = self.make_blocker()
        self.assertTrue(blocker.remove_stale_block())
        self.runner.run.assert_not_called()

    def test_leftover_block_removed(self):
        self.hosts_path.write_text(
            "127.0.0.1 localhost\n"
            f"{config.HOSTS_MARKER_START}\n127.0.0.1 reddit.com\n{config.HOSTS_MARKER_END}\n"
        )
        blocker = self.make_blocker()
        self.assertTrue(blocker.remove_stale_block())
        self.assertEqual(self.runner.run.call_count, 2)
        self.assertIn("sed", self.runner.run.call_args[0][0])

    def test_leftover_block_not_authorized(self):
        self.hosts_path.write_text(f"{config.HOSTS_MARKER_START}\n{config.HOSTS_MARKER_END}\n")
        self.runner.run.return_value = (False, "")
        blocker = self.make_blocker()
        self.assertFalse(blocker.remove_stale_block())
        self.assertEqual(self.runner.run.call_count, 1)


if __name__ == "__main__":
    unittest.main()
