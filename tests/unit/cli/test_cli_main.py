"""Tests for the command-line entry point.

Network, terminal, and config access are patched so ``main`` can be driven
end to end.
"""

from __future__ import annotations

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from forkview import cli
from forkview.errors import AuthenticationError, GatewayError
from forkview.logs import configure_logging
from forkview.models import RepositoryMetadata, RepositoryRef, SortMode
from forkview.ui_theme import DEFAULT_THEME, PLAIN_THEME


class CliMainTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        patches = [
            mock.patch("forkview.runtime.config.CONFIG_PATH", Path(tmp.name) / "config.json"),
            mock.patch.object(cli, "configure_logging"),
            mock.patch.object(cli, "resolve_token", return_value="tkn"),
            mock.patch.dict(os.environ),
        ]
        for patcher in patches:
            patcher.start()
            self.addCleanup(patcher.stop)
        for name in ("GH_HOST", "GH_REPO", "NO_COLOR"):
            os.environ.pop(name, None)
        self.client_cls = self._patch("GraphQLClient")
        self.metadata = self._patch(
            "fetch_repository_metadata",
            return_value=RepositoryMetadata(default_branch="main", fork_count=3),
        )
        self.run_browser = self._patch("run_browser")
        stdin = self._patch_stdin()
        stdin.isatty.return_value = True
        self.stdin = stdin

    def _patch(self, name: str, **kwargs) -> mock.Mock:
        patcher = mock.patch.object(cli, name, **kwargs)
        self.addCleanup(patcher.stop)
        return patcher.start()

    def _patch_stdin(self) -> mock.Mock:
        patcher = mock.patch.object(cli.sys, "stdin")
        self.addCleanup(patcher.stop)
        return patcher.start()

    def _main(self, argv: list[str]) -> tuple[int | None, str]:
        out = io.StringIO()
        code = None
        with redirect_stdout(out):
            try:
                cli.main(argv)
            except SystemExit as exc:
                code = exc.code
        return code, out.getvalue()

    def test_happy_path_launches_browser(self) -> None:
        code, _ = self._main(["octo/hello", "--sort", "stargazers", "--retries", "5", "--timeout", "9"])

        self.assertIsNone(code)
        self.client_cls.assert_called_once_with("tkn", "github.com", timeout=9.0, retries=5)
        gateway, sort_mode, theme = self.run_browser.call_args.args
        self.assertEqual(gateway.repository, RepositoryRef("octo", "hello"))
        self.assertEqual(gateway.head_ref, "octo:main")
        self.assertEqual(sort_mode, SortMode.STARGAZERS)
        self.assertIs(theme, DEFAULT_THEME)
        self.assertEqual(self.run_browser.call_args.kwargs, {"total_count": 3})
        self.client_cls.return_value.close.assert_called_once_with()

    def test_defaults_when_no_flags(self) -> None:
        self._main(["octo/hello", "--no-color"])

        self.client_cls.assert_called_once_with("tkn", "github.com", timeout=30.0, retries=2)
        _, sort_mode, theme = self.run_browser.call_args.args
        self.assertEqual(sort_mode, SortMode.UPDATED_AT)
        self.assertIs(theme, PLAIN_THEME)

    def test_persisted_sort_is_used(self) -> None:
        with mock.patch("forkview.runtime.config.load_sort_mode", return_value=SortMode.NAME):
            self._main(["octo/hello"])
        self.assertEqual(self.run_browser.call_args.args[1], SortMode.NAME)

    def test_zero_forks_exits_cleanly_without_browser(self) -> None:
        self.metadata.return_value = RepositoryMetadata(default_branch="main", fork_count=0)

        code, output = self._main(["octo/hello"])

        self.assertEqual(code, 0)
        self.assertIn("No forks found for this repository. Exiting.", output)
        self.run_browser.assert_not_called()
        self.client_cls.return_value.close.assert_called_once_with()

    def test_malformed_repository_exits_one(self) -> None:
        code, output = self._main(["not-a-repo"])

        self.assertEqual(code, 1)
        self.assertTrue(output.startswith("Error: "))
        self.client_cls.assert_not_called()

    def test_missing_token_exits_one(self) -> None:
        with mock.patch.object(cli, "resolve_token", side_effect=AuthenticationError("no GitHub token found")):
            code, output = self._main(["octo/hello"])
        self.assertEqual(code, 1)
        self.assertIn("no GitHub token found", output)

    def test_metadata_failure_exits_one(self) -> None:
        self.metadata.side_effect = GatewayError("Could not resolve to a Repository with the name 'octo/hello'.")

        code, output = self._main(["octo/hello"])

        self.assertEqual(code, 1)
        self.assertIn("Could not resolve to a Repository", output)
        self.run_browser.assert_not_called()

    def test_browser_failure_exits_one(self) -> None:
        self.run_browser.side_effect = GatewayError("Forks request failed: HTTP 502")

        code, output = self._main(["octo/hello"])

        self.assertEqual(code, 1)
        self.assertEqual(output.strip(), "Error: Forks request failed: HTTP 502")

    def test_unwritable_log_file_exits_one(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "missing" / "forkview.log"
            with mock.patch.object(cli, "configure_logging", configure_logging):
                code, output = self._main(["octo/hello", "--log-file", str(log_path)])

        self.assertEqual(code, 1)
        self.assertTrue(output.startswith("Error: cannot open log file"))
        self.client_cls.assert_not_called()
        self.run_browser.assert_not_called()

    def test_interrupt_during_startup_quits_quietly(self) -> None:
        self.metadata.side_effect = KeyboardInterrupt()

        code, output = self._main(["octo/hello"])

        self.assertIsNone(code)
        self.assertEqual(output, "")
        self.run_browser.assert_not_called()
        self.client_cls.return_value.close.assert_called_once_with()

    def test_interrupt_inside_browser_quits_quietly(self) -> None:
        self.run_browser.side_effect = KeyboardInterrupt()

        code, output = self._main(["octo/hello"])

        self.assertIsNone(code)
        self.assertEqual(output, "")
        self.client_cls.return_value.close.assert_called_once_with()

    def test_non_interactive_stdin_exits_one(self) -> None:
        self.stdin.isatty.return_value = False
        code, _ = self._main(["octo/hello"])
        self.assertEqual(code, 1)
        self.run_browser.assert_not_called()

    def test_repository_from_current_checkout(self) -> None:
        with mock.patch.object(cli, "current_repository", return_value=RepositoryRef("octo", "local")) as current:
            self._main([])
        current.assert_called_once_with()
        self.assertEqual(self.run_browser.call_args.args[0].repository.name, "local")


class BuildParserTests(unittest.TestCase):
    def test_rejects_bad_numbers(self) -> None:
        parser = cli.build_parser()
        for argv in (["--retries", "-1"], ["--timeout", "0"], ["--sort", "bogus"]):
            with self.subTest(argv=argv):
                with redirect_stdout(io.StringIO()), mock.patch("sys.stderr", io.StringIO()):
                    with self.assertRaises(SystemExit):
                        parser.parse_args(argv)


if __name__ == "__main__":
    unittest.main()
