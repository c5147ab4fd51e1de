from __future__ import annotations

import contextlib
import io
import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from _testutil import FakeRunner, ensure_repo_on_path, php_host_responses, write_composer_json


def _clean_env():
    return {k: v for k, v in os.environ.items() if not k.startswith("INPUT_") and k != "GITHUB_REPOSITORY"}


class TestCli(unittest.TestCase):
    def test_parser_commands(self) -> None:
        ensure_repo_on_path()

        from phpext_release.cli import build_parser

        args = build_parser().parse_args(["run", "--release-tag", "1.0.0", "--configure-flags=--enable-x --with-y"])
        self.assertEqual(args.cmd, "run")
        self.assertEqual(args.release_tag, "1.0.0")
        self.assertEqual(args.configure_flags, "--enable-x --with-y")
        self.assertEqual(args.working_dir, ".")

        args = build_parser().parse_args(["run", "--release-tag", "1.0.0", "--configure-flags", "enable-x"])
        self.assertEqual(args.configure_flags, "enable-x")

        args = build_parser().parse_args(["details", "--release-tag", "1.0.0"])
        self.assertEqual(args.cmd, "details")

    def test_tool_errors_exit_1_with_annotation(self) -> None:
        ensure_repo_on_path()

        from phpext_release.cli import main

        with tempfile.TemporaryDirectory() as td:
            err = io.StringIO()
            with mock.patch.dict(os.environ, _clean_env(), clear=True), contextlib.redirect_stderr(err):
                rc = main(["run", "--working-dir", td, "--action-file", str(Path(td) / "missing.yml")])
        self.assertEqual(rc, 1)
        self.assertIn("::error::Input required and not supplied: release-tag", err.getvalue())

    def test_details_prints_only_json_on_stdout(self) -> None:
        ensure_repo_on_path()

        from phpext_release import orchestrator
        from phpext_release.cli import main
        from phpext_release.host import HostInspector

        responses = php_host_responses(php_binary="php")
        responses["php-config --php-binary"] = (0, "NONE\n", "")
        runner = FakeRunner(responses)

        with tempfile.TemporaryDirectory() as td:
            write_composer_json(Path(td), {"name": "foo/bar", "type": "php-ext"})
            out = io.StringIO()
            err = io.StringIO()
            with mock.patch.dict(os.environ, _clean_env(), clear=True), \
                    mock.patch("phpext_release.cli.SubprocessRunner", lambda **kw: runner), \
                    mock.patch.object(
                        orchestrator, "HostInspector", lambda r: HostInspector(r, machine="x86_64", system="linux")
                    ), \
                    contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
                rc = main([
                    "details",
                    "--release-tag", "1.0.0",
                    "--working-dir", td,
                    "--action-file", str(Path(td) / "missing.yml"),
                ])

        self.assertEqual(rc, 0)
        doc = json.loads(out.getvalue())
        self.assertEqual(doc["artifact"]["package_filename"], "php_bar-1.0.0_php8.3-x86_64-linux-glibc.zip")
        self.assertEqual(doc["platform"]["php_binary"], "php")
        self.assertIn("::warning::", err.getvalue())
        self.assertIn("[phpext-release] Detecting extension name", err.getvalue())


if __name__ == "__main__":
    unittest.main()
