from __future__ import annotations

import argparse
import contextlib
import json
import sys
from dataclasses import asdict
from pathlib import Path

from . import actions
from .config import load_inputs
from .errors import ReleaseToolError
from .github.releases import GitHubReleaseClient
from .orchestrator import describe_extension, run_release
from .process import SubprocessRunner


def cmd_run(args: argparse.Namespace) -> int:
    inputs = load_inputs(
        release_tag=args.release_tag,
        configure_flags=args.configure_flags,
        github_token=args.github_token,
        repository=args.repository,
        action_file=args.action_file,
    )
    work_dir = Path(args.working_dir).resolve()
    runner = SubprocessRunner(cwd=work_dir)
    client = GitHubReleaseClient(repo=inputs.repository, token=inputs.github_token, api_url=inputs.api_url)
    run_release(inputs, work_dir=work_dir, runner=runner, client=client)
    return 0


def cmd_details(args: argparse.Namespace) -> int:
    inputs = load_inputs(release_tag=args.release_tag, action_file=args.action_file, require_github=False)
    work_dir = Path(args.working_dir).resolve()
    # stdout carries only the JSON document; progress lines go to stderr.
    with contextlib.redirect_stdout(sys.stderr):
        descriptor, profile = describe_extension(
            inputs.release_tag, work_dir=work_dir, runner=SubprocessRunner(cwd=work_dir, echo=False)
        )
    print(json.dumps({"artifact": asdict(descriptor), "platform": asdict(profile)}, indent=2, sort_keys=True))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="phpext-release")
    sub = p.add_subparsers(dest="cmd", required=True)

    def common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--release-tag", default=None, help="Tag of an existing release (default: INPUT_RELEASE-TAG)")
        sp.add_argument("--working-dir", default=".", help="Extension source directory containing composer.json")
        sp.add_argument("--action-file", default=None, help="action.yml declaring input defaults")

    sp = sub.add_parser("run", help="Build, package and upload the extension binary")
    common(sp)
    sp.add_argument(
        "--configure-flags",
        default=None,
        help='Flags for ./configure; attach values that start with "-": --configure-flags="--enable-x"',
    )
    sp.add_argument("--github-token", default=None)
    sp.add_argument("--repository", default=None, help="owner/repo (default: GITHUB_REPOSITORY)")
    sp.set_defaults(func=cmd_run)

    sp = sub.add_parser("details", help="Print the extension name, platform facts and package filename")
    common(sp)
    sp.set_defaults(func=cmd_details)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args) or 0)
    except ReleaseToolError as e:
        actions.error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
