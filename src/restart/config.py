"""Configuration constants and CLI settings for the Travis build restarter."""

from __future__ import annotations

import argparse
import os
import re
from dataclasses import dataclass
from typing import List, Optional, Pattern

from src.secrets import load_local_secrets, secret_value

from .errors import ConfigurationError

_SECRETS = load_local_secrets()

PRO_ENDPOINT_URL = "https://api.travis-ci.com"
PUBLIC_ENDPOINT_URL = "https://api.travis-ci.org"
ACCEPT_HEADER = "application/vnd.travis-ci.2+json"
USER_AGENT = "travis-build-restarter/1.0"
DEFAULT_BRANCH = "master"
REQUEST_TIMEOUT = float(os.getenv("TRAVIS_REQUEST_TIMEOUT", "30"))

DEFAULT_GITHUB_TOKEN: Optional[str] = os.getenv("GITHUB_TOKEN") or secret_value(_SECRETS, "github_token")
DEFAULT_GITHUB_USER: Optional[str] = os.getenv("GITHUB_USER") or secret_value(_SECRETS, "github_user")


@dataclass(frozen=True)
class RestartSettings:
    """Resolved runtime settings for one restart run."""

    github_token: str
    github_user: str
    include: Optional[Pattern[str]]
    dry_run: bool
    skip_pro: bool
    skip_org: bool
    timeout: float


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser used by the restart entry point."""

    parser = argparse.ArgumentParser(
        description=(
            "Restart the newest master build of all repos a GitHub user has access to "
            "in travis-ci.com and travis-ci.org."
        ),
    )
    parser.add_argument(
        "--github-token",
        default=DEFAULT_GITHUB_TOKEN,
        help="(required) GitHub token to exchange for Travis access tokens.",
    )
    parser.add_argument(
        "--github-user",
        default=DEFAULT_GITHUB_USER,
        help="(required) GitHub username used to filter the repos to rebuild.",
    )
    parser.add_argument(
        "--include",
        default="",
        help="Regex searched in repo slugs to decide which repos to restart, eg 'plugin-'.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Find the builds to restart without actually restarting them.",
    )
    parser.add_argument(
        "--skip-pro",
        action="store_true",
        help="Skip Travis PRO (travis-ci.com) repos, eg when you have no pro account.",
    )
    parser.add_argument(
        "--skip-org",
        action="store_true",
        help="Skip travis-ci.org repos, eg when your user does not exist there.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=REQUEST_TIMEOUT,
        help="Seconds to wait for each Travis API call (default: TRAVIS_REQUEST_TIMEOUT or 30).",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    parser = build_arg_parser()
    return parser.parse_args(argv)


def compile_include(pattern: Optional[str]) -> Optional[Pattern[str]]:
    """Compile the include regex; an empty pattern means every repo is included."""

    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigurationError(f"--include is not a valid regular expression: {exc}") from exc


def resolve_settings(args: Optional[argparse.Namespace] = None) -> RestartSettings:
    """Validate parsed arguments and return immutable settings."""

    args = args or parse_args()
    if not args.github_token:
        raise ConfigurationError("--github-token required.")
    if not args.github_user:
        raise ConfigurationError(
            "The --github-user option is required (in order to filter results from the Travis API)."
        )
    if args.skip_pro and args.skip_org:
        raise ConfigurationError("--skip-pro and --skip-org together leave nothing to restart.")
    if args.timeout <= 0:
        raise ConfigurationError("--timeout must be positive.")

    return RestartSettings(
        github_token=args.github_token,
        github_user=args.github_user,
        include=compile_include(args.include),
        dry_run=bool(args.dry_run),
        skip_pro=bool(args.skip_pro),
        skip_org=bool(args.skip_org),
        timeout=float(args.timeout),
    )


__all__ = [
    "PRO_ENDPOINT_URL",
    "PUBLIC_ENDPOINT_URL",
    "ACCEPT_HEADER",
    "USER_AGENT",
    "DEFAULT_BRANCH",
    "REQUEST_TIMEOUT",
    "DEFAULT_GITHUB_TOKEN",
    "DEFAULT_GITHUB_USER",
    "RestartSettings",
    "build_arg_parser",
    "parse_args",
    "compile_include",
    "resolve_settings",
]
