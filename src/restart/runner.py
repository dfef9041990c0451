"""Entry point that restarts the latest master build for every matching Travis repo."""

from __future__ import annotations

import sys
from typing import List, Optional, Pattern

from .client import TravisClient
from .config import RestartSettings, parse_args, resolve_settings
from .errors import ConfigurationError, RestartError
from .models import Repository, RunSummary
from .service import RestartService


def _build_service(settings: RestartSettings) -> RestartService:
    client = TravisClient(timeout=settings.timeout)
    return RestartService(client, dry_run=settings.dry_run)


def restart_repos(
    service: RestartService,
    repos: List[Repository],
    include: Optional[Pattern[str]] = None,
) -> RunSummary:
    """Restart each included repo; one repo failing never stops the rest."""
    summary = RunSummary()
    for repo in repos:
        if include is not None and not include.search(repo.slug):
            print(f"[note] Skipping repo {repo.slug}.")
            summary.skipped.append(repo.slug)
            continue

        try:
            service.restart_latest_build(repo.slug, repo.endpoint)
        except Exception as exc:
            print(f"[error] Failed to restart latest build for {repo.slug}: {exc}")
            summary.failed.append(repo.slug)
            continue

        if not service.dry_run:
            print(f"Restarted latest build for repo {repo.slug}.")
        summary.restarted.append(repo.slug)
    return summary


def print_summary(summary: RunSummary, dry_run: bool = False) -> None:
    label = "Repos that would be restarted" if dry_run else "Repos restarted"
    if summary.restarted:
        print(f"{label} ({len(summary.restarted)}):")
        for slug in summary.restarted:
            print(f"\t{slug}")
    else:
        print("No builds restarted.")
    if summary.failed:
        print(f"Repos failed ({len(summary.failed)}):")
        for slug in summary.failed:
            print(f"\t{slug}")
    if summary.skipped:
        print(f"Repos skipped by --include: {len(summary.skipped)}")


def run(settings: RestartSettings, service: Optional[RestartService] = None) -> RunSummary:
    """Authenticate, list repos, and restart builds using resolved settings."""
    if settings.skip_pro:
        print("[note] Skipping Travis PRO repos (if any).")
    if settings.skip_org:
        print("[note] Skipping travis-ci.org repos (if any).")

    service = service or _build_service(settings)
    service.authenticate(settings.github_token, settings.skip_pro, settings.skip_org)
    repos = service.list_repositories(settings.github_user, settings.skip_pro, settings.skip_org)
    print(f"Found {len(repos)} repos for {settings.github_user}.")

    summary = restart_repos(service, repos, settings.include)
    print_summary(summary, settings.dry_run)
    print("Done.")
    return summary


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; exits 1 on bad input or when no endpoint can be used."""
    args = parse_args(argv)
    try:
        settings = resolve_settings(args)
    except ConfigurationError as exc:
        print(f"[error] {exc}")
        sys.exit(1)

    try:
        run(settings)
    except RestartError as exc:
        # Without credentials or a repo list there is nothing left to do.
        print(f"[error] {exc}")
        sys.exit(1)
    return 0


__all__ = ["main", "run", "restart_repos", "print_summary"]


if __name__ == "__main__":
    main(sys.argv[1:])
