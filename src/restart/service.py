"""Authentication, repo discovery, and latest-build restarts across both Travis endpoints."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Iterable, List, Optional
from urllib.parse import quote

from .client import Endpoint, TravisClient
from .config import DEFAULT_BRANCH
from .errors import AuthenticationError, MalformedBuildError, NoBuildsError, NoMatchingBuildError
from .models import Repository


def active_endpoints(skip_pro: bool = False, skip_org: bool = False) -> List[Endpoint]:
    """Endpoints to talk to, pro first, honoring the skip toggles."""
    endpoints = []
    if not skip_pro:
        endpoints.append(Endpoint.PRO)
    if not skip_org:
        endpoints.append(Endpoint.PUBLIC)
    return endpoints


def _is_on_branch(build: Any, commits: Iterable[Any], branch: str) -> bool:
    if not isinstance(build, dict):
        return False
    commit_id = build.get("commit_id")
    if commit_id is None:
        return False
    for commit in commits:
        if not isinstance(commit, dict):
            continue
        # ids may arrive as int or str depending on the endpoint
        if str(commit.get("id")) == str(commit_id) and commit.get("branch") == branch:
            return True
    return False


def select_latest_build(
    builds: List[Dict[str, Any]],
    commits: List[Dict[str, Any]],
    branch: str = DEFAULT_BRANCH,
) -> Optional[Dict[str, Any]]:
    """Return the first build, in API order, whose commit is on `branch`.

    The API already lists builds newest first, so no timestamp sorting happens here.
    """
    for build in builds:
        if _is_on_branch(build, commits, branch):
            return build
    return None


class RestartService:
    """Orchestrates the Travis auth exchange, repo listing, and build restarts."""

    def __init__(
        self,
        client: TravisClient,
        dry_run: bool = False,
        reporter: Callable[[str], None] = print,
        default_branch: str = DEFAULT_BRANCH,
    ) -> None:
        self.client = client
        self.dry_run = dry_run
        self.reporter = reporter
        self.default_branch = default_branch

    def authenticate(self, github_token: str, skip_pro: bool = False, skip_org: bool = False) -> None:
        """Exchange the GitHub token for a Travis access token on each active endpoint."""
        for endpoint in active_endpoints(skip_pro, skip_org):
            response = self.client.post("/auth/github", endpoint, {"github_token": github_token})
            access_token = response.get("access_token") if isinstance(response, dict) else None
            if not access_token:
                raise AuthenticationError(endpoint.base_url, response)
            self.client.set_credential(endpoint, access_token)

    def list_repositories(
        self, member: str, skip_pro: bool = False, skip_org: bool = False
    ) -> List[Repository]:
        """Return every repo `member` belongs to, pro entries before public ones."""
        path = f"/repos/?member={quote(member, safe='')}"
        result: List[Repository] = []
        for endpoint in active_endpoints(skip_pro, skip_org):
            payload = self.client.get(path, endpoint)
            repos = payload.get("repos") if isinstance(payload, dict) else None
            # Some accounts come back without a "repos" key at all.
            for repo in repos or []:
                slug = repo.get("slug") if isinstance(repo, dict) else None
                if not slug:
                    continue
                result.append(Repository(slug=slug, endpoint=endpoint, raw=repo))
        return result

    def restart_latest_build(self, repo_slug: str, endpoint: Endpoint) -> Any:
        """Restart the newest default-branch build of one repo and return its id."""
        payload = self.client.get(f"/repos/{repo_slug}/builds", endpoint)
        builds = payload.get("builds") if isinstance(payload, dict) else None
        if not builds:
            raise NoBuildsError(f"No builds for repo {repo_slug}!")
        if not isinstance(builds, list):
            raise MalformedBuildError(f"Builds of {repo_slug} are not a list: {type(builds).__name__}")

        commits = payload.get("commits") or []
        if not isinstance(commits, list):
            raise MalformedBuildError(f"Commits of {repo_slug} are not a list: {type(commits).__name__}")
        latest = select_latest_build(builds, commits, self.default_branch)
        if latest is None:
            raise NoMatchingBuildError(
                f"No build of {repo_slug} found for branch '{self.default_branch}'."
            )

        build_id = latest.get("id")
        if build_id is None:
            raise MalformedBuildError(f"Build ID cannot be found in entity: {json.dumps(latest, default=str)}")

        if self.dry_run:
            self.reporter(f"[dry-run] Restarting build {build_id} for {repo_slug}.")
        else:
            self.client.post(f"/builds/{build_id}/restart", endpoint)
        return build_id


__all__ = ["RestartService", "active_endpoints", "select_latest_build"]
