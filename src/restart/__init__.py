"""Restart the latest master build of Travis CI repos across travis-ci.com and travis-ci.org."""

from .runner import main, restart_repos, run

__all__ = ["main", "restart_repos", "run"]
