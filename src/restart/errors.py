"""Exception hierarchy shared by the Travis client, restart service, and CLI."""

from __future__ import annotations

import json
from typing import Any, Optional


class RestartError(Exception):
    """Base class for every failure raised by the restart workflow."""


class ConfigurationError(RestartError):
    """Required CLI/environment input is missing or invalid."""


class AuthenticationError(RestartError):
    """The GitHub token exchange did not yield an access token."""

    def __init__(self, endpoint_url: str, response: Any) -> None:
        self.endpoint_url = endpoint_url
        self.response = response
        super().__init__(
            f"Authenticating against {endpoint_url} returned response w/o access_token: "
            f"{json.dumps(response, default=str)}"
        )


class TransportError(RestartError):
    """The HTTP call failed or returned a non-2xx status."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class DecodeError(RestartError):
    """The response body was not valid JSON."""

    def __init__(self, url: str, body: str = "") -> None:
        self.url = url
        self.body = body
        super().__init__(f"Response from {url} is not valid JSON: {body[:200]!r}")


class BuildSelectionError(RestartError):
    """Finding the latest default-branch build failed for one repository."""


class NoBuildsError(BuildSelectionError):
    pass


class NoMatchingBuildError(BuildSelectionError):
    pass


class MalformedBuildError(BuildSelectionError):
    pass


__all__ = [
    "RestartError",
    "ConfigurationError",
    "AuthenticationError",
    "TransportError",
    "DecodeError",
    "BuildSelectionError",
    "NoBuildsError",
    "NoMatchingBuildError",
    "MalformedBuildError",
]
