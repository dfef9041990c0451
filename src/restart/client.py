"""Thin wrapper around the Travis CI v2 HTTP API for the pro and public instances."""

from __future__ import annotations

import enum
from typing import Any, Dict, Optional

import requests

from .config import ACCEPT_HEADER, PRO_ENDPOINT_URL, PUBLIC_ENDPOINT_URL, REQUEST_TIMEOUT, USER_AGENT
from .errors import DecodeError, TransportError


class Endpoint(enum.Enum):
    """The two Travis instances; each member carries its base URL."""

    PRO = PRO_ENDPOINT_URL
    PUBLIC = PUBLIC_ENDPOINT_URL

    @property
    def base_url(self) -> str:
        return self.value


def log_http_error(resp: requests.Response, url: str) -> None:
    """Print a short, human-readable message when Travis returns an error."""
    try:
        body = resp.json()
    except ValueError:
        body = {"text": (resp.text or "")[:300]}
    if not isinstance(body, dict):
        body = {"text": str(body)[:300]}
    msg = body.get("error") or body.get("message") or body.get("text")
    print(f"[error] HTTP {resp.status_code} for {url}\n  -> {msg}")


class TravisClient:
    """Endpoint-explicit JSON client; stores one access token per endpoint."""

    def __init__(
        self,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": ACCEPT_HEADER, "User-Agent": USER_AGENT})
        self._tokens: Dict[Endpoint, str] = {}

    def set_credential(self, endpoint: Endpoint, token: Optional[str]) -> None:
        if token:
            self._tokens[endpoint] = token
        else:
            self._tokens.pop(endpoint, None)

    def _url(self, path: str, endpoint: Endpoint) -> str:
        path = path if path.startswith("/") else f"/{path}"
        return f"{endpoint.base_url}{path}"

    def _headers(self, endpoint: Endpoint) -> Dict[str, str]:
        token = self._tokens.get(endpoint)
        if not token:
            return {}
        return {"Authorization": f'token "{token}"'}

    def request(self, method: str, path: str, endpoint: Endpoint, body: Any = None) -> Any:
        """Send one request and return the decoded JSON body ({} for an empty body)."""

        url = self._url(path, endpoint)
        kwargs: Dict[str, Any] = {"headers": self._headers(endpoint), "timeout": self.timeout}
        if body:
            kwargs["json"] = body

        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}", url) from exc

        if not 200 <= resp.status_code < 300:
            log_http_error(resp, url)
            raise TransportError(
                f"{method} {url} returned HTTP {resp.status_code}", url, status_code=resp.status_code
            )

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            raise DecodeError(url, resp.text or "") from exc

    def get(self, path: str, endpoint: Endpoint) -> Any:
        return self.request("GET", path, endpoint)

    def post(self, path: str, endpoint: Endpoint, body: Any = None) -> Any:
        return self.request("POST", path, endpoint, body)


__all__ = ["Endpoint", "TravisClient", "log_http_error"]
