"""Minimal authenticated HTTP client for the GitHub REST and GraphQL APIs."""

from __future__ import annotations

from typing import Any

import requests

USER_AGENT = "gh2addrs/1.0"
ACCEPT = "application/vnd.github.v3+json"
GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_TIMEOUT = 30.0
_ERROR_BODY_LIMIT = 1024


class GitHubError(Exception):
    """Raised when a GitHub API call fails."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class GitHubClient:
    """Sends authenticated requests to GitHub and decodes the replies."""

    def __init__(
        self,
        token: str,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.token = token
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": ACCEPT,
            "User-Agent": USER_AGENT,
        }

    def _send(self, method: str, url: str, json_body: Any = None) -> requests.Response:
        try:
            return self.session.request(
                method,
                url,
                headers=self._headers(),
                json=json_body,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise GitHubError(f"executing request: {exc}") from exc

    def request(self, method: str, url: str) -> requests.Response:
        """Send a request and return the raw response, whatever its status."""
        return self._send(method, url)

    @staticmethod
    def _check_status(response: requests.Response) -> None:
        if response.status_code != 200:
            body = response.content[:_ERROR_BODY_LIMIT].decode("utf-8", errors="replace")
            raise GitHubError(f"HTTP {response.status_code}: {body}", response.status_code)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubError(f"decoding response: {exc}", response.status_code) from exc

    def get_json(self, url: str) -> Any:
        """GET ``url`` and return its decoded JSON body; non-200 raises."""
        with self.request("GET", url) as response:
            self._check_status(response)
            return self._decode(response)

    def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a GraphQL query and return its ``data`` object."""
        payload = {"query": query, "variables": variables or {}}
        with self._send("POST", GRAPHQL_URL, payload) as response:
            self._check_status(response)
            document = self._decode(response)
        if not isinstance(document, dict):
            raise GitHubError("decoding response: unexpected GraphQL reply")
        errors = document.get("errors")
        if errors:
            messages = "; ".join(
                str(error.get("message", error)) if isinstance(error, dict) else str(error)
                for error in errors
            )
            raise GitHubError(messages)
        return document.get("data") or {}