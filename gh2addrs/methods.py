"""Strategies for discovering the e-mail addresses of a GitHub user."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from gh2addrs.client import GitHubClient, GitHubError
from gh2addrs.validation import is_valid_email

API_URL = "https://api.github.com"

MAX_REPOS_TO_SEARCH = 20
MAX_COMMITS_PER_REPO = 10
MAX_SAML_IDENTITIES = 100

METHOD_PUBLIC_API = "public_api"
METHOD_COMMITS = "commits"
METHOD_SAML_IDENTITY = "saml_identity"
METHOD_ORG_DOMAINS = "org_verified_domains"
METHOD_ORG_MEMBERS = "org_members"

logger = logging.getLogger(__name__)

_SAML_QUERY = """
query($org: String!, $username: String!, $limit: Int!) {
  organization(login: $org) {
    samlIdentityProvider {
      externalIdentities(first: $limit, login: $username) {
        nodes {
          user { login }
          samlIdentity { nameId }
        }
      }
    }
  }
}
"""

_ORG_DOMAINS_QUERY = """
query($username: String!, $org: String!) {
  user(login: $username) {
    organizationVerifiedDomainEmails(login: $org)
  }
}
"""


@dataclass
class Address:
    """An e-mail address found for a GitHub user."""

    email: str
    verified: bool = False
    methods: list[str] = field(default_factory=list)


def _as_dict(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise GitHubError(f"decoding response: expected object, got {type(value).__name__}")
    return value


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise GitHubError(f"decoding response: expected array, got {type(value).__name__}")
    return value


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise GitHubError(f"decoding response: expected string, got {type(value).__name__}")
    return value


def _dig(value: Any, *keys: str) -> Any:
    for key in keys:
        value = _as_dict(value).get(key)
    return value


def lookup_via_public_api(client: GitHubClient, username: str, organization: str) -> list[Address]:
    """Read the public e-mail address from the user's REST profile."""
    logger.debug("trying public API method username=%s", username)
    try:
        email = _as_str(_dig(client.get_json(f"{API_URL}/users/{username}"), "email"))
    except GitHubError as exc:
        raise GitHubError(f"fetching user data: {exc}", exc.status) from exc

    if not email or not is_valid_email(email):
        return []
    logger.debug("found address via public API address=%s verified=False", email)
    return [Address(email, False, [METHOD_PUBLIC_API])]


def lookup_via_commits(client: GitHubClient, username: str, organization: str) -> list[Address]:
    """Collect author addresses from the user's recent commits in the organization."""
    logger.debug("trying commits method username=%s organization=%s", username, organization)
    search_url = (
        f"{API_URL}/search/repositories?q=org:{organization}"
        f"&sort=updated&per_page={MAX_REPOS_TO_SEARCH}"
    )
    try:
        items = _as_list(_dig(client.get_json(search_url), "items"))
        repo_names = [_as_str(_dig(item, "name")) for item in items]
    except GitHubError as exc:
        raise GitHubError(f"searching repositories: {exc}", exc.status) from exc

    seen: set[str] = set()
    addresses: list[Address] = []
    for repo in repo_names:
        commits_url = (
            f"{API_URL}/repos/{organization}/{repo}/commits"
            f"?author={username}&per_page={MAX_COMMITS_PER_REPO}"
        )
        try:
            commits = _as_list(client.get_json(commits_url))
            emails = [_as_str(_dig(commit, "commit", "author", "email")) for commit in commits]
        except GitHubError as exc:
            logger.debug("failed to fetch commits repo=%s error=%s", repo, exc)
            continue

        for email in emails:
            if email and email not in seen and is_valid_email(email):
                seen.add(email)
                addresses.append(Address(email, False, [METHOD_COMMITS]))
                logger.debug(
                    "found address via commits address=%s repo=%s verified=False", email, repo
                )
    return addresses


def lookup_via_saml_identity(
    client: GitHubClient, username: str, organization: str
) -> list[Address]:
    """Read the SAML NameID linked to the user in the organization's identity provider."""
    logger.debug("trying SAML identity method username=%s organization=%s", username, organization)
    data = client.graphql(
        _SAML_QUERY,
        {"org": organization, "username": username, "limit": MAX_SAML_IDENTITIES},
    )
    nodes = _as_list(
        _dig(data, "organization", "samlIdentityProvider", "externalIdentities", "nodes")
    )

    addresses: list[Address] = []
    for node in nodes:
        login = _as_str(_dig(node, "user", "login"))
        name_id = _as_str(_dig(node, "samlIdentity", "nameId"))
        if login == username and is_valid_email(name_id):
            addresses.append(Address(name_id, True, [METHOD_SAML_IDENTITY]))
            logger.debug("found address via SAML identity address=%s verified=True", name_id)
    return addresses


def lookup_via_org_verified_domains(
    client: GitHubClient, username: str, organization: str
) -> list[Address]:
    """Read the user's addresses on domains the organization has verified."""
    logger.debug(
        "trying org verified domains method username=%s organization=%s", username, organization
    )
    data = client.graphql(_ORG_DOMAINS_QUERY, {"username": username, "org": organization})
    emails = _as_list(_dig(data, "user", "organizationVerifiedDomainEmails"))

    addresses: list[Address] = []
    for email in map(_as_str, emails):
        if is_valid_email(email):
            addresses.append(Address(email, True, [METHOD_ORG_DOMAINS]))
            logger.debug("found address via org verified domains address=%s verified=True", email)
    return addresses


def lookup_via_org_members(
    client: GitHubClient, username: str, organization: str
) -> list[Address]:
    """Read the user's address from the organization member list, if a member."""
    logger.debug("trying org members method username=%s organization=%s", username, organization)
    try:
        response = client.request("GET", f"{API_URL}/orgs/{organization}/members/{username}")
    except GitHubError as exc:
        raise GitHubError(f"checking membership: {exc}", exc.status) from exc
    with response:
        status = response.status_code
    if status != 200:
        return []

    try:
        members = _as_list(client.get_json(f"{API_URL}/orgs/{organization}/members"))
        entries = [
            (_as_str(_dig(member, "login")), _as_str(_dig(member, "email"))) for member in members
        ]
    except GitHubError as exc:
        raise GitHubError(f"fetching members: {exc}", exc.status) from exc

    addresses: list[Address] = []
    for login, email in entries:
        if login == username and email and is_valid_email(email):
            addresses.append(Address(email, False, [METHOD_ORG_MEMBERS]))
            logger.debug("found address via org members address=%s verified=False", email)
    return addresses