"""Run every discovery strategy for a user and merge what they find."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable

from gh2addrs.client import GitHubClient, GitHubError
from gh2addrs.methods import (
    Address,
    lookup_via_commits,
    lookup_via_org_members,
    lookup_via_org_verified_domains,
    lookup_via_public_api,
    lookup_via_saml_identity,
)

_LookupMethod = Callable[[GitHubClient, str, str], "list[Address]"]

_METHODS: tuple[tuple[str, _LookupMethod], ...] = (
    ("Public API", lookup_via_public_api),
    ("Git Commits", lookup_via_commits),
    ("SAML Identity", lookup_via_saml_identity),
    ("Org Verified Domains", lookup_via_org_verified_domains),
    ("Org Members API", lookup_via_org_members),
)


@dataclass
class Result:
    """The addresses found for one GitHub user."""

    username: str
    addresses: list[Address] = field(default_factory=list)


class AddressAccumulator:
    """Merges addresses by e-mail, keeping every method that found each one."""

    def __init__(self) -> None:
        self._addresses: dict[str, Address] = {}
        self._methods: dict[str, set[str]] = {}

    def add(self, address: Address) -> None:
        """Merge ``address``; once verified by any method, it stays verified."""
        if not address.methods:
            raise ValueError(f"address {address.email!r} has no discovery method")
        method = address.methods[0]
        existing = self._addresses.get(address.email)
        if existing is None:
            self._addresses[address.email] = Address(address.email, address.verified)
            self._methods[address.email] = {method}
        else:
            existing.verified = existing.verified or address.verified
            self._methods[address.email].add(method)

    def to_list(self) -> list[Address]:
        """Return the merged addresses, each with a sorted list of methods."""
        return [
            Address(address.email, address.verified, sorted(self._methods[address.email]))
            for address in self._addresses.values()
        ]


class Lookup:
    """Discovers e-mail addresses of GitHub users within an organization."""

    def __init__(
        self,
        token: str,
        logger: logging.Logger | None = None,
        client: GitHubClient | None = None,
    ) -> None:
        self.token = token
        self.logger = logger if logger is not None else logging.getLogger("gh2addrs")
        self.client = client if client is not None else GitHubClient(token)

    def lookup(self, username: str, organization: str) -> Result:
        """Run all methods concurrently; failing methods are logged and skipped."""
        self.logger.info(
            "looking up email addresses username=%s organization=%s", username, organization
        )
        accumulator = AddressAccumulator()
        with ThreadPoolExecutor(max_workers=len(_METHODS)) as pool:
            pending = [
                (name, pool.submit(method, self.client, username, organization))
                for name, method in _METHODS
            ]
            for name, future in pending:
                try:
                    found = future.result()
                except GitHubError as exc:
                    self.logger.warning(
                        "lookup method failed method=%s error=%s username=%s organization=%s",
                        name,
                        exc,
                        username,
                        organization,
                    )
                    continue
                for address in found:
                    accumulator.add(address)

        result = Result(username, accumulator.to_list())
        self.logger.info(
            "lookup completed username=%s addressesFound=%d", username, len(result.addresses)
        )
        return result