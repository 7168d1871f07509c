import json
import logging

import pytest
import responses
from responses import matchers

from gh2addrs.client import GRAPHQL_URL, GitHubClient
from gh2addrs.lookup import AddressAccumulator, Lookup, Result
from gh2addrs.methods import Address

API = "https://api.github.com"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_accumulator_merges_methods_and_upgrades_verified():
    acc = AddressAccumulator()
    acc.add(Address("octocat@example.com", False, ["public_api"]))
    acc.add(Address("octocat@example.com", True, ["saml_identity"]))
    acc.add(Address("octocat@example.com", False, ["commits"]))
    assert acc.to_list() == [
        Address("octocat@example.com", True, ["commits", "public_api", "saml_identity"])
    ]


def test_accumulator_keeps_distinct_emails_and_single_method():
    acc = AddressAccumulator()
    acc.add(Address("a@example.com", False, ["commits"]))
    acc.add(Address("a@example.com", False, ["commits"]))
    acc.add(Address("b@example.com", True, ["org_verified_domains"]))
    result = sorted(acc.to_list(), key=lambda a: a.email)
    assert result == [
        Address("a@example.com", False, ["commits"]),
        Address("b@example.com", True, ["org_verified_domains"]),
    ]


def test_accumulator_empty_is_empty_list():
    assert AddressAccumulator().to_list() == []


def test_accumulator_rejects_address_without_method():
    with pytest.raises(ValueError):
        AddressAccumulator().add(Address("a@example.com", False, []))


def test_lookup_when_every_method_fails(mocked, caplog):
    logger = logging.getLogger("test.lookup.failing")
    lookup = Lookup("token", logger=logger)
    with caplog.at_level(logging.WARNING, logger="test.lookup.failing"):
        result = lookup.lookup("testuser", "testorg")
    assert result == Result("testuser", [])
    failures = [r for r in caplog.records if "lookup method failed" in r.getMessage()]
    assert len(failures) == 5


def _graphql_reply(request):
    query = json.loads(request.body)["query"]
    if "samlIdentityProvider" in query:
        data = {
            "organization": {
                "samlIdentityProvider": {
                    "externalIdentities": {
                        "nodes": [
                            {
                                "user": {"login": "octocat"},
                                "samlIdentity": {"nameId": "octocat@example.com"},
                            }
                        ]
                    }
                }
            }
        }
    else:
        data = {"user": {"organizationVerifiedDomainEmails": ["corp@example.com"]}}
    return 200, {}, json.dumps({"data": data})


def test_lookup_merges_results_from_all_methods(mocked):
    mocked.add(responses.GET, f"{API}/users/octocat", json={"email": "octocat@example.com"})
    mocked.add(
        responses.GET,
        f"{API}/search/repositories",
        json={"items": [{"name": "alpha"}]},
        match=[
            matchers.query_param_matcher({"q": "org:acme", "sort": "updated", "per_page": "20"})
        ],
    )
    mocked.add(
        responses.GET,
        f"{API}/repos/acme/alpha/commits",
        json=[
            {"commit": {"author": {"email": "octocat@example.com"}}},
            {"commit": {"author": {"email": "dev@example.com"}}},
        ],
        match=[matchers.query_param_matcher({"author": "octocat", "per_page": "10"})],
    )
    mocked.add_callback(
        responses.POST, GRAPHQL_URL, callback=_graphql_reply, content_type="application/json"
    )
    mocked.add(responses.GET, f"{API}/orgs/acme/members/octocat", status=404)

    lookup = Lookup("token", client=GitHubClient("token"))
    result = lookup.lookup("octocat", "acme")

    assert result.username == "octocat"
    assert sorted(result.addresses, key=lambda a: a.email) == [
        Address("corp@example.com", True, ["org_verified_domains"]),
        Address("dev@example.com", False, ["commits"]),
        Address("octocat@example.com", True, ["commits", "public_api", "saml_identity"]),
    ]
    assert all(call.request.headers["Authorization"] == "Bearer token" for call in mocked.calls)


def test_lookup_keeps_results_of_methods_that_succeed(mocked):
    mocked.add(responses.GET, f"{API}/users/octocat", json={"email": "octocat@example.com"})
    result = Lookup("token").lookup("octocat", "acme")
    assert result == Result("octocat", [Address("octocat@example.com", False, ["public_api"])])