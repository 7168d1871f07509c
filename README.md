# gh2addrs

Find the e-mail addresses a GitHub user is known by inside an organization.

`gh2addrs.lookup.Lookup` runs five discovery methods at the same time, each
in its own thread, and merges what they find. Each address is listed once,
with every method that found it (sorted by name). An address counts as
verified as soon as any verifying method reports it.

| Method                 | Source                                                 | Verified |
|------------------------|--------------------------------------------------------|----------|
| `public_api`           | the user's public profile (REST)                       | no       |
| `commits`              | author e-mails on the user's commits in org repos      | no       |
| `saml_identity`        | the organization's SAML external identities (GraphQL)  | yes      |
| `org_verified_domains` | the user's e-mails on org-verified domains (GraphQL)   | yes      |
| `org_members`          | the organization member listing                        | no       |

The `commits` method searches the 20 most recently updated repositories of
the organization and reads up to 10 of the user's commits in each; a
repository whose commits cannot be fetched is skipped. The SAML method asks
for up to 100 external identities. The `org_members` method first checks
that the user is a member of the organization and finds nothing if not.

If a method raises `gh2addrs.client.GitHubError` (for example because the
token lacks permission), the failure is logged as a warning and the other
methods still contribute. Addresses that do not look like real mailboxes are
dropped, including any that contain `noreply`.

Addresses in the result appear in the order in which they were first found,
taking the methods in the order of the table above.

## Installation

```
pip install gh2addrs
```

## Usage

```python
import logging

from gh2addrs.lookup import Lookup

lookup = Lookup("token", logger=logging.getLogger("gh2addrs"))
result = lookup.lookup("octocat", "example-org")

print(result.username)
for address in result.addresses:
    flag = "verified" if address.verified else "unverified"
    print(address.email, flag, ", ".join(address.methods))
```

`Lookup` takes an optional `logger` (a `logging.Logger`, by default the
`gh2addrs` logger) and an optional `client` (a `GitHubClient`, by default one
made from the token). The result is a `gh2addrs.lookup.Result` with a
`username` and a list of `gh2addrs.methods.Address` objects, each with
`email`, `verified` and `methods`.

The token needs enough access to read the organization's data. The SAML and
member-listing methods return results only to organization owners.

### Individual methods

Each method in `gh2addrs.methods` can also be run on its own with a
`GitHubClient`:

```python
from gh2addrs.client import GitHubClient
from gh2addrs.methods import lookup_via_commits

client = GitHubClient("token")
for address in lookup_via_commits(client, "octocat", "example-org"):
    print(address.email)
```

The others are `lookup_via_public_api`, `lookup_via_saml_identity`,
`lookup_via_org_verified_domains` and `lookup_via_org_members`; all take
`(client, username, organization)` and return a list of `Address`.

### The client

`GitHubClient(token, session=None, timeout=30.0)` sends requests with a
bearer token. `request(method, url)` returns the raw `requests.Response`,
`get_json(url)` returns the decoded body and raises `GitHubError` on any
status other than 200, and `graphql(query, variables)` returns the `data`
object of a GraphQL reply, raising `GitHubError` if the reply carries errors.

### Merging addresses yourself

`gh2addrs.lookup.AddressAccumulator` does the merging: `add(address)` takes
an `Address` with one method, and `to_list()` returns the merged addresses.

### Checking an address

```python
from gh2addrs.validation import is_valid_email

is_valid_email("user@example.com")       # True
is_valid_email("user..name@example.com") # False
```

`is_email` is the same check under another name.

## What it does not do

This is a library only: there is no command-line tool, and results are not
stored anywhere. Lookups are not cached, and no paging is done beyond the
first page of each REST listing.

## Running the tests

```
pip install -e ".[test]"
pytest
```