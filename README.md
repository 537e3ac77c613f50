# gleapcli

A command-line client and small library for the Gleap customer support API.
It lists, creates, searches and updates tickets, shows the logs captured with
a ticket, and reads or adds messages on a ticket. Every command prints the
API's answer as pretty-printed JSON, so the output can be piped into other
tools.

## Installation

```
pip install .
```

This installs the `gleap` command. To run the tests:

```
pip install ".[test]"
pytest
```

## Credentials

The client needs an API key and a project ID. When both `GLEAP_API_KEY` and
`GLEAP_PROJECT_ID` are set in the environment they are used:

```
export GLEAP_API_KEY=placeholder
export GLEAP_PROJECT_ID=my-project
export GLEAP_BASE_URL=https://api.gleap.io/v3   # optional, this is the default
```

Otherwise the stored credentials are used. Store them once with:

```
gleap auth login
```

which asks for the API key and the project ID; neither may be empty.

Check which credentials are in effect, or remove the stored ones:

```
gleap auth status
gleap auth logout
```

`auth logout` succeeds even when nothing is stored.

Stored credentials are kept in `credentials.json` in the user configuration
directory for `gleap-cli` (as given by `platformdirs`), written with
permissions that let only the owner read it. They are not kept in an
operating-system keychain.

## Tickets

```
gleap tickets list --status OPEN --type BUG --priority HIGH --sort -createdAt --limit 20 --skip 0
gleap tickets get TICKET_ID
gleap tickets search "login page"
gleap tickets create "Checkout fails" --type BUG --priority HIGH --description "Steps..." --tags web,checkout
gleap tickets update TICKET_ID --status DONE
```

- `tickets list` always hides archived and spam tickets. `--sort` defaults to
  `-createdAt`, `-l/--limit` to 20 and `-s/--skip` to 0.
- `tickets create` always adds the `gleap-cli` tag to the comma-separated
  `--tags` (empty entries are dropped).
- `tickets update` needs at least one of `--status`, `--priority` or `--title`.
- `tickets search` prints the API's search answer as it comes.

### Logs captured with a ticket

```
gleap tickets logs console TICKET_ID
gleap tickets logs network TICKET_ID
gleap tickets logs activity TICKET_ID
```

## Messages

```
gleap messages list --ticket TICKET_ID --limit 20 --skip 0
gleap messages note --ticket TICKET_ID "Internal note text"
gleap messages reply --ticket TICKET_ID "Reply visible to the customer"
```

## Verbosity

Add `-v` to log each request and its status and timing to standard error,
`-vv` to also log response headers and error bodies, and `-vvv` to log every
response body. When a response cannot be decoded, the raw body is shown at
`-vv` and above.

## Exit codes

| Code | Meaning |
|------|---------|
| 0 | success |
| 2 | authentication failed (HTTP 401 or 403), or invalid command-line arguments |
| 3 | API error (any other non-success status) |
| 4 | configuration error (missing credentials, nothing to update, empty input) |
| 5 | not found (HTTP 404) |
| 6 | rate limited (HTTP 429) |
| 7 | HTTP transport error |
| 8 | I/O error |
| 9 | response could not be parsed |

Errors are printed to standard error as `Error: ...`.

## Use as a library

```python
from gleapcli.client import GleapClient
from gleapcli.models import TicketFilters

with GleapClient(api_key="placeholder", project_id="my-project") as client:
    response = client.tickets().list(TicketFilters(status="OPEN", limit=5))
    for ticket in response.tickets:
        print(ticket.id, ticket.title, ticket.status)
    client.messages().create_note(response.tickets[0].id, "Looking into it")
```

`GleapClient` takes an optional `base_url`, a `verbose` level and an
`httpx` `transport`. `tickets()` returns a client with `list`, `get`,
`create`, `update`, `search`, `console_logs`, `network_logs` and
`activity_logs`; `messages()` returns one with `list`, `create`,
`create_note` and `create_comment`. Responses are decoded into the dataclasses
in `gleapcli.models` (`Ticket`, `TicketListResponse`, `Message`, ...), which
keep fields they do not model in `extra` and turn unrecognised type, status
and priority values into `UNKNOWN`. Failures are raised as subclasses of
`gleapcli.errors.AppError`, whose `exit_code()` gives the codes above.