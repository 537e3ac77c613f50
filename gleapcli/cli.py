"""Command-line entry point: argument parsing and dispatch."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from . import commands
from .client import DEFAULT_BASE_URL, GleapClient
from .credentials import load_credentials
from .errors import AppError

PROG = "gleap"
VERSION = "0.3.0"

EPILOG = (
    "Environment variables:\n"
    "  GLEAP_API_KEY       Gleap API key (required)\n"
    "  GLEAP_PROJECT_ID    Gleap project ID (required)\n"
    "  GLEAP_BASE_URL      API base URL (optional, defaults to "
    f"{DEFAULT_BASE_URL})\n"
    "\n"
    "Credentials:\n"
    "  Run `gleap auth login` to store credentials"
)

# Options whose values may themselves start with a hyphen (e.g. "-createdAt").
_HYPHEN_VALUE_OPTIONS = frozenset({"--sort"})

_Handler = Callable[[argparse.Namespace], None]
_ClientHandler = Callable[[GleapClient, argparse.Namespace], None]


def _verbose_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=argparse.SUPPRESS,
        help="Increase output verbosity (-v for requests, -vv for responses, "
        "-vvv for full debug)",
    )
    return parent


def _add_pagination(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-l", "--limit", type=int, default=20,
        help="Maximum number of results to return",
    )
    parser.add_argument(
        "-s", "--skip", type=int, default=0,
        help="Number of results to skip (for pagination)",
    )


def _add_auth(domains: Any, parent: argparse.ArgumentParser) -> None:
    auth = domains.add_parser(
        "auth", parents=[parent], help="Manage authentication credentials"
    )
    actions = auth.add_subparsers(dest="action", required=True, metavar="ACTION")
    actions.add_parser(
        "login", parents=[parent], help="Store API credentials"
    ).set_defaults(handler=lambda args: commands.login())
    actions.add_parser(
        "logout", parents=[parent], help="Remove stored credentials"
    ).set_defaults(handler=lambda args: commands.logout())
    actions.add_parser(
        "status", parents=[parent], help="Show current authentication status"
    ).set_defaults(handler=lambda args: commands.status())


def _add_tickets(domains: Any, parent: argparse.ArgumentParser) -> None:
    tickets = domains.add_parser(
        "tickets", parents=[parent], help="Manage support tickets"
    )
    actions = tickets.add_subparsers(dest="action", required=True, metavar="ACTION")

    listing = actions.add_parser(
        "list", parents=[parent], help="List tickets with optional filters"
    )
    listing.add_argument("--status", help="Filter by status (e.g. OPEN, INPROGRESS, DONE)")
    listing.add_argument(
        "--type", dest="ticket_type",
        help="Filter by type (e.g. BUG, FEATURE_REQUEST, INQUIRY)",
    )
    listing.add_argument("--priority", help="Filter by priority (e.g. LOW, MEDIUM, HIGH)")
    listing.add_argument(
        "--sort", default="-createdAt",
        help="Sort field with direction prefix (e.g. -createdAt, priority)",
    )
    _add_pagination(listing)
    listing.set_defaults(
        client_handler=lambda client, args: commands.list_tickets(
            client, args.status, args.ticket_type, args.priority,
            args.sort, args.limit, args.skip,
        )
    )

    create = actions.add_parser("create", parents=[parent], help="Create a new ticket")
    create.add_argument("title", help="Ticket title")
    create.add_argument(
        "--type", dest="ticket_type",
        help="Ticket type (e.g. BUG, FEATURE_REQUEST, INQUIRY)",
    )
    create.add_argument("--status", help="Ticket status (e.g. OPEN, INPROGRESS, DONE)")
    create.add_argument("--priority", help="Ticket priority (e.g. LOW, MEDIUM, HIGH)")
    create.add_argument("--description", help="Ticket description")
    create.add_argument(
        "--tags", help="Comma-separated tags (gleap-cli is always appended)"
    )
    create.set_defaults(
        client_handler=lambda client, args: commands.create_ticket(
            client, args.title, args.ticket_type, args.status,
            args.priority, args.description, args.tags,
        )
    )

    get = actions.add_parser("get", parents=[parent], help="Get a single ticket by ID")
    get.add_argument("id", help="Ticket ID")
    get.set_defaults(
        client_handler=lambda client, args: commands.get_ticket(client, args.id)
    )

    search = actions.add_parser(
        "search", parents=[parent],
        help="Full-text search tickets (returns up to 30 results ranked by relevance)",
    )
    search.add_argument("query", help="Search query text")
    search.set_defaults(
        client_handler=lambda client, args: commands.search_tickets(client, args.query)
    )

    update = actions.add_parser("update", parents=[parent], help="Update a ticket")
    update.add_argument("id", help="Ticket ID")
    update.add_argument("--status", help="New status")
    update.add_argument("--priority", help="New priority")
    update.add_argument("--title", help="New title")
    update.set_defaults(
        client_handler=lambda client, args: commands.update_ticket(
            client, args.id, args.status, args.priority, args.title
        )
    )

    logs = actions.add_parser(
        "logs", parents=[parent], help="View logs captured with a ticket"
    )
    log_actions = logs.add_subparsers(dest="log_action", required=True, metavar="KIND")
    log_kinds: tuple[tuple[str, str, Callable[..., None]], ...] = (
        ("console", "Get JavaScript console output", commands.console_logs),
        ("network", "Get HTTP request/response data", commands.network_logs),
        (
            "activity",
            "Get ticket history (status changes, assignments, etc.)",
            commands.activity_logs,
        ),
    )
    for name, description, action in log_kinds:
        kind = log_actions.add_parser(name, parents=[parent], help=description)
        kind.add_argument("id", help="Ticket ID")
        kind.set_defaults(
            client_handler=lambda client, args, action=action: action(client, args.id)
        )


def _add_messages(domains: Any, parent: argparse.ArgumentParser) -> None:
    messages = domains.add_parser(
        "messages", parents=[parent], help="Manage ticket messages and conversations"
    )
    actions = messages.add_subparsers(dest="action", required=True, metavar="ACTION")

    listing = actions.add_parser(
        "list", parents=[parent], help="List messages for a ticket"
    )
    listing.add_argument("--ticket", required=True, help="Ticket ID to list messages for")
    _add_pagination(listing)
    listing.set_defaults(
        client_handler=lambda client, args: commands.list_messages(
            client, args.ticket, args.limit, args.skip
        )
    )

    note = actions.add_parser(
        "note", parents=[parent], help="Add an internal note to a ticket"
    )
    note.add_argument("--ticket", required=True, help="Ticket ID")
    note.add_argument("text", help="Note text")
    note.set_defaults(
        client_handler=lambda client, args: commands.add_note(
            client, args.ticket, args.text
        )
    )

    reply = actions.add_parser(
        "reply", parents=[parent], help="Add a comment reply to a ticket"
    )
    reply.add_argument("--ticket", required=True, help="Ticket ID")
    reply.add_argument("text", help="Comment text")
    reply.set_defaults(
        client_handler=lambda client, args: commands.add_reply(
            client, args.ticket, args.text
        )
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for every command."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Unofficial CLI for the Gleap customer support API",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"{PROG} {VERSION}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v for requests, -vv for responses, "
        "-vvv for full debug)",
    )
    parent = _verbose_parent()
    domains = parser.add_subparsers(dest="domain", required=True, metavar="DOMAIN")
    _add_auth(domains, parent)
    _add_tickets(domains, parent)
    _add_messages(domains, parent)
    return parser


def _join_hyphen_values(argv: Sequence[str]) -> list[str]:
    """Glue values that start with '-' onto the options that accept them."""
    joined: list[str] = []
    args = iter(argv)
    for arg in args:
        if arg in _HYPHEN_VALUE_OPTIONS:
            value = next(args, None)
            if value is None:
                joined.append(arg)
            else:
                joined.append(f"{arg}={value}")
        else:
            joined.append(arg)
    return joined


def _resolve_client(environ: Mapping[str, str], verbose: int) -> GleapClient:
    """Build a client from environment variables, falling back to stored credentials."""
    api_key = environ.get("GLEAP_API_KEY")
    project_id = environ.get("GLEAP_PROJECT_ID")
    if api_key is None or project_id is None:
        api_key, project_id = load_credentials()
    base_url = environ.get("GLEAP_BASE_URL") or DEFAULT_BASE_URL
    return GleapClient(api_key, project_id, base_url=base_url).with_verbose(verbose)


def _run(args: argparse.Namespace) -> None:
    handler: _Handler | None = getattr(args, "handler", None)
    if handler is not None:
        handler(args)
        return
    client_handler: _ClientHandler = args.client_handler
    with _resolve_client(os.environ, args.verbose) as client:
        client_handler(client, args)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the process exit code."""
    raw = list(argv) if argv is not None else sys.argv[1:]
    args = build_parser().parse_args(_join_hyphen_values(raw))
    try:
        _run(args)
    except AppError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return exc.exit_code()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())