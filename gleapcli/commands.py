"""Actions behind each command; results are printed as pretty JSON."""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TextIO

from .client import GleapClient
from .credentials import delete_credentials, load_credentials, store_credentials
from .errors import ConfigError, IoError
from .models import MessageFilters, TicketFilters

CLI_TAG = "gleap-cli"

_KEY_PROMPT = "Gleap API key: "
_PROJECT_PROMPT = "Gleap project ID: "


def _out(stdout: TextIO | None) -> TextIO:
    return stdout if stdout is not None else sys.stdout


def _plain(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, list):
        return [_plain(entry) for entry in value]
    return value


def _emit(value: Any, stdout: TextIO | None) -> None:
    print(json.dumps(_plain(value), indent=2, ensure_ascii=False), file=_out(stdout))


def _prompt(label: str, stdin: TextIO, stdout: TextIO) -> str:
    try:
        stdout.write(label)
        stdout.flush()
        return stdin.readline().strip()
    except OSError as exc:
        raise IoError(str(exc)) from exc


def login(
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    path: Path | None = None,
) -> None:
    """Ask for the API key and project ID and store them."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = _out(stdout)
    api_key = _prompt(_KEY_PROMPT, stdin, stdout)
    if not api_key:
        raise ConfigError("API key cannot be empty")
    project_id = _prompt(_PROJECT_PROMPT, stdin, stdout)
    if not project_id:
        raise ConfigError("Project ID cannot be empty")
    store_credentials(api_key, project_id, path)
    print("Credentials stored.", file=stdout)


def logout(stdout: TextIO | None = None, path: Path | None = None) -> None:
    """Remove stored credentials."""
    delete_credentials(path)
    print("Credentials removed.", file=_out(stdout))


def status(
    stdout: TextIO | None = None,
    environ: Mapping[str, str] | None = None,
    path: Path | None = None,
) -> None:
    """Report where credentials come from, if anywhere."""
    stdout = _out(stdout)
    environ = environ if environ is not None else os.environ
    if "GLEAP_API_KEY" in environ and "GLEAP_PROJECT_ID" in environ:
        print("Authenticated via environment variables", file=stdout)
        print("  GLEAP_API_KEY:    set", file=stdout)
        print("  GLEAP_PROJECT_ID: set", file=stdout)
        return
    try:
        _, project_id = load_credentials(path)
    except ConfigError:
        print("Not authenticated", file=stdout)
        print(file=stdout)
        print("Run `gleap auth login` to store credentials,", file=stdout)
        print(
            "or set GLEAP_API_KEY and GLEAP_PROJECT_ID environment variables.",
            file=stdout,
        )
        return
    print("Authenticated via stored credentials", file=stdout)
    print(f"  Project ID: {project_id}", file=stdout)


def build_ticket_fields(
    title: str,
    ticket_type: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    description: str | None = None,
    tags: str | None = None,
) -> dict[str, Any]:
    """Body for a new ticket; the CLI tag is always among the tags."""
    fields: dict[str, Any] = {"title": title}
    optional = (
        ("type", ticket_type),
        ("status", status),
        ("priority", priority),
        ("description", description),
    )
    fields.update((key, value) for key, value in optional if value is not None)
    tag_list = [tag.strip() for tag in (tags or "").split(",") if tag.strip()]
    if CLI_TAG not in tag_list:
        tag_list.append(CLI_TAG)
    fields["tags"] = tag_list
    return fields


def build_update_fields(
    status: str | None = None,
    priority: str | None = None,
    title: str | None = None,
) -> dict[str, Any]:
    """Body for a ticket update; at least one field must be given."""
    pairs = (("status", status), ("priority", priority), ("title", title))
    fields = {key: value for key, value in pairs if value is not None}
    if not fields:
        raise ConfigError("No fields to update. Provide --status, --priority, or --title.")
    return fields


def list_tickets(
    client: GleapClient,
    status: str | None = None,
    ticket_type: str | None = None,
    priority: str | None = None,
    sort: str = "-createdAt",
    limit: int = 20,
    skip: int = 0,
    stdout: TextIO | None = None,
) -> None:
    """Print non-archived, non-spam tickets matching the filters."""
    filters = TicketFilters(
        status=status,
        ticket_type=ticket_type,
        priority=priority,
        archived=False,
        is_spam=False,
        sort=sort,
        limit=limit,
        skip=skip,
    )
    _emit(client.tickets().list(filters), stdout)


def create_ticket(
    client: GleapClient,
    title: str,
    ticket_type: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    description: str | None = None,
    tags: str | None = None,
    stdout: TextIO | None = None,
) -> None:
    fields = build_ticket_fields(title, ticket_type, status, priority, description, tags)
    _emit(client.tickets().create(fields), stdout)


def get_ticket(client: GleapClient, ticket_id: str, stdout: TextIO | None = None) -> None:
    _emit(client.tickets().get(ticket_id), stdout)


def search_tickets(client: GleapClient, query: str, stdout: TextIO | None = None) -> None:
    _emit(client.tickets().search(query), stdout)


def update_ticket(
    client: GleapClient,
    ticket_id: str,
    status: str | None = None,
    priority: str | None = None,
    title: str | None = None,
    stdout: TextIO | None = None,
) -> None:
    fields = build_update_fields(status, priority, title)
    _emit(client.tickets().update(ticket_id, fields), stdout)


def console_logs(client: GleapClient, ticket_id: str, stdout: TextIO | None = None) -> None:
    _emit(client.tickets().console_logs(ticket_id), stdout)


def network_logs(client: GleapClient, ticket_id: str, stdout: TextIO | None = None) -> None:
    _emit(client.tickets().network_logs(ticket_id), stdout)


def activity_logs(client: GleapClient, ticket_id: str, stdout: TextIO | None = None) -> None:
    _emit(client.tickets().activity_logs(ticket_id), stdout)


def list_messages(
    client: GleapClient,
    ticket: str,
    limit: int = 20,
    skip: int = 0,
    stdout: TextIO | None = None,
) -> None:
    filters = MessageFilters(ticket=ticket, limit=limit, skip=skip)
    _emit(client.messages().list(filters), stdout)


def add_note(client: GleapClient, ticket: str, text: str, stdout: TextIO | None = None) -> None:
    _emit(client.messages().create_note(ticket, text), stdout)


def add_reply(client: GleapClient, ticket: str, text: str, stdout: TextIO | None = None) -> None:
    _emit(client.messages().create_comment(ticket, text), stdout)