"""HTTP client for the Gleap REST API."""

from __future__ import annotations

import json
import sys
import time
from typing import Any, Callable

import httpx

from .errors import (
    ApiStatusError,
    AuthError,
    HttpError,
    NotFoundError,
    RateLimitedError,
    SerializationError,
)
from .models import (
    CreateMessageRequest,
    Message,
    MessageFilters,
    Ticket,
    TicketFilters,
    TicketListResponse,
)

DEFAULT_BASE_URL = "https://api.gleap.io/v3"
USER_AGENT = "gleap-cli/0.1.0"
RATE_LIMIT_RETRY_SECS = 60


def _log(message: str) -> None:
    print(message, file=sys.stderr)


def _message_list(value: Any) -> list[Message]:
    if not isinstance(value, list):
        raise SerializationError(
            f"expected an array of messages, found {type(value).__name__}"
        )
    return [Message.from_dict(entry) for entry in value]


class GleapClient:
    """Holds the HTTP session and credentials shared by the resource clients.

    Verbosity: 0 quiet, 1 requests, 2 adds response headers and error bodies,
    3 adds every response body.
    """

    def __init__(
        self,
        api_key: str,
        project_id: str,
        base_url: str = DEFAULT_BASE_URL,
        verbose: int = 0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.project_id = project_id
        self.base_url = base_url
        self.verbose = verbose
        self._http = httpx.Client(
            transport=transport,
            headers={"User-Agent": USER_AGENT},
            timeout=None,
        )

    def with_verbose(self, level: int) -> GleapClient:
        """Set the verbosity level and return this client."""
        self.verbose = level
        return self

    def tickets(self) -> TicketsClient:
        return TicketsClient(self)

    def messages(self) -> MessagesClient:
        return MessagesClient(self)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> GleapClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _build(
        self,
        method: str,
        path: str,
        params: list[tuple[str, str]] | None = None,
        body: Any = None,
    ) -> httpx.Request:
        url = f"{self.base_url}{path}"
        if self.verbose >= 1:
            _log(f"> {method} {url}")
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "project": self.project_id,
        }
        try:
            return self._http.build_request(
                method, url, params=params or None, json=body, headers=headers
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise HttpError(str(exc)) from exc

    def _send(self, request: httpx.Request) -> httpx.Response:
        start = time.perf_counter()
        try:
            response = self._http.send(request)
        except httpx.HTTPError as exc:
            raise HttpError(str(exc)) from exc
        elapsed_ms = (time.perf_counter() - start) * 1000

        if self.verbose >= 1:
            _log(f"< {response.status_code} {response.reason_phrase} ({elapsed_ms:.0f}ms)")
        if self.verbose >= 2:
            for name, value in response.headers.items():
                _log(f"< {name}: {value}")

        if response.is_success:
            return response

        status = response.status_code
        body = response.text
        if self.verbose >= 2:
            _log(f"< Body: {body}")

        if status in (401, 403):
            raise AuthError(body)
        if status == 404:
            raise NotFoundError(body)
        if status == 429:
            raise RateLimitedError(RATE_LIMIT_RETRY_SECS)
        raise ApiStatusError(status, body)

    def _fetch(
        self,
        method: str,
        path: str,
        decode: Callable[[Any], Any] | None = None,
        params: list[tuple[str, str]] | None = None,
        body: Any = None,
    ) -> Any:
        """Send a request and decode its JSON body, keeping the raw text for diagnostics.

        Without ``decode`` the parsed JSON is returned as it is.
        """
        response = self._send(self._build(method, path, params, body))
        text = response.text
        if self.verbose >= 3:
            _log(f"< Body: {text}")
        try:
            payload = json.loads(text)
            return payload if decode is None else decode(payload)
        except (ValueError, SerializationError) as exc:
            reason = exc.message if isinstance(exc, SerializationError) else str(exc)
            _log(f"Deserialization error: {reason}")
            if self.verbose >= 2:
                _log(f"Raw response: {text}")
            else:
                _log("Hint: use -vv to see the raw API response")
            raise SerializationError(reason) from exc


class TicketsClient:
    """Ticket endpoints."""

    def __init__(self, client: GleapClient) -> None:
        self._client = client

    def list(self, filters: TicketFilters | None = None) -> TicketListResponse:
        """List tickets matching the filters."""
        params = (filters or TicketFilters()).to_params()
        return self._client._fetch(
            "GET", "/tickets", TicketListResponse.from_dict, params=params
        )

    def get(self, ticket_id: str) -> Ticket:
        return self._client._fetch("GET", f"/tickets/{ticket_id}", Ticket.from_dict)

    def update(self, ticket_id: str, fields: dict[str, Any]) -> Ticket:
        """Update a ticket with arbitrary JSON fields."""
        return self._client._fetch(
            "PUT", f"/tickets/{ticket_id}", Ticket.from_dict, body=fields
        )

    def create(self, fields: dict[str, Any]) -> Ticket:
        return self._client._fetch("POST", "/tickets", Ticket.from_dict, body=fields)

    def search(self, query: str) -> Any:
        """Full-text search; returns the raw JSON answer."""
        return self._client._fetch(
            "GET", "/tickets/search", params=[("searchTerm", query)]
        )

    def activity_logs(self, ticket_id: str) -> Any:
        return self._client._fetch("GET", f"/tickets/{ticket_id}/activity-logs")

    def console_logs(self, ticket_id: str) -> Any:
        return self._client._fetch("GET", f"/tickets/{ticket_id}/console-logs")

    def network_logs(self, ticket_id: str) -> Any:
        return self._client._fetch("GET", f"/tickets/{ticket_id}/network-logs")


class MessagesClient:
    """Message endpoints."""

    def __init__(self, client: GleapClient) -> None:
        self._client = client

    def list(self, filters: MessageFilters | None = None) -> list[Message]:
        params = (filters or MessageFilters()).to_params()
        return self._client._fetch("GET", "/messages", _message_list, params=params)

    def create(self, request: CreateMessageRequest) -> Message:
        """Create a comment or internal note on a ticket."""
        return self._client._fetch(
            "POST", "/messages", Message.from_dict, body=request.to_dict()
        )

    def create_note(self, ticket_id: str, text: str) -> Message:
        """Add an internal note to a ticket."""
        return self.create(CreateMessageRequest(ticket=ticket_id, comment=text, is_note=True))

    def create_comment(self, ticket_id: str, text: str) -> Message:
        """Add a comment reply to a ticket."""
        return self.create(CreateMessageRequest(ticket=ticket_id, comment=text))