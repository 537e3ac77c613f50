import json

import httpx
import pytest

from gleapcli.client import GleapClient
from gleapcli.errors import (
    ApiStatusError,
    AuthError,
    HttpError,
    NotFoundError,
    RateLimitedError,
    SerializationError,
)
from gleapcli.models import Message, MessageFilters, TicketFilters, TicketStatus

BASE = "https://api.example.com/v3"


class Recorder:
    def __init__(self, payload=None, status=200, text=None):
        self.payload = payload
        self.status = status
        self.text = text
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status, text=self.text)
        return httpx.Response(self.status, json=self.payload)


def make_client(handler, verbose=0):
    return GleapClient(
        api_key="placeholder",
        project_id="proj-1",
        base_url=BASE,
        verbose=verbose,
        transport=httpx.MockTransport(handler),
    )


def test_get_ticket_sends_auth_headers():
    rec = Recorder({"id": "t1", "title": "Crash", "status": "OPEN"})
    with make_client(rec) as client:
        ticket = client.tickets().get("t1")
    assert ticket.id == "t1"
    assert ticket.status is TicketStatus.OPEN
    req = rec.requests[0]
    assert req.method == "GET"
    assert str(req.url) == f"{BASE}/tickets/t1"
    assert req.headers["authorization"] == "Bearer placeholder"
    assert req.headers["project"] == "proj-1"
    assert req.headers["user-agent"] == "gleap-cli/0.1.0"


def test_list_tickets_sends_filters_in_order():
    rec = Recorder({"tickets": [{"id": "a"}, {"id": "b"}], "count": 2, "totalCount": 7})
    filters = TicketFilters(status="OPEN", priority="HIGH", archived=False, sort="-createdAt", limit=5, skip=0)
    client = make_client(rec)
    response = client.tickets().list(filters)
    assert [t.id for t in response.tickets] == ["a", "b"]
    assert response.total_count == 7
    assert rec.requests[0].url.params.multi_items() == filters.to_params()
    assert rec.requests[0].url.path == "/v3/tickets"


def test_list_without_filters_has_no_query():
    rec = Recorder({"tickets": []})
    response = make_client(rec).tickets().list()
    assert response.tickets == []
    assert rec.requests[0].url.query == b""


def test_update_uses_put_with_json_body():
    rec = Recorder({"id": "t1", "priority": "LOW"})
    fields = {"priority": "LOW", "title": "New"}
    ticket = make_client(rec).tickets().update("t1", fields)
    assert ticket.priority.value == "LOW"
    req = rec.requests[0]
    assert req.method == "PUT"
    assert req.url.path == "/v3/tickets/t1"
    assert json.loads(req.content) == fields


def test_create_posts_to_tickets():
    rec = Recorder({"id": "new"})
    fields = {"title": "Hello", "tags": ["gleap-cli"]}
    ticket = make_client(rec).tickets().create(fields)
    assert ticket.id == "new"
    assert rec.requests[0].method == "POST"
    assert rec.requests[0].url.path == "/v3/tickets"
    assert json.loads(rec.requests[0].content) == fields


def test_search_returns_raw_json():
    payload = [{"id": "x", "score": 1.5}]
    rec = Recorder(payload)
    result = make_client(rec).tickets().search("login fails")
    assert result == payload
    assert rec.requests[0].url.path == "/v3/tickets/search"
    assert rec.requests[0].url.params.multi_items() == [("searchTerm", "login fails")]


@pytest.mark.parametrize(
    "method,suffix",
    [
        ("activity_logs", "activity-logs"),
        ("console_logs", "console-logs"),
        ("network_logs", "network-logs"),
    ],
)
def test_log_endpoints(method, suffix):
    payload = {"logs": [{"msg": "m"}]}
    rec = Recorder(payload)
    tickets = make_client(rec).tickets()
    assert getattr(tickets, method)("t7") == payload
    assert rec.requests[0].url.path == f"/v3/tickets/t7/{suffix}"


def test_messages_list():
    rec = Recorder([{"id": "m1", "type": "NOTE"}, {"id": "m2", "type": "SOMETHING_NEW"}])
    filters = MessageFilters(ticket="t1", limit=20, skip=0)
    messages = make_client(rec).messages().list(filters)
    assert [m.id for m in messages] == ["m1", "m2"]
    assert messages[1].message_type.value == "UNKNOWN"
    assert rec.requests[0].url.params.multi_items() == filters.to_params()


def test_messages_list_rejects_non_array():
    rec = Recorder({"id": "m1"})
    with pytest.raises(SerializationError):
        make_client(rec).messages().list()


def test_create_note_body():
    rec = Recorder({"id": "m1"})
    message = make_client(rec).messages().create_note("t1", "internal")
    assert isinstance(message, Message) and message.id == "m1"
    assert json.loads(rec.requests[0].content) == {"ticket": "t1", "comment": "internal", "isNote": True}
    assert rec.requests[0].url.path == "/v3/messages"


def test_create_comment_body_has_no_note_flag():
    rec = Recorder({"id": "m2"})
    make_client(rec).messages().create_comment("t1", "hello")
    assert json.loads(rec.requests[0].content) == {"ticket": "t1", "comment": "hello"}


@pytest.mark.parametrize(
    "status,error",
    [(401, AuthError), (403, AuthError), (404, NotFoundError)],
)
def test_error_status_mapping(status, error):
    rec = Recorder(status=status, text="nope")
    with pytest.raises(error) as info:
        make_client(rec).tickets().get("t1")
    assert info.value.message == "nope"


def test_rate_limit():
    rec = Recorder(status=429, text="slow down")
    with pytest.raises(RateLimitedError) as info:
        make_client(rec).tickets().get("t1")
    assert info.value.retry_after_secs == 60
    assert info.value.exit_code() == 6


def test_other_status():
    rec = Recorder(status=500, text="boom")
    with pytest.raises(ApiStatusError) as info:
        make_client(rec).tickets().get("t1")
    assert info.value.status == 500
    assert info.value.message == "boom"


def test_invalid_json_gives_hint(capsys):
    rec = Recorder(text="not json")
    with pytest.raises(SerializationError):
        make_client(rec).tickets().get("t1")
    err = capsys.readouterr().err
    assert "Deserialization error" in err
    assert "Hint: use -vv to see the raw API response" in err


def test_invalid_json_verbose_shows_raw(capsys):
    rec = Recorder(text="not json")
    with pytest.raises(SerializationError):
        make_client(rec, verbose=2).tickets().get("t1")
    assert "Raw response: not json" in capsys.readouterr().err


def test_wrong_shape_is_serialization_error():
    rec = Recorder({"count": 1})
    with pytest.raises(SerializationError):
        make_client(rec).tickets().list()


def test_transport_failure_is_http_error():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(HttpError) as info:
        make_client(handler).tickets().get("t1")
    assert info.value.exit_code() == 7


def test_verbose_logs_request_and_status(capsys):
    rec = Recorder({"id": "t1"})
    make_client(rec, verbose=1).tickets().get("t1")
    err = capsys.readouterr().err
    assert f"> GET {BASE}/tickets/t1" in err
    assert "< 200" in err


def test_with_verbose_returns_same_client():
    client = make_client(Recorder({}))
    assert client.with_verbose(3) is client
    assert client.verbose == 3


def test_closed_client_cannot_send():
    client = make_client(Recorder({"id": "t1"}))
    with client as entered:
        assert entered is client
    with pytest.raises(RuntimeError):
        client.tickets().get("t1")