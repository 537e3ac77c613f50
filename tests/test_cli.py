import pytest

from gleapcli.cli import build_parser, main

UNREACHABLE = "http://127.0.0.1:1"


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("GLEAP_API_KEY", "placeholder")
    monkeypatch.setenv("GLEAP_PROJECT_ID", "project-1")
    monkeypatch.setenv("GLEAP_BASE_URL", UNREACHABLE)
    return monkeypatch


def test_ticket_list_defaults():
    args = build_parser().parse_args(["tickets", "list"])
    assert args.sort == "-createdAt"
    assert args.limit == 20
    assert args.skip == 0
    assert args.status is None
    assert args.ticket_type is None


def test_ticket_list_filters():
    args = build_parser().parse_args(
        ["tickets", "list", "--type", "BUG", "--status", "OPEN", "-l", "5", "-s", "10"]
    )
    assert args.ticket_type == "BUG"
    assert args.status == "OPEN"
    assert args.limit == 5
    assert args.skip == 10


def test_sort_accepts_hyphen_value_with_equals():
    args = build_parser().parse_args(["tickets", "list", "--sort=-priority"])
    assert args.sort == "-priority"


def test_verbose_counts():
    args = build_parser().parse_args(["-vv", "tickets", "get", "T1"])
    assert args.verbose == 2
    assert args.id == "T1"


def test_verbose_defaults_to_zero():
    args = build_parser().parse_args(["messages", "list", "--ticket", "T1"])
    assert args.verbose == 0
    assert args.ticket == "T1"


def test_create_arguments():
    args = build_parser().parse_args(
        ["tickets", "create", "Broken", "--tags", "a,b", "--description", "d"]
    )
    assert args.title == "Broken"
    assert args.tags == "a,b"
    assert args.description == "d"


def test_missing_domain_is_usage_error():
    with pytest.raises(SystemExit) as info:
        build_parser().parse_args([])
    assert info.value.code == 2


def test_note_requires_ticket():
    with pytest.raises(SystemExit) as info:
        build_parser().parse_args(["messages", "note", "hello"])
    assert info.value.code == 2


def test_auth_status_from_environment(env, capsys):
    assert main(["auth", "status"]) == 0
    out = capsys.readouterr().out
    assert "Authenticated via environment variables" in out


def test_update_without_fields_is_config_error(env, capsys):
    assert main(["tickets", "update", "T1"]) == 4
    err = capsys.readouterr().err
    assert err.startswith("Error: Configuration error: No fields to update.")


def test_unreachable_server_is_http_error(env, capsys):
    assert main(["tickets", "get", "T1"]) == 7
    assert capsys.readouterr().err.startswith("Error: HTTP error:")


def test_sort_hyphen_value_reaches_request(env):
    assert main(["tickets", "list", "--sort", "-priority"]) == 7