import json

import pytest

from gleapcli.credentials import (
    credentials_path,
    delete_credentials,
    load_credentials,
    store_credentials,
)
from gleapcli.errors import ConfigError


def test_default_path_location():
    path = credentials_path()
    assert path.name == "credentials.json"
    assert path.parent.name == "gleap-cli"


def test_store_and_load_round_trip(tmp_path):
    target = tmp_path / "nested" / "creds.json"
    store_credentials("placeholder", "proj-1", target)
    assert load_credentials(target) == ("placeholder", "proj-1")


def test_store_writes_single_json_entry(tmp_path):
    target = tmp_path / "creds.json"
    store_credentials("placeholder", "proj-1", target)
    assert json.loads(target.read_text()) == {
        "api_key": "placeholder",
        "project_id": "proj-1",
    }


def test_store_overwrites_previous(tmp_path):
    target = tmp_path / "creds.json"
    store_credentials("placeholder", "proj-1", target)
    store_credentials("token", "proj-2", target)
    assert load_credentials(target) == ("token", "proj-2")


def test_load_missing_raises(tmp_path):
    with pytest.raises(ConfigError) as info:
        load_credentials(tmp_path / "absent.json")
    assert info.value.exit_code() == 4


def test_load_invalid_json_raises(tmp_path):
    target = tmp_path / "creds.json"
    target.write_text("{not json")
    with pytest.raises(ConfigError):
        load_credentials(target)


@pytest.mark.parametrize(
    "content",
    ['{"api_key": "placeholder"}', '{"api_key": 1, "project_id": "p"}', "[1, 2]"],
)
def test_load_wrong_shape_raises(tmp_path, content):
    target = tmp_path / "creds.json"
    target.write_text(content)
    with pytest.raises(ConfigError):
        load_credentials(target)


def test_delete_removes_file(tmp_path):
    target = tmp_path / "creds.json"
    store_credentials("placeholder", "proj-1", target)
    delete_credentials(target)
    assert not target.exists()
    with pytest.raises(ConfigError):
        load_credentials(target)


def test_delete_missing_is_silent(tmp_path):
    target = tmp_path / "absent.json"
    delete_credentials(target)
    assert not target.exists()


def test_delete_directory_raises(tmp_path):
    target = tmp_path / "adir"
    target.mkdir()
    with pytest.raises(ConfigError):
        delete_credentials(target)