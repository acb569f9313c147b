import pytest

from battlefields.connectors.envelope import flatten_server_status, unwrap_detail
from battlefields.connectors.errors import (
    DeserializationError,
    MalformedResponseError,
    UpstreamRejectedError,
)
from battlefields.connectors.records import (
    KillRecord,
    PlayerRecord,
    ServerInfo,
    ServerStatus,
    records,
    string_list,
)


def test_unwrap_success():
    assert unwrap_detail({"status": True, "detail": [1, 2, 3]}) == [1, 2, 3]


def test_unwrap_rejected():
    with pytest.raises(UpstreamRejectedError) as exc:
        unwrap_detail({"status": False, "detail": "oops"})
    assert exc.value.detail == "oops"


@pytest.mark.parametrize(
    "document",
    [[1, 2], {"detail": []}, {"status": True}, {"status": True, "detail": "not a list"}],
)
def test_unwrap_malformed(document):
    with pytest.raises(MalformedResponseError):
        unwrap_detail(document)


def test_flatten_server_status():
    got = flatten_server_status([{"host1": "green"}, {"host2": "red"}])
    assert got == [ServerStatus("host1", "green"), ServerStatus("host2", "red")]
    assert got[0].hostname == "host1"
    assert got[1].status == "red"


@pytest.mark.parametrize("item", [{"a": "1", "b": "2"}, {}, "host", {"host": {"nested": 1}}])
def test_flatten_server_status_rejects_bad_entries(item):
    with pytest.raises(MalformedResponseError):
        flatten_server_status([item])


def test_records_checks_required_keys():
    kills = records(KillRecord)
    assert kills([{"uuid": "u", "kills": 3}]) == [{"uuid": "u", "kills": 3}]
    with pytest.raises(DeserializationError):
        kills([{"uuid": "u"}])
    with pytest.raises(DeserializationError):
        kills([["u", 3]])


def test_records_without_required_keys_accept_any_object():
    assert records(PlayerRecord)([{"uuid": "u", "extra": True}]) == [{"uuid": "u", "extra": True}]
    assert records(PlayerRecord)([{"name_history": []}]) == [{"name_history": []}]
    assert PlayerRecord.__required_keys__ == frozenset()


def test_string_list():
    assert string_list(["a", "b"]) == ["a", "b"]
    with pytest.raises(DeserializationError):
        string_list(["a", 1])
    with pytest.raises(DeserializationError):
        string_list({"a": 1})


def test_server_info_from_json():
    info = ServerInfo.from_json(
        {
            "ip": "1.2.3.4",
            "port": 25565,
            "online": True,
            "hostname": "play.example.net",
            "version": "1.16.5",
            "players": {"online": 12, "max": 100},
            "motd": {"clean": ["Welcome", "to Battlefields"]},
        }
    )
    assert info.ip == "1.2.3.4"
    assert info.port == 25565
    assert info.online is True
    assert info.players_online == 12
    assert info.players_max == 100
    assert info.motd == ("Welcome", "to Battlefields")


def test_server_info_offline_defaults():
    info = ServerInfo.from_json({"ip": "1.2.3.4", "online": False})
    assert info.port is None
    assert info.players_online == 0
    assert info.motd == ()


def test_server_info_single_line_motd():
    info = ServerInfo.from_json({"ip": "1.2.3.4", "online": True, "motd": {"clean": "Welcome back"}})
    assert info.motd == ("Welcome back",)


@pytest.mark.parametrize("data", [[], {"players": [1]}, {"port": "not-a-port"}])
def test_server_info_rejects_bad_payload(data):
    with pytest.raises(DeserializationError):
        ServerInfo.from_json(data)
