import pytest

from battlefields.connectors.errors import MalformedQueryError
from battlefields.connectors.query import (
    BattlefieldsTable,
    encode_queries,
    field_key,
    request_url,
)


def test_encode_queries_keeps_order():
    assert encode_queries(["a=1", "b=2"]) == "&a=1&b=2"
    assert encode_queries(["b=2", "a=1"]) == "&b=2&a=1"


def test_encode_empty():
    assert encode_queries([]) == ""


def test_encode_escapes_keys_and_values():
    assert encode_queries(["player name=Steve Jobs"]) == "&player+name=Steve+Jobs"
    assert encode_queries(["q=a&b"]) == "&q=a%26b"


def test_encode_splits_on_first_equals_only():
    assert encode_queries(["filter=a=b"]) == "&filter=a%3Db"
    assert encode_queries(["empty="]) == "&empty="


def test_encode_rejects_entry_without_equals():
    with pytest.raises(MalformedQueryError) as exc:
        encode_queries(["a=1", "bad"])
    assert exc.value.query == "bad"
    assert "bad" in str(exc.value)


def test_request_url_and_field_key():
    assert (
        request_url("https://api.example/api/", BattlefieldsTable.KILLS, "&uuid=x")
        == "https://api.example/api/?type=kills&uuid=x"
    )
    assert request_url("https://api.example/api/", "custom_table", "") == "https://api.example/api/?type=custom_table"
    assert field_key("kills", "&uuid=x") == "kills-&uuid=x"
    assert field_key("kills", "") == "kills-"
