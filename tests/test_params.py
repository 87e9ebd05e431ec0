"""Test query parameters."""
from __future__ import annotations

import pytest


def test_query_param():
    from uri_tools import QueryParam

    assert QueryParam("a").is_empty()
    assert QueryParam("a", "").is_empty()
    assert QueryParam("a", "  ").is_empty()
    assert not QueryParam("a", "1").is_empty()

    assert QueryParam("a", "1") == QueryParam("a", "1")
    assert QueryParam("a") != QueryParam("a", "")
    assert hash(QueryParam("a", "1")) == hash(QueryParam("a", "1"))


def test_base():
    from uri_tools import QueryParam, QueryParams

    params = QueryParams()
    assert params.is_empty()
    assert len(params) == 0
    assert params == QueryParams.empty()

    params = QueryParams([QueryParam("a", "1"), QueryParam("b", "2"), QueryParam("a", "3")])
    assert not params.is_empty()
    assert len(params) == 3
    assert params.as_map() == {"a": ("1", "3"), "b": ("2",)}
    assert list(params) == [QueryParam("a", "1"), QueryParam("a", "3"), QueryParam("b", "2")]
    assert list(params) == list(params)

    params = QueryParams({"a": ["1"], "b": "2", "c": []})
    assert params.as_map() == {"a": ("1",), "b": ("2",), "c": ()}
    assert len(params) == 3


def test_add():
    from uri_tools import QueryParam, QueryParams

    base = QueryParams()
    params = base.add("a", "1", "2")
    assert base.is_empty()
    assert params.get("a") == ("1", "2")

    # values are replaced for an existing name
    assert params.add("a", "3").get("a") == ("3",)

    # the name keeps its position
    params = QueryParams().add("a", "1").add("b", "2").add("a", "3")
    assert params.to_query() == "a=3&b=2"

    params = QueryParams().add([QueryParam("a", "1"), QueryParam("a", "2")])
    assert params.get("a") == ("1", "2")

    params = QueryParams().add(QueryParam("a", "1")).add({"b": ["2", "3"]})
    assert params.as_map() == {"a": ("1",), "b": ("2", "3")}

    assert params.add([]) is params
    assert params.add({}) is params


def test_add_without_values():
    from uri_tools import QueryParam, QueryParams

    params = QueryParams().add("a")
    assert params.as_map() == {"a": ()}
    assert params.as_list() == [QueryParam("a", "")]
    assert params.as_list()[0].is_empty()
    assert len(params) == 1
    assert params.to_query() == "a"

    # An empty string is kept as a value
    params = QueryParams().add("a", "")
    assert params.as_map() == {"a": ("",)}
    assert params.to_query() == "a"


def test_set():
    from uri_tools import QueryParam, QueryParams

    params = QueryParams().add("a", "1").add("b", "2")

    assert params.set("a", "3").to_query() == "b=2&a=3"
    assert params.set("a", "3", "4").get("a") == ("3", "4")
    assert params.set("a", ["5", "6"]).get("a") == ("5", "6")

    assert not params.set("a", []).contains("a")
    assert not params.set("a").contains("a")
    assert not params.set("a", None).contains("a")
    assert params.set("a").to_query() == "b=2"

    assert params.set({"c": ["1"]}).as_map() == {"c": ("1",)}
    assert params.set([QueryParam("d", "1"), QueryParam("d")]).as_map() == {"d": ("1",)}
    assert params.as_map() == {"a": ("1",), "b": ("2",)}


def test_remove():
    from uri_tools import QueryParams

    params = QueryParams().add("a", "1").add("b", "2")
    assert params.remove("c") is params
    assert params.remove("a").as_map() == {"b": ("2",)}
    assert params.get("a") == ("1",)


def test_get():
    from uri_tools import QueryParam, QueryParams

    params = QueryParams().add("a", "1", "2").add("b")
    assert params.get("a") == ("1", "2")
    assert params.get("b") == ()
    assert params.get("c") == ()

    assert params.get_first("a") == "1"
    assert params.get_first("b") is None
    assert params.get_first("c") is None

    assert params.get_as_query_param("a") == [QueryParam("a", "1"), QueryParam("a", "2")]
    assert params.get_as_query_param("b") == [QueryParam("b", "")]
    assert params.get_as_query_param("c") == []


def test_contains():
    from uri_tools import QueryParam, QueryParams

    params = QueryParams().add("a").add("b", "1")

    assert params.contains("a")
    assert params.contains("a", "")
    assert params.contains(QueryParam("a"))
    assert not params.contains("a", "1")
    assert "a" in params
    assert QueryParam("b", "1") in params

    assert params.contains("b", "1")
    assert not params.contains("b", "2")
    assert not params.contains("b", "")
    assert not params.contains("c")
    assert "c" not in params
    assert 42 not in params


def test_as_map_readonly():
    from uri_tools import QueryParams

    params = QueryParams().add("a", "1")
    data = params.as_map()
    with pytest.raises(TypeError):
        data["b"] = ("2",)  # type: ignore[index]


def test_to_query():
    from uri_tools import QueryParams

    assert QueryParams().to_query() is None

    params = QueryParams({"b": ["2"], "a": ["1"]})
    assert params.to_query() == "b=2&a=1"
    assert params.to_query(True) == "a=1&b=2"
    assert params.to_query(sort=True) == "a=1&b=2"
    assert params.to_query() == "b=2&a=1"

    # sorted by names only, values keep their order
    params = QueryParams({"b": ["2"], "a": ["3", "1"]})
    assert params.to_query(sort=True) == "a=3&a=1&b=2"

    params = QueryParams({"B": ["2"], "a": ["1"]})
    assert params.to_query(sort=True) == "a=1&B=2"
    assert params.to_query(sort=True, key=lambda name: name) == "B=2&a=1"

    params = QueryParams().add("q", "a b&c").add("é", "ü")
    assert params.to_query() == "q=a+b%26c&%C3%A9=%C3%BC"
    assert params.to_query(charset="latin-1") == "q=a+b%26c&%E9=%FC"


def test_parse():
    from uri_tools import QueryParams

    assert QueryParams.parse(None).is_empty()
    assert QueryParams.parse("").is_empty()

    params = QueryParams.parse("a=1&b=2&a=3&c")
    assert params.as_map() == {"a": ("1", "3"), "b": ("2",), "c": ()}
    assert params.to_query() == "a=1&a=3&b=2&c"

    params = QueryParams.parse("q=a+b%26c&n%20m=1")
    assert params.get("q") == ("a b&c",)
    assert params.get("n m") == ("1",)

    assert QueryParams.parse("a=&b").as_map() == {"a": (), "b": ()}
    assert QueryParams.parse("a=1&&b=2").as_map() == {"a": ("1",), "b": ("2",)}
    assert QueryParams.parse(" a = 1 ").as_map() == {"a": ("1",)}
    assert QueryParams.parse("%E9=%FC", "latin-1").as_map() == {"é": ("ü",)}


def test_parse_malformed():
    from uri_tools import QueryParams
    from uri_tools.errors import URIDecodeError

    # segments with several '=' are skipped
    assert QueryParams.parse("a=1=2&b=2").as_map() == {"b": ("2",)}

    with pytest.raises(URIDecodeError):
        QueryParams.parse("a=%zz")


def test_parse_serialize():
    from uri_tools import QueryParams

    params = QueryParams().add("a", "1", "2").add("b").add("c", "x y")
    assert QueryParams.parse(params.to_query()) == params

    query = "a=1&a=2&b=x%2By&c"
    assert QueryParams.parse(query).to_query() == query


def test_equality():
    from uri_tools import QueryParams

    params = QueryParams({"a": ["1"], "b": ["2"]})
    assert params == QueryParams({"a": ("1",), "b": ("2",)})
    assert hash(params) == hash(QueryParams({"a": ("1",), "b": ("2",)}))

    assert params != QueryParams({"b": ["2"], "a": ["1"]})
    assert params != QueryParams({"a": ["1"], "b": ["3"]})
    assert QueryParams({"a": ["1", "2"]}) != QueryParams({"a": ["2", "1"]})
    assert params != {"a": ["1"], "b": ["2"]}


def test_multidict():
    from multidict import MultiDict, MultiDictProxy

    from uri_tools import QueryParams

    data = QueryParams.parse("a=1&b&a=2").as_multidict()
    assert isinstance(data, MultiDictProxy)
    assert data.getall("a") == ["1", "2"]
    assert data["b"] == ""

    params = QueryParams.from_multidict(MultiDict([("a", "1"), ("b", "2"), ("a", "3")]))
    assert params.as_map() == {"a": ("1", "3"), "b": ("2",)}

    params = QueryParams.from_multidict([("a", "1"), ("a", "2")])
    assert params.get("a") == ("1", "2")


def test_parse_logs_skipped_segments(caplog):
    import logging

    from uri_tools import QueryParams

    caplog.set_level(logging.DEBUG, logger="uri-tools")
    QueryParams.parse("a=1=2&b=2")
    assert "Skip malformed query segment: 'a=1=2'" in caplog.text
