from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def scheme_defaults():
    from uri_tools import schemes

    previous = schemes.current()
    yield previous
    schemes.install(previous)


@pytest.fixture()
def base():
    from uri_tools import URIBuilder

    return URIBuilder.empty().with_scheme("http").with_host("example.com")
