"""Immutable URI builder.

All the methods return a NEW builder, so create a root builder once and derive from it
as much as you need, the root never changes.

.. code-block:: python

    root = URIBuilder.from_string("https://example.com/api/")
    url = root.add_path("users", "42").add_parameter("fields", "name").to_uri()
    assert str(url) == "https://example.com/api/users/42?fields=name"

Path segments are kept decoded and percent-encoded one by one on rendering,
so a ``/`` inside a segment is encoded instead of being a separator.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Iterable, Optional, Union

from yarl import URL

from . import schemes
from .codec import decode, encode
from .constants import DEFAULT_CHARSET
from .errors import URIAssemblyError, URIParseError
from .logs import logger
from .params import QueryParam, QueryParams

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .types import TQueryMap

__all__ = ("URI", "URIBuilder")

URI_RE = re.compile(r"[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]*")

FIELDS = (
    "scheme",
    "scheme_specific_part",
    "host",
    "port",
    "path",
    "fragment",
    "parameters",
    "path_absolute",
    "ends_with_slash",
)


class URI(str):
    """An assembled URI.

    The string is exactly the text assembled by :py:class:`URIBuilder`, ports and scheme
    case are kept as they were set. ``url`` gives the parsed :py:class:`yarl.URL`.

    .. code-block:: python

        uri = URIBuilder.from_string("ws://example.com:80/feed").to_uri()
        assert uri == "ws://example.com:80/feed"
        assert uri.url.path == "/feed"

    """

    url: URL

    def __new__(cls, value: str) -> URI:
        if not URI_RE.fullmatch(value):
            raise URIAssemblyError(f"Assembled an invalid URI: {value!r}")

        try:
            url = URL(value, encoded=True)
        except (TypeError, ValueError) as exc:
            raise URIAssemblyError(f"Assembled an invalid URI: {value!r}") from exc

        obj = str.__new__(cls, value)
        obj.url = url
        return obj

    def __repr__(self) -> str:
        return f"URI('{self}')"


class URIBuilder:
    """Build URIs from parts.

    Use :py:meth:`empty`, :py:meth:`from_string` or :py:meth:`from_uri` to create a builder.

    :param scheme: URI scheme (``http``, ``https``, ``urn``...)
    :param scheme_specific_part: An opaque part of URN-like URIs (``urn:<part>``)
    :param host: URI host
    :param port: URI port
    :param path: Decoded path segments
    :param fragment: URI fragment
    :param parameters: Query parameters
    :param path_absolute: The path starts with ``/``
    :param ends_with_slash: The path ends with ``/``

    """

    __slots__ = tuple(f"_{name}" for name in FIELDS)

    def __init__(
        self,
        *,
        scheme: Optional[str] = None,
        scheme_specific_part: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        path: Iterable[str] = (),
        fragment: Optional[str] = None,
        parameters: Optional[QueryParams] = None,
        path_absolute: bool = False,
        ends_with_slash: bool = False,
    ):
        self._scheme = scheme
        self._scheme_specific_part = scheme_specific_part
        self._host = host
        self._port = port
        self._path: tuple[str, ...] = tuple(path)
        self._fragment = fragment
        self._parameters: QueryParams = parameters if parameters is not None else QueryParams()
        self._path_absolute = path_absolute
        self._ends_with_slash = ends_with_slash

    def __copy__(self, **mutations) -> URIBuilder:
        """Copy the builder to a new one."""
        state = {name: getattr(self, f"_{name}") for name in FIELDS}
        state.update(mutations)
        return self.__class__(**state)

    def __str__(self) -> str:
        return str(self.to_uri())

    def __repr__(self) -> str:
        return (
            f"<URIBuilder scheme={self._scheme!r} host={self._host!r} port={self._port!r} "
            f"path={self.current_path!r} query={self._parameters.to_query()!r}>"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, URIBuilder):
            return NotImplemented
        return all(getattr(self, f"_{name}") == getattr(other, f"_{name}") for name in FIELDS)

    def __hash__(self) -> int:
        return hash(tuple(getattr(self, f"_{name}") for name in FIELDS))

    @classmethod
    def empty(cls) -> URIBuilder:
        """Create an empty builder, :py:meth:`to_uri` returns an empty URI for it."""
        return cls()

    @classmethod
    def from_uri(cls, uri: Union[URL, Any]) -> URIBuilder:
        """Create a builder from the given :py:class:`yarl.URL` (or any URI-like object)."""
        return cls.from_string(str(uri))

    @classmethod
    def from_string(cls, uri: str, charset: str = DEFAULT_CHARSET) -> URIBuilder:
        """Create a builder from the given encoded URI string."""
        try:
            url = URL(uri, encoded=True)
            host, port, path = url.raw_host or None, url.explicit_port, url.raw_path
        except (TypeError, ValueError) as exc:
            raise URIParseError(f"Invalid URI: {uri!r}") from exc

        # yarl lowercases the scheme, keep it as given
        scheme_specific_part = None
        scheme = uri.split(":", 1)[0] if url.scheme else None
        if scheme is not None:
            scheme_specific_part = uri[len(scheme) + 1 :].split("#", 1)[0]

        if host is not None and ":" in host and not host.startswith("["):
            host = f"[{host}]"

        # yarl reports "/" for an empty path of an absolute URL
        location = uri.split("#", 1)[0].split("?", 1)[0]
        if host is not None and path == "/" and not location.endswith("/"):
            path = ""

        # Opaque URIs (mailto:..., urn:...) have no path
        if scheme is not None and host is None and not path.startswith("/"):
            path = ""

        return cls(
            scheme=scheme,
            scheme_specific_part=scheme_specific_part,
            host=host,
            port=port,
            path=split_path(path, charset),
            fragment=url.raw_fragment if "#" in uri else None,
            parameters=QueryParams.parse(url.raw_query_string, charset),
            path_absolute=path.startswith("/"),
            ends_with_slash=path.endswith("/"),
        )

    # Accessors
    # ---------

    @property
    def scheme(self) -> Optional[str]:
        return self._scheme

    @property
    def scheme_specific_part(self) -> Optional[str]:
        return self._scheme_specific_part

    @property
    def host(self) -> Optional[str]:
        return self._host

    @property
    def port(self) -> Optional[int]:
        return self._port

    @property
    def path(self) -> list[str]:
        """Decoded path segments."""
        return list(self._path)

    @property
    def encoded_path(self) -> list[str]:
        """Percent-encoded path segments."""
        return [encode(segment) for segment in self._path]

    @property
    def current_path(self) -> Optional[str]:
        """The path as a string with segments not encoded."""
        return self.render_path(encode_path=False)

    @property
    def fragment(self) -> Optional[str]:
        return self._fragment

    @property
    def parameters(self) -> QueryParams:
        return self._parameters

    @property
    def parameters_as_map(self) -> Mapping[str, tuple[str, ...]]:
        return self._parameters.as_map()

    def get_parameters_by_name(self, name: str) -> list[QueryParam]:
        return self._parameters.get_as_query_param(name)

    def get_first_parameter_value(self, name: str) -> Optional[str]:
        return self._parameters.get_first(name)

    def is_relative(self) -> bool:
        """Check the scheme and the host are not set."""
        return self._scheme is None and self._host is None

    def is_urn(self) -> bool:
        return self._scheme is not None and self._scheme.startswith("urn")

    # Mutators
    # --------

    def with_scheme(self, scheme: Optional[str]) -> URIBuilder:
        """Set the scheme. Usually ``http`` or ``https``."""
        return self.__copy__(scheme=scheme)

    def with_host(self, host: Optional[str]) -> URIBuilder:
        return self.__copy__(host=host)

    def with_port(self, port: Optional[int]) -> URIBuilder:
        """Set the port.

        A default port of the current scheme (see :py:mod:`uri_tools.schemes`) is not stored,
        so ``http://example.com:80`` becomes ``http://example.com``. Changing the scheme
        later does not affect the stored port.
        """
        if port is not None and port == schemes.current().get_port(self._scheme):
            logger.debug("Port %d is default for '%s', omit it", port, self._scheme)
            port = None

        return self.__copy__(port=port)

    def with_fragment(self, fragment: Optional[str]) -> URIBuilder:
        return self.__copy__(fragment=fragment)

    def add_raw_path(self, path: str) -> URIBuilder:
        """Append an encoded path which may contain ``/``.

        When the builder has no path yet, leading and trailing slashes of the given path
        are kept.
        """
        return self.__copy__(
            path=(*self._path, *split_path(path)),
            path_absolute=self._path_absolute or (not self._path and path.startswith("/")),
            ends_with_slash=self._ends_with_slash or (not self._path and path.endswith("/")),
        )

    def add_path(self, *segments: Union[str, Iterable[str]]) -> URIBuilder:
        """Append path segments.

        Segments are not expected to contain ``/``, if they do it is encoded with the rest
        of the segment. Accepts ``add_path("a", "b")`` and ``add_path(["a", "b"])``.
        """
        return self.__copy__(path=(*self._path, *to_segments(segments)), ends_with_slash=False)

    def with_path(self, *segments: Union[str, Iterable[str]]) -> URIBuilder:
        """Replace the path with the given segments.

        .. seealso:: :py:meth:`add_path`
        """
        return self.__copy__(
            path=to_segments(segments), path_absolute=False, ends_with_slash=False,
        )

    def with_raw_path(self, path: str) -> URIBuilder:
        """Replace the path with the given encoded path which may contain ``/``."""
        return self.__copy__(
            path=split_path(path),
            path_absolute=path.startswith("/"),
            ends_with_slash=path.endswith("/"),
        )

    def no_parameters(self) -> URIBuilder:
        """Drop all the query parameters."""
        return self.with_parameters(QueryParams.empty())

    def with_parameters(
        self, parameters: Union[QueryParams, TQueryMap, Iterable[QueryParam]],
    ) -> URIBuilder:
        """Replace all the query parameters."""
        if not isinstance(parameters, QueryParams):
            parameters = self._parameters.set(parameters)

        return self.__copy__(parameters=parameters)

    def add_parameter(self, name: Union[str, QueryParam], value: Optional[str] = None) -> URIBuilder:
        """Add a query parameter.

        Values of an existing parameter are replaced (see :py:meth:`QueryParams.add`).
        """
        param = name if isinstance(name, QueryParam) else QueryParam(name, value)
        return self.add_parameters([param])

    def add_parameters(
        self, parameters: Union[str, TQueryMap, Iterable[QueryParam]], *values: str,
    ) -> URIBuilder:
        """Add query parameters from an iterable, a mapping or a name with values."""
        if isinstance(parameters, str):
            updated = self._parameters.add(parameters, *values)
        else:
            updated = self._parameters.add(parameters)

        if updated is self._parameters:
            return self

        return self.with_parameters(updated)

    def remove_parameters(self, name: str) -> URIBuilder:
        return self.with_parameters(self._parameters.remove(name))

    def replace_parameter(self, name: str, value: Optional[str]) -> URIBuilder:
        return self.with_parameters(self._parameters.set(name, value))

    # Rendering
    # ---------

    def render_path(self, *, encode_path: bool = True) -> Optional[str]:
        """Join the path segments, ``None`` when the builder has no path."""
        if not self._path:
            return None

        path = "/".join(encode(segment) if encode_path else segment for segment in self._path)
        if (self._path_absolute or self._host is not None) and path and not path.startswith("/"):
            path = f"/{path}"

        if self._ends_with_slash:
            path = f"{path}/"

        return path

    def to_uri(self) -> URI:
        """Build the URI."""
        return self.build()

    def to_normalized_uri(self, encode_path: bool = True) -> URI:
        """Build the URI with ``.`` and ``..`` path segments resolved and sorted parameters."""
        return self.build(encode_path=encode_path, sort=True, normalize=True)

    def to_absolute_uri(self) -> URI:
        """Build the URI, a relative path is prefixed with ``/``."""
        return self.build(absolutify=True)

    def build(self, **options) -> URI:
        """Build the URI as :py:class:`URI`.

        Options are passed to :py:meth:`assemble`.
        """
        return URI(self.assemble(**options))

    def assemble(
        self,
        *,
        encode_path: bool = True,
        sort: bool = False,
        absolutify: bool = False,
        normalize: bool = False,
    ) -> str:
        """Assemble the URI string."""
        if self.is_urn():
            if self._scheme_specific_part is None:
                raise URIAssemblyError(f"URN '{self._scheme}' has no scheme-specific part")

            uri = f"{self._scheme}:{self._scheme_specific_part}"
            if self._fragment is not None:
                uri = f"{uri}#{self._fragment}"
            return uri

        parts = []
        if self._scheme is not None:
            parts.append(f"{self._scheme}://")

        if self._host is not None:
            parts.append(self._host)

        if self._port is not None:
            parts.append(f":{self._port}")

        path = self.render_path(encode_path=encode_path)
        if self._scheme is not None and self._host is None and path is None:
            raise URIAssemblyError(
                f"URI '{self._scheme}:{self._scheme_specific_part or ''}' has no host and no path",
            )

        if path is not None:
            if absolutify and self.is_relative() and not path.startswith("/"):
                path = f"/{path}"

            if normalize:
                path = remove_dot_segments(path)

            parts.append(path)

        if not self._parameters.is_empty():
            parts.append(f"?{self._parameters.to_query(sort)}")

        if self._fragment is not None:
            parts.append(f"#{self._fragment}")

        return "".join(parts)


def to_segments(segments: tuple[Union[str, Iterable[str]], ...]) -> tuple[str, ...]:
    if len(segments) == 1 and not isinstance(segments[0], str):
        return tuple(segments[0])
    return tuple(segments)  # type: ignore[arg-type]


def split_path(path: Optional[str], charset: str = DEFAULT_CHARSET) -> tuple[str, ...]:
    """Split an encoded path into decoded segments.

    A leading slash and trailing empty segments are dropped, they are tracked by flags.
    """
    if not path:
        return ()

    if "/" not in path:
        return (decode(path, charset),)

    segments = path.removeprefix("/").split("/")
    while len(segments) > 1 and not segments[-1]:
        segments.pop()

    return tuple(decode(segment, charset) for segment in segments)


def remove_dot_segments(path: str) -> str:
    """Resolve ``.`` and ``..`` segments of the given path.

    Leading ``..`` segments of a relative path are kept, they point above the base.
    """
    absolute = path.startswith("/")
    segments = path.split("/")
    if absolute:
        segments = segments[1:]

    output: list[str] = []
    for idx, segment in enumerate(segments):
        last = idx == len(segments) - 1
        if segment == ".":
            if last:
                output.append("")
            continue

        if segment != "..":
            output.append(segment)
            continue

        if output and output[-1] != "..":
            output.pop()
        elif not absolute:
            output.append("..")
            continue

        if last:
            output.append("")

    normalized = "/".join(output)
    return f"/{normalized}" if absolute else normalized
