"""Query parameters.

:py:class:`QueryParams` is an immutable ordered mapping of a parameter's name to its values.
Every "mutating" method returns a new instance, so a single instance can be safely shared.

.. code-block:: python

    params = QueryParams.parse("b=2&a=1&a=3&flag")
    assert params.get("a") == ("1", "3")
    assert params.to_query() == "b=2&a=1&a=3&flag"
    assert params.to_query(sort=True) == "a=1&a=3&b=2&flag"

"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Mapping, Optional, Union

from multidict import MultiDict, MultiDictProxy

from .codec import collation_key, decode, encode
from .constants import DEFAULT_CHARSET
from .logs import logger

if TYPE_CHECKING:
    from .types import TCollationKey, TQueryMap, TQueryPairs

__all__ = ("QueryParam", "QueryParams")

MISSING: Any = object()


@dataclass(frozen=True)
class QueryParam:
    """A single query parameter.

    ``value`` is ``None`` for a parameter which is present without a value (``?name``).
    """

    name: str
    value: Optional[str] = None

    def is_empty(self) -> bool:
        """Check the parameter has no value or a blank one."""
        return self.value is None or not self.value.strip()


TParamsSource = Union["QueryParams", "TQueryMap", Iterable[QueryParam]]


class QueryParams:
    """Immutable multi-valued query parameters.

    :param params: A mapping of names to values or an iterable of :py:class:`QueryParam`.
        Parameters from the iterable are grouped by name, ``None`` values are skipped,
        so a name without values is kept with an empty sequence.

    """

    __slots__ = ("_params",)

    def __init__(self, params: Optional[TParamsSource] = None):
        """Build the parameters from the given source."""
        self._params: dict[str, tuple[str, ...]] = to_map(params) if params is not None else {}

    @classmethod
    def empty(cls) -> QueryParams:
        return cls()

    @classmethod
    def parse(cls, query: Optional[str], charset: str = DEFAULT_CHARSET) -> QueryParams:
        """Parse the given raw query string.

        Names and values are percent-decoded. Values of repeated names are accumulated in
        order of appearance. A segment with more than one ``=`` is skipped. A malformed
        escape raises :py:class:`uri_tools.errors.URIDecodeError`.
        """
        if not query:
            return cls()

        params: dict[str, list[str]] = {}

        for part in query.split("&"):
            pieces = split_segment(part.strip())
            if not pieces:
                continue

            if len(pieces) > 2:  # noqa: PLR2004
                logger.debug("Skip malformed query segment: %r", part)
                continue

            name = decode(pieces[0].strip(), charset)
            value = decode(pieces[1].strip(), charset) if len(pieces) == 2 else None  # noqa: PLR2004
            values = params.setdefault(name, [])
            if value is not None:
                values.append(value)

        return cls(params)

    @classmethod
    def from_multidict(cls, data: Union[MultiDict, MultiDictProxy, TQueryPairs]) -> QueryParams:
        """Group the given multidict (or an iterable of pairs) into query parameters."""
        items = data.items() if isinstance(data, (MultiDict, MultiDictProxy)) else data
        return cls(QueryParam(name, value) for name, value in items)

    def __repr__(self) -> str:
        return f"<QueryParams {self.to_query()!r}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryParams):
            return NotImplemented
        return list(self._params.items()) == list(other._params.items())

    def __hash__(self) -> int:
        return hash(tuple(self._params.items()))

    def __iter__(self) -> Iterator[QueryParam]:
        return iter(self.as_list())

    def __len__(self) -> int:
        return sum(len(values) or 1 for values in self._params.values())

    def __contains__(self, item: object) -> bool:
        if isinstance(item, (str, QueryParam)):
            return self.contains(item)
        return False

    def is_empty(self) -> bool:
        return not self._params

    def contains(self, name: Union[str, QueryParam], value: Optional[str] = MISSING) -> bool:
        """Check the parameters contain the given name (and value).

        A parameter with an empty value matches a name without values as well.
        """
        if isinstance(name, QueryParam):
            param = name
        elif value is MISSING:
            return name in self._params
        else:
            param = QueryParam(name, value)

        values = self._params.get(param.name)
        if values is None:
            return False

        return (not values and param.is_empty()) or param.value in values

    def add(self, params: Union[str, QueryParam, TParamsSource], *values: str) -> QueryParams:
        """Merge the given parameters into a new instance.

        ``add(name, *values)``, ``add(QueryParam)``, ``add(iterable)`` and ``add(mapping)``
        are supported. Values of an existing name are replaced by the new ones,
        the name keeps its position.
        """
        if isinstance(params, str):
            params = [QueryParam(params, value) for value in values] or [QueryParam(params)]

        elif isinstance(params, QueryParam):
            params = [params]

        update = to_map(params)
        if not update:
            return self

        merged = dict(self._params)
        merged.update(update)
        return self.__class__(merged)

    def set(self, params: Union[str, TParamsSource], *values: Any) -> QueryParams:
        """Replace the parameters.

        ``set(mapping)`` and ``set(iterable)`` discard all the current parameters.

        ``set(name, *values)`` (or ``set(name, [values])``) drops the name and appends it
        again with the given values. When no values are given the name is removed.
        """
        if not isinstance(params, str):
            return self.__class__(params)

        if len(values) == 1 and isinstance(values[0], (list, tuple)):
            values = tuple(values[0])

        update = dict(self._params)
        update.pop(params, None)
        values = tuple(value for value in values if value is not None)
        if values:
            update[params] = values

        return self.__class__(update)

    def remove(self, name: str) -> QueryParams:
        if name not in self._params:
            return self

        update = dict(self._params)
        del update[name]
        return self.__class__(update)

    def get(self, name: str) -> tuple[str, ...]:
        """Get values for the given name (an empty tuple if the name is missing)."""
        return self._params.get(name, ())

    def get_as_query_param(self, name: str) -> list[QueryParam]:
        if name not in self._params:
            return []
        return flatten(name, self._params[name])

    def get_first(self, name: str) -> Optional[str]:
        values = self.get(name)
        return values[0] if values else None

    def as_list(self) -> list[QueryParam]:
        """Flatten the parameters keeping the names order.

        A name without values becomes a single parameter with an empty string value.
        """
        return [param for name, values in self._params.items() for param in flatten(name, values)]

    def as_map(self) -> Mapping[str, tuple[str, ...]]:
        """Get a read-only view of the parameters."""
        return MappingProxyType(self._params)

    def as_multidict(self) -> MultiDictProxy[str]:
        """Get the flattened parameters as a read-only :py:class:`multidict.MultiDictProxy`."""
        return MultiDictProxy(MultiDict([(param.name, param.value) for param in self.as_list()]))

    def to_query(
        self,
        sort: bool = False,
        key: Optional[TCollationKey] = None,
        charset: str = DEFAULT_CHARSET,
    ) -> Optional[str]:
        """Serialize the parameters into a query string.

        :param sort: Order the parameters by name (the stored order is not changed)
        :param key: A collation key for the names, English rules are used by default
        :param charset: A charset to encode names and values

        Parameters with empty values are rendered without ``=``.
        Returns ``None`` when there are no parameters.
        """
        params = self.as_list()
        if not params:
            return None

        if sort:
            collate = key or collation_key
            params = sorted(params, key=lambda param: collate(param.name))

        return "&".join(
            encode(param.name, charset)
            if param.is_empty()
            else f"{ encode(param.name, charset) }={ encode(param.value, charset) }"
            for param in params
        )


def to_map(params: TParamsSource) -> dict[str, tuple[str, ...]]:
    """Convert the given source into the internal mapping."""
    if isinstance(params, QueryParams):
        return dict(params._params)

    if isinstance(params, Mapping):
        return {name: to_values(values) for name, values in params.items()}

    grouped: dict[str, list[str]] = {}
    for param in params:
        values = grouped.setdefault(param.name, [])
        if param.value is not None:
            values.append(param.value)

    return {name: tuple(values) for name, values in grouped.items()}


def to_values(values: Union[str, Iterable[str], None]) -> tuple[str, ...]:
    if values is None:
        return ()

    if isinstance(values, str):
        return (values,)

    return tuple(value for value in values if value is not None)


def flatten(name: str, values: tuple[str, ...]) -> list[QueryParam]:
    if not values:
        return [QueryParam(name, "")]
    return [QueryParam(name, value) for value in values]


def split_segment(segment: str) -> list[str]:
    """Split a query segment by ``=``, trailing empty pieces are dropped."""
    pieces = segment.split("=")
    while pieces and not pieces[-1]:
        pieces.pop()
    return pieces
