"""Default ports for URI schemes.

The process-wide instance is used by :py:meth:`uri_tools.URIBuilder.with_port` to omit
redundant ports. Install another one to change the behaviour:

.. code-block:: python

    from uri_tools import schemes

    previous = schemes.install({"http": 80, "https": 443, "ws": 80, "wss": 443})
    try:
        ...
    finally:
        schemes.install(previous)

"""

from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from types import MappingProxyType
from typing import Generator, Iterator, Mapping, Optional, Union

from .constants import DEFAULT_SCHEME_PORTS
from .logs import logger

__all__ = ("SchemeDefaults", "current", "install", "installed")


class SchemeDefaults:
    """Read-only mapping of a scheme name to its default port.

    :param ports: Scheme ports, http/https/ftp/ssh are used when not given
    """

    __slots__ = ("_ports",)

    def __init__(self, ports: Optional[Mapping[str, int]] = None):
        self._ports: Mapping[str, int] = MappingProxyType(
            dict(DEFAULT_SCHEME_PORTS if ports is None else ports),
        )

    def __repr__(self) -> str:
        return f"<SchemeDefaults {dict(self._ports)!r}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SchemeDefaults):
            return NotImplemented
        return self._ports == other._ports

    def __hash__(self) -> int:
        return hash(frozenset(self._ports.items()))

    def __contains__(self, scheme: object) -> bool:
        return scheme in self._ports

    def __getitem__(self, scheme: str) -> int:
        return self._ports[scheme]

    def __iter__(self) -> Iterator[str]:
        return iter(self._ports)

    def __len__(self) -> int:
        return len(self._ports)

    def get_port(self, scheme: Optional[str]) -> Optional[int]:
        """Get a default port for the given scheme."""
        if scheme is None:
            return None
        return self._ports.get(scheme)


_lock = Lock()
_current = SchemeDefaults()


def current() -> SchemeDefaults:
    """Get the installed scheme defaults."""
    return _current


def install(defaults: Union[SchemeDefaults, Mapping[str, int]]) -> SchemeDefaults:
    """Replace the process-wide scheme defaults and return the previous ones."""
    global _current  # noqa: PLW0603

    if not isinstance(defaults, SchemeDefaults):
        defaults = SchemeDefaults(defaults)

    with _lock:
        previous, _current = _current, defaults

    logger.debug("Scheme defaults installed: %r", defaults)
    return previous


@contextmanager
def installed(defaults: Union[SchemeDefaults, Mapping[str, int]]) -> Generator[SchemeDefaults, None, None]:
    """Install the given scheme defaults for the context's duration."""
    previous = install(defaults)
    try:
        yield current()
    finally:
        install(previous)
