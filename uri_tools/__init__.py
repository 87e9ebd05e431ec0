""" URI-Tools -- Immutable URI builder and query parameters """
from __future__ import annotations

from . import schemes
from .builder import URI, URIBuilder
from .codec import decode, encode
from .errors import (
    URIAssemblyError,
    URIDecodeError,
    URIEncodeError,
    URIError,
    URIParseError,
    URIUnsupportedCharsetError,
)
from .params import QueryParam, QueryParams
from .schemes import SchemeDefaults

__all__ = (
    # Errors
    "URIAssemblyError",
    "URIDecodeError",
    "URIEncodeError",
    "URIError",
    "URIParseError",
    "URIUnsupportedCharsetError",
    # Builder
    "URI",
    "URIBuilder",
    # Query
    "QueryParam",
    "QueryParams",
    # Schemes
    "SchemeDefaults",
    "schemes",
    # Codec
    "decode",
    "encode",
)
