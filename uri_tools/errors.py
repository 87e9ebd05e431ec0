from __future__ import annotations


class URIError(Exception):
    """Base class for URI-Tools Errors."""


class URIUnsupportedCharsetError(URIError, LookupError):
    """Raise when the requested charset cannot be resolved."""


class URIEncodeError(URIError, ValueError):
    """Raise when a text cannot be represented in the given charset."""


class URIDecodeError(URIError, ValueError):
    """URI-Tools decoding error."""


class URIParseError(URIError, ValueError):
    """Raise when a string cannot be decomposed into URI parts."""


class URIAssemblyError(URIError, RuntimeError):
    """Raise when a builder produces a string which is not a valid URI.

    All the parts are encoded by the builder itself, so this is a bug, not a user error.
    """
