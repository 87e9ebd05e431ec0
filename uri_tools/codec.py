"""Percent-encoding helpers.

The module wraps :py:mod:`urllib.parse` form encoding with charset resolution and
strict decoding, so a malformed escape is reported instead of being passed through.
"""

from __future__ import annotations

import codecs
import re
import unicodedata
from typing import Optional, overload
from urllib.parse import quote_plus, unquote_plus

from .constants import DEFAULT_CHARSET
from .errors import URIDecodeError, URIEncodeError, URIUnsupportedCharsetError

__all__ = ("collation_key", "decode", "decode_utf8", "encode", "encode_utf8")

# Java-compatible form encoding keeps '*' as is
SAFE_CHARS = "*"

MALFORMED_ESCAPE_RE = re.compile(r"%(?![0-9a-fA-F]{2})")


def lookup_charset(charset: str) -> str:
    """Resolve the given charset to its canonical codec name."""
    try:
        return codecs.lookup(charset).name
    except (LookupError, TypeError) as exc:
        raise URIUnsupportedCharsetError(charset) from exc


@overload
def encode(text: str, charset: str = ...) -> str: ...


@overload
def encode(text: None, charset: str = ...) -> None: ...


def encode(text: Optional[str], charset: str = DEFAULT_CHARSET) -> Optional[str]:
    """Percent-encode the given text using form encoding rules.

    Every octet outside of the unreserved set is escaped, a space becomes ``+``.

    :param text: A text to encode, ``None`` is passed through
    :param charset: A charset used to get the octets
    """
    if text is None:
        return None

    charset = lookup_charset(charset)
    try:
        return quote_plus(text, safe=SAFE_CHARS, encoding=charset, errors="strict")
    except UnicodeEncodeError as exc:
        raise URIEncodeError(f"Cannot encode {text!r} with {charset}") from exc


@overload
def decode(text: str, charset: str = ...) -> str: ...


@overload
def decode(text: None, charset: str = ...) -> None: ...


def decode(text: Optional[str], charset: str = DEFAULT_CHARSET) -> Optional[str]:
    """Decode the given percent-encoded text.

    ``+`` is decoded to a space. A ``%`` which is not followed by two hex digits or
    escaped octets which are invalid for the charset raise :py:class:`URIDecodeError`.
    """
    if text is None:
        return None

    charset = lookup_charset(charset)
    if MALFORMED_ESCAPE_RE.search(text):
        raise URIDecodeError(f"Malformed percent-encoding: {text!r}")

    try:
        return unquote_plus(text, encoding=charset, errors="strict")
    except ValueError as exc:
        raise URIDecodeError(f"Cannot decode {text!r} with {charset}") from exc


def encode_utf8(text: Optional[str]) -> Optional[str]:
    return encode(text, DEFAULT_CHARSET)


def decode_utf8(text: Optional[str]) -> Optional[str]:
    return decode(text, DEFAULT_CHARSET)


def collation_key(text: str) -> tuple:
    """Build a sort key which follows English collation rules.

    Letters are compared ignoring accents and case first, then by accents and
    finally lowercase goes before uppercase.
    """
    decomposed = unicodedata.normalize("NFD", text)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    accents = "".join(c for c in decomposed if unicodedata.combining(c))
    return base.casefold(), accents, tuple(c.isupper() for c in base), text
