from __future__ import annotations

from typing import Final

DEFAULT_CHARSET: Final = "utf-8"

DEFAULT_SCHEME_PORTS: Final = {
    "http": 80,
    "https": 443,
    "ftp": 21,
    "ssh": 22,
}
