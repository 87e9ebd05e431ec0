from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Sequence

TQueryValues = Sequence[str]
TQueryMap = Mapping[str, TQueryValues]
TQueryPairs = Iterable[tuple[str, str]]
TCollationKey = Callable[[str], Any]
