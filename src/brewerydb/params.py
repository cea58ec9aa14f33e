"""Request parameter handling.

Parameters are serialized the way the API's PHP backend expects them:
booleans as ``1``/``0``, sequences as ``key[0]=...`` and nested mappings as
``key[sub]=...``.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, Mapping
from urllib.parse import parse_qsl, urlencode

_BRACKETS = re.compile(r"\[([^\[\]]*)\]")


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def strip_empty(params: Mapping[str, Any]) -> dict[str, Any]:
    """Drop entries the API should fill with its own default."""
    return {key: value for key, value in params.items() if not is_empty(value)}


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _flatten(prefix: str, value: Any) -> Iterator[tuple[str, str]]:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            yield from _flatten(f"{prefix}[{key}]", item)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            yield from _flatten(f"{prefix}[{index}]", item)
    else:
        yield prefix, _scalar(value)


def encode_params(params: Mapping[str, Any]) -> str:
    """URL-encode *params* into a query string or form body."""
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        pairs.extend(_flatten(str(key), value))
    return urlencode(pairs)


def _split_key(key: str) -> list[str]:
    head, bracket, rest = key.partition("[")
    if not bracket or not head:
        return [key]
    rest = bracket + rest
    parts = _BRACKETS.findall(rest)
    if "".join(f"[{part}]" for part in parts) != rest:
        return [key]
    return [head, *parts]


def _listify(value: Any) -> Any:
    if not isinstance(value, dict):
        return value
    converted = {key: _listify(item) for key, item in value.items()}
    if converted and list(converted) == [str(i) for i in range(len(converted))]:
        return list(converted.values())
    return converted


def decode_params(query: str) -> dict[str, Any]:
    """Parse a query string produced by :func:`encode_params`.

    Values come back as strings; ``key[0]`` style indices rebuild lists and
    ``key[name]`` rebuilds nested mappings.
    """
    result: dict[str, Any] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        path = _split_key(key)
        node = result
        for part in path[:-1]:
            if part == "":
                part = str(len(node))
            child = node.get(part)
            if not isinstance(child, dict):
                child = node[part] = {}
            node = child
        last = path[-1]
        if last == "" and len(path) > 1:
            last = str(len(node))
        node[last] = value
    return {key: _listify(value) for key, value in result.items()}
