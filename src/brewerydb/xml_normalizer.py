"""XML-to-mapping conversion for API responses.

Produces the same shape the JSON decoding path yields, so callers can treat
both formats alike. Conversion rules:

- A leaf element with no children and no attributes becomes its trimmed
  text (``""`` for empty or whitespace-only elements).
- Any other element becomes a mapping of child tag to converted child.
  Attributes go under ``@attributes``; text next to children or attributes
  goes under ``#text``.
- Siblings sharing a tag name collapse to the last one. Repeated elements
  are *not* promoted to lists.
- Namespace URIs are stripped from tag and attribute names.
- Elements nested deeper than ``max_depth`` become ``None`` and their path
  is reported in :attr:`XmlNormalization.truncated_paths`.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any

DEFAULT_MAX_DEPTH = 25

ATTRIBUTES_KEY = "@attributes"
TEXT_KEY = "#text"


@dataclass(frozen=True)
class XmlNormalization:
    """Outcome of a normalization: the mapping plus any truncated subtrees."""

    value: dict[str, Any]
    truncated_paths: tuple[str, ...] = ()

    @property
    def truncated(self) -> bool:
        return bool(self.truncated_paths)


def _strip_ns(name: str) -> str:
    """Remove namespace URI prefix: ``{http://...}Name`` -> ``Name``."""
    if name.startswith("{"):
        return name.split("}", 1)[1]
    return name


def _convert(
    element: ET.Element,
    depth: int,
    path: str,
    max_depth: int,
    truncated: list[str],
) -> dict[str, Any] | str | None:
    if depth > max_depth:
        truncated.append(path)
        return None

    children = list(element)
    attributes = {
        _strip_ns(name): value.strip() for name, value in element.attrib.items()
    }
    text = (element.text or "").strip()
    if not children and not attributes:
        return text

    result: dict[str, Any] = {}
    if attributes:
        result[ATTRIBUTES_KEY] = attributes
    for child in children:
        tag = _strip_ns(child.tag)
        result[tag] = _convert(
            child, depth + 1, f"{path}/{tag}", max_depth, truncated
        )
    if text:
        result[TEXT_KEY] = text
    return result


def normalize_element(
    root: ET.Element, max_depth: int = DEFAULT_MAX_DEPTH
) -> XmlNormalization:
    """Convert a parsed element tree into ``{root_tag: mapping}``."""
    if max_depth < 0:
        raise ValueError("max_depth must be >= 0")
    truncated: list[str] = []
    tag = _strip_ns(root.tag)
    value = {tag: _convert(root, 0, tag, max_depth, truncated)}
    return XmlNormalization(value=value, truncated_paths=tuple(truncated))


def normalize_xml(
    document: bytes | str, max_depth: int = DEFAULT_MAX_DEPTH
) -> XmlNormalization:
    """Parse *document* and normalize it.

    Raises:
        ET.ParseError: If *document* is not well-formed XML.
    """
    return normalize_element(ET.fromstring(document), max_depth=max_depth)
