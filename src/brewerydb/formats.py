"""Response formats understood by the API."""

from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class ResponseFormat(str, Enum):
    JSON = "json"
    XML = "xml"


def coerce_format(value: object) -> ResponseFormat:
    """Return the format named by *value*, falling back to JSON.

    Matching is case-insensitive. Anything that is not ``json`` or ``xml``
    silently becomes JSON, with a warning in the log.
    """
    if isinstance(value, ResponseFormat):
        return value
    if isinstance(value, str):
        try:
            return ResponseFormat(value.strip().lower())
        except ValueError:
            pass
    logger.warning("Unknown response format %r, using json", value)
    return ResponseFormat.JSON
