"""Pick a response format from an ``Accept`` header.

Formats are configured per route as short name -> MIME type.  Matching is
a plain substring test of each MIME type against the header value; quality
values are not weighed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_FORMAT = "json"

DEFAULT_FORMATS: dict[str, str] = {
    "json": "application/json",
    "xml": "application/xml",
}


def negotiate_format(
    accept: str | None,
    formats: Mapping[str, str],
    pinned: str | None = None,
) -> str:
    """Return the short format name to respond with.

    A *pinned* format short-circuits negotiation.  Otherwise the last
    configured format whose MIME type occurs in *accept* wins, and
    ``DEFAULT_FORMAT`` is used only when none occurs.
    """
    if pinned:
        return pinned

    selected: str | None = None
    if accept:
        for name, mime in formats.items():
            if mime in accept:
                selected = name

    return selected or DEFAULT_FORMAT
