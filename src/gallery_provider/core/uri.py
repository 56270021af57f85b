"""
Resource URI helpers.

Resources are addressed as ``content://<authority>/<table>[/<id>]``. The
helpers here parse and build those identifiers so that the dispatcher and
the notification transport can compare them structurally.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote, unquote, urlsplit

CONTENT_SCHEME = "content"


@dataclass(frozen=True)
class ResourceUri:
    """A parsed resource identifier."""

    scheme: str
    authority: str
    segments: tuple[str, ...] = ()

    @classmethod
    def parse(cls, value: "ResourceUri | str") -> "ResourceUri":
        """Parse a string into a ResourceUri. ResourceUri values pass through."""
        if isinstance(value, ResourceUri):
            return value
        parts = urlsplit(str(value))
        segments = tuple(unquote(s) for s in parts.path.split("/") if s)
        return cls(scheme=parts.scheme, authority=parts.netloc, segments=segments)

    @classmethod
    def build(cls, authority: str, *segments: str) -> "ResourceUri":
        return cls(scheme=CONTENT_SCHEME, authority=authority, segments=tuple(segments))

    @property
    def path(self) -> str:
        return "/" + "/".join(quote(s, safe="") for s in self.segments) if self.segments else ""

    @property
    def last_segment(self) -> str | None:
        return self.segments[-1] if self.segments else None

    def with_appended_id(self, row_id: int) -> "ResourceUri":
        """Return a URI naming a single row beneath this one."""
        return ResourceUri(self.scheme, self.authority, self.segments + (str(row_id),))

    def is_ancestor_of(self, other: "ResourceUri") -> bool:
        """True if ``other`` lies strictly beneath this URI."""
        return (
            self.scheme == other.scheme
            and self.authority == other.authority
            and len(other.segments) > len(self.segments)
            and other.segments[: len(self.segments)] == self.segments
        )

    def __str__(self) -> str:
        return f"{self.scheme}://{self.authority}{self.path}"


def with_appended_id(uri: ResourceUri | str, row_id: int) -> ResourceUri:
    """Append a row id to a table URI."""
    return ResourceUri.parse(uri).with_appended_id(row_id)


def parse_id(uri: ResourceUri | str) -> int:
    """
    Extract the trailing row id from a URI.

    Returns -1 if the last path segment is missing or not an integer.
    """
    last = ResourceUri.parse(uri).last_segment
    if last is None:
        return -1
    try:
        return int(last)
    except ValueError:
        return -1
