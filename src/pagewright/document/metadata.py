"""
Ordered metadata table parsed from a document's front matter.
"""

from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from markupsafe import Markup

from ..errors import InvalidAssetsShape, InvalidMetadataShape

MetaValue = Union[str, int, float, bool, date, datetime, time, List[Any], Dict[str, Any]]

TEMPLATE_KEY = "template"
TYPE_KEY = "type"
BODY_KEY = "BODY"


class Metadata(Mapping[str, MetaValue]):
    """
    Read-only view over a document's front matter plus ``BODY``.

    Shape checks happen in the accessors: a caller asking for a string gets a
    string or an ``InvalidMetadataShape`` naming the key.
    """

    def __init__(self, values: Mapping[str, MetaValue], *, source: Optional[Path] = None) -> None:
        self._values: Dict[str, MetaValue] = dict(values)
        self.source = source

    def __getitem__(self, key: str) -> MetaValue:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Metadata({list(self._values)!r}, source={self.source!r})"

    def require_str(self, key: str) -> str:
        value = self._values[key]
        if not isinstance(value, str):
            raise InvalidMetadataShape(key, value, "a string", source=self.source)
        return value

    def optional_str(self, key: str) -> Optional[str]:
        if key not in self._values:
            return None
        return self.require_str(key)

    def optional_paths(self, key: str) -> List[str]:
        """
        Return the value under key as a list of path strings.

        A single string becomes a one-element list; a missing key is empty.
        """
        if key not in self._values:
            return []
        value = self._values[key]
        if isinstance(value, str):
            return [value]
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return list(value)
        raise InvalidAssetsShape(key, value, "a path string or a list of path strings", source=self.source)

    @property
    def template(self) -> str:
        return self.require_str(TEMPLATE_KEY)

    @property
    def body(self) -> str:
        return self.require_str(BODY_KEY)

    def as_context(self) -> Dict[str, Any]:
        """
        Build the rendering context.

        ``BODY`` is pre-rendered HTML, so it is marked safe for autoescaping.
        """
        context = dict(self._values)
        context[BODY_KEY] = Markup(self.body)
        return context

    def snapshot(self, *, body_limit: int = 200) -> Dict[str, Any]:
        """Return a log-friendly copy with a truncated body."""
        snap = dict(self._values)
        body = snap.get(BODY_KEY)
        if isinstance(body, str) and len(body) > body_limit:
            snap[BODY_KEY] = body[:body_limit] + "..."
        return snap
