"""
Front-matter splitting and parsing.

A document may begin with a TOML block terminated by a delimiter line::

    title = "Hello"
    template = "post"
    ***
    <p>Body text.</p>

Documents without a delimiter line are all body.
"""

from __future__ import annotations

import logging
import re
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Pattern, Tuple

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = "***"


@lru_cache(maxsize=8)
def _delimiter_pattern(marker: str) -> Pattern[str]:
    return re.compile(rf"^{re.escape(marker)}\r?\n", re.MULTILINE)


def split_front_matter(text: str, delimiter: str = DEFAULT_DELIMITER) -> Tuple[str, str]:
    """
    Split raw document text into ``(metadata_text, body_text)``.

    The split happens at the first line consisting of the delimiter marker.
    When no such line exists, metadata is empty and the body is the whole text.
    """
    match = _delimiter_pattern(delimiter).search(text)
    if match is None:
        return "", text
    return text[: match.start()], text[match.end():]


def parse_front_matter(text: str, *, source: Optional[Path] = None) -> Dict[str, Any]:
    """
    Parse TOML front matter, returning an empty table if it is malformed.
    """
    if not text.strip():
        return {}
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        logger.warning("Ignoring malformed front matter in %s: %s", source or "<document>", exc)
        return {}
