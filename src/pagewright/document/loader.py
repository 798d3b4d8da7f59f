"""
Load a source document into defaulted metadata plus body text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..errors import BuildIOError, NoExtension, UndecodableSource
from .frontmatter import DEFAULT_DELIMITER, parse_front_matter, split_front_matter
from .metadata import BODY_KEY, TEMPLATE_KEY, TYPE_KEY, Metadata

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "article"
DEFAULT_TYPE = "html"


@dataclass(frozen=True)
class Document:
    """
    A loaded source document.

    Attributes:
        source: Path the document was read from.
        metadata: Front matter with ``template``, ``type`` and ``BODY`` guaranteed.
    """
    source: Path
    metadata: Metadata

    @property
    def body(self) -> str:
        return self.metadata.body


def _extension_type(path: Path) -> str:
    suffix = path.suffix
    if not suffix or suffix == ".":
        raise NoExtension(f"Cannot derive a type for {path}: no file extension", source=path)
    return suffix[1:].lower()


def load_text(text: str, source: Path, *, delimiter: str = DEFAULT_DELIMITER, type_from_extension: bool = True) -> Document:
    """
    Build a Document from already-read text.

    Defaults are applied only to missing keys: ``template`` falls back to
    ``article`` and ``type`` to the lowercase file extension (or ``html``
    when ``type_from_extension`` is off). ``BODY`` is always the body text.
    """
    meta_text, body = split_front_matter(text, delimiter)
    values = parse_front_matter(meta_text, source=source)

    values.setdefault(TEMPLATE_KEY, DEFAULT_TEMPLATE)
    if TYPE_KEY not in values:
        values[TYPE_KEY] = _extension_type(source) if type_from_extension else DEFAULT_TYPE
    values[BODY_KEY] = body

    return Document(source=source, metadata=Metadata(values, source=source))


def load_document(path: Path, *, delimiter: str = DEFAULT_DELIMITER, type_from_extension: bool = True) -> Document:
    """
    Read and load a source document from disk.

    Raises:
        BuildIOError: If the file cannot be read.
        UndecodableSource: If the file is not UTF-8.
        NoExtension: If ``type`` is missing and cannot be derived.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise BuildIOError("read", path, exc) from exc
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise UndecodableSource(f"{path} is not valid UTF-8 text: {exc.reason}", source=path) from exc
    logger.debug("Loaded %s (%d bytes)", path, len(raw))
    return load_text(text, path, delimiter=delimiter, type_from_extension=type_from_extension)
