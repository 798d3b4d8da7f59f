"""
Copy stylesheets, scripts and other assets referenced by a document.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, List

from ..document import Document
from ..errors import AssetOutsideTree, BuildIOError, InvalidMetadataShape
from ..util import copy_path, is_relative_to
from .paths import DocumentPaths

logger = logging.getLogger(__name__)

SINGLE_ASSET_KEYS = ("stylesheet", "script")
ASSETS_KEY = "assets"


@dataclass(frozen=True)
class AssetCopy:
    """A single resolved asset reference."""
    key: str
    reference: str
    source: Path
    destination: Path


def _references(document: Document) -> List[tuple[str, str]]:
    metadata = document.metadata
    refs: List[tuple[str, str]] = []
    for key in SINGLE_ASSET_KEYS:
        value = metadata.optional_str(key)
        if value is not None:
            refs.append((key, value))
    refs.extend((ASSETS_KEY, value) for value in metadata.optional_paths(ASSETS_KEY))
    return refs


def resolve_assets(document: Document, paths: DocumentPaths) -> List[AssetCopy]:
    """
    Resolve every asset reference in the document's metadata.

    References are relative to the document's own directory and land at the
    same input-relative location under the output root. Nothing is copied
    here, so shape problems surface before any file is touched.

    Raises:
        InvalidMetadataShape: If ``stylesheet`` or ``script`` is not a string.
        InvalidAssetsShape: If ``assets`` is not a string or list of strings.
        AssetOutsideTree: If a reference escapes the input root.
    """
    copies: List[AssetCopy] = []
    for key, reference in _references(document):
        if not reference.strip():
            raise InvalidMetadataShape(key, reference, "a non-empty path", source=document.source)
        source = Path(os.path.normpath(paths.source_dir / reference))
        if not is_relative_to(source, paths.input_root) or source == paths.input_root:
            raise AssetOutsideTree(reference, source, source=document.source)
        destination = paths.output_root / source.relative_to(paths.input_root)
        copies.append(AssetCopy(key=key, reference=reference, source=source, destination=destination))
    return copies


def copy_assets(copies: List[AssetCopy], *, protected: AbstractSet[Path] = frozenset()) -> List[Path]:
    """
    Copy resolved assets, recursing into directories.

    Files in protected (rendered documents) are never overwritten by an asset.

    Raises:
        BuildIOError: If a source is missing or a copy fails.
    """
    copied: List[Path] = []
    for item in copies:
        try:
            if not copy_path(item.source, item.destination, protected=protected):
                continue
        except OSError as exc:
            raise BuildIOError(f"copy {item.key}", item.source, exc) from exc
        logger.debug("Copied %s -> %s", item.source, item.destination)
        copied.append(item.destination)
    return copied


def copy_document_assets(document: Document, paths: DocumentPaths) -> List[Path]:
    """Resolve and copy every asset the document references."""
    return copy_assets(resolve_assets(document, paths))
