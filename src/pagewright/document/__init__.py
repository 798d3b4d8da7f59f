"""
Source document loading: front matter, metadata and defaults.
"""

from .frontmatter import DEFAULT_DELIMITER, parse_front_matter, split_front_matter
from .loader import DEFAULT_TEMPLATE, DEFAULT_TYPE, Document, load_document, load_text
from .metadata import BODY_KEY, TEMPLATE_KEY, TYPE_KEY, Metadata, MetaValue

__all__ = [
    "DEFAULT_DELIMITER",
    "DEFAULT_TEMPLATE",
    "DEFAULT_TYPE",
    "BODY_KEY",
    "TEMPLATE_KEY",
    "TYPE_KEY",
    "Document",
    "Metadata",
    "MetaValue",
    "load_document",
    "load_text",
    "parse_front_matter",
    "split_front_matter",
]
