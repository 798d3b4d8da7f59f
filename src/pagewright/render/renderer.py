"""
Render a loaded document through its template.
"""

from __future__ import annotations

import logging

from jinja2 import TemplateError

from ..document import Document, TYPE_KEY
from ..errors import InvalidMetadataShape, RenderFailure, TemplateNotFound, UnsupportedType
from .templates import TemplateRegistry

logger = logging.getLogger(__name__)

SUPPORTED_TYPE = "html"


def check_type(document: Document) -> None:
    """
    Ensure the document's ``type`` is the supported ``html``.

    Raises:
        InvalidMetadataShape: If ``type`` is not a string.
        UnsupportedType: For any other string value.
    """
    value = document.metadata.get(TYPE_KEY)
    if not isinstance(value, str):
        raise InvalidMetadataShape(TYPE_KEY, value, "a string", source=document.source)
    if value != SUPPORTED_TYPE:
        raise UnsupportedType(value, source=document.source)


def render_document(document: Document, registry: TemplateRegistry) -> str:
    """
    Render document with the template its metadata names.

    Every metadata key, plus ``BODY``, is available to the template.

    Raises:
        UnsupportedType, InvalidMetadataShape, TemplateNotFound, RenderFailure
    """
    check_type(document)
    metadata = document.metadata
    name = metadata.template
    if name not in registry:
        raise TemplateNotFound(name, source=document.source)

    try:
        rendered = registry.render(name, metadata.as_context())
    except TemplateError as exc:
        raise RenderFailure(name, str(exc), metadata.snapshot(), source=document.source) from exc
    except Exception as exc:
        # filters and tests raise plain Python errors on misused values
        reason = f"{type(exc).__name__}: {exc}"
        raise RenderFailure(name, reason, metadata.snapshot(), source=document.source) from exc

    logger.debug("Rendered %s with template '%s'", document.source, name)
    return rendered
