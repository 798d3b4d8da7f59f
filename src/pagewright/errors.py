"""
Exception taxonomy shared by the document pipeline.

Errors fall into three groups:

* startup errors (``TemplateLoadError``, ``ConfigError``) abort before any
  document is processed;
* ``DocumentError`` subclasses describe a problem with one document's content
  and are skipped or fatal depending on the content policy;
* ``BuildIOError`` wraps filesystem failures and follows the I/O policy.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional


class PagewrightError(RuntimeError):
    """Base class for every error raised by pagewright."""


class ConfigError(PagewrightError):
    """Raised when configuration files cannot be loaded or validated."""


class TemplateLoadError(PagewrightError):
    """Raised when a template source cannot be read or compiled."""

    def __init__(self, message: str, *, source: Optional[Path] = None) -> None:
        super().__init__(message)
        self.source = source


class BuildIOError(PagewrightError):
    """A filesystem operation failed while processing a document."""

    def __init__(self, operation: str, path: Path, cause: OSError) -> None:
        super().__init__(f"Unable to {operation} {path}: {cause.strerror or cause}")
        self.operation = operation
        self.path = path
        self.cause = cause


class DocumentError(PagewrightError):
    """
    A recoverable, per-document content problem.

    Attributes:
        source: Path of the offending source document, when known.
    """

    def __init__(self, message: str, *, source: Optional[Path] = None) -> None:
        super().__init__(message)
        self.source = source

    @property
    def detail(self) -> Dict[str, Any]:
        return {}


class NoExtension(DocumentError):
    """The document has no ``type`` key and no file extension to derive it from."""


class UndecodableSource(DocumentError):
    """The document is not valid UTF-8 text."""


class InvalidMetadataShape(DocumentError):
    """A metadata value does not have the shape its key requires."""

    def __init__(self, key: str, value: Any, expected: str, *, source: Optional[Path] = None) -> None:
        super().__init__(
            f"Metadata key '{key}' must be {expected}, got {type(value).__name__}",
            source=source,
        )
        self.key = key
        self.value = value
        self.expected = expected

    @property
    def detail(self) -> Dict[str, Any]:
        return {"key": self.key, "value": repr(self.value)}


class InvalidAssetsShape(InvalidMetadataShape):
    """``assets`` is neither a path string nor a list of path strings."""


class UnsupportedType(DocumentError):
    """The document declares a content type other than ``html``."""

    def __init__(self, value: str, *, source: Optional[Path] = None) -> None:
        super().__init__(f"Unsupported document type '{value}'", source=source)
        self.value = value

    @property
    def detail(self) -> Dict[str, Any]:
        return {"key": "type", "value": self.value}


class TemplateNotFound(DocumentError):
    """The template named by the document is not registered."""

    def __init__(self, template: str, *, source: Optional[Path] = None) -> None:
        super().__init__(f"Template '{template}' is not registered", source=source)
        self.template = template

    @property
    def detail(self) -> Dict[str, Any]:
        return {"key": "template", "value": self.template}


class RenderFailure(DocumentError):
    """The template engine raised while rendering a document."""

    def __init__(
        self,
        template: str,
        reason: str,
        context: Dict[str, Any],
        *,
        source: Optional[Path] = None,
    ) -> None:
        super().__init__(f"Rendering template '{template}' failed: {reason}", source=source)
        self.template = template
        self.reason = reason
        self.context = context

    @property
    def detail(self) -> Dict[str, Any]:
        return {"template": self.template, "context": self.context}


class AssetOutsideTree(DocumentError):
    """An asset reference resolves outside the input root."""

    def __init__(self, reference: str, resolved: Path, *, source: Optional[Path] = None) -> None:
        super().__init__(
            f"Asset '{reference}' resolves to {resolved}, outside the input directory",
            source=source,
        )
        self.reference = reference
        self.resolved = resolved

    @property
    def detail(self) -> Dict[str, Any]:
        return {"reference": self.reference, "resolved": str(self.resolved)}
