"""
Template registry: a mutable builder used at startup, frozen before the walk.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from jinja2 import (
    BaseLoader,
    Environment,
    StrictUndefined,
    Template,
    TemplateSyntaxError,
    Undefined,
    select_autoescape,
)
from jinja2 import TemplateNotFound as JinjaTemplateNotFound

from ..config.models import DEFAULT_TEMPLATE_SUFFIXES
from ..errors import TemplateLoadError

logger = logging.getLogger(__name__)


class _RegistryLoader(BaseLoader):
    """Serve template sources from a frozen name -> (source, path) mapping."""

    def __init__(self, entries: Mapping[str, Tuple[str, Path]]) -> None:
        self._entries = entries

    def get_source(self, environment: Environment, template: str):
        try:
            source, path = self._entries[template]
        except KeyError:
            raise JinjaTemplateNotFound(template) from None
        return source, str(path), lambda: True

    def list_templates(self) -> List[str]:
        return sorted(self._entries)


def _make_environment(entries: Mapping[str, Tuple[str, Path]], *, strict_undefined: bool) -> Environment:
    return Environment(
        loader=_RegistryLoader(entries),
        autoescape=select_autoescape(default=True, default_for_string=True),
        undefined=StrictUndefined if strict_undefined else Undefined,
        keep_trailing_newline=True,
    )


def template_name(path: Path) -> Optional[str]:
    """Registry name for a template file: its base name without extension."""
    name = path.stem
    if not name or name.startswith("."):
        return None
    return name


class TemplateRegistry:
    """
    Read-only name -> template lookup shared by every render.

    Instances are produced by ``TemplateRegistryBuilder.build`` and never
    change afterwards.
    """

    def __init__(self, entries: Mapping[str, Tuple[str, Path]], *, strict_undefined: bool = False) -> None:
        self._entries = MappingProxyType(dict(entries))
        self._env = _make_environment(self._entries, strict_undefined=strict_undefined)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> List[str]:
        return sorted(self._entries)

    def source_path(self, name: str) -> Path:
        return self._entries[name][1]

    def get(self, name: str) -> Optional[Template]:
        if name not in self._entries:
            return None
        return self._env.get_template(name)

    def render(self, name: str, context: Mapping[str, Any]) -> str:
        """
        Render a registered template.

        Raises:
            KeyError: If name is not registered.
            jinja2.TemplateError: On rendering failures.
        """
        template = self.get(name)
        if template is None:
            raise KeyError(name)
        return template.render(context)


class TemplateRegistryBuilder:
    """
    Collects template sources in registration order.

    Later registrations replace earlier ones with the same name. Every source
    is compiled as it is registered, so syntax errors surface before any
    document is processed.
    """

    def __init__(
        self,
        *,
        suffixes: Sequence[str] = DEFAULT_TEMPLATE_SUFFIXES,
        depth: Optional[int] = None,
        strict_undefined: bool = False,
    ) -> None:
        self.suffixes = tuple(suffix.lower() for suffix in suffixes)
        self.depth = depth
        self.strict_undefined = strict_undefined
        self._entries: Dict[str, Tuple[str, Path]] = {}
        self._compiler = Environment(autoescape=True)

    def register(self, path: Path) -> List[str]:
        """Register a template file or every template in a directory."""
        if path.is_dir():
            return self.register_directory(path)
        if path.is_file():
            name = self.register_file(path)
            return [name] if name else []
        raise TemplateLoadError(f"Template source not found: {path}", source=path)

    def register_all(self, paths: Iterable[Path]) -> "TemplateRegistryBuilder":
        for path in paths:
            self.register(Path(path))
        return self

    def register_file(self, path: Path) -> Optional[str]:
        name = template_name(path)
        if name is None:
            logger.debug("Skipping template file without a usable name: %s", path)
            return None
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateLoadError(f"Unable to read template {path}: {exc}", source=path) from exc
        self.register_source(name, source, path)
        return name

    def register_source(self, name: str, source: str, path: Path) -> None:
        try:
            self._compiler.compile(source, name=name, filename=str(path))
        except TemplateSyntaxError as exc:
            raise TemplateLoadError(
                f"Invalid template {path} (line {exc.lineno}): {exc.message}",
                source=path,
            ) from exc
        if name in self._entries:
            logger.debug("Template '%s' from %s replaces %s", name, path, self._entries[name][1])
        self._entries[name] = (source, path)

    def register_directory(self, root: Path) -> List[str]:
        registered: List[str] = []
        for path in self._iter_directory(root):
            name = self.register_file(path)
            if name:
                registered.append(name)
        logger.debug("Registered %d template(s) from %s", len(registered), root)
        return registered

    def _iter_directory(self, root: Path) -> Iterable[Path]:
        for current, dirnames, filenames in os.walk(root, followlinks=True):
            current_path = Path(current)
            level = len(current_path.relative_to(root).parts)
            if self.depth is not None and level >= self.depth:
                dirnames[:] = []
            dirnames.sort()
            for filename in sorted(filenames):
                if Path(filename).suffix.lower() in self.suffixes:
                    yield current_path / filename

    def build(self) -> TemplateRegistry:
        """Freeze the collected templates into a shareable registry."""
        return TemplateRegistry(self._entries, strict_undefined=self.strict_undefined)


def load_registry(
    sources: Iterable[Path],
    *,
    suffixes: Sequence[str] = DEFAULT_TEMPLATE_SUFFIXES,
    depth: Optional[int] = None,
    strict_undefined: bool = False,
) -> TemplateRegistry:
    """
    Build a frozen registry from template files and directories.

    Raises:
        TemplateLoadError: If any source is missing, unreadable or invalid.
    """
    builder = TemplateRegistryBuilder(suffixes=suffixes, depth=depth, strict_undefined=strict_undefined)
    builder.register_all(sources)
    registry = builder.build()
    logger.info("Loaded %d template(s)", len(registry))
    return registry
