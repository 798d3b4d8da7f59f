"""
Walk the input tree, mirror directories and render every document.
"""

from __future__ import annotations

import errno
import fnmatch
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Sequence, Set

from ..config import ErrorPolicy, SiteConfig
from ..document import load_document
from ..errors import BuildIOError, ConfigError, DocumentError, PagewrightError, RenderFailure
from ..render import TemplateRegistry, render_document
from ..util import build_lock, ensure_directory, is_relative_to, write_text_file
from .assets import copy_assets, resolve_assets
from .paths import DocumentPaths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """
    One failed document or directory.

    Attributes:
        source: Input-relative path of the failing entry.
        kind: Error class name (e.g. ``UnsupportedType``).
        message: Human readable description.
        detail: Implicated key/value, template name or render context.
    """
    source: Path
    kind: str
    message: str
    detail: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_error(cls, source: Path, exc: PagewrightError) -> "Diagnostic":
        detail: Dict[str, Any] = exc.detail if isinstance(exc, DocumentError) else {}
        if isinstance(exc, BuildIOError):
            detail = {"operation": exc.operation, "path": str(exc.path)}
        return cls(source=source, kind=type(exc).__name__, message=str(exc), detail=detail)


@dataclass
class BuildReport:
    """
    What a build did.

    Attributes:
        input_root: The walked source tree.
        output_root: The mirrored output tree.
        directories_created: Output directories that did not exist before.
        rendered: Output files written.
        assets_copied: Asset files or directories copied.
        excluded: Input-relative paths skipped by ``exclude`` patterns.
        diagnostics: Documents (or directories) that failed.
    """
    input_root: Path
    output_root: Path
    directories_created: List[Path] = field(default_factory=list)
    rendered: List[Path] = field(default_factory=list)
    assets_copied: List[Path] = field(default_factory=list)
    excluded: List[Path] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def summary_rows(self) -> Iterable[tuple[str, str]]:
        yield ("Input", str(self.input_root))
        yield ("Output", str(self.output_root))
        yield ("Directories created", str(len(self.directories_created)))
        yield ("Documents rendered", str(len(self.rendered)))
        yield ("Assets copied", str(len(self.assets_copied)))
        yield ("Excluded", str(len(self.excluded)))
        yield ("Skipped", str(len(self.diagnostics)))


class BuildAborted(PagewrightError):
    """Raised when a failure occurs under the abort policy."""

    def __init__(self, report: BuildReport, diagnostic: Diagnostic) -> None:
        super().__init__(f"Build aborted at {diagnostic.source}: {diagnostic.message}")
        self.report = report
        self.diagnostic = diagnostic


def _is_excluded(relative: Path, patterns: Sequence[str]) -> bool:
    posix = relative.as_posix()
    return any(fnmatch.fnmatch(posix, pattern) for pattern in patterns)


class SiteBuilder:
    """
    Single-threaded walker over the input tree.

    Directories are mirrored before any of their files are processed, and a
    document's output file is written only after it renders in full.
    """

    def __init__(self, config: SiteConfig, registry: TemplateRegistry) -> None:
        self.config = config
        self.registry = registry
        self.input_root = config.in_dir.expanduser().resolve()
        self.output_root = config.out_dir.expanduser().resolve()
        self.report = BuildReport(input_root=self.input_root, output_root=self.output_root)
        self._written: Set[Path] = set()

    def _fail(self, relative: Path, exc: PagewrightError, policy: ErrorPolicy) -> None:
        diagnostic = Diagnostic.from_error(relative, exc)
        self.report.diagnostics.append(diagnostic)
        aborting = policy is ErrorPolicy.ABORT_ON_ERROR
        logger.error("%s %s: %s", "Aborting at" if aborting else "Skipping", relative, exc)
        if isinstance(exc, RenderFailure):
            logger.error("Render context for %s (template '%s'): %r", relative, exc.template, exc.context)
        if aborting:
            raise BuildAborted(self.report, diagnostic) from exc

    def _mirror_directory(self, relative: Path) -> bool:
        target = self.output_root / relative
        try:
            created = ensure_directory(target)
        except OSError as exc:
            self._fail(relative, BuildIOError("create directory", target, exc), self.config.io_policy)
            return False
        if created:
            self.report.directories_created.append(target)
        return True

    def process_file(self, paths: DocumentPaths) -> None:
        """
        Load, render, write and copy assets for a single document.

        Raises:
            DocumentError: For content problems.
            BuildIOError: For filesystem problems.
        """
        document = load_document(
            paths.source,
            delimiter=self.config.delimiter,
            type_from_extension=self.config.type_from_extension,
        )
        rendered = render_document(document, self.registry)
        copies = resolve_assets(document, paths)
        try:
            write_text_file(paths.destination, rendered)
        except OSError as exc:
            raise BuildIOError("write", paths.destination, exc) from exc
        self.report.rendered.append(paths.destination)
        self._written.add(paths.destination)
        self.report.assets_copied.extend(copy_assets(copies, protected=self._written))

    def _prune(
        self,
        current: Path,
        relative: Path,
        dirnames: List[str],
        chains: Dict[Path, FrozenSet[str]],
    ) -> None:
        """
        Drop excluded children, the output root and symbolic link cycles.

        A child is a cycle only when its real path is one of its own ancestors;
        other links to an already-walked directory are mirrored again.
        """
        chain = chains.pop(current)
        kept = []
        for name in sorted(dirnames):
            child = current / name
            real = os.path.realpath(child)
            if real == str(self.output_root):
                logger.debug("Not descending into output directory %s", child)
                continue
            if _is_excluded(relative / name, self.config.exclude):
                self.report.excluded.append(relative / name)
                continue
            if real in chain:
                logger.warning("Skipping %s: symbolic link cycle back to %s", child, real)
                continue
            chains[child] = chain | {real}
            kept.append(name)
        dirnames[:] = kept

    def _drain_walk_errors(self, errors: List[OSError]) -> None:
        while errors:
            exc = errors.pop(0)
            failed = Path(exc.filename) if exc.filename else self.input_root
            relative = failed.relative_to(self.input_root) if is_relative_to(failed, self.input_root) else failed
            self._fail(relative, BuildIOError("list", failed, exc), self.config.io_policy)

    def build(self) -> BuildReport:
        if not self.input_root.is_dir():
            raise BuildIOError(
                "walk",
                self.input_root,
                FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(self.input_root)),
            )
        if self.input_root == self.output_root:
            raise ConfigError(f"Input and output directories must differ: {self.input_root}")

        walk_errors: List[OSError] = []
        chains: Dict[Path, FrozenSet[str]] = {self.input_root: frozenset({os.path.realpath(self.input_root)})}
        with build_lock(self.output_root):
            logger.info("Building %s -> %s", self.input_root, self.output_root)
            for current, dirnames, filenames in os.walk(self.input_root, followlinks=True, onerror=walk_errors.append):
                self._drain_walk_errors(walk_errors)

                current_path = Path(current)
                relative_dir = current_path.relative_to(self.input_root)
                self._prune(current_path, relative_dir, dirnames, chains)
                if not self._mirror_directory(relative_dir):
                    dirnames[:] = []
                    continue

                for filename in sorted(filenames):
                    relative = relative_dir / filename
                    if _is_excluded(relative, self.config.exclude):
                        self.report.excluded.append(relative)
                        continue
                    paths = DocumentPaths(relative, self.input_root, self.output_root)
                    try:
                        self.process_file(paths)
                    except DocumentError as exc:
                        self._fail(relative, exc, self.config.content_policy)
                    except BuildIOError as exc:
                        self._fail(relative, exc, self.config.io_policy)

            self._drain_walk_errors(walk_errors)

        logger.info(
            "Rendered %d document(s), copied %d asset(s), skipped %d",
            len(self.report.rendered),
            len(self.report.assets_copied),
            len(self.report.diagnostics),
        )
        return self.report


def build_site(config: SiteConfig, registry: TemplateRegistry) -> BuildReport:
    """
    Render every document under ``config.in_dir`` into ``config.out_dir``.

    Args:
        config: Build configuration (roots, policies, exclusions).
        registry: Frozen template registry.

    Returns:
        A BuildReport; ``report.ok`` is False if any document was skipped.

    Raises:
        BuildAborted: If a failure occurs under an abort policy.
        BuildIOError: If the input directory does not exist.
        ConfigError: If the input and output directories are the same.
    """
    return SiteBuilder(config, registry).build()
