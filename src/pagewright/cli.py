"""
Command line interface for the pagewright static site generator.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import DEFAULT_CONFIG_FILENAME, ConfigError, ErrorPolicy, SiteConfig, get_settings, load_config
from .errors import BuildIOError, TemplateLoadError
from .render import TemplateRegistry, load_registry
from .site import BuildAborted, BuildReport, build_site

console = Console()
app = typer.Typer(help="Render a tree of front-matter documents through templates into a static site.")
logger = logging.getLogger(__name__)

LOG_LEVELS = ["critical", "error", "warning", "info", "debug"]


def _configure_logging(level_name: str) -> None:
    env_override = get_settings().log_level
    level_str = (env_override or level_name or "info").upper()
    if level_str not in {lvl.upper() for lvl in LOG_LEVELS}:
        level_str = "INFO"
    logging.basicConfig(
        level=getattr(logging, level_str, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.debug("Logging configured at %s", level_str)


def _load_site_config(path: Optional[Path]) -> SiteConfig:
    """
    Pick the config file: --config, then PAGEWRIGHT_CONFIG, then ./pagewright.toml.

    Falls back to built-in defaults when none exists.
    """
    candidate = path or get_settings().config_path
    if candidate is None:
        default = Path.cwd() / DEFAULT_CONFIG_FILENAME
        if not default.is_file():
            logger.debug("No %s found; using defaults", DEFAULT_CONFIG_FILENAME)
            return SiteConfig()
        candidate = default
    try:
        return load_config(candidate)
    except ConfigError as exc:
        console.print(f"[bold red]Configuration error:[/] {exc}")
        raise typer.Exit(code=1) from exc


def _apply_overrides(config: SiteConfig, overrides: Dict[str, Any]) -> SiteConfig:
    update = {key: value for key, value in overrides.items() if value is not None}
    if not update:
        return config
    return config.model_copy(update=update)


def _load_registry_or_exit(config: SiteConfig) -> TemplateRegistry:
    try:
        return load_registry(
            config.templates,
            suffixes=config.template_suffixes,
            depth=config.template_depth,
            strict_undefined=config.strict_undefined,
        )
    except TemplateLoadError as exc:
        console.print(f"[bold red]Template error:[/] {exc}")
        raise typer.Exit(code=1) from exc


def _format_detail(detail: Dict[str, Any]) -> str:
    parts = []
    for key, value in detail.items():
        if key == "context" and isinstance(value, dict):
            value = ", ".join(sorted(value))
            key = "context keys"
        parts.append(f"{key}: {value}")
    return "; ".join(parts)


def _print_build_report(report: BuildReport) -> None:
    table = Table(title="Build Summary")
    table.add_column("Key")
    table.add_column("Value", overflow="fold")
    for key, value in report.summary_rows():
        table.add_row(key, value)
    console.print(table)

    if report.diagnostics:
        problems = Table(title="Skipped Documents")
        problems.add_column("Source", overflow="fold")
        problems.add_column("Condition")
        problems.add_column("Message", overflow="fold")
        problems.add_column("Detail", overflow="fold")
        for diagnostic in report.diagnostics:
            problems.add_row(str(diagnostic.source), diagnostic.kind, diagnostic.message, _format_detail(diagnostic.detail))
        console.print(problems)


@app.callback(invoke_without_command=True)
def _root_command(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show pagewright version and exit.",
        is_flag=True,
    ),
    log_level: str = typer.Option(
        "info",
        "--log-level",
        help="Logging level (critical, error, warning, info, debug).",
        show_default=True,
        case_sensitive=False,
    ),
) -> None:
    """
    Default command when no subcommand is selected.
    """
    _configure_logging(log_level)

    if version:
        console.print(f"[bold green]pagewright[/] {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(
            "[bold yellow]pagewright[/] is ready. Run [cyan]pagewright build[/] "
            "to render ./src into ./docs.",
        )


@app.command()
def build(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Path to a TOML config file (defaults to ./{DEFAULT_CONFIG_FILENAME} when present).",
    ),
    templates: Optional[List[Path]] = typer.Option(
        None,
        "--templates",
        "-t",
        help="Template file or directory; repeat to register several, later ones win.",
    ),
    in_dir: Optional[Path] = typer.Option(
        None,
        "--in-dir",
        "-i",
        help="Source document tree (default: src).",
    ),
    out_dir: Optional[Path] = typer.Option(
        None,
        "--out-dir",
        "-o",
        help="Output tree (default: docs).",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Abort on the first document error instead of skipping it.",
    ),
    keep_going: bool = typer.Option(
        False,
        "--keep-going",
        help="Skip documents with filesystem errors instead of aborting.",
    ),
    strict_undefined: bool = typer.Option(
        False,
        "--strict-undefined",
        help="Fail documents whose templates reference undefined variables.",
    ),
) -> None:
    """
    Render every document in the input tree into the mirrored output tree.
    """
    site_config = _apply_overrides(
        _load_site_config(config),
        {
            "templates": list(templates) if templates else None,
            "in_dir": in_dir,
            "out_dir": out_dir,
            "content_policy": ErrorPolicy.ABORT_ON_ERROR if strict else None,
            "io_policy": ErrorPolicy.SKIP_AND_CONTINUE if keep_going else None,
            "strict_undefined": True if strict_undefined else None,
        },
    )
    registry = _load_registry_or_exit(site_config)

    try:
        report = build_site(site_config, registry)
    except BuildAborted as exc:
        _print_build_report(exc.report)
        console.print(f"[bold red]Build aborted:[/] {exc}")
        raise typer.Exit(code=1) from exc
    except (BuildIOError, ConfigError) as exc:
        console.print(f"[bold red]Build failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    _print_build_report(report)
    if not report.ok:
        console.print(f"[bold yellow]{len(report.diagnostics)} document(s) skipped.[/]")
        raise typer.Exit(code=1)
    console.print("[bold green]Build completed.[/]")


@app.command("templates")
def list_templates(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a TOML config file.",
    ),
    templates: Optional[List[Path]] = typer.Option(
        None,
        "--templates",
        "-t",
        help="Template file or directory; repeat to register several.",
    ),
) -> None:
    """
    Load the template sources and list the registered names.
    """
    site_config = _apply_overrides(
        _load_site_config(config),
        {"templates": list(templates) if templates else None},
    )
    registry = _load_registry_or_exit(site_config)

    table = Table(title="Registered Templates")
    table.add_column("Name")
    table.add_column("Source", overflow="fold")
    for name in registry.names():
        table.add_row(name, str(registry.source_path(name)))
    console.print(table)


def main() -> None:
    """
    Entry-point used by the console script defined in pyproject.toml.
    """
    app()
