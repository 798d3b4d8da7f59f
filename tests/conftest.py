from pathlib import Path
import textwrap

import pytest
from typer.testing import CliRunner

from pagewright.config import SiteConfig


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")
    return path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def site(tmp_path: Path) -> dict:
    """
    Lay out templates, a source tree and an output location for a small site.
    """
    templates = tmp_path / "templates"
    write(
        templates / "article.html",
        """
        <title>{{ title }}</title>
        <main>{{ BODY }}</main>
        """,
    )
    write(
        templates / "custom.html",
        """
        custom:{{ BODY }}
        """,
    )

    src = tmp_path / "src"
    write(
        src / "index.html",
        """
        title = "Home"
        ***
        <p>Welcome</p>
        """,
    )
    write(
        src / "a" / "b" / "c.html",
        """
        template = "custom"
        ***
        <p>Deep</p>
        """,
    )
    out = tmp_path / "out"
    return {
        "root": tmp_path,
        "templates": templates,
        "src": src,
        "out": out,
        "config": SiteConfig(in_dir=src, out_dir=out, templates=[templates]),
    }
