from pathlib import Path

import pytest

from pagewright.document import load_text
from pagewright.errors import InvalidMetadataShape, RenderFailure, TemplateNotFound, UnsupportedType
from pagewright.render import load_registry, render_document

from conftest import write


@pytest.fixture
def registry(tmp_path: Path):
    write(tmp_path / "article.html", "<h1>{{ title }}</h1>{{ BODY }}")
    write(tmp_path / "custom.html", "custom:{{ BODY }}")
    write(tmp_path / "nested.html", "{{ author.name.first }}")
    return load_registry([tmp_path])


def test_custom_template_receives_body(registry) -> None:
    document = load_text('template = "custom"\n***\nHello', Path("page.html"))

    assert render_document(document, registry) == "custom:Hello"


def test_body_is_not_escaped_but_metadata_is(registry) -> None:
    document = load_text('title = "<Tom & Jerry>"\n***\n<p>ok</p>', Path("page.html"))

    assert render_document(document, registry) == "<h1>&lt;Tom &amp; Jerry&gt;</h1><p>ok</p>"


def test_unsupported_type(registry) -> None:
    document = load_text('type = "markdown"\n***\n# Hi', Path("page.md"))

    with pytest.raises(UnsupportedType) as exc:
        render_document(document, registry)
    assert exc.value.value == "markdown"


def test_extension_derived_type_is_checked(registry) -> None:
    with pytest.raises(UnsupportedType):
        render_document(load_text("body", Path("style.css")), registry)


def test_non_string_type(registry) -> None:
    document = load_text("type = 5\n***\nbody", Path("page.html"))

    with pytest.raises(InvalidMetadataShape):
        render_document(document, registry)


def test_missing_template(registry) -> None:
    document = load_text('template = "ghost"\n***\nbody', Path("page.html"))

    with pytest.raises(TemplateNotFound) as exc:
        render_document(document, registry)
    assert exc.value.template == "ghost"


def test_render_failure_carries_context(registry) -> None:
    document = load_text('template = "nested"\ntitle = "T"\n***\nbody', Path("page.html"))

    with pytest.raises(RenderFailure) as exc:
        render_document(document, registry)

    assert exc.value.template == "nested"
    assert exc.value.context["title"] == "T"
    assert exc.value.source == Path("page.html")


def test_strict_undefined(tmp_path: Path) -> None:
    write(tmp_path / "article.html", "{{ missing }}")
    document = load_text("body", Path("page.html"))

    assert render_document(document, load_registry([tmp_path])) == ""
    with pytest.raises(RenderFailure):
        render_document(document, load_registry([tmp_path], strict_undefined=True))


def test_filter_misuse_is_a_render_failure(tmp_path: Path) -> None:
    write(tmp_path / "article.html", "{{ tags|dictsort }}")
    document = load_text('tags = "a"\n***\nbody', Path("page.html"))

    with pytest.raises(RenderFailure) as exc:
        render_document(document, load_registry([tmp_path]))

    assert "AttributeError" in exc.value.reason
    assert exc.value.context["tags"] == "a"


def test_self_including_template_is_a_render_failure(tmp_path: Path) -> None:
    write(tmp_path / "article.html", '{% include "article" %}')

    with pytest.raises(RenderFailure):
        render_document(load_text("body", Path("page.html")), load_registry([tmp_path]))
